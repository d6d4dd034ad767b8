"""
Shared utilities.

- repository: BaseRepository with async CRUD helpers
- units: metric conversions and timestamp helpers
"""
