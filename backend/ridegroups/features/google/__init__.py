"""
Google sign-in.

- GoogleOAuth: authorization URL, code exchange, profile fetch
- GoogleProfile: the verified profile consumed by account linking
"""

from .oauth import GoogleOAuth, GoogleProfile

__all__ = ["GoogleOAuth", "GoogleProfile"]
