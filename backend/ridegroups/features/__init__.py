"""Feature modules: users, auth, groups, activities, strava, google."""
