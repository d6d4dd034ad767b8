"""
API Router v1

Combines all route modules.
"""

from fastapi import APIRouter

from ridegroups.api.v1.routes import activities, auth, groups, strava, users

api_router = APIRouter()

api_router.include_router(auth.router, prefix="/auth", tags=["Auth"])
api_router.include_router(users.router, tags=["Users"])
api_router.include_router(groups.router, prefix="/groups", tags=["Groups"])
api_router.include_router(activities.router, tags=["Activities"])
api_router.include_router(strava.router, prefix="/strava", tags=["Strava"])
