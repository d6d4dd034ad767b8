"""
Account linking across local, Google and Strava identities.

Usage:
    from ridegroups.features.auth import IdentityLinkingService
"""

from .resolvers import (
    IdentityResolver,
    LinkOutcome,
    LinkResult,
    StravaIdentity,
    get_resolver,
)
from .service import IdentityLinkingService, LinkedSession

__all__ = [
    "IdentityResolver",
    "LinkOutcome",
    "LinkResult",
    "StravaIdentity",
    "get_resolver",
    "IdentityLinkingService",
    "LinkedSession",
]
