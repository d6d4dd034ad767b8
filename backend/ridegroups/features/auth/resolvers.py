"""
Identity resolvers.

One resolver per provider, each answering "which User does this identity
belong to?" and creating the User when there is none. Every call either
mutates exactly one existing User or creates exactly one new User.

Lookup keys differ by provider:
- local, google: email address
- strava: athlete id (Strava rarely discloses an email)

Usage:
    resolver = get_resolver(AuthProvider.GOOGLE, db)
    result = await resolver.resolve(profile)
    if result.created:
        ...
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ridegroups.exceptions import DuplicateAccountError, MissingEmailError
from ridegroups.features.google.oauth import GoogleProfile
from ridegroups.features.strava.client import StravaAthlete
from ridegroups.features.strava.oauth import StravaTokens
from ridegroups.features.users.models import AuthProvider, User
from ridegroups.features.users.repository import UserRepository
from ridegroups.features.users.schemas import LoginRequest, SignupRequest

logger = logging.getLogger(__name__)

STRAVA_EMAIL_DOMAIN = "strava.local"


class LinkOutcome(str, Enum):
    MERGED_EXISTING = "merged_existing"
    CREATED_NEW = "created_new"


@dataclass
class LinkResult:
    user: User
    outcome: LinkOutcome

    @property
    def created(self) -> bool:
        return self.outcome == LinkOutcome.CREATED_NEW


@dataclass
class StravaIdentity:
    """Strava callback payload: tokens plus the athlete they belong to."""

    tokens: StravaTokens
    athlete: StravaAthlete
    current_user: Optional[User] = None


def email_local_part(email: str) -> str:
    return email.split("@", 1)[0]


class IdentityResolver(ABC):
    """Resolve-or-create a User for one provider's identity."""

    provider: AuthProvider

    def __init__(self, db: AsyncSession):
        self.db = db
        self.users = UserRepository(db)

    @abstractmethod
    async def resolve(self, identity: Any) -> LinkResult:
        """Find or create the User owning identity."""

    def _log(self, result: LinkResult) -> LinkResult:
        logger.info(
            f"{self.provider.value} identity resolved: "
            f"user {result.user.id} ({result.outcome.value})"
        )
        return result


# =============================================================================
# Local
# =============================================================================

class LocalLoginResolver(IdentityResolver):
    """
    Email login.

    The password is accepted but not verified; an unknown email creates a
    new local account.
    """

    provider = AuthProvider.LOCAL

    async def resolve(self, identity: LoginRequest) -> LinkResult:
        user = await self.users.get_by_email(identity.email)
        if user:
            return self._log(LinkResult(user, LinkOutcome.MERGED_EXISTING))

        local_part = email_local_part(identity.email)
        user = await self.users.create(
            username=await self.users.unique_username(local_part),
            email=identity.email,
            name=local_part or identity.email,
            provider=self.provider.value,
        )
        return self._log(LinkResult(user, LinkOutcome.CREATED_NEW))


class LocalSignupResolver(IdentityResolver):
    provider = AuthProvider.LOCAL

    async def resolve(self, identity: SignupRequest) -> LinkResult:
        if (
            await self.users.get_by_email(identity.email)
            or await self.users.get_by_username(identity.username)
        ):
            raise DuplicateAccountError()

        try:
            user = await self.users.create(
                username=identity.username,
                email=identity.email,
                name=identity.name,
                provider=self.provider.value,
            )
        except IntegrityError as e:
            await self.db.rollback()
            logger.warning(f"Signup lost a uniqueness race: {e.orig!r}")
            raise DuplicateAccountError() from e

        return self._log(LinkResult(user, LinkOutcome.CREATED_NEW))


class DemoResolver(IdentityResolver):
    """Fixed demo account, created on first use."""

    provider = AuthProvider.LOCAL

    USERNAME = "demo_user"
    EMAIL = "demo@example.com"
    NAME = "Demo User"

    async def resolve(self, identity: Any = None) -> LinkResult:
        user = await self.users.get_by_email(self.EMAIL)
        if user:
            return self._log(LinkResult(user, LinkOutcome.MERGED_EXISTING))

        user = await self.users.create(
            username=await self.users.unique_username(self.USERNAME),
            email=self.EMAIL,
            name=self.NAME,
            provider=self.provider.value,
        )
        return self._log(LinkResult(user, LinkOutcome.CREATED_NEW))


# =============================================================================
# Google (keyed by email)
# =============================================================================

class GoogleResolver(IdentityResolver):
    provider = AuthProvider.GOOGLE

    async def resolve(self, identity: GoogleProfile) -> LinkResult:
        email = identity.primary_email
        if not email:
            raise MissingEmailError("Google profile has no email address")

        user = await self.users.get_by_email(email)
        if user:
            updates = {"provider": self.provider.value, "google_id": identity.id}
            # Existing profile data wins
            if not user.avatar and identity.photo:
                updates["avatar"] = identity.photo
            if not user.name and identity.display_name:
                updates["name"] = identity.display_name
            user = await self.users.update(user, **updates)
            return self._log(LinkResult(user, LinkOutcome.MERGED_EXISTING))

        local_part = email_local_part(email)
        user = await self.users.create(
            username=await self.users.unique_username(identity.username or local_part),
            email=email,
            name=identity.display_name or local_part,
            avatar=identity.photo,
            provider=self.provider.value,
            google_id=identity.id,
        )
        return self._log(LinkResult(user, LinkOutcome.CREATED_NEW))


# =============================================================================
# Strava (keyed by athlete id)
# =============================================================================

class StravaResolver(IdentityResolver):
    """
    Strava linking.

    Never looks users up by email. An unseen athlete either attaches to the
    signed-in user or becomes a new account with a synthesized email.
    """

    provider = AuthProvider.STRAVA

    async def resolve(self, identity: StravaIdentity) -> LinkResult:
        athlete = identity.athlete
        tokens = self._token_fields(identity.tokens)

        user = await self.users.get_by_strava_id(athlete.id)
        if user:
            updates = {"provider": self.provider.value, **tokens}
            if not user.avatar and athlete.profile:
                updates["avatar"] = athlete.profile
            user = await self.users.update(user, **updates)
            return self._log(LinkResult(user, LinkOutcome.MERGED_EXISTING))

        if identity.current_user is not None:
            current = identity.current_user
            if current.strava_id is not None and current.strava_id != athlete.id:
                logger.warning(
                    f"User {current.id} switches Strava athlete "
                    f"{current.strava_id} -> {athlete.id}, previous tokens replaced"
                )
            updates = {"strava_id": athlete.id, **tokens}
            if not current.avatar and athlete.profile:
                updates["avatar"] = athlete.profile
            user = await self.users.update(current, **updates)
            logger.info(f"Strava athlete {athlete.id} attached to user {user.id}")
            return self._log(LinkResult(user, LinkOutcome.MERGED_EXISTING))

        base = athlete.username or f"athlete{athlete.id}"
        user = await self.users.create(
            username=await self.users.unique_username(base),
            email=await self._pick_email(athlete, base),
            name=athlete.full_name or base,
            avatar=athlete.profile,
            provider=self.provider.value,
            strava_id=athlete.id,
            **tokens,
        )
        return self._log(LinkResult(user, LinkOutcome.CREATED_NEW))

    async def _pick_email(self, athlete: StravaAthlete, base: str) -> str:
        """
        First free address among the athlete's own email, {base}@strava.local,
        {base}+{id}@strava.local, then {base}+{id}.2@strava.local and so on.
        """
        if athlete.email and not await self.users.get_by_email(athlete.email):
            return athlete.email

        email = f"{base}@{STRAVA_EMAIL_DOMAIN}"
        suffix = 1
        while await self.users.get_by_email(email):
            local = f"{base}+{athlete.id}" if suffix == 1 else f"{base}+{athlete.id}.{suffix}"
            email = f"{local}@{STRAVA_EMAIL_DOMAIN}"
            suffix += 1
        return email

    @staticmethod
    def _token_fields(tokens: StravaTokens) -> dict:
        return {
            "strava_access_token": tokens.access_token,
            "strava_refresh_token": tokens.refresh_token,
            "strava_token_expiry": tokens.expires_at,
        }


# =============================================================================
# Registry
# =============================================================================

RESOLVERS: dict[str, type[IdentityResolver]] = {
    "local_login": LocalLoginResolver,
    "local_signup": LocalSignupResolver,
    "demo": DemoResolver,
    AuthProvider.GOOGLE.value: GoogleResolver,
    AuthProvider.STRAVA.value: StravaResolver,
}


def get_resolver(kind: str, db: AsyncSession) -> IdentityResolver:
    """
    Get resolver for a provider or local flow.

    Raises:
        KeyError: If kind is not registered
    """
    return RESOLVERS[kind](db)
