"""
Strava API client.

Provides methods for interacting with Strava API.
One attempt per call: no retries, no automatic token refresh.
Callers decide whether to surface a failure or ask the user to reconnect.
"""

import logging
from dataclasses import dataclass
from typing import Optional

import httpx

from ridegroups.config import settings
from ridegroups.exceptions import UpstreamAuthError, ProviderUnavailableError
from .oauth import StravaOAuth, StravaTokens, PROVIDER

logger = logging.getLogger(__name__)


@dataclass
class StravaAthlete:
    """Authenticated athlete profile (GET /athlete)."""

    id: int
    username: Optional[str] = None
    firstname: str = ""
    lastname: str = ""
    profile: Optional[str] = None  # avatar URL
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    email: Optional[str] = None  # Strava rarely discloses it

    @classmethod
    def from_api_response(cls, data: dict) -> "StravaAthlete":
        return cls(
            id=int(data["id"]),
            username=data.get("username") or None,
            firstname=data.get("firstname") or "",
            lastname=data.get("lastname") or "",
            profile=data.get("profile") or None,
            city=data.get("city"),
            state=data.get("state"),
            country=data.get("country"),
            email=data.get("email") or None,
        )

    @property
    def full_name(self) -> str:
        return f"{self.firstname} {self.lastname}".strip()


class StravaClient:
    """
    Async client for Strava API.

    Usage:
        client = StravaClient()
        auth_url = client.build_authorization_url()
        tokens = await client.exchange_code(code)
        athlete = await client.get_athlete(tokens.access_token)
        activities = await client.get_activities(tokens.access_token)
    """

    API_URL = "https://www.strava.com/api/v3"

    def __init__(self, transport: Optional[httpx.AsyncBaseTransport] = None):
        self._transport = transport
        self._oauth = StravaOAuth(transport=transport)

    # -------------------------------------------------------------------------
    # OAuth Flow (delegated to StravaOAuth)
    # -------------------------------------------------------------------------

    def build_authorization_url(self) -> str:
        """Generate Strava OAuth authorization URL."""
        return self._oauth.build_authorization_url()

    async def exchange_code(self, code: str) -> StravaTokens:
        """Exchange authorization code for tokens."""
        return await self._oauth.exchange_code(code)

    async def refresh_token(self, refresh_token: str) -> StravaTokens:
        """Refresh an expired access token."""
        return await self._oauth.refresh_token(refresh_token)

    # -------------------------------------------------------------------------
    # API Calls
    # -------------------------------------------------------------------------

    async def _api_request(
        self,
        method: str,
        endpoint: str,
        access_token: str,
        params: Optional[dict] = None
    ):
        """
        Make an authenticated API request.

        Raises:
            UpstreamAuthError: If Strava answers with a non-2xx status
            ProviderUnavailableError: On network failure or timeout
        """
        try:
            async with httpx.AsyncClient(
                timeout=settings.provider_timeout_seconds,
                transport=self._transport,
            ) as client:
                response = await client.request(
                    method=method,
                    url=f"{self.API_URL}{endpoint}",
                    headers={"Authorization": f"Bearer {access_token}"},
                    params=params
                )
        except httpx.HTTPError as e:
            logger.error(f"Strava {method} {endpoint} failed: {e!r}")
            raise ProviderUnavailableError("Strava is unreachable", PROVIDER) from e

        if "X-RateLimit-Limit" in response.headers:
            logger.debug(
                f"Strava rate limit: {response.headers.get('X-RateLimit-Usage')} "
                f"/ {response.headers.get('X-RateLimit-Limit')}"
            )

        if not response.is_success:
            logger.error(
                f"Strava {method} {endpoint} rejected: "
                f"{response.status_code} {response.reason_phrase}"
            )
            raise UpstreamAuthError(
                f"Strava request failed: {response.reason_phrase}",
                PROVIDER,
                status_code=response.status_code,
                status_text=response.reason_phrase,
            )

        return response.json()

    async def get_athlete(self, access_token: str) -> StravaAthlete:
        """Get authenticated athlete profile."""
        data = await self._api_request("GET", "/athlete", access_token)
        return StravaAthlete.from_api_response(data)

    async def get_activities(
        self,
        access_token: str,
        page: int = 1,
        per_page: int = 30
    ) -> list[dict]:
        """
        Get one page of the athlete's activities.

        Args:
            access_token: Valid access token
            page: Page number (1-based)
            per_page: Results per page (max 200)

        Returns:
            Raw activity summaries in Strava's order (newest first)
        """
        return await self._api_request(
            "GET",
            "/athlete/activities",
            access_token,
            params={"page": page, "per_page": per_page}
        )

    async def get_activity(self, access_token: str, activity_id: int) -> dict:
        """Get a single activity by id."""
        return await self._api_request(
            "GET",
            f"/activities/{activity_id}",
            access_token
        )
