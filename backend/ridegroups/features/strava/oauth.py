"""
Strava OAuth flow.

Handles:
- Authorization URL generation
- Code exchange for tokens
- Token refresh
"""

import logging
from dataclasses import dataclass
from typing import Optional
from urllib.parse import urlencode

import httpx

from ridegroups.config import settings
from ridegroups.exceptions import UpstreamAuthError, ProviderUnavailableError

logger = logging.getLogger(__name__)

PROVIDER = "strava"


@dataclass
class StravaTokens:
    """Token endpoint response."""

    access_token: str
    refresh_token: str
    expires_at: int

    @classmethod
    def from_api_response(cls, data: dict) -> "StravaTokens":
        return cls(
            access_token=data["access_token"],
            refresh_token=data["refresh_token"],
            expires_at=int(data["expires_at"]),
        )


class StravaOAuth:
    """
    Strava OAuth handler.

    Usage:
        oauth = StravaOAuth()
        auth_url = oauth.build_authorization_url()
        tokens = await oauth.exchange_code(code)
        tokens = await oauth.refresh_token(tokens.refresh_token)
    """

    AUTHORIZE_URL = "https://www.strava.com/oauth/authorize"
    TOKEN_URL = "https://www.strava.com/oauth/token"
    SCOPE = "read,activity:read_all"

    def __init__(self, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.client_id = settings.strava_client_id
        self.client_secret = settings.strava_client_secret
        self.redirect_uri = settings.strava_callback_url
        self._transport = transport

    def build_authorization_url(self) -> str:
        """
        Generate Strava OAuth authorization URL.

        Scopes:
        - read - public profile
        - activity:read_all - all activities, including private ones

        Returns:
            Authorization URL string
        """
        params = {
            "client_id": self.client_id or "",
            "redirect_uri": self.redirect_uri,
            "response_type": "code",
            "scope": self.SCOPE,
            "approval_prompt": "auto",  # "force" to always show consent
        }
        return f"{self.AUTHORIZE_URL}?{urlencode(params)}"

    async def exchange_code(self, code: str) -> StravaTokens:
        """
        Exchange authorization code for tokens.

        Args:
            code: Authorization code from Strava callback

        Raises:
            UpstreamAuthError: If Strava rejects the code
            ProviderUnavailableError: On network failure or timeout
        """
        data = await self._token_request({
            "code": code,
            "grant_type": "authorization_code",
        })
        return StravaTokens.from_api_response(data)

    async def refresh_token(self, refresh_token: str) -> StravaTokens:
        """
        Refresh an expired access token.

        Raises:
            UpstreamAuthError: If Strava rejects the refresh token
            ProviderUnavailableError: On network failure or timeout
        """
        data = await self._token_request({
            "refresh_token": refresh_token,
            "grant_type": "refresh_token",
        })
        return StravaTokens.from_api_response(data)

    async def _token_request(self, payload: dict) -> dict:
        grant_type = payload["grant_type"]
        try:
            async with httpx.AsyncClient(
                timeout=settings.provider_timeout_seconds,
                transport=self._transport,
            ) as client:
                response = await client.post(
                    self.TOKEN_URL,
                    data={
                        "client_id": self.client_id,
                        "client_secret": self.client_secret,
                        **payload,
                    },
                )
        except httpx.HTTPError as e:
            logger.error(f"Strava token request ({grant_type}) failed: {e!r}")
            raise ProviderUnavailableError("Strava is unreachable", PROVIDER) from e

        if not response.is_success:
            logger.error(
                f"Strava token request ({grant_type}) rejected: "
                f"{response.status_code} {response.reason_phrase}"
            )
            raise UpstreamAuthError(
                f"Strava token request failed: {response.reason_phrase}",
                PROVIDER,
                status_code=response.status_code,
                status_text=response.reason_phrase,
            )

        return response.json()
