"""
Google OAuth flow.

Standard authorization-code exchange with the profile and email scopes.
Only the resulting profile (id, emails, display name, photos) is used by
account linking.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional
from urllib.parse import urlencode

import httpx

from ridegroups.config import settings
from ridegroups.exceptions import UpstreamAuthError, ProviderUnavailableError

logger = logging.getLogger(__name__)

PROVIDER = "google"


@dataclass
class GoogleProfile:
    """Verified Google profile."""

    id: str
    emails: list[str] = field(default_factory=list)
    display_name: str = ""
    photos: list[str] = field(default_factory=list)
    username: Optional[str] = None

    @property
    def primary_email(self) -> Optional[str]:
        return self.emails[0] if self.emails else None

    @property
    def photo(self) -> Optional[str]:
        return self.photos[0] if self.photos else None

    @classmethod
    def from_userinfo(cls, data: dict) -> "GoogleProfile":
        """Build from the OpenID Connect userinfo response."""
        email = data.get("email")
        picture = data.get("picture")
        return cls(
            id=str(data["sub"]),
            emails=[email] if email else [],
            display_name=data.get("name") or "",
            photos=[picture] if picture else [],
        )


class GoogleOAuth:
    """
    Google OAuth handler.

    Usage:
        oauth = GoogleOAuth()
        url = oauth.build_authorization_url(state)
        tokens = await oauth.exchange_code(code)
        profile = await oauth.get_profile(tokens["access_token"])
    """

    AUTHORIZE_URL = "https://accounts.google.com/o/oauth2/v2/auth"
    TOKEN_URL = "https://oauth2.googleapis.com/token"
    USERINFO_URL = "https://openidconnect.googleapis.com/v1/userinfo"
    SCOPE = "openid email profile"

    def __init__(self, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.client_id = settings.google_client_id
        self.client_secret = settings.google_client_secret
        self.redirect_uri = settings.google_callback_url
        self._transport = transport

    @property
    def configured(self) -> bool:
        return bool(self.client_id and self.client_secret)

    def build_authorization_url(self, state: str) -> str:
        params = {
            "client_id": self.client_id or "",
            "redirect_uri": self.redirect_uri,
            "response_type": "code",
            "scope": self.SCOPE,
            "state": state,
        }
        return f"{self.AUTHORIZE_URL}?{urlencode(params)}"

    async def exchange_code(self, code: str) -> dict:
        """
        Exchange authorization code for tokens.

        Raises:
            UpstreamAuthError: If Google rejects the code
        """
        return await self._request(
            "POST",
            self.TOKEN_URL,
            data={
                "client_id": self.client_id,
                "client_secret": self.client_secret,
                "code": code,
                "grant_type": "authorization_code",
                "redirect_uri": self.redirect_uri,
            },
        )

    async def get_profile(self, access_token: str) -> GoogleProfile:
        """Fetch the signed-in user's profile."""
        data = await self._request(
            "GET",
            self.USERINFO_URL,
            headers={"Authorization": f"Bearer {access_token}"},
        )
        return GoogleProfile.from_userinfo(data)

    async def _request(self, method: str, url: str, **kwargs) -> dict:
        try:
            async with httpx.AsyncClient(
                timeout=settings.provider_timeout_seconds,
                transport=self._transport,
            ) as client:
                response = await client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            logger.error(f"Google {method} {url} failed: {e!r}")
            raise ProviderUnavailableError("Google is unreachable", PROVIDER) from e

        if not response.is_success:
            logger.error(
                f"Google {method} {url} rejected: "
                f"{response.status_code} {response.reason_phrase}"
            )
            raise UpstreamAuthError(
                f"Google request failed: {response.reason_phrase}",
                PROVIDER,
                status_code=response.status_code,
                status_text=response.reason_phrase,
            )
        return response.json()
