"""
Shared fixtures.

- db: AsyncSession on a fresh in-memory SQLite database
- fake_strava / fake_google: provider APIs served by httpx.MockTransport
- client: httpx.AsyncClient bound to the app with the above injected
"""

from urllib.parse import parse_qs

import httpx
import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from ridegroups.api.deps import get_google_oauth, get_strava_client
from ridegroups.db.session import get_async_db
from ridegroups.features.google import GoogleOAuth
from ridegroups.features.strava import StravaClient
from ridegroups.models import register_models


# =============================================================================
# Database
# =============================================================================

@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    metadata = register_models()
    async with engine.begin() as conn:
        await conn.run_sync(metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


# =============================================================================
# Provider fakes
# =============================================================================

STRAVA_ATHLETE = {
    "id": 12345,
    "username": "ada",
    "firstname": "Ada",
    "lastname": "Lovelace",
    "profile": "https://strava.example/ada.jpg",
    "city": "London",
    "state": None,
    "country": "UK",
}


def strava_ride(name="Morning Ride", type_="Ride", **overrides) -> dict:
    data = {
        "id": 1,
        "name": name,
        "type": type_,
        "distance": 20500.4,
        "moving_time": 3600,
        "total_elevation_gain": 150.5,
        "average_speed": 5.0,
        "max_speed": 12.25,
        "start_date": "2024-05-01T07:30:00Z",
    }
    data.update(overrides)
    return data


class FakeStrava:
    """Strava OAuth + API. Set `fail_status` to make every call fail."""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.athlete = dict(STRAVA_ATHLETE)
        self.activities: list[dict] = [
            strava_ride(id=1),
            strava_ride(id=2, name="Evening Run", type_="Run"),
            strava_ride(id=3, name="Commute", average_speed=6.25),
        ]
        self.access_token = "strava-access"
        self.fail_status: int | None = None

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.fail_status is not None:
            return httpx.Response(self.fail_status)

        path = request.url.path
        if path == "/oauth/token":
            form = parse_qs(request.content.decode())
            grant = form["grant_type"][0]
            return httpx.Response(200, json={
                "access_token": self.access_token if grant == "authorization_code" else "refreshed-access",
                "refresh_token": "strava-refresh",
                "expires_at": 1893456000,
                "athlete": self.athlete,
            })
        if path == "/api/v3/athlete":
            return httpx.Response(200, json=self.athlete)
        if path == "/api/v3/athlete/activities":
            return httpx.Response(200, json=self.activities)
        if path.startswith("/api/v3/activities/"):
            return httpx.Response(200, json=self.activities[0])
        return httpx.Response(404)

    def client(self) -> StravaClient:
        return StravaClient(transport=httpx.MockTransport(self.handler))


class FakeGoogle:
    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.userinfo = {
            "sub": "g-1",
            "email": "grace@example.com",
            "name": "Grace Hopper",
            "picture": "https://google.example/grace.png",
        }

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.path == "/token":
            return httpx.Response(200, json={"access_token": "google-access"})
        if request.url.path == "/v1/userinfo":
            return httpx.Response(200, json=self.userinfo)
        return httpx.Response(404)

    def oauth(self) -> GoogleOAuth:
        oauth = GoogleOAuth(transport=httpx.MockTransport(self.handler))
        oauth.client_id = "google-client"
        oauth.client_secret = "google-secret"
        return oauth


@pytest.fixture
def fake_strava():
    return FakeStrava()


@pytest.fixture
def fake_google():
    return FakeGoogle()


# =============================================================================
# App client
# =============================================================================

@pytest_asyncio.fixture
async def client(session_factory, fake_strava, fake_google):
    from ridegroups.main import app

    async def override_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_async_db] = override_db
    app.dependency_overrides[get_strava_client] = fake_strava.client
    app.dependency_overrides[get_google_oauth] = fake_google.oauth

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def make_strava_activity():
    """Factory for Strava activity summaries (see strava_ride)."""
    return strava_ride
