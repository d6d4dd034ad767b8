"""
Tests for Strava activity import.
"""

from datetime import datetime

import pytest
from sqlalchemy import func, select

from ridegroups.exceptions import NotConnectedError, UpstreamAuthError
from ridegroups.features.activities import Activity
from ridegroups.features.strava.sync import ActivityImportService, is_ride, map_strava_activity
from ridegroups.features.users import User


async def make_user(db, token="strava-access") -> User:
    user = User(
        email="rider@example.com",
        name="Rider",
        provider="strava",
        strava_id=12345,
        strava_access_token=token,
    )
    db.add(user)
    await db.flush()
    return user


async def count_activities(db) -> int:
    result = await db.execute(select(func.count()).select_from(Activity))
    return result.scalar()


# =============================================================================
# Mapping
# =============================================================================

class TestMapping:
    def test_only_rides(self):
        assert is_ride({"type": "Ride"})
        assert not is_ride({"type": "Run"})
        assert not is_ride({"type": "VirtualRide"})
        assert not is_ride({})

    def test_units(self, make_strava_activity):
        row = map_strava_activity("u1", make_strava_activity())

        assert row == {
            "user_id": "u1",
            "title": "Morning Ride",
            "distance": 20500,
            "duration": 3600,
            "elevation_gain": 151,
            "average_speed": 180,
            "max_speed": 441,
            "activity_type": "ride",
            "start_time": datetime(2024, 5, 1, 7, 30),
        }

    def test_missing_optional_fields(self, make_strava_activity):
        row = map_strava_activity("u1", make_strava_activity(
            total_elevation_gain=None, max_speed=None, name=""
        ))

        assert row["elevation_gain"] == 0
        assert row["max_speed"] == 0
        assert row["title"] == "Ride"


# =============================================================================
# ActivityImportService
# =============================================================================

class TestSync:
    @pytest.mark.asyncio
    async def test_not_connected_makes_no_request(self, db, fake_strava):
        user = await make_user(db, token=None)

        with pytest.raises(NotConnectedError):
            await ActivityImportService(db, fake_strava.client()).sync_activities(user)

        assert fake_strava.requests == []

    @pytest.mark.asyncio
    async def test_imports_rides_only(self, db, fake_strava):
        user = await make_user(db)

        count = await ActivityImportService(db, fake_strava.client()).sync_activities(user)

        assert count == 2
        result = await db.execute(select(Activity.title).where(Activity.user_id == user.id))
        assert sorted(result.scalars().all()) == ["Commute", "Morning Ride"]

    @pytest.mark.asyncio
    async def test_requests_first_page_of_30(self, db, fake_strava):
        user = await make_user(db)

        await ActivityImportService(db, fake_strava.client()).sync_activities(user)

        request = fake_strava.requests[0]
        assert request.url.path == "/api/v3/athlete/activities"
        assert request.url.params["page"] == "1"
        assert request.url.params["per_page"] == "30"
        assert request.headers["Authorization"] == "Bearer strava-access"

    @pytest.mark.asyncio
    async def test_second_sync_duplicates(self, db, fake_strava):
        """Import is not deduplicated."""
        user = await make_user(db)
        service = ActivityImportService(db, fake_strava.client())

        first = await service.sync_activities(user)
        second = await service.sync_activities(user)

        assert first == second == 2
        assert await count_activities(db) == 4

    @pytest.mark.asyncio
    async def test_rejected_token_propagates(self, db, fake_strava):
        user = await make_user(db)
        fake_strava.fail_status = 401

        with pytest.raises(UpstreamAuthError) as exc_info:
            await ActivityImportService(db, fake_strava.client()).sync_activities(user)

        assert exc_info.value.upstream_status == 401
        assert exc_info.value.status_text == "Unauthorized"
        assert await count_activities(db) == 0
        # no silent refresh
        assert len(fake_strava.requests) == 1
