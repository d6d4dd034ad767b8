"""
Tests for the statistics aggregator.
"""

from datetime import datetime, timedelta

import pytest

from ridegroups.features.activities import Activity, StatsService, compute_stats
from ridegroups.features.users import User

NOW = datetime(2024, 6, 1, 12, 0)


def make_activity(days_ago: float, distance=10000, average_speed=200, elevation_gain=100):
    return Activity(
        user_id="u1",
        title="Ride",
        distance=distance,
        duration=1800,
        elevation_gain=elevation_gain,
        average_speed=average_speed,
        max_speed=None,
        activity_type="ride",
        start_time=NOW - timedelta(days=days_ago),
    )


# =============================================================================
# compute_stats
# =============================================================================

class TestEmpty:
    def test_zero_activities(self):
        stats = compute_stats([], NOW)

        assert stats.weekly_distance == 0
        assert stats.avg_speed == 0
        assert stats.elevation == 0
        assert [p.week for p in stats.weekly_data] == ["Week 4", "Week 3", "Week 2", "Week 1"]
        assert all(p.distance == 0 and p.speed == 0 for p in stats.weekly_data)


class TestWeekly:
    def test_single_ride_speed_conversion(self):
        """Stored 180 -> 18.0 km/h."""
        stats = compute_stats([make_activity(1, average_speed=180)], NOW)
        assert stats.avg_speed == 18.0

    def test_only_last_seven_days_count(self):
        activities = [
            make_activity(1, distance=12345, elevation_gain=120),
            make_activity(6.9, distance=5000, elevation_gain=30),
            make_activity(8, distance=99000, elevation_gain=999),
        ]
        stats = compute_stats(activities, NOW)

        assert stats.weekly_distance == 17.3
        assert stats.elevation == 150

    def test_mean_speed(self):
        activities = [
            make_activity(1, average_speed=180),
            make_activity(2, average_speed=255),
        ]
        # (180 + 255) / 2 = 217.5 -> 21.75 km/h -> 21.8
        assert compute_stats(activities, NOW).avg_speed == 21.8

    def test_null_elevation_counts_as_zero(self):
        activities = [make_activity(1, elevation_gain=None), make_activity(2, elevation_gain=40)]
        assert compute_stats(activities, NOW).elevation == 40

    def test_window_start_is_inclusive(self):
        stats = compute_stats([make_activity(7, distance=1000)], NOW)
        assert stats.weekly_distance == 1.0


class TestChart:
    def test_four_windows_oldest_first(self):
        activities = [
            make_activity(1, distance=1000),    # Week 1
            make_activity(10, distance=2000),   # Week 2
            make_activity(15, distance=3000),   # Week 3
            make_activity(22, distance=4000),   # Week 4
            make_activity(40, distance=50000),  # outside
        ]
        chart = compute_stats(activities, NOW).weekly_data

        assert [(p.week, p.distance) for p in chart] == [
            ("Week 4", 4.0),
            ("Week 3", 3.0),
            ("Week 2", 2.0),
            ("Week 1", 1.0),
        ]

    def test_window_start_inclusive_end_exclusive(self):
        """An activity exactly 14 days ago opens Week 2 and is not in Week 3."""
        chart = compute_stats([make_activity(14, distance=1000)], NOW).weekly_data
        by_label = {p.week: p.distance for p in chart}
        assert by_label["Week 2"] == 1.0
        assert by_label["Week 3"] == 0

    def test_input_order_does_not_matter(self):
        activities = [make_activity(d, distance=1000 * (i + 1)) for i, d in enumerate([3, 20, 9, 1])]
        forward = compute_stats(activities, NOW)
        backward = compute_stats(list(reversed(activities)), NOW)
        assert forward == backward


# =============================================================================
# StatsService
# =============================================================================

class TestStatsService:
    @pytest.mark.asyncio
    async def test_user_stats_from_store(self, db):
        user = User(email="s@example.com", name="S", provider="local")
        other = User(email="o@example.com", name="O", provider="local")
        db.add_all([user, other])
        await db.flush()

        for activity in [make_activity(1, distance=8000), make_activity(2, distance=2000)]:
            activity.user_id = user.id
            db.add(activity)
        foreign = make_activity(1, distance=50000)
        foreign.user_id = other.id
        db.add(foreign)
        await db.flush()

        stats = await StatsService(db).get_user_stats(user.id, now=NOW)

        assert stats.weekly_distance == 10.0
        assert len(stats.weekly_data) == 4
