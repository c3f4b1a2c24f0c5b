"""Unit tests for insights read-model helpers."""

from datetime import UTC, datetime, timedelta

import pytest

from insights.domain import Priority, badges_for, derive_priority

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=UTC)


class TestDerivePriority:
    @pytest.mark.parametrize(
        ("remaining", "expected"),
        [
            (timedelta(days=-1), Priority.HIGH),
            (timedelta(hours=1), Priority.HIGH),
            (timedelta(days=3), Priority.HIGH),
            (timedelta(days=3, seconds=1), Priority.MEDIUM),
            (timedelta(days=7), Priority.MEDIUM),
            (timedelta(days=7, seconds=1), Priority.LOW),
            (timedelta(days=30), Priority.LOW),
        ],
    )
    def test_priority_follows_time_left(self, remaining, expected):
        assert derive_priority(NOW + remaining, NOW) == expected

    def test_no_deadline_is_medium(self):
        assert derive_priority(None, NOW) == Priority.MEDIUM


class TestBadges:
    @pytest.mark.parametrize(
        ("points", "badges"), [(0, 0), (99, 0), (100, 1), (250, 2), (-5, 0)]
    )
    def test_one_badge_per_hundred_points(self, points, badges):
        assert badges_for(points) == badges
