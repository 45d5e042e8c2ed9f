"""Tests for event priority derivation."""

from datetime import datetime, timedelta, timezone

import pytest

from agrostudy.services.priority import DISPLAY_TIERS, derive_priority, display_tier

NOW = datetime(2024, 3, 13, 12, 0, tzinfo=timezone.utc)


@pytest.mark.parametrize(
    ("event_type", "days", "expected"),
    [
        ("prova", 3, "high"),
        ("prova", 7, "high"),
        ("prova", 8, "low"),
        ("trabalho", 3, "high"),
        ("trabalho", 5, "medium"),
        ("aula", 0.5, "high"),
        ("aula", 2, "medium"),
        ("outro", 10, "low"),
        ("outro", -2, "high"),
    ],
)
def test_derived_priority(event_type, days, expected):
    assert derive_priority(event_type, NOW + timedelta(days=days), NOW) == expected


def test_declared_priority_wins():
    assert derive_priority("prova", NOW + timedelta(hours=2), NOW, declared="low") == "low"


def test_display_tiers():
    assert display_tier("high").badge_variant == "destructive"
    assert display_tier("medium").label == "Média"
    assert set(DISPLAY_TIERS) == {"high", "medium", "low"}
