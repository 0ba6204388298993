# ==============================================================================
# Tests for Report Formatting
# ==============================================================================
"""
Unit tests for duration rendering and report payloads.
"""

from datetime import date, timedelta

import pytest

from voicetime.core.formatting import (
    DurationFormat,
    build_payload,
    format_duration,
    format_hms,
    format_minutes,
    to_payload,
)
from voicetime.core.models import AggregatedTime


def _record(name, user_id, **delta):
    return AggregatedTime(
        subject_key=name,
        user_id=user_id,
        total_duration=timedelta(**delta),
        date=date(2024, 8, 6),
    )


class TestDurationRendering:
    """Tests for format_hms() and format_minutes()."""

    @pytest.mark.parametrize(
        "delta,expected",
        [
            (timedelta(0), "00:00:00"),
            (timedelta(minutes=10), "00:10:00"),
            (timedelta(hours=2), "02:00:00"),
            (timedelta(hours=1, minutes=2, seconds=3), "01:02:03"),
            (timedelta(seconds=59, milliseconds=999), "00:00:59"),
            (timedelta(hours=26), "26:00:00"),
        ],
    )
    def test_hms(self, delta, expected):
        assert format_hms(delta) == expected

    @pytest.mark.parametrize(
        "delta,expected",
        [
            (timedelta(0), 0),
            (timedelta(minutes=10), 10),
            (timedelta(minutes=10, seconds=29), 10),
            (timedelta(minutes=10, seconds=31), 11),
            (timedelta(hours=2), 120),
        ],
    )
    def test_minutes(self, delta, expected):
        assert format_minutes(delta) == expected

    def test_format_dispatch(self):
        delta = timedelta(minutes=90)
        assert format_duration(delta) == "01:30:00"
        assert format_duration(delta, DurationFormat.MINUTES) == 90


class TestPayload:
    """Tests for to_payload() and build_payload()."""

    def test_to_payload_hms(self):
        assert to_payload(_record("Alice", "g1", minutes=10)) == {
            "fullName": "Alice",
            "googleId": "g1",
            "totalTime": "00:10:00",
            "date": "2024-08-06",
        }

    def test_to_payload_minutes(self):
        payload = to_payload(_record("Alice", "g1", minutes=10), DurationFormat.MINUTES)
        assert payload["totalTime"] == 10

    def test_build_payload_ordered(self):
        payload = build_payload(
            [
                _record("Bob", "g2", minutes=5),
                _record("Alice", "g9", minutes=1),
                _record("Alice", "g1", minutes=2),
            ]
        )
        assert [(p["fullName"], p["googleId"]) for p in payload] == [
            ("Alice", "g1"),
            ("Alice", "g9"),
            ("Bob", "g2"),
        ]

    def test_build_payload_empty(self):
        assert build_payload([]) == []
