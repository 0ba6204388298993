# ==============================================================================
# Report Formatting
# ==============================================================================
"""
Output conventions for aggregated presence.

Two duration renderings exist for the downstream report API: an "HH:MM:SS"
string and a rounded whole-minute count. Which one is used is a configuration
choice; the aggregated records themselves are the same either way.
"""

from datetime import timedelta
from enum import Enum
from typing import Iterable

from voicetime.core.models import AggregatedTime


class DurationFormat(str, Enum):
    """How totalTime is rendered in a report payload."""

    HMS = "hms"
    MINUTES = "minutes"


def format_hms(duration: timedelta) -> str:
    """Render as HH:MM:SS; hours are not capped at 24 and sub-seconds are dropped."""
    total_seconds = int(duration.total_seconds())
    hours, remainder = divmod(total_seconds, 3600)
    minutes, secs = divmod(remainder, 60)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"


def format_minutes(duration: timedelta) -> int:
    """Render as a whole number of minutes, rounded."""
    return int(round(duration.total_seconds() / 60))


def format_duration(duration: timedelta, fmt: DurationFormat = DurationFormat.HMS) -> str | int:
    if fmt == DurationFormat.MINUTES:
        return format_minutes(duration)
    return format_hms(duration)


def to_payload(record: AggregatedTime, fmt: DurationFormat = DurationFormat.HMS) -> dict:
    """Serialize one record for the report API."""
    return {
        "fullName": record.subject_key,
        "googleId": record.user_id,
        "totalTime": format_duration(record.total_duration, fmt),
        "date": record.date.isoformat(),
    }


def build_payload(
    records: Iterable[AggregatedTime], fmt: DurationFormat = DurationFormat.HMS
) -> list[dict]:
    """Serialize records ordered by display name then user id."""
    ordered = sorted(records, key=lambda r: r.key)
    return [to_payload(r, fmt) for r in ordered]
