# ==============================================================================
# Presence Domain Models
# ==============================================================================
"""
Pydantic models for voice-channel activity and presence sessions.

These models are used for:
- Validating rows read from PostgreSQL or CSV exports
- Carrying normalized events through session reconstruction
- Reporting aggregated in-window presence per user

This module is part of the core domain layer and has no external dependencies
beyond Pydantic.
"""

import datetime as dt
from enum import Enum, IntEnum

from pydantic import BaseModel, Field


class ActivityState(IntEnum):
    """Values of the `active` column that the reconstructor acts on.

    Any other value (e.g. 1) is carried through but ignored.
    """

    INACTIVE = 0
    ACTIVE = 2


class GroupingKey(str, Enum):
    """Which event attribute partitions events into per-subject streams."""

    DISPLAY_NAME = "display_name"
    USER_ID = "user_id"


class FailurePolicy(str, Enum):
    """How a batch reacts to an event with an unparseable timestamp."""

    FAIL_FAST = "fail_fast"
    ISOLATE_SUBJECT = "isolate_subject"


class ActivityRecord(BaseModel):
    """
    A raw voice-channel row as delivered by the storage layer.

    Timestamps are left unparsed; the normalizer turns them into datetimes.

    Attributes:
        id: Row identifier
        user_id: Stable external identity (Google ID in the source system)
        clan_id: Clan the channel belongs to
        channel_id: Voice channel identifier
        display_name: Human-readable name of the user
        create_time: RFC 3339 timestamp (or datetime) when the row was created
        update_time: RFC 3339 timestamp (or datetime) of the last update
        active: Raw state value (2 = active, 0 = inactive)
    """

    id: int | None = Field(None, description="Row identifier")
    user_id: str = Field(..., description="Stable user identity")
    clan_id: int | None = Field(None, description="Clan identifier")
    channel_id: int | None = Field(None, description="Voice channel identifier")
    display_name: str = Field(..., description="Display name")
    create_time: str | dt.datetime = Field(..., description="Creation timestamp")
    update_time: str | dt.datetime = Field(..., description="Last update timestamp")
    active: int = Field(..., description="Raw state value")


class ActivityEvent(BaseModel):
    """
    One normalized state transition.

    `created_at <= updated_at` is not guaranteed by the source data.
    """

    subject_key: str = Field(..., description="Display name of the user")
    user_id: str = Field(..., description="Stable user identity")
    group_id: int | None = Field(None, description="Clan identifier")
    channel_id: int | None = Field(None, description="Voice channel identifier")
    event_id: int | None = Field(None, description="Source row identifier")
    created_at: dt.datetime = Field(..., description="Creation time (UTC)")
    updated_at: dt.datetime = Field(..., description="Last update time (UTC)")
    state: int = Field(..., description="Raw state value")

    model_config = {"frozen": True}

    @property
    def is_active(self) -> bool:
        return self.state == ActivityState.ACTIVE

    @property
    def is_inactive(self) -> bool:
        return self.state == ActivityState.INACTIVE

    def partition_key(self, grouping: GroupingKey = GroupingKey.DISPLAY_NAME) -> str:
        """Key used to partition events into per-subject streams."""
        if grouping == GroupingKey.USER_ID:
            return self.user_id
        return self.subject_key


class Session(BaseModel):
    """
    A reconstructed presence interval.

    Bounds are widened in place while the session is open; once emitted by
    the reconstructor a session is treated as read-only.

    start_time <= end_time holds only when every source row has
    create_time <= update_time. A lone ACTIVE row with inverted timestamps
    yields an inverted session, which the aggregator clips to zero.
    """

    subject_key: str = Field(..., description="Display name of the user")
    user_id: str = Field(..., description="Stable user identity")
    start_time: dt.datetime = Field(..., description="Session start (UTC)")
    end_time: dt.datetime = Field(..., description="Session end (UTC)")

    @property
    def duration(self) -> dt.timedelta:
        return self.end_time - self.start_time

    def partition_key(self, grouping: GroupingKey = GroupingKey.DISPLAY_NAME) -> str:
        if grouping == GroupingKey.USER_ID:
            return self.user_id
        return self.subject_key

    def contains(self, other: "Session") -> bool:
        """True if `other` lies strictly inside this session."""
        return self.start_time < other.start_time and self.end_time > other.end_time


class AggregatedTime(BaseModel):
    """
    One user's accumulated overlap with the daily window on the target date.

    Attributes:
        subject_key: Display name of the user
        user_id: Stable user identity
        total_duration: Accumulated in-window presence (non-negative)
        date: Target calendar date
    """

    subject_key: str = Field(..., description="Display name of the user")
    user_id: str = Field(..., description="Stable user identity")
    total_duration: dt.timedelta = Field(
        default=dt.timedelta(0), description="In-window presence"
    )
    date: dt.date = Field(..., description="Target calendar date")

    @property
    def key(self) -> tuple[str, str]:
        return (self.subject_key, self.user_id)
