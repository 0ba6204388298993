# ==============================================================================
# Event Normalizer
# ==============================================================================
"""
Turns raw activity rows into normalized, time-ordered events.

Timestamps arrive as RFC 3339 strings (or as datetimes when the column is a
real timestamp type). Every value is converted to an aware UTC datetime.

Under the default fail-fast policy a single malformed timestamp aborts the
whole batch. The isolate-subject policy instead drops the offending subject's
events and reports the failures alongside the surviving events.
"""

import logging
import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Iterable

from voicetime.core.errors import ParseError
from voicetime.core.models import ActivityEvent, ActivityRecord, FailurePolicy, GroupingKey

logger = logging.getLogger(__name__)

# YYYY-MM-DDTHH:MM:SS[.fraction](Z|+HH:MM|-HH:MM)
_RFC3339_PATTERN = re.compile(
    r"^\d{4}-\d{2}-\d{2}[Tt]\d{2}:\d{2}:\d{2}(\.\d+)?([Zz]|[+-]\d{2}:\d{2})$"
)


@dataclass
class NormalizedBatch:
    """Outcome of normalizing a batch of activity rows."""

    events: list[ActivityEvent] = field(default_factory=list)
    failures: list[ParseError] = field(default_factory=list)
    # Partition keys (display name or user id, per grouping) whose events were dropped
    failed_subjects: set[str] = field(default_factory=set)


def parse_timestamp(value: str | datetime, field_name: str | None = None) -> datetime:
    """
    Parse an RFC 3339 timestamp into an aware UTC datetime.

    Naive datetimes are taken to be UTC already.

    Raises:
        ParseError: If the value is not a valid RFC 3339 timestamp
    """
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    if not isinstance(value, str) or not _RFC3339_PATTERN.match(value.strip()):
        raise ParseError(value, field=field_name)

    text = value.strip()
    if text[-1] in "Zz":
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text.replace("t", "T"))
    except ValueError as e:
        raise ParseError(value, field=field_name) from e
    return parsed.astimezone(timezone.utc)


def normalize_record(record: ActivityRecord) -> ActivityEvent:
    """
    Build an ActivityEvent from a raw row.

    Raises:
        ParseError: If either timestamp is malformed. The error carries the
            row id, field name and display name of the offending row.
    """
    timestamps = {}
    for field_name in ("create_time", "update_time"):
        try:
            timestamps[field_name] = parse_timestamp(getattr(record, field_name), field_name)
        except ParseError as e:
            raise ParseError(
                e.value,
                field=field_name,
                event_id=record.id,
                subject_key=record.display_name,
            ) from e

    return ActivityEvent(
        subject_key=record.display_name,
        user_id=record.user_id,
        group_id=record.clan_id,
        channel_id=record.channel_id,
        event_id=record.id,
        created_at=timestamps["create_time"],
        updated_at=timestamps["update_time"],
        state=record.active,
    )


def normalize_events(
    records: Iterable[ActivityRecord],
    policy: FailurePolicy = FailurePolicy.FAIL_FAST,
    grouping: GroupingKey = GroupingKey.DISPLAY_NAME,
) -> NormalizedBatch:
    """
    Normalize a batch of raw rows.

    Args:
        records: Raw activity rows in arrival order
        policy: FAIL_FAST re-raises the first ParseError. ISOLATE_SUBJECT drops
            every event belonging to a subject with a malformed row.
        grouping: Subject key used to decide which events to isolate

    Returns:
        NormalizedBatch with surviving events (arrival order kept) and failures

    Raises:
        ParseError: Under FAIL_FAST, on the first malformed timestamp
    """
    batch = NormalizedBatch()
    failed_keys = batch.failed_subjects
    parsed: list[ActivityEvent] = []

    for record in records:
        try:
            parsed.append(normalize_record(record))
        except ParseError as e:
            if policy == FailurePolicy.FAIL_FAST:
                raise
            logger.warning("Isolating subject after parse failure: %s", e)
            batch.failures.append(e)
            if grouping == GroupingKey.USER_ID:
                failed_keys.add(record.user_id)
            else:
                failed_keys.add(record.display_name)

    if failed_keys:
        batch.events = [ev for ev in parsed if ev.partition_key(grouping) not in failed_keys]
        logger.info(
            "Dropped %d events from %d isolated subjects",
            len(parsed) - len(batch.events),
            len(failed_keys),
        )
    else:
        batch.events = parsed
    return batch


def sort_events(
    events: Iterable[ActivityEvent],
    grouping: GroupingKey = GroupingKey.DISPLAY_NAME,
) -> list[ActivityEvent]:
    """Order events by (subject key, created_at); stable for ties."""
    return sorted(events, key=lambda ev: (ev.partition_key(grouping), ev.created_at))
