# ==============================================================================
# Window Aggregator
# ==============================================================================
"""
Sums each user's presence inside a fixed daily clock window.

The window is expressed as offsets from the target date's UTC midnight. The
observed system uses [03:00, 05:00) UTC, i.e. 10:00 to 12:00 at UTC+7.

Only sessions whose start falls on the target UTC calendar day count. A
session starting the evening before does not contribute even if it runs
into the window.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from typing import Iterable

from voicetime.core.errors import ConfigurationError
from voicetime.core.models import AggregatedTime, Session

logger = logging.getLogger(__name__)

DAY = timedelta(hours=24)


@dataclass(frozen=True)
class AggregationWindow:
    """A daily window given as offsets from UTC midnight."""

    start_offset: timedelta = timedelta(hours=3)
    end_offset: timedelta = timedelta(hours=5)

    def __post_init__(self):
        if self.start_offset is None or self.end_offset is None:
            raise ConfigurationError("Window bounds must both be set")
        in_day = [timedelta(0) <= offset <= DAY for offset in (self.start_offset, self.end_offset)]
        if not all(in_day):
            raise ConfigurationError(
                f"Window bounds must lie within one day, got "
                f"{self.start_offset} to {self.end_offset}"
            )
        if self.start_offset >= self.end_offset:
            raise ConfigurationError(
                f"Window start {self.start_offset} must be before end {self.end_offset}"
            )

    @classmethod
    def from_hours(cls, start_hours: float, end_hours: float) -> "AggregationWindow":
        return cls(timedelta(hours=start_hours), timedelta(hours=end_hours))

    @property
    def length(self) -> timedelta:
        return self.end_offset - self.start_offset

    def bounds(self, target_date: date) -> tuple[datetime, datetime]:
        """Absolute UTC [start, end) of the window on the given date."""
        midnight = datetime.combine(target_date, time(0), tzinfo=timezone.utc)
        return midnight + self.start_offset, midnight + self.end_offset


def utc_day(moment: datetime) -> date:
    """Calendar day of a datetime in UTC."""
    if moment.tzinfo is None:
        return moment.date()
    return moment.astimezone(timezone.utc).date()


def clip_to_window(session: Session, window_start: datetime, window_end: datetime) -> timedelta:
    """Portion of the session inside [window_start, window_end); zero if none."""
    effective_start = max(session.start_time, window_start)
    effective_end = min(session.end_time, window_end)
    if effective_start < effective_end:
        return effective_end - effective_start
    return timedelta(0)


class WindowAggregator:
    """
    Accumulates in-window presence per (subject_key, user_id).

    Args:
        target_date: Calendar day to aggregate
        window: Daily window; defaults to [03:00, 05:00) UTC
    """

    def __init__(self, target_date: date | None, window: AggregationWindow | None = None):
        if target_date is None:
            raise ConfigurationError("A target date is required for aggregation")
        if isinstance(target_date, datetime):
            target_date = utc_day(target_date)
        self.target_date = target_date
        self.window = window or AggregationWindow()
        self.window_start, self.window_end = self.window.bounds(target_date)

    def aggregate(self, sessions: Iterable[Session]) -> dict[tuple[str, str], AggregatedTime]:
        """
        Sum each user's overlap with the window.

        Args:
            sessions: Sessions surviving the nested-session filter

        Returns:
            Mapping of (subject_key, user_id) to AggregatedTime. Users with no
            in-window overlap are absent.
        """
        totals: dict[tuple[str, str], AggregatedTime] = {}
        skipped = 0

        for session in sessions:
            if utc_day(session.start_time) != self.target_date:
                skipped += 1
                continue

            overlap = clip_to_window(session, self.window_start, self.window_end)
            if overlap <= timedelta(0):
                continue

            key = (session.subject_key, session.user_id)
            record = totals.get(key)
            if record is None:
                totals[key] = AggregatedTime(
                    subject_key=session.subject_key,
                    user_id=session.user_id,
                    total_duration=overlap,
                    date=self.target_date,
                )
            else:
                record.total_duration += overlap

        logger.info(
            "Aggregated %d users for %s window %s-%s (%d sessions off-date)",
            len(totals),
            self.target_date.isoformat(),
            self.window_start.strftime("%H:%M"),
            self.window_end.strftime("%H:%M"),
            skipped,
        )
        return totals
