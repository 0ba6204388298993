# ==============================================================================
# Presence Pipeline
# ==============================================================================
"""
Wires the core stages together:

    raw rows -> normalize -> sort -> reconstruct -> filter nested -> aggregate

Aggregation parameters are validated when the pipeline is built, before any
event is touched.
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Iterable

from voicetime.core.aggregator import AggregationWindow, WindowAggregator
from voicetime.core.errors import ParseError
from voicetime.core.models import (
    ActivityRecord,
    AggregatedTime,
    FailurePolicy,
    GroupingKey,
    Session,
)
from voicetime.core.normalizer import normalize_events, sort_events
from voicetime.core.session_filter import filter_nested_sessions
from voicetime.core.session_processor import SessionReconstructor

logger = logging.getLogger(__name__)


@dataclass
class PipelineResult:
    """Everything produced by one pipeline run."""

    target_date: date
    totals: dict[tuple[str, str], AggregatedTime] = field(default_factory=dict)
    sessions: list[Session] = field(default_factory=list)
    filtered_sessions: list[Session] = field(default_factory=list)
    failures: list[ParseError] = field(default_factory=list)
    failed_subjects: set[str] = field(default_factory=set)

    @property
    def records(self) -> list[AggregatedTime]:
        return list(self.totals.values())


class PresencePipeline:
    """
    Computes per-user in-window presence for one target date.

    Args:
        target_date: Calendar day to aggregate
        window: Daily window; defaults to [03:00, 05:00) UTC
        grouping: Subject key for reconstruction and nested filtering
        policy: Reaction to malformed timestamps

    Raises:
        ConfigurationError: If the target date or window is invalid
    """

    def __init__(
        self,
        target_date: date | None,
        window: AggregationWindow | None = None,
        grouping: GroupingKey = GroupingKey.DISPLAY_NAME,
        policy: FailurePolicy = FailurePolicy.FAIL_FAST,
    ):
        self.grouping = GroupingKey(grouping)
        self.policy = FailurePolicy(policy)
        self.aggregator = WindowAggregator(target_date, window)
        self.reconstructor = SessionReconstructor(self.grouping)

    @property
    def target_date(self) -> date:
        return self.aggregator.target_date

    def run(self, records: Iterable[ActivityRecord]) -> PipelineResult:
        """
        Run every stage over a batch of raw rows.

        Raises:
            ParseError: Under FAIL_FAST, if any timestamp is malformed. No
                partial result is produced.
        """
        batch = normalize_events(records, self.policy, self.grouping)
        events = sort_events(batch.events, self.grouping)
        for event in events:
            logger.debug(
                "Activity id=%s user=%s clan=%s channel=%s name=%r created=%s updated=%s state=%d",
                event.event_id,
                event.user_id,
                event.group_id,
                event.channel_id,
                event.subject_key,
                event.created_at.isoformat(),
                event.updated_at.isoformat(),
                event.state,
            )

        sessions = self.reconstructor.reconstruct(events)
        filtered = filter_nested_sessions(sessions, self.grouping)
        for session in filtered:
            logger.debug(
                "Session name=%r user=%s start=%s end=%s",
                session.subject_key,
                session.user_id,
                session.start_time.isoformat(),
                session.end_time.isoformat(),
            )

        totals = self.aggregator.aggregate(filtered)
        for record in totals.values():
            logger.debug(
                "Total name=%r user=%s total=%s",
                record.subject_key,
                record.user_id,
                record.total_duration,
            )

        return PipelineResult(
            target_date=self.target_date,
            totals=totals,
            sessions=sessions,
            filtered_sessions=filtered,
            failures=batch.failures,
            failed_subjects=batch.failed_subjects,
        )


def compute_presence(
    records: Iterable[ActivityRecord],
    target_date: date,
    window: AggregationWindow | None = None,
    grouping: GroupingKey = GroupingKey.DISPLAY_NAME,
    policy: FailurePolicy = FailurePolicy.FAIL_FAST,
) -> dict[tuple[str, str], AggregatedTime]:
    """Convenience wrapper returning only the aggregated totals."""
    return PresencePipeline(target_date, window, grouping, policy).run(records).totals
