# ==============================================================================
# Session Reconstructor - Pure Domain Logic
# ==============================================================================
"""
Rebuilds presence sessions from voice-channel state changes.

Events are partitioned by subject key and replayed in arrival order. Each
partition holds at most one open session at a time:

- An ACTIVE event opens a session, or widens the open one to cover the
  event's [created_at, updated_at] range. Duplicate and out-of-order
  "still active" rows are absorbed this way.
- An INACTIVE event closes the open session after extending its end.
- An INACTIVE event with nothing open, and any other state, is ignored.

A session still open when its partition runs out is emitted as is.
"""

import logging
from typing import Iterable

from voicetime.core.models import ActivityEvent, GroupingKey, Session

logger = logging.getLogger(__name__)


class SessionReconstructor:
    """
    Pure session reconstruction logic.

    Holds no state between calls; every call to reconstruct() works on its
    own partitions.
    """

    def __init__(self, grouping: GroupingKey = GroupingKey.DISPLAY_NAME):
        """
        Initialize the reconstructor.

        Args:
            grouping: Event attribute used to partition events into
                      per-subject streams.
        """
        self.grouping = grouping

    def partition(self, events: Iterable[ActivityEvent]) -> dict[str, list[ActivityEvent]]:
        """Group events by subject key, keeping arrival order inside each group."""
        partitions: dict[str, list[ActivityEvent]] = {}
        for event in events:
            partitions.setdefault(event.partition_key(self.grouping), []).append(event)
        return partitions

    @staticmethod
    def open_session(event: ActivityEvent) -> Session:
        """Create a new session spanning the event's own bounds."""
        return Session(
            subject_key=event.subject_key,
            user_id=event.user_id,
            start_time=event.created_at,
            end_time=event.updated_at,
        )

    @staticmethod
    def widen_session(session: Session, event: ActivityEvent) -> Session:
        """
        Extend an open session to cover an ACTIVE event.

        Mutates the session in place and returns it. The start never moves
        later and the end never moves earlier.
        """
        session.start_time = min(session.start_time, event.created_at)
        session.end_time = max(session.end_time, event.updated_at)
        return session

    def replay(self, events: list[ActivityEvent]) -> list[Session]:
        """
        Replay one subject's events and return its sessions.

        Args:
            events: Events for a single subject, in arrival order

        Returns:
            Closed sessions in the order they closed, followed by the
            trailing open session if one remains
        """
        sessions: list[Session] = []
        current: Session | None = None

        for event in events:
            if event.is_active:
                if current is None:
                    current = self.open_session(event)
                else:
                    self.widen_session(current, event)
            elif event.is_inactive and current is not None:
                current.end_time = max(current.end_time, event.updated_at)
                sessions.append(current)
                current = None

        if current is not None:
            sessions.append(current)

        return sessions

    def reconstruct(self, events: Iterable[ActivityEvent]) -> list[Session]:
        """
        Reconstruct sessions for every subject in the batch.

        Args:
            events: Normalized events, ordered by (subject key, created_at)

        Returns:
            Sessions for all subjects. Ordering across subjects is not
            meaningful; the nested-session filter sorts them.
        """
        sessions: list[Session] = []
        partitions = self.partition(events)
        for key, subject_events in partitions.items():
            subject_sessions = self.replay(subject_events)
            logger.debug(
                "Subject %r: %d events -> %d sessions",
                key,
                len(subject_events),
                len(subject_sessions),
            )
            sessions.extend(subject_sessions)

        logger.info("Reconstructed %d sessions from %d subjects", len(sessions), len(partitions))
        return sessions
