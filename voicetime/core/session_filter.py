# ==============================================================================
# Nested-Session Filter
# ==============================================================================
"""
Drops sessions that lie strictly inside an earlier session of the same subject.

Sessions that only overlap are both kept, so overlapping presence can still
be counted twice downstream.
"""

import logging
from typing import Iterable

from voicetime.core.models import GroupingKey, Session

logger = logging.getLogger(__name__)


def sort_sessions(
    sessions: Iterable[Session],
    grouping: GroupingKey = GroupingKey.DISPLAY_NAME,
) -> list[Session]:
    """Stable sort by (subject key, start_time)."""
    return sorted(sessions, key=lambda s: (s.partition_key(grouping), s.start_time))


def filter_nested_sessions(
    sessions: Iterable[Session],
    grouping: GroupingKey = GroupingKey.DISPLAY_NAME,
) -> list[Session]:
    """
    Remove sessions strictly contained in an earlier session of the same subject.

    Args:
        sessions: Sessions in any order
        grouping: Subject key shared by sessions that are compared

    Returns:
        Surviving sessions ordered by (subject key, start_time)
    """
    ordered = sort_sessions(sessions, grouping)
    filtered: list[Session] = []

    for i, current in enumerate(ordered):
        key = current.partition_key(grouping)
        nested = any(
            earlier.partition_key(grouping) == key and earlier.contains(current)
            for earlier in ordered[:i]
        )
        if nested:
            logger.debug(
                "Dropping nested session %r [%s, %s]",
                current.subject_key,
                current.start_time.isoformat(),
                current.end_time.isoformat(),
            )
            continue
        filtered.append(current)

    logger.info("Kept %d of %d sessions after nested filter", len(filtered), len(ordered))
    return filtered
