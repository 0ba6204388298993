# ==============================================================================
# Tests for the Nested-Session Filter
# ==============================================================================
"""
Unit tests for dropping sessions strictly contained in an earlier one.
"""

from conftest import session, ts
from voicetime.core.models import GroupingKey
from voicetime.core.session_filter import filter_nested_sessions, sort_sessions


def _spans(sessions):
    return [(s.subject_key, s.start_time.hour, s.end_time.hour) for s in sessions]


class TestFilterNestedSessions:
    """Tests for filter_nested_sessions()."""

    def test_strictly_nested_dropped(self):
        kept = filter_nested_sessions(
            [
                session("A", "2024-08-06T01:00:00Z", "2024-08-06T06:00:00Z"),
                session("A", "2024-08-06T02:00:00Z", "2024-08-06T04:00:00Z"),
            ]
        )
        assert _spans(kept) == [("A", 1, 6)]

    def test_overlapping_both_kept(self):
        kept = filter_nested_sessions(
            [
                session("A", "2024-08-06T02:00:00Z", "2024-08-06T04:00:00Z"),
                session("A", "2024-08-06T03:00:00Z", "2024-08-06T05:00:00Z"),
            ]
        )
        assert _spans(kept) == [("A", 2, 4), ("A", 3, 5)]

    def test_shared_start_not_nested(self):
        """Containment is strict: a shared boundary keeps both sessions."""
        kept = filter_nested_sessions(
            [
                session("A", "2024-08-06T02:00:00Z", "2024-08-06T05:00:00Z"),
                session("A", "2024-08-06T02:00:00Z", "2024-08-06T04:00:00Z"),
            ]
        )
        assert len(kept) == 2

    def test_identical_sessions_kept(self):
        kept = filter_nested_sessions(
            [
                session("A", "2024-08-06T02:00:00Z", "2024-08-06T04:00:00Z"),
                session("A", "2024-08-06T02:00:00Z", "2024-08-06T04:00:00Z"),
            ]
        )
        assert len(kept) == 2

    def test_other_subject_never_contains(self):
        kept = filter_nested_sessions(
            [
                session("A", "2024-08-06T01:00:00Z", "2024-08-06T06:00:00Z"),
                session("B", "2024-08-06T02:00:00Z", "2024-08-06T04:00:00Z"),
            ]
        )
        assert _spans(kept) == [("A", 1, 6), ("B", 2, 4)]

    def test_nested_in_dropped_session_still_dropped(self):
        """Comparison is against every earlier session, including dropped ones."""
        kept = filter_nested_sessions(
            [
                session("A", "2024-08-06T01:00:00Z", "2024-08-06T08:00:00Z"),
                session("A", "2024-08-06T02:00:00Z", "2024-08-06T07:00:00Z"),
                session("A", "2024-08-06T03:00:00Z", "2024-08-06T06:00:00Z"),
            ]
        )
        assert _spans(kept) == [("A", 1, 8)]

    def test_output_sorted_by_subject_then_start(self):
        kept = filter_nested_sessions(
            [
                session("B", "2024-08-06T01:00:00Z", "2024-08-06T02:00:00Z"),
                session("A", "2024-08-06T05:00:00Z", "2024-08-06T06:00:00Z"),
                session("A", "2024-08-06T03:00:00Z", "2024-08-06T04:00:00Z"),
            ]
        )
        assert _spans(kept) == [("A", 3, 4), ("A", 5, 6), ("B", 1, 2)]

    def test_user_id_grouping(self):
        """Same display name under different user ids is not compared."""
        sessions = [
            session("Sam", "2024-08-06T01:00:00Z", "2024-08-06T06:00:00Z", user_id="u1"),
            session("Sam", "2024-08-06T02:00:00Z", "2024-08-06T04:00:00Z", user_id="u2"),
        ]
        assert len(filter_nested_sessions(sessions, GroupingKey.USER_ID)) == 2
        assert len(filter_nested_sessions(sessions, GroupingKey.DISPLAY_NAME)) == 1

    def test_empty(self):
        assert filter_nested_sessions([]) == []


class TestSortSessions:
    """Tests for sort_sessions()."""

    def test_stable_for_equal_keys(self):
        first = session("A", "2024-08-06T02:00:00Z", "2024-08-06T03:00:00Z")
        second = session("A", "2024-08-06T02:00:00Z", "2024-08-06T05:00:00Z")
        ordered = sort_sessions([first, second])
        assert ordered[0].end_time == ts("2024-08-06T03:00:00Z")
        assert ordered[1].end_time == ts("2024-08-06T05:00:00Z")
