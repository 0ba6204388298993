# ==============================================================================
# Tests for the Presence Pipeline
# ==============================================================================
"""
End-to-end tests over raw rows: normalize -> reconstruct -> filter -> aggregate.
"""

from datetime import date, timedelta

import pytest

from conftest import ACTIVE, INACTIVE, record
from voicetime.core.aggregator import AggregationWindow
from voicetime.core.errors import ConfigurationError, ParseError
from voicetime.core.models import FailurePolicy, GroupingKey
from voicetime.core.pipeline import PresencePipeline, compute_presence

TARGET = date(2024, 8, 6)
TEN_MINUTE_WINDOW = AggregationWindow(timedelta(hours=10), timedelta(hours=10, minutes=10))


class TestComputePresence:
    """Tests for compute_presence()."""

    def test_single_session_clipped_to_window(self):
        totals = compute_presence(
            [
                record("A", ACTIVE, "2024-08-06T10:00:00Z"),
                record("A", ACTIVE, "2024-08-06T10:05:00Z"),
                record("A", INACTIVE, "2024-08-06T10:07:00Z", "2024-08-06T10:10:00Z"),
            ],
            TARGET,
            TEN_MINUTE_WINDOW,
        )
        assert list(totals) == [("A", "g-A")]
        assert totals[("A", "g-A")].total_duration == timedelta(minutes=10)

    def test_default_window(self):
        totals = compute_presence(
            [
                record("A", ACTIVE, "2024-08-06T02:00:00Z"),
                record("A", INACTIVE, "2024-08-06T06:00:00Z"),
            ],
            TARGET,
        )
        assert totals[("A", "g-A")].total_duration == timedelta(hours=2)

    def test_arrival_order_does_not_matter(self):
        rows = [
            record("B", ACTIVE, "2024-08-06T03:00:00Z"),
            record("A", INACTIVE, "2024-08-06T03:40:00Z"),
            record("B", INACTIVE, "2024-08-06T03:15:00Z"),
            record("A", ACTIVE, "2024-08-06T03:10:00Z"),
        ]
        totals = compute_presence(rows, TARGET)
        assert totals[("A", "g-A")].total_duration == timedelta(minutes=30)
        assert totals[("B", "g-B")].total_duration == timedelta(minutes=15)

    def test_empty_input(self):
        assert compute_presence([], TARGET) == {}

    def test_invalid_window_rejected_before_processing(self):
        with pytest.raises(ConfigurationError):
            PresencePipeline(TARGET, AggregationWindow.from_hours(5, 3))

    def test_missing_date_rejected(self):
        with pytest.raises(ConfigurationError):
            compute_presence([], None)


class TestPresencePipeline:
    """Tests for PresencePipeline.run() stages and failure policies."""

    def _rows(self):
        return [
            record("A", ACTIVE, "2024-08-06T03:00:00Z", record_id=1),
            record("A", INACTIVE, "2024-08-06T03:30:00Z", record_id=2),
            record("B", ACTIVE, "2024-08-06T03:00:00Z", record_id=3),
            record("B", INACTIVE, "2024-08-06T3:30", record_id=4),
        ]

    def test_fail_fast_aborts(self):
        with pytest.raises(ParseError) as exc_info:
            PresencePipeline(TARGET).run(self._rows())
        assert exc_info.value.event_id == 4

    def test_isolate_subject_keeps_others(self):
        result = PresencePipeline(TARGET, policy=FailurePolicy.ISOLATE_SUBJECT).run(self._rows())

        assert set(result.totals) == {("A", "g-A")}
        assert result.totals[("A", "g-A")].total_duration == timedelta(minutes=30)
        assert [f.event_id for f in result.failures] == [4]
        assert result.failed_subjects == {"B"}

    def test_result_exposes_stages(self):
        rows = [
            record("A", ACTIVE, "2024-08-06T02:00:00Z", "2024-08-06T02:01:00Z"),
            record("A", INACTIVE, "2024-08-06T02:02:00Z", "2024-08-06T06:00:00Z"),
            record("A", ACTIVE, "2024-08-06T03:00:00Z"),
            record("A", INACTIVE, "2024-08-06T03:30:00Z"),
        ]
        result = PresencePipeline(TARGET).run(rows)

        assert len(result.sessions) == 2
        assert len(result.filtered_sessions) == 1
        assert result.records[0].total_duration == timedelta(hours=2)
        assert result.target_date == TARGET

    def test_policy_and_grouping_accept_strings(self):
        pipeline = PresencePipeline(TARGET, grouping="user_id", policy="isolate_subject")
        assert pipeline.grouping == GroupingKey.USER_ID
        assert pipeline.policy == FailurePolicy.ISOLATE_SUBJECT

    def test_user_id_grouping_splits_shared_names(self):
        rows = [
            record("Sam", ACTIVE, "2024-08-06T03:00:00Z", user_id="u1"),
            record("Sam", ACTIVE, "2024-08-06T03:05:00Z", user_id="u2"),
            record("Sam", INACTIVE, "2024-08-06T03:20:00Z", user_id="u2"),
            record("Sam", INACTIVE, "2024-08-06T03:10:00Z", user_id="u1"),
        ]
        totals = PresencePipeline(TARGET, grouping=GroupingKey.USER_ID).run(rows).totals

        assert totals[("Sam", "u1")].total_duration == timedelta(minutes=10)
        assert totals[("Sam", "u2")].total_duration == timedelta(minutes=15)
