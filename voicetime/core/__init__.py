# ==============================================================================
# Core Domain Logic
# ==============================================================================
"""
Pure domain logic with no external dependencies.

This module contains:
- Domain models (ActivityRecord, ActivityEvent, Session, AggregatedTime)
- Event normalization, session reconstruction, nested-session filtering
- Fixed-window aggregation and report formatting

All code here is I/O free and easily unit-testable.
"""

from voicetime.core.aggregator import AggregationWindow, WindowAggregator
from voicetime.core.errors import (
    ConfigurationError,
    ParseError,
    ReportDeliveryError,
    VoicetimeError,
)
from voicetime.core.formatting import DurationFormat, build_payload, format_duration
from voicetime.core.models import (
    ActivityEvent,
    ActivityRecord,
    ActivityState,
    AggregatedTime,
    FailurePolicy,
    GroupingKey,
    Session,
)
from voicetime.core.normalizer import NormalizedBatch, normalize_events, parse_timestamp
from voicetime.core.pipeline import PipelineResult, PresencePipeline, compute_presence
from voicetime.core.session_filter import filter_nested_sessions
from voicetime.core.session_processor import SessionReconstructor

__all__ = [
    "ActivityEvent",
    "ActivityRecord",
    "ActivityState",
    "AggregatedTime",
    "AggregationWindow",
    "ConfigurationError",
    "DurationFormat",
    "FailurePolicy",
    "GroupingKey",
    "NormalizedBatch",
    "ParseError",
    "PipelineResult",
    "PresencePipeline",
    "ReportDeliveryError",
    "Session",
    "SessionReconstructor",
    "VoicetimeError",
    "WindowAggregator",
    "build_payload",
    "compute_presence",
    "filter_nested_sessions",
    "format_duration",
    "normalize_events",
    "parse_timestamp",
]
