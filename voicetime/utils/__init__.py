# ==============================================================================
# Voicetime Utilities
# ==============================================================================
"""
Shared utilities for the voicetime pipeline.

This module exports configuration and models for use throughout the pipeline.
"""

from voicetime.core.models import (
    ActivityEvent,
    ActivityRecord,
    AggregatedTime,
    Session,
)
from voicetime.utils.config import (
    ActivitySettings,
    AggregationSettings,
    ApiSettings,
    PostgresSettings,
    Settings,
    get_settings,
)

__all__ = [
    # Config
    "ActivitySettings",
    "AggregationSettings",
    "ApiSettings",
    "PostgresSettings",
    "Settings",
    "get_settings",
    # Models
    "ActivityEvent",
    "ActivityRecord",
    "AggregatedTime",
    "Session",
]
