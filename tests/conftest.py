# ==============================================================================
# Shared Test Fixtures
# ==============================================================================
"""
Pytest fixtures and builders shared across all test modules.

Provides:
- ts(): RFC 3339 string -> aware UTC datetime
- record()/event()/session(): terse builders for domain models
- settings: a Settings instance that ignores the host environment
"""

from datetime import datetime, timezone

import pytest

from voicetime.core.models import ActivityEvent, ActivityRecord, ActivityState, Session
from voicetime.utils.config import (
    ActivitySettings,
    AggregationSettings,
    ApiSettings,
    PostgresSettings,
    Settings,
    get_settings,
)

ACTIVE = int(ActivityState.ACTIVE)
INACTIVE = int(ActivityState.INACTIVE)


def ts(value: str) -> datetime:
    """Parse '2024-08-06T10:00:00Z' into an aware UTC datetime."""
    return datetime.fromisoformat(value.replace("Z", "+00:00")).astimezone(timezone.utc)


def record(
    name: str,
    state: int,
    created: str,
    updated: str | None = None,
    user_id: str | None = None,
    record_id: int | None = None,
    clan_id: int | None = 1,
) -> ActivityRecord:
    """Build a raw row; updated defaults to created, user_id to 'g-<name>'."""
    return ActivityRecord(
        id=record_id,
        user_id=user_id or f"g-{name}",
        clan_id=clan_id,
        channel_id=10,
        display_name=name,
        create_time=created,
        update_time=updated or created,
        active=state,
    )


def event(
    name: str,
    state: int,
    created: str,
    updated: str | None = None,
    user_id: str | None = None,
) -> ActivityEvent:
    """Build a normalized event; updated defaults to created."""
    return ActivityEvent(
        subject_key=name,
        user_id=user_id or f"g-{name}",
        created_at=ts(created),
        updated_at=ts(updated or created),
        state=state,
    )


def session(name: str, start: str, end: str, user_id: str | None = None) -> Session:
    return Session(
        subject_key=name,
        user_id=user_id or f"g-{name}",
        start_time=ts(start),
        end_time=ts(end),
    )


@pytest.fixture(autouse=True)
def _clear_settings_cache():
    """Drop cached settings so env changes made by a test take effect."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture()
def settings():
    """Settings with explicit values for every section used by the pipeline."""
    return Settings(
        postgres=PostgresSettings(
            host="db.test",
            port=5432,
            username="tester",
            password="secret",
            database="mezon",
            sslmode="disable",
        ),
        activity=ActivitySettings(table="voice_channel_users", clan_id=None),
        aggregation=AggregationSettings(
            window_start_hours=3,
            window_end_hours=5,
            days_ago=6,
            duration_format="hms",
            failure_policy="fail_fast",
            group_by="display_name",
        ),
        api=ApiSettings(
            server="https://reports.test/api/opentalk",
            security_code="12345678",
            user_agent="voicetime-test",
            timeout_seconds=5,
        ),
        log_level="WARNING",
    )
