# ==============================================================================
# PostgreSQL Repository Implementation
# ==============================================================================
"""
PostgreSQL implementation of the activity repository.

Provides:
- PostgreSQLActivityRepository: Read one UTC day of voice-channel rows
"""

import logging
from datetime import date, datetime, time, timedelta, timezone

import psycopg2
from psycopg2 import sql
from psycopg2.extras import RealDictCursor

from voicetime.base.repositories import ActivityRepository
from voicetime.core.errors import ConfigurationError
from voicetime.core.models import ActivityRecord
from voicetime.utils.config import Settings, get_settings
from voicetime.utils.retry import POSTGRES_RETRY_EXCEPTIONS, retry_standard

logger = logging.getLogger(__name__)

# Connection timeout
CONNECT_TIMEOUT = 10

# Columns of the activity table, in the order rows are read
ACTIVITY_COLUMNS = (
    "id",
    "user_id",
    "clan_id",
    "channel_id",
    "display_name",
    "create_time",
    "update_time",
    "active",
)

RFC3339_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


def _add_connect_timeout(conn_string: str) -> str:
    """Add connect_timeout to connection string if not present."""
    if "connect_timeout" not in conn_string:
        separator = "&" if "?" in conn_string else "?"
        return f"{conn_string}{separator}connect_timeout={CONNECT_TIMEOUT}"
    return conn_string


def day_bounds(day: date) -> tuple[str, str]:
    """
    First and last second of a UTC day as RFC 3339 strings.

    Both bounds are inclusive, to be used with BETWEEN.
    """
    start = datetime.combine(day, time(0), tzinfo=timezone.utc)
    end = start + timedelta(hours=24) - timedelta(seconds=1)
    return start.strftime(RFC3339_FORMAT), end.strftime(RFC3339_FORMAT)


def table_identifier(table: str) -> sql.Composable:
    """Quote a possibly schema-qualified table name."""
    return sql.Identifier(*table.split("."))


class PostgreSQLActivityRepository(ActivityRepository):
    """
    PostgreSQL implementation of ActivityRepository.

    Rows are selected by create_time within the target UTC day, optionally
    restricted to one clan. Day bounds are sent as RFC 3339 strings so the
    query works whether create_time is stored as text or as a timestamp.
    """

    def __init__(self, settings: Settings | None = None):
        """
        Initialize the activity repository.

        Args:
            settings: Application settings. If None, uses get_settings().

        Raises:
            ConfigurationError: If no activity table is configured
        """
        self._settings = settings or get_settings()
        self._conn: psycopg2.extensions.connection | None = None
        self._table = self._settings.activity.table
        if not self._table:
            raise ConfigurationError("Activity table name not set (VOICE_CHANNEL_USER_TABLE)")

    @property
    def table(self) -> str:
        """Get the activity table name."""
        return self._table

    @retry_standard(POSTGRES_RETRY_EXCEPTIONS, logger)
    def connect(self) -> None:
        """
        Establish connection to PostgreSQL.

        Retries on connection errors with exponential backoff (10 attempts, ~60 seconds).
        """
        conn_string = _add_connect_timeout(self._settings.postgres.connection_string)
        self._conn = psycopg2.connect(conn_string)
        logger.info("PostgreSQLActivityRepository connected (table=%s)", self._table)

    def build_query(self, clan_id: int | None = None) -> sql.Composed:
        """Build the SELECT for one day, with an optional clan filter."""
        query = sql.SQL(
            "SELECT {columns} FROM {table} WHERE create_time BETWEEN %s AND %s"
        ).format(
            columns=sql.SQL(", ").join(sql.Identifier(c) for c in ACTIVITY_COLUMNS),
            table=table_identifier(self._table),
        )
        if clan_id is not None:
            query = query + sql.SQL(" AND clan_id = %s")
        return query

    def fetch_for_day(self, day: date, clan_id: int | None = None) -> list[ActivityRecord]:
        """
        Read every activity row created on the given UTC day.

        Args:
            day: Calendar day (UTC)
            clan_id: Restrict to one clan, or None for all clans

        Returns:
            ActivityRecords in storage order
        """
        if self._conn is None:
            raise RuntimeError("PostgreSQL connection not established. Call connect() first.")

        start, end = day_bounds(day)
        params: list = [start, end]
        if clan_id is not None:
            params.append(clan_id)
        logger.debug("Fetching activity between %s and %s (clan=%s)", start, end, clan_id)

        with self._conn.cursor(cursor_factory=RealDictCursor) as cur:
            cur.execute(self.build_query(clan_id), params)
            rows = cur.fetchall()

        records = [self._to_record(row) for row in rows]
        logger.info("Fetched %d activity rows for %s", len(records), day.isoformat())
        return records

    @staticmethod
    def _to_record(row: dict) -> ActivityRecord:
        return ActivityRecord(
            id=row["id"],
            user_id=str(row["user_id"]),
            clan_id=row["clan_id"],
            channel_id=row["channel_id"],
            display_name=row["display_name"],
            create_time=row["create_time"],
            update_time=row["update_time"],
            active=row["active"],
        )

    def close(self) -> None:
        """Close connection and release resources."""
        if self._conn:
            try:
                self._conn.close()
                logger.info("PostgreSQLActivityRepository connection closed")
            except Exception as e:
                logger.warning("Error closing connection: %s", e)
            finally:
                self._conn = None


def check_postgresql_connection(settings: Settings | None = None) -> bool:
    """Check if PostgreSQL is reachable."""
    settings = settings or get_settings()
    try:
        conn = psycopg2.connect(settings.postgres.connection_string, connect_timeout=5)
    except psycopg2.Error as e:
        logger.debug("PostgreSQL check failed: %s", e)
        return False
    try:
        with conn.cursor() as cur:
            cur.execute("SELECT 1")
        return True
    except psycopg2.Error as e:
        logger.debug("PostgreSQL check failed: %s", e)
        return False
    finally:
        conn.close()
