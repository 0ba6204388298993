# ==============================================================================
# CSV Repository Implementation
# ==============================================================================
"""
Reads voice-channel activity from a CSV export of the activity table.

The file must have a header row with the table's column names. Useful for
re-running a report offline against a dump.
"""

import csv
import logging
from datetime import date
from pathlib import Path

from voicetime.base.repositories import ActivityRepository
from voicetime.core.errors import ParseError
from voicetime.core.models import ActivityRecord
from voicetime.core.normalizer import parse_timestamp

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = {"user_id", "display_name", "create_time", "update_time", "active"}


def _optional_int(value: str | None) -> int | None:
    if value is None or value.strip() == "":
        return None
    return int(value)


class CsvActivityRepository(ActivityRepository):
    """
    CSV implementation of ActivityRepository.

    Rows whose create_time falls on another UTC day are skipped. Rows whose
    create_time cannot be parsed are kept so the normalizer reports them.
    """

    def __init__(self, path: Path | str):
        self._path = Path(path)
        self._rows: list[dict] | None = None

    @property
    def path(self) -> Path:
        return self._path

    def connect(self) -> None:
        """Load the CSV file into memory."""
        with open(self._path, newline="", encoding="utf-8") as f:
            reader = csv.DictReader(f)
            missing = REQUIRED_COLUMNS - set(reader.fieldnames or [])
            if missing:
                raise ValueError(
                    f"{self._path} is missing required columns: {', '.join(sorted(missing))}"
                )
            self._rows = list(reader)
        logger.info("Loaded %d rows from %s", len(self._rows), self._path)

    def fetch_for_day(self, day: date, clan_id: int | None = None) -> list[ActivityRecord]:
        if self._rows is None:
            raise RuntimeError("CSV file not loaded. Call connect() first.")

        records = []
        for row in self._rows:
            record = ActivityRecord(
                id=_optional_int(row.get("id")),
                user_id=row["user_id"],
                clan_id=_optional_int(row.get("clan_id")),
                channel_id=_optional_int(row.get("channel_id")),
                display_name=row["display_name"],
                create_time=row["create_time"],
                update_time=row["update_time"],
                active=int(row["active"]),
            )
            if clan_id is not None and record.clan_id != clan_id:
                continue
            if not self._created_on(record, day):
                continue
            records.append(record)

        logger.info("Selected %d of %d rows for %s", len(records), len(self._rows), day.isoformat())
        return records

    @staticmethod
    def _created_on(record: ActivityRecord, day: date) -> bool:
        try:
            return parse_timestamp(record.create_time).date() == day
        except ParseError:
            return True

    def close(self) -> None:
        self._rows = None
