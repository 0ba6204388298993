# ==============================================================================
# Repository and Sink Abstract Base Classes
# ==============================================================================
"""
ABCs for reading activity rows and delivering aggregated reports.

These define the "what" (fetch a day of activity, deliver a report) not the
"how" (SQL query, CSV file, HTTP POST). Concrete implementations in
infrastructure/ handle the specifics.

Includes:
- ActivityRepository: Voice-channel activity source
- ReportSink: Aggregated presence destination
"""

from abc import ABC, abstractmethod
from datetime import date

from voicetime.core.models import ActivityRecord, AggregatedTime


class ActivityRepository(ABC):
    """Source of raw voice-channel activity rows."""

    @abstractmethod
    def connect(self) -> None:
        """Establish connection to the data store."""
        ...

    @abstractmethod
    def fetch_for_day(self, day: date, clan_id: int | None = None) -> list[ActivityRecord]:
        """
        Read every activity row created on the given UTC day.

        Args:
            day: Calendar day (UTC)
            clan_id: Restrict to one clan, or None for all clans

        Returns:
            Rows in storage order
        """
        ...

    @abstractmethod
    def close(self) -> None:
        """Close connection and release resources."""
        ...

    def __enter__(self):
        self.connect()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False


class ReportSink(ABC):
    """Destination for aggregated presence reports."""

    @abstractmethod
    def send(self, records: list[AggregatedTime]) -> int:
        """
        Deliver aggregated records.

        Args:
            records: Aggregated presence, one per user

        Returns:
            Count of records delivered
        """
        ...
