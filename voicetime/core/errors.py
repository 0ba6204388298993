# ==============================================================================
# Domain Errors
# ==============================================================================
"""
Exception types raised by the presence pipeline.

ParseError and ConfigurationError also subclass ValueError so callers that
only care about "bad input" can catch them together.
"""


class VoicetimeError(Exception):
    """Base class for all voicetime errors."""


class ParseError(VoicetimeError, ValueError):
    """A timestamp on an activity event could not be parsed."""

    def __init__(
        self,
        value: object,
        *,
        field: str | None = None,
        event_id: int | None = None,
        subject_key: str | None = None,
    ):
        self.value = value
        self.field = field
        self.event_id = event_id
        self.subject_key = subject_key

        where = []
        if event_id is not None:
            where.append(f"event {event_id}")
        if field:
            where.append(f"field '{field}'")
        location = f" ({', '.join(where)})" if where else ""
        super().__init__(f"Invalid timestamp {value!r}{location}")


class ConfigurationError(VoicetimeError, ValueError):
    """Aggregation parameters are missing or invalid."""


class ReportDeliveryError(VoicetimeError):
    """The report API rejected or failed to accept the aggregated report."""

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)
