# ==============================================================================
# Report API Sink
# ==============================================================================
"""
Delivers aggregated presence to the report API over HTTP.

The payload is a JSON array with one object per user:

    [{"fullName": "...", "googleId": "...", "totalTime": "02:00:00", "date": "2024-08-06"}]

Includes light retry logic (3 attempts, ~7 seconds) for connection errors
and timeouts. Any non-200 answer is reported as ReportDeliveryError.
"""

import logging

import requests

from voicetime.base.repositories import ReportSink
from voicetime.core.errors import ConfigurationError, ReportDeliveryError
from voicetime.core.formatting import DurationFormat, build_payload
from voicetime.core.models import AggregatedTime
from voicetime.utils.config import Settings, get_settings
from voicetime.utils.retry import HTTP_RETRY_EXCEPTIONS, retry_light

logger = logging.getLogger(__name__)


class ApiReportSink(ReportSink):
    """
    POSTs aggregated records to the configured report endpoint.

    Args:
        settings: Application settings. If None, uses get_settings().
        fmt: Duration rendering. If None, uses the aggregation settings.
        session: Optional requests.Session (mainly for tests)
    """

    def __init__(
        self,
        settings: Settings | None = None,
        fmt: DurationFormat | None = None,
        session: requests.Session | None = None,
    ):
        self._settings = settings or get_settings()
        if not self._settings.api.is_configured:
            raise ConfigurationError("Report API endpoint not set (API_SERVER)")
        self._url = self._settings.api.server
        self._fmt = fmt or self._settings.aggregation.format
        self._http = session or requests.Session()

    @property
    def url(self) -> str:
        return self._url

    @property
    def headers(self) -> dict[str, str]:
        api = self._settings.api
        return {
            "User-Agent": api.user_agent,
            "Content-Type": "application/json",
            "securityCode": api.security_code,
        }

    @retry_light(HTTP_RETRY_EXCEPTIONS, logger)
    def _post(self, payload: list[dict]) -> requests.Response:
        return self._http.post(
            self._url,
            json=payload,
            headers=self.headers,
            timeout=self._settings.api.timeout_seconds,
        )

    def send(self, records: list[AggregatedTime]) -> int:
        """
        POST the records as a JSON array.

        Returns:
            Count of records delivered

        Raises:
            ReportDeliveryError: If the API answers with a non-200 status
            requests.exceptions.RequestException: If the request fails after retries
        """
        payload = build_payload(records, self._fmt)
        response = self._post(payload)
        if response.status_code != 200:
            raise ReportDeliveryError(
                f"Report API returned status {response.status_code}",
                status_code=response.status_code,
            )
        logger.info("Delivered %d records to %s", len(payload), self._url)
        return len(payload)
