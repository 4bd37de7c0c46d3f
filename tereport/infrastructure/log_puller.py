# ==============================================================================
# Event Sources
# ==============================================================================
"""
EventSource implementations.

- LogPullerEventSource: posts a signed portal report request to the
  log-puller and returns the events it answers with
- FileEventSource: reads a JSON array of raw events from disk
"""

import json
import logging
from pathlib import Path
from typing import Optional

import requests

from tereport.base import EventSource
from tereport.exceptions import EventSourceError
from tereport.utils.config import LogPullerSettings, get_settings
from tereport.utils.retry import REQUESTS_RETRY_EXCEPTIONS, retry_standard
from tereport.utils.versions import get_user_agent

logger = logging.getLogger(__name__)


def _expect_event_list(data, origin: str) -> list[dict]:
    if not isinstance(data, list):
        raise EventSourceError(f"Expected a JSON array of events from {origin}")
    return data


class LogPullerEventSource(EventSource):
    """
    Pulls a log from the log-puller.

    Requests from production portal domains go to the production log-puller;
    everything else goes to staging.
    """

    def __init__(
        self,
        request_json: str,
        signature: str,
        settings: Optional[LogPullerSettings] = None,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize the source.

        Args:
            request_json: Portal report request (JSON text, as signed)
            signature: Portal signature of request_json
            settings: Log-puller settings. If None, uses application settings.
            session: requests session to use. If None, module-level requests is used.
        """
        self._request_json = request_json
        self._signature = signature
        self._settings = settings or get_settings().log_puller
        self._http = session or requests

    @property
    def url(self) -> str:
        """Log-puller endpoint chosen by the request's portal domain."""
        try:
            domain = json.loads(self._request_json).get("domain")
        except (json.JSONDecodeError, AttributeError) as e:
            raise EventSourceError(f"Invalid report request JSON: {e}") from e
        if domain in self._settings.production_domains:
            return self._settings.production_url
        return self._settings.staging_url

    @retry_standard(REQUESTS_RETRY_EXCEPTIONS, logger)
    def _post(self, url: str) -> requests.Response:
        return self._http.post(
            url,
            data={
                "json": self._request_json,
                "signature": self._signature,
                "format": "json",
                "explode": "no",
                "download": "Download Logs",
            },
            headers={"User-Agent": get_user_agent()},
            timeout=self._settings.timeout_seconds,
        )

    def get_events(self) -> list[dict]:
        url = self.url
        logger.info("Pulling event log from %s", url)
        try:
            response = self._post(url)
            response.raise_for_status()
        except requests.exceptions.HTTPError as e:
            status = e.response.status_code if e.response is not None else None
            raise EventSourceError(
                f"Log-puller returned {status} for {url}", url=url, status_code=status
            ) from e
        except requests.exceptions.RequestException as e:
            raise EventSourceError(f"Transport error pulling log from {url}: {e}", url=url) from e

        try:
            data = response.json()
        except ValueError as e:
            raise EventSourceError(
                f"Invalid JSON from {url}", url=url, status_code=response.status_code
            ) from e

        events = _expect_event_list(data, url)
        logger.info("Pulled %d raw event(s)", len(events))
        return events


class FileEventSource(EventSource):
    """Reads raw events from a JSON file."""

    def __init__(self, path: Path):
        self._path = Path(path)

    def get_events(self) -> list[dict]:
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise EventSourceError(f"Cannot read event log {self._path}: {e}") from e
        events = _expect_event_list(data, str(self._path))
        logger.info("Read %d raw event(s) from %s", len(events), self._path)
        return events
