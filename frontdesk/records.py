"""HTTP client for the backend's list of submitted records."""

from __future__ import annotations

import logging
from typing import Any, Mapping

import requests

from frontdesk.config import REQUEST_TIMEOUT
from frontdesk.models import StoredRecord

logger = logging.getLogger(__name__)

RECORDS_PATH = "/registros"

# Columns shown per record; extra times are kept but not displayed.
MAX_TIME_COLUMNS = 10


def record_from_wire(data: Mapping[str, Any]) -> StoredRecord:
    times = data.get("times")
    if not isinstance(times, (list, tuple)):
        times = ()
    observation = data.get("observacion")
    return StoredRecord(
        id=str(data["id"]),
        times=tuple(str(t) if t else None for t in times),
        observation=observation if isinstance(observation, str) else "",
    )


class RecordsClient:
    """Client for the ``/registros`` REST endpoints."""

    def __init__(self, base_url: str, http: requests.Session | None = None, timeout: float = REQUEST_TIMEOUT):
        """
        Initialize the records client.

        Args:
            base_url: Backend URL, the same one the capture screens connect to
            http: Session to send requests with; a new one by default
            timeout: Seconds before a request is abandoned
        """
        self.base_url = base_url.rstrip("/")
        self.http = http or requests.Session()
        self.timeout = timeout

    def _url(self, *parts: str) -> str:
        return "/".join([self.base_url + RECORDS_PATH, *parts])

    def list_records(self) -> list[StoredRecord]:
        """
        Fetch every stored record.

        Entries without an id are skipped.

        Raises:
            requests.RequestException: when the backend cannot be reached or answers with an error
        """
        response = self.http.get(self._url(), timeout=self.timeout)
        response.raise_for_status()
        payload = response.json()
        if not isinstance(payload, list):
            logger.warning("unexpected records payload type=%s", type(payload).__name__)
            return []

        records = []
        for entry in payload:
            if not isinstance(entry, Mapping) or entry.get("id") in (None, ""):
                logger.debug("skipping record without id: %r", entry)
                continue
            records.append(record_from_wire(entry))
        logger.debug("fetched %d records", len(records))
        return records

    def delete_record(self, record_id: str) -> None:
        """Delete one record; raises ``requests.RequestException`` on failure."""
        response = self.http.delete(self._url(record_id), timeout=self.timeout)
        response.raise_for_status()
        logger.info("deleted record id=%s", record_id)
