"""Airtable client for listing and deleting records in a single table."""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from pyairtable import Api

from lib.config import Settings
from utils.errors import (
    AirtableAccessError,
    AirtableAuthError,
    AirtableError,
    TableNotFoundError,
)
from utils.logging import log_error


def _error_details(exc: Exception) -> Any:
    """Best-effort detail: the upstream JSON error body, else the message."""
    response = getattr(exc, "response", None)
    if response is not None:
        try:
            return response.json()
        except ValueError:
            text = getattr(response, "text", "")
            if text:
                return text
    return str(exc)


def classify_error(exc: Exception) -> AirtableError:
    """Map a requests/pyairtable failure onto the AirtableError hierarchy.

    Anything without an HTTP response (network errors, malformed bodies) is an
    unclassified AirtableError.
    """
    response = getattr(exc, "response", None)
    status_code = getattr(response, "status_code", None)
    details = _error_details(exc)
    message = str(exc)

    if status_code == 401:
        return AirtableAuthError(message, status_code=status_code, details=details)
    if status_code == 403:
        return AirtableAccessError(message, status_code=status_code, details=details)
    if status_code == 404:
        return TableNotFoundError(message, status_code=status_code, details=details)
    return AirtableError(message, status_code=status_code, details=details)


def to_record(record: Dict[str, Any]) -> Dict[str, Any]:
    """Keep only the id, createdTime and fields of an Airtable record."""
    return {
        "id": record.get("id"),
        "createdTime": record.get("createdTime"),
        "fields": record.get("fields", {}),
    }


class AirtableRecordClient:
    """Thin wrapper over a pyairtable Table used by the random delete service."""

    def __init__(self, token: str, base_id: str, table_name: str):
        # No retry strategy: failures surface to the caller on the first attempt.
        self.api = Api(token, retry_strategy=None)
        self.table = self.api.table(base_id, table_name)
        self.table_name = table_name

    @classmethod
    def from_settings(cls, settings: Settings) -> "AirtableRecordClient":
        return cls(settings.require_token(), settings.require_base_id(), settings.table_name)

    def _upstream_failure(self, method_name: str, exc: Exception) -> AirtableError:
        log_error(
            f"Airtable {self.table_name}.{method_name}",
            exc,
            {"details": _error_details(exc)},
        )
        return classify_error(exc)

    def _safe_table_call(self, method_name: str, *args, **kwargs):
        """Invoke a pyairtable method and log failures with table context."""
        method = getattr(self.table, method_name)
        try:
            return method(*args, **kwargs)
        except Exception as exc:
            raise self._upstream_failure(method_name, exc) from exc

    def first_page(self, max_records: Optional[int] = None) -> List[Dict[str, Any]]:
        """
        Fetch the first page of records only.

        Args:
            max_records: Optional cap, sent as the ``maxRecords`` query parameter.

        Returns:
            Records in the form {"id", "createdTime", "fields"}.
        """
        options: Dict[str, Any] = {}
        if max_records is not None:
            options["max_records"] = max_records

        # iterate() is lazy; only the first page is requested.
        try:
            page = next(iter(self.table.iterate(**options)), [])
            return [to_record(record) for record in page]
        except Exception as exc:
            raise self._upstream_failure("iterate", exc) from exc

    def all_records(self) -> List[Dict[str, Any]]:
        """Fetch every record, following continuation offsets."""
        try:
            return [to_record(record) for record in self.table.all()]
        except Exception as exc:
            raise self._upstream_failure("all", exc) from exc

    def delete(self, record_id: str) -> Dict[str, Any]:
        """Delete one record by id."""
        return self._safe_table_call("delete", record_id)
