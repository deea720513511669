"""Custom exceptions for the random delete service."""

from typing import Any, Optional


class RandomDeleteError(Exception):
    """Base exception for the random delete service."""

    pass


class ConfigError(RandomDeleteError):
    """A required configuration value is missing."""

    pass


class NoRecordsError(RandomDeleteError):
    """The target table returned no records."""

    def __init__(self, table: str):
        super().__init__(f"No records found in table {table}")
        self.table = table


class AirtableError(RandomDeleteError):
    """Errors related to Airtable operations."""

    def __init__(self, message: str, *, status_code: Optional[int] = None, details: Any = None):
        super().__init__(message)
        self.status_code = status_code
        self.details = details if details is not None else message


class AirtableAuthError(AirtableError):
    """Airtable rejected the token (HTTP 401)."""

    pass


class AirtableAccessError(AirtableError):
    """The token cannot access the base or lacks scopes (HTTP 403)."""

    pass


class TableNotFoundError(AirtableError):
    """Airtable could not find the table or record (HTTP 404)."""

    pass
