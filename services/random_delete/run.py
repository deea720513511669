"""Entry point for the random delete service."""
from __future__ import annotations

import math
import random
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Sequence

from lib.airtable_client import AirtableRecordClient
from lib.config import Settings
from utils.errors import NoRecordsError
from utils.logging import get_logger

logger = get_logger(__name__)

LIST_RECORDS_LIMIT = 5

ClientFactory = Callable[[Settings], AirtableRecordClient]


def utc_timestamp() -> str:
    """ISO-8601 UTC timestamp with millisecond precision."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def pick_random_index(count: int, rng: Optional[random.Random] = None) -> int:
    """Uniform index over [0, count): floor(random() * count)."""
    if count <= 0:
        raise ValueError("count must be positive")
    source = rng or random
    return math.floor(source.random() * count)


def pick_random_record(records: Sequence[Dict[str, Any]], rng: Optional[random.Random] = None) -> Dict[str, Any]:
    return records[pick_random_index(len(records), rng)]


def _fetch_candidates(client: AirtableRecordClient, settings: Settings) -> List[Dict[str, Any]]:
    if settings.follow_pagination:
        return client.all_records()
    return client.first_page()


def list_records(
    settings: Settings,
    client_factory: ClientFactory = AirtableRecordClient.from_settings,
) -> Dict[str, Any]:
    """
    List up to five records from the configured table without modifying it.

    Raises:
        ConfigError: If the token or base id is missing (no request is made).
        AirtableError: If the Airtable request fails.
    """
    settings.require_token()
    settings.require_base_id()

    client = client_factory(settings)
    records = client.first_page(max_records=LIST_RECORDS_LIMIT)
    return {
        "totalRecords": len(records),
        "records": records,
        "table": settings.table_name,
    }


def delete_random_record(
    settings: Settings,
    client_factory: ClientFactory = AirtableRecordClient.from_settings,
    rng: Optional[random.Random] = None,
) -> Dict[str, Any]:
    """
    Delete one record chosen uniformly at random from the configured table.

    Only the first page of records is eligible unless
    ``settings.follow_pagination`` is enabled.

    Args:
        settings: Service settings.
        client_factory: Builds the Airtable client; called only after the
            credentials have been validated.
        rng: Random source; defaults to the module-level generator.

    Returns:
        The success payload describing the deleted record.

    Raises:
        ConfigError: If the token or base id is missing (no request is made).
        NoRecordsError: If the table returned no records (nothing is deleted).
        AirtableError: If fetching or deleting fails upstream.
    """
    settings.require_token()
    settings.require_base_id()

    client = client_factory(settings)

    logger.info("Fetching records from table: %s", settings.table_name)
    records = _fetch_candidates(client, settings)
    if not records:
        raise NoRecordsError(settings.table_name)

    record = pick_random_record(records, rng)
    logger.info("Deleting record: %s", record["id"])
    client.delete(record["id"])
    logger.info("Successfully deleted record: %s", record["id"])

    return {
        "success": True,
        "message": "Random record deleted successfully",
        "deletedRecord": {
            "id": record["id"],
            "createdTime": record["createdTime"],
            "fields": record["fields"],
        },
        "totalRecordsBeforeDeletion": len(records),
        "timestamp": utc_timestamp(),
    }
