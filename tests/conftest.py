"""Shared fixtures: fake Airtable client, settings and an app under test."""

from __future__ import annotations

import json
from typing import Any, Dict, List, Optional

import pytest
import requests
from fastapi.testclient import TestClient

from apps.api.main import create_app, get_client_factory, get_rng
from lib.airtable_client import classify_error
from lib.config import Settings


def make_records(count: int) -> List[Dict[str, Any]]:
    return [
        {
            "id": f"rec{index:014d}",
            "createdTime": f"2024-01-{index + 1:02d}T00:00:00.000Z",
            "fields": {"Name": f"Response {index}", "Score": index},
        }
        for index in range(count)
    ]


def http_error(status_code: int, body: Optional[Dict[str, Any]] = None) -> requests.HTTPError:
    response = requests.Response()
    response.status_code = status_code
    response._content = json.dumps(body or {}).encode()
    return requests.HTTPError(f"{status_code} Client Error", response=response)


class FakeRecordClient:
    """In-memory stand-in for AirtableRecordClient that records every call."""

    def __init__(self, records=None, fetch_error=None, delete_error=None, unexpected_error=None):
        self.records = list(records or [])
        self.fetch_error = fetch_error
        # Raised as-is, bypassing the client's own error classification.
        self.unexpected_error = unexpected_error
        self.delete_error = delete_error
        self.fetch_calls: List[tuple] = []
        self.deleted: List[str] = []

    def _fetch(self, method: str, max_records: Optional[int] = None):
        self.fetch_calls.append((method, max_records))
        if self.unexpected_error is not None:
            raise self.unexpected_error
        if self.fetch_error is not None:
            raise classify_error(self.fetch_error)
        records = self.records if max_records is None else self.records[:max_records]
        return [dict(record) for record in records]

    def first_page(self, max_records: Optional[int] = None):
        return self._fetch("first_page", max_records)

    def all_records(self):
        return self._fetch("all_records")

    def delete(self, record_id: str):
        if self.delete_error is not None:
            raise classify_error(self.delete_error)
        self.deleted.append(record_id)
        return {"id": record_id, "deleted": True}

    @property
    def network_calls(self) -> int:
        return len(self.fetch_calls) + len(self.deleted)


class FixedRandom:
    """Random source that always returns the same draw."""

    def __init__(self, value: float):
        self.value = value

    def random(self) -> float:
        return self.value


class RecordingFactory:
    def __init__(self, client: FakeRecordClient):
        self.client = client
        self.calls = 0

    def __call__(self, settings: Settings) -> FakeRecordClient:
        self.calls += 1
        return self.client


@pytest.fixture
def settings() -> Settings:
    return Settings(airtable_token="patTEST", airtable_base_id="appTEST", table_name="responses")


@pytest.fixture
def fake_client() -> FakeRecordClient:
    return FakeRecordClient(records=make_records(3))


@pytest.fixture
def factory(fake_client) -> RecordingFactory:
    return RecordingFactory(fake_client)


@pytest.fixture
def build_client():
    """Return a builder for a TestClient wired to the given settings, factory and rng."""

    def _build(settings: Settings, factory: RecordingFactory, rng=None) -> TestClient:
        app = create_app(settings)
        app.dependency_overrides[get_client_factory] = lambda: factory
        app.dependency_overrides[get_rng] = lambda: rng
        return TestClient(app)

    return _build
