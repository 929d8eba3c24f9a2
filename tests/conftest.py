from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import pytest

from query_gateway import QueryGateway
from query_gateway.core.models import FindSpec, TimeWindow


def utc(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


class FakeStoreExecutor:
    """In-memory IStoreExecutor that records every find spec it receives."""

    def __init__(self, rows: Optional[Dict[str, List[Dict[str, Any]]]] = None, error=None):
        self.rows = rows or {}
        self.error = error
        self.calls: List[tuple] = []

    def find(self, collection: str, spec: FindSpec) -> List[Dict[str, Any]]:
        self.calls.append((collection, spec))
        if self.error is not None:
            raise self.error
        return list(self.rows.get(collection, []))

    def ping(self) -> None:
        if self.error is not None:
            raise self.error


class FakeSchemaProbe:
    """In-memory ISchemaProbe."""

    def __init__(self, collections=None, tags=None, distinct=None, error_on=None):
        self.collections = collections or []
        self.tags = tags or {}
        self.distinct = distinct or {}
        self.error_on = error_on or {}
        self.distinct_calls: List[tuple] = []

    def list_collections(self) -> List[Dict[str, Any]]:
        if "list" in self.error_on:
            raise self.error_on["list"]
        return list(self.collections)

    def latest_tags(self, collection: str):
        if ("tags", collection) in self.error_on:
            raise self.error_on[("tags", collection)]
        return self.tags.get(collection)

    def distinct_values(self, collection: str, field_path: str) -> List[Any]:
        self.distinct_calls.append((collection, field_path))
        if collection in self.error_on:
            raise self.error_on[collection]
        return list(self.distinct.get((collection, field_path), []))


@pytest.fixture
def window() -> TimeWindow:
    return TimeWindow(start=utc(2024, 1, 1), end=utc(2024, 1, 2))


@pytest.fixture
def cpu_rows() -> List[Dict[str, Any]]:
    return [
        {"timestamp": utc(2024, 1, 1, 10), "cpu": 5},
        {"timestamp": utc(2024, 1, 1, 11), "cpu": 7},
    ]


@pytest.fixture
def store(cpu_rows) -> FakeStoreExecutor:
    return FakeStoreExecutor(rows={"cpu": cpu_rows})


@pytest.fixture
def probe() -> FakeSchemaProbe:
    return FakeSchemaProbe(
        collections=[
            {"name": "cpu", "type": "timeseries"},
            {"name": "system.views", "type": "collection"},
            {"name": "disk", "type": "timeseries"},
        ],
        tags={"cpu": {"host": "alpha", "cpu": "cpu0"}},
        distinct={
            ("cpu", "tags.host"): ["alpha", "beta"],
            ("cpu", "tags.cpu"): ["cpu0", 3, {"cpu1": "x"}, ["cpu2"]],
        },
    )


@pytest.fixture
def gateway(store, probe) -> QueryGateway:
    return QueryGateway(store_executor=store, schema_probe=probe)
