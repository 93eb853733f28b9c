"""Shared fixtures: a small response dataset and async store fakes."""

from __future__ import annotations

import copy
from contextlib import asynccontextmanager
from typing import Any

import mongomock
import pytest
from dataset import ALL_FORM_IDS, FORM_ID, RESPONSE_DOCUMENTS

from response_filtering.memory import build_default_registry
from response_filtering.model import FormResponse


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers",
        "integration: tests that need a running PostgreSQL container",
    )


class AsyncCursor:
    """Motor-style cursor over a mongomock cursor."""

    def __init__(self, cursor: Any) -> None:
        self._cursor = cursor
        self._iter: Any = None

    def sort(self, keys: Any) -> AsyncCursor:
        self._cursor = self._cursor.sort(keys)
        return self

    def skip(self, n: int) -> AsyncCursor:
        self._cursor = self._cursor.skip(n)
        return self

    def limit(self, n: int) -> AsyncCursor:
        self._cursor = self._cursor.limit(n)
        return self

    def __aiter__(self) -> AsyncCursor:
        self._iter = iter(self._cursor)
        return self

    async def __anext__(self) -> dict[str, Any]:
        try:
            return next(self._iter)
        except StopIteration:
            raise StopAsyncIteration from None


class AsyncCollection:
    """The slice of ``AsyncIOMotorCollection`` used by ``MotorResponseStore``."""

    def __init__(self, collection: Any) -> None:
        self.sync = collection
        self.queries: list[dict[str, Any]] = []

    def find(self, query: dict[str, Any]) -> AsyncCursor:
        self.queries.append(query)
        return AsyncCursor(self.sync.find(query))

    async def count_documents(self, query: dict[str, Any]) -> int:
        return self.sync.count_documents(query)


class FakeResult:
    def __init__(self, rows: list[dict[str, Any]], scalar: Any = None) -> None:
        self._rows = rows
        self._scalar = scalar

    def mappings(self) -> FakeResult:
        return self

    def all(self) -> list[dict[str, Any]]:
        return self._rows

    def scalar(self) -> Any:
        return self._scalar


class FakeConnection:
    def __init__(self, engine: FakeEngine) -> None:
        self._engine = engine

    async def exec_driver_sql(self, sql: str, params: tuple[Any, ...]) -> FakeResult:
        self._engine.executed.append((sql, params))
        if sql.startswith("SELECT COUNT(*)"):
            return FakeResult([], scalar=self._engine.count)
        return FakeResult(self._engine.rows)


class FakeEngine:
    """Records ``exec_driver_sql`` calls; serves canned rows and a count."""

    def __init__(self, rows: list[dict[str, Any]] | None = None, count: int = 0):
        self.rows = rows or []
        self.count = count
        self.executed: list[tuple[str, tuple[Any, ...]]] = []

    @asynccontextmanager
    async def connect(self):
        yield FakeConnection(self)


@pytest.fixture
def registry():
    """Default in-memory operator registry."""
    return build_default_registry()


@pytest.fixture
def documents() -> list[dict[str, Any]]:
    return copy.deepcopy(RESPONSE_DOCUMENTS)


@pytest.fixture
def records(documents) -> list[FormResponse]:
    """The FORM_ID documents as ``FormResponse`` records."""
    return [
        FormResponse.from_document(doc)
        for doc in documents
        if doc["formId"] == FORM_ID
    ]


@pytest.fixture
def mongo_collection(documents):
    """A mongomock collection loaded with the dataset."""
    collection = mongomock.MongoClient().db.responses
    collection.insert_many(documents)
    return collection


@pytest.fixture
def async_collection(mongo_collection) -> AsyncCollection:
    return AsyncCollection(mongo_collection)


@pytest.fixture
def form_id() -> str:
    return FORM_ID


@pytest.fixture
def all_ids() -> set[str]:
    """Ids of every FORM_ID response."""
    return set(ALL_FORM_IDS)


@pytest.fixture
def make_engine():
    """Factory for ``FakeEngine`` instances."""
    return FakeEngine
