"""
Storage ports and adapters for response listings.

The listing service talks to a document store or a relational store
through the two protocols below.  The adapters wrap a motor collection
and a SQLAlchemy async engine; I/O errors propagate unchanged.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from .model import FormResponse

if TYPE_CHECKING:
    from collections.abc import Sequence

    from motor.motor_asyncio import AsyncIOMotorCollection
    from sqlalchemy.ext.asyncio import AsyncEngine


@runtime_checkable
class DocumentResponseStore(Protocol):
    """Document store port: compiled Mongo filter in, records out."""

    async def find(
        self,
        query: dict[str, Any],
        sort: Sequence[tuple[str, int]] | None = None,
        skip: int = 0,
        limit: int | None = None,
    ) -> list[FormResponse]: ...

    async def count(self, query: dict[str, Any]) -> int: ...


@runtime_checkable
class RelationalResponseStore(Protocol):
    """Relational store port: SQL with positional ``$n`` parameters."""

    async def fetch_all(
        self, sql: str, params: Sequence[Any]
    ) -> list[FormResponse]: ...

    async def fetch_value(self, sql: str, params: Sequence[Any]) -> Any: ...


class MotorResponseStore:
    """``DocumentResponseStore`` over a motor collection of responses."""

    def __init__(self, collection: AsyncIOMotorCollection[Any]) -> None:
        self._collection = collection

    async def find(
        self,
        query: dict[str, Any],
        sort: Sequence[tuple[str, int]] | None = None,
        skip: int = 0,
        limit: int | None = None,
    ) -> list[FormResponse]:
        cursor = self._collection.find(query)
        if sort:
            cursor = cursor.sort(list(sort))
        if skip:
            cursor = cursor.skip(skip)
        if limit is not None:
            cursor = cursor.limit(limit)

        records = []
        async for doc in cursor:
            records.append(FormResponse.from_document(doc))
        return records

    async def count(self, query: dict[str, Any]) -> int:
        return int(await self._collection.count_documents(query))


class SQLAlchemyResponseStore:
    """
    ``RelationalResponseStore`` over a SQLAlchemy ``AsyncEngine``.

    Statements are sent with ``exec_driver_sql`` so the ``$n`` placeholders
    reach the driver untouched (asyncpg's native paramstyle).
    """

    def __init__(self, engine: AsyncEngine) -> None:
        self._engine = engine

    async def fetch_all(self, sql: str, params: Sequence[Any]) -> list[FormResponse]:
        async with self._engine.connect() as conn:
            result = await conn.exec_driver_sql(sql, tuple(params))
            rows = result.mappings().all()
        return [FormResponse.from_row(row) for row in rows]

    async def fetch_value(self, sql: str, params: Sequence[Any]) -> Any:
        async with self._engine.connect() as conn:
            result = await conn.exec_driver_sql(sql, tuple(params))
            return result.scalar()
