"""PostgreSQL container and an empty ``response`` table per test."""

from __future__ import annotations

import pytest

CREATE_TABLE = (
    'CREATE TABLE response (id text PRIMARY KEY, "formId" text NOT NULL, '
    'data jsonb, metadata jsonb, "submittedAt" timestamptz NOT NULL)'
)


@pytest.fixture(scope="module")
def postgres_container():
    """Create a PostgreSQL container using testcontainers."""
    pytest.importorskip("testcontainers")

    from docker.errors import DockerException
    from testcontainers.postgres import PostgresContainer

    try:
        postgres = PostgresContainer("postgres:16-alpine", driver="asyncpg")
        postgres.start()
    except DockerException as exc:
        pytest.skip(f"Docker is not available: {exc}")

    yield postgres

    postgres.stop()


@pytest.fixture
async def pg_engine(postgres_container):
    """``AsyncEngine`` on the container with a fresh ``response`` table."""
    from sqlalchemy.ext.asyncio import create_async_engine

    engine = create_async_engine(postgres_container.get_connection_url())
    async with engine.begin() as conn:
        await conn.exec_driver_sql("DROP TABLE IF EXISTS response")
        await conn.exec_driver_sql(CREATE_TABLE)
    yield engine
    await engine.dispose()
