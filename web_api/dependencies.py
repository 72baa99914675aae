"""FastAPI dependencies for process-wide resources.

The Database and ObjectStore are created by the lifespan in main.py and kept
on app.state. Tests swap them through app.dependency_overrides.
"""

from typing import AsyncIterator

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncConnection

from core.database import Database
from core.storage import ObjectStore


def get_database(request: Request) -> Database:
    database = getattr(request.app.state, "database", None)
    if database is None:
        raise RuntimeError("Database is not configured (set DATABASE_URL)")
    return database


async def get_connection(request: Request) -> AsyncIterator[AsyncConnection]:
    """Read-only connection for the duration of a request."""
    async with get_database(request).connect() as conn:
        yield conn


async def get_transaction(request: Request) -> AsyncIterator[AsyncConnection]:
    """Connection with a transaction committed when the request succeeds."""
    async with get_database(request).transaction() as conn:
        yield conn


def get_object_store(request: Request) -> ObjectStore:
    """
    Get the object store, building it from the environment on first use.

    Raises:
        StorageConfigError: If R2_* settings are missing
    """
    store = getattr(request.app.state, "object_store", None)
    if store is None:
        store = ObjectStore.from_env()
        request.app.state.object_store = store
    return store
