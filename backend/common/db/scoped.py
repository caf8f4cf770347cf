"""
Operation-scoped database sessions.

Connections are acquired lazily and released right after each operation so
nothing is held open across payment provider calls or lock waits.

Usage:
    # Single operation - acquires and releases immediately
    async with get_session() as session:
        result = await session.get(Model, id)

    # Multiple operations in one transaction
    async with transaction():
        await repo.save(thing1)
        await repo.save(thing2)

    # Nested unit that can fail without losing the outer transaction
    async with transaction():
        try:
            async with savepoint():
                await repo.risky_write()
        except SQLAlchemyError:
            await repo.record_failure()
"""

import time
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession

from common.core.otel_axiom_exporter import get_logger
from common.db.session import AsyncSessionLocal, AsyncSessionLocalReadonly
from common.db.context import (
    get_current_session,
    set_current_session,
    reset_current_session,
    is_readonly_forced,
)

logger = get_logger(__name__)


@asynccontextmanager
async def transaction(readonly: bool = False) -> AsyncGenerator[AsyncSession, None]:
    """
    Explicit transaction boundary.

    All DB operations inside share one session. Commits on success (unless
    readonly), rolls back and re-raises on any exception.
    """
    effective_readonly = readonly or is_readonly_forced()
    session_factory = (
        AsyncSessionLocalReadonly if effective_readonly else AsyncSessionLocal
    )

    start = time.perf_counter()
    async with session_factory() as session:
        logger.debug(
            f"Transaction session acquire: {(time.perf_counter() - start) * 1000:.2f}ms, readonly={effective_readonly}"
        )

        token = set_current_session(session, readonly=effective_readonly)
        try:
            yield session
            if not effective_readonly:
                commit_start = time.perf_counter()
                await session.commit()
                logger.debug(
                    f"Transaction commit: {(time.perf_counter() - commit_start) * 1000:.2f}ms"
                )
        except Exception as e:
            logger.error(f"Transaction rollback due to: {e}")
            await session.rollback()
            raise
        finally:
            reset_current_session(token, readonly=effective_readonly)


@asynccontextmanager
async def savepoint() -> AsyncGenerator[AsyncSession, None]:
    """
    Nested unit inside the current transaction().

    On exception only the work since the savepoint is rolled back; the outer
    transaction stays usable.
    """
    session = get_current_session()
    if session is None:
        raise RuntimeError("savepoint() requires an enclosing transaction()")

    async with session.begin_nested():
        yield session


@asynccontextmanager
async def get_session(readonly: bool = False) -> AsyncGenerator[AsyncSession, None]:
    """
    Session for a single DB operation.

    Reuses the enclosing transaction() session when there is one. Otherwise
    acquires a fresh session, commits on success and releases it.
    """
    effective_readonly = readonly or is_readonly_forced()
    existing = get_current_session(readonly=effective_readonly)

    if existing:
        yield existing
        return

    session_factory = (
        AsyncSessionLocalReadonly if effective_readonly else AsyncSessionLocal
    )
    async with session_factory() as session:
        try:
            yield session
            if not effective_readonly:
                await session.commit()
        except Exception as e:
            logger.error(f"Operation rollback due to: {e}")
            await session.rollback()
            raise
