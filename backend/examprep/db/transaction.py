"""
Unit-of-work helper for service methods.

Wraps a block of session work so that any database or connection failure
rolls the transaction back and surfaces as StoreUnavailableError.

Usage:
    from examprep.db.transaction import store_transaction

    async with store_transaction(self.db, "Track time"):
        record = await self._get_topic(user_id, key)
        record.time_spent_minutes += minutes
    # committed here
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from examprep.middleware.error_handling import StoreUnavailableError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def store_transaction(
    db: AsyncSession,
    operation: str,
    commit: bool = True,
) -> AsyncIterator[AsyncSession]:
    """
    Run a block of session work as one transaction.

    Args:
        db: Session the block works on.
        operation: Name used in log lines and the error message.
        commit: Commit on success. Read-only blocks pass False.

    Raises:
        StoreUnavailableError: The store failed; nothing was persisted.
    """
    try:
        yield db
        if commit:
            await db.commit()
    except (SQLAlchemyError, OSError) as e:
        await db.rollback()
        logger.error(f"{operation} failed, store unavailable: {e}")
        raise StoreUnavailableError(
            f"{operation} failed: data store unavailable",
            details={"operation": operation},
        ) from e
    except Exception:
        await db.rollback()
        raise
