"""
Transaction helpers

run_in_transaction re-runs a unit of work when the order version check
fails (another writer committed first), sleeping a jittered, doubling
delay between attempts. The work callable must re-read everything it
depends on; it is given the same session each attempt.
"""

import random
from typing import Awaitable, Callable, TypeVar

import anyio
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError

from freight.core.config import settings
from freight.core.exceptions import FreightError, PersistenceError
from freight.core.logging_config import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


async def run_in_transaction(
    db: AsyncSession,
    work: Callable[[AsyncSession], Awaitable[T]],
    attempts: int = None,
) -> T:
    """
    Run work(db) and commit, retrying on a stale version

    Domain errors roll back and propagate unchanged; any other store
    error becomes PersistenceError.
    """
    attempts = attempts or settings.TRANSACTION_MAX_ATTEMPTS
    retry_delay = settings.TRANSACTION_RETRY_DELAY
    for attempt in range(1, attempts + 1):
        try:
            result = await work(db)
            await db.commit()
            return result
        except StaleDataError:
            await db.rollback()
            logger.debug(f"🔁 Stale order version, retrying ({attempt}/{attempts})")
            if attempt < attempts:
                await anyio.sleep(random.uniform(0, retry_delay))
                retry_delay = min(retry_delay * 2, settings.TRANSACTION_RETRY_MAX_DELAY)
        except FreightError:
            await db.rollback()
            raise
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error(f"❌ Transaction failed: {e}", exc_info=True)
            raise PersistenceError("Could not save changes. Please try again.") from e

    logger.error(f"❌ Transaction abandoned after {attempts} attempts")
    raise PersistenceError("The order is being updated by someone else. Please try again.")


async def persist(db: AsyncSession) -> None:
    """Commit a plain write, wrapping store errors"""
    try:
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"❌ Commit failed: {e}", exc_info=True)
        raise PersistenceError("Could not save changes. Please try again.") from e
