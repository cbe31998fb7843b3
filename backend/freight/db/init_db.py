import asyncio
from sqlalchemy import select

from freight.core.logging_config import get_logger
from freight.db.session import engine, SessionLocal
from freight.db.base import Base

# imported for table registration
from freight.models import (
    Order, PaymentEntry, PaymentRequest, OrderVisibility,
    Trader, Driver, TransportCompany, Notification, AppConfig
)
from freight.models.app_config import APP_CONFIG_ID

logger = get_logger(__name__)


async def ensure_tables_exist() -> None:
    """
    Create missing tables (called on application start)
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def init_db() -> None:
    """
    Create all tables and the app configuration row
    """
    await ensure_tables_exist()

    async with SessionLocal() as db:
        result = await db.execute(select(AppConfig).where(AppConfig.id == APP_CONFIG_ID))
        if result.scalar_one_or_none() is None:
            db.add(AppConfig(id=APP_CONFIG_ID))
            await db.commit()
            logger.info("⚙️ App configuration row created")


if __name__ == "__main__":
    asyncio.run(init_db())
