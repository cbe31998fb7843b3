from sqlalchemy.ext.asyncio import AsyncSession

from freight.core.exceptions import ValidationError
from freight.core.logging_config import get_logger
from freight.db.transaction import persist
from freight.models.app_config import AppConfig, APP_CONFIG_ID

logger = get_logger(__name__)


async def get_app_config(db: AsyncSession) -> AppConfig:
    """The single settings row, created on first use"""
    config = await db.get(AppConfig, APP_CONFIG_ID)
    if config is None:
        config = AppConfig(id=APP_CONFIG_ID)
        db.add(config)
        await persist(db)
    return config


async def update_app_logo_url(db: AsyncSession, logo_url: str) -> AppConfig:
    if not logo_url:
        raise ValidationError("Logo URL is required.")
    config = await get_app_config(db)
    config.logo_url = logo_url
    await persist(db)
    logger.info(f"🖼️ App logo updated: {logo_url}")
    return config
