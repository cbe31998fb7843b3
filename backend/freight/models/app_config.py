from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime

from freight.db.base import Base

APP_CONFIG_ID = 1


class AppConfig(Base):
    """Single-row application settings"""
    __tablename__ = "app_config"

    id = Column(Integer, primary_key=True, default=APP_CONFIG_ID)
    logo_url = Column(String(500))
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
