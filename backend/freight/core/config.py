from decimal import Decimal
from typing import List, Union
import logging

from pydantic import AnyHttpUrl, Field, field_validator
from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)

class Settings(BaseSettings):
    PROJECT_NAME: str = "Freight Marketplace"
    API_V1_STR: str = "/api/v1"

    # CORS
    BACKEND_CORS_ORIGINS: List[Union[str, AnyHttpUrl]] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
        "http://localhost:9002",
    ]

    @field_validator("BACKEND_CORS_ORIGINS", mode="before")
    @classmethod
    def assemble_cors_origins(cls, v: Union[str, List[str]]) -> Union[List[str], str]:
        if isinstance(v, str) and not v.startswith("["):
            return [i.strip() for i in v.split(",")]
        elif isinstance(v, (list, str)):
            return v
        raise ValueError(v)

    # Database
    DATABASE_URI: str = "sqlite+aiosqlite:///./freight.db"
    SQL_DEBUG: bool = False
    # Attempts before an optimistic transaction gives up on a contended order
    TRANSACTION_MAX_ATTEMPTS: int = 10
    # Backoff between attempts, doubled each retry up to the cap (seconds)
    TRANSACTION_RETRY_DELAY: float = 0.01
    TRANSACTION_RETRY_MAX_DELAY: float = 0.5

    # Ledger
    SERVICE_FEE_RATE: Decimal = Field(default=Decimal("0.02"), ge=0, lt=1)
    CURRENCY: str = "AED"

    # Blob storage
    UPLOAD_DIR: str = "uploads"
    PUBLIC_BASE_URL: str = "http://127.0.0.1:8000/files"

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "logs"

    class Config:
        case_sensitive = True
        env_file = ".env"


settings = Settings()
logger.info(f"Loaded settings: API_V1_STR={settings.API_V1_STR}, CORS={settings.BACKEND_CORS_ORIGINS}")
