from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field


class AppConfigResponse(BaseModel):
    logo_url: Optional[str] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class LogoUrlUpdate(BaseModel):
    logo_url: str = Field(..., min_length=1, max_length=500)


class UploadResponse(BaseModel):
    """Stored blob"""
    path: str
    url: str
