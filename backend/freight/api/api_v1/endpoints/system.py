"""
Application settings API
"""
from typing import Any
from fastapi import APIRouter, Depends, File, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from freight.core.deps import get_db
from freight.schemas.app_config import AppConfigResponse, LogoUrlUpdate, UploadResponse
from freight.services import app_config, storage
from freight.services.storage import BlobStorage, get_blob_storage

router = APIRouter()


@router.get("/config")
async def get_app_config(
    *,
    db: AsyncSession = Depends(get_db)) -> Any:
    config = await app_config.get_app_config(db)
    return {"success": True, "config": AppConfigResponse.model_validate(config)}


@router.post("/logo")
async def upload_app_logo(
    *,
    blob_storage: BlobStorage = Depends(get_blob_storage),
    file: UploadFile = File(...)) -> Any:
    content = await file.read()
    path, url = await storage.upload_app_logo(blob_storage, file.filename or "", content)
    return {"success": True, **UploadResponse(path=path, url=url).model_dump()}


@router.put("/logo")
async def update_app_logo_url(
    *,
    db: AsyncSession = Depends(get_db),
    logo_in: LogoUrlUpdate) -> Any:
    config = await app_config.update_app_logo_url(db, logo_in.logo_url)
    return {"success": True, "config": AppConfigResponse.model_validate(config)}
