"""
File uploads
- profile pictures
- driver / company documents
"""
from typing import Any
from fastapi import APIRouter, Depends, File, Form, UploadFile

from freight.schemas.app_config import UploadResponse
from freight.services import storage
from freight.services.storage import BlobStorage, get_blob_storage

router = APIRouter()


@router.post("/profile-picture")
async def upload_profile_picture(
    *,
    blob_storage: BlobStorage = Depends(get_blob_storage),
    user_id: str = Form(...),
    file: UploadFile = File(...)) -> Any:
    """Store the image and return its URL; pair with PUT /accounts/{role}/{id}/photo"""
    content = await file.read()
    path, url = await storage.upload_profile_picture(blob_storage, user_id, file.filename or "", content)
    return {"success": True, **UploadResponse(path=path, url=url).model_dump()}


@router.post("/document")
async def upload_document(
    *,
    blob_storage: BlobStorage = Depends(get_blob_storage),
    user_id: str = Form(...),
    file: UploadFile = File(...)) -> Any:
    content = await file.read()
    path, url = await storage.upload_document(blob_storage, user_id, file.filename or "", content)
    return {"success": True, **UploadResponse(path=path, url=url).model_dump()}
