"""
Account administration across roles
- approve / change status
- warn, delete
- profile picture URL
"""
from typing import Any
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from freight.core.deps import get_db
from freight.models.enums import Role
from freight.schemas.profile import PhotoUrlUpdate, StatusUpdate
from freight.services import profiles

router = APIRouter()


@router.put("/{role}/{profile_id}/status")
async def update_profile_status(
    *,
    db: AsyncSession = Depends(get_db),
    role: Role,
    profile_id: str,
    status_in: StatusUpdate) -> Any:
    """Active sends the "Account Approved!" notification"""
    profile = await profiles.update_profile_status(db, role, profile_id, status_in.status)
    return {"success": True, "id": profile.id, "status": profile.status}


@router.post("/{role}/{profile_id}/warn")
async def warn_user(
    *,
    db: AsyncSession = Depends(get_db),
    role: Role,
    profile_id: str) -> Any:
    profile = await profiles.warn_user(db, role, profile_id)
    return {"success": True, "id": profile.id, "status": profile.status}


@router.put("/{role}/{profile_id}/photo")
async def update_profile_picture_url(
    *,
    db: AsyncSession = Depends(get_db),
    role: Role,
    profile_id: str,
    photo_in: PhotoUrlUpdate) -> Any:
    profile = await profiles.update_profile_picture_url(db, role, profile_id, photo_in.photo_url)
    return {"success": True, "photo_url": profile.photo_url}


@router.delete("/{role}/{profile_id}")
async def delete_user(
    *,
    db: AsyncSession = Depends(get_db),
    role: Role,
    profile_id: str) -> Any:
    """Remove the profile; orders referencing it are kept"""
    await profiles.delete_user(db, role, profile_id)
    return {"success": True}
