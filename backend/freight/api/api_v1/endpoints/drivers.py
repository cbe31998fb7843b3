"""
Driver profile API
- profile CRUD
- position reports
"""
from typing import Any, Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from freight.core.deps import get_db
from freight.models.enums import AccountStatus, Role
from freight.schemas.profile import DriverCreate, DriverResponse, DriverUpdate, LocationUpdate
from freight.services import profiles

router = APIRouter()


@router.get("/")
async def list_drivers(
    *,
    db: AsyncSession = Depends(get_db),
    status: Optional[AccountStatus] = Query(None),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=200)) -> Any:
    drivers, total = await profiles.list_profiles(
        db, Role.DRIVER, status=status.value if status else None, skip=skip, limit=limit
    )
    return {"success": True, "data": [DriverResponse.model_validate(d) for d in drivers], "total": total}


@router.post("/")
async def create_driver(
    *,
    db: AsyncSession = Depends(get_db),
    driver_in: DriverCreate) -> Any:
    """Sign up a driver; company_id makes it a fleet driver"""
    driver = await profiles.create_profile(db, Role.DRIVER, driver_in)
    return {"success": True, "id": driver.id, "driver": DriverResponse.model_validate(driver)}


@router.get("/{driver_id}")
async def get_driver(
    *,
    db: AsyncSession = Depends(get_db),
    driver_id: str) -> Any:
    driver = await profiles.get_profile(db, Role.DRIVER, driver_id)
    return {"success": True, "driver": DriverResponse.model_validate(driver)}


@router.put("/{driver_id}")
async def update_driver(
    *,
    db: AsyncSession = Depends(get_db),
    driver_id: str,
    driver_in: DriverUpdate) -> Any:
    driver = await profiles.update_profile(db, Role.DRIVER, driver_id, driver_in)
    return {"success": True, "driver": DriverResponse.model_validate(driver)}


@router.put("/{driver_id}/location")
async def update_driver_location(
    *,
    db: AsyncSession = Depends(get_db),
    driver_id: str,
    location_in: LocationUpdate) -> Any:
    driver = await profiles.update_driver_location(
        db, driver_id, location_in.latitude, location_in.longitude
    )
    return {
        "success": True,
        "latitude": driver.current_lat,
        "longitude": driver.current_lng,
        "updated_at": driver.location_updated_at,
    }
