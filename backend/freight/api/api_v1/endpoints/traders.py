"""
Trader profile API
"""
from typing import Any, Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from freight.core.deps import get_db
from freight.models.enums import AccountStatus, Role
from freight.schemas.profile import TraderCreate, TraderResponse, TraderUpdate
from freight.services import profiles

router = APIRouter()


@router.get("/")
async def list_traders(
    *,
    db: AsyncSession = Depends(get_db),
    status: Optional[AccountStatus] = Query(None),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=200)) -> Any:
    traders, total = await profiles.list_profiles(
        db, Role.TRADER, status=status.value if status else None, skip=skip, limit=limit
    )
    return {"success": True, "data": [TraderResponse.model_validate(t) for t in traders], "total": total}


@router.post("/")
async def create_trader(
    *,
    db: AsyncSession = Depends(get_db),
    trader_in: TraderCreate) -> Any:
    trader = await profiles.create_profile(db, Role.TRADER, trader_in)
    return {"success": True, "id": trader.id, "trader": TraderResponse.model_validate(trader)}


@router.get("/{trader_id}")
async def get_trader(
    *,
    db: AsyncSession = Depends(get_db),
    trader_id: str) -> Any:
    trader = await profiles.get_profile(db, Role.TRADER, trader_id)
    return {"success": True, "trader": TraderResponse.model_validate(trader)}


@router.put("/{trader_id}")
async def update_trader(
    *,
    db: AsyncSession = Depends(get_db),
    trader_id: str,
    trader_in: TraderUpdate) -> Any:
    trader = await profiles.update_profile(db, Role.TRADER, trader_id, trader_in)
    return {"success": True, "trader": TraderResponse.model_validate(trader)}
