"""
Order create / read endpoints
"""

from typing import Any, Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from freight.core.deps import get_db
from freight.models.enums import OrderStatus
from freight.schemas.order import OrderCreate, OrderResponse
from freight.services import lifecycle

router = APIRouter()


@router.get("/")
async def list_orders(
    *,
    db: AsyncSession = Depends(get_db),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    trader_id: Optional[str] = Query(None),
    driver_id: Optional[str] = Query(None),
    status: Optional[OrderStatus] = Query(None),
    viewer_id: Optional[str] = Query(None, description="Hide orders this user has hidden")) -> Any:
    """List orders, newest first"""
    orders, total = await lifecycle.list_orders(
        db,
        trader_id=trader_id,
        driver_id=driver_id,
        status=status.value if status else None,
        viewer_id=viewer_id,
        skip=(page - 1) * limit,
        limit=limit,
    )
    return {
        "success": True,
        "data": [OrderResponse.model_validate(o) for o in orders],
        "total": total,
        "page": page,
        "limit": limit,
    }


@router.post("/")
async def create_order(
    *,
    db: AsyncSession = Depends(get_db),
    order_in: OrderCreate) -> Any:
    """Place an order and notify matching drivers and companies"""
    order, notified_count = await lifecycle.create_order(db, order_in)
    return {
        "success": True,
        "id": order.id,
        "notified_count": notified_count,
        "order": OrderResponse.model_validate(order),
    }


@router.get("/{order_id}")
async def get_order(
    *,
    db: AsyncSession = Depends(get_db),
    order_id: str) -> Any:
    order = await lifecycle.get_order(db, order_id)
    return {"success": True, "order": OrderResponse.model_validate(order)}
