"""
Order status and history endpoints
- accept, in transit, delivered, cancel
- hide one order / whole history
"""

from typing import Any
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from freight.core.deps import get_db
from freight.schemas.order import HistoryHide, OrderHide, OrderResponse, OrderStatusUpdate
from freight.services import lifecycle

router = APIRouter()


@router.post("/hide-history")
async def hide_all_history(
    *,
    db: AsyncSession = Depends(get_db),
    hide_in: HistoryHide) -> Any:
    """Hide every delivered or cancelled order from the user's history"""
    hidden = await lifecycle.hide_all_history(db, hide_in.user_id, hide_in.role)
    if not hidden:
        return {"success": True, "hidden": 0, "message": "No history found to hide."}
    return {"success": True, "hidden": hidden}


@router.post("/{order_id}/status")
async def update_order_status(
    *,
    db: AsyncSession = Depends(get_db),
    order_id: str,
    status_in: OrderStatusUpdate) -> Any:
    """Accept (needs driver_id), mark in transit / delivered, or cancel"""
    order = await lifecycle.update_order_status(
        db, order_id, status_in.status, driver_id=status_in.driver_id
    )
    return {"success": True, "order": OrderResponse.model_validate(order)}


@router.post("/{order_id}/hide")
async def hide_order(
    *,
    db: AsyncSession = Depends(get_db),
    order_id: str,
    hide_in: OrderHide) -> Any:
    await lifecycle.hide_order(db, order_id, hide_in.user_id)
    return {"success": True}
