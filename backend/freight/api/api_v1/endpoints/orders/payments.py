"""
Order payment endpoints
- trader payments
- payment requests and payouts
- trader reminders and the per-order summary
"""

from typing import Any
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from freight.core.deps import get_db
from freight.schemas.order import OrderResponse, PaymentRequestResponse
from freight.schemas.payment import (
    PaymentRequestCreate, PayoutCreate, TraderPaymentCreate, TraderPaymentReminder
)
from freight.services import ledger

router = APIRouter()


@router.post("/{order_id}/trader-payments")
async def record_trader_payment(
    *,
    db: AsyncSession = Depends(get_db),
    order_id: str,
    payment_in: TraderPaymentCreate) -> Any:
    order = await ledger.record_trader_payment(db, order_id, payment_in.amount)
    return {"success": True, "order": OrderResponse.model_validate(order)}


@router.post("/{order_id}/payment-requests")
async def create_payment_request(
    *,
    db: AsyncSession = Depends(get_db),
    order_id: str,
    request_in: PaymentRequestCreate) -> Any:
    """Advance or Final request by the assigned driver or company"""
    request = await ledger.create_payment_request(
        db, order_id, request_in.requester_id, request_in.request_type, request_in.amount
    )
    return {"success": True, "request": PaymentRequestResponse.model_validate(request)}


@router.post("/{order_id}/payment-requests/{request_id}/payout")
async def record_payout(
    *,
    db: AsyncSession = Depends(get_db),
    order_id: str,
    request_id: str,
    payout_in: PayoutCreate) -> Any:
    order = await ledger.record_payout(db, order_id, request_id, payout_in.amount)
    return {"success": True, "order": OrderResponse.model_validate(order)}


@router.post("/{order_id}/payment-reminders")
async def notify_trader_for_payment(
    *,
    db: AsyncSession = Depends(get_db),
    order_id: str,
    reminder_in: TraderPaymentReminder) -> Any:
    await ledger.notify_trader_for_payment(db, order_id, reminder_in.trader_id, reminder_in.message)
    return {"success": True}


@router.get("/{order_id}/payment-summary")
async def payment_summary(
    *,
    db: AsyncSession = Depends(get_db),
    order_id: str) -> Any:
    summary = await ledger.payment_summary(db, order_id)
    return {"success": True, "summary": summary}
