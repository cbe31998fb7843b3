"""Payment ledger schemas"""

from typing import Optional
from pydantic import BaseModel, Field

from freight.models.enums import PaymentRequestType


class TraderPaymentCreate(BaseModel):
    """Money received from the trader"""
    amount: float = Field(..., gt=0)


class PaymentRequestCreate(BaseModel):
    """Advance or Final claim by the assigned driver or company"""
    requester_id: str = Field(..., min_length=1, description="Driver or transport company id")
    request_type: PaymentRequestType
    amount: Optional[float] = Field(None, description="Advance only; Final pays the outstanding balance")


class PayoutCreate(BaseModel):
    """Pay a request; Advance defaults to the requested amount"""
    amount: Optional[float] = None


class TraderPaymentReminder(BaseModel):
    trader_id: str = Field(..., min_length=1)
    message: str = Field(..., min_length=1)


class PaymentSummary(BaseModel):
    """Per-order money overview"""
    order_id: str
    currency: str
    price: float
    service_fee: float          # price * fee rate
    total_earning: float        # driver side, price - fee
    amount_paid_by_trader: float
    amount_paid_to_driver: float
    trader_balance: float       # still owed by the trader
    driver_balance: float       # still owed to the driver
    payment_status: str
    pending_requests: int = 0
