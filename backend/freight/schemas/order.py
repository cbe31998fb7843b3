"""
Order schemas
"""
from datetime import datetime
from typing import Optional, List
from pydantic import BaseModel, Field

from freight.models.enums import (
    OrderStatus, VehicleType, TrailerType, Role
)
from freight.schemas.common import TrailerLengthField


class OrderBase(BaseModel):
    """Route, cargo and commercial terms"""
    origin: str = Field(..., min_length=1, max_length=200, description="Pickup location")
    destination: str = Field(..., min_length=1, max_length=200, description="Drop-off location")
    weight: float = Field(..., gt=0, description="Weight in tons")
    material: str = Field(..., min_length=1, description="Material description")
    vehicle_type: VehicleType = Field(..., description="Required vehicle category")
    trailer_length: TrailerLengthField = Field(None, description="Heavy vehicles only, meters")
    trailer_type: Optional[TrailerType] = Field(None, description="Heavy vehicles only")
    price: float = Field(..., gt=0, description="Offered price")
    toll_paid_by_sender: bool = False
    waiting_charges_paid_by_sender: bool = False


class OrderCreate(OrderBase):
    """Create an order"""
    trader_id: str = Field(..., min_length=1, description="Placing trader")


class OrderStatusUpdate(BaseModel):
    """Transition an order"""
    status: OrderStatus
    driver_id: Optional[str] = Field(None, description="Required when accepting")


class OrderHide(BaseModel):
    user_id: str = Field(..., min_length=1)


class HistoryHide(BaseModel):
    user_id: str = Field(..., min_length=1)
    role: Role


class PaymentEntryResponse(BaseModel):
    amount: float
    entry_type: str
    date: datetime

    class Config:
        from_attributes = True


class PaymentRequestResponse(BaseModel):
    id: str
    order_id: str
    driver_id: str
    driver_name: Optional[str] = None
    company_id: Optional[str] = None
    company_name: Optional[str] = None
    request_type: str
    amount: float
    status: str
    created_at: datetime

    class Config:
        from_attributes = True


class OrderResponse(BaseModel):
    """Order with its payment trail"""
    id: str
    origin: str
    destination: str
    weight: float
    material: str
    vehicle_type: str
    trailer_length: Optional[str] = None
    trailer_type: Optional[str] = None
    price: float
    toll_paid_by_sender: bool
    waiting_charges_paid_by_sender: bool
    status: str

    trader_id: str
    driver_id: Optional[str] = None

    amount_paid_by_trader: float
    amount_paid_to_driver: float
    payment_status: str
    payment_history: List[PaymentEntryResponse] = []
    payment_requests: List[PaymentRequestResponse] = []
    hidden_for: List[str] = []

    version: int
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
