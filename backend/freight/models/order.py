"""
Shipment order model

One row per order; the payment history, the payment requests and the
per-user hidden-for set hang off it as child rows:
- PaymentEntry: money actually moved (trader -> platform, platform -> driver)
- PaymentRequest: an Advance/Final claim raised by the assigned driver or company
- OrderVisibility: a user who hid the order from their history
"""

from datetime import datetime
from decimal import Decimal
from sqlalchemy import (
    Column, Integer, String, Text, DateTime, ForeignKey, DECIMAL, Boolean, UniqueConstraint
)
from sqlalchemy.orm import relationship

from freight.db.base import Base, new_id
from freight.models.enums import (
    OrderStatus, PaymentStatus, PaymentRequestStatus, TERMINAL_ORDER_STATUSES
)


class Order(Base):
    """Shipment order"""
    __tablename__ = "orders"

    id = Column(String(32), primary_key=True, default=new_id)

    # route
    origin = Column(String(200), nullable=False, comment="Pickup location")
    destination = Column(String(200), nullable=False, comment="Drop-off location")

    # cargo
    weight = Column(DECIMAL(10, 2), nullable=False, comment="Weight in tons")
    material = Column(Text, nullable=False, comment="Material description")
    vehicle_type = Column(String(20), nullable=False, index=True, comment="Required vehicle category")
    # heavy vehicles only
    trailer_length = Column(String(10), comment="Trailer length in meters")
    trailer_type = Column(String(20), comment="Trailer type")

    # commercial terms
    price = Column(DECIMAL(12, 2), nullable=False, comment="Offered price")
    toll_paid_by_sender = Column(Boolean, default=False, nullable=False)
    waiting_charges_paid_by_sender = Column(Boolean, default=False, nullable=False)

    status = Column(
        String(30), nullable=False, default=OrderStatus.PENDING_DRIVER_ASSIGNMENT.value, index=True
    )

    # trader never changes; driver_id is a driver or a transport company
    trader_id = Column(String(32), nullable=False, index=True)
    driver_id = Column(String(32), index=True)

    # payment bookkeeping, both totals only ever grow
    amount_paid_by_trader = Column(DECIMAL(12, 2), nullable=False, default=Decimal("0.00"))
    amount_paid_to_driver = Column(DECIMAL(12, 2), nullable=False, default=Decimal("0.00"))
    payment_status = Column(String(20), nullable=False, default=PaymentStatus.PENDING.value)

    # bumped on every UPDATE; a stale writer gets StaleDataError
    version = Column(Integer, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    payment_history = relationship(
        "PaymentEntry", back_populates="order", order_by="PaymentEntry.id",
        cascade="all, delete-orphan"
    )
    payment_requests = relationship(
        "PaymentRequest", back_populates="order", order_by="PaymentRequest.created_at",
        cascade="all, delete-orphan"
    )
    hidden_entries = relationship(
        "OrderVisibility", back_populates="order", cascade="all, delete-orphan"
    )

    __mapper_args__ = {"version_id_col": version}

    def __repr__(self):
        return f"<Order {self.id[:6]} ({self.status})>"

    @property
    def short_id(self) -> str:
        return self.id[:6]

    @property
    def is_terminal(self) -> bool:
        return self.status in {s.value for s in TERMINAL_ORDER_STATUSES}

    @property
    def hidden_for(self) -> list:
        return sorted(entry.user_id for entry in self.hidden_entries)


class PaymentEntry(Base):
    """One money movement on an order"""
    __tablename__ = "order_payment_entries"

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(String(32), ForeignKey("orders.id"), nullable=False, index=True)

    amount = Column(DECIMAL(12, 2), nullable=False)
    # Trader Payment / Driver Payout
    entry_type = Column(String(20), nullable=False)
    date = Column(DateTime, default=datetime.utcnow, nullable=False)

    order = relationship("Order", back_populates="payment_history")

    def __repr__(self):
        return f"<PaymentEntry {self.entry_type}: {self.amount}>"


class PaymentRequest(Base):
    """Advance or Final payout claim"""
    __tablename__ = "order_payment_requests"

    id = Column(String(32), primary_key=True, default=new_id)
    order_id = Column(String(32), ForeignKey("orders.id"), nullable=False, index=True)

    # requester: the driver, and the company when the driver belongs to one
    driver_id = Column(String(32), nullable=False)
    driver_name = Column(String(100))
    company_id = Column(String(32))
    company_name = Column(String(100))

    request_type = Column(String(10), nullable=False)
    amount = Column(DECIMAL(12, 2), nullable=False)
    status = Column(String(10), nullable=False, default=PaymentRequestStatus.PENDING.value)
    created_at = Column(DateTime, default=datetime.utcnow)

    order = relationship("Order", back_populates="payment_requests")

    def __repr__(self):
        return f"<PaymentRequest {self.request_type} {self.amount} ({self.status})>"

    @property
    def requester_name(self) -> str:
        return self.driver_name or self.company_name or "Driver"


class OrderVisibility(Base):
    """A user who hid this order from their own history"""
    __tablename__ = "order_hidden_for"
    __table_args__ = (UniqueConstraint("order_id", "user_id", name="uq_order_hidden_for"),)

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(String(32), ForeignKey("orders.id"), nullable=False, index=True)
    user_id = Column(String(32), nullable=False, index=True)
    hidden_at = Column(DateTime, default=datetime.utcnow)

    order = relationship("Order", back_populates="hidden_entries")
