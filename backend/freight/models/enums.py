"""
Enumerations shared by models, schemas and services
"""

from enum import Enum


class OrderStatus(str, Enum):
    PENDING_DRIVER_ASSIGNMENT = "Pending Driver Assignment"
    PENDING_PICKUP = "Pending Pickup"
    IN_TRANSIT = "In Transit"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"


TERMINAL_ORDER_STATUSES = (OrderStatus.DELIVERED, OrderStatus.CANCELLED)


class PaymentStatus(str, Enum):
    PENDING = "Pending"
    FULLY_PAID = "Fully Paid"


class PaymentEntryType(str, Enum):
    TRADER_PAYMENT = "Trader Payment"
    DRIVER_PAYOUT = "Driver Payout"


class PaymentRequestType(str, Enum):
    ADVANCE = "Advance"
    FINAL = "Final"


class PaymentRequestStatus(str, Enum):
    PENDING = "Pending"
    PAID = "Paid"


class VehicleType(str, Enum):
    ONE_TON = "1-tonn"
    THREE_TON = "3-tonn"
    SEVEN_TON = "7-tonn"
    TEN_TON = "10-tonn"
    HEAVY_VEHICLE = "heavy-vehicle"


class TrailerLength(str, Enum):
    """Trailer length in meters"""
    M12 = "12"
    M13_5 = "13.5"
    M15 = "15"
    M18 = "18"


class TrailerType(str, Enum):
    BOX = "box"
    CURTAIN = "curtain"
    FLATBED = "flatbed"
    LOWBED = "lowbed"
    REFRIGERATOR = "refrigerator"


class AccountStatus(str, Enum):
    # approval
    PENDING = "Pending"
    ACTIVE = "Active"
    WARNED = "Warned"
    REJECTED = "Rejected"
    # availability, drivers and companies once approved
    AVAILABLE = "Available"
    BUSY = "Busy"
    ON_TRIP = "On-Trip"
    OFFLINE = "Offline"


class Role(str, Enum):
    TRADER = "trader"
    DRIVER = "driver"
    TRANSPORT_COMPANY = "transport_company"
    ADMIN = "admin"
