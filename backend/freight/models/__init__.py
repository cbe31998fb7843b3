# Data models
# Orders with their payment trail, account profiles, notifications

from freight.models.order import Order, PaymentEntry, PaymentRequest, OrderVisibility
from freight.models.profile import Trader, Driver, TransportCompany
from freight.models.notification import Notification
from freight.models.app_config import AppConfig

__all__ = [
    "Order",
    "PaymentEntry",
    "PaymentRequest",
    "OrderVisibility",
    "Trader",
    "Driver",
    "TransportCompany",
    "Notification",
    "AppConfig",
]
