"""V1 API router aggregation (no auth)"""
from fastapi import APIRouter

from freight.api.api_v1.endpoints import (
    traders, drivers, transport_companies, accounts, notifications, uploads, system
)
from freight.api.api_v1.endpoints.orders import router as orders_router

api_router = APIRouter()

# marketplace
api_router.include_router(orders_router, prefix="/orders", tags=["Orders"])

# accounts
api_router.include_router(traders.router, prefix="/traders", tags=["Traders"])
api_router.include_router(drivers.router, prefix="/drivers", tags=["Drivers"])
api_router.include_router(transport_companies.router, prefix="/transport-companies", tags=["Transport companies"])
api_router.include_router(accounts.router, prefix="/accounts", tags=["Account administration"])

# inbox, files, settings
api_router.include_router(notifications.router, prefix="/notifications", tags=["Notifications"])
api_router.include_router(uploads.router, prefix="/uploads", tags=["Uploads"])
api_router.include_router(system.router, prefix="/system", tags=["System"])
