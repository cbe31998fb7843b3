"""
Order API

Split by concern:
- crud: create, list, read
- actions: status transitions, hiding history
- payments: trader payments, payment requests, payouts
- events: live snapshots over SSE
"""

from fastapi import APIRouter
from .crud import router as crud_router
from .actions import router as actions_router
from .payments import router as payments_router
from .events import router as events_router

router = APIRouter()

# merge the sub-routers
router.include_router(crud_router)
router.include_router(actions_router)
router.include_router(payments_router)
router.include_router(events_router)
