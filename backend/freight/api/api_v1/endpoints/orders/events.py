"""
Live order updates over Server-Sent Events
"""

import json
from typing import AsyncIterator, Dict

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from sse_starlette.sse import EventSourceResponse

from freight.core.deps import get_db
from freight.core.logging_config import get_logger
from freight.models.enums import TERMINAL_ORDER_STATUSES
from freight.services import lifecycle
from freight.services.broadcaster import OrderBroadcaster, get_broadcaster

logger = get_logger(__name__)

router = APIRouter()

FINAL_STATES = {s.value for s in TERMINAL_ORDER_STATUSES}


@router.get("/{order_id}/events")
async def stream_order(
    *,
    db: AsyncSession = Depends(get_db),
    broadcaster: OrderBroadcaster = Depends(get_broadcaster),
    order_id: str) -> EventSourceResponse:
    """
    Stream order snapshots

    The current snapshot is sent first; the stream closes once the order
    is delivered or cancelled.
    """
    subscription = broadcaster.subscribe(order_id)
    try:
        order = await lifecycle.get_order(db, order_id)
    except Exception:
        await subscription.close()
        raise
    current = lifecycle.order_snapshot(order)
    logger.info(f"📡 Client subscribed to order #{order_id[:6]}")

    async def event_generator() -> AsyncIterator[Dict[str, str]]:
        async with subscription:
            yield {"event": "order", "data": json.dumps(current)}
            if order.is_terminal:
                return
            async for snapshot in subscription:
                yield {"event": "order", "data": json.dumps(snapshot)}
                if snapshot["status"] in FINAL_STATES:
                    logger.info(f"📡 Order #{order_id[:6]} reached {snapshot['status']}, closing stream")
                    break

    return EventSourceResponse(event_generator())
