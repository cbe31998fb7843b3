"""
In-memory order event broadcaster

Lifecycle and ledger operations publish an order snapshot after commit;
SSE endpoints subscribe per order id. Every subscription is an explicit
handle that must be closed (use it as an async context manager).

- Stream max buffer: 10 snapshots per subscriber
- A full buffer drops the snapshot for that subscriber only
- Empty subscriber lists are removed on close
"""

from typing import Dict, List

from anyio import BrokenResourceError, ClosedResourceError, WouldBlock, create_memory_object_stream
from anyio.streams.memory import MemoryObjectReceiveStream, MemoryObjectSendStream

from freight.core.logging_config import get_logger

logger = get_logger(__name__)

MAX_BUFFER_SIZE = 10


class Subscription:
    """Live feed of one order's snapshots"""

    def __init__(
        self,
        broadcaster: "OrderBroadcaster",
        order_id: str,
        send_stream: MemoryObjectSendStream,
        receive_stream: MemoryObjectReceiveStream,
    ):
        self.order_id = order_id
        self._broadcaster = broadcaster
        self._send_stream = send_stream
        self._receive_stream = receive_stream
        self.closed = False

    async def receive(self) -> dict:
        return await self._receive_stream.receive()

    def __aiter__(self):
        return self._receive_stream.__aiter__()

    async def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        self._broadcaster._remove(self)
        await self._send_stream.aclose()
        await self._receive_stream.aclose()

    async def __aenter__(self) -> "Subscription":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()


class OrderBroadcaster:
    def __init__(self):
        # order_id -> open subscriptions
        self._subscribers: Dict[str, List[Subscription]] = {}

    def subscribe(self, order_id: str) -> Subscription:
        send_stream, receive_stream = create_memory_object_stream[dict](max_buffer_size=MAX_BUFFER_SIZE)
        subscription = Subscription(self, order_id, send_stream, receive_stream)
        self._subscribers.setdefault(order_id, []).append(subscription)
        logger.debug(
            f"📡 Subscribed to order {order_id[:6]} "
            f"(total subscribers: {len(self._subscribers[order_id])})"
        )
        return subscription

    def subscriber_count(self, order_id: str) -> int:
        return len(self._subscribers.get(order_id, []))

    async def publish(self, order_id: str, snapshot: dict) -> int:
        """
        Push a snapshot to every subscriber of the order

        Returns the number of subscribers that received it.
        """
        delivered = 0
        for subscription in list(self._subscribers.get(order_id, [])):
            try:
                subscription._send_stream.send_nowait(snapshot)
                delivered += 1
            except WouldBlock:
                logger.warning(f"⚠️ Subscriber buffer full for order {order_id[:6]}, dropping snapshot")
            except (BrokenResourceError, ClosedResourceError):
                self._remove(subscription)
        if delivered:
            logger.debug(f"📡 Order {order_id[:6]} snapshot delivered to {delivered} subscriber(s)")
        return delivered

    def _remove(self, subscription: Subscription) -> None:
        subscribers = self._subscribers.get(subscription.order_id)
        if not subscribers:
            return
        if subscription in subscribers:
            subscribers.remove(subscription)
        if not subscribers:
            del self._subscribers[subscription.order_id]


# process-wide instance
order_broadcaster = OrderBroadcaster()


def get_broadcaster() -> OrderBroadcaster:
    return order_broadcaster
