"""
Order lifecycle

Pending Driver Assignment --accept--> Pending Pickup --> In Transit --> Delivered
any non-terminal state --cancel--> Cancelled

Status changes run through run_in_transaction: the order row carries a
version counter, so two drivers accepting the same order cannot both win.
"""

from decimal import Decimal
from typing import List, Optional, Tuple

from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from freight.core.exceptions import (
    ConflictError, FreightError, NotFoundError, PersistenceError, ValidationError
)
from freight.core.logging_config import get_logger
from freight.db.transaction import persist, run_in_transaction
from freight.models.enums import AccountStatus, OrderStatus, PaymentStatus, VehicleType, Role
from freight.models.order import Order, OrderVisibility
from freight.models.profile import Trader
from freight.schemas.order import OrderCreate, OrderResponse
from freight.services.broadcaster import order_broadcaster
from freight.services.matching import notify_relevant_parties
from freight.services.roles import handler_for, resolve_party

logger = get_logger(__name__)

# target status -> allowed current statuses and the assigned party's new status
TRANSITIONS = {
    OrderStatus.PENDING_PICKUP: {
        "from": [OrderStatus.PENDING_DRIVER_ASSIGNMENT],
        "party_status": AccountStatus.BUSY,
    },
    OrderStatus.IN_TRANSIT: {
        "from": [OrderStatus.PENDING_PICKUP],
        "party_status": AccountStatus.ON_TRIP,
    },
    OrderStatus.DELIVERED: {
        "from": [OrderStatus.IN_TRANSIT],
        "party_status": AccountStatus.AVAILABLE,
    },
    OrderStatus.CANCELLED: {
        "from": [
            OrderStatus.PENDING_DRIVER_ASSIGNMENT,
            OrderStatus.PENDING_PICKUP,
            OrderStatus.IN_TRANSIT,
        ],
        "party_status": AccountStatus.AVAILABLE,
    },
}

HISTORY_STATUSES = [OrderStatus.DELIVERED.value, OrderStatus.CANCELLED.value]


def base_order_query():
    """Order query with the payment trail and hidden-for set loaded"""
    return select(Order).options(
        selectinload(Order.payment_history),
        selectinload(Order.payment_requests),
        selectinload(Order.hidden_entries),
    )


async def load_order(db: AsyncSession, order_id: str) -> Optional[Order]:
    """Fresh read of an order, overwriting any stale identity-map copy"""
    result = await db.execute(
        base_order_query()
        .where(Order.id == order_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def get_order(db: AsyncSession, order_id: str) -> Order:
    order = await load_order(db, order_id)
    if order is None:
        raise NotFoundError(f"Order {order_id} not found.")
    return order


def order_snapshot(order: Order) -> dict:
    return OrderResponse.model_validate(order).model_dump(mode="json")


async def publish_order(db: AsyncSession, order_id: str) -> Order:
    """Re-read a committed order and push it to live subscribers"""
    order = await get_order(db, order_id)
    await order_broadcaster.publish(order.id, order_snapshot(order))
    return order


async def create_order(db: AsyncSession, order_in: OrderCreate) -> Tuple[Order, int]:
    """
    Persist a new order and notify matching drivers and companies

    Returns the order and the number of parties notified. A matching
    failure is logged and never undoes the order.
    """
    trader = await db.get(Trader, order_in.trader_id)
    if trader is None:
        raise NotFoundError(f"Trader {order_in.trader_id} not found.")

    data = order_in.model_dump(mode="json")
    data["weight"] = Decimal(str(order_in.weight))
    data["price"] = Decimal(str(order_in.price))
    if order_in.vehicle_type == VehicleType.HEAVY_VEHICLE:
        if not order_in.trailer_length or not order_in.trailer_type:
            raise ValidationError("Heavy vehicle orders require a trailer length and a trailer type.")
    else:
        data["trailer_length"] = None
        data["trailer_type"] = None

    order = Order(
        **data,
        status=OrderStatus.PENDING_DRIVER_ASSIGNMENT.value,
        payment_status=PaymentStatus.PENDING.value,
    )
    db.add(order)
    await persist(db)
    order_id = order.id
    logger.info(f"✅ Order #{order.short_id} created by trader {trader.full_name} ({order.vehicle_type})")

    try:
        notified_count = await notify_relevant_parties(db, order.vehicle_type, order_id)
    except FreightError as e:
        logger.warning(f"⚠️ Matching failed for order #{order_id[:6]}: {e.message}")
        notified_count = 0

    return await get_order(db, order_id), notified_count


async def _set_party_status(db: AsyncSession, party_id: str, status: AccountStatus) -> None:
    try:
        _, party = await resolve_party(db, party_id)
    except NotFoundError:
        logger.warning(f"⚠️ Assigned party {party_id} no longer exists, status not updated")
        return
    party.status = status.value


async def update_order_status(
    db: AsyncSession,
    order_id: str,
    new_status: OrderStatus,
    driver_id: str = None,
) -> Order:
    """
    Move an order along its lifecycle

    Accepting (-> Pending Pickup) is a compare-and-swap on
    Pending Driver Assignment; the loser gets ConflictError.
    """
    try:
        target = OrderStatus(new_status)
    except ValueError:
        raise ValidationError(f"Unknown order status: {new_status}.") from None
    transition = TRANSITIONS.get(target)
    if transition is None:
        raise ValidationError(f"Orders cannot be moved back to {target.value}.")
    if target == OrderStatus.PENDING_PICKUP and not driver_id:
        raise ValidationError("A driver is required to accept an order.")

    async def work(session: AsyncSession) -> None:
        order = await load_order(session, order_id)
        if order is None:
            raise NotFoundError(f"Order {order_id} not found.")

        if order.status not in transition["from"]:
            if target == OrderStatus.PENDING_PICKUP:
                raise ConflictError("This order has already been accepted.")
            raise ConflictError(f"Cannot change order status from {order.status} to {target.value}.")

        if target == OrderStatus.PENDING_PICKUP:
            await resolve_party(session, driver_id)
            order.driver_id = driver_id

        order.status = target.value
        if order.driver_id:
            await _set_party_status(session, order.driver_id, transition["party_status"])

    await run_in_transaction(db, work)
    logger.info(f"🚚 Order #{order_id[:6]} -> {target.value}")
    return await publish_order(db, order_id)


async def hide_order(db: AsyncSession, order_id: str, user_id: str) -> None:
    """Hide an order from one user's history; repeat calls are no-ops"""
    if not user_id:
        raise ValidationError("User ID is required.")

    order = await load_order(db, order_id)
    if order is None:
        raise NotFoundError(f"Order {order_id} not found.")
    if user_id in order.hidden_for:
        return

    db.add(OrderVisibility(order_id=order_id, user_id=user_id))
    try:
        await db.commit()
    except IntegrityError:
        # hidden concurrently by another request
        await db.rollback()
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"❌ Failed to hide order #{order_id[:6]}: {e}", exc_info=True)
        raise PersistenceError("Failed to hide order.") from e


async def hide_all_history(db: AsyncSession, user_id: str, role: Role) -> int:
    """
    Hide every Delivered/Cancelled order of the user in one batch

    Admins hide the whole platform history for themselves. Returns the
    number of orders newly hidden.
    """
    if not user_id:
        raise ValidationError("User ID is required.")
    handler = handler_for(role)

    already_hidden = select(OrderVisibility.order_id).where(OrderVisibility.user_id == user_id)
    query = select(Order.id).where(
        Order.status.in_(HISTORY_STATUSES),
        Order.id.not_in(already_hidden),
    )
    column = handler.order_column(Order)
    if column is not None:
        query = query.where(column == user_id)

    order_ids = (await db.execute(query)).scalars().all()
    if not order_ids:
        return 0

    db.add_all([OrderVisibility(order_id=oid, user_id=user_id) for oid in order_ids])
    await persist(db)
    logger.info(f"🙈 Hid {len(order_ids)} order(s) from {handler.label} {user_id} history")
    return len(order_ids)


async def list_orders(
    db: AsyncSession,
    trader_id: str = None,
    driver_id: str = None,
    status: str = None,
    viewer_id: str = None,
    skip: int = 0,
    limit: int = 100,
) -> Tuple[List[Order], int]:
    """Newest first; viewer_id drops orders that viewer has hidden"""
    filters = []
    if trader_id:
        filters.append(Order.trader_id == trader_id)
    if driver_id:
        filters.append(Order.driver_id == driver_id)
    if status:
        try:
            filters.append(Order.status == OrderStatus(status).value)
        except ValueError:
            raise ValidationError(f"Unknown order status: {status}.") from None
    if viewer_id:
        filters.append(~Order.hidden_entries.any(OrderVisibility.user_id == viewer_id))

    total = (await db.execute(select(func.count(Order.id)).where(*filters))).scalar() or 0
    result = await db.execute(
        base_order_query()
        .where(*filters)
        .order_by(Order.created_at.desc())
        .offset(skip)
        .limit(limit)
    )
    return list(result.scalars().all()), total
