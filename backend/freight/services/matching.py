"""
Matching engine

Finds who can carry a new order and tells them about it:
1. independent drivers (no company) that are Available with the right vehicle
2. Available transport companies with at least one capable fleet driver

Companies are notified instead of their drivers. Fleet drivers are not
filtered on their own availability.
"""

from typing import List, Tuple

from sqlalchemy import select, exists
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from freight.core.exceptions import NotFoundError, PartialNotificationFailure, ValidationError
from freight.core.logging_config import get_logger
from freight.models.enums import AccountStatus, Role, VehicleType
from freight.models.order import Order
from freight.models.profile import Driver, TransportCompany
from freight.services.notifier import send_notification

logger = get_logger(__name__)

NEW_JOB_TITLE = "New Job Available!"


def capability_filters(vehicle_type: str, order: Order) -> list:
    """Driver columns that must match the order"""
    filters = [Driver.vehicle_cat == vehicle_type]
    if vehicle_type == VehicleType.HEAVY_VEHICLE.value:
        if order.trailer_length:
            filters.append(Driver.trailer_length == order.trailer_length)
        if order.trailer_type:
            filters.append(Driver.trailer_type == order.trailer_type)
    return filters


async def find_relevant_parties(
    db: AsyncSession, vehicle_type: str, order: Order
) -> List[Tuple[str, str]]:
    """(scope, recipient_id) pairs to notify, drivers first"""
    capable = capability_filters(vehicle_type, order)

    drivers = await db.execute(
        select(Driver.id)
        .where(
            Driver.company_id.is_(None),
            Driver.status == AccountStatus.AVAILABLE.value,
            *capable,
        )
        .order_by(Driver.created_at)
    )

    has_capable_driver = exists().where(Driver.company_id == TransportCompany.id, *capable)
    companies = await db.execute(
        select(TransportCompany.id)
        .where(
            TransportCompany.status == AccountStatus.AVAILABLE.value,
            has_capable_driver,
        )
        .order_by(TransportCompany.created_at)
    )

    recipients = [(Role.DRIVER.value, driver_id) for driver_id in drivers.scalars().all()]
    recipients += [(Role.TRANSPORT_COMPANY.value, company_id) for company_id in companies.scalars().all()]
    return recipients


async def notify_relevant_parties(db: AsyncSession, vehicle_type: str, order_id: str) -> int:
    """
    Send "New Job Available!" to every party able to carry the order

    Each notification is committed on its own; a failed recipient is
    logged and skipped. Returns how many recipients were notified.
    """
    order = await db.get(Order, order_id)
    if order is None:
        raise NotFoundError(f"Order {order_id} not found.")

    try:
        vehicle_type = VehicleType(vehicle_type).value
    except ValueError:
        raise ValidationError(f"Unknown vehicle type: {vehicle_type}.") from None
    description = (
        f"A new job matching your vehicle type ({vehicle_type}) is available. "
        f"Order #{order.short_id}."
    )

    notified = 0
    for scope, recipient_id in await find_relevant_parties(db, vehicle_type, order):
        try:
            send_notification(db, scope, recipient_id, NEW_JOB_TITLE, description, {"order_id": order_id})
            await db.commit()
            notified += 1
        except SQLAlchemyError as e:
            await db.rollback()
            failure = PartialNotificationFailure(scope, recipient_id, e)
            logger.warning(f"⚠️ {failure.message}")

    logger.info(f"📣 Order #{order_id[:6]}: notified {notified} driver(s)/company(ies)")
    return notified
