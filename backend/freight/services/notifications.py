"""
Notification inbox queries

User scopes (trader, driver, transport_company) are keyed by recipient;
the admin scope is one global list.
"""

from typing import List, Optional, Tuple

from sqlalchemy import select, func, update
from sqlalchemy.ext.asyncio import AsyncSession

from freight.core.exceptions import NotFoundError, ValidationError
from freight.core.logging_config import get_logger
from freight.db.transaction import persist
from freight.models.enums import Role
from freight.models.notification import Notification
from freight.services.roles import handler_for

logger = get_logger(__name__)


def _inbox_filters(scope, recipient_id: Optional[str]) -> list:
    handler = handler_for(scope)
    filters = [Notification.scope == handler.scope]
    if handler.role == Role.ADMIN:
        filters.append(Notification.recipient_id.is_(None))
    else:
        if not recipient_id:
            raise ValidationError("Recipient ID is required for user notifications.")
        filters.append(Notification.recipient_id == recipient_id)
    return filters


async def list_notifications(
    db: AsyncSession,
    scope: str,
    recipient_id: str = None,
    unread_only: bool = False,
    limit: int = 50,
) -> Tuple[List[Notification], int]:
    """Newest first, with the unread count of the whole inbox"""
    filters = _inbox_filters(scope, recipient_id)

    unread = (await db.execute(
        select(func.count(Notification.id)).where(*filters, Notification.is_read.is_(False))
    )).scalar() or 0

    query = select(Notification).where(*filters)
    if unread_only:
        query = query.where(Notification.is_read.is_(False))
    result = await db.execute(
        query.order_by(Notification.created_at.desc(), Notification.id.desc()).limit(limit)
    )
    return list(result.scalars().all()), unread


async def _get_notification(
    db: AsyncSession, scope: str, notification_id: int, recipient_id: Optional[str]
) -> Notification:
    filters = _inbox_filters(scope, recipient_id)
    result = await db.execute(
        select(Notification).where(Notification.id == notification_id, *filters)
    )
    notification = result.scalar_one_or_none()
    if notification is None:
        raise NotFoundError(f"Notification {notification_id} not found.")
    return notification


async def mark_notification_read(
    db: AsyncSession, scope: str, notification_id: int, recipient_id: str = None
) -> Notification:
    notification = await _get_notification(db, scope, notification_id, recipient_id)
    notification.is_read = True
    await persist(db)
    return notification


async def mark_all_read(db: AsyncSession, scope: str, recipient_id: str = None) -> int:
    filters = _inbox_filters(scope, recipient_id)
    result = await db.execute(
        update(Notification)
        .where(*filters, Notification.is_read.is_(False))
        .values(is_read=True)
    )
    await persist(db)
    return result.rowcount or 0


async def delete_notification(
    db: AsyncSession, scope: str, notification_id: int, recipient_id: str = None
) -> None:
    """Users may only delete their own; admin deletes from the global list"""
    notification = await _get_notification(db, scope, notification_id, recipient_id)
    await db.delete(notification)
    await persist(db)
    logger.info(f"🗑️ Deleted {scope} notification {notification_id}")
