"""
Notification sink

These helpers only add rows to the session; the caller decides when to
commit, so a notification can share the transaction of the change that
caused it.
"""

from typing import Any, Dict, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from freight.models.enums import Role
from freight.models.notification import Notification


def send_notification(
    db: AsyncSession,
    scope: str,
    recipient_id: str,
    title: str,
    description: str,
    data: Optional[Dict[str, Any]] = None,
) -> Notification:
    notification = Notification(
        scope=scope,
        recipient_id=recipient_id,
        title=title,
        description=description,
        is_read=False,
        data=data,
    )
    db.add(notification)
    return notification


def notify_admin(
    db: AsyncSession,
    title: str,
    description: str,
    data: Optional[Dict[str, Any]] = None,
) -> Notification:
    """Append to the global admin list"""
    return send_notification(db, Role.ADMIN.value, None, title, description, data)
