"""
Notification inbox API

scope is trader / driver / transport_company / admin; user scopes need
recipient_id, admin reads the global list.
"""
from typing import Any, Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from freight.core.deps import get_db
from freight.models.enums import Role
from freight.schemas.notification import NotificationListResponse, NotificationResponse
from freight.services import notifications

router = APIRouter()


@router.get("/{scope}")
async def list_notifications(
    *,
    db: AsyncSession = Depends(get_db),
    scope: Role,
    recipient_id: Optional[str] = Query(None),
    unread_only: bool = Query(False),
    limit: int = Query(50, ge=1, le=200)) -> Any:
    items, unread = await notifications.list_notifications(
        db, scope, recipient_id=recipient_id, unread_only=unread_only, limit=limit
    )
    inbox = NotificationListResponse(
        data=[NotificationResponse.model_validate(n) for n in items],
        total=len(items),
        unread=unread,
    )
    return {"success": True, **inbox.model_dump()}


@router.post("/{scope}/read-all")
async def mark_all_read(
    *,
    db: AsyncSession = Depends(get_db),
    scope: Role,
    recipient_id: Optional[str] = Query(None)) -> Any:
    updated = await notifications.mark_all_read(db, scope, recipient_id=recipient_id)
    return {"success": True, "updated": updated}


@router.post("/{scope}/{notification_id}/read")
async def mark_notification_read(
    *,
    db: AsyncSession = Depends(get_db),
    scope: Role,
    notification_id: int,
    recipient_id: Optional[str] = Query(None)) -> Any:
    notification = await notifications.mark_notification_read(
        db, scope, notification_id, recipient_id=recipient_id
    )
    return {"success": True, "notification": NotificationResponse.model_validate(notification)}


@router.delete("/{scope}/{notification_id}")
async def delete_notification(
    *,
    db: AsyncSession = Depends(get_db),
    scope: Role,
    notification_id: int,
    recipient_id: Optional[str] = Query(None)) -> Any:
    await notifications.delete_notification(db, scope, notification_id, recipient_id=recipient_id)
    return {"success": True}
