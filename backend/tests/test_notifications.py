"""Notification inboxes"""

import pytest

from freight.core.exceptions import NotFoundError, ValidationError
from freight.models.enums import Role
from freight.services import notifications
from freight.services.notifier import notify_admin, send_notification


@pytest.fixture
def seed(db):
    async def _seed():
        send_notification(db, Role.DRIVER.value, "d1", "New Job Available!", "Job one")
        send_notification(db, Role.DRIVER.value, "d1", "New Job Available!", "Job two")
        send_notification(db, Role.DRIVER.value, "d2", "New Job Available!", "Someone else's job")
        notify_admin(db, "Payment Request: Final", "Salem requested AED 294.00")
        await db.commit()
    return _seed


@pytest.mark.asyncio
async def test_user_inbox_is_per_recipient(db, seed):
    await seed()

    items, unread = await notifications.list_notifications(db, Role.DRIVER, recipient_id="d1")

    assert unread == 2
    assert {n.description for n in items} == {"Job one", "Job two"}


@pytest.mark.asyncio
async def test_user_inbox_needs_recipient(db, seed):
    await seed()

    with pytest.raises(ValidationError):
        await notifications.list_notifications(db, Role.DRIVER)


@pytest.mark.asyncio
async def test_admin_inbox_is_global(db, seed):
    await seed()

    items, unread = await notifications.list_notifications(db, Role.ADMIN)

    assert unread == 1
    assert items[0].title == "Payment Request: Final"
    assert items[0].recipient_id is None


@pytest.mark.asyncio
async def test_mark_read(db, seed):
    await seed()
    items, _ = await notifications.list_notifications(db, Role.DRIVER, recipient_id="d1")

    notification = await notifications.mark_notification_read(
        db, Role.DRIVER, items[0].id, recipient_id="d1"
    )
    assert notification.is_read is True

    _, unread = await notifications.list_notifications(db, Role.DRIVER, recipient_id="d1")
    assert unread == 1
    unread_items, _ = await notifications.list_notifications(
        db, Role.DRIVER, recipient_id="d1", unread_only=True
    )
    assert [n.id for n in unread_items] == [items[1].id]


@pytest.mark.asyncio
async def test_mark_all_read(db, seed):
    await seed()

    assert await notifications.mark_all_read(db, Role.DRIVER, recipient_id="d1") == 2

    _, unread = await notifications.list_notifications(db, Role.DRIVER, recipient_id="d1")
    assert unread == 0
    _, unread = await notifications.list_notifications(db, Role.DRIVER, recipient_id="d2")
    assert unread == 1


@pytest.mark.asyncio
async def test_delete_only_own_notification(db, seed):
    await seed()
    others, _ = await notifications.list_notifications(db, Role.DRIVER, recipient_id="d2")

    with pytest.raises(NotFoundError):
        await notifications.delete_notification(db, Role.DRIVER, others[0].id, recipient_id="d1")
    with pytest.raises(NotFoundError):
        await notifications.delete_notification(db, Role.ADMIN, others[0].id)

    await notifications.delete_notification(db, Role.DRIVER, others[0].id, recipient_id="d2")
    items, _ = await notifications.list_notifications(db, Role.DRIVER, recipient_id="d2")
    assert items == []
