"""
Account profiles

Creation, field updates, admin status changes, warnings, deletion and
fleet listing for traders, drivers and transport companies.
"""

from datetime import datetime
from typing import List, Optional, Tuple

from pydantic import BaseModel
from sqlalchemy import select, func, update
from sqlalchemy.ext.asyncio import AsyncSession

from freight.core.exceptions import NotFoundError, ValidationError
from freight.core.logging_config import get_logger
from freight.db.transaction import persist
from freight.models.enums import AccountStatus, Role
from freight.models.profile import Driver, TransportCompany
from freight.services.notifier import send_notification
from freight.services.roles import Profile, RoleHandler, handler_for, resolve_party

logger = get_logger(__name__)

WARNING_TITLE = "Account Warning"
WARNING_DESCRIPTION = (
    "A warning has been issued to your account due to a policy violation. "
    "Please adhere to the platform guidelines."
)


def _profile_handler(role) -> RoleHandler:
    handler = handler_for(role)
    if handler.model is None:
        raise ValidationError(f"Invalid user type: {handler.role.value}.")
    return handler


async def _check_company(db: AsyncSession, company_id: Optional[str]) -> None:
    if company_id and await db.get(TransportCompany, company_id) is None:
        raise NotFoundError(f"Transport company {company_id} not found.")


async def create_profile(db: AsyncSession, role: Role, profile_in: BaseModel) -> Profile:
    """New account, always Pending until an admin approves it"""
    handler = _profile_handler(role)
    data = profile_in.model_dump(mode="json")
    if handler.role == Role.DRIVER:
        await _check_company(db, data.get("company_id"))

    profile = handler.model(**data, status=AccountStatus.PENDING.value)
    db.add(profile)
    await persist(db)
    logger.info(f"✅ Created {handler.label} {profile.display_name} ({profile.id})")
    return profile


async def get_profile(db: AsyncSession, role: Role, profile_id: str) -> Profile:
    return await _profile_handler(role).get_profile(db, profile_id)


async def list_profiles(
    db: AsyncSession,
    role: Role,
    status: str = None,
    skip: int = 0,
    limit: int = 100,
) -> Tuple[List[Profile], int]:
    handler = _profile_handler(role)
    model = handler.model
    filters = []
    if status:
        filters.append(model.status == status)

    total = (await db.execute(select(func.count(model.id)).where(*filters))).scalar() or 0
    result = await db.execute(
        select(model).where(*filters).order_by(model.created_at.desc()).offset(skip).limit(limit)
    )
    return list(result.scalars().all()), total


async def update_profile(
    db: AsyncSession, role: Role, profile_id: str, profile_in: BaseModel
) -> Profile:
    """Apply only the fields that were sent"""
    handler = _profile_handler(role)
    profile = await handler.get_profile(db, profile_id)

    update_data = profile_in.model_dump(mode="json", exclude_unset=True)
    for field, value in update_data.items():
        setattr(profile, field, value)

    await persist(db)
    logger.info(f"✏️ Updated {handler.label} {profile_id}: {', '.join(update_data) or 'no changes'}")
    return profile


async def update_profile_status(
    db: AsyncSession, role: Role, profile_id: str, status: AccountStatus
) -> Profile:
    """
    Set an account status; Active also sends "Account Approved!"

    For the driver role the id may name a transport company instead.
    """
    handler = _profile_handler(role)
    if handler.role == Role.DRIVER:
        handler, profile = await resolve_party(db, profile_id)
    else:
        profile = await handler.get_profile(db, profile_id)

    try:
        status = AccountStatus(status)
    except ValueError:
        raise ValidationError(f"Unknown account status: {status}.") from None
    profile.status = status.value
    if status == AccountStatus.ACTIVE:
        send_notification(
            db,
            handler.scope,
            profile.id,
            "Account Approved!",
            handler.approval_description,
            {"view": handler.dashboard_view},
        )

    await persist(db)
    logger.info(f"🔖 {handler.label.capitalize()} {profile.id} status -> {status.value}")
    return profile


async def warn_user(db: AsyncSession, role: Role, profile_id: str) -> Profile:
    handler = _profile_handler(role)
    profile = await handler.get_profile(db, profile_id)

    profile.status = AccountStatus.WARNED.value
    send_notification(db, handler.scope, profile.id, WARNING_TITLE, WARNING_DESCRIPTION)

    await persist(db)
    logger.warning(f"⚠️ Warning issued to {handler.label} {profile.id}")
    return profile


async def delete_user(db: AsyncSession, role: Role, profile_id: str) -> None:
    """
    Hard delete; orders keep the dangling id

    A deleted company's fleet drivers become independent drivers.
    """
    handler = _profile_handler(role)
    profile = await handler.get_profile(db, profile_id)
    if handler.role == Role.TRANSPORT_COMPANY:
        released = await db.execute(
            update(Driver).where(Driver.company_id == profile.id).values(company_id=None)
        )
        if released.rowcount:
            logger.info(f"🚚 Released {released.rowcount} fleet driver(s) of company {profile.id}")
    await db.delete(profile)
    await persist(db)
    logger.info(f"🗑️ Deleted {handler.label} {profile_id}")


async def update_profile_picture_url(
    db: AsyncSession, role: Role, profile_id: str, photo_url: str
) -> Profile:
    if not photo_url:
        raise ValidationError("Photo URL is required.")
    handler = _profile_handler(role)
    profile = await handler.get_profile(db, profile_id)
    profile.photo_url = photo_url
    await persist(db)
    return profile


async def update_driver_location(
    db: AsyncSession, driver_id: str, latitude: float, longitude: float
) -> Driver:
    driver = await handler_for(Role.DRIVER).get_profile(db, driver_id)
    driver.current_lat = latitude
    driver.current_lng = longitude
    driver.location_updated_at = datetime.utcnow()
    await persist(db)
    return driver


async def list_fleet(db: AsyncSession, company_id: str) -> List[Driver]:
    """Drivers registered under a transport company"""
    await handler_for(Role.TRANSPORT_COMPANY).get_profile(db, company_id)
    result = await db.execute(
        select(Driver).where(Driver.company_id == company_id).order_by(Driver.full_name)
    )
    return list(result.scalars().all())
