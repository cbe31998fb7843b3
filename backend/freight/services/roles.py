"""
Role dispatch

One handler per account role. A handler knows the profile model behind
the role, the order column that identifies the account on orders, the
notification scope and the dashboard the account lands on.
"""

from typing import Optional, Tuple, Type, Union

from sqlalchemy.ext.asyncio import AsyncSession

from freight.core.exceptions import NotFoundError, ValidationError
from freight.models.enums import Role
from freight.models.profile import Trader, Driver, TransportCompany

Profile = Union[Trader, Driver, TransportCompany]


class RoleHandler:
    role: Role
    model: Optional[Type] = None
    order_field: Optional[str] = None
    dashboard_view: Optional[str] = None
    approval_description = "Your account has been approved."

    @property
    def scope(self) -> str:
        return self.role.value

    @property
    def label(self) -> str:
        return self.role.value.replace("_", " ")

    def order_column(self, order_model):
        """Order column matching this role, None for all orders"""
        if self.order_field is None:
            return None
        return getattr(order_model, self.order_field)

    async def get_profile(self, db: AsyncSession, profile_id: str) -> Profile:
        if self.model is None:
            raise ValidationError(f"The {self.label} role has no profile.")
        profile = await db.get(self.model, profile_id)
        if profile is None:
            raise NotFoundError(f"{self.label.capitalize()} {profile_id} not found.")
        return profile


class TraderHandler(RoleHandler):
    role = Role.TRADER
    model = Trader
    order_field = "trader_id"
    dashboard_view = "trader_dashboard"
    approval_description = "Your account has been approved. You can now log in and place orders."


class DriverHandler(RoleHandler):
    role = Role.DRIVER
    model = Driver
    order_field = "driver_id"
    dashboard_view = "driver_dashboard"
    approval_description = "Your account has been approved. You can now log in and start receiving jobs."


class TransportCompanyHandler(RoleHandler):
    role = Role.TRANSPORT_COMPANY
    model = TransportCompany
    # a company accepting an order is recorded as its driver
    order_field = "driver_id"
    dashboard_view = "transport_company_dashboard"
    approval_description = "Your account has been approved. You can now log in and manage your fleet."


class AdminHandler(RoleHandler):
    role = Role.ADMIN


ROLE_HANDLERS = {
    handler.role: handler
    for handler in (TraderHandler(), DriverHandler(), TransportCompanyHandler(), AdminHandler())
}


def handler_for(role) -> RoleHandler:
    try:
        return ROLE_HANDLERS[Role(role)]
    except ValueError:
        raise ValidationError(f"Invalid user type: {role}.") from None


async def resolve_party(db: AsyncSession, party_id: str) -> Tuple[RoleHandler, Profile]:
    """
    Look up the account behind an order's driver_id

    Drivers first, then transport companies.
    """
    for role in (Role.DRIVER, Role.TRANSPORT_COMPANY):
        handler = ROLE_HANDLERS[role]
        profile = await db.get(handler.model, party_id)
        if profile is not None:
            return handler, profile
    raise NotFoundError(f"User {party_id} not found in drivers or transport companies.")
