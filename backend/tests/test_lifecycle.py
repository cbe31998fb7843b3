"""Order lifecycle: creation, transitions, hiding history"""

import asyncio
from decimal import Decimal

import pytest
from pydantic import ValidationError as SchemaValidationError

from freight.core.exceptions import ConflictError, NotFoundError, ValidationError
from freight.models import Driver, TransportCompany
from freight.models.enums import OrderStatus, Role
from freight.schemas.order import OrderCreate
from freight.services import lifecycle


@pytest.mark.asyncio
async def test_create_order_initial_state(db, make_trader, make_order):
    trader = await make_trader()

    order, _ = await make_order(trader.id)

    assert order.status == OrderStatus.PENDING_DRIVER_ASSIGNMENT.value
    assert order.payment_status == "Pending"
    assert order.amount_paid_by_trader == Decimal("0")
    assert order.amount_paid_to_driver == Decimal("0")
    assert order.payment_history == []
    assert order.payment_requests == []
    assert order.hidden_for == []
    assert order.driver_id is None
    assert len(order.id) == 32


@pytest.mark.asyncio
async def test_create_order_unknown_trader(db, make_order):
    with pytest.raises(NotFoundError):
        await make_order("no-such-trader")


@pytest.mark.asyncio
async def test_heavy_vehicle_requires_trailer(db, make_trader, make_order):
    trader = await make_trader()

    with pytest.raises(ValidationError):
        await make_order(trader.id, vehicle_type="heavy-vehicle", trailer_type="flatbed")


@pytest.mark.asyncio
async def test_non_heavy_order_drops_trailer_fields(db, make_trader, make_order):
    trader = await make_trader()

    order, _ = await make_order(trader.id, trailer_length="15", trailer_type="box")

    assert order.trailer_length is None
    assert order.trailer_type is None


def test_numeric_trailer_length_is_normalised():
    order_in = OrderCreate(
        trader_id="t1", origin="A", destination="B", weight=20, material="Steel",
        vehicle_type="heavy-vehicle", trailer_length=15, trailer_type="flatbed", price=5000,
    )
    assert order_in.trailer_length.value == "15"

    order_in = OrderCreate(
        trader_id="t1", origin="A", destination="B", weight=20, material="Steel",
        vehicle_type="heavy-vehicle", trailer_length=13.5, trailer_type="flatbed", price=5000,
    )
    assert order_in.trailer_length.value == "13.5"


def test_order_schema_rejects_missing_route():
    with pytest.raises(SchemaValidationError):
        OrderCreate(
            trader_id="t1", origin="", destination="B", weight=1,
            material="Steel", vehicle_type="1-tonn", price=100,
        )


@pytest.mark.asyncio
async def test_full_lifecycle_updates_driver_status(db, make_trader, make_driver, make_order):
    trader = await make_trader()
    driver = await make_driver()
    order, _ = await make_order(trader.id)

    order = await lifecycle.update_order_status(db, order.id, OrderStatus.PENDING_PICKUP, driver.id)
    assert order.status == OrderStatus.PENDING_PICKUP.value
    assert order.driver_id == driver.id
    assert (await db.get(Driver, driver.id, populate_existing=True)).status == "Busy"

    await lifecycle.update_order_status(db, order.id, OrderStatus.IN_TRANSIT)
    assert (await db.get(Driver, driver.id, populate_existing=True)).status == "On-Trip"

    order = await lifecycle.update_order_status(db, order.id, OrderStatus.DELIVERED)
    assert order.status == OrderStatus.DELIVERED.value
    assert (await db.get(Driver, driver.id, populate_existing=True)).status == "Available"


@pytest.mark.asyncio
async def test_company_accepts_order(db, make_trader, make_company, make_order):
    trader = await make_trader()
    company = await make_company()
    order, _ = await make_order(trader.id)

    order = await lifecycle.update_order_status(db, order.id, OrderStatus.PENDING_PICKUP, company.id)

    assert order.driver_id == company.id
    assert (await db.get(TransportCompany, company.id, populate_existing=True)).status == "Busy"


@pytest.mark.asyncio
async def test_accept_requires_driver(db, make_trader, make_order):
    trader = await make_trader()
    order, _ = await make_order(trader.id)

    with pytest.raises(ValidationError):
        await lifecycle.update_order_status(db, order.id, OrderStatus.PENDING_PICKUP)


@pytest.mark.asyncio
async def test_second_acceptor_conflicts(db, make_trader, make_driver, make_order):
    trader = await make_trader()
    first = await make_driver(full_name="First")
    second = await make_driver(full_name="Second")
    order, _ = await make_order(trader.id)

    await lifecycle.update_order_status(db, order.id, OrderStatus.PENDING_PICKUP, first.id)

    with pytest.raises(ConflictError):
        await lifecycle.update_order_status(db, order.id, OrderStatus.PENDING_PICKUP, second.id)

    order = await lifecycle.get_order(db, order.id)
    assert order.driver_id == first.id


@pytest.mark.asyncio
async def test_concurrent_accept_has_one_winner(
    db, session_factory, make_trader, make_driver, make_order
):
    trader = await make_trader()
    drivers = [await make_driver(full_name=f"Driver {i}") for i in range(3)]
    order, _ = await make_order(trader.id)

    async def accept(driver_id):
        async with session_factory() as session:
            return await lifecycle.update_order_status(
                session, order.id, OrderStatus.PENDING_PICKUP, driver_id
            )

    results = await asyncio.gather(*(accept(d.id) for d in drivers), return_exceptions=True)

    winners = [r for r in results if not isinstance(r, Exception)]
    losers = [r for r in results if isinstance(r, Exception)]
    assert len(winners) == 1
    assert all(isinstance(e, ConflictError) for e in losers)

    order = await lifecycle.get_order(db, order.id)
    assert order.driver_id == winners[0].driver_id


@pytest.mark.asyncio
async def test_backward_transition_conflicts(db, make_trader, make_driver, make_order):
    trader = await make_trader()
    driver = await make_driver()
    order, _ = await make_order(trader.id)
    await lifecycle.update_order_status(db, order.id, OrderStatus.PENDING_PICKUP, driver.id)
    await lifecycle.update_order_status(db, order.id, OrderStatus.IN_TRANSIT)
    await lifecycle.update_order_status(db, order.id, OrderStatus.DELIVERED)

    with pytest.raises(ConflictError):
        await lifecycle.update_order_status(db, order.id, OrderStatus.IN_TRANSIT)
    with pytest.raises(ConflictError):
        await lifecycle.update_order_status(db, order.id, OrderStatus.CANCELLED)
    with pytest.raises(ValidationError):
        await lifecycle.update_order_status(db, order.id, OrderStatus.PENDING_DRIVER_ASSIGNMENT)


@pytest.mark.asyncio
async def test_skipping_a_step_conflicts(db, make_trader, make_order):
    trader = await make_trader()
    order, _ = await make_order(trader.id)

    with pytest.raises(ConflictError):
        await lifecycle.update_order_status(db, order.id, OrderStatus.IN_TRANSIT)


@pytest.mark.asyncio
async def test_cancel_unassigned_order(db, make_trader, make_order):
    trader = await make_trader()
    order, _ = await make_order(trader.id)

    order = await lifecycle.update_order_status(db, order.id, OrderStatus.CANCELLED)

    assert order.status == OrderStatus.CANCELLED.value


@pytest.mark.asyncio
async def test_update_missing_order(db):
    with pytest.raises(NotFoundError):
        await lifecycle.update_order_status(db, "missing", OrderStatus.CANCELLED)


@pytest.mark.asyncio
async def test_hide_order_is_idempotent(db, make_trader, make_order):
    trader = await make_trader()
    order, _ = await make_order(trader.id)

    await lifecycle.hide_order(db, order.id, trader.id)
    await lifecycle.hide_order(db, order.id, trader.id)
    await lifecycle.hide_order(db, order.id, "someone-else")

    order = await lifecycle.get_order(db, order.id)
    assert order.hidden_for == sorted([trader.id, "someone-else"])


@pytest.mark.asyncio
async def test_hide_all_history_only_touches_finished_orders(
    db, make_trader, make_driver, make_order
):
    trader = await make_trader()
    driver = await make_driver()
    delivered, _ = await make_order(trader.id)
    cancelled, _ = await make_order(trader.id)
    open_order, _ = await make_order(trader.id)

    await lifecycle.update_order_status(db, delivered.id, OrderStatus.PENDING_PICKUP, driver.id)
    await lifecycle.update_order_status(db, delivered.id, OrderStatus.IN_TRANSIT)
    await lifecycle.update_order_status(db, delivered.id, OrderStatus.DELIVERED)
    await lifecycle.update_order_status(db, cancelled.id, OrderStatus.CANCELLED)

    assert await lifecycle.hide_all_history(db, trader.id, Role.TRADER) == 2
    assert await lifecycle.hide_all_history(db, trader.id, Role.TRADER) == 0
    assert await lifecycle.hide_all_history(db, driver.id, Role.DRIVER) == 1

    visible, total = await lifecycle.list_orders(db, trader_id=trader.id, viewer_id=trader.id)
    assert total == 1
    assert [o.id for o in visible] == [open_order.id]


@pytest.mark.asyncio
async def test_admin_hides_all_finished_orders(db, make_trader, make_order):
    first = await make_trader(full_name="First")
    second = await make_trader(full_name="Second")
    a, _ = await make_order(first.id)
    b, _ = await make_order(second.id)
    await lifecycle.update_order_status(db, a.id, OrderStatus.CANCELLED)
    await lifecycle.update_order_status(db, b.id, OrderStatus.CANCELLED)

    assert await lifecycle.hide_all_history(db, "admin-1", Role.ADMIN) == 2


@pytest.mark.asyncio
async def test_list_orders_filters(db, make_trader, make_driver, make_order):
    trader = await make_trader()
    other = await make_trader(full_name="Other")
    driver = await make_driver()
    mine, _ = await make_order(trader.id)
    await make_order(other.id)
    await lifecycle.update_order_status(db, mine.id, OrderStatus.PENDING_PICKUP, driver.id)

    orders, total = await lifecycle.list_orders(db, trader_id=trader.id)
    assert total == 1 and orders[0].id == mine.id

    orders, total = await lifecycle.list_orders(db, driver_id=driver.id)
    assert total == 1 and orders[0].id == mine.id

    orders, total = await lifecycle.list_orders(db, status=OrderStatus.PENDING_DRIVER_ASSIGNMENT.value)
    assert total == 1 and orders[0].trader_id == other.id

    with pytest.raises(ValidationError):
        await lifecycle.list_orders(db, status="Lost")
