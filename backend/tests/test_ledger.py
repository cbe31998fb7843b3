"""Payment ledger: trader payments, payout requests, payouts"""

import asyncio
from decimal import Decimal

import pytest
from sqlalchemy import select

from freight.core.exceptions import ConflictError, NotFoundError, ValidationError
from freight.models.enums import OrderStatus, PaymentRequestType, Role
from freight.models.notification import Notification
from freight.services import ledger, lifecycle


@pytest.fixture
def assigned_order(db, make_trader, make_driver, make_order):
    """Order accepted by an independent driver; returns (order, driver)"""
    async def _make(**overrides):
        trader = await make_trader()
        driver = await make_driver(full_name="Salem Driver")
        order, _ = await make_order(trader.id, **overrides)
        order = await lifecycle.update_order_status(
            db, order.id, OrderStatus.PENDING_PICKUP, driver.id
        )
        return order, driver
    return _make


def test_total_earning_keeps_service_fee():
    assert ledger.total_earning(300) == Decimal("294.00")
    assert ledger.service_fee(300) == Decimal("6.00")
    assert ledger.money(Decimal("294")) == "AED 294.00"


@pytest.mark.asyncio
async def test_trader_payments_accumulate(db, make_trader, make_order):
    trader = await make_trader()
    order, _ = await make_order(trader.id)

    await ledger.record_trader_payment(db, order.id, 100)
    order = await ledger.record_trader_payment(db, order.id, 50.25)

    assert order.amount_paid_by_trader == Decimal("150.25")
    assert [e.entry_type for e in order.payment_history] == ["Trader Payment", "Trader Payment"]
    assert order.payment_status == "Pending"


@pytest.mark.asyncio
async def test_trader_payment_must_be_positive(db, make_trader, make_order):
    trader = await make_trader()
    order, _ = await make_order(trader.id)

    with pytest.raises(ValidationError):
        await ledger.record_trader_payment(db, order.id, 0)
    with pytest.raises(NotFoundError):
        await ledger.record_trader_payment(db, "missing", 10)


@pytest.mark.asyncio
async def test_concurrent_trader_payments_are_not_lost(
    db, session_factory, make_trader, make_order
):
    trader = await make_trader()
    order, _ = await make_order(trader.id)

    async def pay(amount):
        async with session_factory() as session:
            await ledger.record_trader_payment(session, order.id, amount)

    await asyncio.gather(*(pay(1) for _ in range(30)))

    order = await lifecycle.get_order(db, order.id)
    assert order.amount_paid_by_trader == Decimal("30.00")
    assert len(order.payment_history) == 30


@pytest.mark.asyncio
async def test_advance_request_bounds(db, assigned_order):
    order, driver = await assigned_order()

    with pytest.raises(ValidationError):
        await ledger.create_payment_request(db, order.id, driver.id, PaymentRequestType.ADVANCE, 0)
    with pytest.raises(ValidationError):
        await ledger.create_payment_request(db, order.id, driver.id, PaymentRequestType.ADVANCE, 294.01)

    request = await ledger.create_payment_request(
        db, order.id, driver.id, PaymentRequestType.ADVANCE, 294
    )
    assert request.amount == Decimal("294")
    assert request.status == "Pending"
    assert request.driver_name == "Salem Driver"


@pytest.mark.asyncio
async def test_final_request_is_outstanding_balance(db, assigned_order):
    order, driver = await assigned_order()

    advance = await ledger.create_payment_request(
        db, order.id, driver.id, PaymentRequestType.ADVANCE, 100
    )
    await ledger.record_payout(db, order.id, advance.id)

    final = await ledger.create_payment_request(
        db, order.id, driver.id, PaymentRequestType.FINAL, 5
    )
    assert final.amount == Decimal("194.00")


@pytest.mark.asyncio
async def test_payment_request_alerts_admin(db, assigned_order):
    order, driver = await assigned_order()

    request = await ledger.create_payment_request(
        db, order.id, driver.id, PaymentRequestType.ADVANCE, 50
    )

    notification = (await db.execute(
        select(Notification).where(Notification.scope == Role.ADMIN.value)
    )).scalar_one()
    assert notification.recipient_id is None
    assert notification.title == "Payment Request: Advance"
    assert notification.description == f"Salem Driver requested AED 50.00 for order #{order.id[:6]}."
    assert notification.data == {"view": "payment_requests", "request_id": request.id}


@pytest.mark.asyncio
async def test_company_payment_request(db, make_trader, make_company, make_order):
    trader = await make_trader()
    company = await make_company(company_name="Gulf Haulage")
    order, _ = await make_order(trader.id)
    await lifecycle.update_order_status(db, order.id, OrderStatus.PENDING_PICKUP, company.id)

    request = await ledger.create_payment_request(
        db, order.id, company.id, PaymentRequestType.ADVANCE, 20
    )

    assert request.company_id == company.id
    assert request.company_name == "Gulf Haulage"
    assert request.requester_name == "Gulf Haulage"


@pytest.mark.asyncio
async def test_payout_settles_order(db, assigned_order):
    order, driver = await assigned_order()
    request = await ledger.create_payment_request(db, order.id, driver.id, PaymentRequestType.FINAL)

    order = await ledger.record_payout(db, order.id, request.id)

    assert order.amount_paid_to_driver == Decimal("294.00")
    assert order.payment_status == "Fully Paid"
    assert order.payment_requests[0].status == "Paid"
    assert order.payment_history[-1].entry_type == "Driver Payout"

    notification = (await db.execute(
        select(Notification).where(Notification.title == "Payment Processed")
    )).scalar_one()
    assert notification.scope == Role.DRIVER.value
    assert notification.recipient_id == driver.id
    assert notification.data == {"order_id": order.id}


@pytest.mark.asyncio
async def test_partial_payout_keeps_pending(db, assigned_order):
    order, driver = await assigned_order()
    request = await ledger.create_payment_request(
        db, order.id, driver.id, PaymentRequestType.ADVANCE, 100
    )

    order = await ledger.record_payout(db, order.id, request.id, 60)

    assert order.amount_paid_to_driver == Decimal("60.00")
    assert order.payment_status == "Pending"


@pytest.mark.asyncio
async def test_rounded_final_payout_reaches_fully_paid(db, assigned_order):
    # 99.99 * 0.98 = 97.9902, paid as 98.00
    order, driver = await assigned_order(price=99.99)
    request = await ledger.create_payment_request(db, order.id, driver.id, PaymentRequestType.FINAL)
    assert request.amount == Decimal("98.00")

    order = await ledger.record_payout(db, order.id, request.id)

    assert order.payment_status == "Fully Paid"


@pytest.mark.asyncio
async def test_fully_paid_is_never_reverted(db, assigned_order):
    order, driver = await assigned_order()
    first = await ledger.create_payment_request(db, order.id, driver.id, PaymentRequestType.ADVANCE, 294)
    second = await ledger.create_payment_request(db, order.id, driver.id, PaymentRequestType.ADVANCE, 10)

    order = await ledger.record_payout(db, order.id, first.id)
    assert order.payment_status == "Fully Paid"

    order = await ledger.record_payout(db, order.id, second.id)
    assert order.payment_status == "Fully Paid"
    assert order.amount_paid_to_driver == Decimal("304.00")


@pytest.mark.asyncio
async def test_paid_request_cannot_be_paid_again(db, assigned_order):
    order, driver = await assigned_order()
    request = await ledger.create_payment_request(
        db, order.id, driver.id, PaymentRequestType.ADVANCE, 50
    )
    await ledger.record_payout(db, order.id, request.id)

    with pytest.raises(ConflictError):
        await ledger.record_payout(db, order.id, request.id)
    with pytest.raises(NotFoundError):
        await ledger.record_payout(db, order.id, "no-such-request")


@pytest.mark.asyncio
async def test_final_request_after_settlement_is_rejected(db, assigned_order):
    order, driver = await assigned_order()
    request = await ledger.create_payment_request(db, order.id, driver.id, PaymentRequestType.FINAL)
    await ledger.record_payout(db, order.id, request.id)

    with pytest.raises(ValidationError):
        await ledger.create_payment_request(db, order.id, driver.id, PaymentRequestType.FINAL)


@pytest.mark.asyncio
async def test_trader_payment_reminder(db, make_trader, make_order):
    trader = await make_trader()
    order, _ = await make_order(trader.id)

    await ledger.notify_trader_for_payment(db, order.id, trader.id, "Please settle the balance.")

    notification = (await db.execute(
        select(Notification).where(Notification.scope == Role.TRADER.value)
    )).scalar_one()
    assert notification.recipient_id == trader.id
    assert notification.title == "Payment Request"
    assert notification.description == "Please settle the balance."
    assert notification.data == {"order_id": order.id, "view": "trader_payments"}

    with pytest.raises(ValidationError):
        await ledger.notify_trader_for_payment(db, order.id, trader.id, "")
    with pytest.raises(NotFoundError):
        await ledger.notify_trader_for_payment(db, order.id, "ghost", "Pay up")


@pytest.mark.asyncio
async def test_payment_summary(db, assigned_order):
    order, driver = await assigned_order()
    await ledger.record_trader_payment(db, order.id, 120)
    await ledger.create_payment_request(db, order.id, driver.id, PaymentRequestType.ADVANCE, 94)

    summary = await ledger.payment_summary(db, order.id)

    assert summary.currency == "AED"
    assert summary.price == 300
    assert summary.service_fee == 6
    assert summary.total_earning == 294
    assert summary.trader_balance == 180
    assert summary.driver_balance == 294
    assert summary.pending_requests == 1
