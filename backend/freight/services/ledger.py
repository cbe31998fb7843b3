"""
Payment ledger

Money flows trader -> platform -> driver (or transport company). The
platform keeps a service fee on the driver side only:

    total_earning = price * (1 - SERVICE_FEE_RATE)

Trader payments and payouts change the order row and therefore run
inside run_in_transaction; payment requests are plain inserts.
"""

from decimal import Decimal, ROUND_HALF_UP, ROUND_UP

from sqlalchemy.ext.asyncio import AsyncSession

from freight.core.config import settings
from freight.core.exceptions import ConflictError, NotFoundError, ValidationError
from freight.core.logging_config import get_logger
from freight.db.base import new_id
from freight.db.transaction import persist, run_in_transaction
from freight.models.enums import (
    PaymentEntryType, PaymentRequestStatus, PaymentRequestType, PaymentStatus, Role
)
from freight.models.order import Order, PaymentEntry, PaymentRequest
from freight.models.profile import TransportCompany
from freight.schemas.payment import PaymentSummary
from freight.services.lifecycle import get_order, load_order, publish_order
from freight.services.notifier import notify_admin, send_notification
from freight.services.roles import resolve_party, handler_for

logger = get_logger(__name__)

CENT = Decimal("0.01")


def to_amount(value) -> Decimal:
    if value is None:
        return None
    return Decimal(str(value))


def total_earning(price) -> Decimal:
    """Driver-side value of an order after the service fee"""
    return to_amount(price) * (Decimal("1") - settings.SERVICE_FEE_RATE)


def service_fee(price) -> Decimal:
    return (to_amount(price) * settings.SERVICE_FEE_RATE).quantize(CENT, rounding=ROUND_HALF_UP)


def outstanding_payout(order: Order) -> Decimal:
    """What the driver is still owed, rounded up to the cent"""
    balance = total_earning(order.price) - to_amount(order.amount_paid_to_driver or 0)
    return balance.quantize(CENT, rounding=ROUND_UP)


def money(amount: Decimal) -> str:
    return f"{settings.CURRENCY} {amount:.2f}"


async def record_trader_payment(db: AsyncSession, order_id: str, amount) -> Order:
    """Add a trader payment; concurrent calls are serialised by the order version"""
    amount = to_amount(amount)
    if amount is None or amount <= 0:
        raise ValidationError("Payment amount must be greater than zero.")

    async def work(session: AsyncSession) -> None:
        order = await load_order(session, order_id)
        if order is None:
            raise NotFoundError(f"Order {order_id} not found.")
        order.amount_paid_by_trader = to_amount(order.amount_paid_by_trader or 0) + amount
        order.payment_history.append(
            PaymentEntry(amount=amount, entry_type=PaymentEntryType.TRADER_PAYMENT.value)
        )

    await run_in_transaction(db, work)
    logger.info(f"💰 Trader payment of {money(amount)} recorded on order #{order_id[:6]}")
    return await publish_order(db, order_id)


async def _requester_fields(db: AsyncSession, requester_id: str) -> dict:
    handler, party = await resolve_party(db, requester_id)
    if handler.role == Role.TRANSPORT_COMPANY:
        return {
            "driver_id": party.id,
            "driver_name": None,
            "company_id": party.id,
            "company_name": party.company_name,
        }

    fields = {
        "driver_id": party.id,
        "driver_name": party.full_name,
        "company_id": party.company_id,
        "company_name": None,
    }
    if party.company_id:
        company = await db.get(TransportCompany, party.company_id)
        if company is not None:
            fields["company_name"] = company.company_name
    return fields


async def create_payment_request(
    db: AsyncSession,
    order_id: str,
    requester_id: str,
    request_type: PaymentRequestType,
    amount=None,
) -> PaymentRequest:
    """
    File an Advance or Final payout request and alert the admin

    Advance: 0 < amount <= total earning.
    Final: the outstanding balance, whatever amount is passed.
    """
    order = await load_order(db, order_id)
    if order is None:
        raise NotFoundError(f"Order {order_id} not found.")

    try:
        request_type = PaymentRequestType(request_type)
    except ValueError:
        raise ValidationError(f"Unknown request type: {request_type}.") from None
    if request_type == PaymentRequestType.FINAL:
        amount = outstanding_payout(order)
        if amount <= 0:
            raise ValidationError("Nothing is left to pay out on this order.")
    else:
        amount = to_amount(amount)
        if amount is None or amount <= 0:
            raise ValidationError("Advance amount must be greater than zero.")
        if amount > total_earning(order.price):
            raise ValidationError(
                f"Advance cannot exceed the total earning of {money(total_earning(order.price))}."
            )

    request = PaymentRequest(
        id=new_id(),
        order_id=order_id,
        request_type=request_type.value,
        amount=amount,
        status=PaymentRequestStatus.PENDING.value,
        **await _requester_fields(db, requester_id),
    )
    db.add(request)

    notify_admin(
        db,
        f"Payment Request: {request_type.value}",
        f"{request.requester_name} requested {money(amount)} for order #{order.short_id}.",
        {"view": "payment_requests", "request_id": request.id},
    )
    await persist(db)
    logger.info(f"🧾 {request_type.value} request of {money(amount)} on order #{order_id[:6]}")

    await publish_order(db, order_id)
    return request


async def _payout_recipient_scope(db: AsyncSession, party_id: str) -> str:
    try:
        handler, _ = await resolve_party(db, party_id)
    except NotFoundError:
        return Role.DRIVER.value
    return handler.scope


async def record_payout(
    db: AsyncSession,
    order_id: str,
    request_id: str,
    amount=None,
) -> Order:
    """
    Pay a request and settle the order when the driver is owed nothing

    Final requests pay exactly the outstanding balance; Advance pays the
    given amount, or the requested amount when none is given. The
    assigned driver or company is notified in the same transaction.
    """
    amount = to_amount(amount)

    async def work(session: AsyncSession) -> Decimal:
        order = await load_order(session, order_id)
        if order is None:
            raise NotFoundError(f"Order {order_id} not found.")

        request = next((r for r in order.payment_requests if r.id == request_id), None)
        if request is None:
            raise NotFoundError(f"Payment request {request_id} not found.")
        if request.status == PaymentRequestStatus.PAID.value:
            raise ConflictError("This payment request has already been paid.")

        if request.request_type == PaymentRequestType.FINAL.value:
            paid = outstanding_payout(order)
            if paid <= 0:
                raise ValidationError("Nothing is left to pay out on this order.")
        else:
            paid = amount if amount is not None else to_amount(request.amount)
            if paid <= 0:
                raise ValidationError("Payout amount must be greater than zero.")

        order.amount_paid_to_driver = to_amount(order.amount_paid_to_driver or 0) + paid
        request.status = PaymentRequestStatus.PAID.value
        order.payment_history.append(
            PaymentEntry(amount=paid, entry_type=PaymentEntryType.DRIVER_PAYOUT.value)
        )
        # never reverts once settled
        if order.amount_paid_to_driver >= total_earning(order.price):
            order.payment_status = PaymentStatus.FULLY_PAID.value

        if order.driver_id:
            send_notification(
                session,
                await _payout_recipient_scope(session, order.driver_id),
                order.driver_id,
                "Payment Processed",
                f"A payment of {money(paid)} for order #{order.short_id} has been processed.",
                {"order_id": order_id},
            )
        return paid

    paid = await run_in_transaction(db, work)
    logger.info(f"💸 Payout of {money(paid)} recorded on order #{order_id[:6]}")
    return await publish_order(db, order_id)


async def notify_trader_for_payment(
    db: AsyncSession,
    order_id: str,
    trader_id: str,
    message: str,
) -> None:
    """Remind a trader to pay for an order"""
    if not order_id or not trader_id:
        raise ValidationError("Missing order ID or trader ID.")
    if not message:
        raise ValidationError("A message is required.")

    handler = handler_for(Role.TRADER)
    await handler.get_profile(db, trader_id)
    await get_order(db, order_id)

    send_notification(
        db,
        handler.scope,
        trader_id,
        "Payment Request",
        message,
        {"order_id": order_id, "view": "trader_payments"},
    )
    await persist(db)
    logger.info(f"📨 Payment reminder sent to trader {trader_id} for order #{order_id[:6]}")


async def payment_summary(db: AsyncSession, order_id: str) -> PaymentSummary:
    order = await get_order(db, order_id)
    price = to_amount(order.price)
    earning = total_earning(price)
    paid_by_trader = to_amount(order.amount_paid_by_trader or 0)
    paid_to_driver = to_amount(order.amount_paid_to_driver or 0)

    return PaymentSummary(
        order_id=order.id,
        currency=settings.CURRENCY,
        price=float(price),
        service_fee=float(service_fee(price)),
        total_earning=float(earning.quantize(CENT, rounding=ROUND_HALF_UP)),
        amount_paid_by_trader=float(paid_by_trader),
        amount_paid_to_driver=float(paid_to_driver),
        trader_balance=float(max(price - paid_by_trader, Decimal("0"))),
        driver_balance=float(max(outstanding_payout(order), Decimal("0"))),
        payment_status=order.payment_status,
        pending_requests=sum(
            1 for r in order.payment_requests if r.status == PaymentRequestStatus.PENDING.value
        ),
    )
