"""
Reservation workflow: creating an Order with its OrderDetails and
Reservation, plus the read-side queries used by the staff pages.
"""
import logging
import random
import string
from datetime import timedelta
from decimal import Decimal

from flask import current_app
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import joinedload, load_only, selectinload

from storefront.extensions import db
from storefront.models import (
    Order,
    OrderDetail,
    OrderStatus,
    Product,
    Reservation,
    utcnow,
)
from storefront.services.exceptions import (
    AmountTooLargeError,
    EmptySelectionError,
    ProductNotFoundError,
    TransactionKeyExhaustedError,
)
from storefront.services.notifications import notify_reservation_created

logger = logging.getLogger(__name__)

TRANSACTION_KEY_ALPHABET = string.ascii_uppercase + string.digits
TRANSACTION_KEY_LENGTH = 6

RECENT_WINDOW = timedelta(hours=4)

# Largest value a DECIMAL(10,2) column holds
MAX_AMOUNT = Decimal("99999999.99")

_random = random.SystemRandom()


def generate_transaction_key(length=TRANSACTION_KEY_LENGTH):
    """Six distinct characters drawn uniformly from A-Z and 0-9."""
    return "".join(_random.sample(TRANSACTION_KEY_ALPHABET, length)).upper()


def select_products(products):
    """Drop zero-quantity lines; at least one line must remain."""
    selected = {
        product_id: quantity for product_id, quantity in products.items() if quantity > 0
    }
    if not selected:
        raise EmptySelectionError()
    return selected


def _write_reservation(transaction_key, form, lines):
    order = Order(
        transaction_key=transaction_key,
        total_amount=Decimal("0"),
        status=OrderStatus.PENDING,
    )
    db.session.add(order)
    db.session.flush()

    total_amount = Decimal("0")
    for product_id, quantity in lines.items():
        product = db.session.get(Product, product_id)
        if product is None:
            raise ProductNotFoundError(product_id)

        amount = Decimal(product.price) * quantity
        if amount > MAX_AMOUNT:
            raise AmountTooLargeError()
        db.session.add(
            OrderDetail(
                order_id=order.id,
                product_id=product.id,
                quantity=quantity,
                amount=amount,
            )
        )
        total_amount += amount
        if total_amount > MAX_AMOUNT:
            raise AmountTooLargeError()

    order.total_amount = total_amount

    reservation = Reservation(
        transaction_key=transaction_key,
        name=form.name,
        contact_number=form.contact_number,
        email=form.email,
        coupon=form.coupon,
        pick_up_date=form.pick_up_date,
        order_id=order.id,
    )
    db.session.add(reservation)
    db.session.flush()
    return reservation


def create_reservation(form, key_factory=generate_transaction_key):
    """
    Persist a validated reservation form and queue its notifications.

    Order, OrderDetails and Reservation are committed together. A clash on
    the unique transaction key rolls back and retries with a fresh key, up
    to TRANSACTION_KEY_MAX_ATTEMPTS times. Any other failure (including an
    unknown product) rolls back and propagates.
    """
    lines = select_products(form.products)
    max_attempts = current_app.config.get("TRANSACTION_KEY_MAX_ATTEMPTS", 5)

    for attempt in range(1, max_attempts + 1):
        transaction_key = key_factory()
        try:
            reservation = _write_reservation(transaction_key, form, lines)
            db.session.commit()
        except IntegrityError:
            db.session.rollback()
            logger.warning(
                "Transaction key %s already taken (attempt %d/%d)",
                transaction_key,
                attempt,
                max_attempts,
            )
            continue
        except Exception:
            db.session.rollback()
            raise
        break
    else:
        raise TransactionKeyExhaustedError(max_attempts)

    logger.info(
        "Reservation %s created for order %s (%d line(s))",
        reservation.transaction_key,
        reservation.order_id,
        len(lines),
    )
    notify_reservation_created(reservation)
    return reservation


def _count_orders(*criteria):
    return db.session.scalar(select(func.count(Order.id)).where(*criteria)) or 0


def build_dashboard_summary(now=None):
    """
    Status counts, counts updated within RECENT_WINDOW, and the recently
    updated orders (newest first, with their details).
    """
    now = now or utcnow()
    since = now - RECENT_WINDOW

    counts = {status.slug: _count_orders(Order.status == status) for status in OrderStatus}
    counts["total"] = _count_orders()

    recent_updates = {
        status.slug: _count_orders(Order.status == status, Order.updated_at >= since)
        for status in OrderStatus
    }

    recent_orders = db.session.scalars(
        select(Order)
        .options(selectinload(Order.order_details))
        .where(Order.updated_at >= since)
        .order_by(Order.updated_at.desc(), Order.id.desc())
    ).all()

    return {
        "counts": counts,
        "recent_updates": recent_updates,
        "recent_orders": recent_orders,
        "window_start": since,
    }


def load_reservation(order):
    """Reservation for ``order`` with order -> details -> product loaded."""
    return db.session.scalar(
        select(Reservation)
        .where(Reservation.order_id == order.id)
        .options(
            joinedload(Reservation.order)
            .selectinload(Order.order_details)
            .joinedload(OrderDetail.product)
            .load_only(Product.id, Product.name, Product.price, Product.img_path)
        )
    )


def find_order_by_transaction_key(transaction_key):
    return db.session.scalar(
        select(Order)
        .options(joinedload(Order.reservation))
        .where(Order.transaction_key == transaction_key.strip().upper())
    )
