from decimal import Decimal

from storefront.utils.assets import asset_url


def format_money(value):
    """Two decimals with thousands separators, e.g. ``1,234.50``."""
    return f"{Decimal(value or 0):,.2f}"


def _iso(value):
    return value.isoformat() if value else None


def _amount(value):
    return float(value) if value is not None else 0.0


def serialize_product(product):
    return {
        "id": product.id,
        "name": product.name,
        "price": _amount(product.price),
        "img_path": product.img_path,
    }


def serialize_order_detail(detail, include_product=False):
    data = {
        "id": detail.id,
        "order_id": detail.order_id,
        "product_id": detail.product_id,
        "quantity": detail.quantity,
        "amount": _amount(detail.amount),
        "created_at": _iso(detail.created_at),
        "updated_at": _iso(detail.updated_at),
    }
    if include_product:
        data["product"] = serialize_product(detail.product) if detail.product else None
    return data


def serialize_reservation(reservation, include_order=False):
    data = {
        "id": reservation.id,
        "transaction_key": reservation.transaction_key,
        "name": reservation.name,
        "contact_number": reservation.contact_number,
        "email": reservation.email,
        "coupon": reservation.coupon,
        "pick_up_date": _iso(reservation.pick_up_date),
        "order_id": reservation.order_id,
        "created_at": _iso(reservation.created_at),
        "updated_at": _iso(reservation.updated_at),
    }
    if include_order:
        data["order"] = serialize_order(
            reservation.order, include_details=True, include_products=True
        )
    return data


def serialize_order(
    order, include_details=False, include_products=False, include_reservation=False
):
    data = {
        "id": order.id,
        "transaction_key": order.transaction_key,
        "status": order.status.value,
        "total_amount": _amount(order.total_amount),
        "created_at": _iso(order.created_at),
        "updated_at": _iso(order.updated_at),
    }
    if include_details:
        data["order_details"] = [
            serialize_order_detail(detail, include_product=include_products)
            for detail in order.order_details
        ]
    if include_reservation:
        data["reservation"] = (
            serialize_reservation(order.reservation) if order.reservation else None
        )
    return data


def line_item_summary(detail):
    """Customer-facing line: current product price and the line subtotal."""
    product = detail.product
    return {
        "product_name": product.name,
        "product_price": format_money(product.price),
        "quantity": detail.quantity,
        "subtotal": format_money(detail.quantity * Decimal(product.price)),
        "product_image": asset_url(product.img_path),
    }
