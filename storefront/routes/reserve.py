import logging
from urllib.parse import urlparse

from flask import (
    Blueprint,
    abort,
    flash,
    get_flashed_messages,
    jsonify,
    redirect,
    request,
    session,
    url_for,
)
from sqlalchemy import select
from sqlalchemy.orm import selectinload

from storefront.extensions import db
from storefront.models import Product
from storefront.schemas.reservation import parse_reservation_form, read_form_data
from storefront.services.exceptions import (
    ProductNotFoundError,
    ReservationValidationError,
)
from storefront.services.reservation_service import (
    create_reservation,
    find_order_by_transaction_key,
)
from storefront.utils.assets import asset_url
from storefront.utils.serializers import serialize_order

logger = logging.getLogger(__name__)

reserve_bp = Blueprint("reserve", __name__, url_prefix="/reserve")

PRODUCTS_PER_PAGE = 9
SUCCESS_MESSAGE = (
    "Reservation created successfully! "
    "You can check your status using the transaction key."
)


def _back_url():
    """The submitting page when it is on this host, else the reservation form."""
    referrer = request.referrer
    if referrer and urlparse(referrer).netloc == request.host:
        return referrer
    return url_for("reserve.reservation_form")


def _validation_failure(errors, data):
    if request.is_json:
        return jsonify({"status": "error", "errors": errors}), 422

    session["errors"] = errors
    session["old_input"] = {k: v for k, v in data.items() if k != "products"}
    return redirect(_back_url())


# -----------------------------------------------------------------------------
# GET /reserve
# Purpose:
#   Products (with stock on hand) for the reservation form, plus any
#   errors and old input left by a failed submission.
# -----------------------------------------------------------------------------
@reserve_bp.route("", methods=["GET"])
def reservation_form():
    """
    Reservation form data
    ---
    tags:
      - Reservations
    summary: Products with stock on hand, plus errors left by a failed submission
    parameters:
      - in: query
        name: page
        type: integer
        default: 1
        description: Nine products per page
    responses:
      200:
        description: One page of products, with the errors and old input to show once
    """
    page = request.args.get("page", 1, type=int)
    stmt = (
        select(Product)
        .options(selectinload(Product.inventory))
        .order_by(Product.id)
    )
    products = db.paginate(
        stmt,
        page=page if page and page > 0 else 1,
        per_page=PRODUCTS_PER_PAGE,
        error_out=False,
    )

    return jsonify(
        {
            "page": products.page,
            "pages": products.pages,
            "total": products.total,
            "products": [
                {
                    "id": product.id,
                    "name": product.name,
                    "description": product.description,
                    "price": float(product.price),
                    "image_url": asset_url(product.img_path),
                    "stock": product.inventory.quantity if product.inventory else 0,
                }
                for product in products.items
            ],
            "errors": session.pop("errors", {}),
            "old_input": session.pop("old_input", {}),
        }
    )


# -----------------------------------------------------------------------------
# POST /reserve
# Purpose:
#   Validate the form, store Order + OrderDetails + Reservation, queue the
#   two emails and send the customer to the check-status page.
# -----------------------------------------------------------------------------
@reserve_bp.route("", methods=["POST"])
def reservation_store():
    """
    Create a reservation
    ---
    tags:
      - Reservations
    consumes:
      - application/x-www-form-urlencoded
    parameters:
      - in: formData
        name: name
        type: string
        required: true
      - in: formData
        name: contact_number
        type: string
        required: true
        description: Exactly 11 digits
      - in: formData
        name: email
        type: string
        required: true
      - in: formData
        name: coupon
        type: string
      - in: formData
        name: pick_up_date
        type: string
        format: date
        required: true
      - in: formData
        name: products[<id>]
        type: integer
        description: Quantity per product id, one field per product
    responses:
      302:
        description: Redirect to /reserve/check-status on success, back to the form on validation errors
      404:
        description: A selected product does not exist
      422:
        description: Validation errors (JSON requests only)
    """
    if request.is_json:
        data = request.get_json(silent=True) or {}
    else:
        data = read_form_data(request.form)

    try:
        form = parse_reservation_form(data)
        reservation = create_reservation(form)
    except ReservationValidationError as e:
        return _validation_failure(e.errors, data)
    except ProductNotFoundError as e:
        logger.info("Reservation rejected: %s", e)
        abort(404)

    if request.is_json:
        return (
            jsonify(
                {
                    "status": "success",
                    "message": SUCCESS_MESSAGE,
                    "transaction_key": reservation.transaction_key,
                    "order_id": reservation.order_id,
                }
            ),
            201,
        )

    session["transaction_key"] = reservation.transaction_key
    flash(SUCCESS_MESSAGE, "success")
    return redirect(url_for("reserve.check_status"))


# -----------------------------------------------------------------------------
# GET /reserve/check-status[?transaction_key=XXXXXX]
# -----------------------------------------------------------------------------
@reserve_bp.route("/check-status", methods=["GET"])
def check_status():
    """
    Check a reservation by transaction key
    ---
    tags:
      - Reservations
    parameters:
      - in: query
        name: transaction_key
        type: string
    responses:
      200:
        description: Flashed messages and, when a key is known, the order status
      404:
        description: No order with that transaction key
    """
    transaction_key = request.args.get("transaction_key") or session.pop(
        "transaction_key", None
    )
    messages = [
        {"category": category, "message": message}
        for category, message in get_flashed_messages(with_categories=True)
    ]

    order = None
    if transaction_key:
        found = find_order_by_transaction_key(transaction_key)
        if found is None:
            abort(404)
        order = serialize_order(found)
        order["pick_up_date"] = (
            found.reservation.pick_up_date.isoformat() if found.reservation else None
        )

    return jsonify(
        {
            "transaction_key": transaction_key.strip().upper() if transaction_key else None,
            "messages": messages,
            "order": order,
        }
    )
