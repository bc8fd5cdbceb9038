# Staff views: status listings and the dashboard summary
from flask import Blueprint, jsonify, request
from sqlalchemy import select
from sqlalchemy.orm import selectinload

from storefront.extensions import db
from storefront.models import Order, OrderStatus
from storefront.services.reservation_service import RECENT_WINDOW, build_dashboard_summary
from storefront.utils.serializers import serialize_order

listing_bp = Blueprint("reservation_listing", __name__, url_prefix="/api/reservations")

PAGE_SIZE = 10


def _current_page():
    page = request.args.get("page", 1, type=int)
    return page if page and page > 0 else 1


def _orders_page(status=None, with_reservation=False):
    stmt = select(Order).order_by(Order.updated_at.desc(), Order.id.desc())
    if status is not None:
        stmt = stmt.where(Order.status == status)
    if with_reservation:
        stmt = stmt.options(selectinload(Order.reservation))

    pagination = db.paginate(
        stmt, page=_current_page(), per_page=PAGE_SIZE, error_out=False
    )

    return jsonify(
        {
            "status": status.value if status is not None else "all",
            "page": pagination.page,
            "per_page": pagination.per_page,
            "total": pagination.total,
            "pages": pagination.pages,
            "orders": [
                serialize_order(order, include_reservation=with_reservation)
                for order in pagination.items
            ],
        }
    )


# -----------------------------------------------------------------------------
# GET /api/reservations/dashboard
# -----------------------------------------------------------------------------
@listing_bp.route("/dashboard", methods=["GET"])
def dashboard():
    """
    Reservation dashboard summary
    ---
    tags:
      - Reservations
    summary: Order counts per status and activity in the last 4 hours
    responses:
      200:
        description: Dashboard summary
        schema:
          $ref: '#/definitions/Dashboard'
    """
    summary = build_dashboard_summary()

    return jsonify(
        {
            "counts": summary["counts"],
            "recent_updates": summary["recent_updates"],
            "recent_window_hours": int(RECENT_WINDOW.total_seconds() // 3600),
            "window_start": summary["window_start"].isoformat(),
            "recent_orders": [
                serialize_order(order, include_details=True)
                for order in summary["recent_orders"]
            ],
        }
    )


# -----------------------------------------------------------------------------
# GET /api/reservations/<status>?page=N
# Purpose:
#   Ten orders per page, most recently updated first. Pages past the end
#   are empty, not errors.
# -----------------------------------------------------------------------------
@listing_bp.route("/pending", methods=["GET"])
def pending_index():
    """
    Pending orders
    ---
    tags:
      - Reservations
    parameters:
      - in: query
        name: page
        type: integer
        default: 1
    responses:
      200:
        description: One page of pending orders
        schema:
          $ref: '#/definitions/OrderPage'
    """
    return _orders_page(OrderStatus.PENDING)


@listing_bp.route("/processing", methods=["GET"])
def processing_index():
    """
    Orders being processed
    ---
    tags:
      - Reservations
    parameters:
      - in: query
        name: page
        type: integer
        default: 1
    responses:
      200:
        description: One page of processing orders
        schema:
          $ref: '#/definitions/OrderPage'
    """
    return _orders_page(OrderStatus.PROCESSING)


@listing_bp.route("/ready-to-pickup", methods=["GET"])
def ready_to_pickup_index():
    """
    Orders ready to pick up
    ---
    tags:
      - Reservations
    parameters:
      - in: query
        name: page
        type: integer
        default: 1
    responses:
      200:
        description: One page of orders ready to pick up
        schema:
          $ref: '#/definitions/OrderPage'
    """
    return _orders_page(OrderStatus.READY_TO_PICKUP)


@listing_bp.route("/completed", methods=["GET"])
def completed_index():
    """
    Completed orders
    ---
    tags:
      - Reservations
    parameters:
      - in: query
        name: page
        type: integer
        default: 1
    responses:
      200:
        description: One page of completed orders
        schema:
          $ref: '#/definitions/OrderPage'
    """
    return _orders_page(OrderStatus.COMPLETED)


@listing_bp.route("/cancelled", methods=["GET"])
def cancelled_index():
    """
    Cancelled orders
    ---
    tags:
      - Reservations
    parameters:
      - in: query
        name: page
        type: integer
        default: 1
    responses:
      200:
        description: One page of cancelled orders
        schema:
          $ref: '#/definitions/OrderPage'
    """
    return _orders_page(OrderStatus.CANCELLED)


@listing_bp.route("/all", methods=["GET"])
def all_index():
    """
    All orders with their reservation
    ---
    tags:
      - Reservations
    parameters:
      - in: query
        name: page
        type: integer
        default: 1
    responses:
      200:
        description: One page of orders regardless of status
        schema:
          $ref: '#/definitions/OrderPage'
    """
    return _orders_page(with_reservation=True)
