from flask import Blueprint, abort, jsonify

from storefront.extensions import db
from storefront.models import Order
from storefront.services.reservation_service import load_reservation
from storefront.utils.serializers import line_item_summary, serialize_reservation

details_bp = Blueprint("reservation_details", __name__, url_prefix="/api/reservations")


@details_bp.route("/<int:order_id>", methods=["GET"])
def show_reservation(order_id):
    """
    Reservation detail for an order
    ---
    tags:
      - Reservations
    parameters:
      - in: path
        name: order_id
        type: integer
        required: true
    responses:
      200:
        description: Reservation with its order, line items and status
        schema:
          $ref: '#/definitions/ReservationDetail'
      404:
        description: Order not found
    """
    order = db.get_or_404(Order, order_id)

    reservation = load_reservation(order)
    if reservation is None:
        abort(404)

    # Reservation has no status of its own; expose the order's
    reservation_data = serialize_reservation(reservation, include_order=True)
    reservation_data["status"] = order.status.value

    return jsonify(
        {
            "reservation": reservation_data,
            "order_details": [
                line_item_summary(detail) for detail in reservation.order.order_details
            ],
        }
    )
