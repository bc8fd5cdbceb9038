"""
Reservation notifications, dispatched after the reservation is committed.

Each message is a job: with ``NOTIFICATIONS_ASYNC`` on it runs on the
background scheduler and failed attempts are rescheduled with a linear
backoff; otherwise it runs inline with the same attempt limit. Delivery
failures are logged and never raised to the caller.
"""
import logging

from flask import current_app

from storefront.extensions import db
from storefront.models import Setting
from storefront.scheduler import scheduler, schedule_once
from storefront.services.email_service import email_service

logger = logging.getLogger(__name__)

STAFF_EMAIL_SETTING_KEY = "email"

RESERVATION_CONFIRMATION = "reservation_confirmation"
NEW_RESERVATION_ALERT = "new_reservation_alert"

SENDERS = {
    RESERVATION_CONFIRMATION: lambda to, payload: email_service.send_reservation_confirmation(
        to, **payload
    ),
    NEW_RESERVATION_ALERT: lambda to, payload: email_service.send_new_reservation_alert(
        to, **payload
    ),
}


def resolve_staff_email():
    """Staff inbox: the ``email`` setting, else STAFF_NOTIFICATION_EMAIL."""
    return Setting.get_value(
        db.session,
        STAFF_EMAIL_SETTING_KEY,
        default=current_app.config["STAFF_NOTIFICATION_EMAIL"],
    )


def _runs_in_background(app):
    return bool(app.config.get("NOTIFICATIONS_ASYNC")) and scheduler.running


def deliver(app, kind, to_email, payload, attempt=1):
    """Run one delivery attempt; returns True once the message is sent."""
    max_attempts = app.config.get("NOTIFICATION_MAX_ATTEMPTS", 3)

    with app.app_context():
        result = SENDERS[kind](to_email, payload)

    if result.get("success"):
        logger.info(
            "Notification %s sent to %s (attempt %d)", kind, to_email, attempt
        )
        return True

    if attempt >= max_attempts:
        logger.error(
            "Notification %s to %s failed after %d attempts: %s",
            kind,
            to_email,
            attempt,
            result.get("error"),
        )
        return False

    logger.warning(
        "Notification %s to %s failed (attempt %d/%d): %s",
        kind,
        to_email,
        attempt,
        max_attempts,
        result.get("error"),
    )
    if _runs_in_background(app):
        delay = app.config.get("NOTIFICATION_RETRY_SECONDS", 30) * attempt
        schedule_once(deliver, [app, kind, to_email, payload, attempt + 1], delay)
        return False
    return deliver(app, kind, to_email, payload, attempt + 1)


def enqueue(kind, to_email, payload):
    if kind not in SENDERS:
        raise ValueError(f"Unknown notification type: {kind}")

    app = current_app._get_current_object()
    if _runs_in_background(app):
        schedule_once(deliver, [app, kind, to_email, payload])
        logger.info("Notification %s to %s queued", kind, to_email)
        return None
    return deliver(app, kind, to_email, payload)


def notify_reservation_created(reservation):
    """Queue the customer confirmation and the staff alert."""
    enqueue(
        RESERVATION_CONFIRMATION,
        reservation.email,
        {
            "transaction_key": reservation.transaction_key,
            "pick_up_date": reservation.pick_up_date,
        },
    )
    enqueue(
        NEW_RESERVATION_ALERT,
        resolve_staff_email(),
        {
            "transaction_key": reservation.transaction_key,
            "name": reservation.name,
            "pick_up_date": reservation.pick_up_date,
            "contact_number": reservation.contact_number,
            "customer_email": reservation.email,
        },
    )
