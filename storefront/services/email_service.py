# Reservation notifications
import logging
from html import escape
from typing import Dict

import resend

logger = logging.getLogger(__name__)


def _format_date(value):
    if hasattr(value, "strftime"):
        return value.strftime("%B %d, %Y")
    return str(value)


def _detail_rows(rows):
    return "".join(
        f"""
                                                    <tr style="border-top: 1px solid #e8ede8;">
                                                        <td style="padding: 12px 0; color: #4a5568; font-size: 15px; width: 160px;">
                                                            <strong style="color: #2d3748;">{label}</strong>
                                                        </td>
                                                        <td style="padding: 12px 0; color: #2d3748; font-size: 16px; font-weight: 600;">
                                                            {escape(str(value))}
                                                        </td>
                                                    </tr>"""
        for label, value in rows
    )


def _layout(heading, intro, rows, footer):
    return f"""
        <!DOCTYPE html>
        <html>
        <head>
            <meta charset="UTF-8">
            <meta name="viewport" content="width=device-width, initial-scale=1.0">
        </head>
        <body style="margin: 0; padding: 0; font-family: 'Segoe UI', Arial, sans-serif; background-color: #f4f1ea;">
            <table width="100%" cellpadding="0" cellspacing="0" style="background-color: #f4f1ea; padding: 30px 20px;">
                <tr>
                    <td align="center">
                        <table width="600" cellpadding="0" cellspacing="0" style="background-color: #ffffff; border-radius: 16px; overflow: hidden;">
                            <tr>
                                <td style="background-color: #7a5c3e; padding: 36px 40px; text-align: center;">
                                    <h2 style="color: #ffffff; margin: 0; font-size: 26px; font-weight: 600;">
                                        {heading}
                                    </h2>
                                </td>
                            </tr>
                            <tr>
                                <td style="padding: 40px;">
                                    <p style="color: #4a5568; font-size: 16px; line-height: 1.7; margin: 0 0 30px 0;">
                                        {intro}
                                    </p>
                                    <table width="100%" cellpadding="0" cellspacing="0" style="border: 2px solid #c9b79c; border-radius: 12px;">
                                        <tr>
                                            <td style="padding: 24px 30px;">
                                                <table width="100%" cellpadding="0" cellspacing="0">{_detail_rows(rows)}
                                                </table>
                                            </td>
                                        </tr>
                                    </table>
                                    <p style="color: #718096; font-size: 14px; line-height: 1.6; margin: 30px 0 0 0;">
                                        {footer}
                                    </p>
                                </td>
                            </tr>
                        </table>
                    </td>
                </tr>
            </table>
        </body>
        </html>
        """


class EmailService:
    """
    Centralized email service using Resend
    """

    def __init__(self):
        self.disabled = True
        self.api_key = None
        self.from_email = "onboarding@resend.dev"

    def init_app(self, app):
        """Configure Resend from the Flask config."""
        self.from_email = app.config.get("RESEND_FROM_EMAIL", self.from_email)

        if not app.config.get("EMAIL_ENABLED"):
            self.disabled = True
            self.api_key = None
            logger.warning("EmailService running in DISABLED mode - emails are logged only")
            return

        self.api_key = app.config.get("RESEND_API_KEY")
        if not self.api_key:
            raise ValueError("RESEND_API_KEY environment variable is required")

        resend.api_key = self.api_key
        self.disabled = False

    def _send(self, to_email: str, subject: str, html: str) -> Dict:
        if self.disabled:
            logger.info("Email to %s skipped (disabled): %s", to_email, subject)
            return {"success": True, "message": "Email delivery disabled", "email_id": None}

        try:
            params = {
                "from": self.from_email,
                "to": [to_email],
                "subject": subject,
                "html": html,
            }

            email_response = resend.Emails.send(params)

            return {
                "success": True,
                "message": f"Email sent to {to_email}",
                "email_id": email_response.get("id"),
            }

        except Exception as e:
            return {"success": False, "error": str(e)}

    def send_reservation_confirmation(self, to_email, transaction_key, pick_up_date):
        """
        Send the customer their transaction key right after reserving.

        Args:
            to_email: Address submitted on the reservation form
            transaction_key: Six character code used to check the order status
            pick_up_date: Date the customer will collect the order

        Returns:
            Dict with 'success' boolean and 'message' or 'error'
        """
        html_content = _layout(
            "Reservation Received",
            "Thank you! Your reservation has been received. Keep your "
            "transaction key; you will need it to check the status of your order.",
            [
                ("Transaction Key", transaction_key),
                ("Pick-up Date", _format_date(pick_up_date)),
            ],
            "We will let you know once your order is ready to pick up.",
        )
        return self._send(
            to_email, f"Reservation Confirmation - {transaction_key}", html_content
        )

    def send_new_reservation_alert(
        self,
        to_email,
        transaction_key,
        name,
        pick_up_date,
        contact_number,
        customer_email,
    ):
        """
        Tell staff that a new reservation is waiting in the pending queue
        """
        html_content = _layout(
            "New Reservation",
            f"<strong>{escape(name)}</strong> just placed a reservation.",
            [
                ("Transaction Key", transaction_key),
                ("Name", name),
                ("Pick-up Date", _format_date(pick_up_date)),
                ("Contact Number", contact_number),
                ("Email", customer_email),
            ],
            "Open the pending reservations list to start processing it.",
        )
        return self._send(to_email, f"New Reservation - {transaction_key}", html_content)


# Create a singleton instance
email_service = EmailService()
