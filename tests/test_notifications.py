from datetime import date

import pytest
import resend

from storefront.models import Setting
from storefront.services import notifications
from storefront.services.email_service import email_service


@pytest.fixture
def flaky_send(monkeypatch):
    """Resend stand-in that fails a configurable number of times first."""
    state = {"failures": 0, "calls": []}

    def send(params):
        state["calls"].append(params)
        if len(state["calls"]) <= state["failures"]:
            raise TimeoutError("resend timed out")
        return {"id": "email_ok"}

    monkeypatch.setattr(email_service, "disabled", False)
    monkeypatch.setattr(resend.Emails, "send", send)
    return state


@pytest.mark.notifications
class TestStaffEmail:
    def test_falls_back_to_configured_address(self, app, db_session):
        assert notifications.resolve_staff_email() == "staff@example.com"

    def test_prefers_setting(self, app, db_session):
        db_session.add(Setting(key="email", value="owner@shop.test"))
        db_session.commit()

        assert notifications.resolve_staff_email() == "owner@shop.test"


@pytest.mark.notifications
class TestDelivery:
    payload = {"transaction_key": "AB12CD", "pick_up_date": date(2030, 1, 15)}

    def test_first_attempt_succeeds(self, app, flaky_send):
        assert notifications.deliver(
            app, notifications.RESERVATION_CONFIRMATION, "jane@example.com", self.payload
        )
        assert len(flaky_send["calls"]) == 1
        assert "January 15, 2030" in flaky_send["calls"][0]["html"]

    def test_retries_until_success(self, app, flaky_send):
        flaky_send["failures"] = 2

        assert notifications.deliver(
            app, notifications.RESERVATION_CONFIRMATION, "jane@example.com", self.payload
        )
        assert len(flaky_send["calls"]) == 3

    def test_gives_up_quietly(self, app, flaky_send, monkeypatch):
        monkeypatch.setitem(app.config, "NOTIFICATION_MAX_ATTEMPTS", 2)
        flaky_send["failures"] = 10

        assert not notifications.deliver(
            app, notifications.RESERVATION_CONFIRMATION, "jane@example.com", self.payload
        )
        assert len(flaky_send["calls"]) == 2

    def test_disabled_service_reports_success(self, app, monkeypatch):
        monkeypatch.setattr(email_service, "disabled", True)

        assert notifications.deliver(
            app, notifications.RESERVATION_CONFIRMATION, "jane@example.com", self.payload
        )


@pytest.mark.notifications
class TestEnqueue:
    def test_unknown_kind(self, app):
        with app.app_context():
            with pytest.raises(ValueError):
                notifications.enqueue("sms", "jane@example.com", {})

    def test_queues_job_when_async(self, app, monkeypatch):
        queued = []

        class RunningScheduler:
            running = True

        monkeypatch.setitem(app.config, "NOTIFICATIONS_ASYNC", True)
        monkeypatch.setattr(notifications, "scheduler", RunningScheduler())
        monkeypatch.setattr(
            notifications,
            "schedule_once",
            lambda func, args, delay_seconds=0: queued.append((func, args, delay_seconds)),
        )

        with app.app_context():
            notifications.enqueue(
                notifications.RESERVATION_CONFIRMATION, "jane@example.com", {"a": 1}
            )

        assert len(queued) == 1
        func, args, delay = queued[0]
        assert func is notifications.deliver
        assert args[1:] == [
            notifications.RESERVATION_CONFIRMATION,
            "jane@example.com",
            {"a": 1},
        ]
        assert delay == 0

    def test_async_retry_is_rescheduled_with_backoff(
        self, app, flaky_send, monkeypatch
    ):
        queued = []

        class RunningScheduler:
            running = True

        flaky_send["failures"] = 1
        monkeypatch.setitem(app.config, "NOTIFICATIONS_ASYNC", True)
        monkeypatch.setitem(app.config, "NOTIFICATION_RETRY_SECONDS", 30)
        monkeypatch.setattr(notifications, "scheduler", RunningScheduler())
        monkeypatch.setattr(
            notifications,
            "schedule_once",
            lambda func, args, delay_seconds=0: queued.append((args, delay_seconds)),
        )

        delivered = notifications.deliver(
            app,
            notifications.RESERVATION_CONFIRMATION,
            "jane@example.com",
            TestDelivery.payload,
        )

        assert not delivered
        assert len(flaky_send["calls"]) == 1
        args, delay = queued[0]
        assert args[-1] == 2
        assert delay == 30
