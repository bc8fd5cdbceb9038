from datetime import datetime, timedelta
from decimal import Decimal

import pytest

from storefront.models import OrderDetail, OrderStatus, Product, utcnow
from storefront.services.reservation_service import build_dashboard_summary

NOW = datetime(2024, 6, 1, 12, 0, 0)


@pytest.mark.dashboard
class TestDashboardSummary:
    def test_counts_per_status(self, db_session, make_order):
        for status, how_many in [
            (OrderStatus.PENDING, 3),
            (OrderStatus.PROCESSING, 2),
            (OrderStatus.READY_TO_PICKUP, 1),
            (OrderStatus.CANCELLED, 1),
        ]:
            for _ in range(how_many):
                make_order(status=status, updated_at=NOW - timedelta(days=2))

        summary = build_dashboard_summary(now=NOW)

        assert summary["counts"] == {
            "pending": 3,
            "processing": 2,
            "ready_to_pickup": 1,
            "completed": 0,
            "cancelled": 1,
            "total": 7,
        }
        assert set(summary["recent_updates"].values()) == {0}
        assert summary["recent_orders"] == []

    def test_window_boundary_is_inclusive(self, db_session, make_order):
        edge = make_order(updated_at=NOW - timedelta(hours=4))
        make_order(updated_at=NOW - timedelta(hours=4, seconds=1))

        summary = build_dashboard_summary(now=NOW)

        assert summary["window_start"] == NOW - timedelta(hours=4)
        assert summary["recent_updates"]["pending"] == 1
        assert [o.id for o in summary["recent_orders"]] == [edge.id]

    def test_cancelled_orders_count_as_recent(self, db_session, make_order):
        make_order(status=OrderStatus.CANCELLED, updated_at=NOW - timedelta(hours=1))
        make_order(status=OrderStatus.COMPLETED, updated_at=NOW - timedelta(hours=2))

        summary = build_dashboard_summary(now=NOW)

        assert summary["recent_updates"]["cancelled"] == 1
        assert summary["recent_updates"]["completed"] == 1
        assert len(summary["recent_orders"]) == 2

    def test_recent_orders_newest_first(self, db_session, make_order):
        older = make_order(updated_at=NOW - timedelta(hours=3))
        newer = make_order(
            status=OrderStatus.PROCESSING, updated_at=NOW - timedelta(minutes=5)
        )

        summary = build_dashboard_summary(now=NOW)

        assert [o.id for o in summary["recent_orders"]] == [newer.id, older.id]


@pytest.mark.dashboard
class TestDashboardEndpoint:
    def test_payload(self, client, db_session, make_order):
        product = Product(id=1, name="Pan de Coco", price=Decimal("25.00"))
        db_session.add(product)
        db_session.commit()

        stale = make_order(updated_at=utcnow() - timedelta(days=1))
        fresh = make_order(
            status=OrderStatus.READY_TO_PICKUP, total_amount=Decimal("50.00")
        )
        db_session.add(
            OrderDetail(order_id=fresh.id, product_id=1, quantity=2, amount=Decimal("50.00"))
        )
        db_session.commit()

        response = client.get("/api/reservations/dashboard")

        assert response.status_code == 200
        data = response.get_json()
        assert data["counts"]["total"] == 2
        assert data["counts"]["pending"] == 1
        assert data["counts"]["ready_to_pickup"] == 1
        assert data["recent_window_hours"] == 4
        assert data["recent_updates"]["ready_to_pickup"] == 1
        assert data["recent_updates"]["pending"] == 0

        recent_keys = [o["transaction_key"] for o in data["recent_orders"]]
        assert recent_keys == [fresh.transaction_key]
        assert stale.transaction_key not in recent_keys
        details = data["recent_orders"][0]["order_details"]
        assert [(d["product_id"], d["quantity"], d["amount"]) for d in details] == [
            (1, 2, 50.0)
        ]
