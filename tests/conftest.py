"""
Pytest configuration and shared fixtures for the reservation tests.
"""

import itertools
import os
from datetime import date, timedelta
from decimal import Decimal
from pathlib import Path

import pytest
import resend
from dotenv import load_dotenv
from flask import Flask

test_env_path = Path(__file__).parent / ".env.test"
if test_env_path.exists():
    load_dotenv(test_env_path, override=True)
else:
    print(f" WARNING: .env.test not found at {test_env_path}")
    os.environ.setdefault("TESTING", "True")
    os.environ.setdefault("FLASK_ENV", "testing")
    os.environ.setdefault("DATABASE_TEST_URL", "sqlite://")
    os.environ.setdefault("STAFF_NOTIFICATION_EMAIL", "staff@example.com")
    os.environ.setdefault("EMAIL_ENABLED", "False")
    os.environ.setdefault("NOTIFICATIONS_ASYNC", "False")

from main import create_app  # noqa: E402
from storefront.config import is_production_database, is_test_database  # noqa: E402
from storefront.extensions import db as database  # noqa: E402
from storefront.models import (  # noqa: E402
    Base,
    Inventory,
    Order,
    OrderStatus,
    Product,
    Reservation,
)
from storefront.services.email_service import email_service  # noqa: E402


@pytest.fixture(scope="session")
def app():
    """Create and configure a test app instance."""
    app = create_app()

    app.config.update(
        {
            "TESTING": True,
            "SECRET_KEY": "test-secret-key-for-testing-only",
            "NOTIFICATIONS_ASYNC": False,
            "ASSET_BASE_URL": None,
        }
    )

    db_uri = app.config.get("SQLALCHEMY_DATABASE_URI", "")
    if is_production_database(db_uri) or not is_test_database(db_uri):
        pytest.exit(f"Refusing to run tests against {db_uri}", returncode=1)

    yield app


@pytest.fixture
def db(app: Flask):
    """Fresh tables for every test."""
    with app.app_context():
        Base.metadata.drop_all(bind=database.engine)
        Base.metadata.create_all(bind=database.engine)

        yield database

        database.session.remove()
        Base.metadata.drop_all(bind=database.engine)


@pytest.fixture
def db_session(db):
    return db.session


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def outbox(monkeypatch):
    """Capture outgoing emails instead of calling Resend."""
    sent = []

    def fake_send(params):
        sent.append(params)
        return {"id": f"email_{len(sent)}"}

    monkeypatch.setattr(email_service, "disabled", False)
    monkeypatch.setattr(resend.Emails, "send", fake_send)
    return sent


@pytest.fixture
def sample_products(db_session):
    """Products 5 and 7 from the checkout scenario plus one with a large price."""
    products = {
        5: Product(
            id=5,
            name="Ube Cheese Pandesal",
            price=Decimal("100.00"),
            img_path="images/products/ube-pandesal.jpg",
        ),
        7: Product(id=7, name="Ensaymada", price=Decimal("55.50"), img_path=None),
        9: Product(
            id=9,
            name="Celebration Cake",
            price=Decimal("1250.00"),
            img_path="/images/products/cake.jpg",
        ),
    }
    for product_id, product in products.items():
        product.inventory = Inventory(quantity=product_id * 10)
        db_session.add(product)
    db_session.commit()
    return products


@pytest.fixture
def tomorrow():
    return date.today() + timedelta(days=1)


@pytest.fixture
def reservation_data(tomorrow):
    """Form fields for a valid reservation of two product-5 items."""
    return {
        "name": "Jane Doe",
        "contact_number": "09171234567",
        "email": "jane@example.com",
        "coupon": "",
        "pick_up_date": tomorrow.isoformat(),
        "products[5]": "2",
        "products[7]": "0",
    }


@pytest.fixture
def make_order(db_session):
    """Factory for orders with a given status and update time."""
    counter = itertools.count(1)

    def _make(
        status=OrderStatus.PENDING,
        updated_at=None,
        total_amount=Decimal("0"),
        with_reservation=False,
    ):
        n = next(counter)
        order = Order(
            transaction_key=f"T{n:05d}",
            status=status,
            total_amount=total_amount,
        )
        if updated_at is not None:
            order.created_at = updated_at
            order.updated_at = updated_at
        db_session.add(order)
        db_session.flush()

        if with_reservation:
            db_session.add(
                Reservation(
                    transaction_key=order.transaction_key,
                    name=f"Customer {n}",
                    contact_number="09170000000",
                    email=f"customer{n}@example.com",
                    pick_up_date=date.today(),
                    order_id=order.id,
                )
            )
        db_session.commit()
        return order

    return _make
