import enum
from datetime import datetime, timezone
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import (
    DECIMAL,
    Date,
    DateTime,
    Enum,
    ForeignKeyConstraint,
    Index,
    Integer,
    String,
    Text,
    select,
)
from sqlalchemy.orm import Mapped, declarative_base, mapped_column, relationship

from storefront.services.exceptions import InvalidStatusTransitionError

Base = declarative_base()
metadata = Base.metadata


def utcnow():
    """Naive UTC timestamp, the format every DateTime column stores."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class OrderStatus(str, enum.Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    READY_TO_PICKUP = "ready to pickup"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

    @property
    def slug(self):
        """Key used in URLs and dashboard buckets, e.g. ``ready_to_pickup``."""
        return self.value.replace(" ", "_")

    @property
    def is_terminal(self):
        return not ORDER_STATUS_TRANSITIONS[self]

    def can_transition_to(self, target):
        return OrderStatus(target) in ORDER_STATUS_TRANSITIONS[self]


ORDER_STATUS_TRANSITIONS = {
    OrderStatus.PENDING: frozenset({OrderStatus.PROCESSING, OrderStatus.CANCELLED}),
    OrderStatus.PROCESSING: frozenset(
        {OrderStatus.READY_TO_PICKUP, OrderStatus.CANCELLED}
    ),
    OrderStatus.READY_TO_PICKUP: frozenset(
        {OrderStatus.COMPLETED, OrderStatus.CANCELLED}
    ),
    OrderStatus.COMPLETED: frozenset(),
    OrderStatus.CANCELLED: frozenset(),
}


class Setting(Base):
    __tablename__ = "settings"
    __table_args__ = (Index("uq_settings_key", "key", unique=True),)

    id = mapped_column(Integer, primary_key=True)
    key = mapped_column(String(100), nullable=False)
    value = mapped_column(Text)
    created_at = mapped_column(DateTime, nullable=False, default=utcnow)
    updated_at = mapped_column(
        DateTime, nullable=False, default=utcnow, onupdate=utcnow
    )

    @classmethod
    def get_value(cls, session, key, default=None):
        value = session.scalar(select(cls.value).where(cls.key == key))
        return default if value is None else value


class Product(Base):
    __tablename__ = "products"

    id = mapped_column(Integer, primary_key=True)
    name = mapped_column(String(120), nullable=False)
    price = mapped_column(DECIMAL(10, 2), nullable=False)
    description = mapped_column(Text)
    img_path = mapped_column(String(512))
    created_at = mapped_column(DateTime, nullable=False, default=utcnow)
    updated_at = mapped_column(
        DateTime, nullable=False, default=utcnow, onupdate=utcnow
    )

    inventory: Mapped[Optional["Inventory"]] = relationship(
        "Inventory", uselist=False, back_populates="product"
    )
    order_details: Mapped[List["OrderDetail"]] = relationship(
        "OrderDetail", uselist=True, back_populates="product"
    )


class Inventory(Base):
    __tablename__ = "inventories"
    __table_args__ = (
        ForeignKeyConstraint(
            ["product_id"], ["products.id"], ondelete="CASCADE", name="fk_inv_product"
        ),
        Index("uq_inventories_product_id", "product_id", unique=True),
    )

    id = mapped_column(Integer, primary_key=True)
    product_id = mapped_column(Integer, nullable=False)
    quantity = mapped_column(Integer, nullable=False, default=0)
    updated_at = mapped_column(
        DateTime, nullable=False, default=utcnow, onupdate=utcnow
    )

    product: Mapped["Product"] = relationship("Product", back_populates="inventory")


class Order(Base):
    __tablename__ = "orders"
    __table_args__ = (
        Index("uq_orders_transaction_key", "transaction_key", unique=True),
        Index("ix_orders_status_updated_at", "status", "updated_at"),
    )

    id = mapped_column(Integer, primary_key=True)
    transaction_key = mapped_column(String(6), nullable=False)
    status = mapped_column(
        Enum(
            OrderStatus,
            name="order_status",
            values_callable=lambda statuses: [s.value for s in statuses],
            native_enum=False,
            validate_strings=True,
            length=20,
        ),
        nullable=False,
        default=OrderStatus.PENDING,
    )
    total_amount = mapped_column(DECIMAL(10, 2), nullable=False, default=Decimal("0"))
    created_at = mapped_column(DateTime, nullable=False, default=utcnow)
    updated_at = mapped_column(
        DateTime, nullable=False, default=utcnow, onupdate=utcnow
    )

    order_details: Mapped[List["OrderDetail"]] = relationship(
        "OrderDetail",
        uselist=True,
        back_populates="order",
        order_by="OrderDetail.id",
    )
    reservation: Mapped[Optional["Reservation"]] = relationship(
        "Reservation", uselist=False, back_populates="order"
    )

    def transition_to(self, status):
        """Move to ``status`` if the transition table allows it."""
        target = OrderStatus(status)
        current = OrderStatus(self.status)
        if not current.can_transition_to(target):
            raise InvalidStatusTransitionError(current, target)
        self.status = target
        return self


class OrderDetail(Base):
    __tablename__ = "order_details"
    __table_args__ = (
        ForeignKeyConstraint(
            ["order_id"], ["orders.id"], ondelete="CASCADE", name="fk_od_order"
        ),
        ForeignKeyConstraint(
            ["product_id"], ["products.id"], ondelete="RESTRICT", name="fk_od_product"
        ),
        Index("ix_order_details_order_id", "order_id"),
        Index("ix_order_details_product_id", "product_id"),
    )

    id = mapped_column(Integer, primary_key=True)
    order_id = mapped_column(Integer, nullable=False)
    product_id = mapped_column(Integer, nullable=False)
    quantity = mapped_column(Integer, nullable=False)
    # quantity x unit price at the time of reservation; never recomputed
    amount = mapped_column(DECIMAL(10, 2), nullable=False)
    created_at = mapped_column(DateTime, nullable=False, default=utcnow)
    updated_at = mapped_column(
        DateTime, nullable=False, default=utcnow, onupdate=utcnow
    )

    order: Mapped["Order"] = relationship("Order", back_populates="order_details")
    product: Mapped["Product"] = relationship("Product", back_populates="order_details")


class Reservation(Base):
    __tablename__ = "reservations"
    __table_args__ = (
        ForeignKeyConstraint(
            ["order_id"], ["orders.id"], ondelete="CASCADE", name="fk_res_order"
        ),
        Index("uq_reservations_order_id", "order_id", unique=True),
        Index("ix_reservations_transaction_key", "transaction_key"),
    )

    id = mapped_column(Integer, primary_key=True)
    transaction_key = mapped_column(String(6), nullable=False)
    name = mapped_column(String(100), nullable=False)
    contact_number = mapped_column(String(11), nullable=False)
    email = mapped_column(String(255), nullable=False)
    coupon = mapped_column(String(50))
    pick_up_date = mapped_column(Date, nullable=False)
    order_id = mapped_column(Integer, nullable=False)
    created_at = mapped_column(DateTime, nullable=False, default=utcnow)
    updated_at = mapped_column(
        DateTime, nullable=False, default=utcnow, onupdate=utcnow
    )

    order: Mapped["Order"] = relationship("Order", back_populates="reservation")
