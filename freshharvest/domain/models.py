from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship
from sqlalchemy import String, Text, ForeignKey, Numeric, DateTime, Boolean, Enum as SAEnum, CheckConstraint
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Optional

CENT = Decimal("0.01")
# Largest value a Numeric(10,2) column holds
MAX_AMOUNT = Decimal("99999999.99")
# Integer primary keys are 32-bit on PostgreSQL
MAX_ID = 2**31 - 1


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def to_money(value) -> Decimal:
    return Decimal(str(value)).quantize(CENT)


class Base(DeclarativeBase):
    pass


class Role(str, Enum):
    BUYER = "BUYER"
    ADMIN = "ADMIN"


class OrderStatus(str, Enum):
    PENDING = "PENDING"
    IN_PROGRESS = "IN_PROGRESS"
    DELIVERED = "DELIVERED"


# Admins may set any status from any status, backward moves included.
ALLOWED_TRANSITIONS: dict[OrderStatus, frozenset[OrderStatus]] = {
    OrderStatus.PENDING: frozenset(OrderStatus),
    OrderStatus.IN_PROGRESS: frozenset(OrderStatus),
    OrderStatus.DELIVERED: frozenset(OrderStatus),
}


def can_transition(current: OrderStatus, target: OrderStatus) -> bool:
    return target in ALLOWED_TRANSITIONS.get(current, frozenset())


class InvalidStatusTransition(ValueError):
    def __init__(self, current: OrderStatus, target: OrderStatus):
        super().__init__(f"Cannot change order status from {current.value} to {target.value}")
        self.current = current
        self.target = target


class User(Base):
    __tablename__ = "users"
    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(200))
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    password_hash: Mapped[str] = mapped_column(String(255))
    role: Mapped[Role] = mapped_column(SAEnum(Role, native_enum=False, length=20), default=Role.BUYER)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    orders: Mapped[list["Order"]] = relationship("Order", back_populates="user")


class Product(Base):
    __tablename__ = "products"
    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(200), index=True)
    description: Mapped[str] = mapped_column(Text)
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2))
    image_url: Mapped[str] = mapped_column(String(500))
    category: Mapped[str] = mapped_column(String(100), index=True)
    # Cleared instead of deleting the row so historical line items keep their product
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    __table_args__ = (
        CheckConstraint("price > 0", name="ck_products_price_positive"),
    )


class Order(Base):
    __tablename__ = "orders"
    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="RESTRICT"), index=True)
    status: Mapped[OrderStatus] = mapped_column(
        SAEnum(OrderStatus, native_enum=False, length=30), default=OrderStatus.PENDING
    )
    total_amount: Mapped[Decimal] = mapped_column(Numeric(10, 2))
    delivery_name: Mapped[str] = mapped_column(String(200))
    delivery_phone: Mapped[str] = mapped_column(String(50))
    delivery_address: Mapped[str] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)
    user: Mapped[User] = relationship("User", back_populates="orders")
    items: Mapped[list["OrderItem"]] = relationship(
        "OrderItem", back_populates="order", cascade="all, delete-orphan", order_by="OrderItem.id"
    )

    def calculate_total(self) -> Decimal:
        total = sum((item.unit_price * item.quantity for item in self.items), Decimal("0.00"))
        return to_money(total)

    def apply_status(self, target: OrderStatus) -> None:
        if not can_transition(self.status, target):
            raise InvalidStatusTransition(self.status, target)
        self.status = target
        self.updated_at = utcnow()


class OrderItem(Base):
    __tablename__ = "order_items"
    id: Mapped[int] = mapped_column(primary_key=True)
    order_id: Mapped[int] = mapped_column(ForeignKey("orders.id", ondelete="CASCADE"), index=True)
    product_id: Mapped[int] = mapped_column(ForeignKey("products.id", ondelete="RESTRICT"))
    quantity: Mapped[int]
    # Price copied from the product when the order was placed
    unit_price: Mapped[Decimal] = mapped_column(Numeric(10, 2))
    product_name_snapshot: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    order: Mapped[Order] = relationship("Order", back_populates="items")

    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_order_items_quantity_positive"),
    )

    @property
    def line_total(self) -> Decimal:
        return to_money(self.unit_price * self.quantity)
