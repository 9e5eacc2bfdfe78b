from typing import Optional
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload
from freshharvest.core import get_logger
from freshharvest.domain.models import (
    MAX_AMOUNT,
    InvalidStatusTransition,
    Order,
    OrderItem,
    OrderStatus,
    Product,
    User,
    to_money,
)
from .errors import AuthenticationRequired, NotFound, PersistenceFailure, ValidationError
from .policy import Identity, enforce, require_admin
from .schemas import OrderCreate

logger = get_logger(__name__)

class OrderService:
    def __init__(self, db: Session):
        self.db = db

    def _query(self):
        return (
            select(Order)
            .options(selectinload(Order.items), selectinload(Order.user))
            .execution_options(populate_existing=True)
        )

    def list(self, identity: Optional[Identity], skip: int = 0, limit: int = 100):
        """Admins see every order, buyers only their own; the filter runs in SQL."""
        identity = enforce(identity)
        stmt = self._query()
        if not identity.is_admin:
            stmt = stmt.where(Order.user_id == identity.id)
        stmt = stmt.order_by(Order.created_at.desc(), Order.id.desc()).offset(skip).limit(limit)
        return list(self.db.scalars(stmt))

    def get(self, identity: Optional[Identity], order_id: int) -> Order:
        identity = enforce(identity)
        order = self.db.scalars(self._query().where(Order.id == order_id)).first()
        if order is None:
            raise NotFound("Order not found")
        enforce(identity, owner_id=order.user_id, message="Not authorized to view this order")
        return order

    def create(self, identity: Optional[Identity], data: OrderCreate) -> Order:
        identity = enforce(identity)
        if self.db.get(User, identity.id) is None:
            raise AuthenticationRequired("Unknown user")

        product_ids = {line.product_id for line in data.items}
        products = {
            p.id: p
            for p in self.db.scalars(
                select(Product).where(Product.id.in_(product_ids), Product.is_active.is_(True))
            )
        }
        missing = sorted(product_ids - products.keys())
        if missing:
            raise NotFound(f"Product {missing[0]} not found")

        items = []
        for line in data.items:
            product = products[line.product_id]
            items.append(OrderItem(
                product_id=product.id,
                quantity=line.quantity,
                unit_price=to_money(product.price),
                product_name_snapshot=product.name,
            ))

        order = Order(
            user_id=identity.id,
            status=OrderStatus.PENDING,
            delivery_name=data.delivery_name,
            delivery_phone=data.delivery_phone,
            delivery_address=data.delivery_address,
            items=items,
        )
        order.total_amount = order.calculate_total()
        if order.total_amount > MAX_AMOUNT:
            raise ValidationError(f"Order total exceeds the maximum of {MAX_AMOUNT}")

        try:
            self.db.add(order)
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.error("Failed to create order", exc_info=True)
            raise PersistenceFailure("Error creating order") from exc

        logger.info(
            f"Order {order.id} created",
            extra={'extra_fields': {
                'order_id': order.id,
                'user_id': identity.id,
                'items': len(items),
                'total_amount': str(order.total_amount),
            }}
        )
        return self.get(identity, order.id)

    def set_status(self, identity: Optional[Identity], order_id: int, status: OrderStatus) -> Order:
        """Change only the status (and updated_at); admins only, owners included."""
        identity = require_admin(identity)
        order = self.db.get(Order, order_id)
        if order is None:
            raise NotFound("Order not found")

        previous = order.status
        try:
            order.apply_status(status)
        except InvalidStatusTransition as exc:
            raise ValidationError(str(exc)) from exc

        try:
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.error(f"Failed to update order {order_id}", exc_info=True)
            raise PersistenceFailure("Error updating order") from exc

        logger.info(
            f"Order {order_id} status changed",
            extra={'extra_fields': {
                'order_id': order_id,
                'old_status': previous.value,
                'new_status': status.value,
                'changed_by': identity.id,
            }}
        )
        return self.get(identity, order_id)
