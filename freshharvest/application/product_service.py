from typing import Optional
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from freshharvest.core import get_logger
from freshharvest.domain.models import Product, to_money
from .errors import NotFound, PersistenceFailure
from .policy import Identity, require_admin
from .schemas import ProductCreate

logger = get_logger(__name__)

class ProductService:
    def __init__(self, db: Session):
        self.db = db

    def list(self, skip: int = 0, limit: int = 100, category: Optional[str] = None):
        stmt = select(Product).where(Product.is_active.is_(True))
        if category:
            stmt = stmt.where(Product.category == category)
        stmt = stmt.order_by(Product.name.asc(), Product.id.asc()).offset(skip).limit(limit)
        return list(self.db.scalars(stmt))

    def get(self, product_id: int) -> Product:
        product = self.db.get(Product, product_id)
        if product is None or not product.is_active:
            raise NotFound("Product not found")
        return product

    def create(self, identity: Optional[Identity], data: ProductCreate) -> Product:
        require_admin(identity)
        product = Product(
            name=data.name,
            description=data.description,
            price=to_money(data.price),
            image_url=data.image_url,
            category=data.category,
            is_active=True,
        )
        self.db.add(product)
        self._commit("Failed to create product")
        self.db.refresh(product)
        logger.info(
            f"Product {product.id} created",
            extra={'extra_fields': {'product_id': product.id, 'price': str(product.price)}}
        )
        return product

    def update(self, identity: Optional[Identity], product_id: int, data: ProductCreate) -> Product:
        require_admin(identity)
        product = self.get(product_id)
        old_price = product.price
        product.name = data.name
        product.description = data.description
        product.price = to_money(data.price)
        product.image_url = data.image_url
        product.category = data.category
        self._commit("Failed to update product")
        self.db.refresh(product)
        logger.info(
            f"Product {product.id} updated",
            extra={'extra_fields': {
                'product_id': product.id,
                'old_price': str(old_price),
                'new_price': str(product.price),
            }}
        )
        return product

    def delete(self, identity: Optional[Identity], product_id: int) -> None:
        """Archive the product; line items of existing orders keep pointing at it."""
        require_admin(identity)
        product = self.get(product_id)
        product.is_active = False
        self._commit("Failed to delete product")
        logger.info(f"Product {product_id} archived", extra={'extra_fields': {'product_id': product_id}})

    def _commit(self, message: str) -> None:
        try:
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.error(message, exc_info=True)
            raise PersistenceFailure(message) from exc
