"""Seed the default accounts and the starter produce catalog.

Safe to run repeatedly: users are matched by email and products by name.

    python -m freshharvest.seed
"""
import argparse
import os
from decimal import Decimal
from sqlalchemy import select
from sqlalchemy.orm import Session
from freshharvest.core import get_logger, setup_logging
from freshharvest.domain.models import Product, Role, User
from freshharvest.infrastructure.db import SessionLocal, init_models
from freshharvest.infrastructure.security import hash_password

logger = get_logger(__name__)

USERS = [
    {"email": "admin@example.com", "name": "Admin User", "password": "admin123", "role": Role.ADMIN},
    {"email": "user@example.com", "name": "Test User", "password": "user123", "role": Role.BUYER},
]

PRODUCTS = [
    {
        "name": "Fresh Carrots",
        "description": "Locally grown organic carrots. Sweet and crunchy, perfect for salads, juicing, or cooking.",
        "price": Decimal("1.99"),
        "image_url": "https://images.unsplash.com/photo-1598170845058-32b9d6a5da37",
        "category": "Vegetables",
    },
    {
        "name": "Organic Apples",
        "description": "Sweet and crisp organic apples. Freshly picked from local orchards.",
        "price": Decimal("2.49"),
        "image_url": "https://images.unsplash.com/photo-1567306226416-28f0efdc88ce",
        "category": "Fruits",
    },
    {
        "name": "Fresh Spinach",
        "description": "Nutrient-rich spinach leaves. Perfect for salads, smoothies, or cooking.",
        "price": Decimal("3.99"),
        "image_url": "https://images.unsplash.com/photo-1576045057995-568f588f82fb",
        "category": "Vegetables",
    },
    {
        "name": "Ripe Bananas",
        "description": "Sweet and energy-packed bananas. Great for smoothies, baking, or as a quick snack.",
        "price": Decimal("1.29"),
        "image_url": "https://images.unsplash.com/photo-1571771894821-ce9b6c11b08e",
        "category": "Fruits",
    },
    {
        "name": "Red Potatoes",
        "description": "Versatile red potatoes with a smooth texture. Ideal for roasting, mashing, or salads.",
        "price": Decimal("0.99"),
        "image_url": "https://images.unsplash.com/photo-1518977676601-b53f82aba655",
        "category": "Vegetables",
    },
    {
        "name": "Fresh Strawberries",
        "description": "Juicy and sweet strawberries. Perfect for desserts or eating fresh.",
        "price": Decimal("4.99"),
        "image_url": "https://images.unsplash.com/photo-1543158181-e6f9f6712055",
        "category": "Fruits",
    },
]


def seed_users(db: Session) -> int:
    created = 0
    for entry in USERS:
        if db.scalars(select(User).where(User.email == entry["email"])).first():
            continue
        db.add(User(
            email=entry["email"],
            name=entry["name"],
            password_hash=hash_password(entry["password"]),
            role=entry["role"],
        ))
        created += 1
    return created


def seed_products(db: Session) -> int:
    created = 0
    for entry in PRODUCTS:
        product = db.scalars(select(Product).where(Product.name == entry["name"])).first()
        if product is None:
            db.add(Product(is_active=True, **entry))
            created += 1
        else:
            for key, value in entry.items():
                setattr(product, key, value)
    return created


def seed(db: Session) -> dict:
    users = seed_users(db)
    products = seed_products(db)
    db.commit()
    return {"users": users, "products": products}


def main(argv=None):
    parser = argparse.ArgumentParser(description="Seed FreshHarvest accounts and catalog")
    parser.add_argument("--create-tables", action="store_true", help="create missing tables first")
    args = parser.parse_args(argv)

    setup_logging(service_name="freshharvest-seed", level=os.getenv("LOG_LEVEL", "INFO"))
    if args.create_tables:
        init_models()
    with SessionLocal() as db:
        counts = seed(db)
    logger.info("Seed completed", extra={'extra_fields': counts})
    return counts


if __name__ == "__main__":
    main()
