from typing import Optional
from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.orm import Session
from freshharvest.application.policy import Identity
from freshharvest.application.product_service import ProductService
from freshharvest.application.schemas import ProductCreate, ProductRead
from freshharvest.domain.models import MAX_ID
from freshharvest.infrastructure.db import get_db
from .deps import require_admin_identity

router = APIRouter(prefix="/products", tags=["products"])

@router.get("", response_model=list[ProductRead])
def list_products(
    db: Session = Depends(get_db),
    skip: int = Query(0, ge=0, le=MAX_ID, description="Number of records to skip"),
    limit: int = Query(100, ge=1, le=1000, description="Maximum number of records to return"),
    category: Optional[str] = Query(None, max_length=100, description="Filter by category"),
):
    """Public catalog, sorted by name."""
    return ProductService(db).list(skip=skip, limit=limit, category=category)

@router.get("/{product_id}", response_model=ProductRead)
def get_product(product_id: int = Path(..., ge=1, le=MAX_ID), db: Session = Depends(get_db)):
    return ProductService(db).get(product_id)

@router.post("", response_model=ProductRead, status_code=201)
def create_product(
    payload: ProductCreate,
    identity: Identity = Depends(require_admin_identity),
    db: Session = Depends(get_db),
):
    return ProductService(db).create(identity, payload)

@router.put("/{product_id}", response_model=ProductRead)
def update_product(
    payload: ProductCreate,
    product_id: int = Path(..., ge=1, le=MAX_ID),
    identity: Identity = Depends(require_admin_identity),
    db: Session = Depends(get_db),
):
    return ProductService(db).update(identity, product_id, payload)

@router.delete("/{product_id}")
def delete_product(
    product_id: int = Path(..., ge=1, le=MAX_ID),
    identity: Identity = Depends(require_admin_identity),
    db: Session = Depends(get_db),
):
    ProductService(db).delete(identity, product_id)
    return {"message": "Product deleted successfully"}
