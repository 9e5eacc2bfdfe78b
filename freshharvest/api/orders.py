from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.orm import Session
from freshharvest.application.order_service import OrderService
from freshharvest.application.policy import Identity
from freshharvest.application.schemas import OrderCreate, OrderRead, OrderStatusUpdate
from freshharvest.domain.models import MAX_ID
from freshharvest.infrastructure.db import get_db
from .deps import require_admin_identity, require_identity

router = APIRouter(prefix="/orders", tags=["orders"])

@router.get("", response_model=list[OrderRead])
def list_orders(
    identity: Identity = Depends(require_identity),
    db: Session = Depends(get_db),
    skip: int = Query(0, ge=0, le=MAX_ID),
    limit: int = Query(100, ge=1, le=1000),
):
    """Own orders for buyers, every order for admins; newest first."""
    return OrderService(db).list(identity, skip=skip, limit=limit)

@router.post("", response_model=OrderRead, status_code=201)
def create_order(
    payload: OrderCreate,
    identity: Identity = Depends(require_identity),
    db: Session = Depends(get_db),
):
    return OrderService(db).create(identity, payload)

@router.get("/{order_id}", response_model=OrderRead)
def get_order(
    order_id: int = Path(..., ge=1, le=MAX_ID),
    identity: Identity = Depends(require_identity),
    db: Session = Depends(get_db),
):
    return OrderService(db).get(identity, order_id)

# PUT and PATCH both only ever change the status
@router.put("/{order_id}", response_model=OrderRead)
@router.patch("/{order_id}", response_model=OrderRead)
def update_order_status(
    payload: OrderStatusUpdate,
    order_id: int = Path(..., ge=1, le=MAX_ID),
    identity: Identity = Depends(require_admin_identity),
    db: Session = Depends(get_db),
):
    return OrderService(db).set_status(identity, order_id, payload.status)
