from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from freshharvest.application.policy import Identity
from freshharvest.application.schemas import LoginRequest, TokenRead, UserCreate, UserRead
from freshharvest.application.user_service import UserService
from freshharvest.infrastructure.db import get_db
from freshharvest.infrastructure.security import create_access_token
from .deps import require_identity

router = APIRouter(prefix="/auth", tags=["auth"])

@router.post("/register", response_model=UserRead, status_code=201)
def register(payload: UserCreate, db: Session = Depends(get_db)):
    return UserService(db).register(payload)

@router.post("/login", response_model=TokenRead)
def login(payload: LoginRequest, db: Session = Depends(get_db)):
    user = UserService(db).authenticate(payload.email, payload.password)
    return TokenRead(access_token=create_access_token(user.id, user.role.value))

@router.get("/me", response_model=UserRead)
def me(identity: Identity = Depends(require_identity), db: Session = Depends(get_db)):
    return UserService(db).get(identity.id)
