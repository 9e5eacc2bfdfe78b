from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from freshharvest.core import get_logger
from freshharvest.domain.models import Role, User
from freshharvest.infrastructure.security import hash_password, verify_password
from .errors import AuthenticationRequired, NotFound, ValidationError
from .schemas import UserCreate

logger = get_logger(__name__)

# bcrypt only looks at the first 72 bytes of a password
MAX_PASSWORD_BYTES = 72

class UserService:
    def __init__(self, db: Session):
        self.db = db

    def get(self, user_id: int) -> User:
        user = self.db.get(User, user_id)
        if user is None:
            raise NotFound("User not found")
        return user

    def find_by_email(self, email: str):
        return self.db.scalars(select(User).where(User.email == email.strip().lower())).first()

    def register(self, data: UserCreate) -> User:
        """Self-registration always creates a buyer."""
        if len(data.password.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise ValidationError(f"Password too long (max {MAX_PASSWORD_BYTES} bytes)")
        email = data.email.strip().lower()
        if self.find_by_email(email) is not None:
            raise ValidationError("Email already registered")

        user = User(
            name=data.name.strip(),
            email=email,
            password_hash=hash_password(data.password),
            role=Role.BUYER,
        )
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError as exc:
            # Lost a race against a concurrent registration with the same email
            self.db.rollback()
            raise ValidationError("Email already registered") from exc
        self.db.refresh(user)
        logger.info(f"User {user.id} registered", extra={'extra_fields': {'user_id': user.id}})
        return user

    def authenticate(self, email: str, password: str) -> User:
        user = self.find_by_email(email)
        if user is None or not verify_password(password, user.password_hash):
            logger.warning("Failed login attempt")
            raise AuthenticationRequired("Incorrect email or password")
        return user
