from pydantic import BaseModel, ConfigDict, Field, model_validator
from datetime import datetime
from decimal import Decimal
from typing import Optional
from freshharvest.domain.models import MAX_ID, OrderStatus, Role

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"
MAX_QUANTITY = 10_000

class ProductCreate(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    description: str = Field(min_length=1)
    price: Decimal = Field(gt=0, max_digits=10, decimal_places=2)
    image_url: str = Field(min_length=1, max_length=500)
    category: str = Field(min_length=1, max_length=100)

    model_config = ConfigDict(str_strip_whitespace=True)

class ProductRead(BaseModel):
    id: int
    name: str
    description: str
    price: float
    image_url: str
    category: str
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

class OrderItemCreate(BaseModel):
    product_id: int = Field(strict=True, ge=1, le=MAX_ID)
    quantity: int = Field(strict=True, ge=1, le=MAX_QUANTITY)

class OrderCreate(BaseModel):
    items: list[OrderItemCreate] = Field(min_length=1)
    delivery_name: str = Field(min_length=1, max_length=200)
    delivery_phone: str = Field(min_length=1, max_length=50)
    delivery_address: str = Field(min_length=1)

    model_config = ConfigDict(str_strip_whitespace=True)

    @model_validator(mode="before")
    @classmethod
    def single_product_form(cls, data):
        # The product page posts one product_id/quantity pair instead of a cart
        if isinstance(data, dict) and "items" not in data and "product_id" in data:
            data = dict(data)
            data["items"] = [{"product_id": data.pop("product_id"), "quantity": data.pop("quantity", None)}]
        return data

class OrderStatusUpdate(BaseModel):
    status: OrderStatus

class OrderItemRead(BaseModel):
    id: int
    product_id: int
    quantity: int
    unit_price: float
    line_total: float
    product_name_snapshot: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)

class OrderOwnerRead(BaseModel):
    id: int
    name: str
    email: str

    model_config = ConfigDict(from_attributes=True)

class OrderRead(BaseModel):
    id: int
    user_id: int
    status: OrderStatus
    total_amount: float
    delivery_name: str
    delivery_phone: str
    delivery_address: str
    created_at: datetime
    updated_at: datetime
    user: Optional[OrderOwnerRead] = None
    items: list[OrderItemRead]

    model_config = ConfigDict(from_attributes=True)

class UserCreate(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    email: str = Field(pattern=EMAIL_PATTERN, max_length=255)
    password: str = Field(min_length=6, max_length=72)

class LoginRequest(BaseModel):
    email: str = Field(min_length=1)
    password: str = Field(min_length=1)

class UserRead(BaseModel):
    id: int
    name: str
    email: str
    role: Role
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

class TokenRead(BaseModel):
    access_token: str
    token_type: str = "bearer"
