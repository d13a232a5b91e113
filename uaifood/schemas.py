"""
Pydantic Schemas for Request/Response Validation

Request bodies are validated here before any service code runs; response
models are built straight from ORM objects (from_attributes).

Author: UaiFood Team
Version: 1.0.0
"""

import re
from datetime import datetime
from decimal import Decimal
from typing import List, Literal, Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

from uaifood.models import PaymentMethod, UserRole


def _strip(v):
    return v.strip() if isinstance(v, str) else v


# =============================================================================
# USERS
# =============================================================================

class UserCreate(BaseModel):
    """Registration payload. The role is never accepted from the client."""
    name: str = Field(..., min_length=3, max_length=100, examples=["Maria Silva"])
    email: EmailStr = Field(..., examples=["maria@example.com"])
    password: str = Field(..., min_length=6, max_length=72)
    phone: str = Field(..., min_length=10, max_length=20, examples=["34999998888"])
    accepts_terms: Literal[True] = Field(
        ...,
        description="Must be literally true",
    )

    @field_validator("name", "email", "phone", mode="before")
    @classmethod
    def strip_text(cls, v):
        return _strip(v)


class UserLogin(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)

    @field_validator("email", mode="before")
    @classmethod
    def strip_email(cls, v):
        return _strip(v)


class UserUpdate(BaseModel):
    """Self-service profile update. Email and role cannot be changed here."""
    name: Optional[str] = Field(None, min_length=3, max_length=100)
    phone: Optional[str] = Field(None, min_length=10, max_length=20)

    @field_validator("name", "phone", mode="before")
    @classmethod
    def strip_text(cls, v):
        return _strip(v)


class AdminUserUpdate(UserUpdate):
    role: Optional[UserRole] = None


class PasswordChange(BaseModel):
    old_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=6, max_length=72)


class UserResponse(BaseModel):
    id: int
    name: str
    email: str
    phone: str
    role: UserRole
    created_at: datetime

    class Config:
        from_attributes = True


class LoginResponse(BaseModel):
    message: str
    token: str


class UserSummary(BaseModel):
    """Client identity attached to orders."""
    id: int
    name: str
    email: str

    class Config:
        from_attributes = True


# =============================================================================
# CATALOG
# =============================================================================

class CategoryCreate(BaseModel):
    description: str = Field(..., min_length=2, max_length=100, examples=["Pizzas"])

    @field_validator("description", mode="before")
    @classmethod
    def strip_text(cls, v):
        return _strip(v)


class CategoryUpdate(BaseModel):
    description: Optional[str] = Field(None, min_length=2, max_length=100)

    @field_validator("description", mode="before")
    @classmethod
    def strip_text(cls, v):
        return _strip(v)


class CategoryResponse(BaseModel):
    id: int
    description: str
    created_at: datetime

    class Config:
        from_attributes = True


class CategoryLabel(BaseModel):
    description: str

    class Config:
        from_attributes = True


class ItemCreate(BaseModel):
    description: str = Field(..., min_length=3, max_length=255, examples=["Pizza Margherita"])
    unit_price: Decimal = Field(..., gt=0, max_digits=10, decimal_places=2, examples=["39.90"])
    category_id: int = Field(..., gt=0)

    @field_validator("description", mode="before")
    @classmethod
    def strip_text(cls, v):
        return _strip(v)


class ItemUpdate(BaseModel):
    description: Optional[str] = Field(None, min_length=3, max_length=255)
    unit_price: Optional[Decimal] = Field(None, gt=0, max_digits=10, decimal_places=2)
    category_id: Optional[int] = Field(None, gt=0)

    @field_validator("description", mode="before")
    @classmethod
    def strip_text(cls, v):
        return _strip(v)


class ItemResponse(BaseModel):
    """Single item with its full parent category."""
    id: int
    description: str
    unit_price: Decimal
    category_id: int
    created_at: datetime
    category: CategoryResponse

    class Config:
        from_attributes = True


class ItemListEntry(BaseModel):
    """Listing entry; only the category description is embedded."""
    id: int
    description: str
    unit_price: Decimal
    category_id: int
    created_at: datetime
    category: CategoryLabel

    class Config:
        from_attributes = True


class ItemSummary(BaseModel):
    id: int
    description: str
    unit_price: Decimal
    category_id: int

    class Config:
        from_attributes = True


# =============================================================================
# ADDRESSES
# =============================================================================

class AddressCreate(BaseModel):
    street: str = Field(..., min_length=3, max_length=255, examples=["Av. Rondon Pacheco"])
    number: str = Field(..., min_length=1, max_length=20, examples=["1200"])
    district: str = Field(..., min_length=3, max_length=100, examples=["Centro"])
    city: str = Field(..., min_length=3, max_length=100, examples=["Uberlândia"])
    state: str = Field(..., min_length=2, max_length=2, examples=["MG"])
    zip_code: str = Field(..., min_length=8, max_length=8, examples=["38400000"])

    @field_validator("street", "number", "district", "city", "state", "zip_code", mode="before")
    @classmethod
    def strip_text(cls, v):
        return _strip(v)

    @field_validator("state")
    @classmethod
    def validate_state(cls, v: str) -> str:
        if not v.isalpha():
            raise ValueError("State must be a two-letter code")
        return v.upper()

    @field_validator("zip_code")
    @classmethod
    def validate_zip(cls, v: str) -> str:
        if not re.match(r"^\d{8}$", v):
            raise ValueError("Zip code must have 8 digits (numbers only)")
        return v


class AddressUpdate(BaseModel):
    street: Optional[str] = Field(None, min_length=3, max_length=255)
    number: Optional[str] = Field(None, min_length=1, max_length=20)
    district: Optional[str] = Field(None, min_length=3, max_length=100)
    city: Optional[str] = Field(None, min_length=3, max_length=100)
    state: Optional[str] = Field(None, min_length=2, max_length=2)
    zip_code: Optional[str] = Field(None, min_length=8, max_length=8)

    @field_validator("street", "number", "district", "city", "state", "zip_code", mode="before")
    @classmethod
    def strip_text(cls, v):
        return _strip(v)

    @field_validator("state")
    @classmethod
    def validate_state(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        if not v.isalpha():
            raise ValueError("State must be a two-letter code")
        return v.upper()

    @field_validator("zip_code")
    @classmethod
    def validate_zip(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        if not re.match(r"^\d{8}$", v):
            raise ValueError("Zip code must have 8 digits (numbers only)")
        return v


class AddressResponse(BaseModel):
    id: int
    street: str
    number: str
    district: str
    city: str
    state: str
    zip_code: str
    created_at: datetime

    class Config:
        from_attributes = True


# =============================================================================
# ORDERS
# =============================================================================

class OrderItemCreate(BaseModel):
    """Single line in an order request. Prices are never taken from the client."""
    item_id: int = Field(..., gt=0)
    quantity: int = Field(..., gt=0, examples=[2])


class OrderCreate(BaseModel):
    payment_method: PaymentMethod = Field(..., examples=["PIX"])
    address_id: int = Field(..., gt=0)
    items: List[OrderItemCreate] = Field(..., min_length=1)

    @field_validator("items")
    @classmethod
    def validate_unique_items(cls, v: List[OrderItemCreate]) -> List[OrderItemCreate]:
        seen = set()
        for line in v:
            if line.item_id in seen:
                raise ValueError(f"Item {line.item_id} appears more than once; merge the quantities")
            seen.add(line.item_id)
        return v


class OrderStatusUpdate(BaseModel):
    """Free-text status; the value is stored as sent (trimmed)."""
    status: str = Field(..., min_length=3, max_length=50, examples=["PREPARING"])

    @field_validator("status", mode="before")
    @classmethod
    def strip_status(cls, v):
        return _strip(v)


class OrderItemResponse(BaseModel):
    id: int
    item_id: int
    quantity: int
    unit_price: Decimal
    item: ItemSummary

    class Config:
        from_attributes = True


class OrderResponse(BaseModel):
    """Full order graph."""
    id: int
    payment_method: PaymentMethod
    status: str
    client_id: int
    created_by_id: int
    address_id: int
    created_at: datetime
    updated_at: Optional[datetime]
    total_amount: Decimal
    client: UserSummary
    address: AddressResponse
    order_items: List[OrderItemResponse]

    class Config:
        from_attributes = True


# =============================================================================
# MISC
# =============================================================================

class ErrorResponse(BaseModel):
    """Standard error response."""
    message: str
    errors: Optional[list] = None


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    database: str
    environment: str
    timestamp: datetime
