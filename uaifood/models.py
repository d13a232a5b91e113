"""
SQLAlchemy Database Models

Tables for the restaurant ordering backend:
- Users and their (shared) address book
- Menu catalog: categories and items
- Orders with line items that snapshot the unit price

Author: UaiFood Team
Version: 1.0.0
"""

import enum
from datetime import datetime, timezone

from sqlalchemy import (
    Column,
    DateTime,
    Enum,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Table,
)
from sqlalchemy.orm import relationship

from uaifood.database import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class UserRole(str, enum.Enum):
    """Account roles. ADMIN is the only privileged role."""
    CLIENT = "CLIENT"
    ADMIN = "ADMIN"


class PaymentMethod(str, enum.Enum):
    CASH = "CASH"
    DEBIT = "DEBIT"
    CREDIT = "CREDIT"
    PIX = "PIX"


# Orders start here; admins may set any free-text status afterwards
ORDER_INITIAL_STATUS = "PENDING"


# Many-to-many: an address can be shared by several users
user_addresses = Table(
    "user_addresses",
    Base.metadata,
    Column("user_id", ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
    Column("address_id", ForeignKey("addresses.id", ondelete="CASCADE"), primary_key=True),
)


class User(Base):
    """Registered account. The password column only ever holds a bcrypt hash."""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password = Column(String(255), nullable=False)
    phone = Column(String(20), nullable=False)
    role = Column(Enum(UserRole), default=UserRole.CLIENT, nullable=False)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    addresses = relationship(
        "Address",
        secondary=user_addresses,
        back_populates="users",
    )

    def __repr__(self):
        return f"<User #{self.id} - {self.email} - {self.role.value}>"


class Category(Base):
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    description = Column(String(100), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    items = relationship("Item", back_populates="category")

    def __repr__(self):
        return f"<Category #{self.id} - {self.description}>"


class Item(Base):
    """Menu item. unit_price is the current price; order lines keep their own copy."""
    __tablename__ = "items"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    description = Column(String(255), nullable=False)
    unit_price = Column(Numeric(10, 2), nullable=False)
    category_id = Column(
        Integer,
        ForeignKey("categories.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    category = relationship("Category", back_populates="items")

    def __repr__(self):
        return f"<Item #{self.id} - {self.description} - {self.unit_price}>"


class Address(Base):
    __tablename__ = "addresses"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    street = Column(String(255), nullable=False)
    number = Column(String(20), nullable=False)
    district = Column(String(100), nullable=False)
    city = Column(String(100), nullable=False)
    state = Column(String(2), nullable=False)
    zip_code = Column(String(8), nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    users = relationship(
        "User",
        secondary=user_addresses,
        back_populates="addresses",
    )

    def __repr__(self):
        return f"<Address #{self.id} - {self.street}, {self.number} - {self.city}/{self.state}>"


class Order(Base):
    """
    Customer order.

    client_id is the customer the order belongs to; created_by_id is the
    account that placed it (the same user for self-service orders).
    """
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    payment_method = Column(Enum(PaymentMethod), nullable=False)
    status = Column(
        String(50),
        default=ORDER_INITIAL_STATUS,
        nullable=False,
        index=True
    )
    client_id = Column(
        Integer, ForeignKey("users.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    created_by_id = Column(
        Integer, ForeignKey("users.id", ondelete="RESTRICT"), nullable=False
    )
    address_id = Column(
        Integer, ForeignKey("addresses.id", ondelete="RESTRICT"), nullable=False
    )

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    client = relationship("User", foreign_keys=[client_id])
    created_by = relationship("User", foreign_keys=[created_by_id])
    address = relationship("Address")
    order_items = relationship(
        "OrderItem",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItem.id",
    )

    @property
    def total_amount(self):
        return sum((line.unit_price * line.quantity for line in self.order_items), 0)

    def __repr__(self):
        return f"<Order #{self.id} - client {self.client_id} - {self.status}>"


class OrderItem(Base):
    """Order line. unit_price is copied from the Item when the order is placed."""
    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    order_id = Column(
        Integer, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True
    )
    item_id = Column(
        Integer, ForeignKey("items.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    quantity = Column(Integer, nullable=False)
    unit_price = Column(Numeric(10, 2), nullable=False)

    order = relationship("Order", back_populates="order_items")
    item = relationship("Item")

    def __repr__(self):
        return f"<OrderItem #{self.id} - order {self.order_id} - item {self.item_id} x{self.quantity}>"
