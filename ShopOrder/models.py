import enum
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional

from sqlalchemy import Column, DateTime, Enum, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import composite, relationship

from database import Base


class UserRole(str, enum.Enum):
    ADMIN = "ADMIN"    # manages accounts, sees system statistics
    SELLER = "SELLER"  # manages own products, sees own orders and revenue
    USER = "USER"      # regular customer


class OrderStatus(str, enum.Enum):
    PENDING = "PENDING"
    PROCESSING = "PROCESSING"
    SHIPPED = "SHIPPED"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"


def utcnow():
    return datetime.now(timezone.utc)


@dataclass
class ShippingInfo:
    """Shipping details copied onto the order; not linked to the account."""
    name: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    zip_code: Optional[str] = None


class User(Base):
    __tablename__ = "users"
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    password_hash = Column(String, nullable=False)
    role = Column(Enum(UserRole), nullable=False, default=UserRole.USER)
    orders = relationship("Order", back_populates="user")


class Product(Base):
    __tablename__ = "products"
    # Ids are never reused; order items keep pointing at deleted products
    __table_args__ = {"sqlite_autoincrement": True}
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, index=True, nullable=False)
    description = Column(Text)
    price = Column(Numeric(12, 2), nullable=False)
    image_url = Column(String)
    stock_quantity = Column(Integer)
    category = Column(String, index=True)
    seller_id = Column(Integer, index=True)  # None for platform products


class Order(Base):
    __tablename__ = "orders"
    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    total = Column(Numeric(12, 2), nullable=False)
    order_date = Column(DateTime, nullable=False, default=utcnow)
    status = Column(Enum(OrderStatus), nullable=False, default=OrderStatus.PENDING)

    shipping_name = Column(String)
    shipping_email = Column(String)
    shipping_address = Column(String)
    shipping_city = Column(String)
    shipping_zip_code = Column(String)
    shipping_info = composite(
        ShippingInfo, shipping_name, shipping_email, shipping_address, shipping_city, shipping_zip_code
    )

    user = relationship("User", back_populates="orders")
    items = relationship(
        "OrderItem", back_populates="order", cascade="all, delete-orphan", order_by="OrderItem.id"
    )

    @property
    def customer_name(self):
        return self.user.name if self.user is not None else None


class OrderItem(Base):
    __tablename__ = "order_items"
    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(Integer, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False)
    # Plain column, not a foreign key: the product may be deleted later
    product_id = Column(Integer, nullable=False, index=True)
    product_name = Column(String)
    seller_id = Column(Integer, index=True)  # owner when ordered; None for platform or missing products
    quantity = Column(Integer, nullable=False)
    price = Column(Numeric(12, 2), nullable=False)  # unit price at the time of order
    order = relationship("Order", back_populates="items")

    @property
    def subtotal(self) -> Decimal:
        return self.price * self.quantity
