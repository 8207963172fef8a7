"""Request and response models for the HTTP layer."""
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from models import OrderStatus, UserRole


# Products
class ProductIn(BaseModel):
    name: str
    description: Optional[str] = None
    price: Decimal = Field(..., ge=0, decimal_places=2)
    image_url: Optional[str] = None
    stock_quantity: Optional[int] = None
    category: Optional[str] = None


class ProductOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: Optional[str] = None
    price: Decimal
    image_url: Optional[str] = None
    stock_quantity: Optional[int] = None
    category: Optional[str] = None
    seller_id: Optional[int] = None


# Users
class RegisterRequest(BaseModel):
    name: str
    email: EmailStr
    password: str
    role: Optional[UserRole] = None


class LoginRequest(BaseModel):
    # Normalized the same way as at registration
    email: EmailStr
    password: str


class CreateUserRequest(BaseModel):
    name: str
    email: EmailStr
    password: str
    role: UserRole = UserRole.USER


class UpdateRoleRequest(BaseModel):
    role: UserRole


class UserOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    role: UserRole


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserOut


# Orders
class ShippingDetails(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    name: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    zip_code: Optional[str] = None


class OrderItemIn(BaseModel):
    product_id: int
    name: Optional[str] = None
    # Left optional so the order builder reports the offending item by name
    price: Optional[Decimal] = None
    quantity: Optional[int] = None


class OrderIn(BaseModel):
    items: List[OrderItemIn]
    shipping_info: ShippingDetails


class OrderItemOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    product_id: int
    product_name: Optional[str] = None
    quantity: int
    price: Decimal


class OrderOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: Optional[int] = None
    customer_name: Optional[str] = None
    items: List[OrderItemOut]
    total: Decimal
    order_date: datetime
    shipping_info: ShippingDetails
    status: OrderStatus


class UpdateStatusRequest(BaseModel):
    status: OrderStatus


# Statistics
class SellerStatistics(BaseModel):
    total_products: int
    total_orders: int
    total_revenue: Decimal
    low_stock_products: int


class SystemStatistics(BaseModel):
    total_users: int
    admin_count: int
    seller_count: int
    user_count: int


class UploadResponse(BaseModel):
    url: str
