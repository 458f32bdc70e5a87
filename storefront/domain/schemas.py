# storefront/domain/schemas.py
from pydantic import BaseModel, Field, ConfigDict
from typing import List
from decimal import Decimal
from datetime import datetime

from storefront.domain.order_status import OrderStatus


# ---- requests ----

class ItemIn(BaseModel):
    """Dodanie produktu do koszyka."""

    product_id: int = Field(..., gt=0, description="ID produktu (musi być > 0)")
    quantity: int = Field(..., gt=0, description="Ilość produktu (musi być > 0)")


class ItemQuantityIn(BaseModel):
    """Ustawienie ilosci, 0 lub mniej usuwa pozycje."""

    quantity: int


class PlaceOrderIn(BaseModel):
    user_id: int = Field(..., gt=0)
    shipping_address_id: int = Field(..., gt=0)


class OrderStatusIn(BaseModel):
    status: OrderStatus


class UserCreate(BaseModel):
    id: int = Field(..., gt=0, description="ID użytkownika (musi być > 0)")
    name: str = Field(..., min_length=1, max_length=100)


# ---- responses ----

class UserRead(BaseModel):
    id: int
    name: str

    model_config = ConfigDict(from_attributes=True)


class CartItemOut(BaseModel):
    product_id: int
    quantity: int
    price_at_addition: Decimal
    discount_at_addition: Decimal
    total: Decimal

    model_config = ConfigDict(from_attributes=True)


class CartOut(BaseModel):
    id: int
    user_id: int
    items: List[CartItemOut]
    total_amount: Decimal
    version: int
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class OrderItemOut(BaseModel):
    product_id: int
    quantity: int
    price: Decimal
    discount: Decimal
    total: Decimal

    model_config = ConfigDict(from_attributes=True)


class OrderOut(BaseModel):
    id: int
    user_id: int
    shipping_address_id: int
    status: OrderStatus
    order_date: datetime
    total_amount: Decimal
    items: List[OrderItemOut]

    model_config = ConfigDict(from_attributes=True)


class OrderPage(BaseModel):
    items: List[OrderOut]
    total: int
    page: int
    size: int


class DashboardMetrics(BaseModel):
    total_orders: int
    total_sales: Decimal
