"""
Order Domain Models

Storefront orders and the checkout request.

Author: DP Team
Date: 2025-06-03
"""
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field

from app.domain.base import DomainModel
from app.domain.catalog import ProductSummary

# Order lifecycle
ORDER_STATUSES = ("PENDING", "CONFIRMED", "PROCESSING", "SHIPPED", "DELIVERED", "CANCELLED")
PAYMENT_STATUSES = ("PENDING", "PAID", "FAILED", "REFUNDED")


class OrderItem(DomainModel):
    """
    Order line

    Fields:
        price: Unit price charged at checkout (after discounts or deal proration)
        deal_id: Set when the line was bought as part of a deal
    """
    id: int
    product_id: int
    quantity: int
    price: Decimal
    size: Optional[str] = None
    color: Optional[str] = None
    deal_id: Optional[int] = None
    product: Optional[ProductSummary] = None


class OrderCustomer(DomainModel):
    id: int
    email: str
    name: Optional[str] = None
    phone: Optional[str] = None


class Order(DomainModel):
    id: int
    order_number: str
    user_id: int

    subtotal: Decimal
    shipping_fee: Decimal
    discount: Decimal
    total: Decimal

    status: str
    payment_status: str
    payment_method: str

    shipping_address: dict
    notes: Optional[str] = None

    is_returned: bool = False
    return_reason: Optional[str] = None
    returned_at: Optional[datetime] = None
    returned_by: Optional[str] = None

    created_at: datetime
    updated_at: Optional[datetime] = None

    items: List[OrderItem] = Field(default_factory=list)
    user: Optional[OrderCustomer] = None


class ShippingAddress(BaseModel):
    name: str = Field(..., min_length=1)
    phone: str = Field(..., min_length=1)
    address: str = Field(..., min_length=1)
    city: str = Field(..., min_length=1)
    state: Optional[str] = None
    postal_code: Optional[str] = None
    country: str = "Pakistan"


class CheckoutItem(BaseModel):
    product_id: int
    quantity: int = Field(..., ge=1)
    size: Optional[str] = None
    color: Optional[str] = None
    deal_id: Optional[int] = None


class CheckoutRequest(BaseModel):
    """
    Checkout payload

    When `items` is omitted the user's cart is ordered and then cleared.
    """
    items: Optional[List[CheckoutItem]] = None
    shipping_address: ShippingAddress
    payment_method: str = "COD"
    notes: Optional[str] = None


class OrderStatusUpdate(BaseModel):
    status: Optional[str] = None
    payment_status: Optional[str] = None


class ReturnRequest(BaseModel):
    return_reason: str = ""
