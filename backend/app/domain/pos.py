"""
POS Domain Models

Author: DP Team
Date: 2025-06-04
"""
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field

from app.domain.base import DomainModel

DISCOUNT_PERCENTAGE = "PERCENTAGE"
DISCOUNT_FIXED = "FIXED"
PAYMENT_CREDIT = "CREDIT"


class POSSaleItem(DomainModel):
    id: int
    product_id: int
    product_name: str
    quantity: int
    price: Decimal
    size: Optional[str] = None
    color: Optional[str] = None


class SaleSalesman(DomainModel):
    id: int
    name: Optional[str] = None
    email: str


class SaleShop(DomainModel):
    id: int
    name: str


class POSSale(DomainModel):
    id: int
    receipt_number: str
    salesman_id: int
    shop_id: Optional[int] = None

    subtotal: Decimal
    discount: Decimal
    discount_type: Optional[str] = None
    total: Decimal

    payment_method: str
    amount_received: Optional[Decimal] = None
    change_given: Optional[Decimal] = None
    is_paid: bool = True
    remaining_amount: Decimal = Decimal("0")

    customer_name: Optional[str] = None
    customer_phone: Optional[str] = None
    notes: Optional[str] = None

    is_returned: bool = False
    return_reason: Optional[str] = None
    returned_at: Optional[datetime] = None
    returned_by: Optional[str] = None

    created_at: datetime

    items: List[POSSaleItem] = Field(default_factory=list)
    salesman: Optional[SaleSalesman] = None
    shop: Optional[SaleShop] = None


class POSItemIn(BaseModel):
    product_id: int
    quantity: int = Field(..., ge=1)
    size: Optional[str] = None
    color: Optional[str] = None


class POSSaleCreate(BaseModel):
    items: List[POSItemIn] = Field(default_factory=list)
    discount: Decimal = Field(Decimal("0"), ge=0)
    discount_type: Optional[str] = DISCOUNT_FIXED
    payment_method: str = "CASH"
    amount_received: Optional[Decimal] = Field(None, ge=0)
    customer_name: Optional[str] = None
    customer_phone: Optional[str] = None
    notes: Optional[str] = None
    shop_id: Optional[int] = None
