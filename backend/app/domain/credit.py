"""
Credit ledger domain models: shops, Udhar transactions and payments

Author: DP Team
Date: 2025-06-05
"""
from datetime import datetime
from decimal import Decimal
from typing import Any, List, Optional

from pydantic import BaseModel, Field

from app.domain.base import DomainModel

# Udhar transaction statuses
UDHAR_UNPAID = "UNPAID"
UDHAR_PARTIAL = "PARTIAL"
UDHAR_PAID = "PAID"
UDHAR_OVERDUE = "OVERDUE"


class Shop(DomainModel):
    id: int
    name: str
    owner_name: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    cnic: Optional[str] = None
    allow_credit: bool = False
    credit_limit: Optional[Decimal] = None
    current_credit: Decimal = Decimal("0")
    is_active: bool = True
    notes: Optional[str] = None
    created_at: Optional[datetime] = None


class ShopCreate(BaseModel):
    name: str = Field(..., min_length=1)
    owner_name: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    cnic: Optional[str] = None
    allow_credit: bool = False
    credit_limit: Optional[Decimal] = Field(None, ge=0)
    notes: Optional[str] = None


class ShopUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    owner_name: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    cnic: Optional[str] = None
    allow_credit: Optional[bool] = None
    credit_limit: Optional[Decimal] = Field(None, ge=0)
    is_active: Optional[bool] = None
    notes: Optional[str] = None


class UdharPayment(DomainModel):
    id: int
    transaction_id: int
    shop_id: int
    amount: Decimal
    payment_method: str
    notes: Optional[str] = None
    created_by: Optional[int] = None
    created_at: datetime


class UdharTransaction(DomainModel):
    """
    Goods handed to a shop on credit

    Fields:
        items: Free-form list of what was handed over
        status: UNPAID, PARTIAL, PAID or OVERDUE
    """
    id: int
    shop_id: int
    items: Any
    total_amount: Decimal
    paid_amount: Decimal
    remaining_amount: Decimal
    status: str
    due_date: Optional[datetime] = None
    notes: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None
    shop: Optional[Shop] = None
    payments: List[UdharPayment] = Field(default_factory=list)


class UdharCreate(BaseModel):
    shop_id: int
    items: List[Any] = Field(..., min_length=1)
    total_amount: Decimal = Field(..., gt=0)
    due_date: Optional[datetime] = None
    notes: Optional[str] = None


class UdharUpdate(BaseModel):
    items: Optional[List[Any]] = None
    total_amount: Optional[Decimal] = Field(None, gt=0)
    due_date: Optional[datetime] = None
    notes: Optional[str] = None


class UdharPaymentCreate(BaseModel):
    amount: Decimal
    payment_method: str = "CASH"
    notes: Optional[str] = None
