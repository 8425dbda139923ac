"""
Expense domain models
"""
from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from app.domain.base import DomainModel


class ExpenseOwner(DomainModel):
    id: int
    name: Optional[str] = None
    email: str
    role: str


class Expense(DomainModel):
    id: int
    user_id: int
    amount: Decimal
    description: str
    category: Optional[str] = None
    expense_date: datetime
    image: Optional[str] = None
    created_at: datetime
    user: Optional[ExpenseOwner] = None


class ExpenseCreate(BaseModel):
    amount: Decimal = Field(..., ge=0)
    description: str = Field(..., min_length=1)
    category: Optional[str] = None
    expense_date: Optional[datetime] = None
    image: Optional[str] = None


class ExpenseUpdate(BaseModel):
    amount: Optional[Decimal] = Field(None, ge=0)
    description: Optional[str] = Field(None, min_length=1)
    category: Optional[str] = None
    expense_date: Optional[datetime] = None
    image: Optional[str] = None
