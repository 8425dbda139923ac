"""
Cart and wishlist domain models
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from app.domain.base import DomainModel
from app.domain.catalog import ProductSummary


class CartItem(DomainModel):
    id: int
    product_id: int
    quantity: int
    size: Optional[str] = None
    color: Optional[str] = None
    deal_id: Optional[int] = None
    product: Optional[ProductSummary] = None


class CartItemAdd(BaseModel):
    product_id: int
    quantity: int = Field(1, ge=1)
    size: Optional[str] = None
    color: Optional[str] = None


class CartDealAdd(BaseModel):
    deal_id: int
    quantity: int = Field(1, ge=1)


class CartItemUpdate(BaseModel):
    quantity: int


class WishlistItem(DomainModel):
    id: int
    product_id: int
    created_at: Optional[datetime] = None
    product: Optional[ProductSummary] = None


class WishlistAdd(BaseModel):
    product_id: int
