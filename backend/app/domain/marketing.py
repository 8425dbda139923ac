"""
Promotion domain models: global discount, deals and home page banners

Author: DP Team
Date: 2025-06-06
"""
from datetime import datetime
from decimal import Decimal
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from app.domain.base import DomainModel
from app.domain.catalog import ProductSummary

MIN_DEAL_PRODUCTS = 2


class GlobalDiscount(DomainModel):
    id: str
    is_active: bool
    percentage: float
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    created_by: Optional[str] = None
    updated_at: Optional[datetime] = None


class GlobalDiscountUpdate(BaseModel):
    is_active: bool = False
    percentage: float = 0
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None


class DealItem(DomainModel):
    id: int
    product_id: int
    quantity: int
    product: Optional[ProductSummary] = None


class Deal(DomainModel):
    id: int
    name: str
    slug: str
    description: Optional[str] = None
    image: Optional[str] = None
    deal_price: Decimal
    original_price: Decimal
    is_active: bool
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    created_at: Optional[datetime] = None
    items: List[DealItem] = Field(default_factory=list)

    @property
    def savings(self) -> Decimal:
        return max(self.original_price - self.deal_price, Decimal("0"))

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["savings"] = float(self.savings)
        return data


class DealItemIn(BaseModel):
    product_id: int
    quantity: int = Field(1, ge=1)


class DealCreate(BaseModel):
    name: str = ""
    description: Optional[str] = None
    image: Optional[str] = None
    deal_price: Optional[Decimal] = Field(None, gt=0)
    is_active: bool = True
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    items: List[DealItemIn] = Field(default_factory=list)


class DealUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    image: Optional[str] = None
    deal_price: Optional[Decimal] = Field(None, gt=0)
    is_active: Optional[bool] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    items: Optional[List[DealItemIn]] = None


class HeroBanner(DomainModel):
    id: int
    title: str
    subtitle: str
    cta_text: str
    cta_link: str
    background_gradient: Optional[str] = None
    background_color: Optional[str] = None
    images: Dict[str, Optional[str]] = Field(default_factory=dict)
    sort_order: int
    is_active: bool
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    created_at: Optional[datetime] = None


class HeroBannerCreate(BaseModel):
    title: str = "Banner"
    subtitle: str = ""
    cta_text: str = "Shop Now"
    cta_link: str = "/products"
    background_gradient: Optional[str] = None
    background_color: Optional[str] = None
    images: Dict[str, Optional[str]] = Field(default_factory=dict)
    is_active: bool = True
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None


class HeroBannerUpdate(BaseModel):
    title: Optional[str] = None
    subtitle: Optional[str] = None
    cta_text: Optional[str] = None
    cta_link: Optional[str] = None
    background_gradient: Optional[str] = None
    background_color: Optional[str] = None
    images: Optional[Dict[str, Optional[str]]] = None
    sort_order: Optional[int] = None
    is_active: Optional[bool] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None


class HideDefaultBanner(BaseModel):
    id: str = ""


class PromoBanner(DomainModel):
    id: int
    image_url: str
    link_url: str
    alt: str
    sort_order: int
    is_active: bool
    created_at: Optional[datetime] = None


class PromoBannerCreate(BaseModel):
    image_url: str = ""
    link_url: str = "/"
    alt: str = "Promo"
    is_active: bool = True


class PromoBannerUpdate(BaseModel):
    image_url: Optional[str] = None
    link_url: Optional[str] = None
    alt: Optional[str] = None
    sort_order: Optional[int] = None
    is_active: Optional[bool] = None
