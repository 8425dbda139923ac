"""
Catalog domain models: categories and products

Represents the product catalog shown on the storefront and managed
from the back-office.

Author: DP Team
Date: 2025-06-02
"""
from datetime import datetime
from decimal import Decimal
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

from app.domain.base import DomainModel


class Category(DomainModel):
    id: int
    name: str
    slug: str
    description: Optional[str] = None
    image: Optional[str] = None
    created_at: Optional[datetime] = None


class CategoryCreate(BaseModel):
    name: str = Field(..., min_length=1)
    slug: str = Field(..., min_length=1)
    description: Optional[str] = None
    image: Optional[str] = None


class CategoryUpdate(BaseModel):
    name: Optional[str] = None
    slug: Optional[str] = None
    description: Optional[str] = None
    image: Optional[str] = None


class ProductSummary(DomainModel):
    """Compact product view embedded in carts, orders and deals"""
    id: int
    name: str
    slug: str
    price: Decimal
    sale_price: Optional[Decimal] = None
    images: List[str] = Field(default_factory=list)
    stock: int = 0
    is_active: bool = True

    @field_validator("images", mode="before")
    @classmethod
    def _images_list(cls, v):
        return v or []


class Product(DomainModel):
    """
    Product domain model

    Fields:
        price: List price
        sale_price: Discounted price used when no global discount is active
        stock: Aggregate stock (sum of the matrix when color_size_stock is set)
        color_size_stock: Per color and size stock, e.g. {"Navy": {"M": 3}}
        color_images: Image URL per color
    """
    id: int
    name: str
    slug: str
    description: Optional[str] = None

    # Pricing
    cost_price: Optional[Decimal] = None
    price: Decimal
    sale_price: Optional[Decimal] = None

    # Classification
    category_id: Optional[int] = None
    category: Optional[Category] = None
    barcode: Optional[str] = None
    sku: Optional[str] = None
    company: Optional[str] = None

    # Inventory
    stock: int = 0
    color_size_stock: Optional[Dict[str, Dict[str, int]]] = None

    # Media and options
    images: List[str] = Field(default_factory=list)
    sizes: List[str] = Field(default_factory=list)
    colors: List[str] = Field(default_factory=list)
    color_images: Optional[Dict[str, str]] = None
    size_chart_image: Optional[str] = None

    # Flags
    is_active: bool = True
    featured: bool = False

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("images", "sizes", "colors", mode="before")
    @classmethod
    def _none_to_list(cls, v):
        return v or []

    @property
    def is_out_of_stock(self) -> bool:
        return self.stock <= 0

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["is_out_of_stock"] = self.is_out_of_stock
        return data


class ProductCreate(BaseModel):
    """Schema for creating a product (also used for full replacement)"""
    name: str = Field(..., min_length=1)
    slug: str = Field(..., min_length=1)
    description: Optional[str] = None
    cost_price: Decimal = Field(Decimal("0"), ge=0)
    price: Decimal = Field(..., ge=0)
    sale_price: Optional[Decimal] = Field(None, ge=0)
    category_id: Optional[int] = None
    barcode: Optional[str] = None
    sku: Optional[str] = None
    company: Optional[str] = None
    stock: int = Field(0, ge=0)
    color_size_stock: Optional[Dict[str, Dict[str, int]]] = None
    images: List[str] = Field(default_factory=list)
    sizes: List[str] = Field(default_factory=list)
    colors: List[str] = Field(default_factory=list)
    color_images: Optional[Dict[str, str]] = None
    size_chart_image: Optional[str] = None
    is_active: bool = True
    featured: bool = False


class ProductUpdate(BaseModel):
    """Schema for a partial product update"""
    name: Optional[str] = None
    slug: Optional[str] = None
    description: Optional[str] = None
    cost_price: Optional[Decimal] = Field(None, ge=0)
    price: Optional[Decimal] = Field(None, ge=0)
    sale_price: Optional[Decimal] = Field(None, ge=0)
    category_id: Optional[int] = None
    barcode: Optional[str] = None
    sku: Optional[str] = None
    company: Optional[str] = None
    stock: Optional[int] = Field(None, ge=0)
    color_size_stock: Optional[Dict[str, Dict[str, int]]] = None
    images: Optional[List[str]] = None
    sizes: Optional[List[str]] = None
    colors: Optional[List[str]] = None
    color_images: Optional[Dict[str, str]] = None
    size_chart_image: Optional[str] = None
    is_active: Optional[bool] = None
    featured: Optional[bool] = None


class BarcodeGenerateRequest(BaseModel):
    """Empty product_ids means every product without a barcode"""
    product_ids: List[int] = Field(default_factory=list)
