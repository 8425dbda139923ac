"""
CMS domain models: pages, site settings, testimonials, team, receipt layout
"""
from datetime import datetime
from decimal import Decimal
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from app.domain.base import DomainModel


class Page(DomainModel):
    id: int
    slug: str
    title: str
    content: str
    is_published: bool
    updated_at: Optional[datetime] = None


class PageUpsert(BaseModel):
    slug: str = Field(..., min_length=1)
    title: str = Field(..., min_length=1)
    content: str = ""
    is_published: bool = True


class PageUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1)
    content: Optional[str] = None
    is_published: Optional[bool] = None


class SiteSettings(DomainModel):
    site_name: str = "Doctor Planet"
    site_tagline: Optional[str] = "Professional Medical Boutique"
    hero_title: Optional[str] = None
    hero_subtitle: Optional[str] = None
    primary_color: Optional[str] = None
    secondary_color: Optional[str] = None
    accent_color: Optional[str] = None
    contact_email: Optional[str] = "info@doctorplanet.com"
    contact_phone: Optional[str] = "+92 300 1234567"
    contact_address: Optional[str] = "Medical Plaza, Healthcare City"
    facebook_url: Optional[str] = None
    instagram_url: Optional[str] = None
    whatsapp_number: Optional[str] = None
    free_shipping_minimum: Decimal = Decimal("5000")
    shipping_fee: Decimal = Decimal("500")
    announcement_bar: Optional[str] = None
    announcement_active: bool = False
    footer_text: Optional[str] = "Your trusted partner for premium medical apparel and equipment."
    hidden_default_hero_banner_ids: List[str] = Field(default_factory=list)


class SiteSettingsUpdate(BaseModel):
    site_name: Optional[str] = Field(None, min_length=1)
    site_tagline: Optional[str] = None
    hero_title: Optional[str] = None
    hero_subtitle: Optional[str] = None
    primary_color: Optional[str] = None
    secondary_color: Optional[str] = None
    accent_color: Optional[str] = None
    contact_email: Optional[str] = None
    contact_phone: Optional[str] = None
    contact_address: Optional[str] = None
    facebook_url: Optional[str] = None
    instagram_url: Optional[str] = None
    whatsapp_number: Optional[str] = None
    free_shipping_minimum: Optional[Decimal] = Field(None, ge=0)
    shipping_fee: Optional[Decimal] = Field(None, ge=0)
    announcement_bar: Optional[str] = None
    announcement_active: Optional[bool] = None
    footer_text: Optional[str] = None
    hidden_default_hero_banner_ids: Optional[List[str]] = None


class Testimonial(DomainModel):
    id: int
    name: str
    role: Optional[str] = None
    content: str
    rating: int
    image: Optional[str] = None
    is_active: bool
    sort_order: int
    created_at: Optional[datetime] = None


class TestimonialCreate(BaseModel):
    name: str = Field(..., min_length=1)
    role: Optional[str] = None
    content: str = Field(..., min_length=1)
    rating: int = Field(5, ge=1, le=5)
    image: Optional[str] = None
    is_active: bool = True
    sort_order: int = 0


class TestimonialUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    role: Optional[str] = None
    content: Optional[str] = Field(None, min_length=1)
    rating: Optional[int] = Field(None, ge=1, le=5)
    image: Optional[str] = None
    is_active: Optional[bool] = None
    sort_order: Optional[int] = None


class BillSettings(DomainModel):
    store_name: str = "Doctor Planet"
    store_address: Optional[str] = "Medical Plaza, Healthcare City"
    store_phone: Optional[str] = "+92 300 1234567"
    store_email: Optional[str] = "info@doctorplanet.com"
    header_text: Optional[str] = ""
    logo_url: Optional[str] = "/logos/logo.png"
    footer_text: Optional[str] = "Thank you for shopping with us!"
    return_policy: Optional[str] = "Returns accepted within 7 days with receipt"
    show_logo: bool = True
    show_store_address: bool = True
    show_store_phone: bool = True
    show_return_policy: bool = True
    show_barcode: bool = False
    paper_width: str = "80mm"
    font_size: str = "normal"
    updated_at: Optional[datetime] = None


class BillSettingsUpdate(BaseModel):
    store_name: Optional[str] = Field(None, min_length=1)
    store_address: Optional[str] = None
    store_phone: Optional[str] = None
    store_email: Optional[str] = None
    header_text: Optional[str] = None
    logo_url: Optional[str] = None
    footer_text: Optional[str] = None
    return_policy: Optional[str] = None
    show_logo: Optional[bool] = None
    show_store_address: Optional[bool] = None
    show_store_phone: Optional[bool] = None
    show_return_policy: Optional[bool] = None
    show_barcode: Optional[bool] = None
    paper_width: Optional[Literal["58mm", "80mm", "A4"]] = None
    font_size: Optional[Literal["small", "normal", "large"]] = None


class TeamMember(DomainModel):
    id: int
    name: str
    role: str
    bio: Optional[str] = None
    image: Optional[str] = None
    is_founder: bool
    is_active: bool
    email: Optional[str] = None
    phone: Optional[str] = None
    linkedin: Optional[str] = None
    instagram: Optional[str] = None
    facebook: Optional[str] = None
    sort_order: int
    created_at: Optional[datetime] = None


class TeamMemberCreate(BaseModel):
    name: str = Field(..., min_length=1)
    role: str = Field(..., min_length=1)
    bio: Optional[str] = None
    image: Optional[str] = None
    is_founder: bool = False
    is_active: bool = True
    email: Optional[str] = None
    phone: Optional[str] = None
    linkedin: Optional[str] = None
    instagram: Optional[str] = None
    facebook: Optional[str] = None


class TeamMemberUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    role: Optional[str] = Field(None, min_length=1)
    bio: Optional[str] = None
    image: Optional[str] = None
    is_founder: Optional[bool] = None
    is_active: Optional[bool] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    linkedin: Optional[str] = None
    instagram: Optional[str] = None
    facebook: Optional[str] = None
    sort_order: Optional[int] = None
