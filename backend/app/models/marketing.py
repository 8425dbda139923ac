"""
Promotions: the site-wide discount, product bundle deals and home page banners
"""
from sqlalchemy import JSON, Boolean, Column, DateTime, ForeignKey, Integer, String, Text, Float
from sqlalchemy.orm import relationship

from app.core.database import Base
from app.models.common import Money, utcnow

GLOBAL_DISCOUNT_ID = "main"


class GlobalDiscount(Base):
    """
    Singleton row (id "main"); percentage is 0-100
    """
    __tablename__ = "global_discounts"

    id = Column(String(20), primary_key=True, default=GLOBAL_DISCOUNT_ID)
    is_active = Column(Boolean, nullable=False, default=False)
    percentage = Column(Float, nullable=False, default=0)
    start_date = Column(DateTime)
    end_date = Column(DateTime)
    created_by = Column(String(255))

    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)


class Deal(Base):
    """
    Bundle of two or more products sold for `deal_price`

    `original_price` is the sum of the items' effective prices when the deal
    was last saved.
    """
    __tablename__ = "deals"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    slug = Column(String(255), nullable=False, unique=True, index=True)
    description = Column(Text)
    image = Column(String(500))

    deal_price = Column(Money, nullable=False)
    original_price = Column(Money, nullable=False, default=0)

    is_active = Column(Boolean, nullable=False, default=True)
    start_date = Column(DateTime)
    end_date = Column(DateTime)

    created_at = Column(DateTime, default=utcnow, nullable=False, index=True)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    items = relationship(
        "DealItem", back_populates="deal", cascade="all, delete-orphan", order_by="DealItem.id"
    )


class DealItem(Base):
    __tablename__ = "deal_items"

    id = Column(Integer, primary_key=True, index=True)
    deal_id = Column(Integer, ForeignKey("deals.id", ondelete="CASCADE"), nullable=False, index=True)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True)
    quantity = Column(Integer, nullable=False, default=1)

    deal = relationship("Deal", back_populates="items")
    product = relationship("Product")


class HeroBanner(Base):
    """
    Home page hero slide

    `images` holds one URL per breakpoint: {"mobile", "tablet", "desktop"}.
    """
    __tablename__ = "hero_banners"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False, default="Banner")
    subtitle = Column(String(500), nullable=False, default="")
    cta_text = Column(String(100), nullable=False, default="Shop Now")
    cta_link = Column(String(500), nullable=False, default="/products")
    background_gradient = Column(String(255))
    background_color = Column(String(50))
    images = Column(JSON, nullable=False, default=dict)

    sort_order = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)
    start_date = Column(DateTime)
    end_date = Column(DateTime)

    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)


class PromoBanner(Base):
    __tablename__ = "promo_banners"

    id = Column(Integer, primary_key=True, index=True)
    image_url = Column(String(500), nullable=False)
    link_url = Column(String(500), nullable=False, default="/")
    alt = Column(String(255), nullable=False, default="Promo")
    sort_order = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime, default=utcnow, nullable=False)
