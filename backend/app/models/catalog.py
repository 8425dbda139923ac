"""
Catalog tables: categories, products, carts and wishlists
"""
from sqlalchemy import (
    JSON, Boolean, Column, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint
)
from sqlalchemy.orm import relationship

from app.core.database import Base
from app.models.common import Money, utcnow


class Category(Base):
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    slug = Column(String(255), nullable=False, unique=True, index=True)
    description = Column(Text)
    image = Column(String(500))

    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    products = relationship("Product", back_populates="category")


class Product(Base):
    """
    Product catalog

    Stock is tracked either as a single aggregate (`stock`) or, for products
    sold in sizes and colors, as a matrix `color_size_stock`
    ({"Navy": {"M": 4, "L": 2}}) whose sum is mirrored into `stock`.
    """
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)

    # Identification
    name = Column(String(255), nullable=False)
    slug = Column(String(255), nullable=False, unique=True, index=True)
    description = Column(Text)
    barcode = Column(String(64), unique=True, index=True)
    sku = Column(String(100), index=True)
    company = Column(String(255))

    # Pricing
    cost_price = Column(Money, nullable=False, default=0)
    price = Column(Money, nullable=False)
    sale_price = Column(Money)

    # Relations
    category_id = Column(Integer, ForeignKey("categories.id"), index=True)

    # Inventory
    stock = Column(Integer, nullable=False, default=0)
    color_size_stock = Column(JSON)

    # Presentation
    images = Column(JSON, default=list)
    sizes = Column(JSON, default=list)
    colors = Column(JSON, default=list)
    color_images = Column(JSON)
    size_chart_image = Column(String(500))

    # Flags
    is_active = Column(Boolean, nullable=False, default=True, index=True)
    featured = Column(Boolean, nullable=False, default=False)

    # Metadata
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    # Relationships
    category = relationship("Category", back_populates="products")
    order_items = relationship("OrderItem", back_populates="product")


class CartItem(Base):
    """
    Server-side cart line

    Lines added as part of a deal share `deal_id` and are never merged with
    regular lines.
    """
    __tablename__ = "cart_items"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True)
    deal_id = Column(Integer, ForeignKey("deals.id", ondelete="CASCADE"), index=True)

    quantity = Column(Integer, nullable=False, default=1)
    size = Column(String(50))
    color = Column(String(50))

    created_at = Column(DateTime, default=utcnow, nullable=False)

    user = relationship("User", back_populates="cart_items")
    product = relationship("Product")
    deal = relationship("Deal")


class WishlistItem(Base):
    __tablename__ = "wishlist_items"
    __table_args__ = (UniqueConstraint("user_id", "product_id", name="uq_wishlist_user_product"),)

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True)

    created_at = Column(DateTime, default=utcnow, nullable=False)

    user = relationship("User", back_populates="wishlist_items")
    product = relationship("Product")
