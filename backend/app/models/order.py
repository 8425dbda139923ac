"""
Web storefront orders
"""
from sqlalchemy import JSON, Boolean, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from app.core.database import Base
from app.models.common import Money, utcnow


class Order(Base):
    """
    Customer order placed through the storefront checkout
    """
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True)

    # Identification
    order_number = Column(String(50), nullable=False, unique=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    # Amounts
    subtotal = Column(Money, nullable=False)
    shipping_fee = Column(Money, nullable=False, default=0)
    discount = Column(Money, nullable=False, default=0)
    total = Column(Money, nullable=False)

    # Status
    status = Column(String(20), nullable=False, default="PENDING", index=True)
    payment_status = Column(String(20), nullable=False, default="PENDING")
    payment_method = Column(String(20), nullable=False, default="COD")

    # Delivery
    shipping_address = Column(JSON, nullable=False)
    notes = Column(Text)

    # Returns
    is_returned = Column(Boolean, nullable=False, default=False)
    return_reason = Column(Text)
    returned_at = Column(DateTime)
    returned_by = Column(String(255))

    # Metadata
    created_at = Column(DateTime, default=utcnow, nullable=False, index=True)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    # Relationships
    user = relationship("User", back_populates="orders")
    items = relationship("OrderItem", back_populates="order", cascade="all, delete-orphan")


class OrderItem(Base):
    """
    Order line; `price` is the unit price charged at checkout
    """
    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(Integer, ForeignKey("orders.id", ondelete="CASCADE"), index=True, nullable=False)
    product_id = Column(Integer, ForeignKey("products.id"), index=True, nullable=False)
    deal_id = Column(Integer, ForeignKey("deals.id", ondelete="SET NULL"))

    quantity = Column(Integer, nullable=False)
    price = Column(Money, nullable=False)
    size = Column(String(50))
    color = Column(String(50))

    created_at = Column(DateTime, default=utcnow, nullable=False)

    # Relationships
    order = relationship("Order", back_populates="items")
    product = relationship("Product", back_populates="order_items")
