"""
Point-of-sale counter sales
"""
from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from app.core.database import Base
from app.models.common import Money, utcnow


class POSSale(Base):
    __tablename__ = "pos_sales"

    id = Column(Integer, primary_key=True, index=True)
    receipt_number = Column(String(30), nullable=False, unique=True, index=True)

    # Who sold it, and to which shop when sold on credit
    salesman_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    shop_id = Column(Integer, ForeignKey("shops.id", ondelete="SET NULL"), index=True)

    # Amounts
    subtotal = Column(Money, nullable=False)
    discount = Column(Money, nullable=False, default=0)
    discount_type = Column(String(20))
    total = Column(Money, nullable=False)

    # Payment
    payment_method = Column(String(20), nullable=False, default="CASH")
    amount_received = Column(Money)
    change_given = Column(Money)
    is_paid = Column(Boolean, nullable=False, default=True)
    remaining_amount = Column(Money, nullable=False, default=0)

    # Walk-in customer
    customer_name = Column(String(255))
    customer_phone = Column(String(50))
    notes = Column(Text)

    # Returns
    is_returned = Column(Boolean, nullable=False, default=False)
    return_reason = Column(Text)
    returned_at = Column(DateTime)
    returned_by = Column(String(255))

    created_at = Column(DateTime, default=utcnow, nullable=False, index=True)

    # Relationships
    salesman = relationship("User", back_populates="pos_sales")
    shop = relationship("Shop", back_populates="sales")
    items = relationship("POSSaleItem", back_populates="sale", cascade="all, delete-orphan")


class POSSaleItem(Base):
    __tablename__ = "pos_sale_items"

    id = Column(Integer, primary_key=True, index=True)
    sale_id = Column(Integer, ForeignKey("pos_sales.id", ondelete="CASCADE"), nullable=False, index=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False, index=True)

    # Snapshot at sale time
    product_name = Column(String(255), nullable=False)
    quantity = Column(Integer, nullable=False)
    price = Column(Money, nullable=False)
    size = Column(String(50))
    color = Column(String(50))

    sale = relationship("POSSale", back_populates="items")
