"""
Shop credit ledger ("Udhar"): shops buying on credit and their installments
"""
from sqlalchemy import JSON, Boolean, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from app.core.database import Base
from app.models.common import Money, utcnow


class Shop(Base):
    __tablename__ = "shops"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    owner_name = Column(String(255))
    phone = Column(String(50))
    address = Column(Text)
    city = Column(String(100))
    cnic = Column(String(30))

    # Credit terms
    allow_credit = Column(Boolean, nullable=False, default=False)
    credit_limit = Column(Money)
    current_credit = Column(Money, nullable=False, default=0)

    is_active = Column(Boolean, nullable=False, default=True)
    notes = Column(Text)

    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    sales = relationship("POSSale", back_populates="shop")
    udhar_transactions = relationship(
        "UdharTransaction", back_populates="shop", cascade="all, delete-orphan"
    )


class UdharTransaction(Base):
    """
    Goods handed to a shop on credit

    Invariant: paid_amount + remaining_amount == total_amount
    """
    __tablename__ = "udhar_transactions"

    id = Column(Integer, primary_key=True, index=True)
    shop_id = Column(Integer, ForeignKey("shops.id", ondelete="CASCADE"), nullable=False, index=True)

    items = Column(JSON, nullable=False)
    total_amount = Column(Money, nullable=False)
    paid_amount = Column(Money, nullable=False, default=0)
    remaining_amount = Column(Money, nullable=False)

    # UNPAID, PARTIAL, PAID, OVERDUE
    status = Column(String(20), nullable=False, default="UNPAID", index=True)
    due_date = Column(DateTime)
    notes = Column(Text)

    created_at = Column(DateTime, default=utcnow, nullable=False, index=True)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    shop = relationship("Shop", back_populates="udhar_transactions")
    payments = relationship(
        "UdharPayment",
        back_populates="transaction",
        cascade="all, delete-orphan",
        order_by="UdharPayment.created_at.desc()",
    )


class UdharPayment(Base):
    __tablename__ = "udhar_payments"

    id = Column(Integer, primary_key=True, index=True)
    transaction_id = Column(
        Integer, ForeignKey("udhar_transactions.id", ondelete="CASCADE"), nullable=False, index=True
    )
    shop_id = Column(Integer, ForeignKey("shops.id", ondelete="CASCADE"), nullable=False, index=True)

    amount = Column(Money, nullable=False)
    payment_method = Column(String(20), nullable=False, default="CASH")
    notes = Column(Text)
    created_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"))

    created_at = Column(DateTime, default=utcnow, nullable=False, index=True)

    transaction = relationship("UdharTransaction", back_populates="payments")
    shop = relationship("Shop")
