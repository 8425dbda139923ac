"""
User accounts: customers, salesmen and admins
"""
from sqlalchemy import Boolean, Column, DateTime, Integer, String, Text
from sqlalchemy.orm import relationship

from app.core.database import Base
from app.models.common import utcnow


class User(Base):
    """
    Account table shared by storefront customers and back-office staff
    """
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)

    # Identity
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255))
    name = Column(String(255))
    image = Column(String(500))
    role = Column(String(20), nullable=False, default="USER", index=True)
    is_active = Column(Boolean, nullable=False, default=True)

    # Profile (required before checkout)
    phone = Column(String(50))
    address = Column(Text)
    city = Column(String(100))
    state = Column(String(100))
    postal_code = Column(String(20))
    country = Column(String(100))
    profession = Column(String(100))
    workplace = Column(String(255))
    is_profile_complete = Column(Boolean, nullable=False, default=False)

    # Salesman details
    cnic = Column(String(30))
    gender = Column(String(20))
    granter_name = Column(String(255))
    granter_phone = Column(String(50))

    # Password reset
    reset_token = Column(String(128), index=True)
    reset_token_expiry = Column(DateTime)

    # Metadata
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    # Relationships
    orders = relationship("Order", back_populates="user")
    pos_sales = relationship("POSSale", back_populates="salesman")
    cart_items = relationship("CartItem", back_populates="user", cascade="all, delete-orphan")
    wishlist_items = relationship("WishlistItem", back_populates="user", cascade="all, delete-orphan")
    expenses = relationship("Expense", back_populates="user", cascade="all, delete-orphan")
