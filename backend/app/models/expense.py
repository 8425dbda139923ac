"""
Business expenses logged by admins and salesmen
"""
from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from app.core.database import Base
from app.models.common import Money, utcnow


class Expense(Base):
    __tablename__ = "expenses"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    amount = Column(Money, nullable=False)
    description = Column(Text, nullable=False)
    category = Column(String(100))
    expense_date = Column(DateTime, default=utcnow, nullable=False, index=True)
    image = Column(String(500))

    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    user = relationship("User", back_populates="expenses")
