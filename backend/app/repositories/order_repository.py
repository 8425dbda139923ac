"""
Order Repository - Data Access Layer for Orders

Author: DP Team
Date: 2025-06-07
"""
from datetime import datetime
from typing import List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session, selectinload

from app.models import Order, OrderItem

OPEN_STATUSES = ("PENDING", "CONFIRMED", "PROCESSING", "SHIPPED")


class OrderRepository:
    """Repository for storefront orders"""

    def __init__(self, db: Session):
        self.db = db

    def _with_items(self):
        return self.db.query(Order).options(
            selectinload(Order.items).joinedload(OrderItem.product),
            selectinload(Order.user),
        )

    def find_by_id(self, order_id: int) -> Optional[Order]:
        return self._with_items().filter(Order.id == order_id).first()

    def find_for_user(self, user_id: int) -> List[Order]:
        return (
            self._with_items()
            .filter(Order.user_id == user_id)
            .order_by(Order.created_at.desc(), Order.id.desc())
            .all()
        )

    def find_all(
        self,
        status: Optional[str] = None,
        page: int = 1,
        limit: int = 20
    ) -> Tuple[List[Order], int]:
        """
        Find orders for the back-office

        Args:
            status: Filter by order status
            page: 1-based page number
            limit: Page size

        Returns:
            Tuple of (orders, total_count)
        """
        query = self._with_items()
        if status:
            query = query.filter(Order.status == status)

        total = query.count()
        orders = (
            query.order_by(Order.created_at.desc(), Order.id.desc())
            .offset((page - 1) * limit)
            .limit(limit)
            .all()
        )
        return orders, total

    def get_stats(self, since: Optional[datetime] = None) -> dict:
        """
        Web order figures for the revenue dashboard

        Revenue and order count exclude cancelled orders; pending counts every
        order that is still moving (PENDING through SHIPPED).
        """
        base = self.db.query(Order)
        if since is not None:
            base = base.filter(Order.created_at >= since)

        live = base.filter(Order.status != "CANCELLED")
        delivered = base.filter(Order.status == "DELIVERED")

        revenue = live.with_entities(func.coalesce(func.sum(Order.total), 0)).scalar()
        delivered_revenue = delivered.with_entities(func.coalesce(func.sum(Order.total), 0)).scalar()

        return {
            "revenue": float(revenue or 0),
            "count": live.count(),
            "delivered_revenue": float(delivered_revenue or 0),
            "delivered_count": delivered.count(),
            "pending_count": base.filter(Order.status.in_(OPEN_STATUSES)).count(),
            "cancelled_count": base.filter(Order.status == "CANCELLED").count(),
        }
