"""
Revenue API Endpoints (admin)
Combined web order and POS revenue for a period
"""
import logging
from datetime import datetime, timedelta
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import func
from sqlalchemy.orm import Session

from app.core.auth import TokenUser, require_admin
from app.core.database import get_db
from app.models import POSSale
from app.models.common import to_money, utcnow
from app.repositories.order_repository import OrderRepository

logger = logging.getLogger(__name__)

router = APIRouter()

PERIODS = ("today", "week", "month", "year", "all")


def period_start(period: str, now: datetime) -> Optional[datetime]:
    """Start of the reporting window (None for all time)"""
    if period == "today":
        return now.replace(hour=0, minute=0, second=0, microsecond=0)
    if period == "week":
        return now - timedelta(days=7)
    if period == "month":
        return now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    if period == "year":
        return now.replace(month=1, day=1, hour=0, minute=0, second=0, microsecond=0)
    return None


def _pos_stats(db: Session, since: Optional[datetime]) -> dict:
    """POS figures; returned sales are excluded"""
    query = db.query(POSSale).filter(POSSale.is_returned.is_(False))
    if since is not None:
        query = query.filter(POSSale.created_at >= since)

    revenue = query.with_entities(func.coalesce(func.sum(POSSale.total), 0)).scalar()
    return {"revenue": float(revenue or 0), "count": query.count()}


@router.get("")
async def get_revenue(
    period: str = Query("all", description="today, week, month, year or all"),
    user: TokenUser = Depends(require_admin),
    db: Session = Depends(get_db)
):
    try:
        if period not in PERIODS:
            raise HTTPException(status_code=400, detail=f"Invalid period. Use one of: {', '.join(PERIODS)}")

        now = utcnow()
        since = period_start(period, now)
        orders = OrderRepository(db)

        web = orders.get_stats(since)
        pos = _pos_stats(db, since)

        today_start = period_start("today", now)
        today_web = orders.get_stats(today_start)
        today_pos = _pos_stats(db, today_start)

        data = {
            "period": period,
            "web_orders": {
                "revenue": web["revenue"],
                "count": web["count"],
                "delivered": {"revenue": web["delivered_revenue"], "count": web["delivered_count"]},
                "pending": web["pending_count"],
            },
            "pos_sales": pos,
            "combined": {
                "revenue": float(to_money(web["revenue"] + pos["revenue"])),
                "transactions": web["count"] + pos["count"],
            },
            "today": {
                "web_orders": {"revenue": today_web["revenue"], "count": today_web["count"]},
                "pos_sales": today_pos,
                "total": float(to_money(today_web["revenue"] + today_pos["revenue"])),
            },
        }

        return {"status": "success", "data": data}

    except HTTPException:
        raise
    except Exception as e:
        logger.exception(f"Error computing revenue for period {period}: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch revenue")
