"""
Admin Notifications API Endpoints
"""
import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from app.api.common import get_or_404
from app.core.auth import TokenUser, require_admin
from app.core.database import get_db
from app.domain.engagement import Notification as NotificationOut, NotificationMarkRead
from app.models import Notification

logger = logging.getLogger(__name__)

router = APIRouter()


def _unread_count(db: Session) -> int:
    return db.query(Notification).filter(Notification.is_read.is_(False)).count()


@router.get("")
async def list_notifications(
    unread_only: bool = Query(False, description="Only unread notifications"),
    limit: int = Query(50, ge=1, le=200),
    user: TokenUser = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """Newest first, with the overall unread count"""
    try:
        query = db.query(Notification)
        if unread_only:
            query = query.filter(Notification.is_read.is_(False))

        rows = query.order_by(Notification.created_at.desc(), Notification.id.desc()).limit(limit).all()

        return {
            "status": "success",
            "data": [NotificationOut.model_validate(n).to_dict() for n in rows],
            "unread_count": _unread_count(db),
        }

    except Exception as e:
        logger.exception(f"Error fetching notifications: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch notifications")


@router.put("/mark-read")
async def mark_read(payload: NotificationMarkRead, user: TokenUser = Depends(require_admin), db: Session = Depends(get_db)):
    try:
        if not payload.mark_all and not payload.ids:
            raise HTTPException(status_code=400, detail="Provide notification ids or mark_all")

        query = db.query(Notification).filter(Notification.is_read.is_(False))
        if not payload.mark_all:
            query = query.filter(Notification.id.in_(payload.ids))

        updated = query.update({Notification.is_read: True}, synchronize_session=False)
        db.commit()

        return {
            "status": "success",
            "message": f"{updated} notification(s) marked as read",
            "unread_count": _unread_count(db),
        }

    except HTTPException:
        raise
    except Exception as e:
        db.rollback()
        logger.exception(f"Error marking notifications read: {e}")
        raise HTTPException(status_code=500, detail="Failed to update notifications")


@router.delete("/read")
async def delete_read_notifications(user: TokenUser = Depends(require_admin), db: Session = Depends(get_db)):
    try:
        deleted = db.query(Notification).filter(Notification.is_read.is_(True)).delete(synchronize_session=False)
        db.commit()

        return {"status": "success", "message": f"{deleted} notification(s) deleted"}

    except Exception as e:
        db.rollback()
        logger.exception(f"Error deleting read notifications: {e}")
        raise HTTPException(status_code=500, detail="Failed to delete notifications")


@router.delete("/{notification_id}")
async def delete_notification(notification_id: int, user: TokenUser = Depends(require_admin), db: Session = Depends(get_db)):
    try:
        row = get_or_404(db, Notification, notification_id, "Notification")
        db.delete(row)
        db.commit()

        return {"status": "success", "message": "Notification deleted"}

    except HTTPException:
        raise
    except Exception as e:
        db.rollback()
        logger.exception(f"Error deleting notification {notification_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to delete notification")
