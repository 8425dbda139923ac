"""
Newsletter API Endpoints
"""
import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.api.common import get_or_404
from app.core.auth import TokenUser, require_admin
from app.core.database import get_db
from app.domain.engagement import SubscribeRequest, Subscriber as SubscriberOut
from app.models import Subscriber

logger = logging.getLogger(__name__)

public_router = APIRouter()
admin_router = APIRouter()


@public_router.post("/subscribe")
async def subscribe(payload: SubscribeRequest, db: Session = Depends(get_db)):
    """Subscribing twice is harmless; an unsubscribed address is reactivated"""
    try:
        email = payload.email.lower()
        row = db.query(Subscriber).filter(Subscriber.email == email).first()

        if row is None:
            db.add(Subscriber(email=email, is_active=True))
            message = "Subscribed successfully"
        elif not row.is_active:
            row.is_active = True
            message = "Subscription reactivated"
        else:
            message = "Already subscribed"

        db.commit()
        return {"status": "success", "message": message}

    except Exception as e:
        db.rollback()
        logger.exception(f"Error subscribing {payload.email}: {e}")
        raise HTTPException(status_code=500, detail="Failed to subscribe")


@admin_router.get("")
async def list_subscribers(user: TokenUser = Depends(require_admin), db: Session = Depends(get_db)):
    try:
        rows = db.query(Subscriber).order_by(Subscriber.created_at.desc(), Subscriber.id.desc()).all()
        return {
            "status": "success",
            "data": [SubscriberOut.model_validate(s).to_dict() for s in rows],
            "total": len(rows),
        }

    except Exception as e:
        logger.exception(f"Error fetching subscribers: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch subscribers")


@admin_router.delete("/{subscriber_id}")
async def delete_subscriber(subscriber_id: int, user: TokenUser = Depends(require_admin), db: Session = Depends(get_db)):
    try:
        row = get_or_404(db, Subscriber, subscriber_id, "Subscriber")
        db.delete(row)
        db.commit()

        return {"status": "success", "message": "Subscriber deleted"}

    except HTTPException:
        raise
    except Exception as e:
        db.rollback()
        logger.exception(f"Error deleting subscriber {subscriber_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to delete subscriber")
