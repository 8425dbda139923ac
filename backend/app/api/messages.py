"""
Contact Messages API Endpoints

The public contact form creates a message plus a back-office notification;
admins read, flag and delete messages.
"""
import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from app.api.common import get_or_404
from app.core.auth import TokenUser, require_admin
from app.core.database import get_db
from app.domain.engagement import ContactMessage as ContactMessageOut, ContactMessageCreate, ContactMessageUpdate
from app.models import ContactMessage
from app.services.notification_service import notify_contact_message

logger = logging.getLogger(__name__)

public_router = APIRouter()
admin_router = APIRouter()


@public_router.post("", status_code=201)
async def submit_contact_message(payload: ContactMessageCreate, db: Session = Depends(get_db)):
    try:
        name = payload.name.strip()
        subject = payload.subject.strip()
        message = payload.message.strip()
        if not name or not subject or not message:
            raise HTTPException(status_code=400, detail="Name, subject and message are required")

        contact = ContactMessage(
            name=name,
            email=payload.email.lower(),
            phone=payload.phone,
            subject=subject,
            message=message,
        )
        db.add(contact)
        db.flush()

        notify_contact_message(db, contact)
        db.commit()
        logger.info(f"Contact message {contact.id} received from {contact.email}")

        return {"status": "success", "message": "Message sent successfully", "data": {"id": contact.id}}

    except HTTPException:
        raise
    except Exception as e:
        db.rollback()
        logger.exception(f"Error saving contact message: {e}")
        raise HTTPException(status_code=500, detail="Failed to send message")


# ============================================================================
# Admin
# ============================================================================

@admin_router.get("")
async def list_messages(
    unread_only: bool = Query(False),
    user: TokenUser = Depends(require_admin),
    db: Session = Depends(get_db)
):
    try:
        query = db.query(ContactMessage)
        if unread_only:
            query = query.filter(ContactMessage.is_read.is_(False))

        rows = query.order_by(ContactMessage.created_at.desc(), ContactMessage.id.desc()).all()
        unread = db.query(ContactMessage).filter(ContactMessage.is_read.is_(False)).count()

        return {
            "status": "success",
            "data": [ContactMessageOut.model_validate(m).to_dict() for m in rows],
            "unread_count": unread,
        }

    except Exception as e:
        logger.exception(f"Error fetching contact messages: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch messages")


@admin_router.patch("/{message_id}")
async def update_message(
    message_id: int,
    payload: ContactMessageUpdate,
    user: TokenUser = Depends(require_admin),
    db: Session = Depends(get_db)
):
    try:
        row = get_or_404(db, ContactMessage, message_id, "Message")
        row.is_read = payload.is_read
        db.commit()
        db.refresh(row)

        return {"status": "success", "data": ContactMessageOut.model_validate(row).to_dict()}

    except HTTPException:
        raise
    except Exception as e:
        db.rollback()
        logger.exception(f"Error updating message {message_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to update message")


@admin_router.delete("/{message_id}")
async def delete_message(message_id: int, user: TokenUser = Depends(require_admin), db: Session = Depends(get_db)):
    try:
        row = get_or_404(db, ContactMessage, message_id, "Message")
        db.delete(row)
        db.commit()

        return {"status": "success", "message": "Message deleted"}

    except HTTPException:
        raise
    except Exception as e:
        db.rollback()
        logger.exception(f"Error deleting message {message_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to delete message")
