"""
Testimonials API Endpoints
"""
import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.api.common import apply_changes, get_or_404
from app.core.auth import TokenUser, require_admin
from app.core.database import get_db
from app.domain.content import Testimonial as TestimonialOut, TestimonialCreate, TestimonialUpdate
from app.models import Testimonial

logger = logging.getLogger(__name__)

public_router = APIRouter()
admin_router = APIRouter()


def _ordered(query):
    return query.order_by(Testimonial.sort_order.asc(), Testimonial.created_at.desc(), Testimonial.id.desc())


@public_router.get("")
async def list_active_testimonials(db: Session = Depends(get_db)):
    try:
        rows = _ordered(db.query(Testimonial).filter(Testimonial.is_active.is_(True))).all()
        return {"status": "success", "data": [TestimonialOut.model_validate(t).to_dict() for t in rows]}

    except Exception as e:
        logger.exception(f"Error fetching testimonials: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch testimonials")


# ============================================================================
# Admin
# ============================================================================

@admin_router.get("")
async def list_testimonials(user: TokenUser = Depends(require_admin), db: Session = Depends(get_db)):
    try:
        rows = _ordered(db.query(Testimonial)).all()
        return {"status": "success", "data": [TestimonialOut.model_validate(t).to_dict() for t in rows]}

    except Exception as e:
        logger.exception(f"Error fetching testimonials: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch testimonials")


@admin_router.post("", status_code=201)
async def create_testimonial(
    payload: TestimonialCreate,
    user: TokenUser = Depends(require_admin),
    db: Session = Depends(get_db)
):
    try:
        row = Testimonial(**payload.model_dump())
        db.add(row)
        db.commit()
        db.refresh(row)

        return {"status": "success", "data": TestimonialOut.model_validate(row).to_dict()}

    except Exception as e:
        db.rollback()
        logger.exception(f"Error creating testimonial: {e}")
        raise HTTPException(status_code=500, detail="Failed to create testimonial")


@admin_router.put("/{testimonial_id}")
async def update_testimonial(
    testimonial_id: int,
    payload: TestimonialUpdate,
    user: TokenUser = Depends(require_admin),
    db: Session = Depends(get_db)
):
    try:
        row = get_or_404(db, Testimonial, testimonial_id, "Testimonial")
        apply_changes(row, payload.model_dump(exclude_unset=True))

        db.commit()
        db.refresh(row)

        return {"status": "success", "data": TestimonialOut.model_validate(row).to_dict()}

    except HTTPException:
        raise
    except Exception as e:
        db.rollback()
        logger.exception(f"Error updating testimonial {testimonial_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to update testimonial")


@admin_router.delete("/{testimonial_id}")
async def delete_testimonial(
    testimonial_id: int,
    user: TokenUser = Depends(require_admin),
    db: Session = Depends(get_db)
):
    try:
        row = get_or_404(db, Testimonial, testimonial_id, "Testimonial")
        db.delete(row)
        db.commit()

        return {"status": "success", "message": "Testimonial deleted"}

    except HTTPException:
        raise
    except Exception as e:
        db.rollback()
        logger.exception(f"Error deleting testimonial {testimonial_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to delete testimonial")
