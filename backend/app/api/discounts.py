"""
Global Discount API Endpoints
Site-wide percentage discount with an optional date window
"""
import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.core.auth import TokenUser, require_admin, require_staff
from app.core.database import get_db
from app.domain.marketing import GlobalDiscount as GlobalDiscountOut, GlobalDiscountUpdate
from app.models import GlobalDiscount
from app.models.common import to_naive_utc
from app.models.marketing import GLOBAL_DISCOUNT_ID
from app.services.pricing import is_discount_live

logger = logging.getLogger(__name__)

public_router = APIRouter()
admin_router = APIRouter()


def get_or_create_discount(db: Session) -> GlobalDiscount:
    discount = db.get(GlobalDiscount, GLOBAL_DISCOUNT_ID)
    if discount is None:
        discount = GlobalDiscount(id=GLOBAL_DISCOUNT_ID, is_active=False, percentage=0)
        db.add(discount)
        db.commit()
        db.refresh(discount)
    return discount


@public_router.get("")
async def current_discount(db: Session = Depends(get_db)):
    """What the storefront should apply right now"""
    try:
        discount = db.get(GlobalDiscount, GLOBAL_DISCOUNT_ID)
        if not is_discount_live(discount):
            return {"status": "success", "data": {"is_active": False, "percentage": 0}}

        return {
            "status": "success",
            "data": {
                "is_active": True,
                "percentage": discount.percentage,
                "end_date": discount.end_date.isoformat() if discount.end_date else None,
            },
        }

    except Exception as e:
        logger.exception(f"Error fetching global discount: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch discount")


@admin_router.get("")
async def get_discount(user: TokenUser = Depends(require_staff), db: Session = Depends(get_db)):
    try:
        discount = get_or_create_discount(db)
        return {"status": "success", "data": GlobalDiscountOut.model_validate(discount).to_dict()}

    except Exception as e:
        logger.exception(f"Error fetching global discount settings: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch discount")


@admin_router.put("")
async def update_discount(
    payload: GlobalDiscountUpdate,
    user: TokenUser = Depends(require_admin),
    db: Session = Depends(get_db)
):
    try:
        if payload.percentage < 0 or payload.percentage > 100:
            raise HTTPException(status_code=400, detail="Percentage must be between 0 and 100")

        start_date = to_naive_utc(payload.start_date)
        end_date = to_naive_utc(payload.end_date)
        if start_date and end_date and end_date < start_date:
            raise HTTPException(status_code=400, detail="End date must be after start date")

        discount = get_or_create_discount(db)
        discount.is_active = payload.is_active
        discount.percentage = payload.percentage
        discount.start_date = start_date
        discount.end_date = end_date
        discount.created_by = user.email

        db.commit()
        db.refresh(discount)

        logger.info(f"Global discount set to {discount.percentage}% (active={discount.is_active}) by {user.email}")
        return {"status": "success", "data": GlobalDiscountOut.model_validate(discount).to_dict()}

    except HTTPException:
        raise
    except Exception as e:
        db.rollback()
        logger.exception(f"Error updating global discount: {e}")
        raise HTTPException(status_code=500, detail="Failed to update discount")
