"""
Profile API Endpoints
"""
import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.api.common import load_user
from app.core.auth import TokenUser, get_current_user
from app.core.database import get_db
from app.domain.user import ProfileUpdate, User as UserOut, is_profile_complete

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("")
async def get_profile(current: TokenUser = Depends(get_current_user), db: Session = Depends(get_db)):
    user = load_user(db, current)
    return {"status": "success", "data": UserOut.model_validate(user).to_dict()}


@router.put("")
async def update_profile(
    payload: ProfileUpdate,
    current: TokenUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Update profile fields and recompute `is_profile_complete`"""
    try:
        user = load_user(db, current)

        for field, value in payload.model_dump(exclude_unset=True).items():
            setattr(user, field, value.strip() if isinstance(value, str) else value)
        user.is_profile_complete = is_profile_complete(user)

        db.commit()
        db.refresh(user)

        return {
            "status": "success",
            "message": "Profile updated successfully",
            "data": UserOut.model_validate(user).to_dict(),
        }

    except HTTPException:
        raise
    except Exception as e:
        logger.exception(f"Error updating profile for user {current.id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to update profile")
