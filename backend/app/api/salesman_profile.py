"""
Salesman Profile API Endpoints
A salesman's own account details; only the picture is self-service
"""
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.api.common import load_user
from app.core.auth import TokenUser, get_current_user
from app.core.database import get_db
from app.domain.user import Salesman as SalesmanOut, SalesmanImageUpdate

logger = logging.getLogger(__name__)

router = APIRouter()


async def require_salesman(user: TokenUser = Depends(get_current_user)) -> TokenUser:
    """Salesmen only; admins manage salesmen through /admin/salesmen"""
    if not user.is_salesman:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"Access denied. Required role: SALESMAN, your role: {user.role}",
        )
    return user


@router.get("")
async def get_salesman_profile(current: TokenUser = Depends(require_salesman), db: Session = Depends(get_db)):
    user = load_user(db, current)
    return {"status": "success", "data": SalesmanOut.model_validate(user).to_dict()}


@router.put("")
async def update_salesman_picture(
    payload: SalesmanImageUpdate,
    current: TokenUser = Depends(require_salesman),
    db: Session = Depends(get_db)
):
    try:
        image = (payload.image or "").strip()
        if not image:
            raise HTTPException(status_code=400, detail="Only the profile picture can be updated")

        user = load_user(db, current)
        user.image = image
        db.commit()
        db.refresh(user)

        return {
            "status": "success",
            "message": "Profile picture updated",
            "data": SalesmanOut.model_validate(user).to_dict(),
        }

    except HTTPException:
        raise
    except Exception as e:
        db.rollback()
        logger.exception(f"Error updating picture for salesman {current.id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to update profile")
