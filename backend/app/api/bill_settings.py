"""
Bill Settings API Endpoints
Layout of printed POS receipts (store details, visible sections, paper size)
"""
import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.api.common import apply_changes
from app.core.auth import TokenUser, require_admin, require_staff
from app.core.database import get_db
from app.domain.content import BillSettings as BillSettingsOut, BillSettingsUpdate
from app.models import BillSettings
from app.models.content import BILL_SETTINGS_ID

logger = logging.getLogger(__name__)

router = APIRouter()


def get_or_create_bill_settings(db: Session) -> BillSettings:
    row = db.get(BillSettings, BILL_SETTINGS_ID)
    if row is None:
        row = BillSettings(id=BILL_SETTINGS_ID)
        db.add(row)
        db.commit()
        db.refresh(row)
    return row


@router.get("")
async def get_bill_settings(user: TokenUser = Depends(require_staff), db: Session = Depends(get_db)):
    try:
        row = get_or_create_bill_settings(db)
        return {"status": "success", "data": BillSettingsOut.model_validate(row).to_dict()}

    except Exception as e:
        db.rollback()
        logger.exception(f"Error fetching bill settings: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch bill settings")


@router.put("")
async def update_bill_settings(
    payload: BillSettingsUpdate,
    user: TokenUser = Depends(require_admin),
    db: Session = Depends(get_db)
):
    try:
        row = get_or_create_bill_settings(db)
        apply_changes(row, payload.model_dump(exclude_unset=True))

        db.commit()
        db.refresh(row)
        logger.info(f"Bill settings updated by user {user.id}")

        return {
            "status": "success",
            "message": "Bill settings updated",
            "data": BillSettingsOut.model_validate(row).to_dict(),
        }

    except Exception as e:
        db.rollback()
        logger.exception(f"Error updating bill settings: {e}")
        raise HTTPException(status_code=500, detail="Failed to update bill settings")
