"""
Site Settings API Endpoints
Singleton storefront configuration (branding, contact, shipping rules)
"""
import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.api.common import apply_changes
from app.core.auth import TokenUser, require_admin
from app.core.database import get_db
from app.domain.content import SiteSettings as SiteSettingsOut, SiteSettingsUpdate
from app.models import SiteSettings
from app.models.content import SITE_SETTINGS_ID

logger = logging.getLogger(__name__)

public_router = APIRouter()
admin_router = APIRouter()


def get_or_create_settings(db: Session) -> SiteSettings:
    row = db.get(SiteSettings, SITE_SETTINGS_ID)
    if row is None:
        row = SiteSettings(id=SITE_SETTINGS_ID)
        db.add(row)
        db.commit()
        db.refresh(row)
    return row


@public_router.get("")
async def get_public_settings(db: Session = Depends(get_db)):
    """Stored settings, or the defaults while no row exists"""
    try:
        row = db.get(SiteSettings, SITE_SETTINGS_ID)
        data = SiteSettingsOut.model_validate(row) if row is not None else SiteSettingsOut()
        return {"status": "success", "data": data.to_dict()}

    except Exception as e:
        logger.exception(f"Error fetching site settings: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch settings")


@admin_router.get("")
async def get_admin_settings(user: TokenUser = Depends(require_admin), db: Session = Depends(get_db)):
    try:
        row = get_or_create_settings(db)
        return {"status": "success", "data": SiteSettingsOut.model_validate(row).to_dict()}

    except Exception as e:
        db.rollback()
        logger.exception(f"Error fetching site settings: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch settings")


@admin_router.put("")
async def update_settings(
    payload: SiteSettingsUpdate,
    user: TokenUser = Depends(require_admin),
    db: Session = Depends(get_db)
):
    try:
        row = get_or_create_settings(db)
        apply_changes(row, payload.model_dump(exclude_unset=True))

        db.commit()
        db.refresh(row)
        logger.info(f"Site settings updated by user {user.id}")

        return {
            "status": "success",
            "message": "Settings updated",
            "data": SiteSettingsOut.model_validate(row).to_dict(),
        }

    except Exception as e:
        db.rollback()
        logger.exception(f"Error updating site settings: {e}")
        raise HTTPException(status_code=500, detail="Failed to update settings")
