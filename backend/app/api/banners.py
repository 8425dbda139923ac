"""
Banners API Endpoints
Home page hero slides and promo banners

Author: DP Team
Date: 2025-06-12
"""
import logging
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import func
from sqlalchemy.orm import Session

from app.api.common import apply_changes, get_or_404
from app.api.settings import get_or_create_settings
from app.core.auth import TokenUser, require_admin
from app.core.database import get_db
from app.domain.marketing import (
    HeroBanner as HeroBannerOut,
    HeroBannerCreate,
    HeroBannerUpdate,
    HideDefaultBanner,
    PromoBanner as PromoBannerOut,
    PromoBannerCreate,
    PromoBannerUpdate,
)
from app.models import HeroBanner, PromoBanner
from app.models.common import to_naive_utc, utcnow

logger = logging.getLogger(__name__)

hero_public_router = APIRouter()
hero_admin_router = APIRouter()
promo_public_router = APIRouter()
promo_admin_router = APIRouter()


def next_sort_order(db: Session, model) -> int:
    """One past the highest sort_order, 0 for the first row"""
    highest = db.query(func.max(model.sort_order)).scalar()
    return 0 if highest is None else highest + 1


def is_banner_live(banner: HeroBanner, now: Optional[datetime] = None) -> bool:
    if not banner.is_active:
        return False
    now = now or utcnow()
    if banner.start_date and now < banner.start_date:
        return False
    if banner.end_date and now > banner.end_date:
        return False
    return True


# ============================================================================
# Hero banners
# ============================================================================

@hero_public_router.get("")
async def public_hero_banners(db: Session = Depends(get_db)):
    """Active slides inside their date window, in display order"""
    try:
        rows = db.query(HeroBanner).order_by(HeroBanner.sort_order.asc(), HeroBanner.id.asc()).all()
        return {
            "status": "success",
            "data": [HeroBannerOut.model_validate(b).to_dict() for b in rows if is_banner_live(b)],
        }

    except Exception as e:
        logger.exception(f"Error fetching hero banners: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch hero banners")


@hero_admin_router.get("")
async def list_hero_banners(user: TokenUser = Depends(require_admin), db: Session = Depends(get_db)):
    try:
        rows = db.query(HeroBanner).order_by(HeroBanner.sort_order.asc(), HeroBanner.id.asc()).all()
        return {"status": "success", "data": [HeroBannerOut.model_validate(b).to_dict() for b in rows]}

    except Exception as e:
        logger.exception(f"Error fetching hero banners: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch hero banners")


@hero_admin_router.post("/hide-default")
async def hide_default_hero_banner(
    payload: HideDefaultBanner,
    user: TokenUser = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """Hide one of the storefront's built-in slides; hiding twice is a no-op"""
    try:
        banner_id = payload.id.strip()
        if not banner_id:
            raise HTTPException(status_code=400, detail="Banner id is required")

        site = get_or_create_settings(db)
        hidden = list(site.hidden_default_hero_banner_ids or [])
        if banner_id not in hidden:
            site.hidden_default_hero_banner_ids = hidden + [banner_id]
            db.commit()

        return {"status": "success", "data": {"hidden": site.hidden_default_hero_banner_ids}}

    except HTTPException:
        raise
    except Exception as e:
        db.rollback()
        logger.exception(f"Error hiding default hero banner: {e}")
        raise HTTPException(status_code=500, detail="Failed to hide default banner")


@hero_admin_router.get("/{banner_id}")
async def get_hero_banner(banner_id: int, user: TokenUser = Depends(require_admin), db: Session = Depends(get_db)):
    banner = get_or_404(db, HeroBanner, banner_id, "Banner")
    return {"status": "success", "data": HeroBannerOut.model_validate(banner).to_dict()}


@hero_admin_router.post("", status_code=201)
async def create_hero_banner(
    payload: HeroBannerCreate,
    user: TokenUser = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """New slides go to the end of the carousel"""
    try:
        fields = payload.model_dump()
        fields["title"] = fields["title"].strip() or "Banner"
        fields["subtitle"] = fields["subtitle"].strip()
        fields["start_date"] = to_naive_utc(fields["start_date"])
        fields["end_date"] = to_naive_utc(fields["end_date"])

        banner = HeroBanner(sort_order=next_sort_order(db, HeroBanner), **fields)
        db.add(banner)
        db.commit()
        db.refresh(banner)

        logger.info(f"Created hero banner {banner.id}")
        return {"status": "success", "data": HeroBannerOut.model_validate(banner).to_dict()}

    except Exception as e:
        db.rollback()
        logger.exception(f"Error creating hero banner: {e}")
        raise HTTPException(status_code=500, detail="Failed to create hero banner")


@hero_admin_router.put("/{banner_id}")
async def update_hero_banner(
    banner_id: int,
    payload: HeroBannerUpdate,
    user: TokenUser = Depends(require_admin),
    db: Session = Depends(get_db)
):
    try:
        banner = get_or_404(db, HeroBanner, banner_id, "Banner")

        changes = payload.model_dump(exclude_unset=True)
        for field in ("start_date", "end_date"):
            if field in changes:
                changes[field] = to_naive_utc(changes[field])
        apply_changes(banner, changes)

        db.commit()
        db.refresh(banner)
        return {"status": "success", "data": HeroBannerOut.model_validate(banner).to_dict()}

    except HTTPException:
        raise
    except Exception as e:
        db.rollback()
        logger.exception(f"Error updating hero banner {banner_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to update hero banner")


@hero_admin_router.delete("/{banner_id}")
async def delete_hero_banner(banner_id: int, user: TokenUser = Depends(require_admin), db: Session = Depends(get_db)):
    try:
        banner = get_or_404(db, HeroBanner, banner_id, "Banner")
        db.delete(banner)
        db.commit()
        return {"status": "success", "message": "Banner deleted"}

    except HTTPException:
        raise
    except Exception as e:
        db.rollback()
        logger.exception(f"Error deleting hero banner {banner_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to delete hero banner")


# ============================================================================
# Promo banners
# ============================================================================

@promo_public_router.get("")
async def public_promo_banners(db: Session = Depends(get_db)):
    try:
        rows = (
            db.query(PromoBanner)
            .filter(PromoBanner.is_active.is_(True))
            .order_by(PromoBanner.sort_order.asc(), PromoBanner.id.asc())
            .all()
        )
        return {"status": "success", "data": [PromoBannerOut.model_validate(b).to_dict() for b in rows]}

    except Exception as e:
        logger.exception(f"Error fetching promo banners: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch promo banners")


@promo_admin_router.get("")
async def list_promo_banners(user: TokenUser = Depends(require_admin), db: Session = Depends(get_db)):
    try:
        rows = db.query(PromoBanner).order_by(PromoBanner.sort_order.asc(), PromoBanner.id.asc()).all()
        return {"status": "success", "data": [PromoBannerOut.model_validate(b).to_dict() for b in rows]}

    except Exception as e:
        logger.exception(f"Error fetching promo banners: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch promo banners")


@promo_admin_router.get("/{banner_id}")
async def get_promo_banner(banner_id: int, user: TokenUser = Depends(require_admin), db: Session = Depends(get_db)):
    banner = get_or_404(db, PromoBanner, banner_id, "Promo banner")
    return {"status": "success", "data": PromoBannerOut.model_validate(banner).to_dict()}


@promo_admin_router.post("", status_code=201)
async def create_promo_banner(
    payload: PromoBannerCreate,
    user: TokenUser = Depends(require_admin),
    db: Session = Depends(get_db)
):
    try:
        image_url = payload.image_url.strip()
        if not image_url:
            raise HTTPException(status_code=400, detail="Image URL is required")

        banner = PromoBanner(
            image_url=image_url,
            link_url=payload.link_url.strip() or "/",
            alt=payload.alt.strip() or "Promo",
            is_active=payload.is_active,
            sort_order=next_sort_order(db, PromoBanner),
        )
        db.add(banner)
        db.commit()
        db.refresh(banner)

        return {"status": "success", "data": PromoBannerOut.model_validate(banner).to_dict()}

    except HTTPException:
        raise
    except Exception as e:
        db.rollback()
        logger.exception(f"Error creating promo banner: {e}")
        raise HTTPException(status_code=500, detail="Failed to create promo banner")


@promo_admin_router.put("/{banner_id}")
async def update_promo_banner(
    banner_id: int,
    payload: PromoBannerUpdate,
    user: TokenUser = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """Blank link and alt fall back to "/" and "Promo"; a blank image URL is refused"""
    try:
        banner = get_or_404(db, PromoBanner, banner_id, "Promo banner")

        changes = payload.model_dump(exclude_unset=True)
        if "image_url" in changes:
            changes["image_url"] = (changes["image_url"] or "").strip()
            if not changes["image_url"]:
                raise HTTPException(status_code=400, detail="Image URL is required")
        if "link_url" in changes:
            changes["link_url"] = (changes["link_url"] or "").strip() or "/"
        if "alt" in changes:
            changes["alt"] = (changes["alt"] or "").strip() or "Promo"
        apply_changes(banner, changes)

        db.commit()
        db.refresh(banner)
        return {"status": "success", "data": PromoBannerOut.model_validate(banner).to_dict()}

    except HTTPException:
        raise
    except Exception as e:
        db.rollback()
        logger.exception(f"Error updating promo banner {banner_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to update promo banner")


@promo_admin_router.delete("/{banner_id}")
async def delete_promo_banner(banner_id: int, user: TokenUser = Depends(require_admin), db: Session = Depends(get_db)):
    try:
        banner = get_or_404(db, PromoBanner, banner_id, "Promo banner")
        db.delete(banner)
        db.commit()
        return {"status": "success", "message": "Promo banner deleted"}

    except HTTPException:
        raise
    except Exception as e:
        db.rollback()
        logger.exception(f"Error deleting promo banner {banner_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to delete promo banner")
