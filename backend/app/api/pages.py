"""
CMS Pages API Endpoints
Static pages (about, privacy, terms, ...) addressed by slug
"""
import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.api.common import apply_changes
from app.core.auth import TokenUser, require_admin
from app.core.database import get_db
from app.domain.content import Page as PageOut, PageUpdate, PageUpsert
from app.models import Page
from app.services.catalog_service import slugify

logger = logging.getLogger(__name__)

public_router = APIRouter()
admin_router = APIRouter()


def _by_slug(db: Session, slug: str):
    return db.query(Page).filter(Page.slug == slug).first()


@public_router.get("/{slug}")
async def get_page(slug: str, db: Session = Depends(get_db)):
    try:
        page = _by_slug(db, slug)
        if page is None or not page.is_published:
            raise HTTPException(status_code=404, detail="Page not found")

        return {"status": "success", "data": PageOut.model_validate(page).to_dict()}

    except HTTPException:
        raise
    except Exception as e:
        logger.exception(f"Error fetching page {slug}: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch page")


# ============================================================================
# Admin
# ============================================================================

@admin_router.get("")
async def list_pages(user: TokenUser = Depends(require_admin), db: Session = Depends(get_db)):
    try:
        pages = db.query(Page).order_by(Page.slug.asc()).all()
        return {"status": "success", "data": [PageOut.model_validate(p).to_dict() for p in pages]}

    except Exception as e:
        logger.exception(f"Error listing pages: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch pages")


@admin_router.post("")
async def upsert_page(payload: PageUpsert, user: TokenUser = Depends(require_admin), db: Session = Depends(get_db)):
    """Create the page, or overwrite it when the slug already exists"""
    try:
        slug = slugify(payload.slug)
        page = _by_slug(db, slug)
        if page is None:
            page = Page(slug=slug)
            db.add(page)

        page.title = payload.title
        page.content = payload.content
        page.is_published = payload.is_published

        db.commit()
        db.refresh(page)
        logger.info(f"Page '{slug}' saved by user {user.id}")

        return {"status": "success", "data": PageOut.model_validate(page).to_dict()}

    except HTTPException:
        raise
    except Exception as e:
        db.rollback()
        logger.exception(f"Error saving page: {e}")
        raise HTTPException(status_code=500, detail="Failed to save page")


@admin_router.put("/{slug}")
async def update_page(
    slug: str,
    payload: PageUpdate,
    user: TokenUser = Depends(require_admin),
    db: Session = Depends(get_db)
):
    try:
        page = _by_slug(db, slug)
        if page is None:
            raise HTTPException(status_code=404, detail="Page not found")

        apply_changes(page, payload.model_dump(exclude_unset=True))

        db.commit()
        db.refresh(page)

        return {"status": "success", "data": PageOut.model_validate(page).to_dict()}

    except HTTPException:
        raise
    except Exception as e:
        db.rollback()
        logger.exception(f"Error updating page {slug}: {e}")
        raise HTTPException(status_code=500, detail="Failed to update page")


@admin_router.delete("/{slug}")
async def delete_page(slug: str, user: TokenUser = Depends(require_admin), db: Session = Depends(get_db)):
    try:
        page = _by_slug(db, slug)
        if page is None:
            raise HTTPException(status_code=404, detail="Page not found")

        db.delete(page)
        db.commit()

        return {"status": "success", "message": "Page deleted"}

    except HTTPException:
        raise
    except Exception as e:
        db.rollback()
        logger.exception(f"Error deleting page {slug}: {e}")
        raise HTTPException(status_code=500, detail="Failed to delete page")
