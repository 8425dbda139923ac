"""
Categories API Endpoints
Public listing and admin management
"""
import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import func
from sqlalchemy.orm import Session

from app.api.common import get_or_404
from app.core.auth import TokenUser, require_admin
from app.core.database import get_db
from app.domain.catalog import Category as CategoryOut, CategoryCreate, CategoryUpdate
from app.models import Category, Product

logger = logging.getLogger(__name__)

router = APIRouter()


def _slug_taken(db: Session, slug: str, exclude_id: int = None) -> bool:
    query = db.query(Category.id).filter(Category.slug == slug)
    if exclude_id is not None:
        query = query.filter(Category.id != exclude_id)
    return query.first() is not None


@router.get("")
async def list_categories(db: Session = Depends(get_db)):
    """All categories with their product counts"""
    try:
        counts = dict(
            db.query(Product.category_id, func.count(Product.id))
            .filter(Product.is_active.is_(True))
            .group_by(Product.category_id)
            .all()
        )
        categories = db.query(Category).order_by(Category.name.asc()).all()

        data = []
        for category in categories:
            item = CategoryOut.model_validate(category).to_dict()
            item["product_count"] = counts.get(category.id, 0)
            data.append(item)

        return {"status": "success", "data": data}

    except Exception as e:
        logger.exception(f"Error fetching categories: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch categories")


@router.post("", status_code=201)
async def create_category(
    payload: CategoryCreate,
    user: TokenUser = Depends(require_admin),
    db: Session = Depends(get_db)
):
    try:
        if _slug_taken(db, payload.slug):
            raise HTTPException(status_code=400, detail="A category with this slug already exists")

        category = Category(**payload.model_dump())
        db.add(category)
        db.commit()
        db.refresh(category)

        return {"status": "success", "data": CategoryOut.model_validate(category).to_dict()}

    except HTTPException:
        raise
    except Exception as e:
        logger.exception(f"Error creating category: {e}")
        raise HTTPException(status_code=500, detail="Failed to create category")


@router.put("/{category_id}")
async def update_category(
    category_id: int,
    payload: CategoryUpdate,
    user: TokenUser = Depends(require_admin),
    db: Session = Depends(get_db)
):
    try:
        category = get_or_404(db, Category, category_id, "Category")

        changes = payload.model_dump(exclude_unset=True)
        if changes.get("slug") and _slug_taken(db, changes["slug"], exclude_id=category.id):
            raise HTTPException(status_code=400, detail="A category with this slug already exists")

        for field, value in changes.items():
            if field in ("name", "slug") and not value:
                continue
            setattr(category, field, value)

        db.commit()
        db.refresh(category)
        return {"status": "success", "data": CategoryOut.model_validate(category).to_dict()}

    except HTTPException:
        raise
    except Exception as e:
        logger.exception(f"Error updating category {category_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to update category")


@router.delete("/{category_id}")
async def delete_category(
    category_id: int,
    user: TokenUser = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """Delete a category; refused while products still reference it"""
    try:
        category = get_or_404(db, Category, category_id, "Category")

        in_use = db.query(func.count(Product.id)).filter(Product.category_id == category.id).scalar()
        if in_use:
            raise HTTPException(
                status_code=400,
                detail=f"Cannot delete category with {in_use} products. Move or delete them first.",
            )

        db.delete(category)
        db.commit()
        return {"status": "success", "message": "Category deleted"}

    except HTTPException:
        raise
    except Exception as e:
        logger.exception(f"Error deleting category {category_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to delete category")
