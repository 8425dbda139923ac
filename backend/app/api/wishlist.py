"""
Wishlist API Endpoints
"""
import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session, joinedload

from app.core.auth import TokenUser, get_current_user
from app.core.database import get_db
from app.domain.cart import WishlistAdd, WishlistItem as WishlistItemOut
from app.models import Product, WishlistItem

logger = logging.getLogger(__name__)

router = APIRouter()


def _find(db: Session, user_id: int, product_id: int):
    return (
        db.query(WishlistItem)
        .filter(WishlistItem.user_id == user_id, WishlistItem.product_id == product_id)
        .first()
    )


def _require_product(db: Session, product_id: int) -> Product:
    product = db.get(Product, product_id)
    if product is None:
        raise HTTPException(status_code=404, detail="Product not found")
    return product


@router.get("")
async def get_wishlist(current: TokenUser = Depends(get_current_user), db: Session = Depends(get_db)):
    try:
        items = (
            db.query(WishlistItem)
            .options(joinedload(WishlistItem.product))
            .filter(WishlistItem.user_id == current.id)
            .order_by(WishlistItem.created_at.desc(), WishlistItem.id.desc())
            .all()
        )
        return {"status": "success", "data": [WishlistItemOut.model_validate(i).to_dict() for i in items]}

    except Exception as e:
        logger.exception(f"Error fetching wishlist for user {current.id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch wishlist")


@router.post("")
async def add_to_wishlist(payload: WishlistAdd, current: TokenUser = Depends(get_current_user), db: Session = Depends(get_db)):
    """Add a product; adding it twice is a no-op"""
    try:
        _require_product(db, payload.product_id)

        item = _find(db, current.id, payload.product_id)
        if item is None:
            item = WishlistItem(user_id=current.id, product_id=payload.product_id)
            db.add(item)
            db.commit()
            db.refresh(item)

        return {"status": "success", "data": WishlistItemOut.model_validate(item).to_dict()}

    except HTTPException:
        raise
    except Exception as e:
        db.rollback()
        logger.exception(f"Error adding to wishlist for user {current.id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to add to wishlist")


@router.post("/toggle")
async def toggle_wishlist(payload: WishlistAdd, current: TokenUser = Depends(get_current_user), db: Session = Depends(get_db)):
    try:
        _require_product(db, payload.product_id)

        item = _find(db, current.id, payload.product_id)
        if item is None:
            db.add(WishlistItem(user_id=current.id, product_id=payload.product_id))
            in_wishlist = True
        else:
            db.delete(item)
            in_wishlist = False

        db.commit()
        return {"status": "success", "data": {"product_id": payload.product_id, "in_wishlist": in_wishlist}}

    except HTTPException:
        raise
    except Exception as e:
        db.rollback()
        logger.exception(f"Error toggling wishlist for user {current.id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to update wishlist")


@router.delete("/{item_id}")
async def remove_from_wishlist(item_id: int, current: TokenUser = Depends(get_current_user), db: Session = Depends(get_db)):
    try:
        item = db.get(WishlistItem, item_id)
        if item is None:
            raise HTTPException(status_code=404, detail="Wishlist item not found")
        if item.user_id != current.id:
            raise HTTPException(status_code=403, detail="Not your wishlist item")

        db.delete(item)
        db.commit()
        return {"status": "success", "message": "Removed from wishlist"}

    except HTTPException:
        raise
    except Exception as e:
        db.rollback()
        logger.exception(f"Error removing wishlist item {item_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to remove from wishlist")
