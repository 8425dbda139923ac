"""
Deals API Endpoints
Product bundles sold for a single price

Author: DP Team
Date: 2025-06-06
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session, selectinload

from app.core.auth import TokenUser, require_admin
from app.core.database import get_db
from app.domain.marketing import MIN_DEAL_PRODUCTS, Deal as DealOut, DealCreate, DealItemIn, DealUpdate
from app.models import CartItem, Deal, DealItem, OrderItem, Product
from app.models.common import to_naive_utc
from app.services.catalog_service import slugify, unique_slug
from app.services.pricing import active_discount_percentage, deal_original_price, is_deal_live

logger = logging.getLogger(__name__)

public_router = APIRouter()
admin_router = APIRouter()


def _deal_query(db: Session):
    return db.query(Deal).options(selectinload(Deal.items).joinedload(DealItem.product))


def _resolve_items(db: Session, items: List[DealItemIn]) -> List[tuple]:
    """(product, quantity) pairs; 400 for unknown, repeated or too few products"""
    product_ids = [item.product_id for item in items]
    if len(set(product_ids)) != len(product_ids):
        raise HTTPException(status_code=400, detail="Each product can appear only once in a deal")
    if len(product_ids) < MIN_DEAL_PRODUCTS:
        raise HTTPException(status_code=400, detail=f"A deal needs at least {MIN_DEAL_PRODUCTS} products")

    resolved = []
    for item in items:
        product = db.get(Product, item.product_id)
        if product is None:
            raise HTTPException(status_code=400, detail=f"Product not found: {item.product_id}")
        resolved.append((product, item.quantity))
    return resolved


def _replace_items(db: Session, deal: Deal, resolved: List[tuple]) -> None:
    deal.items = [DealItem(product_id=product.id, quantity=quantity) for product, quantity in resolved]
    deal.original_price = deal_original_price(resolved, active_discount_percentage(db))


# ============================================================================
# Public
# ============================================================================

@public_router.get("")
async def public_deals(slug: Optional[str] = Query(None), db: Session = Depends(get_db)):
    """Deals currently running, or a single one by slug"""
    try:
        if slug:
            deal = _deal_query(db).filter(Deal.slug == slug).first()
            if deal is None or not is_deal_live(deal):
                raise HTTPException(status_code=404, detail="Deal not found")
            return {"status": "success", "data": DealOut.model_validate(deal).to_dict()}

        deals = _deal_query(db).filter(Deal.is_active.is_(True)).order_by(Deal.created_at.desc()).all()
        return {
            "status": "success",
            "data": [DealOut.model_validate(d).to_dict() for d in deals if is_deal_live(d)],
        }

    except HTTPException:
        raise
    except Exception as e:
        logger.exception(f"Error fetching deals: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch deals")


# ============================================================================
# Admin
# ============================================================================

@admin_router.get("")
async def list_deals(user: TokenUser = Depends(require_admin), db: Session = Depends(get_db)):
    try:
        deals = _deal_query(db).order_by(Deal.created_at.desc(), Deal.id.desc()).all()
        return {"status": "success", "data": [DealOut.model_validate(d).to_dict() for d in deals]}

    except Exception as e:
        logger.exception(f"Error fetching deals: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch deals")


@admin_router.get("/{deal_id}")
async def get_deal(deal_id: int, user: TokenUser = Depends(require_admin), db: Session = Depends(get_db)):
    deal = _deal_query(db).filter(Deal.id == deal_id).first()
    if deal is None:
        raise HTTPException(status_code=404, detail="Deal not found")
    return {"status": "success", "data": DealOut.model_validate(deal).to_dict()}


@admin_router.post("", status_code=201)
async def create_deal(payload: DealCreate, user: TokenUser = Depends(require_admin), db: Session = Depends(get_db)):
    """
    Create a deal

    Name, deal price and at least two products are required. The slug is
    derived from the name and suffixed when already taken.
    """
    try:
        if not payload.name.strip():
            raise HTTPException(status_code=400, detail="Deal name is required")
        if payload.deal_price is None:
            raise HTTPException(status_code=400, detail="Deal price is required")

        resolved = _resolve_items(db, payload.items)

        slug = unique_slug(
            slugify(payload.name),
            lambda s: db.query(Deal.id).filter(Deal.slug == s).first() is not None,
        )
        deal = Deal(
            name=payload.name.strip(),
            slug=slug,
            description=payload.description,
            image=payload.image,
            deal_price=payload.deal_price,
            is_active=payload.is_active,
            start_date=to_naive_utc(payload.start_date),
            end_date=to_naive_utc(payload.end_date),
        )
        _replace_items(db, deal, resolved)

        db.add(deal)
        db.commit()

        logger.info(f"Created deal {deal.id} ({deal.slug})")
        return {
            "status": "success",
            "data": DealOut.model_validate(_deal_query(db).filter(Deal.id == deal.id).first()).to_dict(),
        }

    except HTTPException:
        raise
    except Exception as e:
        db.rollback()
        logger.exception(f"Error creating deal: {e}")
        raise HTTPException(status_code=500, detail="Failed to create deal")


@admin_router.put("/{deal_id}")
async def update_deal(
    deal_id: int,
    payload: DealUpdate,
    user: TokenUser = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """Update a deal; when items are given they replace the old ones"""
    try:
        deal = _deal_query(db).filter(Deal.id == deal_id).first()
        if deal is None:
            raise HTTPException(status_code=404, detail="Deal not found")

        changes = payload.model_dump(exclude_unset=True)
        items = changes.pop("items", None)

        if "name" in changes:
            if not (changes["name"] or "").strip():
                raise HTTPException(status_code=400, detail="Deal name is required")
            changes["name"] = changes["name"].strip()
        if "deal_price" in changes and changes["deal_price"] is None:
            raise HTTPException(status_code=400, detail="Deal price is required")
        for field in ("start_date", "end_date"):
            if field in changes:
                changes[field] = to_naive_utc(changes[field])

        for field, value in changes.items():
            setattr(deal, field, value)

        if items is not None:
            _replace_items(db, deal, _resolve_items(db, payload.items))

        db.commit()
        deal = _deal_query(db).filter(Deal.id == deal_id).first()
        return {"status": "success", "data": DealOut.model_validate(deal).to_dict()}

    except HTTPException:
        raise
    except Exception as e:
        db.rollback()
        logger.exception(f"Error updating deal {deal_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to update deal")


@admin_router.delete("/{deal_id}")
async def delete_deal(deal_id: int, user: TokenUser = Depends(require_admin), db: Session = Depends(get_db)):
    try:
        deal = db.get(Deal, deal_id)
        if deal is None:
            raise HTTPException(status_code=404, detail="Deal not found")

        # Carts drop the bundle; past orders keep their lines without the deal link
        db.query(CartItem).filter(CartItem.deal_id == deal.id).delete(synchronize_session=False)
        db.query(OrderItem).filter(OrderItem.deal_id == deal.id).update(
            {OrderItem.deal_id: None}, synchronize_session=False
        )
        db.delete(deal)
        db.commit()
        return {"status": "success", "message": "Deal deleted"}

    except HTTPException:
        raise
    except Exception as e:
        db.rollback()
        logger.exception(f"Error deleting deal {deal_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to delete deal")
