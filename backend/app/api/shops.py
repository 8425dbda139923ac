"""
Shops API Endpoints
Shops that buy from the counter, with their outstanding credit
"""
import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.api.common import apply_changes, get_or_404
from app.core.auth import TokenUser, require_admin, require_staff
from app.core.database import get_db
from app.domain.credit import Shop as ShopOut, ShopCreate, ShopUpdate
from app.domain.pos import POSSale as POSSaleOut
from app.models import POSSale, Shop
from app.services.credit_service import CreditService

logger = logging.getLogger(__name__)

router = APIRouter()

RECENT_SALES_LIMIT = 10


@router.get("")
async def list_shops(user: TokenUser = Depends(require_staff), db: Session = Depends(get_db)):
    """Active shops with POS and Udhar outstanding totals"""
    try:
        service = CreditService(db)
        shops = db.query(Shop).filter(Shop.is_active.is_(True)).order_by(Shop.name.asc()).all()

        data = []
        for shop in shops:
            item = ShopOut.model_validate(shop).to_dict()
            item.update(service.outstanding(shop.id))
            data.append(item)

        return {"status": "success", "data": data}

    except Exception as e:
        logger.exception(f"Failed to fetch shops: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch shops")


@router.post("", status_code=201)
async def create_shop(payload: ShopCreate, user: TokenUser = Depends(require_staff), db: Session = Depends(get_db)):
    try:
        if not payload.name.strip():
            raise HTTPException(status_code=400, detail="Shop name is required")

        shop = Shop(**payload.model_dump())
        shop.name = shop.name.strip()
        db.add(shop)
        db.commit()
        db.refresh(shop)

        return {"status": "success", "data": ShopOut.model_validate(shop).to_dict()}

    except HTTPException:
        raise
    except Exception as e:
        db.rollback()
        logger.exception(f"Failed to create shop: {e}")
        raise HTTPException(status_code=500, detail="Failed to create shop")


@router.get("/{shop_id}")
async def get_shop(shop_id: int, user: TokenUser = Depends(require_staff), db: Session = Depends(get_db)):
    """Shop details with its latest sales"""
    try:
        shop = get_or_404(db, Shop, shop_id, "Shop")
        sales = (
            db.query(POSSale)
            .filter(POSSale.shop_id == shop.id)
            .order_by(POSSale.created_at.desc(), POSSale.id.desc())
            .limit(RECENT_SALES_LIMIT)
            .all()
        )

        data = ShopOut.model_validate(shop).to_dict()
        data.update(CreditService(db).outstanding(shop.id))
        data["sales"] = [POSSaleOut.model_validate(s).to_dict() for s in sales]

        return {"status": "success", "data": data}

    except HTTPException:
        raise
    except Exception as e:
        logger.exception(f"Failed to fetch shop {shop_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch shop")


@router.put("/{shop_id}")
async def update_shop(
    shop_id: int,
    payload: ShopUpdate,
    user: TokenUser = Depends(require_staff),
    db: Session = Depends(get_db)
):
    try:
        shop = get_or_404(db, Shop, shop_id, "Shop")
        apply_changes(shop, payload.model_dump(exclude_unset=True))

        db.commit()
        db.refresh(shop)
        return {"status": "success", "data": ShopOut.model_validate(shop).to_dict()}

    except HTTPException:
        raise
    except Exception as e:
        db.rollback()
        logger.exception(f"Failed to update shop {shop_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to update shop")


@router.delete("/{shop_id}")
async def delete_shop(shop_id: int, user: TokenUser = Depends(require_admin), db: Session = Depends(get_db)):
    """Delete a shop and its Udhar ledger; its POS sales are kept without a shop"""
    try:
        shop = get_or_404(db, Shop, shop_id, "Shop")
        db.query(POSSale).filter(POSSale.shop_id == shop.id).update(
            {POSSale.shop_id: None}, synchronize_session=False
        )
        db.delete(shop)
        db.commit()
        return {"status": "success", "message": "Shop deleted"}

    except HTTPException:
        raise
    except Exception as e:
        db.rollback()
        logger.exception(f"Failed to delete shop {shop_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to delete shop")
