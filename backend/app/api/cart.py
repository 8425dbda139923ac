"""
Cart API Endpoints
Server-side cart for signed-in customers

Deal lines (one per deal product, sharing a deal_id) never merge with other
lines; changing or removing one of them applies to every line of that deal.
"""
import logging
from decimal import Decimal
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session, joinedload

from app.core.auth import TokenUser, get_current_user
from app.core.database import get_db
from app.domain.cart import CartDealAdd, CartItem as CartItemOut, CartItemAdd, CartItemUpdate
from app.models import CartItem, Deal, DealItem, Product
from app.models.common import to_money
from app.services.pricing import active_discount_percentage, effective_price, is_deal_live, prorate_deal

logger = logging.getLogger(__name__)

router = APIRouter()


def _user_lines(db: Session, user_id: int) -> List[CartItem]:
    return (
        db.query(CartItem)
        .options(joinedload(CartItem.product))
        .filter(CartItem.user_id == user_id)
        .order_by(CartItem.id.asc())
        .all()
    )


def _cart_response(db: Session, user_id: int) -> dict:
    """Lines with unit price and line total, plus the grand total"""
    lines = _user_lines(db, user_id)
    discount_pct = active_discount_percentage(db)
    deal_prices = {}

    data = []
    total = Decimal("0")
    count = 0
    for line in lines:
        if line.deal_id:
            if line.deal_id not in deal_prices:
                deal = db.get(Deal, line.deal_id)
                deal_prices[line.deal_id] = prorate_deal(deal) if deal is not None else {}
            unit_price = deal_prices[line.deal_id].get(line.product_id)
            if unit_price is None:
                unit_price = effective_price(line.product, discount_pct)
        else:
            unit_price = effective_price(line.product, discount_pct)

        line_total = to_money(unit_price * line.quantity)
        total += line_total
        count += line.quantity

        item = CartItemOut.model_validate(line).to_dict()
        item["unit_price"] = float(unit_price)
        item["line_total"] = float(line_total)
        data.append(item)

    return {
        "status": "success",
        "data": {
            "items": data,
            "item_count": count,
            "total": float(to_money(total)),
        },
    }


def _own_line(db: Session, user_id: int, item_id: int) -> CartItem:
    line = db.get(CartItem, item_id)
    if line is None or line.user_id != user_id:
        raise HTTPException(status_code=404, detail="Cart item not found")
    return line


def _deal_lines(db: Session, user_id: int, deal_id: int) -> List[CartItem]:
    return db.query(CartItem).filter(CartItem.user_id == user_id, CartItem.deal_id == deal_id).all()


@router.get("")
async def get_cart(current: TokenUser = Depends(get_current_user), db: Session = Depends(get_db)):
    try:
        return _cart_response(db, current.id)
    except Exception as e:
        logger.exception(f"Error fetching cart for user {current.id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch cart")


@router.post("")
async def add_to_cart(
    payload: CartItemAdd,
    current: TokenUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Add a product; an identical line (same product, size and color) is merged"""
    try:
        product = db.get(Product, payload.product_id)
        if product is None or not product.is_active:
            raise HTTPException(status_code=404, detail="Product not found")

        existing = (
            db.query(CartItem)
            .filter(
                CartItem.user_id == current.id,
                CartItem.product_id == product.id,
                CartItem.deal_id.is_(None),
                CartItem.size.is_(payload.size) if payload.size is None else CartItem.size == payload.size,
                CartItem.color.is_(payload.color) if payload.color is None else CartItem.color == payload.color,
            )
            .first()
        )

        if existing is not None:
            existing.quantity += payload.quantity
        else:
            db.add(CartItem(
                user_id=current.id,
                product_id=product.id,
                quantity=payload.quantity,
                size=payload.size,
                color=payload.color,
            ))

        db.commit()
        return _cart_response(db, current.id)

    except HTTPException:
        raise
    except Exception as e:
        db.rollback()
        logger.exception(f"Error adding to cart for user {current.id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to add to cart")


@router.post("/deal")
async def add_deal_to_cart(
    payload: CartDealAdd,
    current: TokenUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Add a deal as one line per deal product"""
    try:
        deal = db.query(Deal).options(joinedload(Deal.items)).filter(Deal.id == payload.deal_id).first()
        if deal is None or not is_deal_live(deal):
            raise HTTPException(status_code=404, detail="Deal not found")

        for item in deal.items:
            db.add(CartItem(
                user_id=current.id,
                product_id=item.product_id,
                quantity=item.quantity * payload.quantity,
                deal_id=deal.id,
            ))

        db.commit()
        return _cart_response(db, current.id)

    except HTTPException:
        raise
    except Exception as e:
        db.rollback()
        logger.exception(f"Error adding deal to cart for user {current.id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to add deal to cart")


@router.put("/{item_id}")
async def update_cart_item(
    item_id: int,
    payload: CartItemUpdate,
    current: TokenUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Change a line's quantity; zero or less removes it

    For a deal line the quantity is the number of deals and every line of
    that deal is rescaled.
    """
    try:
        line = _own_line(db, current.id, item_id)

        if line.deal_id:
            lines = _deal_lines(db, current.id, line.deal_id)
            per_deal = dict(
                db.query(DealItem.product_id, DealItem.quantity).filter(DealItem.deal_id == line.deal_id).all()
            )
            for deal_line in lines:
                if payload.quantity <= 0:
                    db.delete(deal_line)
                else:
                    deal_line.quantity = per_deal.get(deal_line.product_id, 1) * payload.quantity
        elif payload.quantity <= 0:
            db.delete(line)
        else:
            line.quantity = payload.quantity

        db.commit()
        return _cart_response(db, current.id)

    except HTTPException:
        raise
    except Exception as e:
        db.rollback()
        logger.exception(f"Error updating cart item {item_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to update cart")


@router.delete("/{item_id}")
async def remove_cart_item(item_id: int, current: TokenUser = Depends(get_current_user), db: Session = Depends(get_db)):
    try:
        line = _own_line(db, current.id, item_id)
        lines = _deal_lines(db, current.id, line.deal_id) if line.deal_id else [line]
        for each in lines:
            db.delete(each)

        db.commit()
        return _cart_response(db, current.id)

    except HTTPException:
        raise
    except Exception as e:
        db.rollback()
        logger.exception(f"Error removing cart item {item_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to remove from cart")


@router.delete("")
async def clear_cart(current: TokenUser = Depends(get_current_user), db: Session = Depends(get_db)):
    try:
        db.query(CartItem).filter(CartItem.user_id == current.id).delete(synchronize_session=False)
        db.commit()
        return _cart_response(db, current.id)

    except Exception as e:
        db.rollback()
        logger.exception(f"Error clearing cart for user {current.id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to clear cart")
