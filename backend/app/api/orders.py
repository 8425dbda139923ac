"""
Orders API Endpoints
Checkout and the customer's own order history

Author: DP Team
Date: 2025-06-07
"""
import logging

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException
from sqlalchemy.orm import Session

from app.api.common import load_user
from app.core.auth import TokenUser, get_current_user
from app.core.database import get_db
from app.domain.order import CheckoutRequest, Order as OrderOut
from app.repositories.order_repository import OrderRepository
from app.services.email_service import send_admin_new_order, send_order_confirmation
from app.services.errors import ServiceError
from app.services.order_service import OrderService, order_email_payload

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("", status_code=201)
async def place_order(
    payload: CheckoutRequest,
    background_tasks: BackgroundTasks,
    current: TokenUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Place an order

    Prices, shipping and totals are computed server-side. Without `items`
    the user's cart is ordered and cleared.
    """
    try:
        user = load_user(db, current)
        order = OrderService(db).checkout(user, payload)

        email_payload = order_email_payload(order)
        customer_name = user.name or "Valued Customer"
        background_tasks.add_task(send_order_confirmation, email_payload, customer_name, user.email)
        background_tasks.add_task(send_admin_new_order, email_payload, customer_name, user.email)

        return {
            "status": "success",
            "message": "Order placed successfully",
            "data": OrderOut.model_validate(order).to_dict(),
        }

    except HTTPException:
        raise
    except ServiceError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        db.rollback()
        logger.exception(f"Error creating order for user {current.id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to create order")


@router.get("")
async def my_orders(current: TokenUser = Depends(get_current_user), db: Session = Depends(get_db)):
    try:
        orders = OrderRepository(db).find_for_user(current.id)
        return {
            "status": "success",
            "count": len(orders),
            "data": [OrderOut.model_validate(o).to_dict() for o in orders],
        }

    except Exception as e:
        logger.exception(f"Error fetching orders for user {current.id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch orders")


@router.get("/{order_id}")
async def my_order(order_id: int, current: TokenUser = Depends(get_current_user), db: Session = Depends(get_db)):
    """A single order; other users' orders read as not found"""
    order = OrderRepository(db).find_by_id(order_id)
    if order is None or order.user_id != current.id:
        raise HTTPException(status_code=404, detail=f"Order {order_id} not found")

    return {"status": "success", "data": OrderOut.model_validate(order).to_dict()}
