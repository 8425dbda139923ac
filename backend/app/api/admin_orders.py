"""
Admin Orders API Endpoints
Order list, status updates, returns and bulk delete
"""
import logging
from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from app.api.common import pagination
from app.core.auth import TokenUser, require_admin, require_staff
from app.core.database import get_db
from app.domain.order import Order as OrderOut, OrderStatusUpdate, ReturnRequest
from app.repositories.order_repository import OrderRepository
from app.services.email_service import send_order_status_update
from app.services.errors import ServiceError
from app.services.order_service import OrderService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("")
async def list_orders(
    status: Optional[str] = Query(None, description="Filter by order status"),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=200),
    user: TokenUser = Depends(require_staff),
    db: Session = Depends(get_db)
):
    try:
        orders, total = OrderRepository(db).find_all(status=status, page=page, limit=limit)
        return {
            "status": "success",
            "data": [OrderOut.model_validate(o).to_dict() for o in orders],
            "pagination": pagination(page, limit, total),
        }

    except Exception as e:
        logger.exception(f"Error fetching orders: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch orders")


@router.delete("/delete-all")
async def delete_all_orders(user: TokenUser = Depends(require_admin), db: Session = Depends(get_db)):
    try:
        count = OrderService(db).delete_all()
        return {"status": "success", "message": f"Deleted {count} orders", "data": {"deleted": count}}

    except Exception as e:
        db.rollback()
        logger.exception(f"Error deleting all orders: {e}")
        raise HTTPException(status_code=500, detail="Failed to delete orders")


@router.get("/{order_id}")
async def get_order(order_id: int, user: TokenUser = Depends(require_staff), db: Session = Depends(get_db)):
    order = OrderRepository(db).find_by_id(order_id)
    if order is None:
        raise HTTPException(status_code=404, detail=f"Order {order_id} not found")
    return {"status": "success", "data": OrderOut.model_validate(order).to_dict()}


@router.patch("/{order_id}")
async def update_order(
    order_id: int,
    payload: OrderStatusUpdate,
    background_tasks: BackgroundTasks,
    user: TokenUser = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """
    Update status and/or payment status

    Status changes follow the order lifecycle; the customer is emailed when
    the status actually changes.
    """
    try:
        order = OrderRepository(db).find_by_id(order_id)
        if order is None:
            raise HTTPException(status_code=404, detail=f"Order {order_id} not found")

        changed = OrderService(db).update_status(order, payload.status, payload.payment_status)
        if changed and order.user is not None:
            background_tasks.add_task(
                send_order_status_update,
                order.order_number,
                order.status,
                order.user.name or "Valued Customer",
                order.user.email,
            )

        return {"status": "success", "data": OrderOut.model_validate(order).to_dict()}

    except HTTPException:
        raise
    except ServiceError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        db.rollback()
        logger.exception(f"Error updating order {order_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to update order")


@router.post("/{order_id}/return")
async def return_order(
    order_id: int,
    payload: ReturnRequest,
    user: TokenUser = Depends(require_staff),
    db: Session = Depends(get_db)
):
    """Process a return (admin and salesman); stock is restored once"""
    try:
        if not payload.return_reason.strip():
            raise HTTPException(status_code=400, detail="Return reason is required")

        order = OrderRepository(db).find_by_id(order_id)
        if order is None:
            raise HTTPException(status_code=404, detail="Order not found")

        order = OrderService(db).return_order(order, payload.return_reason, user.email or user.name or "Unknown")
        return {
            "status": "success",
            "message": "Order returned successfully",
            "data": OrderOut.model_validate(order).to_dict(),
        }

    except HTTPException:
        raise
    except ServiceError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        db.rollback()
        logger.exception(f"Failed to process return for order {order_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to process return")
