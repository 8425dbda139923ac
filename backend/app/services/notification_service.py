"""
Notification Service
Creates back-office notifications for orders, contact messages and low stock
"""
import logging
from typing import Any, Optional

from sqlalchemy.orm import Session

from app.core.config import settings
from app.domain.engagement import (
    NOTIFICATION_CONTACT_MESSAGE,
    NOTIFICATION_LOW_STOCK,
    NOTIFICATION_ORDER_PLACED,
)
from app.domain.base import to_jsonable
from app.models import ContactMessage, Notification, Order, Product

logger = logging.getLogger(__name__)


def create_notification(
    db: Session,
    type: str,
    title: str,
    message: str,
    data: Optional[Any] = None
) -> Notification:
    """Add a notification to the session (caller commits)"""
    notification = Notification(
        type=type,
        title=title,
        message=message,
        data=to_jsonable(data) if data is not None else None,
        is_read=False,
    )
    db.add(notification)
    return notification


def notify_order_placed(db: Session, order: Order, customer_name: Optional[str], customer_email: str) -> Notification:
    who = customer_name or customer_email or "A customer"
    return create_notification(
        db,
        NOTIFICATION_ORDER_PLACED,
        "New Order Received!",
        f"{who} placed an order worth {settings.CURRENCY} {order.total:.0f}",
        {
            "orderId": order.id,
            "orderNumber": order.order_number,
            "customerName": customer_name,
            "customerEmail": customer_email,
            "total": order.total,
            "itemCount": len(order.items),
        },
    )


def notify_contact_message(db: Session, contact: ContactMessage) -> Notification:
    return create_notification(
        db,
        NOTIFICATION_CONTACT_MESSAGE,
        "New Contact Message",
        f"{contact.name} sent a message: {contact.subject}",
        {
            "messageId": contact.id,
            "name": contact.name,
            "email": contact.email,
            "subject": contact.subject,
        },
    )


def notify_if_low_stock(db: Session, product: Product) -> Optional[Notification]:
    """Raise a LOW_STOCK notification when stock is at or below the threshold"""
    if product.stock is None or product.stock > settings.LOW_STOCK_THRESHOLD:
        return None

    logger.info(f"Product {product.id} ({product.name}) is low on stock: {product.stock}")
    return create_notification(
        db,
        NOTIFICATION_LOW_STOCK,
        "Low Stock Alert",
        f"{product.name} has only {product.stock} left in stock",
        {"productId": product.id, "productName": product.name, "stock": product.stock},
    )
