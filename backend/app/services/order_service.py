"""
Order Service
Checkout, status transitions and returns for storefront orders

Author: DP Team
Date: 2025-06-07
"""
import logging
from collections import defaultdict
from decimal import Decimal
from typing import Dict, List, Optional, Tuple

from sqlalchemy.orm import Session

from app.domain.order import CheckoutItem, CheckoutRequest, ORDER_STATUSES, PAYMENT_STATUSES
from app.domain.user import is_profile_complete
from app.models import CartItem, Deal, Order, OrderItem, Product, User
from app.models.common import to_money, utcnow
from app.services.catalog_service import random_code, time_code
from app.services.errors import CheckoutError, StatusTransitionError
from app.services.notification_service import notify_if_low_stock, notify_order_placed
from app.services.pricing import (
    active_discount_percentage,
    effective_price,
    get_shipping_rules,
    is_deal_live,
    prorate_deal,
    shipping_fee_for,
)
from app.services.stock_service import adjust_stock, available_stock

logger = logging.getLogger(__name__)

# Allowed status changes; DELIVERED and CANCELLED are terminal
STATUS_TRANSITIONS = {
    "PENDING": {"CONFIRMED", "PROCESSING", "CANCELLED"},
    "CONFIRMED": {"PROCESSING", "SHIPPED", "CANCELLED"},
    "PROCESSING": {"SHIPPED", "CANCELLED"},
    "SHIPPED": {"DELIVERED", "CANCELLED"},
    "DELIVERED": set(),
    "CANCELLED": set(),
}


def generate_order_number() -> str:
    """DP-<base36 time>-<4 random>"""
    return f"DP-{time_code()}-{random_code()}"


def validate_transition(order: Order, new_status: str) -> None:
    """Raise StatusTransitionError unless `order` may move to `new_status`"""
    if order.is_returned:
        raise StatusTransitionError("Returned orders cannot be modified")
    if new_status not in ORDER_STATUSES:
        raise StatusTransitionError(f"Invalid status: {new_status}")
    if new_status not in STATUS_TRANSITIONS.get(order.status, set()):
        raise StatusTransitionError(f"Cannot change order status from {order.status} to {new_status}")


def check_full_bundle(deal: Deal, quantities: Dict[int, int]) -> int:
    """
    Number of complete bundles in `quantities` ({product_id: quantity})

    Raises:
        CheckoutError: the quantities do not form whole bundles of the deal
    """
    per_bundle = {item.product_id: item.quantity for item in deal.items}
    if set(quantities) != set(per_bundle):
        raise CheckoutError(f"Deal '{deal.name}' must be bought as a complete bundle")

    counts = set()
    for product_id, quantity in quantities.items():
        bundles, leftover = divmod(quantity, per_bundle[product_id])
        if leftover or bundles < 1:
            raise CheckoutError(f"Deal '{deal.name}' must be bought as a complete bundle")
        counts.add(bundles)

    if len(counts) != 1:
        raise CheckoutError(f"Deal '{deal.name}' must be bought as a complete bundle")
    return counts.pop()


class OrderService:
    """
    Service for storefront orders

    Handles:
    - Checkout (server-side pricing, stock checks, notifications)
    - Admin status and payment updates
    - Returns (stock restored once)
    """

    def __init__(self, db: Session):
        self.db = db

    # ------------------------------------------------------------------
    # Checkout
    # ------------------------------------------------------------------

    def _cart_lines(self, user: User) -> List[CheckoutItem]:
        items = self.db.query(CartItem).filter(CartItem.user_id == user.id).order_by(CartItem.id).all()
        return [
            CheckoutItem(
                product_id=item.product_id,
                quantity=item.quantity,
                size=item.size,
                color=item.color,
                deal_id=item.deal_id,
            )
            for item in items
        ]

    def _deal_prices(self, lines: List[CheckoutItem]) -> Dict[int, Dict[int, Decimal]]:
        """
        {deal_id: {product_id: unit_price}} for every deal referenced by the lines

        Deal pricing only applies to whole bundles: every product of the deal
        must be present, each in its deal quantity times the same count.
        """
        bought = defaultdict(lambda: defaultdict(int))
        for line in lines:
            if line.deal_id:
                bought[line.deal_id][line.product_id] += line.quantity

        prices = {}
        for deal_id, quantities in bought.items():
            deal = self.db.get(Deal, deal_id)
            if deal is None or not is_deal_live(deal):
                raise CheckoutError("This deal is no longer available")
            check_full_bundle(deal, quantities)
            prices[deal_id] = prorate_deal(deal)
        return prices

    def price_lines(self, lines: List[CheckoutItem]) -> Tuple[List[dict], Decimal, Decimal]:
        """
        Resolve products, check stock and compute unit prices

        Returns:
            (priced lines, subtotal, discount given by the global discount)
        """
        discount_pct = active_discount_percentage(self.db)
        deal_prices = self._deal_prices(lines)

        priced = []
        subtotal = Decimal("0")
        discount = Decimal("0")
        demand = defaultdict(int)

        for line in lines:
            product = self.db.get(Product, line.product_id)
            if product is None or not product.is_active:
                raise CheckoutError(f"Product not found: {line.product_id}")

            demand[(product.id, line.size, line.color)] += line.quantity
            if available_stock(product, line.size, line.color) < demand[(product.id, line.size, line.color)]:
                raise CheckoutError(f"Insufficient stock for {product.name}")

            if line.deal_id:
                unit_price = deal_prices[line.deal_id].get(product.id)
                if unit_price is None:
                    raise CheckoutError(f"{product.name} is not part of this deal")
            else:
                unit_price = effective_price(product, discount_pct)
                if discount_pct > 0:
                    discount += (to_money(product.price) - unit_price) * line.quantity

            subtotal += unit_price * line.quantity
            priced.append({"product": product, "line": line, "price": unit_price})

        return priced, to_money(subtotal), to_money(discount)

    def checkout(self, user: User, request: CheckoutRequest) -> Order:
        """
        Place an order for `user`

        Items come from the request, or from the user's cart when omitted
        (the cart is cleared after a successful order).

        Raises:
            CheckoutError: incomplete profile, empty order, unknown product,
                unavailable deal or insufficient stock
        """
        if not is_profile_complete(user):
            raise CheckoutError("Please complete your profile before placing an order")

        from_cart = request.items is None
        lines = self._cart_lines(user) if from_cart else request.items
        if not lines:
            raise CheckoutError("Your cart is empty")

        priced, subtotal, discount = self.price_lines(lines)
        free_minimum, fee = get_shipping_rules(self.db)
        shipping = shipping_fee_for(subtotal, free_minimum, fee)

        order = Order(
            order_number=generate_order_number(),
            user_id=user.id,
            subtotal=subtotal,
            shipping_fee=shipping,
            discount=discount,
            total=to_money(subtotal + shipping),
            status="PENDING",
            payment_status="PENDING",
            payment_method=request.payment_method or "COD",
            shipping_address=request.shipping_address.model_dump(),
            notes=request.notes,
        )

        for entry in priced:
            product, line = entry["product"], entry["line"]
            order.items.append(OrderItem(
                product_id=product.id,
                quantity=line.quantity,
                price=entry["price"],
                size=line.size,
                color=line.color,
                deal_id=line.deal_id,
            ))
            adjust_stock(product, -line.quantity, line.size, line.color)

        self.db.add(order)
        self.db.flush()

        for product in {entry["product"] for entry in priced}:
            notify_if_low_stock(self.db, product)
        notify_order_placed(self.db, order, user.name, user.email)

        if from_cart:
            self.db.query(CartItem).filter(CartItem.user_id == user.id).delete(synchronize_session=False)

        self.db.commit()
        self.db.refresh(order)

        logger.info(f"Order {order.order_number} placed by user {user.id}: total={order.total}")
        return order

    # ------------------------------------------------------------------
    # Back-office
    # ------------------------------------------------------------------

    def update_status(
        self,
        order: Order,
        status: Optional[str] = None,
        payment_status: Optional[str] = None
    ) -> bool:
        """
        Apply admin changes to an order

        Returns:
            True when the order status changed (caller emails the customer)
        """
        if order.is_returned:
            raise StatusTransitionError("Returned orders cannot be modified")

        status_changed = False
        if status and status != order.status:
            validate_transition(order, status)
            order.status = status
            status_changed = True

        if payment_status:
            if payment_status not in PAYMENT_STATUSES:
                raise StatusTransitionError(f"Invalid payment status: {payment_status}")
            order.payment_status = payment_status

        self.db.commit()
        self.db.refresh(order)
        return status_changed

    def return_order(self, order: Order, reason: str, returned_by: str) -> Order:
        """
        Process a return: restore stock line by line and cancel the order

        Raises:
            StatusTransitionError: missing reason or order already returned
        """
        reason = (reason or "").strip()
        if not reason:
            raise StatusTransitionError("Return reason is required")
        if order.is_returned:
            raise StatusTransitionError("Order already returned")

        for item in order.items:
            if item.product is not None:
                adjust_stock(item.product, item.quantity, item.size, item.color)

        order.is_returned = True
        order.return_reason = reason
        order.returned_at = utcnow()
        order.returned_by = returned_by
        order.status = "CANCELLED"

        self.db.commit()
        self.db.refresh(order)

        logger.info(f"Order {order.order_number} returned by {returned_by}")
        return order

    def delete_all(self) -> int:
        """Delete every order and its items"""
        self.db.query(OrderItem).delete(synchronize_session=False)
        count = self.db.query(Order).delete(synchronize_session=False)
        self.db.commit()
        logger.warning(f"Deleted all orders ({count})")
        return count


def order_email_payload(order: Order) -> dict:
    """Plain dict with what the order emails render"""
    return {
        "order_number": order.order_number,
        "subtotal": float(order.subtotal),
        "shipping_fee": float(order.shipping_fee),
        "discount": float(order.discount or 0),
        "total": float(order.total),
        "status": order.status,
        "shipping_address": order.shipping_address,
        "lines": [
            {
                "name": item.product.name if item.product else f"Product #{item.product_id}",
                "quantity": item.quantity,
                "price": float(item.price),
                "size": item.size,
                "color": item.color,
            }
            for item in order.items
        ],
    }
