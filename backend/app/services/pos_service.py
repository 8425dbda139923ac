"""
POS Service
Counter sales: totals, receipts, stock and returns

Author: DP Team
Date: 2025-06-08
"""
import logging
from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy.orm import Session

from app.domain.pos import DISCOUNT_PERCENTAGE, PAYMENT_CREDIT, POSSaleCreate
from app.models import POSSale, POSSaleItem, Product, Shop
from app.models.common import to_money, utcnow
from app.services.errors import PaymentError, StatusTransitionError, StockError
from app.services.notification_service import notify_if_low_stock
from app.services.stock_service import adjust_stock

logger = logging.getLogger(__name__)


def compute_discount(subtotal: Decimal, discount: Optional[Decimal], discount_type: Optional[str]) -> Decimal:
    """Percentage of the subtotal or a fixed amount, never more than the subtotal"""
    if not discount:
        return Decimal("0.00")

    if discount_type == DISCOUNT_PERCENTAGE:
        amount = subtotal * Decimal(discount) / Decimal("100")
    else:
        amount = Decimal(discount)

    return to_money(min(max(amount, Decimal("0")), subtotal))


def next_receipt_number(db: Session, now: Optional[datetime] = None) -> str:
    """POS-YYYYMMDD-NNNN, NNNN one above the highest receipt issued that day"""
    now = now or utcnow()
    prefix = f"POS-{now.strftime('%Y%m%d')}-"
    receipts = db.query(POSSale.receipt_number).filter(POSSale.receipt_number.like(f"{prefix}%")).all()

    highest = 0
    for (receipt,) in receipts:
        suffix = receipt[len(prefix):]
        if suffix.isdigit():
            highest = max(highest, int(suffix))
    return f"{prefix}{highest + 1:04d}"


class POSService:
    """Service for point-of-sale sales recorded by staff"""

    def __init__(self, db: Session):
        self.db = db

    def create_sale(self, salesman_id: int, data: POSSaleCreate) -> POSSale:
        """
        Record a counter sale

        Raises:
            StockError: no items or unknown product
            PaymentError: missing shop, or a credit sale the shop's terms do not allow
        """
        if not data.items:
            raise StockError("No items in sale")

        is_credit = data.payment_method == PAYMENT_CREDIT
        shop = None
        if is_credit or data.shop_id:
            if not data.shop_id:
                raise PaymentError("A shop is required for credit sales")
            shop = self.db.get(Shop, data.shop_id)
            if shop is None:
                raise PaymentError(f"Shop not found: {data.shop_id}")
            if is_credit and not shop.allow_credit:
                raise PaymentError(f"Credit is not allowed for shop {shop.name}")

        subtotal = Decimal("0")
        sale_items = []
        touched = []

        for item in data.items:
            product = self.db.get(Product, item.product_id)
            if product is None:
                raise StockError(f"Product not found: {item.product_id}")

            price = to_money(product.sale_price if product.sale_price is not None else product.price)
            subtotal += price * item.quantity
            sale_items.append(POSSaleItem(
                product_id=product.id,
                product_name=product.name,
                quantity=item.quantity,
                price=price,
                size=item.size,
                color=item.color,
            ))

            # Counter stock is physical; clamp instead of refusing
            adjust_stock(product, -item.quantity, item.size, item.color)
            touched.append(product)

        subtotal = to_money(subtotal)
        discount = compute_discount(subtotal, data.discount, data.discount_type)
        total = to_money(subtotal - discount)

        if is_credit and shop.credit_limit is not None:
            if to_money(shop.current_credit or 0) + total > to_money(shop.credit_limit):
                raise PaymentError(f"Credit limit exceeded for shop {shop.name}")

        amount_received = to_money(data.amount_received) if data.amount_received is not None else None
        change_given = to_money(amount_received - total) if amount_received is not None else None

        sale = POSSale(
            receipt_number=next_receipt_number(self.db),
            salesman_id=salesman_id,
            shop_id=shop.id if shop else None,
            subtotal=subtotal,
            discount=discount,
            discount_type=data.discount_type if discount > 0 else None,
            total=total,
            payment_method=data.payment_method or "CASH",
            amount_received=amount_received,
            change_given=change_given,
            is_paid=not is_credit,
            remaining_amount=total if is_credit else Decimal("0.00"),
            customer_name=data.customer_name,
            customer_phone=data.customer_phone,
            notes=data.notes,
            items=sale_items,
        )
        self.db.add(sale)

        if is_credit:
            shop.current_credit = to_money((shop.current_credit or 0) + total)

        for product in touched:
            notify_if_low_stock(self.db, product)

        self.db.commit()
        self.db.refresh(sale)

        logger.info(f"POS sale {sale.receipt_number} by salesman {salesman_id}: total={sale.total}")
        return sale

    def _restore_stock(self, sale: POSSale) -> None:
        for item in sale.items:
            product = self.db.get(Product, item.product_id)
            if product is not None:
                adjust_stock(product, item.quantity, item.size, item.color)

    def _settle_credit(self, sale: POSSale) -> None:
        """Take an unpaid credit sale off its shop's balance"""
        if sale.is_paid or sale.payment_method != PAYMENT_CREDIT:
            return
        owed = to_money(sale.remaining_amount or 0)
        shop = self.db.get(Shop, sale.shop_id) if sale.shop_id else None
        if shop is not None:
            shop.current_credit = to_money(max(to_money(shop.current_credit or 0) - owed, Decimal("0")))
        sale.remaining_amount = Decimal("0.00")
        sale.is_paid = True

    def return_sale(self, sale: POSSale, reason: str, returned_by: str) -> POSSale:
        """Restore stock and mark the sale returned (only once)"""
        reason = (reason or "").strip()
        if not reason:
            raise StatusTransitionError("Return reason is required")
        if sale.is_returned:
            raise StatusTransitionError("Sale already returned")

        self._restore_stock(sale)
        self._settle_credit(sale)
        sale.is_returned = True
        sale.return_reason = reason
        sale.returned_at = utcnow()
        sale.returned_by = returned_by

        self.db.commit()
        self.db.refresh(sale)

        logger.info(f"POS sale {sale.receipt_number} returned by {returned_by}")
        return sale

    def delete_sale(self, sale: POSSale) -> None:
        """Delete a sale; stock and shop credit come back unless it was already returned"""
        if not sale.is_returned:
            self._restore_stock(sale)
            self._settle_credit(sale)
        self.db.delete(sale)
        self.db.commit()
        logger.info(f"Deleted POS sale {sale.receipt_number}")

    def clear_all(self) -> int:
        self.db.query(POSSaleItem).delete(synchronize_session=False)
        count = self.db.query(POSSale).delete(synchronize_session=False)
        self.db.commit()
        logger.warning(f"Cleared all POS sales ({count})")
        return count
