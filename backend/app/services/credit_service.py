"""
Credit Service
Shop balances and the Udhar ledger (goods on credit, paid in installments)

Invariant: paid_amount + remaining_amount == total_amount on every transaction.
"""
import logging
from decimal import Decimal
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.domain.credit import UDHAR_OVERDUE, UDHAR_PAID, UDHAR_PARTIAL, UDHAR_UNPAID, UdharCreate, UdharUpdate
from app.models import POSSale, Shop, UdharPayment, UdharTransaction
from app.models.common import to_money, to_naive_utc, utcnow
from app.services.errors import PaymentError

logger = logging.getLogger(__name__)


def resolve_status(paid: Decimal, remaining: Decimal, due_date=None, now=None) -> str:
    """PAID at zero remaining, PARTIAL after any payment, OVERDUE when unpaid past due"""
    if remaining <= 0:
        return UDHAR_PAID

    status = UDHAR_PARTIAL if paid > 0 else UDHAR_UNPAID
    now = now or utcnow()
    if due_date and now > due_date:
        status = UDHAR_OVERDUE
    return status


class CreditService:
    def __init__(self, db: Session):
        self.db = db

    # ------------------------------------------------------------------
    # Shops
    # ------------------------------------------------------------------

    def outstanding(self, shop_id: int) -> dict:
        """Unpaid POS credit and open Udhar balance for a shop"""
        pos_outstanding = (
            self.db.query(func.coalesce(func.sum(POSSale.remaining_amount), 0))
            .filter(POSSale.shop_id == shop_id, POSSale.is_paid.is_(False), POSSale.is_returned.is_(False))
            .scalar()
        )
        udhar_outstanding = (
            self.db.query(func.coalesce(func.sum(UdharTransaction.remaining_amount), 0))
            .filter(UdharTransaction.shop_id == shop_id, UdharTransaction.status != UDHAR_PAID)
            .scalar()
        )
        return {
            "posOutstanding": float(pos_outstanding or 0),
            "udharOutstanding": float(udhar_outstanding or 0),
        }

    # ------------------------------------------------------------------
    # Udhar transactions
    # ------------------------------------------------------------------

    def create_transaction(self, data: UdharCreate) -> UdharTransaction:
        shop = self.db.get(Shop, data.shop_id)
        if shop is None:
            raise PaymentError(f"Shop not found: {data.shop_id}")

        total = to_money(data.total_amount)
        transaction = UdharTransaction(
            shop_id=shop.id,
            items=data.items,
            total_amount=total,
            paid_amount=Decimal("0.00"),
            remaining_amount=total,
            status=UDHAR_UNPAID,
            due_date=to_naive_utc(data.due_date),
            notes=data.notes,
        )
        self.db.add(transaction)
        self.db.commit()
        self.db.refresh(transaction)

        logger.info(f"Udhar transaction {transaction.id} for shop {shop.id}: {total}")
        return transaction

    def update_transaction(self, transaction: UdharTransaction, data: UdharUpdate) -> UdharTransaction:
        changes = data.model_dump(exclude_unset=True)

        if "items" in changes and changes["items"] is not None:
            transaction.items = changes["items"]
        if "notes" in changes:
            transaction.notes = changes["notes"]
        if "due_date" in changes:
            transaction.due_date = to_naive_utc(changes["due_date"])

        if changes.get("total_amount") is not None:
            total = to_money(changes["total_amount"])
            if total < to_money(transaction.paid_amount):
                raise PaymentError("Total amount cannot be less than the amount already paid")
            transaction.total_amount = total
            transaction.remaining_amount = to_money(total - to_money(transaction.paid_amount))

        transaction.status = resolve_status(
            to_money(transaction.paid_amount), to_money(transaction.remaining_amount), transaction.due_date
        )

        self.db.commit()
        self.db.refresh(transaction)
        return transaction

    def add_payment(
        self,
        transaction: UdharTransaction,
        amount: Decimal,
        payment_method: str = "CASH",
        notes: Optional[str] = None,
        created_by: Optional[int] = None
    ) -> UdharPayment:
        """
        Record an installment against a transaction

        Raises:
            PaymentError: amount not positive or above the remaining balance
        """
        amount = to_money(amount)
        if amount <= 0:
            raise PaymentError("Invalid payment amount")
        if amount > to_money(transaction.remaining_amount):
            raise PaymentError("Payment amount exceeds remaining balance")

        payment = UdharPayment(
            transaction_id=transaction.id,
            shop_id=transaction.shop_id,
            amount=amount,
            payment_method=payment_method or "CASH",
            notes=notes,
            created_by=created_by,
        )
        self.db.add(payment)

        paid = to_money(to_money(transaction.paid_amount) + amount)
        remaining = to_money(to_money(transaction.total_amount) - paid)
        transaction.paid_amount = paid
        transaction.remaining_amount = remaining
        transaction.status = resolve_status(paid, remaining, transaction.due_date)

        self.db.commit()
        self.db.refresh(payment)
        self.db.refresh(transaction)

        logger.info(
            f"Payment of {amount} on udhar {transaction.id}: remaining={remaining}, status={transaction.status}"
        )
        return payment
