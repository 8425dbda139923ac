"""
Udhar API Endpoints
Credit ledger: goods handed to shops on credit and the installments paid

Author: DP Team
Date: 2025-06-09
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session, selectinload

from app.core.auth import TokenUser, require_admin, require_staff
from app.core.database import get_db
from app.domain.credit import (
    UdharCreate,
    UdharPayment as UdharPaymentOut,
    UdharPaymentCreate,
    UdharTransaction as UdharOut,
    UdharUpdate,
)
from app.models import UdharPayment, UdharTransaction
from app.services.credit_service import CreditService
from app.services.errors import ServiceError

logger = logging.getLogger(__name__)

router = APIRouter()


def _load(db: Session, transaction_id: int) -> UdharTransaction:
    transaction = (
        db.query(UdharTransaction)
        .options(selectinload(UdharTransaction.shop), selectinload(UdharTransaction.payments))
        .filter(UdharTransaction.id == transaction_id)
        .first()
    )
    if transaction is None:
        raise HTTPException(status_code=404, detail="Transaction not found")
    return transaction


@router.get("")
async def list_transactions(
    shop_id: Optional[int] = Query(None),
    status: Optional[str] = Query(None),
    user: TokenUser = Depends(require_staff),
    db: Session = Depends(get_db)
):
    try:
        query = db.query(UdharTransaction).options(
            selectinload(UdharTransaction.shop), selectinload(UdharTransaction.payments)
        )
        if shop_id is not None:
            query = query.filter(UdharTransaction.shop_id == shop_id)
        if status:
            query = query.filter(UdharTransaction.status == status)

        transactions = query.order_by(UdharTransaction.created_at.desc(), UdharTransaction.id.desc()).all()
        return {"status": "success", "data": [UdharOut.model_validate(t).to_dict() for t in transactions]}

    except Exception as e:
        logger.exception(f"Failed to fetch udhar transactions: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch transactions")


@router.post("", status_code=201)
async def create_transaction(payload: UdharCreate, user: TokenUser = Depends(require_staff), db: Session = Depends(get_db)):
    try:
        transaction = CreditService(db).create_transaction(payload)
        return {"status": "success", "data": UdharOut.model_validate(_load(db, transaction.id)).to_dict()}

    except ServiceError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        db.rollback()
        logger.exception(f"Failed to create udhar transaction: {e}")
        raise HTTPException(status_code=500, detail="Failed to create transaction")


@router.get("/payments")
async def list_payments(
    shop_id: Optional[int] = Query(None),
    user: TokenUser = Depends(require_staff),
    db: Session = Depends(get_db)
):
    """Every installment received, newest first"""
    try:
        query = db.query(UdharPayment)
        if shop_id is not None:
            query = query.filter(UdharPayment.shop_id == shop_id)
        payments = query.order_by(UdharPayment.created_at.desc(), UdharPayment.id.desc()).all()

        return {"status": "success", "data": [UdharPaymentOut.model_validate(p).to_dict() for p in payments]}

    except Exception as e:
        logger.exception(f"Failed to fetch udhar payments: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch payments")


@router.get("/{transaction_id}")
async def get_transaction(transaction_id: int, user: TokenUser = Depends(require_staff), db: Session = Depends(get_db)):
    return {"status": "success", "data": UdharOut.model_validate(_load(db, transaction_id)).to_dict()}


@router.put("/{transaction_id}")
async def update_transaction(
    transaction_id: int,
    payload: UdharUpdate,
    user: TokenUser = Depends(require_staff),
    db: Session = Depends(get_db)
):
    try:
        transaction = CreditService(db).update_transaction(_load(db, transaction_id), payload)
        return {"status": "success", "data": UdharOut.model_validate(transaction).to_dict()}

    except HTTPException:
        raise
    except ServiceError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        db.rollback()
        logger.exception(f"Failed to update udhar transaction {transaction_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to update transaction")


@router.delete("/{transaction_id}")
async def delete_transaction(transaction_id: int, user: TokenUser = Depends(require_admin), db: Session = Depends(get_db)):
    try:
        db.delete(_load(db, transaction_id))
        db.commit()
        return {"status": "success", "message": "Transaction deleted"}

    except HTTPException:
        raise
    except Exception as e:
        db.rollback()
        logger.exception(f"Failed to delete udhar transaction {transaction_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to delete transaction")


@router.post("/{transaction_id}/payment", status_code=201)
async def add_payment(
    transaction_id: int,
    payload: UdharPaymentCreate,
    user: TokenUser = Depends(require_staff),
    db: Session = Depends(get_db)
):
    """
    Record an installment

    The amount must be positive and not above the remaining balance.
    """
    try:
        transaction = _load(db, transaction_id)
        payment = CreditService(db).add_payment(
            transaction,
            payload.amount,
            payment_method=payload.payment_method,
            notes=payload.notes,
            created_by=user.id,
        )

        return {
            "status": "success",
            "data": {
                "payment": UdharPaymentOut.model_validate(payment).to_dict(),
                "transaction": UdharOut.model_validate(transaction).to_dict(),
            },
        }

    except HTTPException:
        raise
    except ServiceError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        db.rollback()
        logger.exception(f"Failed to add payment to udhar {transaction_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to add payment")
