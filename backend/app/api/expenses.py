"""
Expenses API Endpoints
Salesmen log their own expenses; admins see and manage everyone's
"""
import logging
from datetime import date, datetime, time, timedelta
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from app.api.common import apply_changes, get_or_404
from app.core.auth import TokenUser, require_staff
from app.core.database import get_db
from app.domain.expense import Expense as ExpenseOut, ExpenseCreate, ExpenseUpdate
from app.models import Expense
from app.models.common import to_money, to_naive_utc, utcnow

logger = logging.getLogger(__name__)

router = APIRouter()


def _check_owner(expense: Expense, user: TokenUser):
    if not user.is_admin and expense.user_id != user.id:
        raise HTTPException(status_code=403, detail="Not allowed to modify this expense")


@router.get("")
async def list_expenses(
    from_date: Optional[date] = Query(None, alias="from", description="First day (inclusive)"),
    to_date: Optional[date] = Query(None, alias="to", description="Last day (inclusive)"),
    user_id: Optional[int] = Query(None, description="Admin only: expenses of one user"),
    user: TokenUser = Depends(require_staff),
    db: Session = Depends(get_db)
):
    """Expenses newest first, with their total"""
    try:
        query = db.query(Expense)

        if not user.is_admin:
            query = query.filter(Expense.user_id == user.id)
        elif user_id is not None:
            query = query.filter(Expense.user_id == user_id)

        if from_date is not None:
            query = query.filter(Expense.expense_date >= datetime.combine(from_date, time.min))
        if to_date is not None:
            query = query.filter(Expense.expense_date < datetime.combine(to_date + timedelta(days=1), time.min))

        total_amount = query.with_entities(func.coalesce(func.sum(Expense.amount), 0)).scalar()
        rows = (
            query.options(joinedload(Expense.user))
            .order_by(Expense.expense_date.desc(), Expense.id.desc())
            .all()
        )

        return {
            "status": "success",
            "data": [ExpenseOut.model_validate(e).to_dict() for e in rows],
            "total": len(rows),
            "total_amount": float(to_money(total_amount or 0)),
        }

    except Exception as e:
        logger.exception(f"Error fetching expenses: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch expenses")


@router.post("", status_code=201)
async def create_expense(payload: ExpenseCreate, user: TokenUser = Depends(require_staff), db: Session = Depends(get_db)):
    try:
        description = payload.description.strip()
        if not description:
            raise HTTPException(status_code=400, detail="Description is required")

        expense = Expense(
            user_id=user.id,
            amount=to_money(payload.amount),
            description=description,
            category=payload.category,
            expense_date=to_naive_utc(payload.expense_date) if payload.expense_date else utcnow(),
            image=payload.image,
        )
        db.add(expense)
        db.commit()
        db.refresh(expense)

        return {"status": "success", "data": ExpenseOut.model_validate(expense).to_dict()}

    except HTTPException:
        raise
    except Exception as e:
        db.rollback()
        logger.exception(f"Error creating expense: {e}")
        raise HTTPException(status_code=500, detail="Failed to create expense")


@router.get("/{expense_id}")
async def get_expense(expense_id: int, user: TokenUser = Depends(require_staff), db: Session = Depends(get_db)):
    try:
        expense = get_or_404(db, Expense, expense_id, "Expense")
        if not user.is_admin and expense.user_id != user.id:
            raise HTTPException(status_code=403, detail="Not allowed to view this expense")

        return {"status": "success", "data": ExpenseOut.model_validate(expense).to_dict()}

    except HTTPException:
        raise
    except Exception as e:
        logger.exception(f"Error fetching expense {expense_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch expense")


@router.put("/{expense_id}")
async def update_expense(
    expense_id: int,
    payload: ExpenseUpdate,
    user: TokenUser = Depends(require_staff),
    db: Session = Depends(get_db)
):
    try:
        expense = get_or_404(db, Expense, expense_id, "Expense")
        _check_owner(expense, user)

        changes = payload.model_dump(exclude_unset=True)
        if changes.get("amount") is not None:
            changes["amount"] = to_money(changes["amount"])
        if changes.get("expense_date") is not None:
            changes["expense_date"] = to_naive_utc(changes["expense_date"])

        apply_changes(expense, changes)

        db.commit()
        db.refresh(expense)

        return {"status": "success", "data": ExpenseOut.model_validate(expense).to_dict()}

    except HTTPException:
        raise
    except Exception as e:
        db.rollback()
        logger.exception(f"Error updating expense {expense_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to update expense")


@router.delete("/{expense_id}")
async def delete_expense(expense_id: int, user: TokenUser = Depends(require_staff), db: Session = Depends(get_db)):
    try:
        expense = get_or_404(db, Expense, expense_id, "Expense")
        _check_owner(expense, user)

        db.delete(expense)
        db.commit()

        return {"status": "success", "message": "Expense deleted"}

    except HTTPException:
        raise
    except Exception as e:
        db.rollback()
        logger.exception(f"Error deleting expense {expense_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to delete expense")
