"""
Salesmen API Endpoints (admin)
Back-office accounts that ring up POS sales
"""
import logging

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException
from sqlalchemy import func
from sqlalchemy.orm import Session

from app.api.common import apply_changes
from app.core.auth import ROLE_SALESMAN, TokenUser, hash_password, require_admin
from app.core.database import get_db
from app.domain.pos import POSSale as POSSaleOut
from app.domain.user import Salesman as SalesmanOut, SalesmanCreate, SalesmanUpdate, password_error
from app.models import POSSale, User
from app.services.email_service import send_salesman_welcome

logger = logging.getLogger(__name__)

router = APIRouter()

RECENT_SALES_LIMIT = 10


def _sales_totals(db: Session) -> dict:
    """{salesman_id: (sale_count, revenue)} over sales that were not returned"""
    rows = (
        db.query(POSSale.salesman_id, func.count(POSSale.id), func.coalesce(func.sum(POSSale.total), 0))
        .filter(POSSale.is_returned.is_(False))
        .group_by(POSSale.salesman_id)
        .all()
    )
    return {salesman_id: (count, float(total or 0)) for salesman_id, count, total in rows}


def _get_salesman(db: Session, salesman_id: int) -> User:
    user = db.get(User, salesman_id)
    if user is None or user.role != ROLE_SALESMAN:
        raise HTTPException(status_code=404, detail="Salesman not found")
    return user


def _email_taken(db: Session, email: str, exclude_id: int = None) -> bool:
    query = db.query(User).filter(User.email == email)
    if exclude_id is not None:
        query = query.filter(User.id != exclude_id)
    return query.first() is not None


@router.get("")
async def list_salesmen(user: TokenUser = Depends(require_admin), db: Session = Depends(get_db)):
    try:
        salesmen = db.query(User).filter(User.role == ROLE_SALESMAN).order_by(User.created_at.desc(), User.id.desc()).all()
        totals = _sales_totals(db)

        data = []
        for salesman in salesmen:
            item = SalesmanOut.model_validate(salesman).to_dict()
            count, revenue = totals.get(salesman.id, (0, 0.0))
            item["total_sales"] = count
            item["total_revenue"] = revenue
            data.append(item)

        return {"status": "success", "data": data}

    except Exception as e:
        logger.exception(f"Error fetching salesmen: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch salesmen")


@router.post("", status_code=201)
async def create_salesman(
    payload: SalesmanCreate,
    background_tasks: BackgroundTasks,
    user: TokenUser = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """Create a salesman account and email the credentials"""
    try:
        error = password_error(payload.password)
        if error:
            raise HTTPException(status_code=400, detail=error)

        email = payload.email.lower()
        if _email_taken(db, email):
            raise HTTPException(status_code=400, detail="Email already in use")

        fields = payload.model_dump(exclude={"email", "password"})
        salesman = User(
            email=email,
            password_hash=hash_password(payload.password),
            role=ROLE_SALESMAN,
            is_active=True,
            **fields,
        )
        db.add(salesman)
        db.commit()
        db.refresh(salesman)
        logger.info(f"Salesman {salesman.id} ({email}) created by admin {user.id}")

        background_tasks.add_task(send_salesman_welcome, email, salesman.name, payload.password)

        return {"status": "success", "data": SalesmanOut.model_validate(salesman).to_dict()}

    except HTTPException:
        raise
    except Exception as e:
        db.rollback()
        logger.exception(f"Error creating salesman: {e}")
        raise HTTPException(status_code=500, detail="Failed to create salesman")


@router.get("/{salesman_id}")
async def get_salesman(salesman_id: int, user: TokenUser = Depends(require_admin), db: Session = Depends(get_db)):
    try:
        salesman = _get_salesman(db, salesman_id)
        sales = (
            db.query(POSSale)
            .filter(POSSale.salesman_id == salesman.id)
            .order_by(POSSale.created_at.desc(), POSSale.id.desc())
            .limit(RECENT_SALES_LIMIT)
            .all()
        )
        count, revenue = _sales_totals(db).get(salesman.id, (0, 0.0))

        data = SalesmanOut.model_validate(salesman).to_dict()
        data["total_sales"] = count
        data["total_revenue"] = revenue
        data["recent_sales"] = [POSSaleOut.model_validate(s).to_dict() for s in sales]

        return {"status": "success", "data": data}

    except HTTPException:
        raise
    except Exception as e:
        logger.exception(f"Error fetching salesman {salesman_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch salesman")


@router.put("/{salesman_id}")
async def update_salesman(
    salesman_id: int,
    payload: SalesmanUpdate,
    user: TokenUser = Depends(require_admin),
    db: Session = Depends(get_db)
):
    try:
        salesman = _get_salesman(db, salesman_id)
        changes = payload.model_dump(exclude_unset=True)

        email = changes.pop("email", None)
        if email:
            email = email.lower()
            if _email_taken(db, email, exclude_id=salesman.id):
                raise HTTPException(status_code=400, detail="Email already in use")
            salesman.email = email

        password = changes.pop("password", None)
        if password:
            error = password_error(password)
            if error:
                raise HTTPException(status_code=400, detail=error)
            salesman.password_hash = hash_password(password)

        apply_changes(salesman, changes)

        db.commit()
        db.refresh(salesman)

        return {"status": "success", "data": SalesmanOut.model_validate(salesman).to_dict()}

    except HTTPException:
        raise
    except Exception as e:
        db.rollback()
        logger.exception(f"Error updating salesman {salesman_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to update salesman")


@router.delete("/{salesman_id}")
async def delete_salesman(salesman_id: int, user: TokenUser = Depends(require_admin), db: Session = Depends(get_db)):
    """Delete the account, or only deactivate it when it has recorded sales"""
    try:
        salesman = _get_salesman(db, salesman_id)
        has_sales = db.query(POSSale.id).filter(POSSale.salesman_id == salesman.id).first() is not None

        if has_sales:
            salesman.is_active = False
            db.commit()
            return {"status": "success", "message": "Salesman has sales history and was deactivated"}

        db.delete(salesman)
        db.commit()
        return {"status": "success", "message": "Salesman deleted"}

    except HTTPException:
        raise
    except Exception as e:
        db.rollback()
        logger.exception(f"Error deleting salesman {salesman_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to delete salesman")
