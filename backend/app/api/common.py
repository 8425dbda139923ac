"""
Helpers shared by the API routers
"""
import math

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from app.core.auth import TokenUser
from app.models import User


def pagination(page: int, limit: int, total: int) -> dict:
    return {
        "page": page,
        "limit": limit,
        "total": total,
        "pages": math.ceil(total / limit) if limit else 0,
    }


def load_user(db: Session, token_user: TokenUser) -> User:
    """Fetch the account behind a session; 401 when it is gone or deactivated"""
    user = db.get(User, token_user.id)
    if user is None or not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Account not found or deactivated",
        )
    return user


def get_or_404(db: Session, model, object_id, label: str):
    obj = db.get(model, object_id)
    if obj is None:
        raise HTTPException(status_code=404, detail=f"{label} not found")
    return obj


def apply_changes(row, changes: dict) -> None:
    """Copy request fields onto an ORM row; null is ignored for NOT NULL columns"""
    columns = row.__table__.columns
    for field, value in changes.items():
        if value is None and field in columns and not columns[field].nullable:
            continue
        setattr(row, field, value)
