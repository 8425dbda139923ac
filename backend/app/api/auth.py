"""
Authentication API Endpoints
Email/password accounts, session cookie and password reset

Author: DP Team
Date: 2025-06-02
"""
import logging
import secrets
from datetime import timedelta
from urllib.parse import urlencode

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Response
from sqlalchemy.orm import Session

from app.api.common import load_user
from app.core.auth import (
    ROLE_USER,
    TokenUser,
    create_session_token,
    get_current_user,
    hash_password,
    verify_password,
)
from app.core.config import settings
from app.core.database import get_db
from app.core.rate_limit import auth_rate_limit
from app.domain.user import (
    ForgotPasswordRequest,
    LoginRequest,
    RegisterRequest,
    ResetPasswordRequest,
    User as UserOut,
    VerifyResetTokenRequest,
    password_error,
)
from app.models import User
from app.models.common import utcnow
from app.services.email_service import send_password_reset

logger = logging.getLogger(__name__)

router = APIRouter()

RESET_REQUESTED_MESSAGE = "If an account with that email exists, we sent a password reset link."


def _set_session_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=token,
        httponly=True,
        secure=settings.SESSION_COOKIE_SECURE,
        samesite="lax",
        max_age=settings.SESSION_TTL_MINUTES * 60,
        path="/",
    )


def _find_valid_reset(db: Session, email: str, code: str):
    return (
        db.query(User)
        .filter(
            User.email == email.strip().lower(),
            User.reset_token == code,
            User.reset_token_expiry > utcnow(),
        )
        .first()
    )


@router.post("/register", status_code=201, dependencies=[Depends(auth_rate_limit)])
async def register(payload: RegisterRequest, db: Session = Depends(get_db)):
    """Create a customer account"""
    try:
        error = password_error(payload.password)
        if error:
            raise HTTPException(status_code=400, detail=error)

        if db.query(User.id).filter(User.email == payload.email).first():
            raise HTTPException(status_code=400, detail="An account with this email already exists")

        user = User(
            email=payload.email,
            name=payload.name,
            password_hash=hash_password(payload.password),
            role=ROLE_USER,
        )
        db.add(user)
        db.commit()
        db.refresh(user)

        logger.info(f"Registered user {user.id} ({user.email})")
        return {
            "status": "success",
            "message": "Account created successfully",
            "data": UserOut.model_validate(user).to_dict(),
        }

    except HTTPException:
        raise
    except Exception as e:
        logger.exception(f"Error registering {payload.email}: {e}")
        raise HTTPException(status_code=500, detail="Failed to create account")


@router.post("/login", dependencies=[Depends(auth_rate_limit)])
async def login(payload: LoginRequest, response: Response, db: Session = Depends(get_db)):
    """
    Verify credentials and open a session

    The session token is set as an HttpOnly cookie and also returned in the
    body for bearer-token clients.
    """
    try:
        user = db.query(User).filter(User.email == payload.email.strip().lower()).first()
        if user is None or not verify_password(payload.password, user.password_hash):
            raise HTTPException(status_code=401, detail="Invalid email or password")
        if not user.is_active:
            raise HTTPException(status_code=403, detail="This account has been deactivated")

        token = create_session_token(user.id, user.email, user.name, user.role)
        _set_session_cookie(response, token)

        return {
            "status": "success",
            "data": {
                "token": token,
                "user": UserOut.model_validate(user).to_dict(),
            },
        }

    except HTTPException:
        raise
    except Exception as e:
        logger.exception(f"Login error: {e}")
        raise HTTPException(status_code=500, detail="Failed to sign in")


@router.post("/logout")
async def logout(response: Response):
    response.delete_cookie(settings.SESSION_COOKIE_NAME, path="/")
    return {"status": "success", "message": "Signed out"}


@router.get("/me")
async def me(current: TokenUser = Depends(get_current_user), db: Session = Depends(get_db)):
    """Current session user"""
    user = load_user(db, current)
    return {"status": "success", "data": UserOut.model_validate(user).to_dict()}


@router.post("/forgot-password", dependencies=[Depends(auth_rate_limit)])
async def forgot_password(
    payload: ForgotPasswordRequest,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db)
):
    """
    Start a password reset

    Always answers with the same message so the endpoint cannot be used to
    discover which emails have accounts.
    """
    try:
        email = payload.email.strip().lower()
        if not email:
            raise HTTPException(status_code=400, detail="Email is required")

        user = db.query(User).filter(User.email == email).first()
        if user is not None:
            user.reset_token = secrets.token_hex(32)
            user.reset_token_expiry = utcnow() + timedelta(minutes=settings.RESET_TOKEN_TTL_MINUTES)
            db.commit()

            query = urlencode({"token": user.reset_token, "email": user.email})
            reset_url = f"{settings.APP_URL}/reset-password?{query}"
            background_tasks.add_task(send_password_reset, user.email, user.name, reset_url)

        return {"status": "success", "message": RESET_REQUESTED_MESSAGE}

    except HTTPException:
        raise
    except Exception as e:
        logger.exception(f"Forgot password error: {e}")
        raise HTTPException(status_code=500, detail="Failed to process request")


@router.post("/verify-reset-token")
async def verify_reset_token(payload: VerifyResetTokenRequest, db: Session = Depends(get_db)):
    if not payload.email or not payload.code:
        raise HTTPException(status_code=400, detail="Email and code are required")

    valid = _find_valid_reset(db, payload.email, payload.code) is not None
    return {"status": "success", "data": {"valid": valid}}


@router.post("/reset-password", dependencies=[Depends(auth_rate_limit)])
async def reset_password(payload: ResetPasswordRequest, db: Session = Depends(get_db)):
    try:
        if not payload.email or not payload.code:
            raise HTTPException(status_code=400, detail="Email, code, and password are required")
        error = password_error(payload.password)
        if error:
            raise HTTPException(status_code=400, detail=error)

        user = _find_valid_reset(db, payload.email, payload.code)
        if user is None:
            raise HTTPException(status_code=400, detail="Invalid or expired code")

        user.password_hash = hash_password(payload.password)
        user.reset_token = None
        user.reset_token_expiry = None
        db.commit()

        logger.info(f"Password reset for user {user.id}")
        return {"status": "success", "message": "Password reset successfully"}

    except HTTPException:
        raise
    except Exception as e:
        logger.exception(f"Reset password error: {e}")
        raise HTTPException(status_code=500, detail="Failed to reset password")
