"""
Authentication for the storefront API
Issues and validates session JWTs and provides user context to routes
"""
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from passlib.context import CryptContext
from pydantic import BaseModel

from app.core.config import settings


# Security scheme for bearer tokens (the session cookie is checked as a fallback)
security = HTTPBearer(auto_error=False)

# Password hashing context (bcrypt, 12 rounds)
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=12)

ROLE_ADMIN = "ADMIN"
ROLE_SALESMAN = "SALESMAN"
ROLE_USER = "USER"

# Role hierarchy: ADMIN > SALESMAN > USER
ROLE_HIERARCHY = {
    ROLE_ADMIN: 3,
    ROLE_SALESMAN: 2,
    ROLE_USER: 1,
}


class TokenUser(BaseModel):
    """User data extracted from the session token"""
    id: int
    email: str
    name: Optional[str] = None
    role: str = ROLE_USER

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN

    @property
    def is_salesman(self) -> bool:
        return self.role == ROLE_SALESMAN


def hash_password(password: str) -> str:
    """Hash a plain-text password"""
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: Optional[str]) -> bool:
    """Check a plain-text password against a stored hash"""
    if not password_hash:
        return False
    return pwd_context.verify(password, password_hash)


def create_session_token(user_id: int, email: str, name: Optional[str], role: str) -> str:
    """
    Create a signed session token.

    Payload:
    {
        "sub": "42",
        "id": 42,
        "email": "admin@doctorplanet.com",
        "name": "Admin",
        "role": "ADMIN",
        "iat": 1234567890,
        "exp": 1234567890
    }
    """
    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(user_id),
        "id": user_id,
        "email": email,
        "name": name,
        "role": role,
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(minutes=settings.SESSION_TTL_MINUTES)).timestamp()),
    }
    return jwt.encode(payload, settings.AUTH_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_session_token(token: str) -> dict:
    """Decode and validate a session token"""
    try:
        return jwt.decode(
            token,
            settings.AUTH_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
            options={"verify_aud": False}
        )
    except JWTError as e:
        error_msg = str(e).lower()
        if "expired" in error_msg:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Session has expired",
                headers={"WWW-Authenticate": "Bearer"}
            )
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid session token",
            headers={"WWW-Authenticate": "Bearer"}
        )


def _extract_token(request: Request, credentials: Optional[HTTPAuthorizationCredentials]) -> Optional[str]:
    if credentials:
        return credentials.credentials
    return request.cookies.get(settings.SESSION_COOKIE_NAME)


def _user_from_payload(payload: dict) -> Optional[TokenUser]:
    user_id = payload.get("id") or payload.get("sub")
    email = payload.get("email")

    if not user_id or not email:
        return None

    return TokenUser(
        id=int(user_id),
        email=email,
        name=payload.get("name"),
        role=payload.get("role", ROLE_USER)
    )


async def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> TokenUser:
    """
    Dependency that extracts and validates the current user.

    Usage:
        @router.get("/protected")
        async def protected_route(user: TokenUser = Depends(get_current_user)):
            return {"message": f"Hello {user.email}"}
    """
    token = _extract_token(request, credentials)
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
            headers={"WWW-Authenticate": "Bearer"}
        )

    user = _user_from_payload(decode_session_token(token))
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token payload: missing user id or email",
            headers={"WWW-Authenticate": "Bearer"}
        )

    return user


async def get_current_user_optional(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> Optional[TokenUser]:
    """Optional authentication - returns None if no valid session is present"""
    token = _extract_token(request, credentials)
    if not token:
        return None

    try:
        return _user_from_payload(decode_session_token(token))
    except HTTPException:
        return None


def require_role(required_role: str):
    """
    Dependency factory for role-based access control.

    Usage:
        @router.delete("/shops/{shop_id}")
        async def delete_shop(
            shop_id: int,
            user: TokenUser = Depends(require_role("ADMIN"))
        ):
            # Only admins can delete shops
            pass
    """
    async def role_checker(
        user: TokenUser = Depends(get_current_user)
    ) -> TokenUser:
        user_level = ROLE_HIERARCHY.get(user.role, 0)
        required_level = ROLE_HIERARCHY.get(required_role, 0)

        if user_level < required_level:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Access denied. Required role: {required_role}, your role: {user.role}"
            )

        return user

    return role_checker


# Convenience dependencies for common role requirements
require_admin = require_role(ROLE_ADMIN)
require_staff = require_role(ROLE_SALESMAN)
require_user = require_role(ROLE_USER)
