"""
Rate limiting for the storefront API

Sliding one-minute windows kept in process memory:
- signed-in sessions (bearer token or session cookie): RATE_LIMIT_AUTHENTICATED
- anonymous clients, keyed by IP: RATE_LIMIT_UNAUTHENTICATED
- credential endpoints (login, register, password reset): RATE_LIMIT_AUTH_ENDPOINTS per IP
"""
import hashlib
import time
from collections import deque
from typing import Deque, Dict, NamedTuple

from fastapi import HTTPException, Request, status
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse

from app.core.config import settings

WINDOW_SECONDS = 60

# Never limited
EXEMPT_PATHS = {"/", "/health", "/docs", "/openapi.json", "/redoc"}


class Verdict(NamedTuple):
    allowed: bool
    limit: int
    remaining: int
    retry_after: int

    def headers(self) -> Dict[str, str]:
        headers = {"X-RateLimit-Limit": str(self.limit), "X-RateLimit-Remaining": str(self.remaining)}
        if not self.allowed:
            headers["Retry-After"] = str(self.retry_after)
        return headers


class RateLimiter:
    """
    Per-key request timestamps, trimmed to the window on every hit.

    Counts are per process; each worker enforces its own window.
    """

    def __init__(self, window_seconds: int = WINDOW_SECONDS, sweep_every: int = 60):
        self.window_seconds = window_seconds
        self.sweep_every = sweep_every
        self._hits: Dict[str, Deque[float]] = {}
        self._last_sweep = time.monotonic()

    def _sweep(self, now: float) -> None:
        """Drop keys whose whole history fell out of the window"""
        if now - self._last_sweep < self.sweep_every:
            return
        horizon = now - self.window_seconds
        for key in [k for k, hits in self._hits.items() if not hits or hits[-1] <= horizon]:
            del self._hits[key]
        self._last_sweep = now

    def hit(self, key: str, limit: int) -> Verdict:
        """Record one request for `key` unless it is already at `limit`"""
        now = time.monotonic()
        self._sweep(now)

        hits = self._hits.setdefault(key, deque())
        horizon = now - self.window_seconds
        while hits and hits[0] <= horizon:
            hits.popleft()

        if len(hits) >= limit:
            retry_after = int(hits[0] + self.window_seconds - now) + 1
            return Verdict(False, limit, 0, retry_after)

        hits.append(now)
        return Verdict(True, limit, limit - len(hits), 0)

    def reset(self):
        """Forget every tracked request"""
        self._hits.clear()


rate_limiter = RateLimiter()


def _client_ip(request: Request) -> str:
    # First hop of X-Forwarded-For is the original client behind a proxy
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


def _session_key(request: Request) -> str:
    """Hash of the bearer token or session cookie, empty when anonymous"""
    auth_header = request.headers.get("Authorization", "")
    if auth_header.startswith("Bearer "):
        token = auth_header[len("Bearer "):]
    else:
        token = request.cookies.get(settings.SESSION_COOKIE_NAME)
    return hashlib.sha256(token.encode()).hexdigest()[:32] if token else ""


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Apply the session or IP limit to every request and report it in X-RateLimit-* headers"""

    async def dispatch(self, request: Request, call_next):
        if request.method == "OPTIONS" or request.url.path in EXEMPT_PATHS:
            return await call_next(request)

        session = _session_key(request)
        if session:
            verdict = rate_limiter.hit(f"session:{session}", settings.RATE_LIMIT_AUTHENTICATED)
        else:
            verdict = rate_limiter.hit(f"ip:{_client_ip(request)}", settings.RATE_LIMIT_UNAUTHENTICATED)

        if not verdict.allowed:
            # A response, not an exception, so CORS headers are still added
            return JSONResponse(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                content={"detail": "Rate limit exceeded. Please slow down."},
                headers=verdict.headers(),
            )

        response = await call_next(request)
        response.headers.update(verdict.headers())
        return response


async def auth_rate_limit(request: Request):
    """
    Dependency for credential endpoints

    Usage:
        @router.post("/login", dependencies=[Depends(auth_rate_limit)])
    """
    verdict = rate_limiter.hit(
        f"auth:{request.url.path}:{_client_ip(request)}", settings.RATE_LIMIT_AUTH_ENDPOINTS
    )
    if not verdict.allowed:
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail=f"Too many attempts. Try again in {verdict.retry_after} seconds.",
            headers=verdict.headers(),
        )
