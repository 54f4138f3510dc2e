"""
Admin authentication and guest-area rate limiting
"""

import secrets
import time
from collections import defaultdict
from typing import Dict, List, Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from wedding_planner.core.config import settings
from wedding_planner.utils.responses import rate_limit_error

security = HTTPBearer()

class RateLimiter:
    """Sliding-window request counter keyed by client IP"""

    def __init__(self, window_seconds: float = 60.0):
        self.window_seconds = window_seconds
        self.requests: Dict[str, List[float]] = defaultdict(list)

    def allow(self, client_ip: str, limit: Optional[int] = None) -> bool:
        if limit is None:
            limit = settings.RATE_LIMIT_PER_MINUTE

        now = time.time()
        recent = [t for t in self.requests[client_ip] if t > now - self.window_seconds]
        allowed = len(recent) < limit
        if allowed:
            recent.append(now)
        self.requests[client_ip] = recent
        return allowed

    def reset(self) -> None:
        self.requests.clear()

guest_rate_limiter = RateLimiter()

def verify_admin_token(credentials: HTTPAuthorizationCredentials = Depends(security)) -> str:
    """Router dependency for everything under /admin"""
    if not secrets.compare_digest(credentials.credentials, settings.ADMIN_TOKEN):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid admin token"
        )
    return credentials.credentials

def get_client_ip(request: Request) -> str:
    # Proxy headers win over the socket address
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()
    return request.headers.get("X-Real-IP") or (request.client.host if request.client else "unknown")

def enforce_rate_limit(request: Request) -> None:
    """Router dependency for the guest endpoints"""
    if not guest_rate_limiter.allow(get_client_ip(request)):
        rate_limit_error()
