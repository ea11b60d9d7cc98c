# app/utils/auth.py
"""
Bearer-token gate for mutating registry endpoints.
Tokens are HS256 JWTs carrying user_id, username, role and exp (the payload
the login endpoint issues). Read endpoints do not use this gate.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from app.config import settings
from app.exceptions import Unauthorized
from app.utils.logger import get_logger

logger = get_logger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def create_access_token(user_id: int, username: str, role: str,
                        expires_hours: Optional[int] = None) -> str:
    """Mint a token in the login payload shape. Used by tests and dev scripts."""
    hours = settings.ACCESS_TOKEN_EXPIRE_HOURS if expires_hours is None else expires_hours
    payload = {
        "user_id": user_id,
        "username": username,
        "role": role,
        "exp": datetime.now(timezone.utc) + timedelta(hours=hours),
    }
    return jwt.encode(payload, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def validate_token(token: str) -> Optional[dict]:
    """Returns the token claims if the signature and expiry check out, else None."""
    try:
        claims = jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except JWTError as e:
        logger.warning(f"[AUTH] Rejected bearer token: {e}")
        return None
    if claims.get("user_id") is None:
        logger.warning("[AUTH] Rejected bearer token: no user_id claim")
        return None
    return claims


def require_bearer_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> dict:
    """FastAPI dependency: 401 unless the request carries a valid bearer token."""
    if credentials is None or not credentials.credentials:
        logger.warning("[AUTH] Missing bearer token")
        raise Unauthorized()
    principal = validate_token(credentials.credentials)
    if principal is None:
        raise Unauthorized()
    return principal
