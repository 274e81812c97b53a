"""
Authentication dependencies.

Tokens are issued elsewhere; this module only verifies the bearer JWT and
exposes the caller identity that every response-library query is scoped to.
"""
from datetime import datetime, timezone
from typing import Optional
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from answerbank.config import get_settings
from answerbank.utils.logger import get_logger

logger = get_logger(__name__)

# HTTP Bearer token scheme
security = HTTPBearer(auto_error=False)


def decode_access_token(token: str) -> Optional[dict]:
    """Verify and decode a JWT; None if it is invalid, expired or has no subject."""
    settings = get_settings()
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError as e:
        logger.warning(f"JWT verification failed: {e}")
        return None

    if not payload.get("sub"):
        logger.warning("Token has no subject")
        return None

    # jose checks exp itself when present; a token without exp is accepted
    token_type = payload.get("token_type", "access")
    if token_type != "access":
        logger.warning(f"Invalid token type: expected access, got {token_type}")
        return None
    return payload


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Optional[dict]:
    """
    FastAPI dependency to get current user (optional).

    Returns user information if authenticated, None otherwise.
    """
    if not credentials:
        return None

    payload = decode_access_token(credentials.credentials)
    if not payload:
        return None

    exp = payload.get("exp")
    return {
        "id": str(payload["sub"]),
        "email": payload.get("email"),
        "expires_at": datetime.fromtimestamp(exp, tz=timezone.utc) if exp else None,
    }


def get_current_user_required(
    current_user: Optional[dict] = Depends(get_current_user),
) -> dict:
    """
    FastAPI dependency to require authentication.

    Returns user information or raises 401 if not authenticated.
    """
    if not current_user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return current_user
