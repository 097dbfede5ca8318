"""Access token validation for tokens issued by the hosted auth backend.

Supabase signs user access tokens with the project JWT secret using HS256.
The user id is carried in ``sub`` and the audience is ``authenticated``.
Uses python-jose for JWT encoding/decoding.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from fastapi import Request
from jose import JWTError, jwt

from ..config import get_settings

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"


def create_access_token(
    user_id: str,
    email: Optional[str] = None,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """Create a signed access token in the hosted backend's format.

    Args:
        user_id: Value for the ``sub`` claim.
        email: Optional email included in payload.
        expires_delta: Custom expiry. Falls back to config ``access_token_expire_minutes``.

    Returns:
        Encoded JWT string.
    """
    settings = get_settings()
    now = datetime.now(timezone.utc)
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.access_token_expire_minutes)

    payload: Dict[str, Any] = {
        "sub": user_id,
        "aud": settings.jwt_audience,
        "role": "authenticated",
        "iat": now,
        "exp": now + expires_delta,
    }
    if email:
        payload["email"] = email
    return jwt.encode(payload, settings.supabase_jwt_secret, algorithm=ALGORITHM)


def decode_token(token: str) -> Dict[str, Any]:
    """Decode and verify an access token.

    Raises:
        JWTError: If the signature, expiry or audience is invalid.
    """
    settings = get_settings()
    return jwt.decode(
        token,
        settings.supabase_jwt_secret,
        algorithms=[ALGORITHM],
        audience=settings.jwt_audience,
    )


def owner_from_token(token: str) -> Optional[str]:
    """Return the ``sub`` claim of a valid token, or None."""
    try:
        payload = decode_token(token)
    except JWTError as e:
        logger.debug("Rejected access token: %s", e)
        return None
    return payload.get("sub") or None


async def get_current_owner(request: Request) -> Optional[str]:
    """FastAPI dependency resolving the calling user's id.

    Returns None when no valid identity is presented. With auth disabled
    (local development) the ``X-User-Id`` header is trusted as-is.
    """
    settings = get_settings()
    if not settings.enable_auth:
        return request.headers.get("x-user-id") or None

    auth_header = request.headers.get("authorization", "")
    if not auth_header.startswith("Bearer "):
        return None
    return owner_from_token(auth_header[7:])
