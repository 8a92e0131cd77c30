import logging
import time
from typing import Any, Dict, Optional

import jwt
from fastapi import Header, HTTPException, Request, status

logger = logging.getLogger(__name__)

DEV_SECRET = "test-secret-key"
BEARER_PREFIX = "Bearer "


def generate_token(user_id: str, secret: Optional[str] = None, algorithm: str = "HS256") -> str:
    """Sign a token carrying `userId` (development and testing helper)."""
    payload = {"userId": user_id, "iat": int(time.time())}
    return jwt.encode(payload, secret or DEV_SECRET, algorithm=algorithm)


def decode_token(token: str, secret: Optional[str] = None, algorithm: str = "HS256") -> Dict[str, Any]:
    """
    Verify the token when a secret is configured, otherwise decode it without
    verifying the signature. Raises jwt.InvalidTokenError on malformed tokens.
    """
    if secret:
        return jwt.decode(token, secret, algorithms=[algorithm])
    return jwt.decode(token, options={"verify_signature": False})


def user_id_from_header(
    authorization: Optional[str], secret: Optional[str] = None, algorithm: str = "HS256"
) -> str:
    """Extract the user ID from an `Authorization: Bearer <token>` header value."""
    if not authorization or not authorization.startswith(BEARER_PREFIX):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing or invalid Authorization header. Expected format: Bearer <token>",
        )

    token = authorization[len(BEARER_PREFIX):]
    try:
        payload = decode_token(token, secret, algorithm)
    except jwt.InvalidTokenError as e:
        logger.warning(f"Rejected token: {e}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or malformed token",
        )

    user_id = payload.get("userId") if isinstance(payload, dict) else None
    if not user_id or not isinstance(user_id, str):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token: userId not found in token payload",
        )
    return user_id


def get_current_user_id(request: Request, authorization: Optional[str] = Header(None)) -> str:
    """FastAPI dependency returning the authenticated user ID."""
    settings = request.app.state.settings
    return user_id_from_header(authorization, settings.jwt_secret, settings.jwt_algorithm)
