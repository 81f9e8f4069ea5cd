"""
Authentication module for Supabase JWT validation.
Provides FastAPI dependencies for securing endpoints.

Supabase access tokens are HS256 JWTs signed with the project's JWT secret
and carry aud="authenticated"; the user id is the "sub" claim.
"""
import logging
from typing import Optional

import jwt
from fastapi import Depends, Header, HTTPException

from backend.settings import Settings, get_settings

logger = logging.getLogger(__name__)

SUPABASE_JWT_ALGORITHM = "HS256"
SUPABASE_JWT_AUDIENCE = "authenticated"


async def get_current_user(
    authorization: Optional[str] = Header(None),
    settings: Settings = Depends(get_settings),
) -> str:
    """
    Authenticate via Supabase JWT.
    Returns user_id string.

    Usage:
        @app.get("/protected")
        async def protected_route(user_id: str = Depends(get_current_user)):
            return {"user_id": user_id}
    """
    if not authorization:
        raise HTTPException(
            status_code=401,
            detail="Missing authentication. Provide Authorization header."
        )

    return validate_jwt(authorization, settings.supabase_jwt_secret)


def validate_jwt(authorization: str, secret: Optional[str]) -> str:
    """Validate a "Bearer <token>" header and return the user id."""
    if not authorization.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="Invalid authorization header format")

    if not secret:
        raise HTTPException(
            status_code=500,
            detail="JWT validation not configured (missing SUPABASE_JWT_SECRET)"
        )

    token = authorization.split(" ", 1)[1]
    return validate_supabase_jwt(token, secret)


def validate_supabase_jwt(token: str, secret: str) -> str:
    """Validate a Supabase access token (HS256) and return user_id."""
    try:
        payload = jwt.decode(
            token,
            secret,
            algorithms=[SUPABASE_JWT_ALGORITHM],
            audience=SUPABASE_JWT_AUDIENCE,
        )
    except jwt.ExpiredSignatureError:
        raise HTTPException(status_code=401, detail="Token expired")
    except jwt.InvalidTokenError as e:
        logger.warning(f"Invalid Supabase JWT: {e}")
        raise HTTPException(status_code=401, detail="Invalid token")

    user_id = payload.get("sub")
    if not user_id:
        raise HTTPException(status_code=401, detail="Token missing user ID")

    logger.debug(f"Supabase JWT validated for user: {user_id}")
    return user_id
