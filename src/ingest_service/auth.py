"""Bearer token authentication."""

from __future__ import annotations

import logging
from typing import Mapping

import jwt
from fastapi import Request

from .config import get_settings
from .errors import Unauthorized

logger = logging.getLogger(__name__)

JWT_ALGORITHM = "HS256"


def get_bearer_token(headers: Mapping[str, str]) -> str:
    """Extract the token from an ``Authorization: Bearer <token>`` header."""
    header = headers.get("authorization")
    if not header:
        raise Unauthorized("Authorization header is missing")

    scheme, _, token = header.partition(" ")
    token = token.strip()
    if scheme.lower() != "bearer" or not token:
        raise Unauthorized("Malformed authorization header")
    return token


def authenticate(token: str, secret: str) -> str:
    """
    Validate a signed access token and return the user ID it was issued to.

    Raises:
        Unauthorized: If the token is invalid, expired or has no subject.
    """
    try:
        claims = jwt.decode(
            token,
            secret,
            algorithms=[JWT_ALGORITHM],
            options={"require": ["sub", "exp"]},
        )
    except jwt.ExpiredSignatureError:
        raise Unauthorized("Token has expired")
    except jwt.InvalidTokenError as e:
        logger.info(f"Rejected token: {e}")
        raise Unauthorized("Invalid token")

    user_id = claims.get("sub")
    if not isinstance(user_id, str) or not user_id:
        raise Unauthorized("Invalid token")
    return user_id


async def require_user(request: Request) -> str:
    """FastAPI dependency resolving the authenticated user ID."""
    token = get_bearer_token(request.headers)
    return authenticate(token, get_settings().jwt_secret)
