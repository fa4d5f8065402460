from __future__ import annotations

import logging
import os
import time
from typing import Any

import jwt

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"
ACCESS_TOKEN_TTL_SECONDS = 60 * 60 * 24 * 7


def _secret() -> str:
    return os.getenv("SECRET_KEY") or "dev-secret-change-me"


def create_token(user_id: int, ttl_seconds: int = ACCESS_TOKEN_TTL_SECONDS) -> str:
    issued_at = int(time.time())
    claims = {"sub": str(int(user_id)), "iat": issued_at, "exp": issued_at + int(ttl_seconds), "type": "access"}
    return jwt.encode(claims, _secret(), algorithm=ALGORITHM)


def decode_token(token: str) -> dict[str, Any] | None:
    try:
        claims = jwt.decode(token, _secret(), algorithms=[ALGORITHM])
    except jwt.ExpiredSignatureError:
        logger.info("jwt_expired")
        return None
    except jwt.InvalidTokenError:
        return None
    return claims if claims.get("type") == "access" else None


def get_bearer_token(auth_header: str | None) -> str | None:
    scheme, _, token = (auth_header or "").strip().partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def user_id_from_auth_header(auth_header: str | None) -> int | None:
    token = get_bearer_token(auth_header)
    claims = decode_token(token) if token else None
    if not claims:
        return None
    try:
        return int(claims["sub"])
    except (KeyError, TypeError, ValueError):
        return None
