"""
Auth security helpers: JWT access token issuing and verification.
"""

from __future__ import annotations

import os
from datetime import datetime, timedelta, timezone
from typing import Any

import jwt

JWT_ALGORITHM = "HS256"

# Tokens are valid for exactly one hour; verification uses no leeway.
ACCESS_TOKEN_TTL = timedelta(hours=1)

REQUIRED_CLAIMS = ["exp", "iat", "iss", "aud", "sub"]

# HS256 keys should be at least 32 bytes.
DEFAULT_JWT_SECRET = "dev-change-this-secret-before-deploying"


class AuthSecurityError(RuntimeError):
    pass


def jwt_secret() -> str:
    # Local default keeps development simple.
    # In production, set JWT_SECRET in environment.
    return os.environ.get("JWT_SECRET", DEFAULT_JWT_SECRET).strip() or DEFAULT_JWT_SECRET


def jwt_issuer() -> str:
    return os.environ.get("JWT_ISSUER", "service-request-api").strip() or "service-request-api"


def jwt_audience() -> str:
    return os.environ.get("JWT_AUDIENCE", "service-request-clients").strip() or "service-request-clients"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def build_access_token(*, username: str, issued_at: datetime | None = None) -> str:
    """
    Sign a token for an already authenticated username.

    The username is carried twice: `sub` is the name identifier and `name`
    is the identity name the record endpoints read as the acting user.
    """
    issued = issued_at or utc_now()
    if issued.tzinfo is None:
        issued = issued.replace(tzinfo=timezone.utc)
    expires = issued + ACCESS_TOKEN_TTL

    payload = {
        "sub": username,
        "name": username,
        "iss": jwt_issuer(),
        "aud": jwt_audience(),
        "iat": int(issued.timestamp()),
        "exp": int(expires.timestamp()),
    }
    return jwt.encode(payload, jwt_secret(), algorithm=JWT_ALGORITHM)


def decode_access_token(token: str) -> dict[str, Any]:
    raw = (token or "").strip()
    if not raw:
        raise AuthSecurityError("Access token is empty.")

    try:
        return jwt.decode(
            raw,
            jwt_secret(),
            algorithms=[JWT_ALGORITHM],
            audience=jwt_audience(),
            issuer=jwt_issuer(),
            leeway=0,
            options={"require": REQUIRED_CLAIMS},
        )
    except jwt.ExpiredSignatureError as exc:
        raise AuthSecurityError("Access token is expired.") from exc
    except jwt.InvalidTokenError as exc:
        raise AuthSecurityError("Invalid access token.") from exc
