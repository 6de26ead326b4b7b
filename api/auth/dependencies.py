"""
Auth dependencies for protected FastAPI routes.
"""

from __future__ import annotations

from fastapi import Depends, Header, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from . import service

_BEARER_CHALLENGE = {"WWW-Authenticate": "Bearer"}

# Registers the bearer scheme in the OpenAPI document. Errors stay ours, so
# it never rejects on its own.
bearer_scheme = HTTPBearer(bearerFormat="JWT", auto_error=False)


def _extract_bearer_token(authorization: str | None) -> str:
    raw = (authorization or "").strip()
    if not raw:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing Authorization header.",
            headers=_BEARER_CHALLENGE,
        )

    parts = raw.split(" ", 1)
    if len(parts) != 2:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid Authorization header format.",
            headers=_BEARER_CHALLENGE,
        )

    scheme, token = parts[0].strip().lower(), parts[1].strip()
    if scheme != "bearer" or not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authorization must be: Bearer <token>.",
            headers=_BEARER_CHALLENGE,
        )
    return token


async def get_bearer_token(
    authorization: str | None = Header(default=None),
    _: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> str:
    return _extract_bearer_token(authorization)


async def get_current_claims(access_token: str = Depends(get_bearer_token)) -> dict:
    return service.get_claims_from_access_token(access_token)


async def get_current_username(claims: dict = Depends(get_current_claims)) -> str:
    return service.current_username(claims)
