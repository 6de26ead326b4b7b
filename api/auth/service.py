"""
Auth business logic: the login gate and access token resolution.

Credentials come from a static table that is read once when the process
starts. Passwords are compared as plaintext; there is no user store.
"""

from __future__ import annotations

import logging
import os
import secrets
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any

from fastapi import HTTPException, status

from . import schemas, security

logger = logging.getLogger(__name__)

DEFAULT_USERS = "admin:admin123,user:user123"
UNKNOWN_USER = "Unknown"

MISSING_CREDENTIALS_MESSAGE = "Username and password are required."
INVALID_CREDENTIALS_MESSAGE = "Invalid username or password."
LOGIN_SUCCESS_MESSAGE = "Login successful."


class LoginRejected(Exception):
    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.message = message


def parse_credentials(raw: str) -> dict[str, str]:
    """
    Parse `name:password,name:password` into a dict.

    Entries without a name or password are ignored. A password may itself
    contain `:` since only the first separator splits.
    """
    users: dict[str, str] = {}
    for entry in (raw or "").split(","):
        name, sep, password = entry.strip().partition(":")
        name = name.strip()
        if not sep or not name or not password:
            continue
        users[name] = password
    return users


def load_credentials() -> Mapping[str, str]:
    raw = os.environ.get("AUTH_USERS", "").strip() or DEFAULT_USERS
    return MappingProxyType(parse_credentials(raw))


CREDENTIALS: Mapping[str, str] = load_credentials()


def _password_matches(username: str, password: str, credentials: Mapping[str, str]) -> bool:
    expected = credentials.get(username)
    if expected is None:
        return False
    return secrets.compare_digest(expected.encode("utf-8"), password.encode("utf-8"))


async def login(
    payload: schemas.LoginRequest,
    *,
    credentials: Mapping[str, str] | None = None,
) -> schemas.AuthResponse:
    table = CREDENTIALS if credentials is None else credentials
    username = payload.username or ""
    password = payload.password or ""

    if not username or not password:
        logger.warning("login_rejected_missing_credentials username=%s", username)
        raise LoginRejected(status.HTTP_400_BAD_REQUEST, MISSING_CREDENTIALS_MESSAGE)

    if not _password_matches(username, password, table):
        # Same outcome for unknown user and wrong password.
        logger.warning("login_failed username=%s", username)
        raise LoginRejected(status.HTTP_401_UNAUTHORIZED, INVALID_CREDENTIALS_MESSAGE)

    token = security.build_access_token(username=username)
    logger.info("login_succeeded username=%s", username)
    return schemas.AuthResponse(
        success=True,
        message=LOGIN_SUCCESS_MESSAGE,
        token=token,
        username=username,
    )


def get_claims_from_access_token(access_token: str) -> dict[str, Any]:
    try:
        return security.decode_access_token(access_token)
    except security.AuthSecurityError as exc:
        logger.info("access_token_rejected reason=%s", exc)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token.",
            headers={"WWW-Authenticate": "Bearer"},
        ) from exc


def current_username(claims: Mapping[str, Any]) -> str:
    name = str(claims.get("name") or "").strip()
    return name or UNKNOWN_USER
