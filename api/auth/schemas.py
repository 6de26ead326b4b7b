"""
Auth API schemas (request/response models).
"""

from __future__ import annotations

from pydantic import BaseModel


class LoginRequest(BaseModel):
    # Both fields are optional at the schema level so that missing
    # credentials are answered with 400 by the login gate, not 422.
    username: str | None = None
    password: str | None = None


class AuthResponse(BaseModel):
    success: bool
    message: str
    token: str | None = None
    username: str | None = None
