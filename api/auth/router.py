"""
Auth API endpoints.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from . import schemas, service

logger = logging.getLogger(__name__)

router = APIRouter()

LOGIN_PATH = "/login"
MALFORMED_LOGIN_MESSAGE = "Invalid login request."


def _failure(status_code: int, message: str) -> JSONResponse:
    body = schemas.AuthResponse(success=False, message=message)
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))


def malformed_login_response() -> JSONResponse:
    return _failure(status.HTTP_400_BAD_REQUEST, MALFORMED_LOGIN_MESSAGE)


@router.post(
    LOGIN_PATH,
    response_model=schemas.AuthResponse,
    response_model_exclude_none=True,
    responses={
        status.HTTP_400_BAD_REQUEST: {"model": schemas.AuthResponse},
        status.HTTP_401_UNAUTHORIZED: {"model": schemas.AuthResponse},
    },
)
async def login(request: schemas.LoginRequest):
    """
    Exchange a username and password for a bearer token valid for one hour.
    """
    try:
        return await service.login(request)
    except service.LoginRejected as exc:
        return _failure(exc.status_code, exc.message)
    except Exception:
        logger.exception("login_error username=%s", request.username)
        return _failure(status.HTTP_500_INTERNAL_SERVER_ERROR, "An error occurred during login.")
