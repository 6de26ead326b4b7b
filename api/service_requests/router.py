"""
Service request API endpoints.

Every route requires a bearer token. Unexpected failures are logged here
with their traceback and answered with a generic 500 message.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response, status

from auth import dependencies as auth_dependencies

from . import schemas, service

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/requests",
    dependencies=[Depends(auth_dependencies.get_current_claims)],
)


# Upper bound of the integer id column.
MAX_REQUEST_ID = 2_147_483_647


def _require_valid_id(request_id: int) -> None:
    if request_id <= 0 or request_id > MAX_REQUEST_ID:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid request ID.")


def _not_found(request_id: int) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"Request with ID {request_id} not found.",
    )


def _internal_error(message: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=message)


@router.get("", response_model=list[schemas.ServiceRequestResponse])
async def list_service_requests() -> list[schemas.ServiceRequestResponse]:
    """
    List all service requests, newest first.
    """
    try:
        return await service.list_requests()
    except Exception as exc:
        logger.exception("list_service_requests_failed")
        raise _internal_error("An error occurred while fetching requests.") from exc


@router.get("/filter/status", response_model=list[schemas.ServiceRequestResponse])
async def filter_service_requests_by_status(
    status_filter: str | None = Query(default=None, alias="status"),
) -> list[schemas.ServiceRequestResponse]:
    """
    List service requests whose status matches exactly (case-sensitive), newest first.
    """
    if not status_filter:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Status parameter is required.")
    try:
        return await service.list_requests_by_status(status_filter)
    except Exception as exc:
        logger.exception("filter_service_requests_failed status=%s", status_filter)
        raise _internal_error("An error occurred while fetching requests.") from exc


@router.get("/{request_id}", response_model=schemas.ServiceRequestResponse)
async def get_service_request(request_id: int) -> schemas.ServiceRequestResponse:
    _require_valid_id(request_id)
    try:
        found = await service.get_request(request_id)
    except Exception as exc:
        logger.exception("get_service_request_failed id=%s", request_id)
        raise _internal_error("An error occurred while fetching the request.") from exc
    if found is None:
        raise _not_found(request_id)
    return found


@router.post("", response_model=schemas.ServiceRequestResponse, status_code=status.HTTP_201_CREATED)
async def create_service_request(
    payload: schemas.CreateServiceRequest,
    request: Request,
    response: Response,
) -> schemas.ServiceRequestResponse:
    """
    Create a service request. Status always starts as "Open".
    """
    try:
        created = await service.create_request(payload)
    except Exception as exc:
        logger.exception("create_service_request_failed")
        raise _internal_error("An error occurred while creating the request.") from exc
    response.headers["Location"] = str(request.url_for("get_service_request", request_id=created.id))
    return created


@router.put("/{request_id}", response_model=schemas.ServiceRequestResponse)
async def update_service_request(
    request_id: int,
    patch: schemas.UpdateServiceRequest,
    acting_user: str = Depends(auth_dependencies.get_current_username),
) -> schemas.ServiceRequestResponse:
    """
    Sparse update: only non-empty fields overwrite stored values.
    """
    _require_valid_id(request_id)
    try:
        updated = await service.update_request(request_id, patch, acting_user=acting_user)
    except Exception as exc:
        logger.exception("update_service_request_failed id=%s", request_id)
        raise _internal_error("An error occurred while updating the request.") from exc
    if updated is None:
        raise _not_found(request_id)
    return updated


@router.delete("/{request_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_service_request(request_id: int) -> Response:
    _require_valid_id(request_id)
    try:
        deleted = await service.delete_request(request_id)
    except Exception as exc:
        logger.exception("delete_service_request_failed id=%s", request_id)
        raise _internal_error("An error occurred while deleting the request.") from exc
    if not deleted:
        raise _not_found(request_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
