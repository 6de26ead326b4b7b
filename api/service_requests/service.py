"""
Service request business logic.

Scope:
- defaults on creation (status is always "Open", created date is now in UTC)
- sparse-patch updates with audit stamping
- read projections (all, by exact status)

Absence is reported as `None` / `False`, never as an exception. Unexpected
failures from the store propagate to the router.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from . import repository, schemas

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _to_response(row: dict) -> schemas.ServiceRequestResponse:
    return schemas.ServiceRequestResponse(
        id=int(row["id"]),
        title=str(row["title"]),
        description=row.get("description"),
        status=str(row["status"]),
        created_date=row["created_date"],
        created_by=str(row["created_by"]),
        updated_date=row.get("updated_date"),
        updated_by=str(row["updated_by"]),
    )


def _patched(current: str | None, incoming: str | None) -> str | None:
    # Empty and missing are the same thing: keep what is stored.
    return incoming if incoming else current


async def list_requests() -> list[schemas.ServiceRequestResponse]:
    rows = await repository.list_requests()
    return [_to_response(row) for row in rows]


async def list_requests_by_status(status: str) -> list[schemas.ServiceRequestResponse]:
    rows = await repository.list_requests_by_status(status)
    return [_to_response(row) for row in rows]


async def get_request(request_id: int) -> schemas.ServiceRequestResponse | None:
    row = await repository.get_request(request_id)
    if row is None:
        logger.warning("service_request_not_found id=%s", request_id)
        return None
    return _to_response(row)


async def create_request(payload: schemas.CreateServiceRequest) -> schemas.ServiceRequestResponse:
    row = await repository.insert_request(
        title=payload.title,
        description=payload.description,
        created_by=payload.created_by,
        status=schemas.STATUS_OPEN,
        created_date=_utc_now(),
    )
    logger.info("service_request_created id=%s created_by=%s", row["id"], payload.created_by)
    return _to_response(row)


async def update_request(
    request_id: int,
    patch: schemas.UpdateServiceRequest,
    *,
    acting_user: str,
) -> schemas.ServiceRequestResponse | None:
    """
    Apply a sparse patch to an existing request.

    `title`, `description` and `status` are overwritten only when the patch
    carries a non-empty value. `updated_date` and `updated_by` are stamped on
    every call, even when nothing else changes.
    """
    existing = await repository.get_request(request_id)
    if existing is None:
        logger.warning("service_request_not_found_for_update id=%s", request_id)
        return None

    row = await repository.update_request(
        request_id,
        title=_patched(existing["title"], patch.title),
        description=_patched(existing.get("description"), patch.description),
        status=_patched(existing["status"], patch.status),
        updated_date=_utc_now(),
        updated_by=acting_user,
    )
    if row is None:
        # Deleted between the read and the write.
        logger.warning("service_request_not_found_for_update id=%s", request_id)
        return None

    logger.info("service_request_updated id=%s updated_by=%s", request_id, acting_user)
    return _to_response(row)


async def delete_request(request_id: int) -> bool:
    deleted = await repository.delete_request(request_id)
    if not deleted:
        logger.warning("service_request_not_found_for_delete id=%s", request_id)
        return False
    logger.info("service_request_deleted id=%s", request_id)
    return True
