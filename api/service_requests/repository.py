"""
Service request persistence (raw SQL).

Collections are always returned newest first. The store does not validate
`status`; any non-empty string is accepted.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from core import db

_COLUMNS = "id, title, description, status, created_date, created_by, updated_date, updated_by"

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS service_requests (
    id integer GENERATED ALWAYS AS IDENTITY PRIMARY KEY,
    title varchar(100) NOT NULL,
    description text,
    status varchar(50) NOT NULL DEFAULT 'Open',
    created_date timestamptz NOT NULL DEFAULT now(),
    created_by varchar(100) NOT NULL,
    updated_date timestamptz,
    updated_by varchar(100) NOT NULL DEFAULT 'System'
);
CREATE INDEX IF NOT EXISTS ix_service_requests_status
    ON service_requests (status);
CREATE INDEX IF NOT EXISTS ix_service_requests_created_date
    ON service_requests (created_date);
"""


async def ensure_schema() -> None:
    await db.execute(SCHEMA_SQL)


async def insert_request(
    *,
    title: str,
    description: str | None,
    created_by: str,
    status: str,
    created_date: datetime,
) -> dict[str, Any]:
    row = await db.fetch_one(
        f"""
        INSERT INTO service_requests (title, description, status, created_date, created_by)
        VALUES ($1, $2, $3, $4, $5)
        RETURNING {_COLUMNS}
        """,
        title,
        description,
        status,
        created_date,
        created_by,
    )
    if row is None:
        raise RuntimeError("Failed to insert service request.")
    return row


async def get_request(request_id: int) -> dict[str, Any] | None:
    return await db.fetch_one(
        f"""
        SELECT {_COLUMNS}
        FROM service_requests
        WHERE id = $1
        """,
        request_id,
    )


async def list_requests() -> list[dict[str, Any]]:
    return await db.fetch_all(
        f"""
        SELECT {_COLUMNS}
        FROM service_requests
        ORDER BY created_date DESC, id DESC
        """
    )


async def list_requests_by_status(status: str) -> list[dict[str, Any]]:
    """
    Exact, case-sensitive match on `status`.
    """
    return await db.fetch_all(
        f"""
        SELECT {_COLUMNS}
        FROM service_requests
        WHERE status = $1
        ORDER BY created_date DESC, id DESC
        """,
        status,
    )


async def update_request(
    request_id: int,
    *,
    title: str,
    description: str | None,
    status: str,
    updated_date: datetime,
    updated_by: str,
) -> dict[str, Any] | None:
    return await db.fetch_one(
        f"""
        UPDATE service_requests
        SET title = $2,
            description = $3,
            status = $4,
            updated_date = $5,
            updated_by = $6
        WHERE id = $1
        RETURNING {_COLUMNS}
        """,
        request_id,
        title,
        description,
        status,
        updated_date,
        updated_by,
    )


async def delete_request(request_id: int) -> bool:
    row = await db.fetch_one(
        """
        DELETE FROM service_requests
        WHERE id = $1
        RETURNING id
        """,
        request_id,
    )
    return row is not None
