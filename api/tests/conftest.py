from __future__ import annotations

from datetime import datetime, timezone
from types import MappingProxyType
from typing import Any

import pytest
from fastapi.testclient import TestClient

from auth import security
from auth import service as auth_service
from service_requests import repository

TEST_USERS = MappingProxyType({"admin": "admin123", "user": "user123"})


class InMemoryServiceRequestStore:
    """Stand-in for the asyncpg repository with the same async functions."""

    def __init__(self) -> None:
        self.rows: dict[int, dict[str, Any]] = {}
        self._next_id = 1

    def add(
        self,
        *,
        title: str,
        status: str = "Open",
        description: str | None = None,
        created_by: str = "admin",
        created_date: datetime | None = None,
    ) -> dict[str, Any]:
        row = {
            "id": self._next_id,
            "title": title,
            "description": description,
            "status": status,
            "created_date": created_date or datetime.now(timezone.utc),
            "created_by": created_by,
            "updated_date": None,
            "updated_by": "System",
        }
        self.rows[row["id"]] = row
        self._next_id += 1
        return dict(row)

    async def insert_request(
        self,
        *,
        title: str,
        description: str | None,
        created_by: str,
        status: str,
        created_date: datetime,
    ) -> dict[str, Any]:
        return self.add(
            title=title,
            description=description,
            created_by=created_by,
            status=status,
            created_date=created_date,
        )

    async def get_request(self, request_id: int) -> dict[str, Any] | None:
        row = self.rows.get(request_id)
        return dict(row) if row is not None else None

    def _newest_first(self, rows: list[dict[str, Any]]) -> list[dict[str, Any]]:
        ordered = sorted(rows, key=lambda r: (r["created_date"], r["id"]), reverse=True)
        return [dict(r) for r in ordered]

    async def list_requests(self) -> list[dict[str, Any]]:
        return self._newest_first(list(self.rows.values()))

    async def list_requests_by_status(self, status: str) -> list[dict[str, Any]]:
        return self._newest_first([r for r in self.rows.values() if r["status"] == status])

    async def update_request(
        self,
        request_id: int,
        *,
        title: str,
        description: str | None,
        status: str,
        updated_date: datetime,
        updated_by: str,
    ) -> dict[str, Any] | None:
        row = self.rows.get(request_id)
        if row is None:
            return None
        row.update(
            title=title,
            description=description,
            status=status,
            updated_date=updated_date,
            updated_by=updated_by,
        )
        return dict(row)

    async def delete_request(self, request_id: int) -> bool:
        return self.rows.pop(request_id, None) is not None


@pytest.fixture(autouse=True)
def credentials(monkeypatch: pytest.MonkeyPatch) -> MappingProxyType:
    monkeypatch.setattr(auth_service, "CREDENTIALS", TEST_USERS)
    return TEST_USERS


@pytest.fixture(autouse=True)
def jwt_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("JWT_SECRET", "test-secret-value-that-is-long-enough")
    monkeypatch.setenv("JWT_ISSUER", "test-issuer")
    monkeypatch.setenv("JWT_AUDIENCE", "test-audience")


@pytest.fixture
def store(monkeypatch: pytest.MonkeyPatch) -> InMemoryServiceRequestStore:
    fake = InMemoryServiceRequestStore()
    for name in (
        "insert_request",
        "get_request",
        "list_requests",
        "list_requests_by_status",
        "update_request",
        "delete_request",
    ):
        monkeypatch.setattr(repository, name, getattr(fake, name))
    return fake


@pytest.fixture
def client() -> TestClient:
    import main

    # Not used as a context manager, so the lifespan (DB pool) never runs.
    return TestClient(main.app)


@pytest.fixture
def auth_headers() -> dict[str, str]:
    token = security.build_access_token(username="admin")
    return {"Authorization": f"Bearer {token}"}
