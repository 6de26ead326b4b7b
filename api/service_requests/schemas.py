"""
Pydantic schemas for service request endpoints.

Wire names are camelCase (`createdBy`, `createdDate`, ...); request bodies
also accept the snake_case field names.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

STATUS_OPEN = "Open"
STATUS_IN_PROGRESS = "In Progress"
STATUS_CLOSED = "Closed"

DEFAULT_UPDATED_BY = "System"

TITLE_MAX_LENGTH = 100
STATUS_MAX_LENGTH = 50
USERNAME_MAX_LENGTH = 100


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CreateServiceRequest(_CamelModel):
    title: str = Field(..., min_length=1, max_length=TITLE_MAX_LENGTH)
    description: str | None = None
    created_by: str = Field(..., min_length=1, max_length=USERNAME_MAX_LENGTH)

    @field_validator("title", "created_by")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value


class UpdateServiceRequest(_CamelModel):
    """
    Sparse patch: a field that is missing or empty leaves the stored value alone.
    """

    title: str | None = Field(default=None, max_length=TITLE_MAX_LENGTH)
    description: str | None = None
    status: str | None = Field(default=None, max_length=STATUS_MAX_LENGTH)


class ServiceRequestResponse(_CamelModel):
    id: int
    title: str
    description: str | None = None
    status: str
    created_date: datetime
    created_by: str
    updated_date: datetime | None = None
    updated_by: str = DEFAULT_UPDATED_BY
