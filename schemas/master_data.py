from typing import Any

from pydantic import BaseModel, Field


class MasterRecordPayload(BaseModel):
    """Free-form master record; the shape is checked per category by the service."""

    record: dict[str, Any] = Field(..., description="Record fields, e.g. {'name': 'NHAVA SHEVA'}")


class MasterAddResponse(BaseModel):
    category: str
    added: bool
    message: str
    records: list[dict[str, Any]]


class MasterListResponse(BaseModel):
    category: str
    records: list[dict[str, Any]]
    options: list[str]


class MasterCategoriesResponse(BaseModel):
    categories: list[str]
    fields: dict[str, list[str]]
