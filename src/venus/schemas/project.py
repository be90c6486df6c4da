"""Pydantic schemas for projects.

Learn: Pydantic v2 models validate request/response data. Separate
"Create" schemas (input) from "Read" schemas (output) for clean APIs.
owner_id is never accepted from the client; it always comes from the
resolved identity.
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, Field


class ProjectCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)


class ProjectUpdate(BaseModel):
    content: dict[str, Any]
    name: Optional[str] = Field(None, min_length=1, max_length=255)


class ProjectSummary(BaseModel):
    id: str
    name: str

    model_config = {"from_attributes": True}


class ProjectRead(BaseModel):
    id: str
    name: str
    content: dict[str, Any]
    owner_id: int
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
