"""Pydantic schemas for uploaded images."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, computed_field


class ImageRead(BaseModel):
    id: str
    filename: str
    original_name: str
    mime_type: str
    size: int
    width: Optional[int] = None
    height: Optional[int] = None
    project_id: Optional[str] = None
    owner_id: int
    created_at: datetime

    model_config = {"from_attributes": True}

    @computed_field
    @property
    def url(self) -> str:
        return f"/api/images/{self.id}"
