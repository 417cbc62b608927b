from datetime import datetime
from pydantic import BaseModel, Field

from models.snag import SnagStatus


class SnagCreate(BaseModel):
    """Accepts the client's camelCase keys (assignedTo, image) as well as
    the column names."""
    title: str = Field(min_length=1, max_length=255)
    description: str | None = None
    assigned_to: str | None = Field(default=None, alias="assignedTo", max_length=100)
    status: SnagStatus | None = None
    image_url: str | None = Field(default=None, alias="image")

    model_config = {
        "populate_by_name": True,
    }


class SnagUpdate(BaseModel):
    title: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    assigned_to: str | None = Field(default=None, alias="assignedTo", max_length=100)
    status: SnagStatus | None = None
    image_url: str | None = Field(default=None, alias="image")

    model_config = {
        "populate_by_name": True,
    }


class SnagResponse(BaseModel):
    id: int
    project_id: int
    title: str
    description: str | None = None
    status: SnagStatus
    assigned_to: str | None = None
    image_url: str | None = None
    created_at: datetime | None = None

    model_config = {
        "from_attributes": True,
    }
