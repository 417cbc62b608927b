from datetime import datetime
from pydantic import BaseModel, Field


class ProjectBase(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    number: str | None = Field(default=None, max_length=100)
    location: str | None = None


class ProjectCreate(ProjectBase):
    """Client payload for creating a project. Owner is inferred from auth."""
    pass


class ProjectUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    number: str | None = Field(default=None, max_length=100)
    location: str | None = None


class ProjectResponse(ProjectBase):
    id: int
    user_id: int
    created_at: datetime | None = None

    model_config = {
        "from_attributes": True,
    }
