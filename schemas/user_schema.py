from datetime import datetime
from pydantic import BaseModel


class UserRegister(BaseModel):
    """Fields are optional here so that missing ones surface as a single
    "All fields are required" error from the credential store."""
    name: str | None = None
    email: str | None = None
    password: str | None = None


class UserResponse(BaseModel):
    id: int
    name: str
    email: str
    created_at: datetime | None = None

    model_config = {
        "from_attributes": True,
    }
