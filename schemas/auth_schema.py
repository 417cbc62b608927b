from pydantic import BaseModel
from schemas.user_schema import UserResponse


class IdentityClaim(BaseModel):
    """Identity carried inside a bearer token"""
    id: int
    name: str
    email: str


class LoginRequest(BaseModel):
    email: str | None = None
    password: str | None = None


class LoginResponse(BaseModel):
    token: str
    user: UserResponse
