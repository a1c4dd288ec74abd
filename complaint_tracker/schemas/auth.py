"""Pydantic schemas for registration and login."""

from pydantic import BaseModel

from complaint_tracker.models.identity import UserRole


class RegisterRequest(BaseModel):
    username: str | None = None
    email: str | None = None
    password: str | None = None
    full_name: str | None = None


class RegisterResponse(BaseModel):
    message: str
    userId: int


class LoginRequest(BaseModel):
    username: str | None = None
    password: str | None = None


class UserProfile(BaseModel):
    id: int
    username: str
    email: str
    full_name: str
    role: UserRole

    model_config = {"from_attributes": True}


class LoginResponse(BaseModel):
    token: str
    user: UserProfile
