"""Pydantic schemas for user data validation."""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field

from components.user.models import Role


class UserBase(BaseModel):
    """Base user schema."""
    name: str = Field(..., min_length=1, max_length=100)
    email: str = Field(..., min_length=3, max_length=255)


class UserCreate(UserBase):
    """Schema for user registration."""
    password: str = Field(..., min_length=1)
    role: Role = Role.USUARIO


class UserRead(UserBase):
    """Schema for user response, never exposes the password hash."""
    id: int
    role: Role
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class LoginRequest(BaseModel):
    """Schema for login credentials."""
    email: str
    password: str


class Token(BaseModel):
    """Schema for login response."""
    token: str
    token_type: str = "bearer"
