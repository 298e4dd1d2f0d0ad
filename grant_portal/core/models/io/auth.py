"""
Authentication I/O models.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class SignUpRequest(BaseModel):
    """Schema for creating an account."""

    email: str = Field(min_length=3, max_length=255)
    password: str = Field(min_length=6)
    first_name: Optional[str] = Field(default=None, max_length=255)
    last_name: Optional[str] = Field(default=None, max_length=255)


class SignInRequest(BaseModel):
    """Schema for password sign-in."""

    email: str
    password: str


class MessageResponse(BaseModel):
    """Plain acknowledgement returned by auth endpoints."""

    message: str
