"""
User I/O models for API requests and responses.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from grant_portal.core.models.domain.enums import UserRoleName


class UserRead(BaseModel):
    """Schema for reading a user."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    profile_image_url: Optional[str] = None
    department: Optional[str] = None
    institution: Optional[str] = None
    phone: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class UserWithRoles(UserRead):
    """Schema for the signed-in user together with their roles."""

    roles: List[str] = Field(default_factory=list)


class ProfileUpdate(BaseModel):
    """Schema for a partial profile update."""

    email: Optional[str] = Field(default=None, max_length=255)
    first_name: Optional[str] = Field(default=None, max_length=255)
    last_name: Optional[str] = Field(default=None, max_length=255)
    department: Optional[str] = Field(default=None, max_length=255)
    institution: Optional[str] = Field(default=None, max_length=255)
    phone: Optional[str] = Field(default=None, max_length=64)


class RoleAssign(BaseModel):
    """Schema for assigning a role to a user."""

    role: UserRoleName


class UserRolesRead(BaseModel):
    """Schema listing the roles held by a user."""

    user_id: str
    roles: List[str]
