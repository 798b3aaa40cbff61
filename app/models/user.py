"""
User data models for authentication and user management.
"""

import re
from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Any, Dict, Optional

from app.utils.timeutils import isoformat_utc


# Permissive on purpose: the trailing "?" lets the empty string through,
# empty input is rejected by the required-field checks instead.
# \w is restricted to ASCII word characters.
EMAIL_PATTERN = re.compile(r"^([\w\-.]+@([\w-]+\.)+[\w-]{2,4})?$", re.ASCII)

NAME_MAX_LENGTH = 16


def _check_email(value: Optional[str]) -> Optional[str]:
    if value is None:
        return value
    value = value.strip()
    if not EMAIL_PATTERN.match(value):
        raise ValueError(f"{value} is not a valid email!")
    return value


def _check_name(value: Optional[str]) -> Optional[str]:
    if value is None:
        return value
    value = value.strip()
    if len(value) > NAME_MAX_LENGTH:
        raise ValueError(f"Name must be at most {NAME_MAX_LENGTH} characters")
    return value


class UserCreate(BaseModel):
    """Schema for user registration."""
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None

    @field_validator("email")
    @classmethod
    def valid_email(cls, value: Optional[str]) -> Optional[str]:
        return _check_email(value)

    @field_validator("name")
    @classmethod
    def valid_name(cls, value: Optional[str]) -> Optional[str]:
        return _check_name(value)


class UserLogin(BaseModel):
    """Schema for user login."""
    email: Optional[str] = None
    password: Optional[str] = None

    @field_validator("email")
    @classmethod
    def strip_email(cls, value: Optional[str]) -> Optional[str]:
        return value.strip() if value is not None else value


class ProfileUpdate(BaseModel):
    name: Optional[str] = None

    @field_validator("name")
    @classmethod
    def valid_name(cls, value: Optional[str]) -> Optional[str]:
        return _check_name(value)


class PasswordChange(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    current_password: Optional[str] = Field(None, alias="currentPassword")
    new_password: Optional[str] = Field(None, alias="newPassword")


class AuthResponse(BaseModel):
    """Returned by register and login."""
    success: bool = True
    message: str
    jwtToken: str
    email: str
    name: str


class TokenData(BaseModel):
    """Identity resolved from a verified token."""
    user_id: str
    email: str


def public_user(user: Dict[str, Any], include_created: bool = False) -> Dict[str, Any]:
    """User fields that are safe to send to the client."""
    data = {
        "_id": str(user["_id"]),
        "name": user.get("name"),
        "email": user["email"],
    }
    if include_created:
        data["createdAt"] = isoformat_utc(user.get("created_at"))
    return data
