"""
User Models
===========

Pydantic models for account registration, login and profile responses.
"""

import re
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator


PASSWORD_MIN_LENGTH = 6

EMAIL_REGEX = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")

# Client-facing message for each request field, used in 400 bodies
FIELD_MESSAGES = {
    "name": "Name is required",
    "email": "Please include a valid email",
    "password": f"Please choose a password with at least {PASSWORD_MIN_LENGTH} characters",
}


def normalize_email(value: str) -> str:
    """Strip and lower-case an email, rejecting anything that isn't one."""
    normalized = value.strip().lower()
    if not EMAIL_REGEX.match(normalized):
        raise ValueError(FIELD_MESSAGES["email"])
    return normalized


class LoginRequest(BaseModel):
    """Credentials submitted to POST /login."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "email": "jane@example.com",
                "password": "secret123"
            }
        }
    )

    email: str = Field(
        ...,
        description="Account email (case-insensitive)"
    )
    password: str = Field(
        ...,
        min_length=PASSWORD_MIN_LENGTH,
        description="Plain text password"
    )

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        return normalize_email(v)


class RegisterRequest(BaseModel):
    """Body of POST /register."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "name": "Jane Doe",
                "email": "jane@example.com",
                "password": "secret123"
            }
        }
    )

    name: str = Field(
        ...,
        description="Display name"
    )
    email: str = Field(
        ...,
        description="Account email, stored lower-cased"
    )
    password: str = Field(
        ...,
        min_length=PASSWORD_MIN_LENGTH,
        description="Plain text password, stored only as a bcrypt hash"
    )

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        return normalize_email(v)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError(FIELD_MESSAGES["name"])
        return v


class TokenResponse(BaseModel):
    """Response of register and login."""

    token: str = Field(
        ...,
        description="Signed token carrying the account id, valid for 5 days"
    )


class AccountPublic(BaseModel):
    """Account as returned to clients. Never includes the password hash."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., alias="_id", description="Account identifier")
    name: str
    email: str
    date: datetime = Field(..., description="Creation timestamp (UTC)")

    @classmethod
    def from_document(cls, document: dict) -> "AccountPublic":
        """Build from a raw MongoDB document, dropping the password."""
        return cls(
            id=str(document["_id"]),
            name=document["name"],
            email=document["email"],
            date=document["date"],
        )


class ErrorItem(BaseModel):
    msg: str
    param: str | None = None
    location: str | None = None


class ErrorResponse(BaseModel):
    """Body of every 4xx response: `{"errors": [{"msg": ...}]}`."""

    errors: list[ErrorItem]
