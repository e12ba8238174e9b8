"""Pydantic schemas for registration, login and the caller's identity."""
import re
import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from tlearn.models.user import Role

# Simple, practical email check
EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


class RegisterSchema(BaseModel):
    username: str = Field(min_length=1, max_length=64)
    email: str = Field(max_length=255)
    password: str = Field(min_length=1, max_length=1024)

    @field_validator("username")
    @classmethod
    def _strip_username(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("username must not be blank")
        return value

    @field_validator("email")
    @classmethod
    def _check_email(cls, value: str) -> str:
        value = value.strip().lower()
        if not EMAIL_RE.match(value):
            raise ValueError("invalid email address")
        return value


class LoginSchema(BaseModel):
    username: str = Field(min_length=1)
    password: str = Field(min_length=1)


class UserOutSchema(BaseModel):
    """Registration response; the password hash never leaves the server."""

    id: uuid.UUID
    created_at: datetime
    updated_at: datetime
    email: str
    username: str

    model_config = ConfigDict(from_attributes=True)


class LoginUserSchema(BaseModel):
    id: uuid.UUID
    username: str


class LoginOutSchema(BaseModel):
    token: str
    user: LoginUserSchema


class ApiKeyOutSchema(BaseModel):
    api_key: str


class MeOutSchema(BaseModel):
    id: uuid.UUID
    username: str
    email: str
    role: Role
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
