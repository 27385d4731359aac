from __future__ import annotations

import re

from pydantic import EmailStr, Field, field_validator

from mms.models import UserRole
from mms.schemas import RequestSchema

_PASSWORD_RE = re.compile(r'^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)')


class RegisterSchema(RequestSchema):
    name: str = Field(..., min_length=2, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=6)
    role: UserRole = UserRole.MEMBER

    @field_validator('role')
    @classmethod
    def member_role_only(cls, value: UserRole) -> UserRole:
        if value != UserRole.MEMBER:
            raise ValueError('Admin accounts cannot be created through public registration')
        return value

    @field_validator('password')
    @classmethod
    def password_strength(cls, value: str) -> str:
        if not _PASSWORD_RE.match(value):
            raise ValueError(
                'Password must contain at least one uppercase letter, one lowercase letter, and one number'
            )
        return value


class LoginSchema(RequestSchema):
    email: EmailStr
    password: str = Field(..., min_length=1)
