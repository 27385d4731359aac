"""Pydantic request schemas and shared validation helpers."""

from __future__ import annotations

from datetime import date, datetime
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, StringConstraints
from pydantic import ValidationError as PydanticValidationError

from mms.services.helpers import as_utc, utcnow

OBJECT_ID_PATTERN = r'^[0-9a-fA-F]{24}$'
PHONE_PATTERN = r'^\+?[\d\s\-()]+$'

ObjectId = Annotated[str, StringConstraints(strip_whitespace=True, pattern=OBJECT_ID_PATTERN)]
PhoneNumber = Annotated[str, StringConstraints(strip_whitespace=True, pattern=PHONE_PATTERN)]
SortOrder = Literal['asc', 'desc']


class RequestSchema(BaseModel):
    """Base for JSON bodies: unknown keys are rejected."""

    model_config = ConfigDict(extra='forbid', str_strip_whitespace=True)


class QuerySchema(BaseModel):
    """Base for query strings: unknown keys are ignored."""

    model_config = ConfigDict(extra='ignore', str_strip_whitespace=True)


class PageQuery(QuerySchema):
    page: int = Field(1, ge=1)
    limit: int = Field(10, ge=1, le=100)


def require_future(value: datetime | None, message: str) -> datetime | None:
    if value is None:
        return None
    value = as_utc(value)
    if value <= utcnow():
        raise ValueError(message)
    return value


def require_past(value: date | None, message: str) -> date | None:
    if value is not None and value > utcnow().date():
        raise ValueError(message)
    return value


def format_validation_error(exc: PydanticValidationError) -> str:
    """Join every field error into one comma separated message."""
    messages = []
    for error in exc.errors():
        field = '.'.join(str(part) for part in error.get('loc', ()))
        msg = error.get('msg', 'Invalid value')
        if msg.startswith('Value error, '):
            msg = msg[len('Value error, '):]
        messages.append(f"{field}: {msg}" if field else msg)
    return ', '.join(messages)


__all__ = [
    'OBJECT_ID_PATTERN',
    'PHONE_PATTERN',
    'ObjectId',
    'PhoneNumber',
    'SortOrder',
    'RequestSchema',
    'QuerySchema',
    'PageQuery',
    'PydanticValidationError',
    'require_future',
    'require_past',
    'format_validation_error',
]
