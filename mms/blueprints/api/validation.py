"""Request validation decorators for the API views."""

from __future__ import annotations

import re
from functools import wraps
from typing import Any, Type

from flask import g, request
from pydantic import BaseModel

from mms.schemas import OBJECT_ID_PATTERN, PydanticValidationError, format_validation_error
from mms.services.errors import ValidationError

_OBJECT_ID_RE = re.compile(OBJECT_ID_PATTERN)


def _validate(schema: Type[BaseModel], payload: Any) -> BaseModel:
    try:
        return schema.model_validate(payload)
    except PydanticValidationError as exc:
        raise ValidationError(format_validation_error(exc)) from exc


def validate_body(schema: Type[BaseModel]):
    """Validate the JSON body against a schema and expose it as g.body."""

    def decorator(view_func):
        @wraps(view_func)
        def wrapped(*args, **kwargs):
            payload = request.get_json(silent=True)
            if not isinstance(payload, dict):
                raise ValidationError('Request body must be a JSON object')
            g.body = _validate(schema, payload)
            return view_func(*args, **kwargs)

        return wrapped

    return decorator


def validate_query(schema: Type[BaseModel]):
    """Validate query string arguments and expose them as g.query."""

    def decorator(view_func):
        @wraps(view_func)
        def wrapped(*args, **kwargs):
            g.query = _validate(schema, request.args.to_dict())
            return view_func(*args, **kwargs)

        return wrapped

    return decorator


def validate_object_ids(**labels: str):
    """Check that the named path arguments are 24 character hex IDs."""

    def decorator(view_func):
        @wraps(view_func)
        def wrapped(*args, **kwargs):
            for arg, label in labels.items():
                if not _OBJECT_ID_RE.match(str(kwargs.get(arg, ''))):
                    raise ValidationError(f"Invalid {label} ID format")
            return view_func(*args, **kwargs)

        return wrapped

    return decorator


def body_data(exclude_unset: bool = False) -> dict[str, Any]:
    """The validated body as a plain dict."""
    return g.body.model_dump(exclude_unset=exclude_unset)


def query_data() -> dict[str, Any]:
    return g.query.model_dump()


__all__ = [
    'validate_body',
    'validate_query',
    'validate_object_ids',
    'body_data',
    'query_data',
]
