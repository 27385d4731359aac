"""Bearer token authentication and role checks for API views."""

from __future__ import annotations

from functools import wraps
from typing import Iterable

from flask import g, request
from jose import JWTError

from mms.extensions import db
from mms.models import User, UserRole
from mms.responses import error_response
from mms.services.auth import auth_service


def _normalize_roles(roles: Iterable[UserRole | str]) -> set[str]:
    normalized: set[str] = set()
    for role in roles:
        if isinstance(role, UserRole):
            normalized.add(role.value)
        else:
            normalized.add(str(role))
    return normalized


def current_user() -> User | None:
    return getattr(g, 'current_user', None)


def token_required(view_func):
    """Resolve the bearer token into g.current_user or answer 401."""

    @wraps(view_func)
    def wrapped(*args, **kwargs):
        header = request.headers.get('Authorization', '')
        if not header.startswith('Bearer '):
            return error_response('Access denied. No token provided.', 401)

        token = header.split(' ', 1)[1].strip()
        try:
            claims = auth_service.decode_token(token)
        except JWTError:
            return error_response('Invalid or expired token.', 401)

        user = db.session.get(User, str(claims.get('id', '')))
        if user is None:
            return error_response('Invalid token. User not found.', 401)
        if not user.is_active:
            return error_response('Account is deactivated.', 401)

        g.current_user = user
        return view_func(*args, **kwargs)

    return wrapped


def roles_required(*roles: UserRole | str):
    """Ensure the authenticated user has one of the roles."""

    required = _normalize_roles(roles)

    def decorator(view_func):
        @wraps(view_func)
        def wrapped(*args, **kwargs):
            user = current_user()
            if user is None:
                return error_response('Authentication required.', 401)

            if required and not user.has_role(*required):
                return error_response('Access denied. Insufficient permissions.', 403)

            return view_func(*args, **kwargs)

        return wrapped

    return decorator


__all__ = ["token_required", "roles_required", "current_user"]
