"""The JSON envelope every API response is wrapped in."""

from __future__ import annotations

from typing import Any

from flask import jsonify

from mms.services.helpers import utcnow


def format_response(success: bool, message: str, data: Any = None, meta: Any = None) -> dict[str, Any]:
    response = {
        'success': success,
        'message': message,
        'timestamp': utcnow().isoformat(timespec='milliseconds').replace('+00:00', 'Z'),
    }
    if data is not None:
        response['data'] = data
    if meta is not None:
        response['meta'] = meta
    return response


def success_response(message: str, data: Any = None, status: int = 200, meta: Any = None):
    return jsonify(format_response(True, message, data, meta)), status


def error_response(message: str, status: int):
    return jsonify(format_response(False, message)), status


__all__ = ['format_response', 'success_response', 'error_response']
