"""Health probes and served receipt files."""

from __future__ import annotations

import os
import time

from flask import Blueprint, abort, current_app, send_file
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from mms.extensions import db
from mms.responses import success_response
from mms.services.uploads import upload_service

system_bp = Blueprint('system', __name__)
files_bp = Blueprint('files', __name__)

_STARTED_AT = time.monotonic()


@system_bp.route('/health', methods=['GET'])
def health():
    return success_response('Membership Management API is running', {
        'environment': os.getenv('FLASK_ENV', 'production'),
    })


@system_bp.route('/status', methods=['GET'])
def status():
    try:
        db.session.execute(text('SELECT 1'))
        database = 'connected'
    except SQLAlchemyError as exc:
        current_app.logger.error(f"Database status check failed: {exc}")
        db.session.rollback()
        database = 'disconnected'

    return success_response('API Status', {
        'services': {'database': database, 'api': 'running'},
        'uptime': round(time.monotonic() - _STARTED_AT, 3),
    })


@files_bp.route('/receipts/<path:filename>', methods=['GET'])
def receipt_file(filename):
    path = upload_service.resolve_receipt(filename)
    if path is None:
        abort(404)
    return send_file(path)
