"""JSON API blueprints, mounted under /api/v1."""

from __future__ import annotations

from mms.blueprints.api.auth import auth_bp
from mms.blueprints.api.events import events_bp
from mms.blueprints.api.members import members_bp
from mms.blueprints.api.notifications import notifications_bp
from mms.blueprints.api.payments import payments_bp
from mms.blueprints.api.reports import reports_bp
from mms.blueprints.api.system import files_bp, system_bp
from mms.blueprints.api.zones import zones_bp

API_PREFIX = '/api/v1'


def register_api(app):
    """Register every resource blueprint under the API prefix."""
    app.register_blueprint(system_bp, url_prefix=API_PREFIX)
    app.register_blueprint(auth_bp, url_prefix=f'{API_PREFIX}/auth')
    app.register_blueprint(members_bp, url_prefix=f'{API_PREFIX}/members')
    app.register_blueprint(events_bp, url_prefix=f'{API_PREFIX}/events')
    app.register_blueprint(payments_bp, url_prefix=f'{API_PREFIX}/payments')
    app.register_blueprint(zones_bp, url_prefix=f'{API_PREFIX}/zones')
    app.register_blueprint(notifications_bp, url_prefix=f'{API_PREFIX}/notifications')
    app.register_blueprint(reports_bp, url_prefix=f'{API_PREFIX}/reports')
    public_url = app.config.get('PUBLIC_UPLOAD_URL', '/uploads')
    # Receipts behind an external URL are served by whatever hosts that URL
    if public_url.startswith('/'):
        app.register_blueprint(files_bp, url_prefix=public_url.rstrip('/'))
    return app


__all__ = ['API_PREFIX', 'register_api']
