"""Application factory for the Membership Management System."""

from __future__ import annotations

import logging

from flask import Flask

from mms.blueprints.api import register_api
from mms.blueprints.api.errors import register_error_handlers
from mms.config import Config
from mms.extensions import db, limiter, migrate
from mms.security.config import configure_security_headers, validate_input_length


def create_app(config_class=Config):
    """Create Flask application."""
    app = Flask(__name__)
    app.config.from_object(config_class)
    app.json.sort_keys = False

    level = getattr(logging, str(app.config.get('LOG_LEVEL', 'INFO')).upper(), logging.INFO)
    logging.basicConfig(level=level, format='%(asctime)s %(levelname)s [%(name)s] %(message)s')
    app.logger.setLevel(level)

    # Initialize Flask extensions
    db.init_app(app)
    migrate.init_app(app, db)
    limiter.init_app(app)

    # Configure security
    configure_security_headers(app)
    validate_input_length(app)

    # Ensure models are registered for migrations
    import mms.models  # noqa: F401

    register_error_handlers(app)
    register_api(app)

    # Register CLI commands
    from mms.commands import register_commands
    register_commands(app)

    return app
