#!/usr/bin/env python3
"""Server runner for the Membership Management System."""

import logging
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

logger = logging.getLogger('mms.serve')


def setup_environment():
    """Set up the server environment."""
    project_root = Path(__file__).parent
    env_file = project_root / '.env'
    if env_file.exists():
        load_dotenv(env_file)
        logger.info('Loaded environment from %s', env_file)
    else:
        logger.info('No .env file found at %s', env_file)

    os.environ.setdefault('FLASK_APP', 'mms:create_app')


def install_excepthook():
    """Log uncaught exceptions and exit non-zero so the process manager restarts us."""

    def handle(exc_type, exc_value, exc_traceback):
        if issubclass(exc_type, KeyboardInterrupt):
            sys.__excepthook__(exc_type, exc_value, exc_traceback)
            return
        logger.critical('Uncaught exception', exc_info=(exc_type, exc_value, exc_traceback))
        logging.shutdown()
        os._exit(1)

    sys.excepthook = handle


def initialize_database(app):
    """Create missing tables when running without migrations."""
    from mms.extensions import db

    with app.app_context():
        db.create_all()
        logger.info('Database ready: %s', app.config['SQLALCHEMY_DATABASE_URI'])


def main():
    logging.basicConfig(level=logging.INFO, format='%(asctime)s %(levelname)s [%(name)s] %(message)s')
    install_excepthook()
    setup_environment()

    from mms import create_app

    app = create_app()
    if os.getenv('MMS_CREATE_TABLES', '1') == '1':
        initialize_database(app)

    host = os.getenv('HOST', '0.0.0.0')
    port = int(os.getenv('PORT', '5000'))
    debug = os.getenv('FLASK_DEBUG', '0') == '1'

    logger.info('Starting Membership Management System on %s:%s (debug=%s)', host, port, debug)
    app.run(host=host, port=port, debug=debug, use_reloader=debug)


if __name__ == '__main__':
    main()
