"""
Main Application Entry Point
===========================

Runs the generation API with Flask's built-in server.
"""

import os
import sys

from uigen.factory import create_app
from uigen.utils.logging_config import get_logger

logger = get_logger('main')


def main() -> int:
    """Main application entry point."""
    config_name = os.environ.get('UIGEN_ENV') or os.environ.get('FLASK_ENV', 'development')
    port = int(os.environ.get('PORT', 5000))
    host = os.environ.get('HOST', '127.0.0.1')
    debug = os.environ.get('DEBUG', 'false').lower() == 'true'

    app = create_app(config_name)
    logger.info(f"Starting uigen in {config_name} mode on {host}:{port}")
    print(
        "uigen - prompt-to-UI generation\n"
        f"Environment: {config_name} | Debug: {debug}\n"
        f"Host: {host} | Port: {port}\n"
        "Endpoints: POST /api/generate, GET /api/health\n"
    )

    try:
        app.run(host=host, port=port, debug=debug, use_reloader=False)
    except KeyboardInterrupt:
        logger.info("Application shutdown requested by user")
    return 0


if __name__ == '__main__':
    sys.exit(main())
