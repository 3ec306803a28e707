"""
Flask Application Factory
=========================
Factory pattern for creating Flask application instances with
proper initialization.
"""
import os
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import load_dotenv
from flask import Flask

from uigen.config.config_manager import get_config, reset_config
from uigen.paths import PROJECT_ROOT
from uigen.utils.logging_config import get_logger, setup_application_logging

logger = get_logger('factory')

CONFIGS: Dict[str, Dict[str, Any]] = {
    'default': {},
    'development': {'DEBUG': True, 'UIGEN_DEBUG': True},
    'testing': {'TESTING': True},
    'production': {},
}


def create_app(config_name: str = 'default', overrides: Optional[Dict[str, Any]] = None) -> Flask:
    """
    Create and configure Flask application.

    Args:
        config_name: Configuration environment name
        overrides: Extra ``app.config`` values (tests)

    Returns:
        Configured Flask application
    """
    # Load .env early so OPENAI_API_KEY & LOG_LEVEL are present
    env_path = Path(os.environ.get('UIGEN_ENV_FILE', PROJECT_ROOT / '.env'))
    if config_name != 'testing' and env_path.exists():
        load_dotenv(env_path, override=False)
        logger.info(f"Loaded .env from {env_path}")

    setup_application_logging()

    # Settings are read from the environment once per app
    reset_config()
    from uigen.services.generation.service import reset_generation_service
    reset_generation_service()
    generator_config = get_config()

    app = Flask(__name__)
    app.config.update(
        SECRET_KEY=os.environ.get('SECRET_KEY', 'dev-secret-key-change-in-production'),
        JSON_SORT_KEYS=False,
        UIGEN_DEBUG=generator_config.development,
    )
    app.config.update(CONFIGS.get(config_name, {}))
    if overrides:
        app.config.update(overrides)

    if generator_config.has_adapter:
        logger.info(f"Free-form generation enabled ({generator_config.openai_model})")
    else:
        logger.info("OPENAI_API_KEY not set; using rule-based generation only")

    from uigen.errors import register_error_handlers
    from uigen.routes import register_blueprints
    register_error_handlers(app)
    register_blueprints(app)

    logging.getLogger('werkzeug').setLevel(logging.WARNING)
    logger.info(f"Application created (config={config_name})")
    return app
