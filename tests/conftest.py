import sys
from pathlib import Path

# Ensure the application package under src/ is importable when running tests
PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_PATH = PROJECT_ROOT / 'src'
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

import pytest

from uigen.config.config_manager import GeneratorConfig, reset_config
from uigen.services.generation.api_client import reset_api_client
from uigen.services.generation.service import reset_generation_service

GENERATOR_ENV_VARS = (
    'OPENAI_API_KEY',
    'OPENAI_MODEL',
    'OPENAI_BASE_URL',
    'UIGEN_ENV',
    'FLASK_ENV',
    'UIGEN_PRETTIER_CMD',
)


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch):
    """Every test starts offline, with formatting disabled and no cached singletons."""
    for var in GENERATOR_ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv('UIGEN_FORMAT', 'false')
    reset_config()
    reset_api_client()
    reset_generation_service()
    yield
    reset_config()
    reset_api_client()
    reset_generation_service()


@pytest.fixture
def offline_config():
    """Generator settings without an API key."""
    return GeneratorConfig(format_enabled=False)


@pytest.fixture
def online_config():
    """Generator settings with a (fake) API key."""
    return GeneratorConfig(
        openai_api_key='sk-test',
        openai_base_url='https://llm.test/v1/chat/completions',
        format_enabled=False,
    )


@pytest.fixture
def app():
    """Create application for the tests."""
    from uigen.factory import create_app

    app = create_app('testing')
    app.config.update({'TESTING': True})
    return app


@pytest.fixture
def client(app):
    """Create a test client."""
    return app.test_client()
