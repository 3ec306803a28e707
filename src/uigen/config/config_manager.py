"""
Centralized Configuration Manager
=================================

Generator settings read from environment variables. The app factory loads
``.env`` through python-dotenv before the first ``get_config()`` call.
"""

import os
from dataclasses import dataclass
from typing import Optional

DEFAULT_OPENAI_URL = "https://api.openai.com/v1/chat/completions"

_TRUE_VALUES = ('1', 'true', 'yes', 'on')


def _env_flag(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in _TRUE_VALUES


def _is_development() -> bool:
    env = os.environ.get('UIGEN_ENV') or os.environ.get('FLASK_ENV') or 'production'
    return env.lower() == 'development'


@dataclass
class GeneratorConfig:
    """Settings for the generation pipeline.

    Attributes:
        openai_api_key: Credential for the chat-completions service (None disables it)
        openai_model: Model identifier sent with each request
        openai_base_url: Full chat-completions endpoint URL
        temperature: Sampling temperature
        max_tokens: Maximum tokens per completion
        development: Attach stack traces to error responses
        format_enabled: Run the source formatter after repair
        formatter_command: Command line used to invoke prettier
        simple_word_limit: Word ceiling for the "simple form" heuristic
    """
    openai_api_key: Optional[str] = None
    openai_model: str = "gpt-4o-mini"
    openai_base_url: str = DEFAULT_OPENAI_URL
    temperature: float = 0.7
    max_tokens: int = 4000
    development: bool = False
    format_enabled: bool = True
    formatter_command: str = "npx --no-install prettier"
    simple_word_limit: int = 25

    @property
    def has_adapter(self) -> bool:
        """Check whether the external generation service is configured."""
        return bool(self.openai_api_key)

    @classmethod
    def from_env(cls) -> "GeneratorConfig":
        return cls(
            openai_api_key=os.environ.get('OPENAI_API_KEY') or None,
            openai_model=os.environ.get('OPENAI_MODEL', 'gpt-4o-mini'),
            openai_base_url=os.environ.get('OPENAI_BASE_URL', DEFAULT_OPENAI_URL),
            development=_is_development(),
            format_enabled=_env_flag('UIGEN_FORMAT', True),
            formatter_command=os.environ.get('UIGEN_PRETTIER_CMD', 'npx --no-install prettier'),
        )


# Global config instance
_config: Optional[GeneratorConfig] = None


def get_config() -> GeneratorConfig:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = GeneratorConfig.from_env()
    return _config


def reset_config() -> None:
    """Drop the cached configuration so the next call re-reads the environment."""
    global _config
    _config = None
