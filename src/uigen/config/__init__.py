"""Configuration package."""

from .config_manager import GeneratorConfig, get_config, reset_config

__all__ = ['GeneratorConfig', 'get_config', 'reset_config']
