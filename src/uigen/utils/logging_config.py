"""
Centralized Logging Configuration
=================================

Provides a unified logging setup for the generation service with proper
log levels, colored console output and optional file rotation.
"""

import os
import sys
import logging
import warnings
from pathlib import Path
from typing import Optional
from logging.handlers import RotatingFileHandler

from colorama import init, Fore, Style

init(autoreset=True)


class ColoredSmartFormatter(logging.Formatter):
    """Formatter with color coding and shortened logger names."""

    def __init__(self, include_function: bool = False, use_colors: bool = True):
        self.include_function = include_function
        self.use_colors = use_colors
        super().__init__()

        self.level_colors = {
            logging.DEBUG: Fore.CYAN,
            logging.INFO: Fore.GREEN,
            logging.WARNING: Fore.YELLOW,
            logging.ERROR: Fore.RED,
            logging.CRITICAL: Fore.RED + Style.BRIGHT
        }

        # Pipeline stages get their own colors so a request can be followed by eye
        self.service_colors = {
            'factory': Fore.BLUE,
            'classifier': Fore.MAGENTA,
            'builders': Fore.CYAN,
            'synthesizer': Fore.CYAN,
            'repair': Fore.YELLOW,
            'api_client': Fore.GREEN,
            'route': Fore.BLUE,
        }

    def format(self, record: logging.LogRecord) -> str:
        """Format log record with color coding and contextual information."""
        timestamp = self.formatTime(record, '%H:%M:%S')
        level = record.levelname
        name = self._clean_logger_name(record.name)
        message = record.getMessage()
        if record.exc_info:
            message = f"{message}\n{self.formatException(record.exc_info)}"

        if self.use_colors:
            level_color = self.level_colors.get(record.levelno, "")
            service_color = self._get_service_color(name)
            colored_level = f"{level_color}{level:8}{Style.RESET_ALL}"
            colored_name = f"{service_color}{name:20}{Style.RESET_ALL}"
        else:
            colored_level = f"{level:8}"
            colored_name = f"{name:20}"

        if self.include_function and record.levelno >= logging.WARNING:
            location = f"{record.funcName}:{record.lineno}"
            if self.use_colors:
                location = f"{Fore.WHITE}{Style.DIM}[{location}]{Style.RESET_ALL}"
            else:
                location = f"[{location}]"
            return f"[{timestamp}] {colored_level} {colored_name} {location} {message}"
        return f"[{timestamp}] {colored_level} {colored_name} {message}"

    def _clean_logger_name(self, name: str) -> str:
        """Clean and shorten logger names for readability."""
        replacements = {
            'uigen.services.generation.': 'gen.',
            'uigen.services.': 'svc.',
            'uigen.routes.': 'route.',
            'uigen.utils.': 'util.',
            'uigen.': '',
        }

        for old, new in replacements.items():
            if name.startswith(old):
                name = new + name[len(old):]
                break

        if len(name) > 20:
            name = name[:17] + "..."

        return name

    def _get_service_color(self, service_name: str) -> str:
        """Get color for service based on name patterns."""
        if not self.use_colors:
            return ""

        name_lower = service_name.lower()
        for service, color in self.service_colors.items():
            if service in name_lower:
                return color
        return Fore.WHITE


class LoggingConfig:
    """Centralized logging configuration for the application."""

    def __init__(self, app_name: str = "uigen", log_dir: Optional[Path] = None):
        self.app_name = app_name
        self.log_dir = log_dir
        self.log_level = self._get_log_level()
        self.is_development = os.environ.get('FLASK_ENV', 'production') == 'development'

        self._configure_warnings()

    def setup_logging(self) -> logging.Logger:
        """Setup centralized logging configuration.

        Only handlers previously attached by this class (marked with the
        ``_uigen`` flag) are replaced, so pytest's caplog handler survives
        repeated setup calls.
        """
        root_logger = logging.getLogger()
        for h in list(root_logger.handlers):
            if getattr(h, "_uigen", False):
                root_logger.removeHandler(h)
        root_logger.setLevel(self.log_level)

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(self.log_level)
        console_handler.setFormatter(ColoredSmartFormatter(
            include_function=self.is_development,
            use_colors=True
        ))
        console_handler._uigen = True  # type: ignore[attr-defined]
        root_logger.addHandler(console_handler)

        if self.log_dir is not None:
            self.log_dir.mkdir(parents=True, exist_ok=True)
            file_handler = RotatingFileHandler(
                self.log_dir / "uigen.log",
                maxBytes=5 * 1024 * 1024,  # 5MB
                backupCount=3,
                encoding='utf-8'
            )
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(ColoredSmartFormatter(include_function=True, use_colors=False))
            file_handler._uigen = True  # type: ignore[attr-defined]
            root_logger.addHandler(file_handler)

        self._configure_specific_loggers()

        app_logger = logging.getLogger(self.app_name)
        app_logger.info(f"Logging configured - Level: {logging.getLevelName(self.log_level)}")
        return app_logger

    def _get_log_level(self) -> int:
        """Get log level from environment or default."""
        level_str = os.environ.get('LOG_LEVEL', 'INFO').upper()
        return getattr(logging, level_str, logging.INFO)

    def _configure_warnings(self):
        """Route Python warnings through logging."""
        warnings.filterwarnings('ignore', category=DeprecationWarning, module='aiohttp')
        logging.captureWarnings(True)
        logging.getLogger('py.warnings').setLevel(logging.ERROR)

    def _configure_specific_loggers(self):
        """Configure third-party loggers to reduce spam."""
        if not self.is_development:
            logging.getLogger('werkzeug').setLevel(logging.WARNING)
            logging.getLogger('flask.app').setLevel(logging.WARNING)
        logging.getLogger('aiohttp.access').setLevel(logging.WARNING)
        logging.getLogger('asyncio').setLevel(logging.WARNING)


# Global instance
_logging_config: Optional[LoggingConfig] = None


def get_logging_config() -> LoggingConfig:
    """Get the global logging configuration instance."""
    global _logging_config
    if _logging_config is None:
        log_dir = os.environ.get('UIGEN_LOG_DIR')
        _logging_config = LoggingConfig(log_dir=Path(log_dir) if log_dir else None)
    return _logging_config


def setup_application_logging() -> logging.Logger:
    """Setup application logging - call this once at startup."""
    return get_logging_config().setup_logging()


def get_logger(name: str) -> logging.Logger:
    """Get a logger with the specified name."""
    return logging.getLogger(f"uigen.{name}")
