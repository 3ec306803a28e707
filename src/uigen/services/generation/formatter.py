"""Optional source formatter.

Pipes generated source through prettier. Any failure raises
``FormatError``; the generation service keeps the unformatted text then.
"""

import logging
import shlex
import subprocess
from typing import List, Optional

from uigen.config.config_manager import GeneratorConfig, get_config
from uigen.services.service_base import FormatError

logger = logging.getLogger(__name__)

FORMAT_TIMEOUT = 20


class SourceFormatter:
    """Runs the configured prettier command over TSX source."""

    def __init__(self, config: Optional[GeneratorConfig] = None, timeout: int = FORMAT_TIMEOUT):
        self.config = config or get_config()
        self.timeout = timeout

    @property
    def enabled(self) -> bool:
        return self.config.format_enabled

    def command(self) -> List[str]:
        return [*shlex.split(self.config.formatter_command), '--parser', 'typescript']

    def format(self, source: str) -> str:
        """Return formatted ``source``; raises FormatError on any failure."""
        if not self.enabled:
            raise FormatError("Formatter disabled")
        cmd = self.command()
        try:
            result = subprocess.run(
                cmd,
                input=source,
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except FileNotFoundError as e:
            raise FormatError(f"Formatter not available: {cmd[0]}") from e
        except subprocess.TimeoutExpired as e:
            raise FormatError(f"Formatter timed out after {self.timeout}s") from e

        if result.returncode != 0:
            stderr = result.stderr.strip()
            raise FormatError(f"Formatter exited with {result.returncode}: {stderr[:400]}")
        if not result.stdout.strip():
            raise FormatError("Formatter produced no output")
        return result.stdout


def format_source(source: str, formatter: Optional[SourceFormatter] = None) -> str:
    """Best-effort formatting: the input is returned unchanged on FormatError."""
    formatter = formatter or SourceFormatter()
    if not formatter.enabled:
        logger.debug("Formatting disabled; returning source unchanged")
        return source
    try:
        return formatter.format(source)
    except FormatError as e:
        logger.warning(f"Skipping formatting: {e}")
        return source
