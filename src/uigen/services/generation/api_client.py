"""API Client for OpenAI-compatible chat completions
===================================================

Minimal adapter for the free-form generation route.

Features:
- Single async HTTP call with aiohttp (no retries)
- Markdown code fences stripped from the completion
- ``try_generate`` wraps failures in an ``AdapterResult`` so callers can
  fall back to the rule-based route without exception plumbing
"""

import asyncio
import logging
import re
import time
import uuid
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import aiohttp

from uigen.config.config_manager import GeneratorConfig, get_config
from uigen.services.service_base import ConfigurationError, UpstreamError
from .prompt_loader import PromptLoader, get_prompt_loader

logger = logging.getLogger(__name__)

CODE_BLOCK_RE = re.compile(r"```(?:typescript|tsx|ts|javascript|jsx|js)?[ \t]*\n([\s\S]*?)```")


def strip_code_fences(text: str) -> str:
    """Return the body of the first fenced block, or the text unchanged."""
    match = CODE_BLOCK_RE.search(text)
    if match:
        return match.group(1).strip()
    return text.strip()


@dataclass
class AdapterResult:
    """Outcome of one adapter call: ``text`` on success, ``error`` otherwise."""
    ok: bool
    text: Optional[str] = None
    error: Optional[Exception] = None


class OpenAIClient:
    """Minimal client for OpenAI-compatible chat completions.

    Usage:
        client = OpenAIClient()
        source = await client.generate("Build a kanban board")
    """

    def __init__(self, config: Optional[GeneratorConfig] = None, prompts: Optional[PromptLoader] = None):
        self.config = config or get_config()
        self.prompts = prompts or get_prompt_loader()

        if not self.config.openai_api_key:
            logger.warning("OPENAI_API_KEY not set; free-form generation disabled")

    @property
    def is_configured(self) -> bool:
        return self.config.has_adapter

    def _headers(self) -> Dict[str, str]:
        """Build request headers."""
        return {
            "Authorization": f"Bearer {self.config.openai_api_key}",
            "Content-Type": "application/json",
            "X-Request-ID": str(uuid.uuid4()),
        }

    def _payload(self, messages: List[Dict[str, str]]) -> Dict[str, Any]:
        """Build request payload."""
        return {
            "model": self.config.openai_model,
            "messages": messages,
            "temperature": self.config.temperature,
            "max_tokens": self.config.max_tokens,
        }

    def build_messages(self, prompt: str, existing_source: Optional[str] = None) -> List[Dict[str, str]]:
        system_prompt, user_prompt = self.prompts.get_prompts(prompt, existing_source)
        return [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_prompt},
        ]

    @staticmethod
    def _error_message(data: Dict[str, Any], default: str) -> str:
        error_obj = data.get('error', {})
        if isinstance(error_obj, dict):
            return error_obj.get('message', default)
        return str(error_obj) if error_obj else default

    async def generate(self, prompt: str, existing_source: Optional[str] = None) -> str:
        """Request component source for ``prompt``.

        Args:
            prompt: Cleaned user request
            existing_source: Current component source when modifying

        Returns:
            Completion text with code fences removed

        Raises:
            ConfigurationError: No API key is configured
            UpstreamError: Transport failure, non-200 status or malformed body
        """
        if not self.is_configured:
            raise ConfigurationError("OpenAI API key is not configured. Set OPENAI_API_KEY.")

        payload = self._payload(self.build_messages(prompt, existing_source))
        model = self.config.openai_model
        start_time = time.time()

        try:
            logger.info(f"API call -> {model} (modify={existing_source is not None})")
            async with aiohttp.ClientSession() as session:
                async with session.post(
                    self.config.openai_base_url,
                    json=payload,
                    headers=self._headers(),
                ) as response:
                    status_code = response.status
                    content_type = response.headers.get('Content-Type', '')
                    if 'application/json' in content_type:
                        try:
                            data = await response.json()
                        except (aiohttp.ContentTypeError, ValueError):
                            text = await response.text()
                            data = {"error": f"Invalid JSON: {text[:200]}"}
                    else:
                        text = await response.text()
                        data = {"error": f"Non-JSON response: {text[:200]}"}
        except aiohttp.ClientError as e:
            logger.warning(f"Network error calling {model}: {e}")
            raise UpstreamError(f"OpenAI API error: {e}") from e
        except asyncio.TimeoutError as e:
            logger.warning(f"Timeout calling {model}")
            raise UpstreamError("OpenAI API error: request timeout") from e

        if status_code != 200:
            error_msg = self._error_message(data, f"HTTP {status_code}")
            logger.warning(f"API error {status_code} ({model}): {error_msg}")
            raise UpstreamError(f"OpenAI API error: {error_msg}", status=status_code)

        try:
            content = data['choices'][0]['message']['content']
        except (KeyError, IndexError, TypeError) as e:
            error_msg = self._error_message(data, 'Missing choices')
            logger.error(f"Malformed 200 response: {error_msg}")
            raise UpstreamError(f"OpenAI API error: {error_msg}", status=status_code) from e

        source = strip_code_fences(content or "")
        if not source:
            raise UpstreamError("OpenAI API error: empty completion", status=status_code)

        usage = data.get('usage', {})
        logger.info(
            f"{model} in {time.time() - start_time:.1f}s "
            f"({usage.get('prompt_tokens', 0)}->{usage.get('completion_tokens', 0)} tokens)"
        )
        return source

    async def try_generate(self, prompt: str, existing_source: Optional[str] = None) -> AdapterResult:
        """``generate`` with configuration and upstream failures as values."""
        try:
            text = await self.generate(prompt, existing_source)
        except (ConfigurationError, UpstreamError) as e:
            logger.warning(f"Free-form generation unavailable: {e}")
            return AdapterResult(ok=False, error=e)
        return AdapterResult(ok=True, text=text)


# Singleton instance
_client: Optional[OpenAIClient] = None


def get_api_client() -> OpenAIClient:
    """Get shared API client instance."""
    global _client
    if _client is None:
        _client = OpenAIClient()
    return _client


def reset_api_client() -> None:
    global _client
    _client = None
