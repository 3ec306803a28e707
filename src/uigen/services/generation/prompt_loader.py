"""Prompt Loader Service
=====================

Loads and renders the prompt templates sent to the external generation
service. Keeps prompt wording out of the HTTP client.
"""

import logging
from typing import Optional, Tuple

from jinja2 import Environment, FileSystemLoader, select_autoescape

from uigen.constants import BLOCKS_MODULE, UI_MODULE
from uigen.paths import PROMPT_TEMPLATES_DIR
from .catalog import BLOCKS, PRIMITIVES

logger = logging.getLogger(__name__)


class PromptLoader:
    """Loads and renders prompts for free-form generation."""

    SYSTEM_TEMPLATE = "system.md.jinja2"
    USER_TEMPLATE = "user.md.jinja2"

    def __init__(self, templates_dir=PROMPT_TEMPLATES_DIR):
        if not templates_dir.exists():
            logger.error(f"Prompt templates directory not found at {templates_dir}")

        # Markdown templates are not escaped; embedded source must stay verbatim
        self.jinja_env = Environment(
            loader=FileSystemLoader(str(templates_dir)),
            autoescape=select_autoescape(['html', 'xml']),
            trim_blocks=True,
            lstrip_blocks=True,
        )

    def get_prompts(self, prompt: str, existing_code: Optional[str] = None) -> Tuple[str, str]:
        """
        Get system and user prompts for one generation request.

        Args:
            prompt: Cleaned user request
            existing_code: Current component source when modifying

        Returns:
            Tuple of (system_prompt, user_prompt)
        """
        context = {
            'prompt': prompt,
            'existing_code': existing_code.strip() if existing_code else None,
            'ui_module': UI_MODULE,
            'blocks_module': BLOCKS_MODULE,
            'primitives': PRIMITIVES,
            'blocks': BLOCKS,
        }

        system_template = self.jinja_env.get_template(self.SYSTEM_TEMPLATE)
        user_template = self.jinja_env.get_template(self.USER_TEMPLATE)

        return system_template.render(**context), user_template.render(**context).strip()


_loader: Optional[PromptLoader] = None


def get_prompt_loader() -> PromptLoader:
    """Get shared prompt loader instance."""
    global _loader
    if _loader is None:
        _loader = PromptLoader()
    return _loader
