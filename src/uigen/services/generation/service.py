"""Generation Service
====================

Main orchestration service for prompt-to-UI generation.
Linear flow: classify → (external adapter | build → synthesize) → repair →
format → response.

The external adapter is best-effort: configuration and upstream failures
fall back to the rule-based builders, and formatting failures keep the
unformatted text. Only a failure of the rule-based path itself surfaces
as ``GenerationError``.
"""

import logging
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Tuple

from jinja2 import TemplateError

from uigen.config.config_manager import GeneratorConfig, get_config
from uigen.constants import GenerationMethod
from uigen.services.service_base import GenerationError, ServiceError
from uigen.utils.helpers import make_document_id, truncate_text
from .api_client import OpenAIClient
from .builders import DocumentBuilder
from .classifier import Classification, RequestClassifier, split_existing_code
from .formatter import SourceFormatter, format_source
from .patterns import DEFAULT_LIBRARY, PatternLibrary
from .repair import repair
from .synthesizer import CodeSynthesizer, get_synthesizer

logger = logging.getLogger(__name__)

DEFAULT_ERROR = "Failed to generate component"

# (substrings, error, details); details None keeps the original message
FRIENDLY_ERRORS = (
    (("parse",),
     "Unable to understand your prompt. Please try rephrasing it.",
     "The prompt could not be parsed. Try being more specific about what you want to build."),
    (("validat",),
     "Validation error in generated code",
     "The generated code has validation issues. Please try a different prompt."),
    (("import", "module"),
     "Component import error",
     "A required component could not be imported. This is an internal error."),
)


def friendly_error(exc: BaseException) -> Tuple[str, str]:
    """Map an exception to the (error, details) pair shown to users."""
    message = str(exc)
    for needles, error, details in FRIENDLY_ERRORS:
        if any(needle in message for needle in needles):
            return error, details
    return DEFAULT_ERROR, message


@dataclass
class GenerationResult:
    """Outcome of one successful generation."""
    document_id: str
    code: str
    method: GenerationMethod
    fallback: bool = False
    dsl: Optional[Dict[str, Any]] = None
    created_at: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
    extra: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        metadata = {
            'method': self.method.value,
            'createdAt': self.created_at,
            'fallback': self.fallback,
        }
        metadata.update(self.extra)
        return {
            'success': True,
            'documentId': self.document_id,
            'code': self.code,
            'metadata': metadata,
            'dsl': self.dsl,
        }


class GenerationService:
    """Orchestrates the complete generation process.

    Flow:
    1. Split embedded existing source from the prompt
    2. Classify the request
    3. Free-form route: ask the external adapter; on failure fall through
    4. Rule-based route: build a Document and synthesize source from it
    5. Repair the source, then format it when a formatter is available

    No queues, no retries. One request is one sequential pipeline.
    """

    def __init__(
        self,
        config: Optional[GeneratorConfig] = None,
        library: PatternLibrary = DEFAULT_LIBRARY,
        client: Optional[OpenAIClient] = None,
        synthesizer: Optional[CodeSynthesizer] = None,
        formatter: Optional[SourceFormatter] = None,
    ):
        self.config = config or get_config()
        self.client = client or OpenAIClient(self.config)
        self.classifier = RequestClassifier(
            library,
            free_form_enabled=self.client.is_configured,
            simple_word_limit=self.config.simple_word_limit,
        )
        self.builder = DocumentBuilder(library)
        self.synthesizer = synthesizer or get_synthesizer()
        self.formatter = formatter or SourceFormatter(self.config)

    async def generate(self, prompt: str, name: Optional[str] = None) -> GenerationResult:
        """Generate component source for ``prompt``.

        Raises:
            GenerationError: The rule-based path failed after every fallback
        """
        start_time = time.time()
        clean_prompt, existing_code = split_existing_code(prompt)
        classification = self.classifier.classify(clean_prompt, has_existing_code=existing_code is not None)

        result = None
        if classification.is_free_form:
            result = await self._generate_free_form(clean_prompt, existing_code, name)

        if result is None:
            try:
                result = self._generate_rule_based(clean_prompt, classification, name)
            except (ServiceError, TemplateError) as e:
                logger.error(f"Rule-based generation failed: {e}")
                raise GenerationError(str(e)) from e
            if classification.is_free_form:
                result.fallback = True

        result.extra['confidence'] = classification.confidence
        result.code = format_source(result.code, self.formatter)

        logger.info(
            f"Generated {result.document_id} via {result.method} "
            f"(fallback={result.fallback}) in {time.time() - start_time:.2f}s: "
            f"{truncate_text(clean_prompt, 60)}"
        )
        return result

    async def _generate_free_form(self, prompt: str, existing_code: Optional[str],
                                  name: Optional[str]) -> Optional[GenerationResult]:
        outcome = await self.client.try_generate(prompt, existing_code)
        if not outcome.ok:
            logger.warning(f"Falling back to rule-based generation: {outcome.error}")
            return None
        return GenerationResult(
            document_id=make_document_id(name),
            code=repair(outcome.text),
            method=GenerationMethod.OPENAI,
            extra={'model': self.config.openai_model},
        )

    def _generate_rule_based(self, prompt: str, classification: Classification,
                             name: Optional[str]) -> GenerationResult:
        outcome = self.builder.build_outcome(prompt, classification)
        document = outcome.document
        code = repair(self.synthesizer.synthesize(document))
        return GenerationResult(
            document_id=make_document_id(name),
            code=code,
            method=outcome.method,
            fallback=outcome.fallback,
            dsl=document.to_dict(),
            extra={'type': document.kind.value},
        )


# Singleton instance
_service: Optional[GenerationService] = None


def get_generation_service() -> GenerationService:
    """Get shared generation service instance."""
    global _service
    if _service is None:
        _service = GenerationService()
    return _service


def reset_generation_service() -> None:
    global _service
    _service = None


async def generate_component(prompt: str, name: Optional[str] = None) -> Dict[str, Any]:
    """Convenience wrapper returning the response dictionary."""
    result = await get_generation_service().generate(prompt, name)
    return result.to_dict()
