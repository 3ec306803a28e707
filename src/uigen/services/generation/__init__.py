"""Generation - Prompt-to-UI Generation System
=============================================

Turns a natural-language request into React/TSX source, either through
deterministic builders over an intermediate Document or through an
external chat-completions service, and normalizes the result.

Components:
- patterns.py: immutable component rules, screen templates and app flows
- classifier.py: RequestClassifier (route + subtype)
- field_extraction.py / form_templates.py: form fields from prompts
- builders.py: DocumentBuilder (prompt + classification -> Document)
- synthesizer.py: CodeSynthesizer (Document -> source via Jinja2)
- api_client.py / prompt_loader.py: OpenAI-compatible adapter
- repair/: ordered repair rules
- formatter.py: optional prettier pass
- service.py: GenerationService orchestration
"""

from .api_client import AdapterResult, OpenAIClient, get_api_client
from .builders import BuildOutcome, DocumentBuilder
from .classifier import Classification, RequestClassifier, classify, split_existing_code
from .formatter import SourceFormatter, format_source
from .patterns import DEFAULT_LIBRARY, PatternLibrary
from .repair import REPAIR_RULES, repair
from .service import GenerationResult, GenerationService, friendly_error, get_generation_service
from .synthesizer import CodeSynthesizer, get_synthesizer, synthesize

__all__ = [
    # Classification
    'Classification',
    'RequestClassifier',
    'classify',
    'split_existing_code',
    'PatternLibrary',
    'DEFAULT_LIBRARY',
    # Documents & source
    'BuildOutcome',
    'DocumentBuilder',
    'CodeSynthesizer',
    'get_synthesizer',
    'synthesize',
    'REPAIR_RULES',
    'repair',
    'SourceFormatter',
    'format_source',
    # Adapter
    'AdapterResult',
    'OpenAIClient',
    'get_api_client',
    # Service
    'GenerationResult',
    'GenerationService',
    'friendly_error',
    'get_generation_service',
]
