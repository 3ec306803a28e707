"""Generation service tests.

The external adapter is an AsyncMock; formatting runs against a patched
``subprocess.run``.

Run from project root:
    python -m pytest tests/unit/test_generation_service.py -v
"""

import logging
import subprocess
from unittest.mock import AsyncMock, Mock, patch

import pytest

from uigen.constants import GenerationMethod
from uigen.services.generation.api_client import AdapterResult
from uigen.services.generation.formatter import SourceFormatter, format_source
from uigen.services.generation.service import (
    DEFAULT_ERROR,
    GenerationResult,
    GenerationService,
    friendly_error,
    generate_component,
)
from uigen.services.service_base import (
    ConfigurationError,
    FormatError,
    GenerationError,
    ParseError,
    UpstreamError,
    ValidationError,
)
from uigen.config.config_manager import GeneratorConfig


def mock_client(result=None, configured=True):
    client = Mock()
    client.is_configured = configured
    client.try_generate = AsyncMock(return_value=result)
    return client


# =============================================================================
# Rule-based route
# =============================================================================

@pytest.mark.unit
class TestRuleBasedGeneration:
    """Offline generation through builders and the synthesizer."""

    @pytest.mark.asyncio
    async def test_form_response(self, offline_config) -> None:
        service = GenerationService(offline_config)
        result = await service.generate("registration form with fields: email, password", name="Sign Up")
        data = result.to_dict()

        assert data['success'] is True
        assert data['documentId'].startswith("sign-up-")
        assert data['metadata']['method'] == "ui-dsl"
        assert data['metadata']['fallback'] is False
        assert data['metadata']['type'] == "form"
        assert 0 < data['metadata']['confidence'] <= 1
        assert data['metadata']['createdAt']
        assert data['dsl']['kind'] == "form"
        assert [f['name'] for f in data['dsl']['fields']] == ["email", "password"]
        assert data['code'].startswith('"use client";')

    @pytest.mark.asyncio
    @pytest.mark.parametrize("prompt, method", [
        ("pricing page with three plans", "ui-dsl-decision"),
        ("landing page", "ui-dsl-screen"),
        ("sales dashboard with revenue chart", "ui-dsl-dashboard"),
        ("e-commerce app for selling shoes", "ui-dsl-app"),
    ])
    async def test_methods(self, offline_config, prompt, method) -> None:
        result = await GenerationService(offline_config).generate(prompt)
        assert result.method.value == method
        assert result.document_id.startswith("demo-")

    @pytest.mark.asyncio
    async def test_adapter_not_called_offline(self, offline_config) -> None:
        client = mock_client(configured=False)
        await GenerationService(offline_config, client=client).generate("Build a kanban board with drag and drop")
        client.try_generate.assert_not_called()

    @pytest.mark.asyncio
    async def test_synthesizer_failure_is_generation_error(self, offline_config) -> None:
        synthesizer = Mock()
        synthesizer.synthesize.side_effect = ValidationError("Cannot synthesize document")
        service = GenerationService(offline_config, client=mock_client(configured=False), synthesizer=synthesizer)
        with pytest.raises(GenerationError, match="Cannot synthesize document"):
            await service.generate("contact form")


# =============================================================================
# Free-form route
# =============================================================================

@pytest.mark.unit
class TestFreeFormGeneration:
    """Adapter output and fallback to the builders."""

    PROMPT = "Build a kanban board with drag and drop columns"

    @pytest.mark.asyncio
    async def test_adapter_success(self, online_config) -> None:
        source = "export default function Board() {\n  return <Button>Add</Button>;\n}\n"
        client = mock_client(AdapterResult(ok=True, text=source))
        result = await GenerationService(online_config, client=client).generate(self.PROMPT)

        client.try_generate.assert_awaited_once_with(self.PROMPT, None)
        assert result.method == GenerationMethod.OPENAI
        assert result.fallback is False
        assert result.dsl is None
        assert result.extra['model'] == "gpt-4o-mini"
        assert '<Button data-ui-id="button-1">' in result.code
        assert 'from "@fragment_ui/ui";' in result.code

    @pytest.mark.asyncio
    async def test_adapter_failure_falls_back(self, online_config) -> None:
        client = mock_client(AdapterResult(ok=False, error=UpstreamError("OpenAI API error: boom", status=500)))
        result = await GenerationService(online_config, client=client).generate(self.PROMPT)

        assert result.method == GenerationMethod.UI_DSL
        assert result.fallback is True
        assert result.dsl['kind'] == "form"

    @pytest.mark.asyncio
    async def test_modification_passes_existing_code(self, online_config) -> None:
        prompt = "Modify this component: make the button blue\n```tsx\nexport default function A() {}\n```"
        client = mock_client(AdapterResult(ok=True, text="export default function A() {}"))
        await GenerationService(online_config, client=client).generate(prompt)
        client.try_generate.assert_awaited_once_with("make the button blue", "export default function A() {}")

    @pytest.mark.asyncio
    async def test_simple_form_skips_adapter(self, online_config) -> None:
        client = mock_client(AdapterResult(ok=True, text="unused"))
        result = await GenerationService(online_config, client=client).generate("login form")
        client.try_generate.assert_not_called()
        assert result.method == GenerationMethod.UI_DSL


@pytest.mark.unit
class TestGenerateComponent:
    """Module-level convenience wrapper."""

    @pytest.mark.asyncio
    async def test_returns_dict(self) -> None:
        data = await generate_component("contact form", "Contact")
        assert data['success'] is True
        assert data['documentId'].startswith("contact-")
        assert data['metadata']['method'] == "ui-dsl"


# =============================================================================
# Error mapping
# =============================================================================

@pytest.mark.unit
class TestFriendlyError:
    """Substring-based error mapping."""

    def test_parse(self) -> None:
        error, details = friendly_error(ParseError("could not parse prompt"))
        assert error == "Unable to understand your prompt. Please try rephrasing it."

    def test_validation(self) -> None:
        error, _ = friendly_error(ValidationError("validation failed"))
        assert error == "Validation error in generated code"

    def test_import(self) -> None:
        error, _ = friendly_error(RuntimeError("No module named x"))
        assert error == "Component import error"

    def test_match_is_case_sensitive(self) -> None:
        error, details = friendly_error(RuntimeError("Parse failure"))
        assert error == DEFAULT_ERROR
        assert details == "Parse failure"

    def test_first_match_wins(self) -> None:
        error, _ = friendly_error(RuntimeError("parse error during validation"))
        assert error == "Unable to understand your prompt. Please try rephrasing it."

    def test_default(self) -> None:
        assert friendly_error(ConfigurationError("boom")) == (DEFAULT_ERROR, "boom")


@pytest.mark.unit
class TestGenerationResult:
    """Response envelope."""

    def test_to_dict(self) -> None:
        result = GenerationResult(
            document_id="demo-1",
            code="x",
            method=GenerationMethod.UI_DSL_FALLBACK,
            fallback=True,
            created_at="2024-01-01T00:00:00+00:00",
            extra={'type': 'form'},
        )
        assert result.to_dict() == {
            'success': True,
            'documentId': "demo-1",
            'code': "x",
            'metadata': {
                'method': "ui-dsl-fallback",
                'createdAt': "2024-01-01T00:00:00+00:00",
                'fallback': True,
                'type': 'form',
            },
            'dsl': None,
        }


# =============================================================================
# Formatter
# =============================================================================

@pytest.mark.unit
class TestFormatter:
    """Best-effort prettier invocation."""

    def test_command(self) -> None:
        formatter = SourceFormatter(GeneratorConfig(formatter_command="npx --no-install prettier"))
        assert formatter.command() == ["npx", "--no-install", "prettier", "--parser", "typescript"]

    def test_disabled(self, offline_config) -> None:
        with pytest.raises(FormatError):
            SourceFormatter(offline_config).format("x")
        assert format_source("x", SourceFormatter(offline_config)) == "x"

    def test_disabled_does_not_warn(self, offline_config, caplog) -> None:
        with caplog.at_level(logging.DEBUG, logger="uigen.services.generation.formatter"):
            assert format_source("x", SourceFormatter(offline_config)) == "x"
        assert not [r for r in caplog.records if r.levelno >= logging.WARNING]

    def test_failure_warns(self, caplog) -> None:
        with patch('uigen.services.generation.formatter.subprocess.run', side_effect=FileNotFoundError()):
            with caplog.at_level(logging.WARNING, logger="uigen.services.generation.formatter"):
                assert format_source("x", SourceFormatter(GeneratorConfig())) == "x"
        assert "Skipping formatting" in caplog.text

    def test_formatted_output(self) -> None:
        completed = subprocess.CompletedProcess(args=[], returncode=0, stdout="const a = 1;\n", stderr="")
        with patch('uigen.services.generation.formatter.subprocess.run', return_value=completed) as run:
            assert format_source("const a=1", SourceFormatter(GeneratorConfig())) == "const a = 1;\n"
        assert run.call_args.kwargs['input'] == "const a=1"

    def test_missing_binary_keeps_source(self) -> None:
        with patch('uigen.services.generation.formatter.subprocess.run', side_effect=FileNotFoundError()):
            assert format_source("const a=1", SourceFormatter(GeneratorConfig())) == "const a=1"

    def test_nonzero_exit_keeps_source(self) -> None:
        completed = subprocess.CompletedProcess(args=[], returncode=2, stdout="", stderr="SyntaxError")
        with patch('uigen.services.generation.formatter.subprocess.run', return_value=completed):
            with pytest.raises(FormatError, match="exited with 2"):
                SourceFormatter(GeneratorConfig()).format("const a=")

    def test_timeout_keeps_source(self) -> None:
        error = subprocess.TimeoutExpired(cmd="prettier", timeout=20)
        with patch('uigen.services.generation.formatter.subprocess.run', side_effect=error):
            assert format_source("x", SourceFormatter(GeneratorConfig())) == "x"
