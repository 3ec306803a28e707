"""
Test suite for the generation API in src/uigen/routes/api/generation.py

Covers request validation, the success envelope and the friendly error
mapping returned to the frontend.
"""

from unittest.mock import AsyncMock, Mock, patch

import pytest

from uigen.services.service_base import GenerationError

pytestmark = pytest.mark.integration

SERVICE_PATH = 'uigen.routes.api.generation.get_generation_service'


def failing_service(exc):
    service = Mock()
    service.generate = AsyncMock(side_effect=exc)
    return service


# =============================================================================
# Request validation
# =============================================================================

class TestRequestValidation:
    """Missing or blank prompts are rejected"""

    @pytest.mark.parametrize("body", [{}, {'prompt': ''}, {'prompt': '   '}, {'prompt': 42}])
    def test_prompt_required(self, client, body) -> None:
        response = client.post('/api/generate', json=body)
        assert response.status_code == 400
        data = response.get_json()
        assert data['error'] == "Prompt is required"
        assert data['status'] == 'error'
        assert data['path'] == '/api/generate'

    def test_non_json_body(self, client) -> None:
        response = client.post('/api/generate', data='prompt=hi', content_type='text/plain')
        assert response.status_code == 400
        assert response.get_json()['error'] == "Prompt is required"

    def test_wrong_method(self, client) -> None:
        response = client.get('/api/generate')
        assert response.status_code == 405
        assert response.get_json()['status_code'] == 405


# =============================================================================
# Successful generation
# =============================================================================

class TestGenerate:
    """End-to-end generation without the external adapter"""

    def test_form(self, client) -> None:
        response = client.post('/api/generate', json={
            'prompt': 'registration form with fields: email, password',
            'demoName': 'Signup Demo',
        })
        assert response.status_code == 200
        data = response.get_json()
        assert data['success'] is True
        assert data['documentId'].startswith('signup-demo-')
        assert data['metadata']['method'] == 'ui-dsl'
        assert data['metadata']['fallback'] is False
        assert data['metadata']['type'] == 'form'
        assert data['dsl']['kind'] == 'form'
        assert 'export default function GeneratedForm()' in data['code']

    def test_name_alias(self, client) -> None:
        response = client.post('/api/generate', json={'prompt': 'contact form', 'name': 'Contact'})
        assert response.get_json()['documentId'].startswith('contact-')

    def test_decision(self, client) -> None:
        response = client.post('/api/generate', json={'prompt': 'pricing page with three plans'})
        data = response.get_json()
        assert data['metadata']['method'] == 'ui-dsl-decision'
        assert data['dsl']['pattern'] == 'compare-3'
        assert data['documentId'].startswith('demo-')

    def test_app_flow(self, client) -> None:
        response = client.post('/api/generate', json={'prompt': 'user onboarding wizard'})
        data = response.get_json()
        assert data['metadata']['method'] == 'ui-dsl-app'
        assert [s['id'] for s in data['dsl']['screens']] == ['screen-1', 'screen-2', 'screen-3', 'screen-4']


# =============================================================================
# Error mapping
# =============================================================================

class TestGenerateErrors:
    """Failures become friendly 500 responses"""

    def test_parse_failure(self, client) -> None:
        with patch(SERVICE_PATH, return_value=failing_service(GenerationError("could not parse prompt"))):
            response = client.post('/api/generate', json={'prompt': 'anything'})
        assert response.status_code == 500
        data = response.get_json()
        assert data == {
            'success': False,
            'error': 'Unable to understand your prompt. Please try rephrasing it.',
            'details': 'The prompt could not be parsed. Try being more specific about what you want to build.',
        }

    def test_generic_failure_keeps_message(self, client) -> None:
        with patch(SERVICE_PATH, return_value=failing_service(RuntimeError("disk full"))):
            response = client.post('/api/generate', json={'prompt': 'anything'})
        data = response.get_json()
        assert data['error'] == 'Failed to generate component'
        assert data['details'] == 'disk full'
        assert 'stack' not in data

    def test_stack_in_development(self, app, client) -> None:
        app.config['UIGEN_DEBUG'] = True
        with patch(SERVICE_PATH, return_value=failing_service(RuntimeError("missing module foo"))):
            response = client.post('/api/generate', json={'prompt': 'anything'})
        data = response.get_json()
        assert data['error'] == 'Component import error'
        assert 'RuntimeError: missing module foo' in data['stack']


# =============================================================================
# Health
# =============================================================================

class TestHealth:
    """Service status endpoint"""

    def test_health(self, client) -> None:
        response = client.get('/api/health')
        assert response.status_code == 200
        data = response.get_json()
        assert data['success'] is True
        assert data['data']['status'] == 'healthy'
        assert data['data']['freeForm'] is False
        assert data['data']['model'] is None
        assert data['data']['formatter'] is False
        assert 'add_missing_imports' in data['data']['repairRules']

    def test_health_with_adapter(self, monkeypatch) -> None:
        monkeypatch.setenv('OPENAI_API_KEY', 'sk-test')
        from uigen.factory import create_app

        client = create_app('testing').test_client()
        data = client.get('/api/health').get_json()
        assert data['data']['freeForm'] is True
        assert data['data']['model'] == 'gpt-4o-mini'
