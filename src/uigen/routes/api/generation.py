"""Generation API
=================

Prompt-to-UI generation endpoints.

Endpoint:
POST /api/generate
{
  "prompt": "registration form with fields: email, password",
  "demoName": "signup"
}
"""

import asyncio
import logging
import traceback

from flask import Blueprint, current_app, jsonify, request

from uigen.config.config_manager import get_config
from uigen.services.generation import get_generation_service
from uigen.services.generation.repair import rule_names
from uigen.services.generation.service import friendly_error
from uigen.utils.errors import BadRequestError
from uigen.utils.helpers import create_success_response, truncate_text

logger = logging.getLogger(__name__)

gen_bp = Blueprint('generation', __name__, url_prefix='/api')


def _development() -> bool:
    return bool(
        get_config().development
        or current_app.debug
        or current_app.config.get('UIGEN_DEBUG', False)
    )


@gen_bp.route('/generate', methods=['POST'])
def generate():
    """Generate component source from a natural-language prompt."""
    data = request.get_json(silent=True) or {}
    prompt = data.get('prompt') if isinstance(data, dict) else None
    if not prompt or not isinstance(prompt, str) or not prompt.strip():
        raise BadRequestError("Prompt is required")

    name = data.get('demoName') or data.get('name')
    logger.info(f"Generation request: {truncate_text(prompt, 80)}")

    try:
        service = get_generation_service()
        result = asyncio.run(service.generate(prompt, name=name))
    except Exception as e:
        logger.exception("Generation failed")
        error, details = friendly_error(e)
        payload = {'success': False, 'error': error, 'details': details}
        if _development():
            payload['stack'] = traceback.format_exc()
        return jsonify(payload), 500

    return jsonify(result.to_dict())


@gen_bp.route('/health', methods=['GET'])
def health():
    """Generation service status."""
    config = get_config()
    return jsonify(create_success_response({
        'status': 'healthy',
        'freeForm': config.has_adapter,
        'model': config.openai_model if config.has_adapter else None,
        'formatter': config.format_enabled,
        'repairRules': list(rule_names()),
    }, message='Generation service ready'))
