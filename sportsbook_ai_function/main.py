"""
Sportsbook AI Cloud Function

HTTP entry point that exposes the AI feature builders to the sportsbook UI.

Request:  POST {"feature": "<name>", "input": {...}}
Response: the feature's JSON result, or {"error": "..."}
"""

import asyncio
import base64
import binascii
import json
import logging
import os
import sys
from typing import Any, Awaitable, Callable, Dict, Tuple, Type

import functions_framework
from flask import Request
from pydantic import BaseModel, ValidationError

from gemini_client import CompletionClient, ConfigurationError, resolve_api_key
from feature_builders import (
    analyze_event_odds,
    check_kyc_document,
    explain_settlement,
    generate_betting_advice,
    generate_live_commentary,
    generate_personalized_promotion,
    moderate_chat_message,
    suggest_odds,
    triage_fraud,
)
from feature_builders.models import (
    BettingAdviceInputs,
    ChatMessageInputs,
    FraudCheckInputs,
    KycDocument,
    LiveUpdate,
    MatchEvent,
    OddsSuggesterInputs,
    PromotionInputs,
    SettlementExplainerInputs,
)

# Logging Configuration
logging.basicConfig(
    level=getattr(logging, os.getenv('LOG_LEVEL', 'INFO').upper(), logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    stream=sys.stdout,
    force=True
)
logger = logging.getLogger(__name__)

ALLOWED_ORIGIN = os.getenv('ALLOWED_ORIGIN', '*')

GENERIC_FAILURE_MESSAGE = "Could not complete this request, please try again."

completion_client = CompletionClient()


class KycUpload(BaseModel):
    """KYC image as sent by the browser: base64 (optionally a data URL) + MIME type."""
    image_base64: str
    mime_type: str

    def to_document(self) -> KycDocument:
        encoded = self.image_base64.split(',', 1)[1] if self.image_base64.startswith('data:') else self.image_base64
        return KycDocument(data=base64.b64decode(encoded, validate=True), mime_type=self.mime_type)


Handler = Callable[[CompletionClient, Any], Awaitable[Any]]

FEATURE_HANDLERS: Dict[str, Tuple[Type[BaseModel], Handler]] = {
    'odds_suggestion': (OddsSuggesterInputs, suggest_odds),
    'event_odds': (MatchEvent, analyze_event_odds),
    'fraud_triage': (FraudCheckInputs, triage_fraud),
    'kyc_check': (KycUpload, check_kyc_document),
    'chat_moderation': (ChatMessageInputs, lambda client, msg: moderate_chat_message(client, msg.text)),
    'settlement_explanation': (SettlementExplainerInputs, explain_settlement),
    'live_commentary': (LiveUpdate, generate_live_commentary),
    'promotion': (
        PromotionInputs,
        lambda client, inputs: generate_personalized_promotion(client, inputs.betting_history),
    ),
    'betting_advice': (BettingAdviceInputs, generate_betting_advice),
}


def cors_preflight_response():
    """Return CORS preflight response."""
    headers = {
        'Access-Control-Allow-Origin': ALLOWED_ORIGIN,
        'Access-Control-Allow-Methods': 'POST, OPTIONS',
        'Access-Control-Allow-Headers': 'Content-Type',
        'Access-Control-Max-Age': '3600'
    }
    return ('', 204, headers)


def cors_headers() -> Dict[str, str]:
    """Return CORS headers for responses."""
    return {
        'Access-Control-Allow-Origin': ALLOWED_ORIGIN,
        'Content-Type': 'application/json'
    }


def error_response(message: str, status: int, **extra):
    return (json.dumps({'error': message, **extra}), status, cors_headers())


def run_feature_request(feature: str, payload: Dict[str, Any]):
    """
    Validate the input for a feature and run its builder.

    Returns:
        Tuple of (body, status, headers)
    """
    input_model, handler = FEATURE_HANDLERS[feature]

    try:
        inputs = input_model.model_validate(payload)
        if isinstance(inputs, KycUpload):
            inputs = inputs.to_document()
    except ValidationError as e:
        logger.info(f"Invalid input for {feature}: {e.error_count()} error(s)")
        return error_response('Invalid input', 400, details=json.loads(e.json()))
    except (binascii.Error, ValueError) as e:
        logger.info(f"Invalid image payload for {feature}: {e}")
        return error_response('Invalid image payload', 400)

    try:
        resolve_api_key()
    except ConfigurationError as e:
        logger.error(f"Cannot serve {feature}: {e}")
        return error_response('AI service is not configured', 503)

    result = asyncio.run(handler(completion_client, inputs))
    if result is None:
        logger.warning(f"Feature {feature} returned no result")
        return error_response(GENERIC_FAILURE_MESSAGE, 502)

    logger.info(f"Feature {feature} completed")
    return (json.dumps(result, ensure_ascii=False), 200, cors_headers())


@functions_framework.http
def main(request: Request):
    """HTTP Cloud Function entry point for the sportsbook AI features."""

    # Handle CORS preflight
    if request.method == 'OPTIONS':
        return cors_preflight_response()

    if request.method != 'POST':
        return error_response('Method not allowed', 405)

    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        return error_response('Request body must be a JSON object', 400)

    feature = body.get('feature')
    if not isinstance(feature, str) or feature not in FEATURE_HANDLERS:
        return error_response(
            f"Unknown feature: {feature}", 400, available=sorted(FEATURE_HANDLERS)
        )

    payload = body.get('input')
    if not isinstance(payload, dict):
        return error_response("'input' must be a JSON object", 400)

    logger.info(f"Handling feature request: {feature}")
    return run_feature_request(feature, payload)


# Local testing
if __name__ == "__main__":
    class MockRequest:
        method = 'POST'

        def get_json(self, silent=False):
            return {
                'feature': 'chat_moderation',
                'input': {'text': 'What a catch by Maxwell!'},
            }

    result = main(MockRequest())
    print(result)
