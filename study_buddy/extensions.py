import json
import logging
import os

import firebase_admin
import sentry_sdk
from firebase_admin import credentials, firestore
from google import genai
from openai import OpenAI
from sentry_sdk.integrations.flask import FlaskIntegration

from study_buddy import runtime
from study_buddy.services.ai_service import CompletionOrchestrator, GeminiProvider, OpenRouterProvider

logger = logging.getLogger('study_buddy')


def init_firebase(config):
    """Return (db, error). Missing credentials leave persistence disabled."""
    try:
        if os.path.exists(config.firebase_credentials_path):
            cred = credentials.Certificate(config.firebase_credentials_path)
        else:
            if not config.firebase_credentials_json:
                raise ValueError("FIREBASE_CREDENTIALS is not set and firebase-credentials.json was not found.")
            cred = credentials.Certificate(json.loads(config.firebase_credentials_json))
        if not firebase_admin._apps:
            firebase_admin.initialize_app(cred)
        return firestore.client(), ''
    except Exception as exc:
        logger.info(f"⚠️ Firebase initialization skipped: {exc}")
        return None, str(exc)


def build_gemini_provider(config):
    if not config.gemini_api_key:
        logger.info("⚠️ GEMINI_API_KEY not set; Gemini Direct is disabled.")
        return None
    try:
        client = genai.Client(api_key=config.gemini_api_key)
    except Exception as exc:
        logger.info(f"⚠️ Gemini client disabled: {exc}")
        return None
    return GeminiProvider(client, config.gemini_model)


def build_openrouter_provider(config):
    if not config.openrouter_api_key:
        logger.info("⚠️ OPENROUTER_API_KEY not set; OpenRouter fallback is disabled.")
        return None
    client = OpenAI(
        base_url=config.openrouter_base_url,
        api_key=config.openrouter_api_key,
        default_headers={
            'HTTP-Referer': config.app_public_url,
            'X-Title': config.app_title,
        },
    )
    return OpenRouterProvider(client, config.openrouter_models)


def build_orchestrator(config):
    orchestrator = CompletionOrchestrator(
        primary=build_gemini_provider(config),
        fallback=build_openrouter_provider(config),
        logger=logging.getLogger('study_buddy.ai'),
    )
    if not orchestrator.is_configured:
        logger.warning("No AI API keys found (OpenRouter or Gemini). AI will be limited.")
    return orchestrator


def init_sentry(config):
    if not config.sentry_dsn:
        return False
    sentry_sdk.init(
        dsn=config.sentry_dsn,
        integrations=[FlaskIntegration()],
        environment=config.sentry_environment,
        release=config.sentry_release,
        send_default_pii=False,
    )
    return True


def init_extensions(app, config) -> None:
    runtime.config = config
    runtime.db, runtime.firebase_init_error = init_firebase(config)
    runtime.ai = build_orchestrator(config)
    sentry_enabled = init_sentry(config)
    app.extensions['study_buddy'] = {
        'firebase_ready': runtime.db is not None,
        'ai_ready': runtime.ai.is_configured,
        'sentry_enabled': sentry_enabled,
    }
