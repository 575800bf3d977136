"""Completion orchestration across the Gemini and OpenRouter providers.

The primary provider (Gemini direct) is tried once. Anything other than an
auth failure falls through to the OpenRouter model chain, which rotates
across candidate models with a linearly growing, capped delay between
attempts. Auth failures are terminal on either provider.
"""

import base64
import json
import logging
import re
import time

from google.genai import types

from study_buddy.logging_config import log_event


RETRY_BASE_DELAY_SECONDS = 0.5
RETRY_MAX_DELAY_SECONDS = 2.0
AUTH_STATUS_CODES = {401, 403}
AUTH_ERROR_MARKERS = (
    'api_key_invalid',
    'api key not valid',
    'invalid api key',
    'incorrect api key',
    'unauthorized',
)
JSON_ARRAY_RE = re.compile(r'\[[\s\S]*\]')
DATA_URL_RE = re.compile(r'^data:(?P<mime>[\w.+-]+/[\w.+-]+);base64,(?P<data>.+)$', re.DOTALL)


class AIError(Exception):
    """Base class for completion failures surfaced to callers."""


class AIConfigError(AIError):
    pass


class AIAuthError(AIError):
    pass


class AIResponseParseError(AIError):
    pass


class AIProviderError(AIError):
    def __init__(self, message, *, provider='', model='', status_code=None):
        super().__init__(message)
        self.provider = provider
        self.model = model
        self.status_code = status_code


def retry_delay_seconds(attempt):
    return min(RETRY_BASE_DELAY_SECONDS * (attempt + 1), RETRY_MAX_DELAY_SECONDS)


def extract_status_code(exc):
    # openai errors expose status_code, google-genai errors expose code.
    for attr in ('status_code', 'code'):
        value = getattr(exc, attr, None)
        if isinstance(value, int) and not isinstance(value, bool):
            return value
    return None


def is_auth_error(exc):
    if extract_status_code(exc) in AUTH_STATUS_CODES:
        return True
    message = str(exc or '').lower()
    return any(marker in message for marker in AUTH_ERROR_MARKERS)


def flatten_content(content):
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        return '\n'.join(
            str(item.get('text')) if isinstance(item, dict) and item.get('text') else json.dumps(item, default=str)
            for item in content
        )
    return json.dumps(content, default=str)


def decode_data_url(url):
    match = DATA_URL_RE.match(str(url or ''))
    if not match:
        return None, None
    try:
        return base64.b64decode(match.group('data')), match.group('mime')
    except (ValueError, TypeError):
        return None, None


def to_gemini_parts(content):
    if not isinstance(content, list):
        return [types.Part.from_text(text=flatten_content(content))]
    parts = []
    for item in content:
        if isinstance(item, dict) and item.get('type') == 'image_url':
            image_url = item.get('image_url')
            # Clients send either {"url": ...} or the bare URL string.
            url = image_url.get('url') if isinstance(image_url, dict) else image_url
            data, mime_type = decode_data_url(url)
            if data is not None:
                parts.append(types.Part.from_bytes(data=data, mime_type=mime_type))
                continue
        parts.append(types.Part.from_text(text=flatten_content([item])))
    return parts


def to_gemini_request(messages):
    """Split chat messages into a system instruction and Gemini contents."""
    system_instruction = None
    contents = []
    for message in messages:
        role = message.get('role')
        if role == 'system':
            if system_instruction is None:
                system_instruction = flatten_content(message.get('content'))
            continue
        contents.append(types.Content(
            role='model' if role == 'assistant' else 'user',
            parts=to_gemini_parts(message.get('content')),
        ))
    return system_instruction, contents


class GeminiProvider:
    name = 'gemini'

    def __init__(self, client, model, *, temperature=0.8, max_output_tokens=2048):
        self.client = client
        self.model = model
        self.temperature = temperature
        self.max_output_tokens = max_output_tokens

    def complete(self, messages):
        try:
            system_instruction, contents = to_gemini_request(messages)
            config_kwargs = {
                'temperature': self.temperature,
                'max_output_tokens': self.max_output_tokens,
            }
            if system_instruction:
                config_kwargs['system_instruction'] = system_instruction
            response = self.client.models.generate_content(
                model=self.model,
                contents=contents,
                config=types.GenerateContentConfig(**config_kwargs),
            )
        except Exception as exc:
            raise AIProviderError(
                str(exc) or f'Gemini API Error: {extract_status_code(exc)}',
                provider=self.name,
                model=self.model,
                status_code=extract_status_code(exc),
            ) from exc
        text = (getattr(response, 'text', None) or '').strip()
        if not text:
            raise AIProviderError('Gemini returned an empty response', provider=self.name, model=self.model)
        return text


class OpenRouterProvider:
    name = 'openrouter'

    def __init__(self, client, models, *, temperature=0.8):
        self.client = client
        self.models = list(models)
        self.temperature = temperature

    def complete(self, messages, model):
        try:
            completion = self.client.chat.completions.create(
                model=model,
                messages=[{'role': m.get('role'), 'content': m.get('content')} for m in messages],
                temperature=self.temperature,
            )
        except Exception as exc:
            raise AIProviderError(
                str(exc),
                provider=self.name,
                model=model,
                status_code=extract_status_code(exc),
            ) from exc
        choices = getattr(completion, 'choices', None)
        if not choices:
            raise AIProviderError('Invalid response from OpenRouter', provider=self.name, model=model)
        content = (choices[0].message.content or '').strip()
        if not content:
            raise AIProviderError('OpenRouter returned an empty response', provider=self.name, model=model)
        return content


class CompletionOrchestrator:
    def __init__(self, primary=None, fallback=None, *, sleep=time.sleep, logger=None):
        self.primary = primary
        self.fallback = fallback if fallback is not None and fallback.models else None
        self.sleep = sleep
        self.logger = logger or logging.getLogger('study_buddy.ai')

    @property
    def is_configured(self):
        return self.primary is not None or self.fallback is not None

    @property
    def retry_budget(self):
        if self.fallback is None:
            return 0
        return len(self.fallback.models) * 2

    def complete(self, messages):
        if not self.is_configured:
            raise AIConfigError(
                'API Key Missing: Please add OPENROUTER_API_KEY or GEMINI_API_KEY to your environment.'
            )

        if self.primary is not None:
            try:
                self.logger.info("AI: Trying Gemini Direct...")
                return self.primary.complete(messages)
            except AIProviderError as exc:
                if is_auth_error(exc):
                    raise AIAuthError(
                        'AI Auth Error: Your Gemini API key is invalid. Check GEMINI_API_KEY in your environment.'
                    ) from exc
                if self.fallback is None:
                    raise
                log_event(
                    self.logger, logging.WARNING, "ai_primary_failed",
                    provider=exc.provider, model=exc.model, status_code=exc.status_code, error=str(exc),
                )

        models = self.fallback.models
        last_error = None
        for attempt in range(self.retry_budget + 1):
            model = models[attempt % len(models)]
            try:
                self.logger.info(f"AI: Attempt {attempt + 1} using model: {model}")
                return self.fallback.complete(messages, model)
            except AIProviderError as exc:
                if is_auth_error(exc):
                    raise AIAuthError(
                        f'AI Config Error: {exc}. Please verify OPENROUTER_API_KEY in your environment.'
                    ) from exc
                log_event(
                    self.logger, logging.WARNING, "ai_fallback_attempt_failed",
                    attempt=attempt + 1, model=model, status_code=exc.status_code, error=str(exc),
                )
                last_error = exc
                if attempt < self.retry_budget:
                    self.sleep(retry_delay_seconds(attempt))
        raise last_error


def extract_json_array(raw_text):
    """Parse the first bracket-delimited JSON array out of model output."""
    text = (raw_text or '').strip()
    if not text:
        raise AIResponseParseError('AI returned an empty response.')
    match = JSON_ARRAY_RE.search(text)
    candidate = match.group(0) if match else text
    try:
        parsed = json.loads(candidate)
    except json.JSONDecodeError as exc:
        raise AIResponseParseError(f'AI response was not valid JSON: {exc.msg}') from exc
    if not isinstance(parsed, list):
        raise AIResponseParseError('AI response was not a JSON array.')
    return parsed
