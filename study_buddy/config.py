import os
from dataclasses import dataclass, field
from typing import Tuple


DEV_ENV_NAMES = {'development', 'dev', 'local', 'test'}

DEFAULT_GEMINI_MODEL = 'gemini-1.5-flash'
DEFAULT_OPENROUTER_BASE_URL = 'https://openrouter.ai/api/v1'
DEFAULT_OPENROUTER_MODELS = (
    'google/gemini-2.0-flash-exp:free',
    'google/gemini-sep-2024:free',
    'mistralai/mistral-7b-instruct:free',
    'huggingfaceh4/zephyr-7b-beta:free',
    'google/gemini-exp-1206:free',
    'google/learnlm-1.5-pro-experimental:free',
    'meta-llama/llama-3.1-405b-instruct:free',
    'meta-llama/llama-3.1-70b-instruct:free',
    'meta-llama/llama-3-8b-instruct:free',
    'microsoft/phi-3-mini-128k-instruct:free',
    'qwen/qwen-2-7b-instruct:free',
    'openchat/openchat-7b:free',
)


def _env(name, default=''):
    return (os.getenv(name, default) or default).strip()


def safe_int_env(name, default=0, minimum=1, maximum=100000):
    try:
        value = int(str(os.getenv(name, default)).strip())
    except Exception:
        value = default
    return max(minimum, min(maximum, value))


def parse_csv_env(name, default=()):
    raw = _env(name)
    if not raw:
        return tuple(default)
    return tuple(item.strip() for item in raw.split(',') if item.strip())


def resolve_runtime_env():
    return (
        os.getenv('SENTRY_ENVIRONMENT')
        or os.getenv('FLASK_ENV')
        or os.getenv('ENV')
        or ('production' if os.getenv('RENDER') else 'development')
    ).strip().lower()


@dataclass(frozen=True)
class AppConfig:
    """Central config object, read from the environment at load time."""

    flask_secret_key: str = field(default_factory=lambda: _env('FLASK_SECRET_KEY'))
    log_level: str = field(default_factory=lambda: _env('LOG_LEVEL', 'INFO').upper())
    runtime_env: str = field(default_factory=resolve_runtime_env)
    gemini_api_key: str = field(default_factory=lambda: _env('GEMINI_API_KEY'))
    gemini_model: str = field(default_factory=lambda: _env('GEMINI_MODEL', DEFAULT_GEMINI_MODEL))
    openrouter_api_key: str = field(default_factory=lambda: _env('OPENROUTER_API_KEY'))
    openrouter_base_url: str = field(default_factory=lambda: _env('OPENROUTER_BASE_URL', DEFAULT_OPENROUTER_BASE_URL))
    openrouter_models: Tuple[str, ...] = field(default_factory=lambda: parse_csv_env('OPENROUTER_MODELS', DEFAULT_OPENROUTER_MODELS))
    app_title: str = field(default_factory=lambda: _env('APP_TITLE', 'AI Study Buddy'))
    app_public_url: str = field(default_factory=lambda: _env('APP_PUBLIC_URL', 'http://localhost:5173'))
    firebase_credentials_path: str = field(default_factory=lambda: _env('FIREBASE_CREDENTIALS_PATH', 'firebase-credentials.json'))
    firebase_credentials_json: str = field(default_factory=lambda: _env('FIREBASE_CREDENTIALS'))
    cors_allowed_origins: Tuple[str, ...] = field(default_factory=lambda: parse_csv_env('CORS_ALLOWED_ORIGINS'))
    max_upload_bytes: int = field(default_factory=lambda: safe_int_env('MAX_UPLOAD_MB', 20, minimum=1, maximum=200) * 1024 * 1024)
    history_limit: int = field(default_factory=lambda: safe_int_env('HISTORY_LIMIT', 50, minimum=1, maximum=500))
    sentry_dsn: str = field(default_factory=lambda: _env('SENTRY_DSN_BACKEND'))
    sentry_environment: str = field(default_factory=lambda: _env('SENTRY_ENVIRONMENT', os.getenv('FLASK_ENV', 'production') or 'production'))
    sentry_release: str = field(default_factory=lambda: _env('SENTRY_RELEASE', 'study-buddy'))

    @property
    def is_dev_like(self):
        return self.runtime_env in DEV_ENV_NAMES


def load_config() -> AppConfig:
    config = AppConfig()
    if not config.is_dev_like and not config.flask_secret_key:
        raise RuntimeError('FLASK_SECRET_KEY must be set in non-development environments.')
    return config
