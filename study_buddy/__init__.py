import os
import uuid

import sentry_sdk
from dotenv import load_dotenv
from flask import Flask, g, jsonify, request
from werkzeug.exceptions import RequestEntityTooLarge

from .config import load_config
from .extensions import init_extensions
from .logging_config import configure_logging

DEFAULT_CORS_ORIGINS = (
    'http://localhost:5173',
    'http://127.0.0.1:5173',
    'http://localhost:5000',
    'http://127.0.0.1:5000',
)


def create_app(config=None):
    """App factory: config, logging, shared clients, blueprints, hooks."""
    load_dotenv()
    config = config or load_config()
    configure_logging(config.log_level)

    app = Flask(__name__)
    app.secret_key = config.flask_secret_key or os.urandom(32).hex()
    app.config['MAX_CONTENT_LENGTH'] = config.max_upload_bytes
    init_extensions(app, config)

    from .blueprints import ALL_BLUEPRINTS

    for blueprint in ALL_BLUEPRINTS:
        app.register_blueprint(blueprint)

    register_request_hooks(app, config)
    return app


def register_request_hooks(app, config):
    allowed_origins = {origin.lower() for origin in (config.cors_allowed_origins or DEFAULT_CORS_ORIGINS)}

    def apply_cors_headers(response):
        origin = str(request.headers.get('Origin', '') or '').strip()
        if not origin or not request.path.startswith('/api/'):
            return response
        if origin.lower() not in allowed_origins:
            return response
        response.headers['Access-Control-Allow-Origin'] = origin
        response.headers['Vary'] = 'Origin'
        response.headers['Access-Control-Allow-Headers'] = 'Authorization, Content-Type'
        response.headers['Access-Control-Allow-Methods'] = 'GET, POST, PUT, PATCH, DELETE, OPTIONS'
        return response

    @app.before_request
    def handle_api_options_preflight():
        if request.method == 'OPTIONS' and request.path.startswith('/api/'):
            return apply_cors_headers(app.make_default_options_response())

    @app.before_request
    def attach_request_context():
        request_id = str(request.headers.get('X-Request-ID', '') or '').strip()[:120] or uuid.uuid4().hex
        g.request_id = request_id
        sentry_sdk.set_tag('request.id', request_id)
        sentry_sdk.set_tag('route.path', request.path)

    @app.after_request
    def attach_response_context(response):
        request_id = str(getattr(g, 'request_id', '') or '').strip()
        if request_id:
            response.headers['X-Request-ID'] = request_id
        return apply_cors_headers(response)

    @app.errorhandler(RequestEntityTooLarge)
    def handle_request_entity_too_large(_error):
        max_mb = config.max_upload_bytes // (1024 * 1024)
        return jsonify({'error': f'Upload too large. Maximum upload size is {max_mb}MB.'}), 413
