"""Shared runtime handles for the API services.

``init_extensions`` populates the clients during ``create_app``. API
services receive this module as ``app_ctx`` so tests can monkeypatch any
attribute (db, ai, verify_firebase_token, time) in one place.
"""

import logging
import time
from datetime import datetime, timezone

from firebase_admin import auth, firestore
from flask import Response, jsonify, send_file

from study_buddy.repositories import (
    analytics_repo,
    chats_repo,
    flashcards_repo,
    history_repo,
    projects_repo,
    study_sessions_repo,
    users_repo,
)
from study_buddy.services import auth_service

logger = logging.getLogger('study_buddy')

config = None
db = None
ai = None
firebase_init_error = ''

MAX_LIST_DOCS = 200
MAX_CHAT_MESSAGES = 500


def verify_firebase_token(request):
    return auth_service.verify_firebase_token(request, auth, logger)


def utc_now():
    return datetime.now(timezone.utc)


def history_limit():
    return config.history_limit if config is not None else 50
