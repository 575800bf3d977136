"""Business logic handlers for chat and attachment APIs."""

from study_buddy.services import activity_service, analytics_service, chat_service, file_service

MAX_MESSAGE_LEN = 20000
MAX_ATTACHMENTS = 5
MAX_CLIENT_HISTORY = 50


def _message_payload(doc):
    data = doc.to_dict() or {}
    return {
        'id': doc.id,
        'role': data.get('role', 'user'),
        'content': data.get('content', ''),
        'attachments': data.get('attachments', []),
        'timestamp': data.get('timestamp', 0),
    }


def _stored_attachment(attachment):
    # Image payloads are not persisted; only the reference is kept.
    return {'name': str(attachment.get('name', ''))[:200], 'type': str(attachment.get('type', ''))[:80]}


def get_messages(app_ctx, request, project_id):
    decoded_token = app_ctx.verify_firebase_token(request)
    if not decoded_token:
        return app_ctx.jsonify({'error': 'Unauthorized'}), 401
    if project_id == chat_service.GLOBAL_PROJECT_ID:
        return app_ctx.jsonify({'messages': [{
            'id': 'welcome',
            'role': 'ai',
            'content': chat_service.WELCOME_MESSAGE,
            'timestamp': app_ctx.time.time(),
        }]})
    if app_ctx.db is None:
        return app_ctx.jsonify({'error': 'Database unavailable'}), 503
    uid = decoded_token['uid']
    try:
        docs = app_ctx.chats_repo.list_messages(app_ctx.db, uid, project_id, app_ctx.MAX_CHAT_MESSAGES)
        return app_ctx.jsonify({'messages': [_message_payload(doc) for doc in docs]})
    except Exception as e:
        app_ctx.logger.error(f"Error fetching chat messages for {uid}/{project_id}: {e}")
        return app_ctx.jsonify({'error': 'Could not load messages'}), 500


def send_message(app_ctx, request, project_id):
    decoded_token = app_ctx.verify_firebase_token(request)
    if not decoded_token:
        return app_ctx.jsonify({'error': 'Unauthorized'}), 401
    uid = decoded_token['uid']
    payload = request.get_json(silent=True) or {}
    if not isinstance(payload, dict):
        return app_ctx.jsonify({'error': 'Invalid payload'}), 400
    message = str(payload.get('message', '')).strip()[:MAX_MESSAGE_LEN]
    if not message:
        return app_ctx.jsonify({'error': 'message is required'}), 400
    attachments = payload.get('attachments') or []
    if not isinstance(attachments, list):
        return app_ctx.jsonify({'error': 'attachments must be a list'}), 400
    attachments = [item for item in attachments if isinstance(item, dict)][:MAX_ATTACHMENTS]
    custom_system_prompt = str(payload.get('system_prompt', '') or '').strip() or None

    is_global = project_id == chat_service.GLOBAL_PROJECT_ID
    if not is_global and app_ctx.db is None:
        return app_ctx.jsonify({'error': 'Database unavailable'}), 503

    if is_global:
        history = payload.get('history') or []
        if not isinstance(history, list):
            return app_ctx.jsonify({'error': 'history must be a list'}), 400
        history = history[-MAX_CLIENT_HISTORY:]
    else:
        try:
            if not app_ctx.projects_repo.get_doc(app_ctx.db, uid, project_id).exists:
                return app_ctx.jsonify({'error': 'Project not found'}), 404
            docs = app_ctx.chats_repo.list_messages(app_ctx.db, uid, project_id, chat_service.HISTORY_CONTEXT_SIZE + 1)
            history = [_message_payload(doc) for doc in docs]
            app_ctx.chats_repo.add_message(app_ctx.db, uid, project_id, {
                'role': 'user',
                'content': message,
                'attachments': [_stored_attachment(item) for item in attachments],
                'timestamp': app_ctx.time.time(),
            })
        except Exception as e:
            app_ctx.logger.error(f"Error storing chat message for {uid}/{project_id}: {e}")
            return app_ctx.jsonify({'error': 'Could not save message'}), 500

    reply, error_kind = chat_service.get_chat_response(app_ctx.ai, history, message, attachments, custom_system_prompt)

    if not is_global:
        try:
            app_ctx.chats_repo.add_message(app_ctx.db, uid, project_id, {
                'role': 'ai',
                'content': reply,
                'attachments': [],
                'timestamp': app_ctx.time.time(),
            })
            app_ctx.projects_repo.increment_chat_count(app_ctx.db, uid, project_id, app_ctx.firestore)
        except Exception as e:
            app_ctx.logger.error(f"Error storing AI reply for {uid}/{project_id}: {e}")
            return app_ctx.jsonify({'error': 'Could not save reply', 'reply': reply}), 500

    if app_ctx.db is not None:
        activity_service.apply_analytics_update(uid, analytics_service.log_message, db=app_ctx.db, logger=app_ctx.logger)
    return app_ctx.jsonify({'reply': reply, 'error_kind': error_kind, 'project_id': project_id})


def clear_messages(app_ctx, request, project_id):
    decoded_token = app_ctx.verify_firebase_token(request)
    if not decoded_token:
        return app_ctx.jsonify({'error': 'Unauthorized'}), 401
    if project_id == chat_service.GLOBAL_PROJECT_ID:
        return app_ctx.jsonify({'ok': True, 'deleted': 0})
    if app_ctx.db is None:
        return app_ctx.jsonify({'error': 'Database unavailable'}), 503
    uid = decoded_token['uid']
    try:
        deleted = app_ctx.chats_repo.delete_messages(app_ctx.db, uid, project_id)
    except Exception as e:
        app_ctx.logger.error(f"Error clearing chat for {uid}/{project_id}: {e}")
        return app_ctx.jsonify({'error': 'Could not clear chat history'}), 500
    return app_ctx.jsonify({'ok': True, 'deleted': deleted})


def parse_attachment(app_ctx, request):
    decoded_token = app_ctx.verify_firebase_token(request)
    if not decoded_token:
        return app_ctx.jsonify({'error': 'Unauthorized'}), 401
    uploaded = request.files.get('file')
    if uploaded is None or not uploaded.filename:
        return app_ctx.jsonify({'error': 'file is required'}), 400
    if not file_service.allowed_file(uploaded.filename):
        return app_ctx.jsonify({'error': 'Unsupported file type. Use PDF, TXT, MD or an image.'}), 400
    try:
        attachment = file_service.parse_attachment(uploaded.filename, uploaded.read())
    except file_service.FileParseError as e:
        return app_ctx.jsonify({'error': str(e)}), 400
    return app_ctx.jsonify({'attachment': attachment})
