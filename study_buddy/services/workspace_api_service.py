"""Business logic handlers for projects, planner, history and analytics APIs."""

from study_buddy.services import activity_service, analytics_service, planner_service

MAX_PROJECT_NAME_LEN = 120
MAX_STUDY_HOURS_PER_LOG = 24


def _doc_payload(doc):
    return {'id': doc.id, **(doc.to_dict() or {})}


def list_projects(app_ctx, request):
    decoded_token = app_ctx.verify_firebase_token(request)
    if not decoded_token:
        return app_ctx.jsonify({'error': 'Unauthorized'}), 401
    if app_ctx.db is None:
        return app_ctx.jsonify({'error': 'Database unavailable'}), 503
    uid = decoded_token['uid']
    try:
        projects = [_doc_payload(doc) for doc in app_ctx.projects_repo.list_docs(app_ctx.db, uid, app_ctx.MAX_LIST_DOCS)]
        projects.sort(key=lambda item: str(item.get('createdAt', '')), reverse=True)
        return app_ctx.jsonify({'projects': projects})
    except Exception as e:
        app_ctx.logger.error(f"Error fetching projects for {uid}: {e}")
        return app_ctx.jsonify({'error': 'Could not load projects'}), 500


def create_project(app_ctx, request):
    decoded_token = app_ctx.verify_firebase_token(request)
    if not decoded_token:
        return app_ctx.jsonify({'error': 'Unauthorized'}), 401
    uid = decoded_token['uid']
    payload = request.get_json(silent=True) or {}
    if not isinstance(payload, dict):
        return app_ctx.jsonify({'error': 'Invalid payload'}), 400
    name = str(payload.get('name', '')).strip()[:MAX_PROJECT_NAME_LEN]
    if not name:
        return app_ctx.jsonify({'error': 'name is required'}), 400
    raw_date = payload.get('date')
    try:
        project_date = planner_service.parse_iso_datetime(raw_date).date().isoformat() if raw_date else app_ctx.utc_now().date().isoformat()
    except planner_service.SessionValidationError as e:
        return app_ctx.jsonify({'error': str(e)}), 400
    if app_ctx.db is None:
        return app_ctx.jsonify({'error': 'Database unavailable'}), 503

    try:
        project_ref = app_ctx.projects_repo.create_doc_ref(app_ctx.db, uid)
        project = {
            'id': project_ref.id,
            'name': name,
            'date': project_date,
            'chatCount': 0,
            'createdAt': app_ctx.utc_now().isoformat(),
        }
        project_ref.set(project)
    except Exception as e:
        app_ctx.logger.error(f"Error creating project for {uid}: {e}")
        return app_ctx.jsonify({'error': 'Could not create project'}), 500
    return app_ctx.jsonify({'project': project}), 201


def delete_project(app_ctx, request, project_id):
    decoded_token = app_ctx.verify_firebase_token(request)
    if not decoded_token:
        return app_ctx.jsonify({'error': 'Unauthorized'}), 401
    if app_ctx.db is None:
        return app_ctx.jsonify({'error': 'Database unavailable'}), 503
    uid = decoded_token['uid']
    try:
        if not app_ctx.projects_repo.get_doc(app_ctx.db, uid, project_id).exists:
            return app_ctx.jsonify({'error': 'Project not found'}), 404
        app_ctx.chats_repo.delete_messages(app_ctx.db, uid, project_id)
        app_ctx.projects_repo.doc_ref(app_ctx.db, uid, project_id).delete()
    except Exception as e:
        app_ctx.logger.error(f"Error deleting project {uid}/{project_id}: {e}")
        return app_ctx.jsonify({'error': 'Could not delete project'}), 500
    return app_ctx.jsonify({'ok': True})


def list_study_sessions(app_ctx, request):
    decoded_token = app_ctx.verify_firebase_token(request)
    if not decoded_token:
        return app_ctx.jsonify({'error': 'Unauthorized'}), 401
    if app_ctx.db is None:
        return app_ctx.jsonify({'error': 'Database unavailable'}), 503
    uid = decoded_token['uid']
    try:
        docs = app_ctx.study_sessions_repo.list_sessions(app_ctx.db, uid, app_ctx.MAX_LIST_DOCS)
        return app_ctx.jsonify({'sessions': [_doc_payload(doc) for doc in docs]})
    except Exception as e:
        app_ctx.logger.error(f"Error fetching study sessions for {uid}: {e}")
        return app_ctx.jsonify({'error': 'Could not load study sessions'}), 500


def create_study_session(app_ctx, request):
    decoded_token = app_ctx.verify_firebase_token(request)
    if not decoded_token:
        return app_ctx.jsonify({'error': 'Unauthorized'}), 401
    uid = decoded_token['uid']
    try:
        session = planner_service.build_study_session(request.get_json(silent=True))
    except planner_service.SessionValidationError as e:
        return app_ctx.jsonify({'error': str(e)}), 400
    if app_ctx.db is None:
        return app_ctx.jsonify({'error': 'Database unavailable'}), 503
    session['createdAt'] = app_ctx.time.time()
    try:
        _, session_ref = app_ctx.study_sessions_repo.add_session(app_ctx.db, uid, session)
    except Exception as e:
        app_ctx.logger.error(f"Error creating study session for {uid}: {e}")
        return app_ctx.jsonify({'error': 'Could not save study session'}), 500
    return app_ctx.jsonify({'session': {'id': session_ref.id, **session}}), 201


def delete_study_session(app_ctx, request, session_id):
    decoded_token = app_ctx.verify_firebase_token(request)
    if not decoded_token:
        return app_ctx.jsonify({'error': 'Unauthorized'}), 401
    if app_ctx.db is None:
        return app_ctx.jsonify({'error': 'Database unavailable'}), 503
    uid = decoded_token['uid']
    try:
        session_ref = app_ctx.study_sessions_repo.doc_ref(app_ctx.db, uid, session_id)
        if not session_ref.get().exists:
            return app_ctx.jsonify({'error': 'Study session not found'}), 404
        session_ref.delete()
    except Exception as e:
        app_ctx.logger.error(f"Error deleting study session {uid}/{session_id}: {e}")
        return app_ctx.jsonify({'error': 'Could not delete study session'}), 500
    return app_ctx.jsonify({'ok': True})


def list_history(app_ctx, request):
    decoded_token = app_ctx.verify_firebase_token(request)
    if not decoded_token:
        return app_ctx.jsonify({'error': 'Unauthorized'}), 401
    if app_ctx.db is None:
        return app_ctx.jsonify({'error': 'Database unavailable'}), 503
    uid = decoded_token['uid']
    try:
        docs = app_ctx.history_repo.list_recent(app_ctx.db, uid, app_ctx.history_limit(), app_ctx.firestore)
        return app_ctx.jsonify({'history': [_doc_payload(doc) for doc in docs]})
    except Exception as e:
        app_ctx.logger.error(f"Error fetching history for {uid}: {e}")
        return app_ctx.jsonify({'error': 'Could not load history'}), 500


def get_analytics(app_ctx, request):
    decoded_token = app_ctx.verify_firebase_token(request)
    if not decoded_token:
        return app_ctx.jsonify({'error': 'Unauthorized'}), 401
    if app_ctx.db is None:
        return app_ctx.jsonify(analytics_service.default_analytics())
    uid = decoded_token['uid']
    try:
        return app_ctx.jsonify(activity_service.load_analytics(app_ctx.db, uid))
    except Exception as e:
        app_ctx.logger.error(f"Error fetching analytics for {uid}: {e}")
        return app_ctx.jsonify({'error': 'Could not load analytics'}), 500


def log_study_time(app_ctx, request):
    decoded_token = app_ctx.verify_firebase_token(request)
    if not decoded_token:
        return app_ctx.jsonify({'error': 'Unauthorized'}), 401
    uid = decoded_token['uid']
    payload = request.get_json(silent=True) or {}
    try:
        hours = float(payload.get('hours'))
    except (TypeError, ValueError, AttributeError):
        return app_ctx.jsonify({'error': 'hours must be a number'}), 400
    if not 0 < hours <= MAX_STUDY_HOURS_PER_LOG:
        return app_ctx.jsonify({'error': f'hours must be between 0 and {MAX_STUDY_HOURS_PER_LOG}'}), 400
    if app_ctx.db is None:
        return app_ctx.jsonify({'error': 'Database unavailable'}), 503
    weekday = analytics_service.weekday_name(app_ctx.utc_now())
    updated = activity_service.apply_analytics_update(
        uid, analytics_service.add_study_time, hours, weekday, db=app_ctx.db, logger=app_ctx.logger,
    )
    if updated is None:
        return app_ctx.jsonify({'error': 'Could not save study time'}), 500
    return app_ctx.jsonify(updated)
