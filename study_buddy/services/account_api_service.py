"""Business logic handlers for registration, profile and health APIs."""

from study_buddy.services import auth_service, prompt_registry

MAX_NAME_LEN = 80
MAX_PHONE_LEN = 32
NOTIFICATION_KEYS = ('email', 'push', 'studyReminders')


def get_health(app_ctx, request):
    return app_ctx.jsonify({
        'ok': True,
        'firebase_ready': app_ctx.db is not None,
        'ai_ready': bool(app_ctx.ai is not None and app_ctx.ai.is_configured),
        'prompts': prompt_registry.get_prompt_metadata(),
    })


def register_user(app_ctx, request):
    payload = request.get_json(silent=True) or {}
    if not isinstance(payload, dict):
        return app_ctx.jsonify({'error': 'Invalid payload'}), 400
    name = str(payload.get('name', '')).strip()[:MAX_NAME_LEN]
    email = str(payload.get('email', '')).strip().lower()
    phone = str(payload.get('phone', '')).strip()[:MAX_PHONE_LEN]
    password = str(payload.get('password', ''))
    if not name or not email or not password:
        return app_ctx.jsonify({'error': 'Please fill in all required fields.'}), 400
    if not auth_service.is_valid_email(email):
        return app_ctx.jsonify({'error': 'Please enter a valid email address.'}), 400
    password_error = auth_service.validate_password(password)
    if password_error:
        return app_ctx.jsonify({'error': password_error}), 400
    if app_ctx.db is None:
        return app_ctx.jsonify({'error': 'Database unavailable'}), 503

    try:
        user_record = app_ctx.auth.create_user(email=email, password=password, display_name=name)
    except app_ctx.auth.EmailAlreadyExistsError:
        return app_ctx.jsonify({'error': 'An account with this email already exists.'}), 409
    except Exception as e:
        app_ctx.logger.error(f"Error creating Firebase user for {email}: {e}")
        return app_ctx.jsonify({'error': 'Could not create account'}), 500

    profile = {
        'name': name,
        'email': email,
        'phone': phone,
        'createdAt': app_ctx.utc_now().isoformat(),
        'avatar': auth_service.avatar_initial(name),
    }
    try:
        app_ctx.users_repo.set_doc(app_ctx.db, user_record.uid, profile)
    except Exception as e:
        app_ctx.logger.error(f"Error storing profile for user {user_record.uid}: {e}")
        return app_ctx.jsonify({'error': 'Account created but profile could not be saved'}), 500
    return app_ctx.jsonify({'ok': True, 'user': auth_service.build_user_profile(user_record.uid, email, profile)}), 201


def get_user(app_ctx, request):
    decoded_token = app_ctx.verify_firebase_token(request)
    if not decoded_token:
        return app_ctx.jsonify({'error': 'Unauthorized'}), 401
    uid = decoded_token['uid']
    email = decoded_token.get('email', '')
    if app_ctx.db is None:
        return app_ctx.jsonify({'user': auth_service.build_user_profile(uid, email, display_name=decoded_token.get('name', ''))})
    try:
        snapshot = app_ctx.users_repo.get_doc(app_ctx.db, uid)
        stored = snapshot.to_dict() if snapshot.exists else {}
        return app_ctx.jsonify({
            'user': auth_service.build_user_profile(uid, email, stored, display_name=decoded_token.get('name', '')),
        })
    except Exception as e:
        app_ctx.logger.error(f"Error fetching user profile {uid}: {e}")
        return app_ctx.jsonify({'error': 'Could not load profile'}), 500


def update_profile(app_ctx, request):
    decoded_token = app_ctx.verify_firebase_token(request)
    if not decoded_token:
        return app_ctx.jsonify({'error': 'Unauthorized'}), 401
    uid = decoded_token['uid']
    payload = request.get_json(silent=True) or {}
    if not isinstance(payload, dict):
        return app_ctx.jsonify({'error': 'Invalid payload'}), 400
    if app_ctx.db is None:
        return app_ctx.jsonify({'error': 'Database unavailable'}), 503

    updates = {'updatedAt': app_ctx.utc_now().isoformat()}
    if 'name' in payload:
        name = str(payload.get('name') or '').strip()[:MAX_NAME_LEN]
        if not name:
            return app_ctx.jsonify({'error': 'name cannot be empty'}), 400
        updates['name'] = name
        updates['avatar'] = auth_service.avatar_initial(name)
    if 'phone' in payload:
        updates['phone'] = str(payload.get('phone') or '').strip()[:MAX_PHONE_LEN]
    if 'notifications' in payload:
        raw = payload.get('notifications')
        if not isinstance(raw, dict):
            return app_ctx.jsonify({'error': 'notifications must be an object'}), 400
        updates['notifications'] = {key: bool(raw[key]) for key in NOTIFICATION_KEYS if key in raw}

    try:
        app_ctx.users_repo.set_doc(app_ctx.db, uid, updates, merge=True)
        if 'name' in updates:
            app_ctx.auth.update_user(uid, display_name=updates['name'])
    except Exception as e:
        app_ctx.logger.error(f"Error updating profile for user {uid}: {e}")
        return app_ctx.jsonify({'error': 'Could not save profile'}), 500
    return app_ctx.jsonify({'ok': True})
