"""Authentication and registration helpers."""

import re

PASSWORD_MIN_LENGTH = 8
PASSWORD_SYMBOL_RE = re.compile(r'[!@#$%^&*(),.?":{}|<>]')
EMAIL_RE = re.compile(r'^[^@\s]+@[^@\s]+\.[^@\s]+$')


def verify_firebase_token(request, auth_module, logger):
    """Return decoded Firebase token dict, or None when invalid/missing."""
    auth_header = request.headers.get('Authorization', '')
    if not auth_header.startswith('Bearer '):
        return None
    token = auth_header.split('Bearer ', 1)[1]
    try:
        return auth_module.verify_id_token(token)
    except Exception as exc:
        if logger is not None:
            logger.info(f"Token verification failed: {exc}")
        return None


def validate_password(password):
    """Return the first failing rule as a user-facing message, or None."""
    password = password or ''
    if len(password) < PASSWORD_MIN_LENGTH:
        return "Password must be at least 8 characters long."
    if not re.search(r'[A-Z]', password):
        return "Password must contain at least one uppercase letter."
    if not re.search(r'[a-z]', password):
        return "Password must contain at least one lowercase letter."
    if not re.search(r'[0-9]', password):
        return "Password must contain at least one number."
    if not PASSWORD_SYMBOL_RE.search(password):
        return "Password must contain at least one symbol."
    return None


def is_valid_email(email):
    return bool(EMAIL_RE.match(str(email or '').strip()))


def avatar_initial(name):
    return (str(name or '').strip() or 'S')[0].upper()


def build_user_profile(uid, email, stored=None, display_name=''):
    stored = stored or {}
    name = display_name or stored.get('name') or 'Student'
    return {
        'uid': uid,
        'email': email or stored.get('email', ''),
        'name': name,
        'phone': stored.get('phone', ''),
        'avatar': avatar_initial(name),
        'notifications': stored.get('notifications', {}),
    }
