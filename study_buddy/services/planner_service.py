"""Study session scheduling helpers."""

from datetime import datetime, timedelta, timezone

DEFAULT_SESSION_COLOR = '#3b82f6'
DEFAULT_SESSION_DURATION_MINUTES = 60
MIN_SESSION_DURATION_MINUTES = 5
MAX_SESSION_DURATION_MINUTES = 24 * 60
MAX_TITLE_LEN = 120
HEX_DIGITS = set('0123456789abcdefABCDEF')


class SessionValidationError(ValueError):
    pass


def parse_iso_datetime(raw_value):
    text = str(raw_value or '').strip()
    if not text:
        raise SessionValidationError('date is required')
    if text.endswith('Z'):
        text = text[:-1] + '+00:00'
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError as exc:
        raise SessionValidationError('date must be an ISO 8601 timestamp') from exc
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def sanitize_color(raw_value):
    color = str(raw_value or '').strip()
    if len(color) == 7 and color.startswith('#') and set(color[1:]) <= HEX_DIGITS:
        return color.lower()
    return DEFAULT_SESSION_COLOR


def build_study_session(payload):
    """Validate a session request and compute its end from the duration."""
    if not isinstance(payload, dict):
        raise SessionValidationError('Invalid payload')
    title = str(payload.get('title', '')).strip()[:MAX_TITLE_LEN]
    if not title:
        raise SessionValidationError('title is required')
    start = parse_iso_datetime(payload.get('date'))
    try:
        duration = int(payload.get('duration', DEFAULT_SESSION_DURATION_MINUTES))
    except (TypeError, ValueError) as exc:
        raise SessionValidationError('duration must be a number of minutes') from exc
    if not MIN_SESSION_DURATION_MINUTES <= duration <= MAX_SESSION_DURATION_MINUTES:
        raise SessionValidationError(
            f'duration must be between {MIN_SESSION_DURATION_MINUTES} and {MAX_SESSION_DURATION_MINUTES} minutes'
        )
    end = start + timedelta(minutes=duration)
    return {
        'title': title,
        'start': start.isoformat(),
        'end': end.isoformat(),
        'duration': duration,
        'color': sanitize_color(payload.get('color')),
    }
