"""Study analytics document updates.

The analytics document holds running counters plus a weekday activity
chart. Update helpers are pure and return a new document.
"""

WEEKDAY_NAMES = ['Mon', 'Tue', 'Wed', 'Thu', 'Fri', 'Sat', 'Sun']
STAT_KEYS = (
    'totalHours',
    'tasksDone',
    'currentStreak',
    'sessions',
    'quizScore',
    'quizCount',
    'flashcardsGenerated',
    'messagesSent',
)
DEFAULT_SUBJECTS = ['Math', 'Physics', 'History', 'Code']


def default_analytics():
    return {
        'stats': {key: 0 for key in STAT_KEYS},
        'activityData': [{'name': name, 'hours': 0} for name in WEEKDAY_NAMES],
        'subjectData': [{'name': name, 'value': 0} for name in DEFAULT_SUBJECTS],
    }


def _number(value):
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    return value


def normalize_analytics(payload):
    base = default_analytics()
    if not isinstance(payload, dict):
        return base
    stats = payload.get('stats') if isinstance(payload.get('stats'), dict) else {}
    for key in STAT_KEYS:
        base['stats'][key] = _number(stats.get(key, 0))
    activity = payload.get('activityData')
    if isinstance(activity, list):
        hours_by_day = {
            str(entry.get('name')): _number(entry.get('hours', 0))
            for entry in activity if isinstance(entry, dict)
        }
        for entry in base['activityData']:
            entry['hours'] = hours_by_day.get(entry['name'], 0)
    subjects = payload.get('subjectData')
    if isinstance(subjects, list):
        base['subjectData'] = [
            {'name': str(entry.get('name', ''))[:60], 'value': _number(entry.get('value', 0))}
            for entry in subjects if isinstance(entry, dict) and entry.get('name')
        ]
    return base


def weekday_name(now):
    return WEEKDAY_NAMES[now.weekday()]


def log_quiz(analytics, score, total):
    updated = normalize_analytics(analytics)
    stats = updated['stats']
    stats['quizScore'] += score
    stats['quizCount'] += 1
    stats['tasksDone'] += 1
    return updated


def log_flashcards(analytics, count):
    updated = normalize_analytics(analytics)
    updated['stats']['flashcardsGenerated'] += count
    updated['stats']['tasksDone'] += 1
    return updated


def log_message(analytics):
    updated = normalize_analytics(analytics)
    updated['stats']['messagesSent'] += 1
    return updated


def add_study_time(analytics, hours, weekday):
    updated = normalize_analytics(analytics)
    for entry in updated['activityData']:
        if entry['name'] == weekday:
            entry['hours'] += hours
    updated['stats']['totalHours'] += hours
    return updated
