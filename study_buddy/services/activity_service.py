"""Best-effort history and analytics recording after user actions."""

from study_buddy.repositories import analytics_repo, history_repo
from study_buddy.services import analytics_service

HISTORY_TYPES = {'quiz', 'flashcards', 'summarizer', 'chat'}
HISTORY_COLORS = {
    'quiz': 'bg-green-500/10 text-green-400',
    'flashcards': 'bg-orange-500/10 text-orange-400',
    'summarizer': 'bg-blue-500/10 text-blue-400',
    'chat': 'bg-purple-500/10 text-purple-400',
}


def record_history(uid, item_type, title, metadata=None, *, db, logger, time_module):
    safe_type = str(item_type or '').strip().lower()
    if safe_type not in HISTORY_TYPES:
        return False
    payload = {
        'type': safe_type,
        'title': str(title or '').strip()[:200],
        'color': HISTORY_COLORS[safe_type],
        'timestamp': time_module.time(),
    }
    for key, value in (metadata or {}).items():
        payload.setdefault(str(key), value)
    try:
        history_repo.add_item(db, uid, payload)
        return True
    except Exception as exc:
        if logger is not None:
            logger.warning(f"⚠️ Could not store history item ({safe_type}) for {uid}: {exc}")
        return False


def load_analytics(db, uid):
    snapshot = analytics_repo.get_doc(db, uid)
    return analytics_service.normalize_analytics(snapshot.to_dict() if snapshot.exists else {})


def apply_analytics_update(uid, update_fn, *args, db, logger):
    """Read-modify-write the analytics document; returns the new document or None."""
    try:
        updated = update_fn(load_analytics(db, uid), *args)
        analytics_repo.set_doc(db, uid, updated)
        return updated
    except Exception as exc:
        if logger is not None:
            logger.warning(f"⚠️ Could not update analytics ({update_fn.__name__}) for {uid}: {exc}")
        return None
