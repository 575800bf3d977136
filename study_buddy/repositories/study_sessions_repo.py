"""Firestore accessors for users/{uid}/study_sessions."""

from . import users_repo


def collection(db, uid):
    return users_repo.subcollection(db, uid, 'study_sessions')


def doc_ref(db, uid, session_id):
    return collection(db, uid).document(session_id)


def add_session(db, uid, payload):
    return collection(db, uid).add(payload)


def list_sessions(db, uid, limit):
    return list(collection(db, uid).order_by('start').limit(limit).stream())
