"""Firestore accessors for users/{uid}/flashcards."""

from . import users_repo


def collection(db, uid):
    return users_repo.subcollection(db, uid, 'flashcards')


def doc_ref(db, uid, set_id):
    return collection(db, uid).document(set_id)


def add_set(db, uid, payload):
    return collection(db, uid).add(payload)


def list_sets(db, uid, limit):
    return list(collection(db, uid).limit(limit).stream())
