"""Firestore accessors for users/{uid}/history."""

from . import users_repo


def collection(db, uid):
    return users_repo.subcollection(db, uid, 'history')


def add_item(db, uid, payload):
    return collection(db, uid).add(payload)


def list_recent(db, uid, limit, firestore_module):
    query = collection(db, uid).order_by('timestamp', direction=firestore_module.Query.DESCENDING).limit(limit)
    return list(query.stream())
