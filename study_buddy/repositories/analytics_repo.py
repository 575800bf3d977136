"""Firestore accessors for the users/{uid}/analytics/main document."""

from . import users_repo

ANALYTICS_DOC_ID = 'main'


def doc_ref(db, uid):
    return users_repo.subcollection(db, uid, 'analytics').document(ANALYTICS_DOC_ID)


def get_doc(db, uid):
    return doc_ref(db, uid).get()


def set_doc(db, uid, data):
    return doc_ref(db, uid).set(data)
