"""Firestore accessors for users/{uid}/projects."""

from . import users_repo


def collection(db, uid):
    return users_repo.subcollection(db, uid, 'projects')


def create_doc_ref(db, uid):
    return collection(db, uid).document()


def doc_ref(db, uid, project_id):
    return collection(db, uid).document(project_id)


def list_docs(db, uid, limit):
    return list(collection(db, uid).limit(limit).stream())


def increment_chat_count(db, uid, project_id, firestore_module):
    return doc_ref(db, uid, project_id).update({'chatCount': firestore_module.Increment(1)})


def get_doc(db, uid, project_id):
    return doc_ref(db, uid, project_id).get()
