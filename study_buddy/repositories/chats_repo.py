"""Firestore accessors for users/{uid}/chats/{project_id}/messages."""

from . import users_repo


def messages_collection(db, uid, project_id):
    return users_repo.subcollection(db, uid, 'chats').document(project_id).collection('messages')


def add_message(db, uid, project_id, payload):
    return messages_collection(db, uid, project_id).add(payload)


def list_messages(db, uid, project_id, limit):
    """Return the newest `limit` messages, oldest first."""
    query = messages_collection(db, uid, project_id).order_by('timestamp').limit_to_last(limit)
    return list(query.get())


def delete_messages(db, uid, project_id):
    deleted = 0
    for doc in messages_collection(db, uid, project_id).stream():
        doc.reference.delete()
        deleted += 1
    return deleted
