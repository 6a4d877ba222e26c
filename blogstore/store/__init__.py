"""Observable stores for session and blog collection state."""

from blogstore.store.base import Action, OperationFailed, Store, error_message
from blogstore.store.blog import BlogCollectionStore, blog_reducer
from blogstore.store.session import SessionStore, session_reducer

__all__ = [
    "Action",
    "BlogCollectionStore",
    "OperationFailed",
    "SessionStore",
    "Store",
    "blog_reducer",
    "error_message",
    "session_reducer",
]
