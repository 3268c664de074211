"""Database module."""

from athena.db.chat_store import ChatStore, chat_store, get_chat_store
from athena.db.database import close_database, get_db, init_database

__all__ = [
    "get_db",
    "init_database",
    "close_database",
    "chat_store",
    "ChatStore",
    "get_chat_store",
]
