"""
SQLAlchemy ORM models for the chat data store.

This module exports all database models and the declarative base.
Import models from this module to ensure they're registered with SQLAlchemy.
"""

from chatdb.models.base import Base, CreatedAtMixin, to_iso, utc_now_iso
from chatdb.models.chat import User, Chat, Message, Vote
from chatdb.models.document import Document, Suggestion

__all__ = [
    # Base classes and helpers
    "Base",
    "CreatedAtMixin",
    "to_iso",
    "utc_now_iso",
    # Models
    "User",
    "Chat",
    "Message",
    "Vote",
    "Document",
    "Suggestion",
]
