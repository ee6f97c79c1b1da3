"""
Repository layer for data access.

Provides data access abstractions following the Repository pattern,
isolating record store access from callers.
"""

from chatdb.repositories.chat import ChatRepository

__all__ = ["ChatRepository"]
