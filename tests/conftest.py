"""
Pytest configuration and shared fixtures.

This module provides:
- Environment variable setup for tests
- An in-memory SQL record store with the schema initialized
- A ChatRepository wired to that store
- Seed helpers for users and chats
"""

import os

import pytest


# Set test environment variables BEFORE any imports
# This must happen first so Settings() in tests sees test values
os.environ["SUPABASE_URL"] = "https://test-project.supabase.co"
os.environ["SUPABASE_KEY"] = "test-anon-key"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["LOG_JSON"] = "false"


@pytest.fixture
def anyio_backend():
    """
    Configure anyio backend for async tests.

    Returns:
        str: Backend name ("asyncio")
    """
    return "asyncio"


@pytest.fixture
async def record_store():
    """
    Provide an in-memory SQLRecordStore with all tables created.

    The engine is disposed after the test.
    """
    from chatdb.core.database import get_async_engine
    from chatdb.services.sql_store import SQLRecordStore

    store = SQLRecordStore(get_async_engine("sqlite+aiosqlite:///:memory:"))
    await store.rpc("init_schema")

    yield store

    await store.close()


@pytest.fixture
def repo(record_store):
    """
    Provide a ChatRepository over the in-memory store.

    Uses the minimum bcrypt work factor to keep hashing fast.
    """
    from chatdb.repositories.chat import ChatRepository

    return ChatRepository(record_store, password_rounds=4)


@pytest.fixture
async def user_id(repo) -> str:
    """
    Create a user and return its generated id.
    """
    await repo.create_user("owner@example.com", "owner-password")
    users = await repo.get_user("owner@example.com")
    return users[0].id


@pytest.fixture
async def chat_id(repo, user_id) -> str:
    """
    Create a chat owned by ``user_id`` and return its id.
    """
    await repo.save_chat(id="chat-1", title="First chat", user_id=user_id)
    return "chat-1"
