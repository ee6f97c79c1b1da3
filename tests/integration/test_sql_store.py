"""
Integration tests for SQLRecordStore and record store lifecycle.

Runs against in-memory SQLite (aiosqlite) with the ORM schema.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.exc import IntegrityError
from sqlalchemy.pool import StaticPool

from chatdb.core.config import Settings
from chatdb.core.database import create_record_store, get_async_engine, record_store_context
from chatdb.services.interfaces import OrderBy, eq, gt, gte
from chatdb.services.sql_store import SQLRecordStore


async def seed_chat(store):
    await store.insert("User", {"id": "u1", "email": "u1@x.com", "password": "hash"})
    await store.insert(
        "Chat",
        {"id": "c1", "title": "Chat", "userId": "u1", "visibility": "private",
         "createdAt": "2026-10-19T12:00:00.000000+00:00"},
    )


class TestSQLRecordStore:
    """Row-level behavior of SQLRecordStore."""

    @pytest.mark.anyio
    async def test_init_schema_is_idempotent(self, record_store):
        # Tables already exist from the fixture; a second run must not fail
        await record_store.rpc("init_schema")
        await record_store.rpc("init_schema")

        assert await record_store.select("User") == []

    @pytest.mark.anyio
    async def test_unknown_procedure_raises(self, record_store):
        with pytest.raises(NotImplementedError):
            await record_store.rpc("drop_everything")

    @pytest.mark.anyio
    async def test_unknown_table_raises(self, record_store):
        with pytest.raises(ValueError):
            await record_store.select("Nope")

    @pytest.mark.anyio
    async def test_insert_applies_column_defaults(self, record_store):
        # Act
        await record_store.insert("User", {"email": "a@x.com", "password": "hash"})

        # Assert
        rows = await record_store.select("User", [eq("email", "a@x.com")])
        assert len(rows) == 1
        assert rows[0]["id"]

    @pytest.mark.anyio
    async def test_filters_and_ordering(self, record_store):
        """
        Arrange: Messages at three timestamps
        Act: Select with gt, gte and both orderings
        Assert: Bounds and ordering behave as documented
        """
        # Arrange
        await seed_chat(record_store)
        await record_store.insert("Message", [
            {"id": f"m{i}", "chatId": "c1", "role": "user", "content": {"n": i},
             "createdAt": f"2026-10-19T12:00:0{i}.000000+00:00"}
            for i in (1, 2, 3)
        ])
        boundary = "2026-10-19T12:00:02.000000+00:00"

        # Act
        strict = await record_store.select(
            "Message", [gt("createdAt", boundary)], OrderBy("createdAt")
        )
        inclusive = await record_store.select(
            "Message", [gte("createdAt", boundary)], OrderBy("createdAt")
        )
        newest_first = await record_store.select(
            "Message", [eq("chatId", "c1")], OrderBy("createdAt", descending=True)
        )

        # Assert
        assert [r["id"] for r in strict] == ["m3"]
        assert [r["id"] for r in inclusive] == ["m2", "m3"]
        assert [r["id"] for r in newest_first] == ["m3", "m2", "m1"]
        assert newest_first[0]["content"] == {"n": 3}

    @pytest.mark.anyio
    async def test_update_and_delete(self, record_store):
        # Arrange
        await seed_chat(record_store)

        # Act
        await record_store.update("Chat", {"visibility": "public"}, [eq("id", "c1")])
        updated = await record_store.select("Chat", [eq("id", "c1")])
        await record_store.delete("Chat", [eq("id", "c1")])

        # Assert
        assert updated[0]["visibility"] == "public"
        assert await record_store.select("Chat", [eq("id", "c1")]) == []

    @pytest.mark.anyio
    async def test_foreign_keys_enforced(self, record_store):
        with pytest.raises(IntegrityError):
            await record_store.insert(
                "Chat",
                {"id": "c1", "title": "Orphan", "userId": "missing",
                 "createdAt": "2026-10-19T12:00:00.000000+00:00"},
            )

    @pytest.mark.anyio
    async def test_failed_batch_insert_leaves_nothing(self, record_store):
        """
        Arrange: Batch whose second row violates the unique email
        Act: Insert the batch
        Assert: Request fails as a whole; no rows written
        """
        with pytest.raises(IntegrityError):
            await record_store.insert("User", [
                {"email": "same@x.com", "password": "a"},
                {"email": "same@x.com", "password": "b"},
            ])

        assert await record_store.select("User") == []

    @pytest.mark.anyio
    async def test_empty_batch_is_noop(self, record_store):
        await record_store.insert("Message", [])

        assert await record_store.select("Message") == []

    @pytest.mark.anyio
    async def test_in_memory_store_serializes_requests(self, record_store):
        assert record_store.request_lock is not None

    @pytest.mark.anyio
    async def test_file_store_uses_a_connection_pool(self, tmp_path):
        """
        Arrange: Engine on a SQLite file
        Act: Build the store
        Assert: Default pool, so requests are not serialized by the store
        """
        # Arrange
        engine = get_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'chat.db'}")

        # Act
        store = SQLRecordStore(engine)

        # Assert
        assert not isinstance(engine.sync_engine.pool, StaticPool)
        assert store.request_lock is None
        await store.close()


class TestRecordStoreLifecycle:
    """create_record_store / record_store_context."""

    @pytest.mark.anyio
    async def test_sql_backend_selected(self):
        settings = Settings(
            _env_file=None,
            store_backend="sql",
            database_url="sqlite+aiosqlite:///:memory:",
        )

        async with record_store_context(settings) as store:
            assert isinstance(store, SQLRecordStore)
            await store.rpc("init_schema")
            assert await store.select("Chat") == []

    @pytest.mark.anyio
    async def test_supabase_backend_selected(self, monkeypatch):
        from chatdb.services import supabase_store

        fake_client = MagicMock()
        create = AsyncMock(return_value=fake_client)
        monkeypatch.setattr(supabase_store, "acreate_client", create)
        settings = Settings(
            _env_file=None,
            supabase_url="https://abc.supabase.co",
            supabase_key="anon-key",
        )

        store = await create_record_store(settings)

        create.assert_awaited_once_with("https://abc.supabase.co", "anon-key")
        assert store.client is fake_client

    @pytest.mark.anyio
    async def test_context_closes_store_on_error(self, monkeypatch):
        settings = Settings(_env_file=None, store_backend="sql")
        engine = get_async_engine("sqlite+aiosqlite:///:memory:")
        store = SQLRecordStore(engine)
        closed = []

        async def fake_create(_settings):
            return store

        async def fake_close():
            closed.append(True)

        monkeypatch.setattr("chatdb.core.database.create_record_store", fake_create)
        monkeypatch.setattr(store, "close", fake_close)

        with pytest.raises(RuntimeError):
            async with record_store_context(settings):
                raise RuntimeError("caller failed")

        assert closed == [True]
        await engine.dispose()
