"""
Tests for the log_failures decorator.
"""

import logging

import pytest

from chatdb.core.errors import log_failures


class CustomStoreError(Exception):
    pass


@log_failures("Failed to do the thing")
async def succeed(value):
    return value * 2


@log_failures("Failed to do the thing")
async def fail(error):
    raise error


@log_failures("Failed to store the thing", operation="store_thing")
async def _store_thing(error):
    raise error


class TestLogFailures:
    """Tests for log_failures."""

    @pytest.mark.anyio
    async def test_passes_result_through(self, caplog):
        caplog.set_level(logging.ERROR, logger="chatdb.core.errors")

        assert await succeed(21) == 42
        assert [r for r in caplog.records if r.name == "chatdb.core.errors"] == []

    @pytest.mark.anyio
    async def test_reraises_same_exception_object(self, caplog):
        """
        Arrange: Error instance of a custom type
        Act: Call decorated coroutine that raises it
        Assert: Same instance and type propagate; message logged once
        """
        # Arrange
        error = CustomStoreError("boom")
        caplog.set_level(logging.ERROR, logger="chatdb.core.errors")

        # Act
        with pytest.raises(CustomStoreError) as exc_info:
            await fail(error)

        # Assert
        assert exc_info.value is error
        records = [r for r in caplog.records if r.name == "chatdb.core.errors"]
        assert len(records) == 1
        assert records[0].getMessage() == "Failed to do the thing"
        assert records[0].operation == "fail"
        assert records[0].exc_info is not None

    def test_preserves_function_metadata(self):
        assert succeed.__name__ == "succeed"

    @pytest.mark.anyio
    async def test_explicit_operation_name_is_logged(self, caplog):
        caplog.set_level(logging.ERROR, logger="chatdb.core.errors")

        with pytest.raises(RuntimeError):
            await _store_thing(RuntimeError("boom"))

        records = [r for r in caplog.records if r.name == "chatdb.core.errors"]
        assert [r.operation for r in records] == ["store_thing"]

    def test_logger_comes_from_logging_config(self):
        from chatdb.core import errors
        from chatdb.core.logging_config import get_logger

        assert errors.logger is get_logger("chatdb.core.errors")
