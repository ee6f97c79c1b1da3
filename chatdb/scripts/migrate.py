"""
Schema initialization CLI.

Calls the store's ``init_schema`` procedure once. The procedure creates
every table that does not exist yet, so running this repeatedly is safe;
no record of applied migrations is kept.

Usage:
    chatdb-migrate
    python -m chatdb.scripts.migrate

Requirements:
    - SUPABASE_URL and SUPABASE_KEY in the environment or in .env.local
      (STORE_BACKEND=sql initializes the local database instead)

Exit codes:
    0 on success, 1 on failure
"""

import asyncio
import sys
import time

from dotenv import load_dotenv

from chatdb.core.config import Settings
from chatdb.core.database import record_store_context
from chatdb.core.logging_config import get_logger, setup_logging

logger = get_logger(__name__)


async def run_migrate(settings: Settings) -> int:
    """
    Initialize the schema and report how long it took.

    Args:
        settings: Validated settings selecting the record store

    Returns:
        Process exit code (0 success, 1 failure)
    """
    print("Running migrations...")
    start = time.perf_counter()

    try:
        async with record_store_context(settings) as store:
            await store.rpc("init_schema")
    except Exception:
        logger.exception("Migration failed")
        print("Migration failed", file=sys.stderr)
        return 1

    elapsed_ms = round((time.perf_counter() - start) * 1000)
    print(f"Migrations completed in {elapsed_ms} ms")
    logger.info("Migrations completed", extra={"latency_ms": elapsed_ms})
    return 0


def main() -> None:
    """
    Console entry point.

    Missing store credentials raise a ValidationError from Settings()
    before any request is made and propagates.
    """
    load_dotenv(".env.local")
    settings = Settings()
    setup_logging(level=settings.log_level, json_format=settings.log_json)

    sys.exit(asyncio.run(run_migrate(settings)))


if __name__ == "__main__":
    main()
