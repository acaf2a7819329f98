"""
Test suite for the PostgreSQL UpdateRepository

The asyncpg pool is replaced with an in-process stand-in whose connection
methods are AsyncMocks, so SQL shape, result parsing and driver error
translation run without a server.

Run with: python -m unittest tests.test_update_repository_postgres
"""

import unittest
from datetime import date, datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import asyncpg

from database.db_postgres import Database
from database.id_generation import generate_update_id
from database.models import Update
from database.repositories_async import UpdateRepository
from exceptions import DatabaseConnectionError, DatabaseError, DuplicateUpdateError

UNIQUE_ID = generate_update_id("Veracode", date(2026, 1, 20), "CLI updates - v2")


class FakeAcquire:
    def __init__(self, conn):
        self.conn = conn

    async def __aenter__(self):
        return self.conn

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        return False


class FakePool:
    def __init__(self, conn):
        self.conn = conn

    def acquire(self):
        return FakeAcquire(self.conn)


def make_update() -> Update:
    return Update(
        unique_id=UNIQUE_ID,
        tool="Veracode",
        version="CLI updates - v2",
        date=date(2026, 1, 20),
        description="New",
        link="https://docs.veracode.com/updates/r/Veracode_CLI_Updates",
    )


class TestPostgresUpdateRepository(unittest.IsolatedAsyncioTestCase):

    def setUp(self):
        self.conn = MagicMock()
        self.conn.execute = AsyncMock(return_value="INSERT 0 1")
        self.conn.fetchrow = AsyncMock(return_value=None)
        self.conn.fetch = AsyncMock(return_value=[])
        self.repo = UpdateRepository(FakePool(self.conn))

    async def test_get_update_builds_model(self):
        created = datetime(2026, 1, 21, 8, 0, tzinfo=timezone.utc)
        self.conn.fetchrow.return_value = {
            "unique_id": UNIQUE_ID,
            "tool": "Veracode",
            "version": "CLI updates - v2",
            "date": date(2026, 1, 20),
            "description": None,
            "link": "https://x/cli",
            "created_at": created,
            "updated_at": created,
        }

        update = await self.repo.get_update(UNIQUE_ID)

        self.assertEqual(update.date, date(2026, 1, 20))
        self.assertEqual(update.description, "")
        self.assertEqual(update.created_at, created)
        self.assertEqual(self.conn.fetchrow.call_args.args[1], UNIQUE_ID)

    async def test_get_missing_update_is_none(self):
        self.assertIsNone(await self.repo.get_update(UNIQUE_ID))

    async def test_unique_violation_becomes_duplicate_update(self):
        self.conn.execute.side_effect = asyncpg.UniqueViolationError(
            'duplicate key value violates unique constraint "updates_unique_id_key"'
        )

        with self.assertRaises(DuplicateUpdateError) as ctx:
            await self.repo.insert_update(make_update())

        self.assertEqual(ctx.exception.unique_id, UNIQUE_ID)

    async def test_update_content_is_single_conditional_statement(self):
        self.conn.execute.return_value = "UPDATE 1"

        changed = await self.repo.update_content(UNIQUE_ID, "Changed", "https://x/cli", "CLI updates - v2")

        self.assertTrue(changed)
        self.conn.execute.assert_awaited_once()
        query, *args = self.conn.execute.call_args.args
        self.assertIn("IS DISTINCT FROM", query)
        self.assertEqual(args, [UNIQUE_ID, "Changed", "https://x/cli", "CLI updates - v2"])

    async def test_update_content_unchanged_row_reports_false(self):
        self.conn.execute.return_value = "UPDATE 0"

        self.assertFalse(await self.repo.update_content(UNIQUE_ID, "New", "https://x/cli", "CLI updates - v2"))

    async def test_search_escapes_wildcards(self):
        await self.repo.search_updates(tool="50%_off", limit=5)

        query, pattern, limit = self.conn.fetch.call_args.args
        self.assertIn("ILIKE", query)
        self.assertEqual(pattern, "%50\\%\\_off%")
        self.assertEqual(limit, 5)

    async def test_count_by_tool(self):
        self.conn.fetch.return_value = [
            {"tool": "SD Elements", "total": 4},
            {"tool": "Veracode", "total": 9},
        ]

        self.assertEqual(await self.repo.count_by_tool(), {"SD Elements": 4, "Veracode": 9})

    async def test_lost_connection_is_connection_error(self):
        self.conn.fetchrow.side_effect = asyncpg.InterfaceError("connection is closed")

        with self.assertRaises(DatabaseConnectionError):
            await self.repo.get_update(UNIQUE_ID)

    async def test_other_postgres_errors_are_database_errors(self):
        self.conn.fetch.side_effect = asyncpg.UndefinedTableError('relation "updates" does not exist')

        with self.assertRaises(DatabaseError) as ctx:
            await self.repo.search_updates()

        self.assertNotIsInstance(ctx.exception, DatabaseConnectionError)


class TestPostgresSchemaInit(unittest.IsolatedAsyncioTestCase):

    async def test_lost_connection_is_connection_error(self):
        conn = MagicMock()
        conn.execute = AsyncMock(side_effect=asyncpg.InterfaceError("connection is closed"))

        with self.assertRaises(DatabaseConnectionError):
            await Database(FakePool(conn)).init_schema()

    async def test_rejected_schema_is_database_error(self):
        conn = MagicMock()
        conn.execute = AsyncMock(side_effect=asyncpg.InsufficientPrivilegeError("permission denied for schema public"))

        with self.assertRaises(DatabaseError):
            await Database(FakePool(conn)).init_schema()


if __name__ == "__main__":
    unittest.main()
