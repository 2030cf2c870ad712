"""Tests for schema migrations."""

from pathlib import Path

import aiosqlite
import pytest

from shopdesk.infrastructure.storage.sqlite import migrations as migrations_module
from shopdesk.infrastructure.storage.sqlite.migrations import (
    MIGRATIONS,
    Migration,
    get_applied_migrations,
    run_migrations,
)


class TestRunMigrations:
    async def test_applies_all_then_nothing(self, temp_db_path: Path):
        first = await run_migrations(temp_db_path)
        second = await run_migrations(temp_db_path)

        assert first == [m.version for m in MIGRATIONS]
        assert second == []

    async def test_creates_tables(self, temp_db_path: Path):
        await run_migrations(temp_db_path)

        async with aiosqlite.connect(temp_db_path) as conn:
            cursor = await conn.execute("SELECT name FROM sqlite_master WHERE type = 'table'")
            tables = {row[0] for row in await cursor.fetchall()}

        assert {"products", "sales", "sale_items", "schema_migrations"} <= tables

    async def test_records_checksums(self, temp_db_path: Path):
        await run_migrations(temp_db_path)

        async with aiosqlite.connect(temp_db_path) as conn:
            applied = await get_applied_migrations(conn)

        assert applied == {m.version: m.checksum for m in MIGRATIONS}

    async def test_applied_is_empty_without_table(self, temp_db_path: Path):
        async with aiosqlite.connect(temp_db_path) as conn:
            assert await get_applied_migrations(conn) == {}

    async def test_failed_migration_leaves_no_trace(
        self, temp_db_path: Path, monkeypatch: pytest.MonkeyPatch
    ):
        broken = Migration(
            version="999",
            name="broken",
            statements=("CREATE TABLE half_done (id INTEGER)", "CREATE TABLE oops ("),
        )
        monkeypatch.setattr(migrations_module, "MIGRATIONS", (*MIGRATIONS, broken))

        with pytest.raises(aiosqlite.Error):
            await run_migrations(temp_db_path)

        async with aiosqlite.connect(temp_db_path) as conn:
            cursor = await conn.execute("SELECT name FROM sqlite_master WHERE type = 'table'")
            tables = {row[0] for row in await cursor.fetchall()}
            applied = await get_applied_migrations(conn)

        assert "half_done" not in tables
        assert "products" in tables
        assert set(applied) == {m.version for m in MIGRATIONS}
