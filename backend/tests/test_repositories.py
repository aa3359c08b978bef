"""Tests for the generic repository against a mocked session."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.dialects import postgresql

from metalflow.models.line import Line
from metalflow.repositories import LineRepository


def _compiled(statement) -> str:
    return str(statement.compile(dialect=postgresql.dialect()))


def _result(*rows) -> MagicMock:
    result = MagicMock()
    result.scalars.return_value.all.return_value = list(rows)
    result.scalar_one_or_none.return_value = rows[0] if rows else None
    return result


class TestRepositoryWrites:
    @pytest.mark.asyncio
    async def test_add_stamps_and_flushes(self, mock_db):
        line = Line(name="L1")

        await LineRepository(mock_db).add(line)

        assert line.enabled is True
        assert line.created_at == line.last_update
        mock_db.add.assert_called_once_with(line)
        mock_db.flush.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_soft_remove_keeps_row(self, mock_db, line_factory):
        line = line_factory.create()

        await LineRepository(mock_db).soft_remove(line)

        assert line.enabled is False
        mock_db.delete.assert_not_awaited()
        mock_db.flush.assert_awaited_once()


class TestRepositoryReads:
    @pytest.mark.asyncio
    async def test_find_by_name_ignores_case(self, mock_db, line_factory):
        line = line_factory.create(name="Main")
        mock_db.execute = AsyncMock(return_value=_result(line))

        found = await LineRepository(mock_db).find_by_name("MAIN")

        assert found == [line]
        sql = _compiled(mock_db.execute.await_args.args[0])
        assert "lower(lines.name)" in sql
        assert "enabled" not in sql.split("WHERE", 1)[1]

    @pytest.mark.asyncio
    async def test_find_enabled_by_name_excludes_own_id(self, mock_db):
        mock_db.execute = AsyncMock(return_value=_result())

        await LineRepository(mock_db).find_enabled_by_name("Main", exclude_id=3)

        where = _compiled(mock_db.execute.await_args.args[0]).split("WHERE", 1)[1]
        assert "lines.enabled IS true" in where
        assert "lines.id !=" in where

    @pytest.mark.asyncio
    async def test_find_enabled_ids_skips_query_for_empty_input(self, mock_db):
        assert await LineRepository(mock_db).find_enabled_ids([]) == set()
        mock_db.execute.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_find_enabled_ids(self, mock_db):
        mock_db.execute = AsyncMock(return_value=_result(1, 3))

        assert await LineRepository(mock_db).find_enabled_ids([1, 2, 3]) == {1, 3}

    @pytest.mark.asyncio
    async def test_details_read_refreshes_identity_map(self, mock_db, line_factory):
        line = line_factory.create()
        mock_db.execute = AsyncMock(return_value=_result(line))

        assert await LineRepository(mock_db).get_by_id_with_details(line.id) is line

        statement = mock_db.execute.await_args.args[0]
        assert statement.get_execution_options()["populate_existing"] is True
