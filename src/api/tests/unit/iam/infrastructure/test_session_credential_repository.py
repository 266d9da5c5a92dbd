"""Unit tests for SessionCredentialRepository."""

from unittest.mock import MagicMock

import pytest
from sqlalchemy.dialects import postgresql

from iam.infrastructure.session_credential_repository import (
    SessionCredentialRepository,
)


def _compiled_sql(statement) -> str:
    return str(statement.compile(dialect=postgresql.dialect()))


class TestSessionCredentialRepository:
    """Tests for SessionCredentialRepository."""

    @pytest.mark.asyncio
    async def test_upsert_is_a_single_conflict_update(self, mock_session):
        """Concurrent logins of one identity resolve in the database."""
        repo = SessionCredentialRepository(session=mock_session)

        await repo.upsert("user-123", "token-abc")

        mock_session.begin.assert_called_once()
        mock_session.execute.assert_awaited_once()
        sql = _compiled_sql(mock_session.execute.call_args.args[0])
        assert "INSERT INTO session_credentials" in sql
        assert "ON CONFLICT (identity_id) DO UPDATE" in sql
        assert "access_token = excluded.access_token" in sql

    @pytest.mark.asyncio
    async def test_get_token_returns_stored_value(self, mock_session):
        result = MagicMock()
        result.scalar_one_or_none.return_value = "token-abc"
        mock_session.execute.return_value = result
        repo = SessionCredentialRepository(session=mock_session)

        assert await repo.get_token("user-123") == "token-abc"

    @pytest.mark.asyncio
    async def test_get_token_missing(self, mock_session):
        result = MagicMock()
        result.scalar_one_or_none.return_value = None
        mock_session.execute.return_value = result
        repo = SessionCredentialRepository(session=mock_session)

        assert await repo.get_token("unknown") is None
