"""Tests for CLI commands."""

import asyncio
from pathlib import Path

import pytest
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool
from typer.testing import CliRunner

from src.cli import commands
from src.storage.database.base import Base
from src.storage.database.models import Wedding
from src.storage.database.webhook_models import ApiToken

runner = CliRunner()


@pytest.fixture
def cli_sessions(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> async_sessionmaker[AsyncSession]:
    """Point the CLI at its own SQLite file holding one wedding."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path}/cli.db", poolclass=NullPool)
    sessions = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async def _setup() -> None:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        async with sessions() as session:
            session.add(Wedding(id="cli-wedding", name="Eva & Noah"))
            await session.commit()

    asyncio.run(_setup())
    monkeypatch.setattr(commands, "AsyncSessionLocal", sessions)
    return sessions


def test_version() -> None:
    """Test version command."""
    result = runner.invoke(commands.app, ["version"])

    assert result.exit_code == 0
    assert "Wedding Hooks v0.1.0" in result.output


def test_issue_token(cli_sessions: async_sessionmaker[AsyncSession]) -> None:
    """Test a token is printed once and stored."""
    result = runner.invoke(commands.app, ["issue-token", "cli-wedding", "Zapier"])

    assert result.exit_code == 0
    assert "ppt_" in result.output

    async def _stored() -> list[str]:
        async with cli_sessions() as session:
            result = await session.execute(select(ApiToken.token).where(ApiToken.wedding_id == "cli-wedding"))
            return list(result.scalars().all())

    [token] = asyncio.run(_stored())
    assert token in result.output


def test_issue_token_unknown_wedding(cli_sessions: async_sessionmaker[AsyncSession]) -> None:
    """Test issuing for a missing wedding fails with exit code 1."""
    result = runner.invoke(commands.app, ["issue-token", "nobody", "Zapier"])

    assert result.exit_code == 1
    assert "Wedding not found" in result.output
