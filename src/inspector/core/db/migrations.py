"""Reusable migration runner."""

import asyncio

from alembic.config import Config

from alembic import command


def run_migrations_sync(config_path: str = "alembic.ini", revision: str = "head") -> None:
    """Run Alembic migrations synchronously."""
    command.upgrade(Config(config_path), revision)


async def run_migrations_async(config_path: str = "alembic.ini") -> None:
    """Run Alembic migrations from async context without blocking the event loop."""
    await asyncio.to_thread(run_migrations_sync, config_path)
