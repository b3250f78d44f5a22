"""Shared fixtures for SQLite persistence tests.

Provides a ``conn`` fixture backed by an isolated on-disk database per test,
with the schema initialized, closed after the test completes.
"""
from __future__ import annotations

import sqlite3
from pathlib import Path
from typing import Iterator

import pytest

from ai_gateway.persistence.sqlite.engine import create_connection, init_schema


@pytest.fixture()
def conn(tmp_path: Path) -> Iterator[sqlite3.Connection]:
    connection = create_connection(str(tmp_path / "repos.db"))
    init_schema(connection)
    try:
        yield connection
    finally:
        connection.close()
