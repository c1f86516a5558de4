"""Shared fixtures."""

from collections.abc import Iterator

import pytest

from stockflow.storage import close_database, init_database


@pytest.fixture
def db(tmp_path) -> Iterator[None]:
    """File-backed SQLite database (worker threads need a shared file)."""
    init_database(f"sqlite:///{tmp_path / 'stockflow.db'}")
    yield
    close_database()
