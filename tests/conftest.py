"""Pytest configuration for test isolation.

The CLI and :meth:`ImportSettings.from_env` read ``DAY_DOCKET_*`` variables and
``DATABASE_URL``; a developer's shell (or a local ``.env``) must not leak into
tests. The shared SQLAlchemy engine in ``db.client`` is process-global, so it
is disposed after every test to let the next test bind its own SQLite file.
"""

from __future__ import annotations

import os
from collections.abc import Iterator
from pathlib import Path

import pytest
from db.client import dispose_engine

_ENV_PREFIXES = ("DAY_DOCKET_",)


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    for key in list(os.environ):
        if key.startswith(_ENV_PREFIXES) or key == "DATABASE_URL":
            monkeypatch.delenv(key, raising=False)
    yield
    dispose_engine()


@pytest.fixture
def ledger_url(tmp_path: Path) -> str:
    from tests.helpers.db import bootstrap_sqlite_db

    return bootstrap_sqlite_db(tmp_path / "ledger.db")
