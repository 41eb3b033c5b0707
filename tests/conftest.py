"""Pytest configuration for test isolation.

The SQL key-value backend resolves its database from ``LEDGER_DATABASE_URL``
and defaults to ``./.ledger/ledger.db`` under the working directory. Tests
must never touch that file, so an autouse fixture points the variable at a
per-test SQLite file and disposes cached engines afterwards.

The workspace ``packages/`` and ``libs/db/src`` directories are put on
``sys.path`` so the suite also runs from a plain checkout.
"""

# ruff: noqa: E402, I001
from __future__ import annotations

import os
import sys
from collections.abc import Iterator
from pathlib import Path

_ROOT = Path(__file__).resolve().parents[1]
sys.path[:0] = [
    p
    for p in (str(_ROOT / "packages"), str(_ROOT / "libs" / "db" / "src"), str(_ROOT))
    if p not in sys.path
]

import pytest

from finance_ledger import InMemoryKeyValueStore, Ledger
from ledger_db.client import dispose_engines


@pytest.fixture(autouse=True)
def _isolate_database(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[str]:
    """Force a per-test database so tests don't share on-disk state."""

    url = f"sqlite+pysqlite:///{os.fspath(tmp_path / 'ledger.db')}"
    monkeypatch.setenv("LEDGER_DATABASE_URL", url)
    monkeypatch.delenv("LEDGER_LOG_LEVEL", raising=False)
    yield url
    dispose_engines()


@pytest.fixture
def kv() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def ledger(kv: InMemoryKeyValueStore) -> Ledger:
    return Ledger.open(kv)
