"""Shared fixtures: every test gets its own data directory under ``tmp_path``."""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal
from pathlib import Path
from uuid import UUID

import pytest

from expense_core import logging_setup
from expense_core.models import Expense
from expense_core.services import ExpenseService
from expense_core.storage import CSVStorage


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "EXPENSE_TRACKER_DATA_DIR",
        "EXPENSE_TRACKER_ENV",
        "EXPENSE_TRACKER_ALLOWED_ORIGINS",
        "EXPENSE_TRACKER_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def _isolate_logging(monkeypatch: pytest.MonkeyPatch):
    """Undo ``configure_logging`` after each test so handlers never leak.

    The CLI and the API factory configure the package logger, which turns off
    propagation; without this, ``caplog`` would miss records in later tests.
    """
    pkg_logger = logging.getLogger("expense_core")
    handlers = list(pkg_logger.handlers)
    level, propagate = pkg_logger.level, pkg_logger.propagate
    monkeypatch.setattr(logging_setup, "_CONFIGURED", False)
    yield
    pkg_logger.handlers[:] = handlers
    pkg_logger.setLevel(level)
    pkg_logger.propagate = propagate


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    return tmp_path / "data"


@pytest.fixture
def storage(data_dir: Path) -> CSVStorage:
    return CSVStorage(data_dir)


@pytest.fixture
def service(storage: CSVStorage) -> ExpenseService:
    return ExpenseService(storage)


def _make_expense(
    amount: str, category: str = "Food", day: int = 1, note: str = "", n: int = 1
) -> Expense:
    return Expense(
        id=UUID(int=n),
        amount=Decimal(amount),
        category=category,
        date=date(2024, 3, day),
        note=note,
    )


@pytest.fixture
def make_expense():
    """Build an expense with a deterministic id (``UUID(int=n)``)."""
    return _make_expense
