"""Persistence utilities for the expense tracker core services."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import Iterable, List, Optional

from .csv_codec import decode_file, encode_file
from .exceptions import PersistenceError
from .logging_setup import get_logger
from .models import Expense

logger = get_logger(__name__)


def write_atomic(path: Path, text: str) -> None:
    """Write ``text`` to ``path`` through a sibling temp file and an atomic rename."""
    temp_path: Optional[Path] = None
    try:
        # newline="" keeps line breaks inside quoted notes byte-for-byte.
        with tempfile.NamedTemporaryFile(
            "w",
            encoding="utf-8",
            newline="",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
        ) as handle:
            temp_path = Path(handle.name)
            handle.write(text)
            handle.flush()
            os.fsync(handle.fileno())
        temp_path.replace(path)
    except OSError as exc:
        if temp_path is not None:
            temp_path.unlink(missing_ok=True)
        raise PersistenceError(f"Unable to write to {path}") from exc


class CSVStorage:
    """File-based CSV storage with crash-safe writes."""

    def __init__(self, base_path: Path) -> None:
        self._base_path = base_path
        try:
            self._base_path.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise PersistenceError(f"Unable to create data directory {base_path}") from exc

    def load(self, resource: str) -> List[Expense]:
        path = self._base_path / resource
        if not path.exists():
            logger.debug("No data file at %s, starting empty", path)
            return []
        try:
            with path.open("r", encoding="utf-8", newline="") as handle:
                text = handle.read()
        except UnicodeDecodeError as exc:
            raise PersistenceError(f"Corrupted CSV data in {path}") from exc
        except OSError as exc:
            raise PersistenceError(f"Unable to read from {path}") from exc

        expenses = decode_file(text)
        logger.debug("Loaded %d expense(s) from %s", len(expenses), path)
        return expenses

    def save(self, resource: str, expenses: Iterable[Expense]) -> None:
        path = self._base_path / resource
        write_atomic(path, encode_file(expenses))
        logger.debug("Saved expenses to %s", path)

    @property
    def base_path(self) -> Path:
        return self._base_path
