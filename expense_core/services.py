"""Framework-agnostic business services for the expense tracker."""

from __future__ import annotations

from decimal import Decimal
from pathlib import Path
from typing import List, Optional, Tuple, Union

from .csv_codec import encode_file
from .exceptions import RecordNotFoundError
from .logging_setup import get_logger
from .models import DEFAULT_CATEGORIES, Expense
from .storage import CSVStorage, write_atomic
from .store import ExpenseStore
from .validators import (
    parse_amount,
    validate_date,
    validate_note,
    validate_required_str,
)

DATA_FILE = "expenses.csv"
EXPORT_FILE = "expenses-export.csv"

logger = get_logger(__name__)


class ExpenseService:
    """Manages expense records and mediates persistence.

    Every mutation writes the candidate sequence to disk first and only then
    updates the in-memory store, so a failed save leaves both unchanged.
    """

    def __init__(self, storage: CSVStorage, resource: str = DATA_FILE) -> None:
        self._storage = storage
        self._resource = resource
        self._store = ExpenseStore()
        self.load()  # Hydrate in-memory store from persistence on construction.

    # Public API -----------------------------------------------------------
    def add(
        self,
        amount: object,
        category: object,
        date: object = None,
        note: object = None,
    ) -> Expense:
        expense = Expense(
            amount=parse_amount(amount, "amount"),
            category=validate_required_str(category, "category", 50),
            date=validate_date(date, "date"),
            note=validate_note(note, "note"),
        )
        self._storage.save(self._resource, (expense,) + self._store.list_all())
        self._store.insert_front(expense)
        logger.info("Added expense %s (%s, %s)", expense.id, expense.category, expense.amount)
        return expense

    def delete(
        self, index: int, sort: Optional[str] = None, descending: bool = False
    ) -> Expense:
        """Delete the expense shown at ``index`` in the given display ordering."""
        position = self._position_for(index, sort, descending)
        remaining = list(self._store.list_all())
        removed = remaining.pop(position)
        self._storage.save(self._resource, remaining)
        self._store.remove_at(position)
        logger.info("Deleted expense %s", removed.id)
        return removed

    def list(self, sort: Optional[str] = None, descending: bool = False) -> List[Expense]:
        return [expense for _, expense in self.rows(sort, descending)]

    def rows(
        self, sort: Optional[str] = None, descending: bool = False
    ) -> List[Tuple[int, Expense]]:
        """Return ``(display_index, expense)`` pairs in display order."""
        expenses = self._store.list_all()
        positions = self._store.sorted_positions(sort, descending)
        return [(index, expenses[position]) for index, position in enumerate(positions)]

    def total(self) -> Decimal:
        return self._store.total()

    def export(self, destination: Union[str, Path]) -> Path:
        """Write every expense, in storage order, to ``destination``."""
        path = Path(destination)
        expenses = self._store.list_all()
        write_atomic(path, encode_file(expenses))
        logger.info("Exported %d expense(s) to %s", len(expenses), path)
        return path

    def categories(self) -> List[str]:
        """Suggested categories followed by any other category already in use."""
        names = list(DEFAULT_CATEGORIES)
        known = {name.lower() for name in names}
        for expense in reversed(self._store.list_all()):
            canonical = expense.category.lower()
            if canonical not in known:
                known.add(canonical)
                names.append(expense.category)
        return names

    def load(self) -> None:
        """Load existing expenses from persistence."""
        self._store.replace_all(self._storage.load(self._resource))

    @property
    def data_path(self) -> Path:
        return self._storage.base_path / self._resource

    # Internal helpers -----------------------------------------------------
    def _position_for(self, index: int, sort: Optional[str], descending: bool) -> int:
        positions = self._store.sorted_positions(sort, descending)
        if not 0 <= index < len(positions):
            raise RecordNotFoundError(
                f"Expense #{index} not found; {len(positions)} expense(s) listed"
            )
        return positions[index]
