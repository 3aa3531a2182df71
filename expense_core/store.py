"""In-memory ordered collection of expenses."""

from __future__ import annotations

from decimal import Decimal
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from .exceptions import RecordNotFoundError
from .models import Expense
from .validators import validate_sort_column

_SORT_KEYS: Dict[str, Callable[[Expense], object]] = {
    "date": lambda expense: expense.date,
    "category": lambda expense: expense.category.lower(),
    "note": lambda expense: expense.note.lower(),
    "amount": lambda expense: expense.amount,
}


class ExpenseStore:
    """Holds expenses newest first.

    Storage order only reflects insertion: new expenses go to the front and a
    freshly loaded file puts its last line first. Display orderings are derived
    with :meth:`sorted_positions` and never reorder the underlying sequence.
    """

    def __init__(self, expenses: Iterable[Expense] = ()) -> None:
        self._expenses: List[Expense] = list(expenses)

    def __len__(self) -> int:
        return len(self._expenses)

    def insert_front(self, expense: Expense) -> None:
        self._expenses.insert(0, expense)

    def remove_at(self, position: int) -> Expense:
        self._check_position(position)
        return self._expenses.pop(position)

    def replace_all(self, expenses: Iterable[Expense]) -> None:
        self._expenses = list(expenses)

    def list_all(self) -> Tuple[Expense, ...]:
        return tuple(self._expenses)

    def total(self) -> Decimal:
        return sum((expense.amount for expense in self._expenses), start=Decimal("0"))

    def sorted_positions(
        self, column: Optional[str] = None, descending: bool = False
    ) -> List[int]:
        """Return storage positions in display order for ``column``."""
        column = validate_sort_column(column)
        positions = list(range(len(self._expenses)))
        if column is None:
            return positions[::-1] if descending else positions
        key = _SORT_KEYS[column]
        # sorted() is stable, so ties keep storage order in both directions.
        return sorted(
            positions,
            key=lambda position: key(self._expenses[position]),
            reverse=descending,
        )

    def _check_position(self, position: int) -> None:
        if not 0 <= position < len(self._expenses):
            raise RecordNotFoundError(
                f"Position {position} is out of range for {len(self._expenses)} expenses"
            )
