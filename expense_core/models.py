"""Data models for the expense tracker domain."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict
from uuid import UUID, uuid4

__all__ = ["DATE_FORMAT", "DEFAULT_CATEGORIES", "Expense", "format_amount"]

DATE_FORMAT = "%Y-%m-%d"

DEFAULT_CATEGORIES = (
    "Food",
    "Transport",
    "Shopping",
    "Bills",
    "Entertainment",
    "Health",
    "Subscriptions",
    "Other",
)


def format_amount(amount: Decimal) -> str:
    """Render an amount with exactly two fraction digits, rounding half up."""
    return f"{amount.quantize(Decimal('0.01'), rounding=ROUND_HALF_UP):.2f}"


@dataclass(frozen=True)
class Expense:
    amount: Decimal
    category: str
    date: date
    note: str = ""
    id: UUID = field(default_factory=uuid4)

    def __post_init__(self) -> None:
        if self.note is None:
            # Frozen dataclass: bypass __setattr__ to normalise the missing note.
            object.__setattr__(self, "note", "")

    def to_dict(self) -> Dict[str, Any]:
        """Serialise the expense to JSON-friendly natives."""
        return {
            "id": str(self.id),
            "amount": format_amount(self.amount),
            "category": self.category,
            "date": self.date.strftime(DATE_FORMAT),
            "note": self.note,
        }
