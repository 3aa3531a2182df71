"""Core business logic package for the expense tracker."""

from .models import DEFAULT_CATEGORIES, Expense
from .services import ExpenseService
from .storage import CSVStorage
from .store import ExpenseStore
from .exceptions import PersistenceError, ValidationError, RecordNotFoundError

__all__ = [
    "DEFAULT_CATEGORIES",
    "Expense",
    "ExpenseService",
    "ExpenseStore",
    "CSVStorage",
    "PersistenceError",
    "ValidationError",
    "RecordNotFoundError",
]
