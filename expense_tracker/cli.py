"""Console interface for the expense tracker."""

from __future__ import annotations

import argparse
import os
import sys
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

from expense_core.exceptions import PersistenceError, RecordNotFoundError, ValidationError
from expense_core.logging_setup import configure_logging
from expense_core.models import Expense, format_amount
from expense_core.services import EXPORT_FILE, ExpenseService
from expense_core.storage import CSVStorage
from expense_core.validators import SORT_COLUMNS, parse_date

DATA_DIR_ENV = "EXPENSE_TRACKER_DATA_DIR"


def _parse_date(value: str) -> str:
    try:
        parse_date(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(
            f"Invalid date '{value}'. Expected format YYYY-MM-DD."
        ) from exc
    return value


def _parse_amount(value: str) -> str:
    try:
        amount = Decimal(value)
    except InvalidOperation as exc:
        raise argparse.ArgumentTypeError("Amount must be a numeric value") from exc
    if not amount.is_finite():
        raise argparse.ArgumentTypeError("Amount must be a finite number")
    if amount < 0:
        raise argparse.ArgumentTypeError("Amount must not be negative")
    return value


def _one_line(text: str) -> str:
    return " ".join(text.split())


def _format_rows(rows: Iterable[Tuple[int, Expense]]) -> List[str]:
    lines = [f"{'#':>4}  {'Date':<10}  {'Category':<14}  {'Amount':>12}  Note"]
    for index, expense in rows:
        lines.append(
            f"{index:>4}  {expense.date.isoformat():<10}  {expense.category:<14}  "
            f"{format_amount(expense.amount):>12}  {_one_line(expense.note) or '-'}"
        )
    return lines


def _load_service(data_dir: Path) -> ExpenseService:
    return ExpenseService(CSVStorage(data_dir))


def handle_command(args: argparse.Namespace, service: ExpenseService) -> None:
    if args.command == "add":
        expense = service.add(args.amount, args.category, args.date, args.note)
        print(f"Expense added: {expense.date.isoformat()} {expense.category} "
              f"{format_amount(expense.amount)}")
        print(f"Total: {format_amount(service.total())}")
    elif args.command == "list":
        rows = service.rows(args.sort, args.descending)
        if not rows:
            print("No expenses recorded.")
            return
        print("\n".join(_format_rows(rows)))
        print(f"Found {len(rows)} expenses (total {format_amount(service.total())})")
    elif args.command == "delete":
        removed = service.delete(args.index, args.sort, args.descending)
        print(f"Deleted expense: {removed.date.isoformat()} {removed.category} "
              f"{format_amount(removed.amount)}")
        print(f"Total: {format_amount(service.total())}")
    elif args.command == "total":
        print(f"Total: {format_amount(service.total())}")
    elif args.command == "export":
        path = service.export(args.destination)
        print(f"Exported {len(service.list())} expenses to {path}")
    elif args.command == "categories":
        print("\n".join(service.categories()))


def _add_sort_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--sort", choices=SORT_COLUMNS, help="Column to order by")
    parser.add_argument("--descending", action="store_true", help="Reverse the order")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Expense Tracker CLI")
    parser.add_argument(
        "--data-dir",
        default=os.getenv(DATA_DIR_ENV, "data"),
        type=Path,
        help=f"Directory holding expenses.csv (default: ${DATA_DIR_ENV} or ./data)",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Logging level, e.g. INFO or DEBUG (default: WARNING)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    add = subparsers.add_parser("add", help="Record a new expense")
    add.add_argument("amount", type=_parse_amount)
    add.add_argument("category")
    add.add_argument("--date", type=_parse_date, help="YYYY-MM-DD (default: today)")
    add.add_argument("--note", default="")

    listing = subparsers.add_parser("list", help="List expenses with their display index")
    _add_sort_arguments(listing)

    delete = subparsers.add_parser("delete", help="Delete an expense by display index")
    delete.add_argument("index", type=int)
    _add_sort_arguments(delete)

    subparsers.add_parser("total", help="Print the sum of all expenses")

    export = subparsers.add_parser("export", help="Write all expenses to a CSV file")
    export.add_argument("destination", nargs="?", default=EXPORT_FILE, type=Path)

    subparsers.add_parser("categories", help="Show suggested categories")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    try:
        service = _load_service(args.data_dir)
        handle_command(args, service)
    except ValidationError as exc:
        print(f"Validation error: {exc}", file=sys.stderr)
        return 1
    except RecordNotFoundError as exc:
        print(str(exc), file=sys.stderr)
        return 1
    except PersistenceError as exc:
        print(f"Storage error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
