"""Validation helpers shared across expense tracker services."""

from __future__ import annotations

import re
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Optional

from .exceptions import ValidationError
from .models import DATE_FORMAT, format_amount

DATE_PATTERN = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")

SORT_COLUMNS = ("date", "category", "note", "amount")


def parse_amount(raw: object, field: str) -> Decimal:
    """Convert raw input to a finite, non-negative Decimal at full precision."""
    try:
        amount = Decimal(str(raw).strip())
    except (InvalidOperation, TypeError) as exc:
        raise ValidationError(f"{field} must be a numeric value") from exc

    if not amount.is_finite():
        raise ValidationError(f"{field} must be a finite number")
    if amount < 0:
        raise ValidationError(f"{field} must not be negative")
    try:
        format_amount(amount)
    except InvalidOperation as exc:
        raise ValidationError(f"{field} is too large") from exc
    # Normalise -0 so it never renders as "-0.00".
    return abs(amount)


def validate_required_str(value: object, field: str, max_length: int) -> str:
    if not isinstance(value, str):
        raise ValidationError(f"{field} must be a string")
    trimmed = value.strip()
    if not trimmed:
        raise ValidationError(f"{field} cannot be empty")
    if len(trimmed) > max_length:
        raise ValidationError(f"{field} must be at most {max_length} characters")
    return trimmed


def validate_note(value: object, field: str) -> str:
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValidationError(f"{field} must be a string")
    return value.strip()


def parse_date(value: str) -> date:
    """Parse a strict ``YYYY-MM-DD`` string; raises ``ValueError`` otherwise."""
    if not DATE_PATTERN.fullmatch(value):
        raise ValueError(f"{value!r} does not match YYYY-MM-DD")
    return datetime.strptime(value, DATE_FORMAT).date()


def validate_date(value: object, field: str) -> date:
    if value is None:
        return date.today()
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise ValidationError(f"{field} must be a date or YYYY-MM-DD string")
    try:
        return parse_date(value.strip())
    except ValueError as exc:
        raise ValidationError(f"{field} must be a valid date in YYYY-MM-DD format") from exc


def validate_sort_column(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    canonical = value.strip().lower()
    if not canonical:
        return None
    if canonical not in SORT_COLUMNS:
        raise ValidationError(f"sort must be one of: {', '.join(SORT_COLUMNS)}")
    return canonical


def validate_relative_path(
    raw: object,
    root: Path,
    field: str,
    *,
    required_prefix: Optional[str] = None,
) -> str:
    if not isinstance(raw, str):
        raise ValidationError(f"{field} must be a string path")
    candidate = Path(raw.strip())
    if not candidate.parts:
        raise ValidationError(f"{field} cannot be empty")
    if candidate.is_absolute():
        raise ValidationError(f"{field} must be a relative path")
    if required_prefix:
        prefix_parts = Path(required_prefix).parts
        if candidate.parts[: len(prefix_parts)] != prefix_parts:
            raise ValidationError(
                f"{field} must start with '{required_prefix}' to stay within the data directory"
            )
        if len(candidate.parts) == len(prefix_parts):
            raise ValidationError(f"{field} must name a file inside '{required_prefix}'")
    try:
        resolved = (root / candidate).resolve()
    except OSError as exc:
        raise ValidationError(f"{field} points to an invalid path") from exc
    base_root = root.resolve()
    if base_root not in resolved.parents:
        raise ValidationError(f"{field} must be located within {root}")
    return str(candidate.as_posix())
