"""CSV encoding and decoding for expense records.

A record is written as one line with the fields ``id,amount,category,date,note``.
Text fields containing a comma, a double quote or a line break are wrapped in
double quotes with every internal quote doubled. Decoding is best effort: a line
that cannot be turned back into an :class:`Expense` is skipped, never raised.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Iterable, List, Optional
from uuid import UUID

from .logging_setup import get_logger
from .models import DATE_FORMAT, Expense, format_amount
from .validators import parse_date

__all__ = [
    "HEADER",
    "decode_expense",
    "decode_file",
    "encode_expense",
    "encode_file",
    "escape_field",
    "split_line",
]

HEADER = "id,amount,category,date,note"
FIELD_COUNT = 5

_QUOTE = '"'
_RESERVED = (",", _QUOTE, "\n", "\r")

logger = get_logger(__name__)


def escape_field(text: Optional[str]) -> str:
    if text is None:
        return ""
    if any(char in text for char in _RESERVED):
        return _QUOTE + text.replace(_QUOTE, _QUOTE * 2) + _QUOTE
    return text


def encode_expense(expense: Expense) -> str:
    return ",".join(
        (
            str(expense.id),
            format_amount(expense.amount),
            escape_field(expense.category),
            expense.date.strftime(DATE_FORMAT),
            escape_field(expense.note),
        )
    )


def encode_file(expenses: Iterable[Expense]) -> str:
    """Render the header followed by one line per expense.

    ``expenses`` is newest first, as the store holds it. Lines are written oldest
    first so the most recent expense is the last line of the file, which is the
    order :func:`decode_file` undoes.
    """
    lines = [HEADER]
    lines.extend(encode_expense(expense) for expense in reversed(list(expenses)))
    return "\n".join(lines) + "\n"


def split_line(line: str) -> List[str]:
    """Split a CSV record into fields, honouring double-quoted sections.

    A quote outside quoted mode starts a quoted section wherever it occurs, a
    doubled quote inside one is a literal quote, and a lone quote ends it.
    """
    fields: List[str] = []
    current: List[str] = []
    quoted = False
    index = 0
    length = len(line)
    while index < length:
        char = line[index]
        if quoted:
            if char == _QUOTE:
                if index + 1 < length and line[index + 1] == _QUOTE:
                    current.append(_QUOTE)
                    index += 1
                else:
                    quoted = False
            else:
                current.append(char)
        elif char == _QUOTE:
            quoted = True
        elif char == ",":
            fields.append("".join(current))
            current = []
        else:
            current.append(char)
        index += 1
    fields.append("".join(current))
    return fields


def decode_expense(line: str) -> Optional[Expense]:
    """Return the expense stored on ``line`` or ``None`` when it is malformed."""
    fields = split_line(line)
    if len(fields) != FIELD_COUNT:
        return None
    raw_id, raw_amount, category, raw_date, note = fields
    try:
        expense_id = UUID(raw_id)
        amount = Decimal(raw_amount)
        if not amount.is_finite():
            return None
        # Reject magnitudes that could not be written back with two decimals.
        format_amount(amount)
        expense_date = parse_date(raw_date)
    except (ValueError, ArithmeticError):
        return None
    return Expense(
        id=expense_id,
        amount=amount,
        category=category,
        date=expense_date,
        note=note,
    )


def _continues_on_next_line(text: str) -> bool:
    """True when ``text`` ends inside a quoted field that opened at a field start.

    The encoder only ever opens quotes at the start of a field, so a stray
    quote in the middle of hand-edited text never pulls in following lines.
    """
    quoted = False
    opened_at_start = False
    at_field_start = True
    index = 0
    length = len(text)
    while index < length:
        char = text[index]
        if quoted:
            if char == _QUOTE:
                if index + 1 < length and text[index + 1] == _QUOTE:
                    index += 1
                else:
                    quoted = False
        elif char == _QUOTE:
            quoted = True
            opened_at_start = at_field_start
        elif char == ",":
            at_field_start = True
            index += 1
            continue
        at_field_start = False
        index += 1
    return quoted and opened_at_start


def _strip_cr(text: str) -> str:
    return text[:-1] if text.endswith("\r") else text


def decode_file(text: str) -> List[Expense]:
    """Decode a whole file, newest first.

    The first line is the header and is discarded. A record whose quoted note
    spans several physical lines is reassembled, stopping early at any line
    that decodes as a record of its own. If the reassembled text does not
    decode, or its quote never closes, only its first physical line is decoded
    and scanning resumes on the next one. The decoded records are returned in
    reverse file order.
    """
    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()

    expenses: List[Expense] = []
    rejected = 0
    position = 1
    while position < len(lines):
        record = lines[position]
        end = position + 1
        while (
            _continues_on_next_line(record)
            and end < len(lines)
            and decode_expense(_strip_cr(lines[end])) is None
        ):
            record = record + "\n" + lines[end]
            end += 1

        expense = None
        if end == position + 1 or not _continues_on_next_line(record):
            expense = decode_expense(_strip_cr(record))
        if expense is None and end > position + 1:
            end = position + 1
            expense = decode_expense(_strip_cr(lines[position]))

        if expense is not None:
            expenses.append(expense)
        elif _strip_cr(lines[position]).strip():
            rejected += 1
        position = end

    if rejected:
        logger.warning("Skipped %d malformed line(s) while decoding", rejected)
    expenses.reverse()
    return expenses
