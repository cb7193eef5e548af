"""Document Numbering - formatting and parsing of order/transaction numbers.

Invariants:
    - Numbers look like {PREFIX}-{YYYY}-{NNNN}; the sequence is zero-padded to 4 digits
      and keeps growing past 9999 without truncation
    - Sequences restart at 1 each calendar year
"""

import re

ORDER_SEQUENCE_KEY = "order"
TRANSACTION_SEQUENCE_KEY = "transaction"


def format_document_number(prefix: str, year: int, sequence: int) -> str:
    return f"{prefix}-{year}-{sequence:04d}"


def parse_sequence(number: str | None, prefix: str, year: int) -> int | None:
    """Extract the sequence part of a number issued for (prefix, year)."""
    if not number:
        return None
    match = re.fullmatch(rf"{re.escape(prefix)}-{year}-(\d{{4,}})", number)
    return int(match.group(1)) if match else None


def next_sequence(last_number: str | None, prefix: str, year: int) -> int:
    """Sequence following last_number; 1 when there is none for this year."""
    last = parse_sequence(last_number, prefix, year)
    return (last or 0) + 1
