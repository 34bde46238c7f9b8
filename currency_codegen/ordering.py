from __future__ import annotations

from typing import Iterable, Sequence

from .errors import ParseError
from .record import CODE_NO_CURRENCY, CODE_TESTING, SNAPSHOT_COLUMNS, CurrencyRecord


# Pre-render ordering puts the special codes first (unlike the snapshot order).
_SPECIAL_CODES = frozenset({CODE_NO_CURRENCY, CODE_TESTING})


def _render_sort_key(record: CurrencyRecord) -> tuple[int, str]:
    return (0 if record.code in _SPECIAL_CODES else 1, record.code)


def order_records(rows: Iterable[Sequence[str]]) -> list[CurrencyRecord]:
    """
    Convert raw snapshot rows into records, ordered for code generation.

    XTS and XXX come first, then every other code ascending. ``sorted`` is
    stable, so duplicate codes keep their input order.
    """
    records = []
    for i, row in enumerate(rows):
        if len(row) != len(SNAPSHOT_COLUMNS):
            raise ParseError(f"row {i}: expected {len(SNAPSHOT_COLUMNS)} columns, got {len(row)}")
        records.append(CurrencyRecord.from_row(row))
    return sorted(records, key=_render_sort_key)
