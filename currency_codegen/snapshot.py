"""
Canonical CSV snapshot of the currency table.

Layout: header ``Name,Code,Num,Scale`` followed by one row per currency.
"""
from __future__ import annotations

import csv
import io
import logging
import os
from typing import Iterable

import pandas as pd

from .errors import ParseError, StorageError
from .record import SNAPSHOT_COLUMNS, CurrencyRecord


logger = logging.getLogger(__name__)

RawRow = tuple[str, str, str, str]


def snapshot_frame(records: Iterable[CurrencyRecord]) -> pd.DataFrame:
    return pd.DataFrame([r.as_row() for r in records], columns=SNAPSHOT_COLUMNS, dtype=object)


def write_snapshot(path: str | os.PathLike, records: Iterable[CurrencyRecord] | pd.DataFrame) -> None:
    """
    Write records (or an already-built snapshot frame) to ``path``.

    The file is overwritten wholesale. Rows are written in the given order.
    """
    df = records if isinstance(records, pd.DataFrame) else snapshot_frame(records)
    df = df[SNAPSHOT_COLUMNS]

    out_dir = os.path.dirname(os.fspath(path))
    try:
        if out_dir:
            os.makedirs(out_dir, exist_ok=True)
        df.to_csv(path, index=False, lineterminator="\n", encoding="utf-8")
    except OSError as e:
        raise StorageError(f"failed to write snapshot {path}: {e}") from e
    logger.info("Wrote %d currencies -> %s", len(df), path)


def _reject_bare_quotes(text: str, path: str | os.PathLike) -> None:
    """A quote may only open a field or appear inside a quoted field (RFC 4180)."""
    line = 1
    at_field_start = True
    in_quotes = False
    i = 0
    while i < len(text):
        ch = text[i]
        if in_quotes:
            if ch == '"':
                if text[i + 1 : i + 2] == '"':
                    i += 1
                else:
                    in_quotes = False
            elif ch == "\n":
                line += 1
        elif ch == '"':
            if not at_field_start:
                raise ParseError(f'{path}:{line}: bare " in non-quoted field')
            in_quotes = True
        elif ch in ",\n":
            if ch == "\n":
                line += 1
            at_field_start = True
            i += 1
            continue
        at_field_start = False
        i += 1


def load_snapshot(path: str | os.PathLike) -> list[RawRow]:
    """
    Read snapshot rows, discarding the header.

    Every row must have exactly four fields; quoting follows standard CSV
    rules: a quote inside an unquoted field, or text after a closing quote,
    is an error.

    Raises:
        StorageError: file missing or unreadable
        ParseError: empty file, wrong field count or malformed quoting
    """
    expected = len(SNAPSHOT_COLUMNS)
    rows: list[RawRow] = []
    try:
        with open(path, "r", newline="", encoding="utf-8") as f:
            text = f.read()
        _reject_bare_quotes(text, path)
        reader = csv.reader(io.StringIO(text, newline=""), strict=True)
        header = next(reader, None)
        if header is None:
            raise ParseError(f"snapshot is empty: {path}")
        if len(header) != expected:
            raise ParseError(f"{path}: header has {len(header)} fields, expected {expected}")
        for row in reader:
            if not row:
                continue
            if len(row) != expected:
                raise ParseError(
                    f"{path}:{reader.line_num}: wrong number of fields ({len(row)}, expected {expected})"
                )
            rows.append(tuple(row))
    except csv.Error as e:
        raise ParseError(f"{path}: malformed CSV: {e}") from e
    except UnicodeDecodeError as e:
        raise ParseError(f"{path}: not valid UTF-8: {e}") from e
    except OSError as e:
        raise StorageError(f"failed to read snapshot {path}: {e}") from e
    return rows
