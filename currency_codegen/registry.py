"""
ISO 4217 registry fetcher.

Downloads the SIX "list one" XML, normalizes entries into the snapshot
schema (Name, Code, Num, Scale), deduplicates by currency code and writes
the canonical CSV snapshot.
"""
from __future__ import annotations

from dataclasses import dataclass
import logging
import os
import xml.etree.ElementTree as ET
from typing import Iterable

import pandas as pd
import requests

from .errors import NetworkError, ParseError
from .record import (
    CODE_NO_CURRENCY,
    CODE_TESTING,
    SNAPSHOT_COLUMNS,
    CurrencyRecord,
    scale_from_minor_units,
)
from .snapshot import write_snapshot


REGISTRY_URL = (
    "https://www.six-group.com/dam/download/financial-information/"
    "data-center/iso-currrency/lists/list-one.xml"
)
DEFAULT_TIMEOUT_SECONDS = 30.0

# Snapshot ordering: regular codes, then XTS, then XXX
_SNAPSHOT_RANK = {CODE_TESTING: 1, CODE_NO_CURRENCY: 2}

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RegistryEntry:
    country_name: str
    currency_name: str
    currency_code: str
    numeric_code: str
    minor_units: str


def download_registry_xml(url: str = REGISTRY_URL, *, timeout: float | None = DEFAULT_TIMEOUT_SECONDS) -> bytes:
    try:
        response = requests.get(url, timeout=timeout)
    except requests.RequestException as e:
        raise NetworkError(f"failed to download XML: {e}") from e
    if response.status_code != 200:
        raise NetworkError(
            f"failed to download XML: status {response.status_code}",
            status_code=response.status_code,
        )
    return response.content


def _child_text(elem: ET.Element, tag: str) -> str:
    child = elem.find(tag)
    if child is None or child.text is None:
        return ""
    return child.text.strip()


def parse_registry_xml(payload: bytes) -> list[RegistryEntry]:
    """
    Parse the ISO 4217 list-one document.

    Layout: ISO_4217 -> CcyTbl -> CcyNtry*, each entry holding CtryNm, CcyNm,
    Ccy, CcyNbr and CcyMnrUnts. Missing children read as "".
    """
    try:
        root = ET.fromstring(payload)
    except ET.ParseError as e:
        raise ParseError(f"failed to parse XML: {e}") from e

    table = root.find("CcyTbl")
    if table is None:
        return []
    return [
        RegistryEntry(
            country_name=_child_text(entry, "CtryNm"),
            currency_name=_child_text(entry, "CcyNm"),
            currency_code=_child_text(entry, "Ccy"),
            numeric_code=_child_text(entry, "CcyNbr"),
            minor_units=_child_text(entry, "CcyMnrUnts"),
        )
        for entry in table.findall("CcyNtry")
    ]


def records_from_entries(entries: Iterable[RegistryEntry]) -> pd.DataFrame:
    """Registry entries -> snapshot frame, skipping entries without a currency code."""
    rows = [
        {
            "Name": e.currency_name,
            "Code": e.currency_code,
            "Num": e.numeric_code,
            "Scale": scale_from_minor_units(e.minor_units),
        }
        for e in entries
        if e.currency_code != ""
    ]
    return pd.DataFrame(rows, columns=SNAPSHOT_COLUMNS, dtype=object)


def dedupe_by_code(df: pd.DataFrame) -> pd.DataFrame:
    # Countries sharing a currency repeat the code; the last entry wins.
    return df.drop_duplicates(subset=["Code"], keep="last")


def sort_for_snapshot(df: pd.DataFrame) -> pd.DataFrame:
    """Ascending by code, except XTS and XXX go last (XTS before XXX)."""
    rank = df["Code"].map(_SNAPSHOT_RANK).fillna(0).astype(int)
    return (
        df.assign(_rank=rank)
        .sort_values(["_rank", "Code"])
        .drop(columns=["_rank"])
        .reset_index(drop=True)
    )


def refresh_snapshot(
    snapshot_path: str | os.PathLike,
    *,
    url: str = REGISTRY_URL,
    timeout: float | None = DEFAULT_TIMEOUT_SECONDS,
) -> list[CurrencyRecord]:
    """
    Download the registry and overwrite the snapshot at ``snapshot_path``.

    Returns the records in the order they were written.
    """
    payload = download_registry_xml(url, timeout=timeout)
    entries = parse_registry_xml(payload)
    df = sort_for_snapshot(dedupe_by_code(records_from_entries(entries)))
    logger.info("Registry: %d entries -> %d currencies", len(entries), len(df))

    write_snapshot(snapshot_path, df)
    return [CurrencyRecord.from_row(row) for row in df.itertuples(index=False, name=None)]
