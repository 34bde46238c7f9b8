from __future__ import annotations

from dataclasses import dataclass


SNAPSHOT_COLUMNS = ["Name", "Code", "Num", "Scale"]

MINOR_UNITS_NOT_APPLICABLE = "N.A."
DEFAULT_SCALE = "2"
NOT_APPLICABLE_SCALE = "0"

# Special ISO codes: "no currency" and "reserved for testing"
CODE_NO_CURRENCY = "XXX"
CODE_TESTING = "XTS"


@dataclass(frozen=True)
class CurrencyRecord:
    name: str
    code: str
    num: str
    scale: str

    @classmethod
    def from_row(cls, row: tuple[str, ...] | list[str]) -> "CurrencyRecord":
        """Build a record from a snapshot row (Name, Code, Num, Scale)."""
        name, code, num, scale = row
        return cls(name=name, code=code, num=num, scale=scale)

    def as_row(self) -> tuple[str, str, str, str]:
        return (self.name, self.code, self.num, self.scale)


def scale_from_minor_units(minor_units: str) -> str:
    # The registry value is already the number of decimal places
    if minor_units == "":
        return DEFAULT_SCALE
    if minor_units == MINOR_UNITS_NOT_APPLICABLE:
        return NOT_APPLICABLE_SCALE
    return minor_units
