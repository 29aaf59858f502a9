from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any

"""RawRow model for the UA census extract cleaner.

A RawRow is one line of the source extract after blank normalisation, before
any group identity is filled in. Values keep whatever type the reader produced
(str, int, float) or None for a blank cell; parsing happens in the
reconstructor.
"""

__all__ = [
    "RAW_FIELDS",
    "RawRow",
]


@dataclass(frozen=True)
class RawRow:
    """One line of the extract (group start, continuation, header or decoration).

    Only the first row of a UA group carries ``ua_no``/``ua``/``district``;
    the following rows of the group carry ``year`` and the measurements.
    """
    row_number: int  # 1-based line number in the source file
    ua_no: Any = None
    ua: Any = None
    district: Any = None
    year: Any = None
    type: Any = None
    area: Any = None
    population: Any = None
    pop_change: Any = None
    pop_change_percent: Any = None
    pop_male: Any = None
    pop_female: Any = None

    @classmethod
    def from_mapping(cls, row_number: int, values: dict[str, Any]) -> RawRow:
        """Build a RawRow from a column -> value mapping; unknown keys are ignored."""
        return cls(row_number=row_number, **{k: values.get(k) for k in RAW_FIELDS})


# Column order of the extract (row_number is not a column)
RAW_FIELDS: tuple[str, ...] = tuple(f.name for f in fields(RawRow) if f.name != "row_number")
