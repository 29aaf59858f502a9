from __future__ import annotations

from dataclasses import dataclass, fields

"""CleanRecord model: one fully identified (UA, year) row.

Identifying fields (ua_no, ua, year) are always present. Every measurement is
optional: None means the source cell was blank or unparseable, and aggregation
excludes it instead of treating it as zero.
"""

__all__ = [
    "CLEAN_FIELDS",
    "CleanRecord",
]


@dataclass(frozen=True)
class CleanRecord:
    ua_no: int
    ua: str
    year: int
    area: float | None = None
    population: int | None = None
    pop_change: int | None = None
    pop_change_percent: float | None = None
    pop_male: int | None = None
    pop_female: int | None = None

    @property
    def sex_ratio(self) -> float | None:
        """Male / female population; None when either count is missing or female is zero."""
        if self.pop_male is None or not self.pop_female:
            return None
        return self.pop_male / self.pop_female


CLEAN_FIELDS: tuple[str, ...] = tuple(f.name for f in fields(CleanRecord))
INT_FIELDS: tuple[str, ...] = ("population", "pop_change", "pop_male", "pop_female")
FLOAT_FIELDS: tuple[str, ...] = ("area", "pop_change_percent")
