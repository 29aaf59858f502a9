from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from enum import Enum

from ..logging.error_log import ErrorLogBuffer, ErrorRecord
from ..models.clean_record import CleanRecord
from ..models.processing_result import ReconstructionStats
from ..models.raw_row import RawRow
from .parsing import is_blank, parse_float, parse_int, parse_year
from .progress import ProgressTracker

logger = logging.getLogger(__name__)

"""Record reconstruction: grouped extract rows -> one CleanRecord per (UA, year).

In the extract a UA's identifying cells (ua_no, ua, district) appear only on
the first row of its group; the year rows below leave them blank. The
reconstructor drops structural noise, classifies each row on its original
cells, and carries the last group start's (ua_no, ua) down through the
continuation rows with an explicit fold.

Nothing here raises on bad rows. Defects are dropped and recorded in the
data-quality log; blank or unparseable measurements become None.
"""

DEFAULT_MIN_YEAR = 1961


class RowKind(Enum):
    """Classification of a row on its original (pre-fill) cells."""
    SECTION_HEADER = "section_header"
    MALFORMED_UA_NO = "malformed_ua_no"
    GROUP_START = "group_start"
    CONTINUATION = "continuation"
    DECORATION = "decoration"


@dataclass(frozen=True)
class FillState:
    """Fold state: identity of the most recent group start.

    ua is None when the group start row had no name; rows of such a group
    cannot satisfy the "ua never missing" guarantee and are dropped.
    """
    ua_no: int
    ua: str | None


class QualityNoter:
    """Records a data-quality note for a dropped row."""

    def __init__(self, error_log: ErrorLogBuffer | None, file: str, sheet: str) -> None:
        self.error_log = error_log
        self.file = file
        self.sheet = sheet

    def __call__(self, row: RawRow, error_type: str, message: str) -> None:
        logger.debug("row=%d %s: %s", row.row_number, error_type, message)
        if self.error_log is not None:
            self.error_log.append(
                ErrorRecord.create(
                    file=self.file,
                    sheet=self.sheet,
                    row=row.row_number,
                    error_type=error_type,
                    message=message,
                )
            )


def classify_row(row: RawRow) -> RowKind:
    """Classify one row before any fill is applied.

    A section header (ua only) is checked first; a present but non-integer
    ua_no is rejected before the group start test.
    """
    if (
        not is_blank(row.ua)
        and is_blank(row.district)
        and is_blank(row.year)
        and is_blank(row.population)
    ):
        return RowKind.SECTION_HEADER
    if not is_blank(row.ua_no):
        if parse_int(row.ua_no) is None:
            return RowKind.MALFORMED_UA_NO
        return RowKind.GROUP_START
    if not is_blank(row.year):
        return RowKind.CONTINUATION
    return RowKind.DECORATION


def fill_identity(
    rows: Iterable[RawRow],
    stats: ReconstructionStats,
    note: QualityNoter,
) -> Iterator[tuple[RawRow, FillState]]:
    """Left fold over the ordered rows carrying the last (ua_no, ua).

    Yields (row, identity) for every group start and continuation row that
    has an identity to carry. Noise, malformed markers and orphan rows are
    counted (and noted) and not yielded.
    """
    state: FillState | None = None
    for row in rows:
        kind = classify_row(row)
        if kind is RowKind.SECTION_HEADER:
            stats.section_headers += 1
            logger.debug("row=%d section header dropped ua=%r", row.row_number, row.ua)
            continue
        if kind is RowKind.MALFORMED_UA_NO:
            stats.malformed_ua_no += 1
            note(row, "MALFORMED_UA_NO", f"ua_no {row.ua_no!r} is not an integer; row dropped")
            continue
        if kind is RowKind.DECORATION:
            stats.decoration_rows += 1
            continue
        if kind is RowKind.GROUP_START:
            ua_no = parse_int(row.ua_no)
            # 名前なしの group start は直前の ua を引き継がない
            ua = None if is_blank(row.ua) else str(row.ua).strip()
            state = FillState(ua_no=ua_no, ua=ua)
        elif state is None:
            stats.orphan_rows += 1
            note(
                row,
                "ORPHAN_CONTINUATION_ROW",
                f"year row {row.year!r} appears before any ua_no group start; row dropped",
            )
            continue
        yield row, state


def to_clean_record(row: RawRow, ua_no: int, ua: str, year: int) -> CleanRecord:
    """Parse the measurements of a filled row; unparseable cells become None."""
    return CleanRecord(
        ua_no=ua_no,
        ua=ua,
        year=year,
        area=parse_float(row.area),
        population=parse_int(row.population),
        pop_change=parse_int(row.pop_change),
        pop_change_percent=parse_float(row.pop_change_percent),
        pop_male=parse_int(row.pop_male),
        pop_female=parse_int(row.pop_female),
    )


def reconstruct(
    rows: Iterable[RawRow],
    *,
    min_year: int = DEFAULT_MIN_YEAR,
    error_log: ErrorLogBuffer | None = None,
    source_file: str = "<memory>",
    sheet: str = "",
    stats: ReconstructionStats | None = None,
    progress: ProgressTracker | None = None,
) -> list[CleanRecord]:
    """Rebuild CleanRecords from ordered extract rows.

    Args:
        rows: RawRows in source order (the fill depends on the order)
        min_year: Records with an earlier census year are dropped
        error_log: Buffer receiving data-quality notes (None = count only)
        source_file: File name used in notes
        sheet: Sheet name used in notes
        stats: Counters to update in place; a fresh instance is used if None
        progress: Optional row progress bar advanced once per input row

    Returns:
        CleanRecords in source order; ua_no, ua and year are never missing
    """
    rows = list(rows)
    if stats is None:
        stats = ReconstructionStats()
    stats.input_rows += len(rows)
    note = QualityNoter(error_log, source_file, sheet)

    def _tracked(it: Iterable[RawRow]) -> Iterator[RawRow]:
        for r in it:
            yield r
            if progress is not None:
                progress.advance()

    records: list[CleanRecord] = []
    for row, identity in fill_identity(_tracked(rows), stats, note):
        if is_blank(row.year):
            stats.missing_year += 1
            continue
        year = parse_year(row.year)
        if year is None:
            stats.unparseable_years += 1
            note(row, "YEAR_UNPARSEABLE", f"year {row.year!r} contains no digits; row dropped")
            continue
        if identity.ua is None:
            stats.missing_ua += 1
            note(row, "MISSING_UA_NAME", f"group ua_no={identity.ua_no} has no ua name; row dropped")
            continue
        if year < min_year:
            stats.below_min_year += 1
            continue
        records.append(to_clean_record(row, identity.ua_no, identity.ua, year))

    stats.output_records += len(records)
    logger.info(
        "reconstructed records=%d from rows=%d (headers=%d malformed_ua_no=%d orphans=%d "
        "bad_years=%d below_%d=%d)",
        len(records),
        len(rows),
        stats.section_headers,
        stats.malformed_ua_no,
        stats.orphan_rows,
        stats.unparseable_years,
        min_year,
        stats.below_min_year,
    )
    return records
