from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

"""Processing result models for the UA census extract cleaner.

ReconstructionStats is filled in while the reconstructor folds over the
extract; PipelineResult aggregates one whole run for the SUMMARY line.
"""


@dataclass
class ReconstructionStats:
    """Row counters accumulated by the reconstructor (one instance per run)."""
    input_rows: int = 0
    section_headers: int = 0  # 見出し行 (ua のみ)
    malformed_ua_no: int = 0
    decoration_rows: int = 0
    orphan_rows: int = 0  # group start より前の continuation 行
    unparseable_years: int = 0
    missing_ua: int = 0  # group start without a ua name
    missing_year: int = 0  # identity-only group start rows
    below_min_year: int = 0
    output_records: int = 0

    @property
    def dropped_rows(self) -> int:
        """All input rows that did not become a CleanRecord."""
        return self.input_rows - self.output_records

    @property
    def quality_notes(self) -> int:
        """Rows that were dropped because of a data defect (logged individually)."""
        return self.malformed_ua_no + self.orphan_rows + self.unparseable_years + self.missing_ua


@dataclass(frozen=True)
class PipelineResult:
    """Aggregated result of one pipeline run."""
    stats: ReconstructionStats
    groups: int  # trend rows written
    years: int  # distinct census years in the clean data
    clean_path: Path
    trend_path: Path
    year_totals_path: Path | None
    quality_log_path: Path | None  # None when no notes were recorded
    start_time: datetime
    end_time: datetime
    elapsed_seconds: float
