from __future__ import annotations

import logging
from collections import Counter
from datetime import UTC, datetime
from pathlib import Path

from ..config.loader import PipelineConfig
from ..excel.reader import ExtractLayoutError, read_extract, rows_from_frame, sheet_label
from ..logging.error_log import ErrorLogBuffer
from ..models.processing_result import PipelineResult, ReconstructionStats
from ..models.raw_row import RawRow
from .aggregator import group_trends, year_totals
from .progress import ProgressTracker
from .reconstructor import reconstruct
from .writer import write_clean_csv, write_trend_csv, write_year_totals_csv

logger = logging.getLogger(__name__)

"""Pipeline orchestration: extract -> clean records -> summaries -> CSV files.

Only problems with the input file itself (missing, unreadable, too few
columns) are fatal and raise PipelineError. Row-level problems are counted,
noted in the data-quality log and never stop the run.
"""


class PipelineError(Exception):
    """Fatal error that prevents a run from producing output."""


def load_raw_rows(config: PipelineConfig) -> list[RawRow]:
    """Read the configured extract into RawRows.

    Raises:
        PipelineError: If the source is missing or does not have the extract layout
    """
    source = Path(config.source_path)
    if not source.exists():
        raise PipelineError(f"source not found: {source}")
    if not source.is_file():
        raise PipelineError(f"source is not a file: {source}")
    try:
        df = read_extract(source, sheet_name=config.sheet_name, header_rows=config.header_rows)
        return rows_from_frame(
            df,
            null_sentinels=config.null_sentinels,
            first_row_number=config.header_rows + 1,
        )
    except ExtractLayoutError as e:
        raise PipelineError(str(e)) from e


def run_pipeline(config: PipelineConfig, error_log: ErrorLogBuffer | None = None) -> PipelineResult:
    """Run one clean-and-summarise pass over the configured extract.

    Args:
        config: Loaded pipeline configuration
        error_log: Data-quality buffer (a fresh one writing to ./logs if None)

    Returns:
        PipelineResult with row counters and written file paths

    Raises:
        PipelineError: For input file problems (see load_raw_rows)
    """
    start_time = datetime.now(UTC)
    if error_log is None:
        error_log = ErrorLogBuffer()
    source = Path(config.source_path)

    raw_rows = load_raw_rows(config)
    logger.info("read %d rows from %s", len(raw_rows), source.name)

    stats = ReconstructionStats()
    with ProgressTracker(len(raw_rows)) as progress:
        records = reconstruct(
            raw_rows,
            min_year=config.min_year,
            error_log=error_log,
            source_file=source.name,
            sheet=sheet_label(source, config.sheet_name),
            stats=stats,
            progress=progress,
        )
        progress.set_postfix(records=len(records), notes=stats.quality_notes)

    trends = group_trends(records)
    totals = year_totals(records)

    clean_path = write_clean_csv(records, config.clean_path)
    trend_path = write_trend_csv(trends, config.trend_path)
    totals_path = None
    if config.year_totals_path is not None:
        totals_path = write_year_totals_csv(totals, config.year_totals_path)

    by_type = Counter(r.error_type for r in error_log.records)
    quality_log_path = error_log.flush()
    if stats.quality_notes:
        logger.warning(
            "%d rows dropped for data-quality reasons (%s), see %s",
            stats.quality_notes,
            ", ".join(f"{k}={v}" for k, v in sorted(by_type.items())),
            quality_log_path,
        )

    end_time = datetime.now(UTC)
    return PipelineResult(
        stats=stats,
        groups=len(trends),
        years=len(totals),
        clean_path=clean_path,
        trend_path=trend_path,
        year_totals_path=totals_path,
        quality_log_path=quality_log_path,
        start_time=start_time,
        end_time=end_time,
        elapsed_seconds=(end_time - start_time).total_seconds(),
    )
