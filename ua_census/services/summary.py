from __future__ import annotations

from ..models.processing_result import PipelineResult

"""SUMMARY line rendering for one pipeline run."""


def _format_seconds(value: float) -> str:
    # 整数秒は小数点なし、極小値は指数表記を避ける
    if value == 0:
        return "0"
    if value == int(value):
        return str(int(value))
    if value < 0.01:
        return f"{value:.6f}".rstrip("0").rstrip(".")
    return f"{value:.3f}".rstrip("0").rstrip(".")


def render_summary_line(result: PipelineResult) -> str:
    """Render the SUMMARY line for a completed run.

    Format:
    SUMMARY rows_in={n} records_out={n} groups={n} dropped={n} notes={n} elapsed_sec={s}

    Examples:
        >>> from datetime import datetime, timezone
        >>> from pathlib import Path
        >>> from ua_census.models.processing_result import ReconstructionStats
        >>> t = datetime(2024, 1, 1, tzinfo=timezone.utc)
        >>> stats = ReconstructionStats(input_rows=10, output_records=6, malformed_ua_no=1)
        >>> result = PipelineResult(
        ...     stats=stats, groups=2, years=3, clean_path=Path("c.csv"),
        ...     trend_path=Path("t.csv"), year_totals_path=None, quality_log_path=None,
        ...     start_time=t, end_time=t, elapsed_seconds=2.0,
        ... )
        >>> render_summary_line(result)
        'SUMMARY rows_in=10 records_out=6 groups=2 dropped=4 notes=1 elapsed_sec=2'
    """
    stats = result.stats
    return (
        f"SUMMARY rows_in={stats.input_rows} "
        f"records_out={stats.output_records} "
        f"groups={result.groups} "
        f"dropped={stats.dropped_rows} "
        f"notes={stats.quality_notes} "
        f"elapsed_sec={_format_seconds(result.elapsed_seconds)}"
    )
