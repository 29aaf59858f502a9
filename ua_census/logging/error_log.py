from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path

from ua_census.models.error_record import ErrorRecord

"""Data-quality log buffering.

Rows the reconstructor drops because of a data defect (malformed ua_no,
orphan continuation rows, unparseable years) are appended here and written
once per run to `logs/data-quality-YYYYMMDD-HHMMSS.log` (UTC) as JSON Lines.
Section headers and decoration rows are not defects and are only counted.
"""

__all__ = [
    "ErrorRecord",
    "ErrorLogBuffer",
]

LOGS_DIR = Path("./logs")
TIMESTAMP_FMT = "%Y%m%d-%H%M%S"


class ErrorLogBuffer:
    """In-memory buffer of data-quality notes. flush() appends JSON Lines.

    - The log path is fixed on first access and reused by later flushes
    - Nothing is created on disk while the buffer has never held a record
    - Single-threaded use only
    """
    def __init__(self, logs_dir: Path | None = None) -> None:
        self._records: list[ErrorRecord] = []
        self._file_path: Path | None = None
        self._logs_dir = logs_dir or LOGS_DIR

    @property
    def file_path(self) -> Path:
        if self._file_path is None:
            self._logs_dir.mkdir(parents=True, exist_ok=True)
            stamp = datetime.now(UTC).strftime(TIMESTAMP_FMT)
            self._file_path = self._logs_dir / f"data-quality-{stamp}.log"
        return self._file_path

    @property
    def records(self) -> list[ErrorRecord]:
        """Records not flushed yet (copy)."""
        return list(self._records)

    def append(self, record: ErrorRecord) -> None:
        self._records.append(record)

    def __len__(self) -> int:  # pragma: no cover (trivial)
        return len(self._records)

    def flush(self) -> Path | None:
        """Write pending records; returns the log path, or None if nothing was ever logged."""
        if not self._records:
            return self._file_path
        fp = self.file_path
        with fp.open("a", encoding="utf-8") as f:
            for r in self._records:
                f.write(r.to_json_line() + "\n")
        self._records.clear()
        return fp
