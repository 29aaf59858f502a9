"""Domain models for the UA census extract cleaner.

Raw extract rows, reconstructed records, aggregation summaries and the
data-quality notes recorded along the way.
"""

from .clean_record import CLEAN_FIELDS, CleanRecord
from .error_record import ErrorRecord
from .processing_result import PipelineResult, ReconstructionStats
from .raw_row import RAW_FIELDS, RawRow
from .trend import GroupTrend, YearTotal

__all__ = [
    # Extract / record models
    "RAW_FIELDS",
    "RawRow",
    "CLEAN_FIELDS",
    "CleanRecord",
    # Summaries
    "GroupTrend",
    "YearTotal",
    # Processing models
    "ErrorRecord",
    "PipelineResult",
    "ReconstructionStats",
]
