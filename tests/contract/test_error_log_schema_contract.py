from __future__ import annotations

import json
import re
from pathlib import Path

from ua_census.config.loader import load_config
from ua_census.services.orchestrator import run_pipeline

"""Data-quality log contract: JSON Lines, fixed key set, one file per run."""

EXPECTED_KEYS = ["timestamp", "file", "sheet", "row", "error_type", "message"]
TIMESTAMP_RE = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}(\.\d+)?Z$")
ERROR_TYPE_RE = re.compile(r"^[A-Z][A-Z0-9_]*$")
KNOWN_TYPES = {"MALFORMED_UA_NO", "ORPHAN_CONTINUATION_ROW", "YEAR_UNPARSEABLE", "MISSING_UA_NAME"}


def test_quality_log_lines_follow_schema(write_config: Path, sample_extract: Path):
    result = run_pipeline(load_config(write_config))
    path = result.quality_log_path
    assert path is not None
    assert re.match(r"^data-quality-\d{8}-\d{6}\.log$", path.name)
    for raw in path.read_text(encoding="utf-8").splitlines():
        obj = json.loads(raw)
        assert list(obj.keys()) == EXPECTED_KEYS
        assert TIMESTAMP_RE.match(obj["timestamp"])
        assert isinstance(obj["row"], int) and (obj["row"] >= 1 or obj["row"] == -1)
        assert ERROR_TYPE_RE.match(obj["error_type"])
        assert obj["error_type"] in KNOWN_TYPES
        assert obj["message"]
