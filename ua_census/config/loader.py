from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

"""Config loader for the UA census extract cleaner.

Responsibilities:
- Load YAML config (default config/pipeline.yml)
- Validate against config_schema.json shipped next to this module
- Apply defaults for every optional key
"""

SCHEMA_PATH = Path(__file__).parent / "config_schema.json"

DEFAULT_MIN_YEAR = 1961


class ConfigError(Exception):
    pass


@dataclass(frozen=True)
class PipelineConfig:
    source_path: str
    sheet_name: str | int = 0
    header_rows: int = 0  # 先頭のタイトル/見出し行数 (固定オフセット)
    min_year: int = DEFAULT_MIN_YEAR
    null_sentinels: frozenset[str] = frozenset()  # upper-cased
    output_directory: str = "./output"
    clean_filename: str = "ua_clean.csv"
    trend_filename: str = "ua_sex_ratio_trend.csv"
    year_totals_filename: str | None = None

    @property
    def clean_path(self) -> Path:
        return Path(self.output_directory) / self.clean_filename

    @property
    def trend_path(self) -> Path:
        return Path(self.output_directory) / self.trend_filename

    @property
    def year_totals_path(self) -> Path | None:
        if not self.year_totals_filename:
            return None
        return Path(self.output_directory) / self.year_totals_filename


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the JSON schema.

    Raises:
        ConfigError: If the schema file is missing or invalid, or the data
            fails validation (missing source_path, wrong types, unknown keys)
    """
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"config schema not found: {SCHEMA_PATH}")

    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"config validation failed: {e.message}") from e


def load_config(path: Path) -> PipelineConfig:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"config root must be a mapping, got {type(data).__name__}")

    _validate_config_schema(data)

    defaults = PipelineConfig(source_path=data["source_path"])
    sentinels = frozenset(s.strip().upper() for s in data.get("null_sentinels", []))
    return PipelineConfig(
        source_path=data["source_path"],
        sheet_name=data.get("sheet_name", defaults.sheet_name),
        header_rows=data.get("header_rows", defaults.header_rows),
        min_year=data.get("min_year", defaults.min_year),
        null_sentinels=sentinels,
        output_directory=data.get("output_directory", defaults.output_directory),
        clean_filename=data.get("clean_filename", defaults.clean_filename),
        trend_filename=data.get("trend_filename", defaults.trend_filename),
        year_totals_filename=data.get("year_totals_filename"),
    )
