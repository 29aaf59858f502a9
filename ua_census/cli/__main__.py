from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

from ua_census.config.loader import ConfigError, PipelineConfig, load_config
from ua_census.logging.init import log_summary, setup_logging
from ua_census.services.orchestrator import PipelineError, load_raw_rows, run_pipeline
from ua_census.services.summary import render_summary_line

"""CLI entrypoint.

Flow:
- Load .env (overriding), resolve the config path
- Load and validate the YAML config
- Run the pipeline once and print the SUMMARY line

Data-quality notes never fail a run; only config and source-file problems do.
"""

EXIT_SUCCESS = 0
EXIT_FATAL = 1

DEFAULT_CONFIG_PATH = Path("config/pipeline.yml")
CONFIG_ENV_VAR = "UA_CENSUS_CONFIG"


def _load_env_file(path: Path, override: bool = True) -> None:
    """Load .env using python-dotenv; a failure only prints a warning."""
    try:
        if path.exists():
            load_dotenv(dotenv_path=path, override=override)
    except (OSError, UnicodeDecodeError) as e:  # pragma: no cover
        print(f"WARNING: failed to load .env via python-dotenv: {e}")


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Rebuild UA census records from a grouped spreadsheet extract")
    p.add_argument("--config", type=Path, default=None, help=f"Config YAML (default ${CONFIG_ENV_VAR} or {DEFAULT_CONFIG_PATH})")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    p.add_argument("--inspect-data", action="store_true", help="Print the first parsed extract rows then exit")
    return p.parse_args(argv)


def _resolve_config_path(arg: Path | None) -> Path:
    if arg is not None:
        return arg
    env_path = os.getenv(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path)
    return DEFAULT_CONFIG_PATH


def _inspect_data(cfg: PipelineConfig, limit: int = 5) -> int:
    try:
        rows = load_raw_rows(cfg)
    except PipelineError as e:
        print(f"inspect: {e}")
        return EXIT_FATAL
    print(f"FILE: {Path(cfg.source_path).name} rows={len(rows)} header_rows={cfg.header_rows}")
    for row in rows[:limit]:
        print(f"  {row}")
    return EXIT_SUCCESS


def main(argv: list[str] | None = None) -> int:
    logger = setup_logging()

    # None のときのみ sys.argv を読む (テストで main([]) を呼ぶため)
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    _load_env_file(Path(".env"), override=True)

    config_path = _resolve_config_path(args.config)
    try:
        cfg = load_config(config_path)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    if args.debug:
        for h in logger.handlers:
            h.setLevel(logging.DEBUG)
        logger.setLevel(logging.DEBUG)
        logger.debug("debug mode enabled")

    if args.inspect_data:
        return _inspect_data(cfg)

    logger.info(f"Processing extract: {cfg.source_path}")
    try:
        result = run_pipeline(cfg)
    except PipelineError as e:
        logger.error(f"pipeline: {e}")
        return EXIT_FATAL

    logger.info(f"clean={result.clean_path} trend={result.trend_path}")
    if result.year_totals_path is not None:
        logger.info(f"year_totals={result.year_totals_path}")

    # render_summary_line includes the "SUMMARY " label; log_summary adds it again
    log_summary(render_summary_line(result)[len("SUMMARY "):])
    return EXIT_SUCCESS


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
