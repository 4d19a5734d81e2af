from __future__ import annotations

import argparse
import sys
from dataclasses import replace
from pathlib import Path

from dotenv import load_dotenv

from pipeline_dashboard.config.loader import ConfigError, load_config
from pipeline_dashboard.logging.init import get_logger, log_summary, setup_logging
from pipeline_dashboard.models.config_models import SourceConfig
from pipeline_dashboard.models.report import Report
from pipeline_dashboard.services.export import report_to_json
from pipeline_dashboard.services.store import ReportStore, refresh
from pipeline_dashboard.services.summary import render_summary_line

"""CLI entrypoint: run one load cycle and print the SUMMARY line.

Flow:
- Load .env (overrides existing environment; sheet URL / API key live there)
- Load config (config/pipeline.yml or --config)
- Fetch + parse, falling back to the snapshot on fetch failure
- Optionally write the dashboard JSON (--output); a failed write exits 1
"""

EXIT_SUCCESS = 0
EXIT_FATAL = 1
# Report produced from the snapshot because the live fetch failed
EXIT_FELL_BACK = 2


def _load_env_file(path: Path, override: bool = True) -> None:
    """Load .env using python-dotenv; a broken file only warns."""
    if not path.exists():
        return
    try:
        load_dotenv(dotenv_path=path, override=override)
    except (OSError, UnicodeDecodeError) as e:  # pragma: no cover
        get_logger().warning(f"failed to load .env via python-dotenv: {e}")


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="pipeline-dashboard",
        description="Load the sales pipeline sheet into a dashboard report",
    )
    p.add_argument("--config", type=Path, default=None, help="Config YAML (default: config/pipeline.yml if present)")
    p.add_argument("--csv", type=Path, default=None, help="Read rows from a local CSV export instead of the live sheet")
    p.add_argument("--snapshot", action="store_true", help="Skip the live sheet and use the embedded snapshot")
    p.add_argument("--output", default=None, help="Write dashboard JSON to this path ('-' for stdout)")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    return p.parse_args(argv)


def _write_output(report: Report, target: str) -> None:
    """Write the dashboard JSON to target ('-' for stdout).

    Raises:
        OSError: the file cannot be created or written
    """
    text = report_to_json(report)
    if target == "-":
        sys.stdout.write(text + "\n")
        return
    out = Path(target)
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(text + "\n", encoding="utf-8")
    get_logger().info(f"report written: {out}")


def main(argv: list[str] | None = None) -> int:
    # None のときのみ sys.argv を読む (テストで main([]) を呼ぶため)
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    logger = setup_logging(debug=args.debug)
    if args.debug:
        logger.debug("debug mode enabled")

    _load_env_file(Path(".env"), override=True)

    try:
        cfg = load_config(args.config)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    if args.snapshot:
        cfg = replace(cfg, source=SourceConfig())
    elif args.csv is not None:
        cfg = replace(cfg, source=replace(cfg.source, csv_path=str(args.csv)))

    store = ReportStore()
    outcome = refresh(store, cfg)

    summary_line = render_summary_line(outcome.report)
    # log_summary adds the "SUMMARY " prefix itself
    log_summary(summary_line.removeprefix("SUMMARY "))

    if args.output:
        try:
            _write_output(outcome.report, args.output)
        except OSError as e:
            logger.error(f"output: cannot write {args.output}: {e}")
            return EXIT_FATAL

    if outcome.fell_back:
        return EXIT_FELL_BACK
    return EXIT_SUCCESS


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
