from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime

from ..logging.error_log import ErrorLogBuffer, ErrorRecord
from ..models.config_models import DashboardConfig, ReportSettings
from ..models.report import Report, ReportSource
from .assembler import build_report
from .snapshot import snapshot_report
from .source import SourceError, SourceProvider, provider_from_config

"""Load cycle orchestration.

One cycle: fetch rows from the configured provider, run the pure core chain, and
return a complete Report. Any failure on the live path is logged (stdout + JSON
Lines error log) and replaced by the snapshot report, so a cycle always yields a
usable Report and never raises for data problems. Provider errors arrive as
SourceError; anything else raised by a provider or the core is recorded as
UNEXPECTED_ERROR.
"""

logger = logging.getLogger(__name__)

__all__ = [
    "LoadOutcome",
    "load_report",
    "utc_timestamp",
]


@dataclass(frozen=True)
class LoadOutcome:
    """Result of one load cycle.

    fell_back is True only when a live fetch was attempted and failed; an
    unconfigured source yields a snapshot report with fell_back False.
    """
    report: Report
    fell_back: bool = False
    error: str | None = None
    rows_read: int = 0


def utc_timestamp() -> str:
    return datetime.now(UTC).isoformat(timespec="seconds").replace("+00:00", "Z")


def _fall_back(
    src: SourceProvider,
    error_type: str,
    error: Exception,
    settings: ReportSettings,
    log: ErrorLogBuffer,
) -> LoadOutcome:
    logger.error(f"fetch failed ({error_type}), using snapshot: {error}")
    log.append(ErrorRecord.create(src.kind, src.location, error_type, str(error)))
    written = log.flush()
    if written is not None:
        logger.debug(f"error log written: {written}")
    return LoadOutcome(report=snapshot_report(settings), fell_back=True, error=str(error))


def load_report(
    config: DashboardConfig,
    provider: SourceProvider | None = None,
    *,
    now: Callable[[], str] = utc_timestamp,
    error_log: ErrorLogBuffer | None = None,
) -> LoadOutcome:
    """Run a single load cycle.

    Args:
        config: Dashboard configuration (source + report settings)
        provider: Explicit provider; None -> built from config.source
        now: Timestamp factory for live reports
        error_log: Buffer receiving an ErrorRecord on fetch failure

    Returns:
        LoadOutcome with the new Report
    """
    src = provider if provider is not None else provider_from_config(config.source)
    settings = config.report

    if src is None:
        logger.warning("no sheet source configured; using embedded snapshot data")
        return LoadOutcome(report=snapshot_report(settings))

    logger.info(f"fetching pipeline rows: source={src.kind} location={src.location}")
    log = error_log if error_log is not None else ErrorLogBuffer()
    try:
        rows = src.fetch_rows()
        report = build_report(
            rows,
            source=ReportSource.LIVE,
            last_updated=now(),
            settings=settings,
        )
    except SourceError as e:
        return _fall_back(src, e.error_type, e, settings, log)
    except Exception as e:
        # Unexpected errors (provider bugs, core failures)
        logger.debug("unexpected load failure", exc_info=True)
        return _fall_back(src, "UNEXPECTED_ERROR", e, settings, log)

    logger.info(
        f"pipeline loaded: rows={len(rows)} warm={len(report.warm_pipeline)} "
        f"hot={len(report.hot_opps)} collected={len(report.collected)}"
    )
    return LoadOutcome(report=report, rows_read=len(rows))
