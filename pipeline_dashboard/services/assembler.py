from __future__ import annotations

from collections.abc import Iterable, Sequence

from ..models.config_models import ReportSettings
from ..models.report import ParsedSections, Report, ReportSource
from .aggregator import compute_totals, rollup_monthly
from .classifier import parse_rows

"""Report assembly: parsed sections + aggregates + metadata -> Report."""

__all__ = [
    "assemble_report",
    "build_report",
]


def assemble_report(
    sections: ParsedSections,
    *,
    source: ReportSource,
    last_updated: str,
    settings: ReportSettings | None = None,
) -> Report:
    """Combine sections with freshly computed totals into a new Report."""
    settings = settings or ReportSettings()
    monthly = rollup_monthly(sections.all_deals)
    totals = compute_totals(
        sections,
        monthly,
        current_month=settings.current_month,
        budget_goal=settings.budget_goal,
    )
    return Report(
        warm_pipeline=sections.warm,
        hot_opps=sections.hot,
        collected=sections.collected,
        totals=totals,
        monthly_forecast=monthly,
        source=source,
        last_updated=last_updated,
    )


def build_report(
    rows: Iterable[Sequence[object] | None],
    *,
    source: ReportSource,
    last_updated: str,
    settings: ReportSettings | None = None,
) -> Report:
    """Full pure chain: raw rows -> classifier -> aggregator -> Report."""
    settings = settings or ReportSettings()
    sections = parse_rows(rows, settings.currency_codes)
    return assemble_report(sections, source=source, last_updated=last_updated, settings=settings)
