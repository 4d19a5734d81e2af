from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

from .deal import Deal

"""Report models for the pipeline dashboard.

Report is the immutable result of one load cycle. A new load never mutates a
previous Report; it produces a new one which replaces the old reference in the
ReportStore.
"""

__all__ = [
    "ParsedSections",
    "Report",
    "ReportSource",
    "Totals",
]


class ReportSource(Enum):
    """Where the report data came from.

    - LIVE: rows fetched from the sheet during this load cycle
    - SNAPSHOT: fixed fallback dataset bundled with the package
    """
    LIVE = "live"
    SNAPSHOT = "snapshot"


@dataclass(frozen=True)
class ParsedSections:
    """Deals grouped by section, in sheet order."""
    warm: tuple[Deal, ...] = ()
    hot: tuple[Deal, ...] = ()
    collected: tuple[Deal, ...] = ()

    @property
    def open_pipeline(self) -> tuple[Deal, ...]:
        """Warm + Hot. Collected deals are realized revenue, not pipeline."""
        return self.warm + self.hot

    @property
    def all_deals(self) -> tuple[Deal, ...]:
        return self.warm + self.hot + self.collected


@dataclass(frozen=True)
class Totals:
    """Headline figures for the dashboard. Recomputed on every parse."""
    total_pipeline: Decimal
    weighted_forecast: Decimal
    collected_ytd: Decimal
    this_month: Decimal
    budget_goal: Decimal
    hot_count: int


@dataclass(frozen=True)
class Report:
    """Complete dashboard payload for a single load cycle.

    monthly_forecast is dense: all 12 fiscal months are present, zero-filled,
    in fiscal order.
    """
    warm_pipeline: tuple[Deal, ...]
    hot_opps: tuple[Deal, ...]
    collected: tuple[Deal, ...]
    totals: Totals
    monthly_forecast: Mapping[str, Decimal]
    source: ReportSource
    last_updated: str
