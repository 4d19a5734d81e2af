from __future__ import annotations

from collections.abc import Iterable, Mapping
from decimal import Decimal

from ..models.config_models import DEFAULT_BUDGET_GOAL, DEFAULT_CURRENT_MONTH
from ..models.deal import FISCAL_MONTHS, Deal, freeze_amounts
from ..models.report import ParsedSections, Totals

"""Aggregation over parsed deal sections.

Totals are derived wholesale from the sections on every parse; nothing here
keeps state between calls.

- total_pipeline / weighted_forecast: Warm + Hot only
- collected_ytd: Collected only
- monthly_forecast: all three sections
"""

__all__ = [
    "HOT_PROBABILITY_THRESHOLD",
    "AggregationError",
    "compute_totals",
    "rollup_monthly",
]

HOT_PROBABILITY_THRESHOLD = Decimal(75)

_ZERO = Decimal(0)


class AggregationError(ValueError):
    """Raised for invalid aggregation settings (never for row data)."""


def rollup_monthly(deals: Iterable[Deal]) -> Mapping[str, Decimal]:
    """Dense 12-month rollup in fiscal order, zero-filled."""
    totals: dict[str, Decimal] = {m: _ZERO for m in FISCAL_MONTHS}
    for deal in deals:
        for month, amount in deal.monthly.items():
            totals[month] = totals.get(month, _ZERO) + amount
    return freeze_amounts(totals)


def compute_totals(
    sections: ParsedSections,
    monthly: Mapping[str, Decimal],
    current_month: str = DEFAULT_CURRENT_MONTH,
    budget_goal: Decimal = DEFAULT_BUDGET_GOAL,
) -> Totals:
    """Compute the dashboard headline figures.

    Args:
        sections: Parsed deals per section
        monthly: Dense rollup from rollup_monthly()
        current_month: Fixed fiscal month label used for this_month
        budget_goal: External constant, copied through

    Raises:
        AggregationError: current_month is not one of FISCAL_MONTHS
    """
    if current_month not in FISCAL_MONTHS:
        raise AggregationError(f"unknown month label: {current_month!r}")

    pipeline = sections.open_pipeline
    total_pipeline = sum((d.projected_sale for d in pipeline), _ZERO)
    weighted = sum((d.weighted_value for d in pipeline), _ZERO)
    collected_ytd = sum((d.projected_sale for d in sections.collected), _ZERO)
    hot_count = sum(
        1
        for d in sections.hot
        if d.probability is not None and d.probability >= HOT_PROBABILITY_THRESHOLD
    )
    return Totals(
        total_pipeline=total_pipeline,
        weighted_forecast=weighted,
        collected_ytd=collected_ytd,
        this_month=monthly.get(current_month, _ZERO),
        budget_goal=Decimal(budget_goal),
        hot_count=hot_count,
    )
