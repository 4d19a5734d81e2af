from __future__ import annotations

from decimal import Decimal

import pytest

from pipeline_dashboard.models.deal import FISCAL_MONTHS, Deal, freeze_amounts
from pipeline_dashboard.models.report import ParsedSections
from pipeline_dashboard.services.aggregator import AggregationError, compute_totals, rollup_monthly

"""Unit tests for totals and the monthly rollup."""


def _deal(name, projected, probability=None, monthly=None, net=0):
    return Deal(
        name=name,
        projected_sale=Decimal(projected),
        net_forecast=Decimal(net),
        probability=None if probability is None else Decimal(probability),
        monthly=freeze_amounts({m: Decimal(v) for m, v in (monthly or {}).items()}),
    )


def test_rollup_is_dense_and_ordered():
    monthly = rollup_monthly([])
    assert list(monthly.keys()) == list(FISCAL_MONTHS)
    assert all(v == 0 for v in monthly.values())


def test_rollup_sums_all_deals():
    monthly = rollup_monthly([
        _deal("a", 1, monthly={"Feb": 100, "Mar": 50}),
        _deal("b", 1, monthly={"Feb": 25}),
    ])
    assert monthly["Feb"] == Decimal("125")
    assert monthly["Mar"] == Decimal("50")
    assert monthly["Sep"] == 0


def test_totals_collected_excluded_from_pipeline():
    sections = ParsedSections(
        warm=(_deal("w", 1000, 50),),
        hot=(_deal("h", 400, 75),),
        collected=(_deal("c", 100, 100, monthly={"Feb": 100}),),
    )
    monthly = rollup_monthly(sections.all_deals)
    totals = compute_totals(sections, monthly)
    assert totals.total_pipeline == Decimal("1400")
    assert totals.collected_ytd == Decimal("100")
    assert totals.weighted_forecast == Decimal("800")
    # collected still shows up in the monthly view
    assert monthly["Feb"] == Decimal("100")
    assert totals.this_month == Decimal("100")


def test_unknown_probability_weighs_zero():
    sections = ParsedSections(warm=(_deal("w", 1000, None), _deal("x", 1000, 10)))
    totals = compute_totals(sections, rollup_monthly(sections.all_deals))
    assert totals.total_pipeline == Decimal("2000")
    assert totals.weighted_forecast == Decimal("100")


def test_hot_count_threshold():
    sections = ParsedSections(
        hot=(
            _deal("a", 1, 75),
            _deal("b", 1, 100),
            _deal("c", 1, Decimal("74.9")),
            _deal("d", 1, None),
            _deal("e", 1, 0),
        ),
        warm=(_deal("warm-high", 1, 100),),
    )
    totals = compute_totals(sections, rollup_monthly(sections.all_deals))
    assert totals.hot_count == 2


def test_this_month_and_budget_goal_are_configured():
    sections = ParsedSections(warm=(_deal("w", 10, 10, monthly={"Mar": 7, "Feb": 3}),))
    monthly = rollup_monthly(sections.all_deals)
    totals = compute_totals(sections, monthly, current_month="Mar", budget_goal=Decimal(123))
    assert totals.this_month == Decimal("7")
    assert totals.budget_goal == Decimal("123")


def test_unknown_current_month_rejected():
    with pytest.raises(AggregationError):
        compute_totals(ParsedSections(), rollup_monthly([]), current_month="February")


def test_percent_over_100_propagates():
    sections = ParsedSections(warm=(_deal("w", 100, 150),))
    totals = compute_totals(sections, rollup_monthly(sections.all_deals))
    assert totals.weighted_forecast == Decimal("150")
