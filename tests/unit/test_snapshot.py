from __future__ import annotations

from decimal import Decimal

from pipeline_dashboard.models.report import ReportSource
from pipeline_dashboard.services.snapshot import SNAPSHOT_LABEL, snapshot_report, snapshot_sections

"""Regression values for the embedded snapshot dataset."""


def test_snapshot_shape():
    report = snapshot_report()
    assert report.source is ReportSource.SNAPSHOT
    assert report.last_updated == SNAPSHOT_LABEL
    assert len(report.warm_pipeline) == 28
    # Angstrom Engineering has no amounts and is dropped like a live row
    assert len(report.hot_opps) == 4
    assert "Angstrom Engineering" not in [d.name for d in report.hot_opps]
    assert len(report.collected) == 12


def test_snapshot_total_pipeline_matches_table():
    report = snapshot_report()
    expected = sum(d.projected_sale for d in report.warm_pipeline + report.hot_opps)
    assert report.totals.total_pipeline == expected == Decimal("488349")


def test_snapshot_totals():
    t = snapshot_report().totals
    assert t.weighted_forecast == Decimal("132511.75")
    assert t.collected_ytd == Decimal("125570")
    assert t.this_month == Decimal("87359")
    assert t.hot_count == 4
    assert t.budget_goal == Decimal("600000")


def test_snapshot_deals_are_retained_only():
    sections = snapshot_sections()
    assert all(d.is_retained for d in sections.all_deals)


def test_snapshot_unknown_probability_kept_as_none():
    by_name = {d.name: d for d in snapshot_report().warm_pipeline}
    assert by_name["Meridian Credit Union"].probability is None
    assert by_name["Automotive Group"].probability == 0
