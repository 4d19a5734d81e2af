from __future__ import annotations

import dataclasses
from decimal import Decimal

import pytest

from pipeline_dashboard.models.config_models import ReportSettings
from pipeline_dashboard.models.deal import FISCAL_MONTHS
from pipeline_dashboard.models.report import ReportSource
from pipeline_dashboard.services.assembler import build_report
from pipeline_dashboard.services.export import report_to_json
from pipeline_dashboard.services.summary import render_summary_line

"""Unit tests for report assembly (rows -> Report)."""


def test_build_report_sample_sheet(sample_rows):
    report = build_report(sample_rows, source=ReportSource.LIVE, last_updated="t0")
    t = report.totals
    assert t.total_pipeline == Decimal("16000")
    assert t.weighted_forecast == Decimal("8000")
    assert t.collected_ytd == Decimal("1500")
    assert t.this_month == Decimal("4000")  # Feb
    assert t.hot_count == 1
    assert t.budget_goal == Decimal("600000")
    assert list(report.monthly_forecast) == list(FISCAL_MONTHS)
    assert report.monthly_forecast["Mar"] == Decimal("5000")
    assert report.monthly_forecast["Jan"] == Decimal("1500")
    assert report.source is ReportSource.LIVE
    assert report.last_updated == "t0"


def test_acme_example_contributes_half_to_weighted(make_row):
    rows = [make_row("Acme Corp", "$10,000", "50%", "", {"Mar": "$5,000"})]
    report = build_report(rows, source=ReportSource.LIVE, last_updated="now")
    (deal,) = report.warm_pipeline
    assert deal.projected_sale == 10000
    assert deal.probability == 50
    assert deal.monthly == {"Mar": Decimal("5000")}
    assert report.totals.weighted_forecast == Decimal("5000")


def test_build_report_is_idempotent(sample_rows):
    first = build_report(sample_rows, source=ReportSource.LIVE, last_updated="2026-02-21T10:00:00Z")
    second = build_report(sample_rows, source=ReportSource.LIVE, last_updated="2026-02-21T10:05:00Z")
    assert first != second
    assert dataclasses.replace(second, last_updated=first.last_updated) == first


def test_report_is_immutable(sample_rows):
    report = build_report(sample_rows, source=ReportSource.LIVE, last_updated="t")
    with pytest.raises(dataclasses.FrozenInstanceError):
        report.source = ReportSource.SNAPSHOT  # type: ignore[misc]
    with pytest.raises(TypeError):
        report.monthly_forecast["Feb"] = Decimal(1)  # type: ignore[index]
    with pytest.raises(TypeError):
        report.warm_pipeline[0].monthly["Mar"] = Decimal(1)  # type: ignore[index]
    assert isinstance(report.warm_pipeline, tuple)


def test_build_report_uses_settings(sample_rows):
    settings = ReportSettings(budget_goal=Decimal(1000), current_month="Mar")
    report = build_report(sample_rows, source=ReportSource.LIVE, last_updated="t", settings=settings)
    assert report.totals.this_month == Decimal("5000")
    assert report.totals.budget_goal == Decimal("1000")


def test_build_report_empty_input():
    report = build_report([], source=ReportSource.LIVE, last_updated="t")
    assert report.warm_pipeline == report.hot_opps == report.collected == ()
    assert report.totals.total_pipeline == 0
    assert report.totals.hot_count == 0
    assert all(v == 0 for v in report.monthly_forecast.values())


def test_build_report_out_of_range_cells(make_row):
    rows = [
        make_row("Acme Corp", "$10,000", "1e9999999%", "", {"Mar": "1e5000"}),
        make_row("Beta Ltd", "1e5000", "50%", "$1,000"),
        make_row("Gamma Inc", "1e9999999", "50%", ""),
    ]
    report = build_report(rows, source=ReportSource.LIVE, last_updated="t")
    # Gamma has no usable amount left and is dropped
    assert [d.name for d in report.warm_pipeline] == ["Acme Corp", "Beta Ltd"]
    acme, beta = report.warm_pipeline
    assert acme.probability is None
    assert acme.monthly == {}
    assert beta.projected_sale == 0
    assert report.totals.total_pipeline == Decimal("10000")
    assert report.totals.weighted_forecast == 0
    assert "pipeline=10000 weighted=0" in render_summary_line(report)
    assert '"totalPipeline": 10000' in report_to_json(report)
