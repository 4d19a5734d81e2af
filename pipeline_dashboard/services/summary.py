from __future__ import annotations

from decimal import Decimal

from ..models.report import Report

"""SUMMARY line rendering for a completed load cycle.

Format:
SUMMARY source={live|snapshot} warm={n} hot={n} collected={n} pipeline={amt}
weighted={amt} collected_ytd={amt} this_month={amt} hot_count={n} budget_goal={amt}
(single line)
"""

__all__ = [
    "format_amount",
    "render_summary_line",
]


def format_amount(value: Decimal) -> str:
    """Render an amount without exponent or trailing zeros.

    >>> format_amount(Decimal("132511.750"))
    '132511.75'
    >>> format_amount(Decimal("1E+5"))
    '100000'
    """
    if value == value.to_integral_value():
        return str(int(value))
    text = f"{value:f}"
    return text.rstrip("0").rstrip(".")


def render_summary_line(report: Report) -> str:
    """Render the SUMMARY line for a Report.

    Examples:
        >>> from pipeline_dashboard.services.snapshot import snapshot_report
        >>> render_summary_line(snapshot_report())  # doctest: +ELLIPSIS
        'SUMMARY source=snapshot warm=28 hot=4 collected=12 pipeline=488349 ...'
    """
    t = report.totals
    return (
        f"SUMMARY source={report.source.value} "
        f"warm={len(report.warm_pipeline)} "
        f"hot={len(report.hot_opps)} "
        f"collected={len(report.collected)} "
        f"pipeline={format_amount(t.total_pipeline)} "
        f"weighted={format_amount(t.weighted_forecast)} "
        f"collected_ytd={format_amount(t.collected_ytd)} "
        f"this_month={format_amount(t.this_month)} "
        f"hot_count={t.hot_count} "
        f"budget_goal={format_amount(t.budget_goal)}"
    )
