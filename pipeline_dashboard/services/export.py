from __future__ import annotations

import json
from decimal import Decimal
from typing import Any

from ..models.deal import Deal
from ..models.report import Report

"""Report -> dashboard JSON.

Keys follow the dashboard front-end (camelCase, e.g. warmPipeline, hotOpps).
Amounts become JSON numbers: ints when integral, floats otherwise. Unknown
probability is null.
"""

__all__ = [
    "report_to_dict",
    "report_to_json",
]


def _number(value: Decimal) -> int | float:
    if value == value.to_integral_value():
        return int(value)
    return float(value)


def _deal_to_dict(deal: Deal) -> dict[str, Any]:
    return {
        "date": deal.date,
        "name": deal.name,
        "notes": deal.notes,
        "leadSource": deal.lead_source,
        "product": deal.product,
        "projectedSale": _number(deal.projected_sale),
        "probability": None if deal.probability is None else _number(deal.probability),
        "netForecast": _number(deal.net_forecast),
        "nextStep": deal.next_step,
        "monthly": {m: _number(v) for m, v in deal.monthly.items()},
    }


def report_to_dict(report: Report) -> dict[str, Any]:
    t = report.totals
    return {
        "warmPipeline": [_deal_to_dict(d) for d in report.warm_pipeline],
        "hotOpps": [_deal_to_dict(d) for d in report.hot_opps],
        "collected": [_deal_to_dict(d) for d in report.collected],
        "totals": {
            "totalPipeline": _number(t.total_pipeline),
            "weightedForecast": _number(t.weighted_forecast),
            "collectedYTD": _number(t.collected_ytd),
            "thisMonth": _number(t.this_month),
            "budgetGoal": _number(t.budget_goal),
            "hotCount": t.hot_count,
        },
        "monthlyForecast": {m: _number(v) for m, v in report.monthly_forecast.items()},
        "source": report.source.value,
        "lastUpdated": report.last_updated,
    }


def report_to_json(report: Report, *, indent: int | None = 2) -> str:
    return json.dumps(report_to_dict(report), ensure_ascii=False, indent=indent)
