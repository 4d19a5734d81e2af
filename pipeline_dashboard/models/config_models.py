from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal

"""Config dataclasses for the pipeline dashboard loader.

Kept separate from the YAML loader in pipeline_dashboard/config/loader.py so the
core services can depend on plain typed settings without importing yaml.
"""

DEFAULT_BUDGET_GOAL = Decimal(600000)
DEFAULT_CURRENT_MONTH = "Feb"
DEFAULT_CURRENCY_CODES: tuple[str, ...] = ("CAD", "USD", "CA")
DEFAULT_SHEET_NAME = "Pipeline"
DEFAULT_TIMEOUT_SECONDS = 30


@dataclass(frozen=True)
class SourceConfig:
    """Where live rows come from.

    Precedence when several are set: csv_path > csv_url > sheet_id.
    The API key is only ever read from the environment.
    """
    csv_url: str | None = None
    csv_path: str | None = None
    sheet_id: str | None = None
    sheet_name: str = DEFAULT_SHEET_NAME
    api_key: str | None = None
    timeout_seconds: int = DEFAULT_TIMEOUT_SECONDS


@dataclass(frozen=True)
class ReportSettings:
    """Tunables the transformation core depends on."""
    budget_goal: Decimal = DEFAULT_BUDGET_GOAL
    # 固定ラベル (壁時計からは算出しない)
    current_month: str = DEFAULT_CURRENT_MONTH
    currency_codes: tuple[str, ...] = DEFAULT_CURRENCY_CODES


@dataclass(frozen=True)
class DashboardConfig:
    """Root configuration object."""
    source: SourceConfig = field(default_factory=SourceConfig)
    report: ReportSettings = field(default_factory=ReportSettings)
