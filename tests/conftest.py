# Shared pytest fixtures
from __future__ import annotations

import tempfile
from collections.abc import Callable
from pathlib import Path

import pytest

from pipeline_dashboard.config.loader import ENV_OVERRIDES, ENV_TIMEOUT
from pipeline_dashboard.logging.init import reset_logging
from pipeline_dashboard.models.deal import FISCAL_MONTHS
from pipeline_dashboard.sheet.reader import ROW_WIDTH

RowFactory = Callable[..., list[str]]


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch):
    # ホスト環境の .env / 環境変数をテストに持ち込まない
    for var in [*ENV_OVERRIDES, ENV_TIMEOUT]:
        monkeypatch.delenv(var, raising=False)
    reset_logging()
    yield
    reset_logging()


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        (p / "logs").mkdir()
        monkeypatch.chdir(p)
        yield p


def _make_row(
    name: str,
    projected: str = "",
    probability: str = "",
    net: str = "",
    months: dict[str, str] | None = None,
    *,
    date: str = "",
    notes: str = "",
    lead_source: str = "",
    product: str = "",
    next_step: str = "",
) -> list[str]:
    cells = [""] * ROW_WIDTH
    cells[0] = date
    cells[1] = name
    cells[2] = notes
    cells[5] = lead_source
    cells[6] = product
    cells[7] = projected
    cells[8] = probability
    cells[9] = net
    cells[10] = next_step
    for month, value in (months or {}).items():
        cells[11 + FISCAL_MONTHS.index(month)] = value
    return cells


@pytest.fixture()
def make_row() -> RowFactory:
    return _make_row


@pytest.fixture()
def sample_rows() -> list[list[str]]:
    """Small sheet: header, banners, subtotal and blank rows around 4 deals.

    Expected:
      warm      Acme Corp (10000 @ 50%, Mar 5000), Beta Ltd (2000 @ unknown)
      hot       Gamma Inc (4000 @ 75%, Feb 4000)
      collected Omega LLC (1500 @ 100%, Jan 1500)
    """
    header = ["Date", "Opportunity\nName", "Notes", "Payment", "", "Lead Source", "Product",
              "Projected Sale", "Probability", "Net Forecast", "Next Step", *FISCAL_MONTHS]
    return [
        header,
        _make_row("Warm Opportunity"),
        _make_row("Acme Corp", "$10,000", "50%", "$5,000", {"Mar": "$5,000"},
                  date="2026-01-05", notes="Intro call", lead_source="Referral",
                  product="Boot Camp", next_step="Send proposal"),
        [],
        _make_row("Beta Ltd", "$2,000 CAD", "", "$0"),
        _make_row("Subtotals", "$12,000", "", "$5,000"),
        _make_row("Hot Opportunity"),
        _make_row("Gamma Inc", "$4,000", "75%", "$3,000", {"Feb": "$4,000"}),
        _make_row("Delta Co", "$0", "90%", "$0"),
        _make_row("Collected"),
        _make_row("Omega LLC", "$1,500", "100%", "$1,500", {"Jan": "$1,500"}),
        _make_row("Budget Goal", "$600,000"),
    ]


def to_csv_text(rows: list[list[str]]) -> str:
    lines = []
    for row in rows:
        lines.append(",".join('"' + c.replace('"', '""') + '"' for c in row))
    return "\n".join(lines) + "\n"


@pytest.fixture()
def csv_text_of() -> Callable[[list[list[str]]], str]:
    return to_csv_text


@pytest.fixture()
def sample_csv_text(sample_rows) -> str:
    return to_csv_text(sample_rows)


@pytest.fixture()
def write_sample_csv(temp_workdir: Path, sample_csv_text: str) -> Path:
    p = temp_workdir / "data" / "pipeline.csv"
    p.write_text(sample_csv_text, encoding="utf-8")
    return p


@pytest.fixture()
def sample_config_yaml() -> str:
    return """source:
  csv_path: ./data/pipeline.csv
  sheet_name: Troys 2026 Pipeline
  timeout_seconds: 10
report:
  budget_goal: 750000
  current_month: Mar
  currency_codes: [CAD, USD]
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "pipeline.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg
