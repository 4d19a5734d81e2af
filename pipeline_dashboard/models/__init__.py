"""Domain models for the sales pipeline dashboard loader.

This package contains the deal, report, configuration and error-log models
shared by the sheet reader, the transformation services and the CLI.
"""

from .config_models import DashboardConfig, ReportSettings, SourceConfig
from .deal import FISCAL_MONTHS, Deal, Section
from .error_record import ErrorRecord
from .report import ParsedSections, Report, ReportSource, Totals

__all__ = [
    # Configuration models
    "DashboardConfig",
    "ReportSettings",
    "SourceConfig",
    # Domain models
    "FISCAL_MONTHS",
    "Deal",
    "Section",
    "ParsedSections",
    "Report",
    "ReportSource",
    "Totals",
    # Logging
    "ErrorRecord",
]
