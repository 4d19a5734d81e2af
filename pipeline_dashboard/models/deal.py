from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from types import MappingProxyType

"""Deal domain model for the pipeline dashboard.

A Deal is one opportunity (or closed sale) row of the pipeline sheet after cell
normalization. Sections are decided positionally by the classifier, so the Deal
itself carries no section field.
"""

__all__ = [
    "FISCAL_MONTHS",
    "Deal",
    "Section",
    "freeze_amounts",
]

# Fiscal year starts in September; also the order of the sheet's month columns.
FISCAL_MONTHS: tuple[str, ...] = (
    "Sep", "Oct", "Nov", "Dec", "Jan", "Feb",
    "Mar", "Apr", "May", "Jun", "Jul", "Aug",
)

ZERO = Decimal(0)


class Section(Enum):
    """Mutually exclusive deal buckets of the pipeline sheet.

    State transitions happen only on marker rows:
    WARM (initial) -> HOT ("Hot Opportunity") -> COLLECTED ("Collected")
    Any marker may also re-enter an earlier section.
    """
    WARM = "warm"
    HOT = "hot"
    COLLECTED = "collected"


def freeze_amounts(amounts: Mapping[str, Decimal]) -> Mapping[str, Decimal]:
    """Return a read-only copy of a month -> amount mapping."""
    return MappingProxyType(dict(amounts))


@dataclass(frozen=True)
class Deal:
    """Single pipeline opportunity.

    probability is None when the sheet has no usable value ("unknown"),
    which is not the same as a recorded 0%.
    """
    name: str
    projected_sale: Decimal = ZERO
    net_forecast: Decimal = ZERO
    probability: Decimal | None = None
    date: str = ""
    notes: str = ""
    lead_source: str = ""
    product: str = ""
    next_step: str = ""
    monthly: Mapping[str, Decimal] = field(default_factory=lambda: freeze_amounts({}))

    @property
    def is_retained(self) -> bool:
        """Rows with neither a projected sale nor a net forecast are noise."""
        return self.projected_sale > 0 or self.net_forecast > 0

    @property
    def weighted_value(self) -> Decimal:
        # unknown probability weighs 0, never 100
        if self.probability is None:
            return ZERO
        return self.projected_sale * self.probability / 100
