from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from ..models.config_models import DEFAULT_CURRENCY_CODES
from ..models.deal import FISCAL_MONTHS, Deal, Section, freeze_amounts
from ..models.report import ParsedSections
from ..sheet.cells import parse_currency, parse_percent
from ..sheet.reader import normalize_row

"""Row classifier & parser.

Walks the sheet rows in file order and assigns each deal row to the section
announced by the most recent marker row. Section is positional, not encoded in
a column: a marker affects every following row until the next marker, including
across blank and subtotal rows.
"""

logger = logging.getLogger(__name__)

__all__ = [
    "NOISE_LABELS",
    "SECTION_MARKERS",
    "SectionScanner",
    "parse_row",
    "parse_rows",
]

# Column indexes of the fixed layout
COL_DATE = 0
COL_NAME = 1
COL_NOTES = 2
COL_LEAD_SOURCE = 5
COL_PRODUCT = 6
COL_PROJECTED_SALE = 7
COL_PROBABILITY = 8
COL_NET_FORECAST = 9
COL_NEXT_STEP = 10
MONTH_COLUMNS: tuple[int, ...] = tuple(range(11, 11 + len(FISCAL_MONTHS)))

SECTION_MARKERS: dict[str, Section] = {
    "hot opportunity": Section.HOT,
    "collected": Section.COLLECTED,
}

# Structural rows (subtotals, banners, repeated headers); substring match on the
# lower-cased name.
NOISE_LABELS: tuple[str, ...] = (
    "subtotals",
    "total net forecast",
    "budget goal",
    "surplus/shortfall",
    "total unclosed pipeline",
    "warm opportunity",
    "opportunity\nname",
    "opportunity name",
)


class SectionScanner:
    """Finite-state scan over rows: state is the current Section.

    feed() returns the section a deal row belongs to, or None when the row is
    a marker (which only switches state).
    """

    def __init__(self, initial: Section = Section.WARM) -> None:
        self.section = initial

    def feed(self, name: str) -> Section | None:
        marker = SECTION_MARKERS.get(name.strip().lower())
        if marker is not None:
            logger.debug(f"section -> {marker.value}")
            self.section = marker
            return None
        return self.section


def _is_noise(lower_name: str) -> bool:
    return any(label in lower_name for label in NOISE_LABELS)


def parse_row(
    row: Sequence[object] | None,
    currency_codes: Iterable[str] = DEFAULT_CURRENCY_CODES,
) -> Deal | None:
    """Build a Deal from one raw row, or None if the row is not a deal.

    Dropped rows: empty name, noise label, or a Deal that fails
    Deal.is_retained (zero projected sale and zero net forecast). Marker rows
    are not handled here (see SectionScanner).
    """
    cells = normalize_row(row)
    name = cells[COL_NAME]
    if not name:
        return None
    if _is_noise(name.lower()):
        return None

    monthly = {}
    for month, col in zip(FISCAL_MONTHS, MONTH_COLUMNS, strict=True):
        amount = parse_currency(cells[col], currency_codes)
        if amount > 0:
            monthly[month] = amount

    deal = Deal(
        name=name,
        projected_sale=parse_currency(cells[COL_PROJECTED_SALE], currency_codes),
        net_forecast=parse_currency(cells[COL_NET_FORECAST], currency_codes),
        probability=parse_percent(cells[COL_PROBABILITY]),
        date=cells[COL_DATE],
        notes=cells[COL_NOTES],
        lead_source=cells[COL_LEAD_SOURCE],
        product=cells[COL_PRODUCT],
        next_step=cells[COL_NEXT_STEP],
        monthly=freeze_amounts(monthly),
    )
    return deal if deal.is_retained else None


def parse_rows(
    rows: Iterable[Sequence[object] | None],
    currency_codes: Iterable[str] = DEFAULT_CURRENCY_CODES,
) -> ParsedSections:
    """Classify and parse every row; total over any row sequence."""
    codes = tuple(currency_codes)
    scanner = SectionScanner()
    buckets: dict[Section, list[Deal]] = {s: [] for s in Section}
    dropped = 0
    for row in rows:
        cells = normalize_row(row)
        section = scanner.feed(cells[COL_NAME])
        if section is None:
            continue
        deal = parse_row(cells, codes)
        if deal is None:
            dropped += 1
            continue
        buckets[section].append(deal)

    logger.debug(
        f"parsed warm={len(buckets[Section.WARM])} hot={len(buckets[Section.HOT])} "
        f"collected={len(buckets[Section.COLLECTED])} dropped={dropped}"
    )
    return ParsedSections(
        warm=tuple(buckets[Section.WARM]),
        hot=tuple(buckets[Section.HOT]),
        collected=tuple(buckets[Section.COLLECTED]),
    )
