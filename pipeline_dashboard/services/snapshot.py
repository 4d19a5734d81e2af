from __future__ import annotations

from decimal import Decimal

from ..models.config_models import ReportSettings
from ..models.deal import Deal, freeze_amounts
from ..models.report import ParsedSections, Report, ReportSource
from .assembler import assemble_report

"""Fixed fallback dataset (pipeline sheet as of Feb 21, 2026).

Used when the live sheet is not configured or cannot be fetched. The table is
turned into Deals, filtered by the same retention rule as live rows, and
assembled by the same code path, so the snapshot report has exactly the live
report's shape.
"""

__all__ = [
    "SNAPSHOT_LABEL",
    "snapshot_report",
    "snapshot_sections",
]

SNAPSHOT_LABEL = "Feb 21, 2026 (snapshot)"

# (name, probability, projected sale, net forecast, next step, notes, monthly)
_Entry = tuple[str, int | None, int, int, str, str, dict[str, int]]

_WARM: tuple[_Entry, ...] = (
    ("RHI Magnesita", 25, 40000, 10000, "Mid-March check in", "Project likely in the states", {"Apr": 11250}),
    ("Automotive Group", 0, 20000, 0, "Present end of Jan", "Tirecraft + Alan Beech Group", {}),
    ("CMTO", 25, 40000, 10000, "Confirm first week of Jan", "Coaching project", {"Apr": 20000}),
    ("BCM Insurance", 50, 40000, 20000, "Waiting for Job Grant", "Committed, pending grant", {"Apr": 40000}),
    ("Michipoten First Nation", 50, 35000, 17500, "Follow-up mid Feb", "Build into 26/27 budget", {"Apr": 20000}),
    ("Toronto Jewish Network (women)", 50, 27000, 13500, "Finish men → suggest Feb/Mar", "After men's class", {"Mar": 27000}),
    ("SBI (Indian Bank)", 25, 22500, 5625, "Confirm first week of Jan", "Up to $50K", {"Mar": 11250}),
    ("MTE Coaching/Microlearnings", 25, 20000, 5000, "Discuss first week of Jan", "Microlearning discussion", {"Apr": 20000}),
    ("Berq RNG", 75, 17400, 13050, "Check in with Bas", "LWI 6 employees or private", {"May": 3800}),
    ("Earth Fresh Foods", 25, 14500, 3625, "Check in beg. January", "Team for Burlington Boot Camp", {"Mar": 14500}),
    ("JFE Shoji", 0, 14500, 0, "Discuss first week of Jan", "Team for Burlington Boot Camp", {"Mar": 14500}),
    ("Meridian Credit Union", None, 17500, 0, "Check in June", "Quincy - group of 7 for Niagara Sep", {}),
    ("Performance Acura", 0, 3000, 0, "", "Conflict workshop", {}),
    ("Global Help Foundation (GHF)", 0, 10000, 0, "", "2 Day Workshop in May - Toronto", {}),
    ("Algoma Central Refresher (Tina)", 25, 20000, 5000, "Tina inquiring about Refresher", "", {"Feb": 5000}),
    ("BMO Capital Markets", 0, 40000, 0, "Sent email to connect", "Jen Harrop referral", {}),
    ("Thorpe Handcrafted Carpentry", 25, 17400, 4350, "Discuss proposal with her husband", "LWI 6 employees", {}),
    ("Ron - Jenna's Dad", 25, 2500, 625, "Send dates", "Boot Camp or Dale", {"Mar": 2500}),
    ("Meridian CU (Erin Pickering)", 75, 4990, 3743, "Waiting for budget confirmation", "2 for DCC Niagara Sep", {}),
    ("WalterFedy", 25, 17500, 4375, "Sent info, getting clear on budget", "Community group 6-10", {"Mar": 5000}),
    ("TireCraft Regional Support", 0, 15000, 0, "Check back with Usman", "", {}),
    ("RWDI - Kerry Smith", 0, 10000, 0, "", "", {"May": 2500}),
    ("Axium Group - David Honicky", 25, 6500, 1625, "Meeting booked Wed 18th", "Fern Resort / Camp Axsium", {"Aug": 6500}),
    ("Grand River Foods", 25, 2900, 725, "Check in", "Sandeep - leadership training", {"Dec": 800}),
    ("Napa Conference", 0, 5000, 0, "Invite in October", "October conference", {"Jul": 5000}),
    ("Scott Eccles", None, 2500, 0, "Talking Monday", "", {"Mar": 2500}),
    ("La Boîte à Soleil", None, 2900, 0, "Meeting booked 2/6", "LWI details", {}),
    ("Kevin Lebruyn", 0, 2900, 0, "", "1 LWI possible", {}),
)

_HOT: tuple[_Entry, ...] = (
    ("Mazak Corporation", 75, 5800, 4350, "", "2 for KW LWI", {"Feb": 5800}),
    ("Berq RNG Coaching + Boot Camp", 75, 6559, 4919, "Book meeting w/ Andy, Bob, Tyson", "Michael Dowdy coaching", {"Feb": 6559}),
    # no amounts yet; dropped by the retention rule like the live sheet row
    ("Angstrom Engineering", None, 0, 0, "Next Kitchener DCC", "2 for DCC - bus issue", {}),
    ("Jeff & Rob Huten LWI Upgrade", 100, 1600, 1600, "Kevin to do upgrade", "Registered", {"Feb": 1600}),
    ("Makaxo Traffic Management", 100, 2900, 2900, "Waiting for payment", "Burlington LWI", {"Mar": 2900}),
)

_COLLECTED: tuple[_Entry, ...] = (
    ("Cambridge Elevating", 100, 11475, 11475, "", "KW class", {"Jan": 11475}),
    ("Andy Xiao MTE", 100, 2900, 2900, "", "Mississauga Boot Camp", {"Jan": 2900}),
    ("Kevin Heeringa All-Pro", 100, 2500, 2500, "", "KKW Class", {"Jan": 2500}),
    ("Toronto Jewish Network", 100, 16000, 16000, "", "Remainder + payment", {"Jan": 16000}),
    ("Jackie - Eclipse Automation", 100, 2500, 2500, "", "HIP", {"Jan": 2500}),
    ("PureLogic/PureLogic IT", 100, 7500, 7500, "", "WWRS", {"Jan": 7500}),
    ("Pure Logic (2 more)", 100, 5000, 5000, "", "2 more for Sales Course", {"Jan": 5000}),
    ("Natalie Black", 100, 2295, 2295, "", "KW class", {}),
    ("Algoma Central LTM", 100, 31000, 31000, "", "Runs end of February", {"Feb": 31000}),
    ("Hutton and Company", 75, 39000, 29250, "", "Project confirmed", {"Feb": 32000, "Jun": 4500}),
    ("Owen Lee", 100, 2500, 2500, "", "Hamilton Dale", {"Feb": 2500}),
    ("North American Stamping", None, 2900, 0, "", "LB-KW", {"Feb": 2900}),
)


def _to_deal(entry: _Entry) -> Deal:
    name, probability, projected, net, next_step, notes, monthly = entry
    return Deal(
        name=name,
        projected_sale=Decimal(projected),
        net_forecast=Decimal(net),
        probability=None if probability is None else Decimal(probability),
        next_step=next_step,
        notes=notes,
        monthly=freeze_amounts({m: Decimal(v) for m, v in monthly.items()}),
    )


def _retained(entries: tuple[_Entry, ...]) -> tuple[Deal, ...]:
    deals = (_to_deal(e) for e in entries)
    return tuple(d for d in deals if d.is_retained)


def snapshot_sections() -> ParsedSections:
    return ParsedSections(
        warm=_retained(_WARM),
        hot=_retained(_HOT),
        collected=_retained(_COLLECTED),
    )


def snapshot_report(settings: ReportSettings | None = None) -> Report:
    """Build the fallback Report from the fixed table."""
    return assemble_report(
        snapshot_sections(),
        source=ReportSource.SNAPSHOT,
        last_updated=SNAPSHOT_LABEL,
        settings=settings,
    )
