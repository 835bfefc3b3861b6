"""Tabular reports built from summaries for CSV export."""

import calendar
from decimal import Decimal

from .models import Contribution, Member, PortfolioSummary

REPORT_HEADER = [
    "Member",
    "Total Contributions",
    "Current Value",
    "Available Cash",
    "Gain/Loss",
    "Gain/Loss %",
    "Portfolio Share",
]


def member_report_rows(summary: PortfolioSummary, title: str) -> list[list[str]]:
    """Rows for the member report: title, header, one row per member, totals."""
    rows: list[list[str]] = [[title], [], list(REPORT_HEADER)]
    for m in summary.members:
        rows.append([
            m.member_name,
            f"{m.total_contributions:.2f}",
            f"{m.total_value:.2f}",
            f"{m.available_cash:.2f}",
            f"{m.gain_loss:.2f}",
            f"{m.gain_loss_pct:.2f}%",
            f"{m.ownership_pct:.2f}%",
        ])
    rows.append([])
    rows.append([
        "Total",
        "",
        f"{summary.total_value:.2f}",
        f"{summary.total_cash:.2f}",
        f"{summary.total_gain_loss:.2f}",
        f"{summary.total_gain_loss_pct:.2f}%",
        "100%" if summary.total_value > 0 else "0%",
    ])
    return rows


def contributions_in_year(contributions: list[Contribution], year: int) -> list[Contribution]:
    return [c for c in contributions if c.contribution_date.year == year]


def contributions_by_month(contributions: list[Contribution], year: int) -> dict[str, Decimal]:
    """Month abbreviation -> total contributed, calendar order, months with data only."""
    totals: dict[int, Decimal] = {}
    for c in contributions_in_year(contributions, year):
        month = c.contribution_date.month
        totals[month] = totals.get(month, Decimal("0")) + c.amount
    return {calendar.month_abbr[month]: totals[month] for month in sorted(totals)}


def contributions_by_member(
    contributions: list[Contribution], members: list[Member], year: int
) -> dict[str, Decimal]:
    names = {m.id: m.name for m in members}
    totals: dict[str, Decimal] = {}
    for c in contributions_in_year(contributions, year):
        name = names.get(c.member_id, "Unknown")
        totals[name] = totals.get(name, Decimal("0")) + c.amount
    return totals
