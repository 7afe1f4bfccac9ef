from __future__ import annotations

import datetime as dt
import math
from typing import Iterable, List, Optional, Tuple

import pandas as pd

from loancalc_core.domain.models import CompoundingConfig, EntryKind, EntryResult, Evaluation, LedgerEntry

QUICK_OFFSETS = (("1 Month", 1), ("1 Year", 12), ("5 Years", 60))


def format_currency(value: float) -> str:
    if not math.isfinite(value):
        return "invalid input"
    sign = "-" if value < 0 else ""
    return f"{sign}${abs(value):,.2f}"


def format_date(value: dt.date) -> str:
    return value.isoformat()


def format_percent(fraction: float, digits: int = 3) -> str:
    return f"{fraction * 100:.{digits}f}%"


def explain(result: EntryResult, config: CompoundingConfig) -> List[str]:
    """
    Human-readable derivation of one entry's balance-date amount.
    """
    rate = config.annual_rate
    n = result.compounds_per_year
    return [
        f"Days Elapsed: {result.days_elapsed}",
        f"  {format_date(result.entry.date)} till {format_date(config.balance_date)} = {result.days_elapsed} days",
        f"Years Elapsed: {result.years_elapsed:.4f}",
        f"  {result.days_elapsed} days / 365.25 days per year = {result.years_elapsed:.4f} years",
        f"Compounds per Year: {n}",
        f"  {config.frequency.value} compounding = {n} times per year",
        f"Compound Periods: {result.compound_periods:.2f}",
        f"  {n} x {result.years_elapsed:.4f} = {result.compound_periods:.2f}",
        f"Effective Annual Rate: {format_percent(result.effective_annual_rate)}",
        f"  (1 + {rate:.4f} / {n})^{n} - 1 = {result.effective_annual_rate:.4f}",
        f"Compound Factor: {result.growth_factor:.4f}",
        f"  (1 + {rate:.4f} / {n})^{result.compound_periods:.2f} = {result.growth_factor:.4f}",
        f"Balance Date Amount: {format_currency(result.future_value)}",
        f"  {format_currency(result.entry.amount)} x {result.growth_factor:.4f} = {format_currency(result.future_value)}",
    ]


def summary_lines(evaluation: Evaluation) -> List[str]:
    lines = []
    for r in evaluation.entries:
        label = "Borrowed:" if r.entry.kind == EntryKind.BORROWED else "Paid:"
        lines.append(f"{label} {format_currency(r.future_value)}")
    balance = evaluation.balance
    if math.isfinite(balance.net_balance):
        lines.append(f"Final Balance: {format_currency(abs(balance.net_balance))} ({balance.status})")
    else:
        lines.append("Final Balance: invalid input")
    return lines


def _add_months(start: dt.date, months: int) -> dt.date:
    return (pd.Timestamp(start) + pd.DateOffset(months=months)).date()


def quick_balance_dates(
    entries: Iterable[LedgerEntry], today: Optional[dt.date] = None
) -> List[Tuple[str, dt.date]]:
    """
    Shortcut balance dates: today, then 1 month / 1 year / 5 years after the
    earliest entry (or after today when there are no entries).

    Month offsets clamp to the last day of the target month
    (31 Jan + 1 month is 28 Feb, not early March).
    """
    today = today or dt.date.today()
    dates = [e.date for e in entries]
    anchor = min(dates) if dates else today
    quick = [("Today", today)]
    for label, months in QUICK_OFFSETS:
        quick.append((label, _add_months(anchor, months)))
    return quick
