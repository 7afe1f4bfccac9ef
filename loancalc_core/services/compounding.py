from __future__ import annotations

import logging
import math
from typing import Iterable, List, Tuple

from loancalc_core.domain.models import (
    BalanceResult,
    CompoundingConfig,
    EntryKind,
    EntryResult,
    Evaluation,
    LedgerEntry,
)
from loancalc_core.services.daycount import days_between

logger = logging.getLogger(__name__)

DAYS_PER_YEAR = 365.25


def _real_pow(base: float, exponent: float) -> float:
    # IEEE pow semantics: nan/inf come back as values instead of exceptions.
    if base < 0 and not float(exponent).is_integer():
        return math.nan
    if base == 0 and exponent < 0:
        return math.inf
    try:
        return math.pow(base, exponent)
    except OverflowError:
        return math.inf if base > 0 or float(exponent) % 2 == 0 else -math.inf


def compound_factor(annual_rate: float, compounds_per_year: int, compound_periods: float) -> float:
    """(1 + r/n) ** periods with a real exponent; fractional and negative periods are kept as-is."""
    return _real_pow(1 + annual_rate / compounds_per_year, compound_periods)


def effective_annual_rate(annual_rate: float, compounds_per_year: int) -> float:
    return _real_pow(1 + annual_rate / compounds_per_year, compounds_per_year) - 1


def evaluate_entry(entry: LedgerEntry, config: CompoundingConfig) -> EntryResult:
    n = config.frequency.compounds_per_year
    days = days_between(entry.date, config.balance_date)
    years = days / DAYS_PER_YEAR
    periods = n * years
    factor = compound_factor(config.annual_rate, n, periods)
    return EntryResult(
        entry=entry,
        days_elapsed=days,
        years_elapsed=years,
        compounds_per_year=n,
        compound_periods=periods,
        growth_factor=factor,
        effective_annual_rate=effective_annual_rate(config.annual_rate, n),
        future_value=entry.amount * factor,
    )


def evaluate(
    entries: Iterable[LedgerEntry], config: CompoundingConfig
) -> Tuple[List[EntryResult], BalanceResult]:
    """
    Future value of every entry as of `config.balance_date`, plus the net balance.

    - Each entry compounds on its own from its date; input order is preserved.
    - Net balance = borrowed future values minus paid future values
      (positive means owed).
    - Nothing is rounded here; rounding belongs to presentation.
    """
    results = [evaluate_entry(e, config) for e in entries]

    total_borrowed = sum((r.future_value for r in results if r.entry.kind == EntryKind.BORROWED), 0.0)
    total_paid = sum((r.future_value for r in results if r.entry.kind == EntryKind.PAID), 0.0)
    balance = BalanceResult(
        net_balance=total_borrowed - total_paid,
        total_borrowed=total_borrowed,
        total_paid=total_paid,
    )
    logger.debug(
        "Evaluated %d entries as of %s at %.4f %s: net %.6f",
        len(results),
        config.balance_date.isoformat(),
        config.annual_rate,
        config.frequency.value,
        balance.net_balance,
    )
    return results, balance


def run_evaluation(entries: Iterable[LedgerEntry], config: CompoundingConfig) -> Evaluation:
    results, balance = evaluate(entries, config)
    return Evaluation(config=config, entries=results, balance=balance)
