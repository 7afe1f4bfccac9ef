from __future__ import annotations

import dataclasses
import datetime as dt
import enum
from typing import Any, Dict, List, Optional


class EntryKind(str, enum.Enum):
    BORROWED = "borrowed"
    PAID = "paid"


class Frequency(str, enum.Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"

    @property
    def compounds_per_year(self) -> int:
        return _COMPOUNDS_PER_YEAR[self]


_COMPOUNDS_PER_YEAR = {
    Frequency.DAILY: 365,
    Frequency.WEEKLY: 52,
    Frequency.MONTHLY: 12,
    Frequency.YEARLY: 1,
}


@dataclasses.dataclass(frozen=True)
class LedgerEntry:
    id: int
    date: dt.date
    amount: float
    kind: EntryKind
    description: Optional[str] = None


@dataclasses.dataclass(frozen=True)
class CompoundingConfig:
    balance_date: dt.date
    annual_rate: float = 0.11  # fraction, 0.11 == 11%
    frequency: Frequency = Frequency.MONTHLY


@dataclasses.dataclass(frozen=True)
class EntryResult:
    entry: LedgerEntry
    days_elapsed: int
    years_elapsed: float
    compounds_per_year: int
    compound_periods: float
    growth_factor: float
    effective_annual_rate: float
    future_value: float


@dataclasses.dataclass(frozen=True)
class BalanceResult:
    net_balance: float
    total_borrowed: float = 0.0
    total_paid: float = 0.0

    @property
    def is_owed(self) -> bool:
        return self.net_balance > 0

    @property
    def status(self) -> str:
        return "Owed" if self.is_owed else "In Credit"


@dataclasses.dataclass
class Evaluation:
    config: CompoundingConfig
    entries: List[EntryResult]
    balance: BalanceResult

    def to_dict(self) -> Dict[str, Any]:
        return {
            "config": {
                "balance_date": self.config.balance_date.isoformat(),
                "annual_rate": self.config.annual_rate,
                "frequency": self.config.frequency.value,
            },
            "entries": [
                {
                    "id": r.entry.id,
                    "date": r.entry.date.isoformat(),
                    "amount": r.entry.amount,
                    "kind": r.entry.kind.value,
                    "description": r.entry.description,
                    "days_elapsed": r.days_elapsed,
                    "years_elapsed": r.years_elapsed,
                    "compounds_per_year": r.compounds_per_year,
                    "compound_periods": r.compound_periods,
                    "growth_factor": r.growth_factor,
                    "effective_annual_rate": r.effective_annual_rate,
                    "future_value": r.future_value,
                }
                for r in self.entries
            ],
            "balance": {
                "net_balance": self.balance.net_balance,
                "total_borrowed": self.balance.total_borrowed,
                "total_paid": self.balance.total_paid,
                "status": self.balance.status,
            },
        }
