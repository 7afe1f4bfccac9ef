from loancalc_core.domain.models import (  # noqa: F401
    BalanceResult,
    CompoundingConfig,
    EntryKind,
    EntryResult,
    Evaluation,
    Frequency,
    LedgerEntry,
)

__all__ = [
    "BalanceResult",
    "CompoundingConfig",
    "EntryKind",
    "EntryResult",
    "Evaluation",
    "Frequency",
    "LedgerEntry",
]
