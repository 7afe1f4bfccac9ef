from loancalc_core.services.book import EntryBook  # noqa: F401
from loancalc_core.services.compounding import evaluate, evaluate_entry, run_evaluation  # noqa: F401
from loancalc_core.services.daycount import days_between  # noqa: F401

__all__ = [
    "EntryBook",
    "days_between",
    "evaluate",
    "evaluate_entry",
    "run_evaluation",
]
