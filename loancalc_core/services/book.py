from __future__ import annotations

import datetime as dt
import logging
from typing import Callable, Dict, Iterator, List, Optional, Tuple

from loancalc_core.domain.models import CompoundingConfig, EntryKind, Evaluation, LedgerEntry
from loancalc_core.io.parsing import clean_description, validate_amount, validate_entry_date
from loancalc_core.services import compounding

logger = logging.getLogger(__name__)


class EntryBook:
    """
    Session-scoped collection of ledger entries.

    Entries are replaced, never mutated. Ids come from a counter and are not
    reused after a delete. Any change drops the cached evaluation.
    """

    def __init__(self, today: Optional[Callable[[], dt.date]] = None):
        self._entries: Dict[int, LedgerEntry] = {}
        self._next_id = 1
        self._today = today or dt.date.today
        self.last_evaluation: Optional[Evaluation] = None

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[LedgerEntry]:
        return iter(self.entries())

    def _build(
        self,
        entry_id: int,
        date: dt.date,
        amount: float,
        kind: EntryKind,
        description: Optional[str],
    ) -> LedgerEntry:
        if isinstance(date, dt.datetime):
            date = date.date()
        return LedgerEntry(
            id=entry_id,
            date=validate_entry_date(date, self._today()),
            amount=validate_amount(float(amount)),
            kind=EntryKind(kind),
            description=clean_description(description),
        )

    def add(
        self,
        date: dt.date,
        amount: float,
        kind: EntryKind,
        description: Optional[str] = None,
    ) -> LedgerEntry:
        entry = self._build(self._next_id, date, amount, kind, description)
        self._next_id += 1
        self._entries[entry.id] = entry
        self.last_evaluation = None
        logger.info("Added entry %d: %s %.2f on %s", entry.id, entry.kind.value, entry.amount, entry.date)
        return entry

    def get(self, entry_id: int) -> LedgerEntry:
        try:
            return self._entries[entry_id]
        except KeyError:
            raise KeyError(f"No entry with id {entry_id}") from None

    def edit(self, entry_id: int, **changes) -> LedgerEntry:
        current = self.get(entry_id)
        unknown = set(changes) - {"date", "amount", "kind", "description"}
        if unknown:
            raise TypeError(f"Unknown entry fields: {sorted(unknown)}")
        entry = self._build(
            entry_id,
            changes.get("date", current.date),
            changes.get("amount", current.amount),
            changes.get("kind", current.kind),
            changes.get("description", current.description),
        )
        self._entries[entry_id] = entry
        self.last_evaluation = None
        logger.info("Replaced entry %d", entry_id)
        return entry

    def delete(self, entry_id: int) -> None:
        self.get(entry_id)
        del self._entries[entry_id]
        self.last_evaluation = None
        logger.info("Deleted entry %d", entry_id)

    def entries(self) -> List[LedgerEntry]:
        return sorted(self._entries.values(), key=lambda e: (e.date, e.id))

    def snapshot(self) -> Tuple[LedgerEntry, ...]:
        return tuple(self.entries())

    def earliest_date(self) -> Optional[dt.date]:
        entries = self.entries()
        return entries[0].date if entries else None

    def load(self, entries: List[LedgerEntry]) -> None:
        """Add already-built entries (e.g. from a CSV ledger) under fresh ids."""
        for e in entries:
            self.add(e.date, e.amount, e.kind, e.description)

    def calculate(self, config: CompoundingConfig) -> Evaluation:
        self.last_evaluation = compounding.run_evaluation(self.snapshot(), config)
        return self.last_evaluation
