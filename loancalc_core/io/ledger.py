from __future__ import annotations

import datetime as dt
from pathlib import Path
from typing import List, Optional

import pandas as pd

from loancalc_core.domain.models import LedgerEntry
from loancalc_core.io.parsing import clean_description, parse_kind, validate_amount, validate_entry_date


REQUIRED_COLUMNS = {"date", "amount", "kind"}


def load_ledger(csv_path: str | Path, today: Optional[dt.date] = None) -> List[LedgerEntry]:
    path = Path(csv_path)
    if not path.exists():
        raise FileNotFoundError(path)

    df = pd.read_csv(path)
    missing = REQUIRED_COLUMNS - set(df.columns)
    if missing:
        raise ValueError(f"Missing columns in ledger CSV: {missing}")

    df["date"] = pd.to_datetime(df["date"]).dt.date
    has_ids = "id" in df.columns
    has_description = "description" in df.columns
    today = today or dt.date.today()

    entries: List[LedgerEntry] = []
    for position, (_, row) in enumerate(df.iterrows(), start=1):
        description = row["description"] if has_description else None
        if description is not None and pd.isna(description):
            description = None
        entries.append(
            LedgerEntry(
                id=int(row["id"]) if has_ids else position,
                date=validate_entry_date(row["date"], today, field=f"row {position} date"),
                amount=validate_amount(float(row["amount"]), field=f"row {position} amount"),
                kind=parse_kind(str(row["kind"]), field=f"row {position} kind"),
                description=clean_description(description),
            )
        )

    ids = [e.id for e in entries]
    if len(set(ids)) != len(ids):
        raise ValueError("Duplicate ids in ledger CSV")
    return entries
