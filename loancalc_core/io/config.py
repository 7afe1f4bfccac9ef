from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict

from loancalc_core.domain.models import CompoundingConfig
from loancalc_core.io.parsing import parse_date, parse_frequency, validate_rate


def load_compounding_config(path: str | Path) -> CompoundingConfig:
    data = _read_json(path)
    if "balance_date" not in data:
        raise ValueError(f"Missing balance_date in config: {path}")
    return CompoundingConfig(
        balance_date=parse_date(str(data["balance_date"]), field="balance_date"),
        annual_rate=validate_rate(data.get("annual_rate", 0.11)),
        frequency=parse_frequency(str(data.get("frequency", "monthly"))),
    )


def _read_json(path: str | Path) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"Config must be a JSON object: {path}")
    return data
