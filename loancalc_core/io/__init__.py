from loancalc_core.io.ledger import load_ledger  # noqa: F401
from loancalc_core.io.config import load_compounding_config  # noqa: F401

__all__ = ["load_ledger", "load_compounding_config"]
