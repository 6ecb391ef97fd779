"""
Closet Ledger Core Config - Public API
=======================================
Ledger tunables (CAS retry budget, convention release delay).
"""

from core.config.ledger import (
    DEFAULT_CONVENTION_RELEASE_DAYS,
    DEFAULT_MAX_CAS_ATTEMPTS,
    LedgerConfig,
    load_ledger_config,
)

__all__ = [
    "DEFAULT_CONVENTION_RELEASE_DAYS",
    "DEFAULT_MAX_CAS_ATTEMPTS",
    "LedgerConfig",
    "load_ledger_config",
]
