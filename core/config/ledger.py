"""
Closet Ledger Core Config - Ledger Settings
=============================================
Tunables for the ledger engines, read once from Django settings.

Engines receive a LedgerConfig instance and never import
django.conf themselves. Tests build LedgerConfig directly.
"""

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_MAX_CAS_ATTEMPTS = 5
DEFAULT_CONVENTION_RELEASE_DAYS = 2


@dataclass(frozen=True)
class LedgerConfig:
    """
    max_cas_attempts:        Attempts at a conditional capital-account
                             write before ConcurrentUpdateConflict.
    convention_release_days: Days after an event's end date before
                             tagged items are auto-released.
    """

    max_cas_attempts: int = DEFAULT_MAX_CAS_ATTEMPTS
    convention_release_days: int = DEFAULT_CONVENTION_RELEASE_DAYS

    def __post_init__(self) -> None:
        if self.max_cas_attempts < 1:
            raise ValueError(
                f"max_cas_attempts must be >= 1, got {self.max_cas_attempts}."
            )
        if self.convention_release_days < 0:
            raise ValueError(
                f"convention_release_days must be >= 0, "
                f"got {self.convention_release_days}."
            )


def load_ledger_config() -> LedgerConfig:
    """Build LedgerConfig from the active Django settings module."""
    from django.conf import settings

    return LedgerConfig(
        max_cas_attempts=int(
            getattr(settings, "LEDGER_MAX_CAS_ATTEMPTS", DEFAULT_MAX_CAS_ATTEMPTS)
        ),
        convention_release_days=int(
            getattr(
                settings,
                "CONVENTION_RELEASE_DAYS",
                DEFAULT_CONVENTION_RELEASE_DAYS,
            )
        ),
    )
