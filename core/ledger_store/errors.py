"""
Closet Ledger Store - Error Taxonomy
=====================================
Every failure mode of an item mutation has its own exception type so
callers can tell a rejected request from a flaky backend, and both
from a detected ledger inconsistency.

    InvalidItemState         rejected before any write
    ItemNotFound             point lookup missed
    StoreUnavailable         backend failure, nothing persisted, safe to retry
    ConcurrentUpdateConflict CAS retries exhausted on the capital account
    DuplicateLedgerEntry     idempotency key already recorded
    LedgerWriteFailed        item persisted, ledger delta did not
"""

from __future__ import annotations

from decimal import Decimal
from typing import Optional

from core.commands.rejection import RejectionReason


class LedgerError(Exception):
    """Base error for the inventory ledger."""


class InvalidItemState(LedgerError):
    """A mutation carries missing or negative financial fields."""

    def __init__(self, reason: RejectionReason):
        self.reason = reason
        super().__init__(reason.message)

    @property
    def code(self) -> str:
        return self.reason.code


class ItemNotFound(LedgerError):

    def __init__(self, item_id: str):
        self.item_id = item_id
        super().__init__(f"Inventory item '{item_id}' not found.")


class StoreUnavailable(LedgerError):
    """Transient backend failure. Nothing was persisted."""


class ConcurrentUpdateConflict(LedgerError):
    """
    The capital account changed under us on every attempt.

    Raised only after the bounded retry budget is spent.
    """

    def __init__(self, attempts: int):
        self.attempts = attempts
        super().__init__(
            f"Capital account update lost the race {attempts} time(s); "
            f"giving up."
        )


class DuplicateLedgerEntry(LedgerError):
    """A delta with this idempotency key was already applied."""

    def __init__(self, idempotency_key: str):
        self.idempotency_key = idempotency_key
        super().__init__(
            f"Ledger entry with idempotency key '{idempotency_key}' "
            f"already exists."
        )


class LedgerWriteFailed(LedgerError):
    """
    Detected inconsistency: the item write succeeded but the
    matching ledger delta did not land.

    Never retried automatically. A reconciliation pass decides.
    """

    def __init__(
        self,
        *,
        item_id: str,
        delta: Decimal,
        idempotency_key: str,
        cause: Optional[BaseException] = None,
    ):
        self.item_id = item_id
        self.delta = delta
        self.idempotency_key = idempotency_key
        self.cause = cause
        super().__init__(
            f"Item '{item_id}' was persisted but ledger delta {delta} "
            f"(key '{idempotency_key}') failed: {cause}"
        )
