"""
Closet Ledger Store - Storage Contracts
=========================================
Protocols the engines depend on. Two implementations exist:

    core.ledger_store.memory      thread-safe in-memory stores
    core.ledger_store.repository  Django ORM stores

Every method may block on I/O. Callers must not assume completion
order across separate calls.
"""

from __future__ import annotations

from typing import List, Optional, Protocol

from core.primitives.capital import CapitalAccount, Contribution, LedgerEntry
from core.primitives.item import InventoryItem


class ItemStore(Protocol):
    """Durable collection of inventory items."""

    def create(self, item: InventoryItem) -> InventoryItem:
        ...  # pragma: no cover

    def get(self, item_id: str) -> InventoryItem:
        """Raises ItemNotFound."""
        ...  # pragma: no cover

    def update(self, item: InventoryItem) -> InventoryItem:
        """Overwrite the stored snapshot. Raises ItemNotFound."""
        ...  # pragma: no cover

    def delete(self, item_id: str) -> None:
        """Raises ItemNotFound."""
        ...  # pragma: no cover

    def list_all(self) -> List[InventoryItem]:
        """Full scan, newest first."""
        ...  # pragma: no cover


class CapitalAccountStore(Protocol):
    """Singleton capital account plus its append-only history."""

    def read(self) -> CapitalAccount:
        ...  # pragma: no cover

    def compare_and_set(
        self,
        expected_version: int,
        account: CapitalAccount,
        *,
        entry: Optional[LedgerEntry] = None,
        contribution: Optional[Contribution] = None,
    ) -> bool:
        """
        Atomically replace the account if its stored version still
        equals expected_version, appending entry/contribution in the
        same unit of work.

        Returns False (nothing written) on a version mismatch.
        Raises DuplicateLedgerEntry if entry's idempotency key exists.
        """
        ...  # pragma: no cover

    def has_entry(self, idempotency_key: str) -> bool:
        ...  # pragma: no cover

    def list_entries(self) -> List[LedgerEntry]:
        """Oldest first."""
        ...  # pragma: no cover

    def list_contributions(self) -> List[Contribution]:
        ...  # pragma: no cover

    def has_contribution_for(self, reference: str) -> bool:
        ...  # pragma: no cover
