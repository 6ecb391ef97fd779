"""
Closet Ledger Store - In-Memory Stores
========================================
Thread-safe in-memory ItemStore and CapitalAccountStore.

A single lock guards each store; the capital account write is a
true compare-and-set, so concurrent LedgerAdjuster callers race the
same way they would against the database.
"""

from __future__ import annotations

import threading
from typing import Dict, List, Optional

from core.ledger_store.errors import DuplicateLedgerEntry, ItemNotFound
from core.primitives.capital import CapitalAccount, Contribution, LedgerEntry
from core.primitives.item import InventoryItem


class InMemoryItemStore:
    """Item snapshots keyed by item_id, insertion order preserved."""

    def __init__(self) -> None:
        self._items: Dict[str, InventoryItem] = {}
        self._lock = threading.Lock()

    def create(self, item: InventoryItem) -> InventoryItem:
        with self._lock:
            if item.item_id in self._items:
                raise ValueError(f"Item '{item.item_id}' already exists.")
            self._items[item.item_id] = item
        return item

    def get(self, item_id: str) -> InventoryItem:
        with self._lock:
            item = self._items.get(item_id)
        if item is None:
            raise ItemNotFound(item_id)
        return item

    def update(self, item: InventoryItem) -> InventoryItem:
        with self._lock:
            if item.item_id not in self._items:
                raise ItemNotFound(item.item_id)
            self._items[item.item_id] = item
        return item

    def delete(self, item_id: str) -> None:
        with self._lock:
            if self._items.pop(item_id, None) is None:
                raise ItemNotFound(item_id)

    def list_all(self) -> List[InventoryItem]:
        with self._lock:
            items = list(self._items.values())
        # newest first; insertion order breaks created_at ties
        items.reverse()
        return sorted(
            items,
            key=lambda i: i.created_at.timestamp() if i.created_at else 0.0,
            reverse=True,
        )


class InMemoryCapitalAccountStore:
    """Singleton account with version-checked writes."""

    def __init__(self, initial: Optional[CapitalAccount] = None) -> None:
        self._account = initial or CapitalAccount()
        self._entries: List[LedgerEntry] = []
        self._entry_keys: set = set()
        self._contributions: List[Contribution] = []
        self._lock = threading.Lock()

    def read(self) -> CapitalAccount:
        with self._lock:
            return self._account

    def compare_and_set(
        self,
        expected_version: int,
        account: CapitalAccount,
        *,
        entry: Optional[LedgerEntry] = None,
        contribution: Optional[Contribution] = None,
    ) -> bool:
        with self._lock:
            if entry is not None and entry.idempotency_key in self._entry_keys:
                raise DuplicateLedgerEntry(entry.idempotency_key)
            if contribution is not None and contribution.reference is not None:
                if any(
                    c.reference == contribution.reference
                    for c in self._contributions
                ):
                    raise DuplicateLedgerEntry(
                        f"contribution:{contribution.reference}"
                    )
            if self._account.version != expected_version:
                return False
            self._account = account
            if entry is not None:
                self._entries.append(entry)
                self._entry_keys.add(entry.idempotency_key)
            if contribution is not None:
                self._contributions.append(contribution)
            return True

    def has_entry(self, idempotency_key: str) -> bool:
        with self._lock:
            return idempotency_key in self._entry_keys

    def list_entries(self) -> List[LedgerEntry]:
        with self._lock:
            return list(self._entries)

    def list_contributions(self) -> List[Contribution]:
        with self._lock:
            return list(self._contributions)

    def has_contribution_for(self, reference: str) -> bool:
        with self._lock:
            return any(c.reference == reference for c in self._contributions)
