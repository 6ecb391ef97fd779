"""
Closet Ledger Capital Engine - Ledger Entry Keys and Memos
============================================================
Engine: Capital
Every movement of cash on hand is one LedgerEntry. Its idempotency
key is derived from what caused it, so a resubmitted mutation maps
onto the same key and cannot be applied twice.

    item transition    "{item_id}:{target_status}"
    item acquisition   "{item_id}:created"
    contribution       "contribution:{contribution_id}"
"""

from __future__ import annotations

import uuid
from decimal import Decimal

from core.primitives.capital import LedgerEntryKind
from core.primitives.item import ItemStatus, PaidBy


# ══════════════════════════════════════════════════════════════
# IDEMPOTENCY KEYS
# ══════════════════════════════════════════════════════════════

CREATED_SUFFIX = "created"
CONTRIBUTION_PREFIX = "contribution"


def acquisition_key(item_id: str) -> str:
    return f"{item_id}:{CREATED_SUFFIX}"


def transition_key(item_id: str, target_status: ItemStatus) -> str:
    return f"{item_id}:{target_status.value}"


def contribution_key(contribution_id: uuid.UUID) -> str:
    return f"{CONTRIBUTION_PREFIX}:{contribution_id}"


# ══════════════════════════════════════════════════════════════
# MEMO BUILDERS
# ══════════════════════════════════════════════════════════════

def build_entry_memo(kind: LedgerEntryKind, *, item_name: str, amount: Decimal) -> str:
    if kind == LedgerEntryKind.PURCHASE:
        return f"Purchase: {item_name}"
    if kind == LedgerEntryKind.SALE:
        return f"Sale: {item_name} for {amount}"
    if kind == LedgerEntryKind.REFUND:
        return f"Refund: {item_name}"
    if kind == LedgerEntryKind.TRADE:
        direction = "received" if amount > 0 else "paid"
        return f"Trade: {item_name}, cash {direction} {abs(amount)}"
    return item_name


def build_contribution_memo(partner: PaidBy, description: str) -> str:
    return f"{partner.value}: {description}"
