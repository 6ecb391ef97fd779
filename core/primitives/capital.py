"""
Closet Ledger Capital Primitive - Cash Balance and Its Deltas
==============================================================
The business keeps exactly one running cash balance (cash on hand)
and records how much each partner has put in.

RULES (NON-NEGOTIABLE):
- cash_on_hand is only ever moved by a LedgerEntry delta
- LedgerEntry rows are append-only and keyed by idempotency_key
- cash_on_hand == sum(entry.amount for entry in entries), always;
  any difference is drift and is reported by reconciliation
- version increments on every account write (optimistic concurrency)

This file contains NO persistence logic.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from core.primitives.item import PaidBy
from core.primitives.money import ZERO, to_amount


# ══════════════════════════════════════════════════════════════
# ENUMS
# ══════════════════════════════════════════════════════════════

class LedgerEntryKind(Enum):
    """Why cash on hand moved."""
    PURCHASE = "PURCHASE"           # shared-funds acquisition (negative)
    SALE = "SALE"                   # sale revenue (positive)
    TRADE = "TRADE"                 # trade cash difference (either sign)
    REFUND = "REFUND"               # acquisition cost returned (positive)
    CONTRIBUTION = "CONTRIBUTION"   # partner cash injection (positive)


PARTNERS = (PaidBy.PARTNER_A, PaidBy.PARTNER_B)


# ══════════════════════════════════════════════════════════════
# CAPITAL ACCOUNT (singleton snapshot)
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class CapitalAccount:
    """
    Snapshot of the singleton capital account.

    version is the concurrency token: a write succeeds only if the
    stored version still equals the version that was read.
    """

    cash_on_hand: Decimal = ZERO
    partner_a_investment: Decimal = ZERO
    partner_b_investment: Decimal = ZERO
    updated_at: Optional[datetime] = None
    version: int = 0

    def investment_of(self, partner: PaidBy) -> Decimal:
        if partner == PaidBy.PARTNER_A:
            return self.partner_a_investment
        if partner == PaidBy.PARTNER_B:
            return self.partner_b_investment
        raise ValueError(f"{partner.value} is not a partner.")

    def with_cash_delta(self, amount: Decimal, at: datetime) -> CapitalAccount:
        return CapitalAccount(
            cash_on_hand=self.cash_on_hand + amount,
            partner_a_investment=self.partner_a_investment,
            partner_b_investment=self.partner_b_investment,
            updated_at=at,
            version=self.version + 1,
        )

    def with_investment(
        self, partner: PaidBy, amount: Decimal, at: datetime,
    ) -> CapitalAccount:
        a = self.partner_a_investment
        b = self.partner_b_investment
        if partner == PaidBy.PARTNER_A:
            a += amount
        elif partner == PaidBy.PARTNER_B:
            b += amount
        else:
            raise ValueError(f"{partner.value} is not a partner.")
        return CapitalAccount(
            cash_on_hand=self.cash_on_hand,
            partner_a_investment=a,
            partner_b_investment=b,
            updated_at=at,
            version=self.version + 1,
        )

    def to_dict(self) -> dict:
        return {
            "cash_on_hand": str(self.cash_on_hand),
            "partner_a_investment": str(self.partner_a_investment),
            "partner_b_investment": str(self.partner_b_investment),
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
            "version": self.version,
        }


# ══════════════════════════════════════════════════════════════
# LEDGER ENTRY (append-only delta)
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class LedgerEntry:
    """A single signed movement of cash on hand."""

    kind: LedgerEntryKind
    amount: Decimal
    idempotency_key: str
    recorded_at: datetime
    item_id: Optional[str] = None
    memo: str = ""
    entry_id: uuid.UUID = field(default_factory=uuid.uuid4)

    def __post_init__(self):
        if not isinstance(self.kind, LedgerEntryKind):
            raise ValueError("kind must be LedgerEntryKind enum.")
        if not self.idempotency_key:
            raise ValueError("idempotency_key must be non-empty.")
        object.__setattr__(
            self,
            "amount",
            to_amount(self.amount, field_name="amount", allow_negative=True),
        )

    def to_dict(self) -> dict:
        return {
            "entry_id": str(self.entry_id),
            "kind": self.kind.value,
            "amount": str(self.amount),
            "idempotency_key": self.idempotency_key,
            "item_id": self.item_id,
            "memo": self.memo,
            "recorded_at": self.recorded_at.isoformat(),
        }


# ══════════════════════════════════════════════════════════════
# CONTRIBUTION
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class Contribution:
    """
    Partner capital put into the business.

    reference is the item id when the contribution records a partner
    paying for an item personally; at most one contribution exists
    per reference.
    """

    partner: PaidBy
    amount: Decimal
    contributed_on: date
    description: str = ""
    reference: Optional[str] = None
    contribution_id: uuid.UUID = field(default_factory=uuid.uuid4)

    def __post_init__(self):
        if self.partner not in PARTNERS:
            raise ValueError("Contributions are made by a partner, not Shared.")
        object.__setattr__(
            self, "amount", to_amount(self.amount, field_name="amount"),
        )
