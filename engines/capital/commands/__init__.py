"""
Closet Ledger Capital Engine - Request Commands
=================================================
Typed capital requests. Validation happens at construction so a
malformed request never reaches the capital account.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional

from core.primitives.capital import PARTNERS
from core.primitives.item import PaidBy, parse_paid_by
from core.primitives.money import to_amount


DEFAULT_CONTRIBUTION_DESCRIPTION = "Capital contribution"


# ══════════════════════════════════════════════════════════════
# REQUEST COMMANDS
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class ContributionRecordRequest:
    """A partner puts cash into the business."""
    partner: PaidBy
    amount: Decimal
    contributed_on: date
    description: str = DEFAULT_CONTRIBUTION_DESCRIPTION

    def __post_init__(self):
        partner = parse_paid_by(self.partner)
        if partner not in PARTNERS:
            raise ValueError("partner must be PartnerA or PartnerB.")
        object.__setattr__(self, "partner", partner)
        object.__setattr__(
            self,
            "amount",
            to_amount(
                self.amount,
                field_name="amount",
                policy_name="contribution_amount_policy",
            ),
        )
        if not isinstance(self.contributed_on, date):
            raise ValueError("contributed_on must be a date.")
        object.__setattr__(
            self,
            "description",
            (self.description or "").strip() or DEFAULT_CONTRIBUTION_DESCRIPTION,
        )


@dataclass(frozen=True)
class PurchaseAssignRequest:
    """
    Record that a partner paid for an item personally.

    reference is the item id; one contribution per reference.
    """
    partner: PaidBy
    amount: Decimal
    contributed_on: date
    reference: str
    description: Optional[str] = None

    def __post_init__(self):
        partner = parse_paid_by(self.partner)
        if partner not in PARTNERS:
            raise ValueError("partner must be PartnerA or PartnerB.")
        object.__setattr__(self, "partner", partner)
        object.__setattr__(
            self, "amount", to_amount(self.amount, field_name="amount"),
        )
        if not self.reference:
            raise ValueError("reference must be non-empty.")
