"""
Closet Ledger Capital Engine - Policies
=========================================
Validation policies for capital operations. Each returns a
RejectionReason or None.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Optional

from core.commands.rejection import ReasonCode, RejectionReason


def contribution_amount_policy(amount: Decimal) -> Optional[RejectionReason]:
    """Contributions move cash in; zero is not a contribution."""
    if amount <= 0:
        return RejectionReason(
            code=ReasonCode.NON_POSITIVE_CONTRIBUTION,
            message=f"Contribution amount must be positive, got {amount}.",
            policy_name="contribution_amount_policy",
        )
    return None


def reference_not_recorded_policy(
    reference: str,
    contribution_lookup=None,
) -> Optional[RejectionReason]:
    """
    Reject a purchase assignment whose item already has a
    contribution. Only active when contribution_lookup is provided.
    """
    if contribution_lookup is None:
        return None

    if contribution_lookup(reference):
        return RejectionReason(
            code=ReasonCode.CONTRIBUTION_ALREADY_RECORDED,
            message=f"Item '{reference}' already has a partner contribution.",
            policy_name="reference_not_recorded_policy",
        )
    return None
