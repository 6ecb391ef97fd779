"""
Closet Ledger Command Layer - Rejection Model
===============================================
Structured rejection reasons for denied item mutations.

A rejection is produced by a policy before anything is written.
It travels inside InvalidItemState so callers can show the
human message and branch on the machine-readable code.
"""

from __future__ import annotations

from dataclasses import dataclass


# ══════════════════════════════════════════════════════════════
# REJECTION REASON (frozen explanation structure)
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class RejectionReason:
    """
    Structured reason for rejecting a mutation.

    Fields:
        code:        Machine-readable rejection code (e.g. 'NEGATIVE_AMOUNT').
        message:     Human-readable explanation.
        policy_name: Name of the policy that caused rejection.
    """

    code: str
    message: str
    policy_name: str

    def __post_init__(self):
        if not self.code or not isinstance(self.code, str):
            raise ValueError("code must be a non-empty string.")

        if not self.message or not isinstance(self.message, str):
            raise ValueError("message must be a non-empty string.")

        if not self.policy_name or not isinstance(self.policy_name, str):
            raise ValueError("policy_name must be a non-empty string.")

    def to_dict(self) -> dict:
        return {
            "code": self.code,
            "message": self.message,
            "policy_name": self.policy_name,
        }


# ══════════════════════════════════════════════════════════════
# STANDARD REJECTION CODES
# ══════════════════════════════════════════════════════════════

class ReasonCode:
    """
    Known rejection codes.

    Convention: SCREAMING_SNAKE_CASE.
    """

    # ── Item financial fields ─────────────────────────────────
    MISSING_ACQUISITION_COST = "MISSING_ACQUISITION_COST"
    MISSING_SALE_PRICE = "MISSING_SALE_PRICE"
    NEGATIVE_AMOUNT = "NEGATIVE_AMOUNT"
    INVALID_AMOUNT = "INVALID_AMOUNT"

    # ── Item lifecycle ────────────────────────────────────────
    UNKNOWN_STATUS = "UNKNOWN_STATUS"
    UNKNOWN_OWNER = "UNKNOWN_OWNER"
    INVALID_CREATION_STATUS = "INVALID_CREATION_STATUS"
    STICKY_FLAG_CLEARED = "STICKY_FLAG_CLEARED"
    SNAPSHOT_MISMATCH = "SNAPSHOT_MISMATCH"
    SELF_TRADE = "SELF_TRADE"
    TRADE_TARGET_INACTIVE = "TRADE_TARGET_INACTIVE"
    ALREADY_CLOSED = "ALREADY_CLOSED"

    # ── Capital ───────────────────────────────────────────────
    NON_POSITIVE_CONTRIBUTION = "NON_POSITIVE_CONTRIBUTION"
    CONTRIBUTION_ALREADY_RECORDED = "CONTRIBUTION_ALREADY_RECORDED"
