"""
Closet Ledger Command Layer
============================
Every item mutation is judged by policies before it is written.
A denied mutation carries a RejectionReason; nothing is persisted.
"""

from core.commands.rejection import (
    ReasonCode,
    RejectionReason,
)

__all__ = [
    "ReasonCode",
    "RejectionReason",
]
