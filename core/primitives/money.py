"""
Closet Ledger Money Primitive - Decimal Amounts
================================================
All amounts are decimal.Decimal quantized to cents.
Floats never reach a balance: inputs are converted through str()
so 0.1 + 0.2 style drift cannot creep into cash on hand.

Single currency only: the business keeps one running cash balance,
so amounts carry no currency code.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Iterable, Optional

from core.commands.rejection import ReasonCode, RejectionReason
from core.ledger_store.errors import InvalidItemState

CENT = Decimal("0.01")
ZERO = Decimal("0.00")


def quantize(value: Decimal) -> Decimal:
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def to_amount(
    value: Any,
    *,
    field_name: str,
    allow_negative: bool = False,
    policy_name: str = "money_policy",
) -> Decimal:
    """
    Convert a raw value into a cent-quantized Decimal.

    Raises InvalidItemState when the value is not numeric, or is
    negative and allow_negative is False.
    """
    if isinstance(value, bool):
        raise InvalidItemState(RejectionReason(
            code=ReasonCode.INVALID_AMOUNT,
            message=f"{field_name} must be numeric, got bool.",
            policy_name=policy_name,
        ))
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError):
        raise InvalidItemState(RejectionReason(
            code=ReasonCode.INVALID_AMOUNT,
            message=f"{field_name} must be numeric, got {value!r}.",
            policy_name=policy_name,
        )) from None

    if not amount.is_finite():
        raise InvalidItemState(RejectionReason(
            code=ReasonCode.INVALID_AMOUNT,
            message=f"{field_name} must be finite, got {value!r}.",
            policy_name=policy_name,
        ))

    if amount < 0 and not allow_negative:
        raise InvalidItemState(RejectionReason(
            code=ReasonCode.NEGATIVE_AMOUNT,
            message=f"{field_name} cannot be negative, got {amount}.",
            policy_name=policy_name,
        ))
    return quantize(amount)


def to_optional_amount(
    value: Any,
    *,
    field_name: str,
    allow_negative: bool = False,
) -> Optional[Decimal]:
    if value is None:
        return None
    return to_amount(value, field_name=field_name, allow_negative=allow_negative)


def total(values: Iterable[Optional[Decimal]]) -> Decimal:
    """Sum amounts, treating None as zero. Empty input sums to ZERO."""
    result = ZERO
    for value in values:
        if value is not None:
            result += value
    return result
