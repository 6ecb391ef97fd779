"""
Closet Ledger Inventory Engine - Policies
===========================================
Status Transition Policy plus the guard policies for item mutations.

Transition classification (signed delta applied to cash on hand):

    creation, Shared                    DEDUCT_COST        -cost
    creation, partner-paid              NONE
    any -> refunded, stored Shared      RESTORE_COST       +cost
    any -> refunded, partner-paid       NONE
    active -> sold                      ADD_SALE_REVENUE   +sale_price
    active -> traded                    ADD_TRADE_CASH     -trade_cash_difference
    sold -> listed (unsell)             NONE
    terminal -> sold / traded           NONE (rejected by terminal_outcome_policy)
    everything else                     NONE

Classification is a pure function of its arguments: the same
(old, new, paid_by, amounts) always yields the same effect.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Callable, Optional

from core.commands.rejection import ReasonCode, RejectionReason
from core.ledger_store.errors import InvalidItemState
from core.primitives.capital import LedgerEntryKind
from core.primitives.item import InventoryItem, ItemStatus, PaidBy
from core.primitives.money import ZERO, to_amount


# ══════════════════════════════════════════════════════════════
# TRANSITION EFFECT
# ══════════════════════════════════════════════════════════════

class TransitionEffectKind(Enum):
    NONE = "NONE"
    DEDUCT_COST = "DEDUCT_COST"
    RESTORE_COST = "RESTORE_COST"
    ADD_SALE_REVENUE = "ADD_SALE_REVENUE"
    ADD_TRADE_CASH_DELTA = "ADD_TRADE_CASH_DELTA"


_ENTRY_KINDS = {
    TransitionEffectKind.DEDUCT_COST: LedgerEntryKind.PURCHASE,
    TransitionEffectKind.RESTORE_COST: LedgerEntryKind.REFUND,
    TransitionEffectKind.ADD_SALE_REVENUE: LedgerEntryKind.SALE,
    TransitionEffectKind.ADD_TRADE_CASH_DELTA: LedgerEntryKind.TRADE,
}


@dataclass(frozen=True)
class TransitionEffect:
    kind: TransitionEffectKind
    delta: Decimal = ZERO

    @property
    def is_ledger_relevant(self) -> bool:
        return self.kind != TransitionEffectKind.NONE and self.delta != ZERO

    @property
    def entry_kind(self) -> Optional[LedgerEntryKind]:
        return _ENTRY_KINDS.get(self.kind)


NO_EFFECT = TransitionEffect(TransitionEffectKind.NONE)


def _require_cost(acquisition_cost, policy_name: str) -> Decimal:
    if acquisition_cost is None:
        raise InvalidItemState(RejectionReason(
            code=ReasonCode.MISSING_ACQUISITION_COST,
            message="Transition requires an acquisition_cost.",
            policy_name=policy_name,
        ))
    return to_amount(
        acquisition_cost, field_name="acquisition_cost", policy_name=policy_name,
    )


# ══════════════════════════════════════════════════════════════
# CLASSIFICATION
# ══════════════════════════════════════════════════════════════

def classify_creation(item: InventoryItem) -> TransitionEffect:
    """Only business-funded acquisitions leave cash on hand."""
    cost = _require_cost(item.acquisition_cost, "creation_effect_policy")
    if item.paid_by != PaidBy.SHARED:
        return NO_EFFECT
    return TransitionEffect(TransitionEffectKind.DEDUCT_COST, -cost)


def classify_transition(
    old_status: ItemStatus,
    new_status: ItemStatus,
    paid_by: PaidBy,
    *,
    acquisition_cost=None,
    sale_price=None,
    trade_cash_difference=None,
) -> TransitionEffect:
    """
    Classify a status change.

    paid_by is the ownership stored before the change. Raises
    InvalidItemState when the amounts the effect needs are missing
    or negative.
    """
    if old_status == new_status:
        return NO_EFFECT

    if new_status == ItemStatus.REFUNDED:
        cost = _require_cost(acquisition_cost, "refund_effect_policy")
        if paid_by != PaidBy.SHARED:
            return NO_EFFECT
        return TransitionEffect(TransitionEffectKind.RESTORE_COST, cost)

    if new_status == ItemStatus.SOLD:
        if old_status.is_terminal:
            return NO_EFFECT
        if sale_price is None:
            raise InvalidItemState(RejectionReason(
                code=ReasonCode.MISSING_SALE_PRICE,
                message="Marking an item sold requires a sale_price.",
                policy_name="sale_effect_policy",
            ))
        price = to_amount(
            sale_price, field_name="sale_price", policy_name="sale_effect_policy",
        )
        return TransitionEffect(TransitionEffectKind.ADD_SALE_REVENUE, price)

    if new_status == ItemStatus.TRADED:
        if old_status.is_terminal:
            return NO_EFFECT
        difference = to_amount(
            trade_cash_difference if trade_cash_difference is not None else 0,
            field_name="trade_cash_difference",
            allow_negative=True,
            policy_name="trade_effect_policy",
        )
        return TransitionEffect(
            TransitionEffectKind.ADD_TRADE_CASH_DELTA, -difference,
        )

    return NO_EFFECT


def classify_update(
    previous: InventoryItem, updated: InventoryItem,
) -> TransitionEffect:
    """Classify previous -> updated using the stored ownership."""
    return classify_transition(
        previous.status,
        updated.status,
        previous.paid_by,
        acquisition_cost=updated.acquisition_cost,
        sale_price=updated.sale_price,
        trade_cash_difference=updated.trade_cash_difference,
    )


# ══════════════════════════════════════════════════════════════
# GUARD POLICIES
# ══════════════════════════════════════════════════════════════

def snapshot_identity_policy(
    item_id: str, previous: InventoryItem,
) -> Optional[RejectionReason]:
    """Reject an update whose previous snapshot is of another item."""
    if previous.item_id != item_id:
        return RejectionReason(
            code=ReasonCode.SNAPSHOT_MISMATCH,
            message=(
                f"Previous snapshot is of item '{previous.item_id}', "
                f"not '{item_id}'."
            ),
            policy_name="snapshot_identity_policy",
        )
    return None


_CLOSING_OUTCOMES = frozenset({ItemStatus.SOLD, ItemStatus.TRADED})


def terminal_outcome_policy(
    previous: InventoryItem, new_status: ItemStatus,
) -> Optional[RejectionReason]:
    """
    A terminal item cannot be re-closed as sold or traded. Only a
    refund, or reopening it to an active status, is allowed.
    """
    if (
        previous.is_terminal
        and new_status in _CLOSING_OUTCOMES
        and new_status != previous.status
    ):
        return RejectionReason(
            code=ReasonCode.ALREADY_CLOSED,
            message=(
                f"Item '{previous.item_id}' is already {previous.status.value}; "
                f"it cannot be marked {new_status.value}."
            ),
            policy_name="terminal_outcome_policy",
        )
    return None


def trade_target_policy(
    item_id: str,
    traded_for_item_id: Optional[str],
    item_lookup: Optional[Callable[[str], Optional[InventoryItem]]] = None,
) -> Optional[RejectionReason]:
    """
    An item cannot be traded for itself. When item_lookup is given,
    the received item must also still be active; a missing target
    passes because the reference is weak.
    """
    if traded_for_item_id is None:
        return None

    if traded_for_item_id == item_id:
        return RejectionReason(
            code=ReasonCode.SELF_TRADE,
            message=f"Item '{item_id}' cannot be traded for itself.",
            policy_name="trade_target_policy",
        )

    if item_lookup is None:
        return None

    target = item_lookup(traded_for_item_id)
    if target is not None and target.is_terminal:
        return RejectionReason(
            code=ReasonCode.TRADE_TARGET_INACTIVE,
            message=(
                f"Item '{traded_for_item_id}' is {target.status.value} "
                f"and cannot be received in a trade."
            ),
            policy_name="trade_target_policy",
        )
    return None
