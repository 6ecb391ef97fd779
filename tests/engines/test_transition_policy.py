"""
Closet Ledger - Status Transition Policy Tests
================================================
Classification of creations and status changes into signed
cash-on-hand deltas, plus the update guard policies.
"""

from decimal import Decimal

import pytest

from core.commands.rejection import ReasonCode
from core.ledger_store.errors import InvalidItemState
from core.primitives.capital import LedgerEntryKind
from core.primitives.item import InventoryItem, ItemStatus, PaidBy
from engines.inventory.policies import (
    NO_EFFECT,
    TransitionEffect,
    TransitionEffectKind,
    classify_creation,
    classify_transition,
    classify_update,
    snapshot_identity_policy,
    terminal_outcome_policy,
    trade_target_policy,
)

Kind = TransitionEffectKind
S = ItemStatus


def _item(item_id="item-1", **overrides) -> InventoryItem:
    fields = dict(item_id=item_id, name="Yeezy 350 Zebra", acquisition_cost=120)
    fields.update(overrides)
    return InventoryItem(**fields)


# ══════════════════════════════════════════════════════════════
# CREATION
# ══════════════════════════════════════════════════════════════

class TestClassifyCreation:
    def test_shared_purchase_deducts_cost(self):
        effect = classify_creation(_item())
        assert effect.kind == Kind.DEDUCT_COST
        assert effect.delta == Decimal("-120.00")
        assert effect.entry_kind == LedgerEntryKind.PURCHASE

    @pytest.mark.parametrize("owner", [PaidBy.PARTNER_A, PaidBy.PARTNER_B])
    def test_partner_purchase_leaves_cash_alone(self, owner):
        assert classify_creation(_item(paid_by=owner)) == NO_EFFECT

    def test_free_item_is_not_ledger_relevant(self):
        effect = classify_creation(_item(acquisition_cost=0))
        assert effect.kind == Kind.DEDUCT_COST
        assert not effect.is_ledger_relevant


# ══════════════════════════════════════════════════════════════
# TRANSITIONS
# ══════════════════════════════════════════════════════════════

class TestClassifyTransition:
    def test_same_status_is_no_effect(self):
        for status in S:
            assert classify_transition(
                status, status, PaidBy.SHARED, acquisition_cost=120, sale_price=90,
            ) == NO_EFFECT

    # ── Refund ────────────────────────────────────────────────

    def test_refund_of_shared_item_restores_cost(self):
        effect = classify_transition(
            S.LISTED, S.REFUNDED, PaidBy.SHARED, acquisition_cost=120,
        )
        assert effect.kind == Kind.RESTORE_COST
        assert effect.delta == Decimal("120.00")
        assert effect.entry_kind == LedgerEntryKind.REFUND

    def test_refund_of_partner_item_is_no_effect(self):
        effect = classify_transition(
            S.LISTED, S.REFUNDED, PaidBy.PARTNER_A, acquisition_cost=120,
        )
        assert effect == NO_EFFECT

    def test_refund_without_cost_rejected(self):
        with pytest.raises(InvalidItemState) as exc:
            classify_transition(S.OTW, S.REFUNDED, PaidBy.SHARED)
        assert exc.value.code == ReasonCode.MISSING_ACQUISITION_COST

    # ── Sale ──────────────────────────────────────────────────

    def test_sale_adds_revenue(self):
        effect = classify_transition(
            S.FOR_SALE, S.SOLD, PaidBy.SHARED, acquisition_cost=50, sale_price=90,
        )
        assert effect.kind == Kind.ADD_SALE_REVENUE
        assert effect.delta == Decimal("90.00")
        assert effect.entry_kind == LedgerEntryKind.SALE

    def test_sale_adds_revenue_whoever_paid(self):
        effect = classify_transition(
            S.LISTED, S.SOLD, PaidBy.PARTNER_B, acquisition_cost=50, sale_price=90,
        )
        assert effect.delta == Decimal("90.00")

    def test_sale_without_price_rejected(self):
        with pytest.raises(InvalidItemState) as exc:
            classify_transition(S.LISTED, S.SOLD, PaidBy.SHARED, acquisition_cost=50)
        assert exc.value.code == ReasonCode.MISSING_SALE_PRICE

    def test_negative_sale_price_rejected(self):
        with pytest.raises(InvalidItemState) as exc:
            classify_transition(
                S.LISTED, S.SOLD, PaidBy.SHARED, acquisition_cost=50, sale_price=-1,
            )
        assert exc.value.code == ReasonCode.NEGATIVE_AMOUNT

    def test_sale_from_terminal_status_is_no_effect(self):
        effect = classify_transition(
            S.TRADED, S.SOLD, PaidBy.SHARED, acquisition_cost=50, sale_price=90,
        )
        assert effect == NO_EFFECT

    # ── Trade ─────────────────────────────────────────────────

    def test_trade_receiving_cash_is_positive_delta(self):
        effect = classify_transition(
            S.LISTED, S.TRADED, PaidBy.SHARED,
            acquisition_cost=80, trade_cash_difference=-20,
        )
        assert effect.kind == Kind.ADD_TRADE_CASH_DELTA
        assert effect.delta == Decimal("20.00")
        assert effect.entry_kind == LedgerEntryKind.TRADE

    def test_trade_paying_cash_is_negative_delta(self):
        effect = classify_transition(
            S.LISTED, S.TRADED, PaidBy.SHARED,
            acquisition_cost=80, trade_cash_difference=20,
        )
        assert effect.delta == Decimal("-20.00")

    def test_straight_swap_is_not_ledger_relevant(self):
        effect = classify_transition(
            S.LISTED, S.TRADED, PaidBy.SHARED, acquisition_cost=80,
        )
        assert effect.kind == Kind.ADD_TRADE_CASH_DELTA
        assert effect.delta == Decimal("0.00")
        assert not effect.is_ledger_relevant

    # ── Everything else ───────────────────────────────────────

    @pytest.mark.parametrize("old,new", [
        (S.SOLD, S.LISTED),
        (S.IN_CLOSET, S.LISTED),
        (S.LISTED, S.FOR_SALE),
        (S.OTW, S.IN_CLOSET),
        (S.LISTED, S.SCAMMED),
        (S.FOR_SALE, S.ARCHIVE_HOLD),
    ])
    def test_other_transitions_are_no_effect(self, old, new):
        assert classify_transition(
            old, new, PaidBy.SHARED, acquisition_cost=80, sale_price=90,
        ) == NO_EFFECT

    def test_pure_function(self):
        args = (S.LISTED, S.SOLD, PaidBy.SHARED)
        kwargs = dict(acquisition_cost=50, sale_price=90)
        assert classify_transition(*args, **kwargs) == classify_transition(*args, **kwargs)


class TestClassifyUpdate:
    def test_uses_previous_ownership(self):
        previous = _item(paid_by=PaidBy.SHARED, status=S.LISTED)
        updated = previous.evolve(status=S.REFUNDED, paid_by=PaidBy.PARTNER_A)
        effect = classify_update(previous, updated)
        assert effect.kind == Kind.RESTORE_COST
        assert effect.delta == Decimal("120.00")

    def test_reads_amounts_from_updated_snapshot(self):
        previous = _item(status=S.LISTED)
        updated = previous.evolve(status=S.SOLD, sale_price=175)
        assert classify_update(previous, updated).delta == Decimal("175.00")


class TestTransitionEffect:
    def test_none_kind_never_ledger_relevant(self):
        assert not TransitionEffect(Kind.NONE, Decimal("5")).is_ledger_relevant
        assert NO_EFFECT.entry_kind is None


# ══════════════════════════════════════════════════════════════
# GUARD POLICIES
# ══════════════════════════════════════════════════════════════

class TestSnapshotIdentityPolicy:
    def test_matching_snapshot_passes(self):
        assert snapshot_identity_policy("item-1", _item("item-1")) is None

    def test_foreign_snapshot_rejected(self):
        rejection = snapshot_identity_policy("item-1", _item("item-2"))
        assert rejection.code == ReasonCode.SNAPSHOT_MISMATCH


class TestTerminalOutcomePolicy:
    @pytest.mark.parametrize("old,new", [
        (S.TRADED, S.SOLD),
        (S.SCAMMED, S.SOLD),
        (S.REFUNDED, S.SOLD),
        (S.SOLD, S.TRADED),
        (S.SCAMMED, S.TRADED),
    ])
    def test_closed_item_cannot_close_again(self, old, new):
        rejection = terminal_outcome_policy(_item(status=old, sale_price=1), new)
        assert rejection.code == ReasonCode.ALREADY_CLOSED
        assert rejection.policy_name == "terminal_outcome_policy"

    @pytest.mark.parametrize("old,new", [
        (S.LISTED, S.SOLD),
        (S.OTW, S.TRADED),
        (S.SOLD, S.SOLD),
        (S.SOLD, S.REFUNDED),
        (S.SOLD, S.LISTED),
    ])
    def test_other_moves_pass(self, old, new):
        assert terminal_outcome_policy(_item(status=old, sale_price=1), new) is None


class TestTradeTargetPolicy:
    def test_no_target_passes(self):
        assert trade_target_policy("item-1", None) is None

    def test_self_trade_rejected(self):
        rejection = trade_target_policy("item-1", "item-1")
        assert rejection.code == ReasonCode.SELF_TRADE

    def test_missing_target_passes(self):
        assert trade_target_policy("item-1", "gone", lambda _id: None) is None

    def test_active_target_passes(self):
        target = _item("item-2", status=S.IN_CLOSET)
        assert trade_target_policy("item-1", "item-2", lambda _id: target) is None

    def test_terminal_target_rejected(self):
        target = _item("item-2", status=S.SOLD, sale_price=50)
        rejection = trade_target_policy("item-1", "item-2", lambda _id: target)
        assert rejection.code == ReasonCode.TRADE_TARGET_INACTIVE
