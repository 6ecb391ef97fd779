"""
Closet Ledger - Primitive Tests
=================================
Money coercion, the item snapshot and its convention latch, and the
capital account snapshot.
"""

from datetime import date, datetime, timezone
from decimal import Decimal

import pytest

from core.commands.rejection import ReasonCode
from core.ledger_store.errors import InvalidItemState
from core.primitives.capital import (
    CapitalAccount,
    Contribution,
    LedgerEntry,
    LedgerEntryKind,
)
from core.primitives.item import InventoryItem, ItemStatus, PaidBy
from core.primitives.money import ZERO, to_amount, total

NOW = datetime(2025, 1, 11, 12, 0, 0, tzinfo=timezone.utc)


def _item(**overrides) -> InventoryItem:
    fields = dict(item_id="item-1", name="Jordan 1 Chicago", acquisition_cost=80)
    fields.update(overrides)
    return InventoryItem(**fields)


# ══════════════════════════════════════════════════════════════
# MONEY
# ══════════════════════════════════════════════════════════════

class TestToAmount:
    def test_quantizes_to_cents(self):
        assert to_amount("12.345", field_name="x") == Decimal("12.35")

    def test_float_goes_through_str(self):
        assert to_amount(0.1, field_name="x") + to_amount(0.2, field_name="x") == Decimal("0.30")

    def test_rejects_negative_by_default(self):
        with pytest.raises(InvalidItemState) as exc:
            to_amount(-1, field_name="acquisition_cost")
        assert exc.value.code == ReasonCode.NEGATIVE_AMOUNT

    def test_allows_negative_when_signed(self):
        assert to_amount(-20, field_name="x", allow_negative=True) == Decimal("-20.00")

    def test_rejects_garbage(self):
        with pytest.raises(InvalidItemState) as exc:
            to_amount("twelve", field_name="x")
        assert exc.value.code == ReasonCode.INVALID_AMOUNT

    def test_rejects_bool(self):
        with pytest.raises(InvalidItemState):
            to_amount(True, field_name="x")

    def test_rejects_nan(self):
        with pytest.raises(InvalidItemState):
            to_amount("NaN", field_name="x")


class TestTotal:
    def test_empty_is_zero(self):
        assert total([]) == ZERO

    def test_none_counts_as_zero(self):
        assert total([Decimal("1.50"), None, Decimal("2.00")]) == Decimal("3.50")


# ══════════════════════════════════════════════════════════════
# INVENTORY ITEM
# ══════════════════════════════════════════════════════════════

class TestInventoryItem:
    def test_defaults(self):
        item = _item()
        assert item.status == ItemStatus.IN_CLOSET
        assert item.paid_by == PaidBy.SHARED
        assert item.acquisition_cost == Decimal("80.00")
        assert item.is_active
        assert item.is_business_purchase

    def test_missing_cost_rejected(self):
        with pytest.raises(InvalidItemState) as exc:
            _item(acquisition_cost=None)
        assert exc.value.code == ReasonCode.MISSING_ACQUISITION_COST

    def test_negative_price_rejected(self):
        with pytest.raises(InvalidItemState) as exc:
            _item(asking_price=-5)
        assert exc.value.code == ReasonCode.NEGATIVE_AMOUNT

    def test_trade_difference_is_signed(self):
        assert _item(trade_cash_difference=-20).trade_cash_difference == Decimal("-20.00")

    def test_status_and_owner_accept_raw_values(self):
        item = _item(status="for-sale", paid_by="PartnerA")
        assert item.status == ItemStatus.FOR_SALE
        assert item.paid_by == PaidBy.PARTNER_A

    def test_unknown_status_rejected(self):
        with pytest.raises(InvalidItemState) as exc:
            _item(status="lost")
        assert exc.value.code == ReasonCode.UNKNOWN_STATUS

    def test_unknown_owner_rejected(self):
        with pytest.raises(InvalidItemState) as exc:
            _item(paid_by="Nobody")
        assert exc.value.code == ReasonCode.UNKNOWN_OWNER

    def test_terminal_statuses(self):
        for status in ("sold", "traded", "scammed", "refunded"):
            assert _item(status=status, sale_price=1).is_terminal
        for status in ("in-closet", "listed", "for-sale", "otw", "archive-hold"):
            assert _item(status=status).is_active

    def test_in_convention_implies_ever(self):
        assert _item(in_convention=True).ever_in_convention

    def test_frozen(self):
        with pytest.raises(AttributeError):
            _item().status = ItemStatus.SOLD


class TestEvolve:
    def test_returns_new_snapshot(self):
        item = _item()
        listed = item.evolve(status="listed", asking_price="150")
        assert listed.status == ItemStatus.LISTED
        assert listed.asking_price == Decimal("150.00")
        assert item.status == ItemStatus.IN_CLOSET

    def test_identity_cannot_drift(self):
        item = _item(created_at=NOW)
        changed = item.evolve(item_id="other", created_at=datetime(2020, 1, 1, tzinfo=timezone.utc))
        assert changed.item_id == "item-1"
        assert changed.created_at == NOW

    def test_ever_in_convention_cannot_be_cleared(self):
        tagged = _item(in_convention=True)
        with pytest.raises(InvalidItemState) as exc:
            tagged.evolve(ever_in_convention=False)
        assert exc.value.code == ReasonCode.STICKY_FLAG_CLEARED

    def test_latch_survives_terminal_transitions(self):
        item = _item(in_convention=True)
        for changes in (
            {"status": "sold", "sale_price": 90},
            {"status": "traded", "trade_cash_difference": 0},
            {"status": "refunded"},
            {"in_convention": False},
        ):
            assert item.evolve(**changes).ever_in_convention

    def test_clearing_unset_flag_is_harmless(self):
        assert not _item().evolve(ever_in_convention=False).ever_in_convention

    def test_to_dict_serializes_money_as_strings(self):
        data = _item(date_added=date(2025, 1, 1)).to_dict()
        assert data["acquisition_cost"] == "80.00"
        assert data["status"] == "in-closet"
        assert data["date_added"] == "2025-01-01"


# ══════════════════════════════════════════════════════════════
# CAPITAL
# ══════════════════════════════════════════════════════════════

class TestCapitalAccount:
    def test_cash_delta_bumps_version(self):
        account = CapitalAccount().with_cash_delta(Decimal("50.00"), NOW)
        assert account.cash_on_hand == Decimal("50.00")
        assert account.version == 1
        assert account.updated_at == NOW

    def test_investment_per_partner(self):
        account = CapitalAccount().with_investment(PaidBy.PARTNER_B, Decimal("25.00"), NOW)
        assert account.investment_of(PaidBy.PARTNER_B) == Decimal("25.00")
        assert account.investment_of(PaidBy.PARTNER_A) == ZERO
        assert account.cash_on_hand == ZERO

    def test_shared_is_not_a_partner(self):
        with pytest.raises(ValueError):
            CapitalAccount().with_investment(PaidBy.SHARED, Decimal("1"), NOW)


class TestLedgerEntry:
    def test_signed_amount(self):
        entry = LedgerEntry(
            kind=LedgerEntryKind.PURCHASE,
            amount=-120,
            idempotency_key="item-1:created",
            recorded_at=NOW,
        )
        assert entry.amount == Decimal("-120.00")

    def test_requires_key(self):
        with pytest.raises(ValueError):
            LedgerEntry(
                kind=LedgerEntryKind.SALE, amount=1, idempotency_key="", recorded_at=NOW,
            )


class TestContribution:
    def test_shared_cannot_contribute(self):
        with pytest.raises(ValueError):
            Contribution(partner=PaidBy.SHARED, amount=10, contributed_on=date(2025, 1, 1))
