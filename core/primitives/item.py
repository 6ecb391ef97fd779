"""
Closet Ledger Item Primitive - Inventory Item Snapshot
=======================================================
One physical piece of resale inventory, from acquisition to its
terminal outcome.

RULES (NON-NEGOTIABLE):
- Items are immutable snapshots; changes go through evolve()
- Amounts are cent-quantized Decimals, never floats
- acquisition_cost is required and >= 0
- Optional prices are >= 0 when present
- trade_cash_difference is signed (positive = cash paid out,
  negative = cash received)
- ever_in_convention is a one-way latch: once true, evolve()
  refuses to clear it

This file contains NO persistence logic.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Optional

from core.commands.rejection import ReasonCode, RejectionReason
from core.ledger_store.errors import InvalidItemState
from core.primitives.money import to_amount, to_optional_amount


# ══════════════════════════════════════════════════════════════
# ENUMS
# ══════════════════════════════════════════════════════════════

class ItemStatus(Enum):
    """Item lifecycle status."""
    IN_CLOSET = "in-closet"
    LISTED = "listed"
    FOR_SALE = "for-sale"
    OTW = "otw"                 # on the way, bought but not yet received
    SOLD = "sold"
    TRADED = "traded"
    SCAMMED = "scammed"
    REFUNDED = "refunded"
    ARCHIVE_HOLD = "archive-hold"

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATUSES

    @property
    def is_active(self) -> bool:
        return self not in TERMINAL_STATUSES


TERMINAL_STATUSES = frozenset({
    ItemStatus.SOLD,
    ItemStatus.TRADED,
    ItemStatus.SCAMMED,
    ItemStatus.REFUNDED,
})

CREATION_STATUSES = frozenset({
    ItemStatus.IN_CLOSET,
    ItemStatus.FOR_SALE,
    ItemStatus.LISTED,
    ItemStatus.OTW,
    ItemStatus.ARCHIVE_HOLD,
})


class PaidBy(Enum):
    """Who funded the acquisition. Only SHARED touches cash on hand."""
    PARTNER_A = "PartnerA"
    PARTNER_B = "PartnerB"
    SHARED = "Shared"


MONEY_FIELDS = (
    "acquisition_cost",
    "asking_price",
    "lowest_acceptable_price",
    "goal_price",
    "sale_price",
)
SIGNED_MONEY_FIELDS = ("trade_cash_difference",)


# ══════════════════════════════════════════════════════════════
# COERCION
# ══════════════════════════════════════════════════════════════

def parse_status(value: Any) -> ItemStatus:
    if isinstance(value, ItemStatus):
        return value
    try:
        return ItemStatus(value)
    except ValueError:
        raise InvalidItemState(RejectionReason(
            code=ReasonCode.UNKNOWN_STATUS,
            message=f"Unknown item status {value!r}.",
            policy_name="item_status_policy",
        )) from None


def parse_paid_by(value: Any) -> PaidBy:
    if isinstance(value, PaidBy):
        return value
    try:
        return PaidBy(value)
    except ValueError:
        raise InvalidItemState(RejectionReason(
            code=ReasonCode.UNKNOWN_OWNER,
            message=f"Unknown paid_by owner {value!r}.",
            policy_name="item_owner_policy",
        )) from None


def coerce_item_fields(fields: Dict[str, Any]) -> Dict[str, Any]:
    """
    Convert raw caller input (numbers, strings) into typed field values.

    Unknown keys are left alone; dataclass construction rejects them.
    """
    coerced = dict(fields)
    for name in MONEY_FIELDS:
        if name in coerced:
            coerced[name] = to_optional_amount(coerced[name], field_name=name)
    for name in SIGNED_MONEY_FIELDS:
        if name in coerced:
            coerced[name] = to_optional_amount(
                coerced[name], field_name=name, allow_negative=True,
            )
    if "status" in coerced:
        coerced["status"] = parse_status(coerced["status"])
    if "paid_by" in coerced:
        coerced["paid_by"] = parse_paid_by(coerced["paid_by"])
    return coerced


# ══════════════════════════════════════════════════════════════
# INVENTORY ITEM
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class InventoryItem:
    """
    Immutable inventory item snapshot.

    tradedForItemId is a weak reference: it names the item received
    in a trade but owns nothing, and the referenced item may be gone.
    """

    item_id: str
    name: str
    acquisition_cost: Decimal
    status: ItemStatus = ItemStatus.IN_CLOSET
    paid_by: PaidBy = PaidBy.SHARED
    created_at: Optional[datetime] = None

    brand: Optional[str] = None
    category: str = "other"
    size: Optional[str] = None

    asking_price: Optional[Decimal] = None
    lowest_acceptable_price: Optional[Decimal] = None
    goal_price: Optional[Decimal] = None
    sale_price: Optional[Decimal] = None

    date_added: Optional[date] = None
    date_sold: Optional[date] = None

    traded_for_item_id: Optional[str] = None
    trade_cash_difference: Optional[Decimal] = None

    in_convention: bool = False
    ever_in_convention: bool = False

    platform: str = "none"
    platform_sold: Optional[str] = None
    source: Optional[str] = None
    notes: str = ""
    image_url: Optional[str] = None
    priority_sale: bool = False

    def __post_init__(self):
        if not self.item_id or not isinstance(self.item_id, str):
            raise ValueError("item_id must be a non-empty string.")
        if self.acquisition_cost is None:
            raise InvalidItemState(RejectionReason(
                code=ReasonCode.MISSING_ACQUISITION_COST,
                message=f"Item '{self.item_id}' has no acquisition_cost.",
                policy_name="item_cost_policy",
            ))
        for name in MONEY_FIELDS:
            value = getattr(self, name)
            if value is not None:
                object.__setattr__(
                    self, name, to_amount(value, field_name=name),
                )
        if self.trade_cash_difference is not None:
            object.__setattr__(
                self,
                "trade_cash_difference",
                to_amount(
                    self.trade_cash_difference,
                    field_name="trade_cash_difference",
                    allow_negative=True,
                ),
            )
        object.__setattr__(self, "status", parse_status(self.status))
        object.__setattr__(self, "paid_by", parse_paid_by(self.paid_by))

        # Active in an event implies ever in an event.
        if self.in_convention and not self.ever_in_convention:
            object.__setattr__(self, "ever_in_convention", True)

    # ── Lifecycle ─────────────────────────────────────────────

    @property
    def is_terminal(self) -> bool:
        return self.status.is_terminal

    @property
    def is_active(self) -> bool:
        return self.status.is_active

    @property
    def is_business_purchase(self) -> bool:
        return self.paid_by == PaidBy.SHARED

    def evolve(self, **changes: Any) -> InventoryItem:
        """
        Return a new snapshot with changes applied.

        Refuses to clear ever_in_convention once it is set, and
        never lets item_id or created_at drift.
        """
        if (
            self.ever_in_convention
            and "ever_in_convention" in changes
            and not changes["ever_in_convention"]
        ):
            raise InvalidItemState(RejectionReason(
                code=ReasonCode.STICKY_FLAG_CLEARED,
                message=(
                    f"Item '{self.item_id}' was tagged to an event; "
                    f"ever_in_convention cannot be cleared."
                ),
                policy_name="convention_latch_policy",
            ))
        changes.pop("item_id", None)
        changes.pop("created_at", None)
        if changes.get("ever_in_convention") is False:
            changes.pop("ever_in_convention")
        return dataclasses.replace(self, **coerce_item_fields(changes))

    # ── Serialization ─────────────────────────────────────────

    def to_dict(self) -> dict:
        data = dataclasses.asdict(self)
        data["status"] = self.status.value
        data["paid_by"] = self.paid_by.value
        for name in MONEY_FIELDS + SIGNED_MONEY_FIELDS:
            if data[name] is not None:
                data[name] = str(data[name])
        for name in ("date_added", "date_sold", "created_at"):
            if data[name] is not None:
                data[name] = data[name].isoformat()
        return data
