"""
Closet Ledger Inventory Engine - Request Commands
===================================================
Typed inventory requests. Construction validates and coerces raw
caller input, so anything that reaches the service is well formed.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Any, Dict, Mapping, Optional

from core.commands.rejection import ReasonCode, RejectionReason
from core.ledger_store.errors import InvalidItemState
from core.primitives.item import (
    CREATION_STATUSES,
    InventoryItem,
    ItemStatus,
    coerce_item_fields,
)
from core.primitives.money import to_amount


# Assigned by the service, never by callers.
SERVICE_OWNED_FIELDS = frozenset({"created_at"})


# ══════════════════════════════════════════════════════════════
# REQUEST COMMANDS
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class ItemCreateRequest:
    """Request to register a newly acquired item."""
    fields: Dict[str, Any]
    item_id: Optional[str] = None

    def __post_init__(self):
        raw = dict(self.fields)
        item_id = raw.pop("item_id", None) or self.item_id
        for name in SERVICE_OWNED_FIELDS:
            raw.pop(name, None)

        if not raw.get("name"):
            raise ValueError("name must be non-empty.")
        if raw.get("acquisition_cost") is None:
            raise InvalidItemState(RejectionReason(
                code=ReasonCode.MISSING_ACQUISITION_COST,
                message=f"New item '{raw['name']}' has no acquisition_cost.",
                policy_name="item_cost_policy",
            ))

        coerced = coerce_item_fields(raw)
        status = coerced.setdefault("status", ItemStatus.IN_CLOSET)
        if status not in CREATION_STATUSES:
            raise InvalidItemState(RejectionReason(
                code=ReasonCode.INVALID_CREATION_STATUS,
                message=(
                    f"Items cannot be created as '{status.value}'; "
                    f"terminal outcomes are recorded by transitions."
                ),
                policy_name="creation_status_policy",
            ))
        object.__setattr__(self, "fields", coerced)
        object.__setattr__(self, "item_id", item_id)


@dataclass(frozen=True)
class ItemUpdateRequest:
    """
    Partial update of one item.

    previous is the caller's snapshot from before the edit; the
    status transition is classified from previous.status.
    """
    item_id: str
    changes: Dict[str, Any]
    previous: InventoryItem

    def __post_init__(self):
        if not self.item_id:
            raise ValueError("item_id must be non-empty.")
        if not isinstance(self.previous, InventoryItem):
            raise ValueError("previous must be an InventoryItem snapshot.")
        changes = dict(self.changes)
        changes.pop("item_id", None)
        changes.pop("created_at", None)
        object.__setattr__(self, "changes", coerce_item_fields(changes))


@dataclass(frozen=True)
class MarkSoldRequest:
    """Request to record a sale."""
    item_id: str
    sale_price: Decimal
    sold_on: Optional[date] = None
    platform_sold: Optional[str] = None

    def __post_init__(self):
        if not self.item_id:
            raise ValueError("item_id must be non-empty.")
        if self.sale_price is None:
            raise InvalidItemState(RejectionReason(
                code=ReasonCode.MISSING_SALE_PRICE,
                message=f"Sale of item '{self.item_id}' has no sale_price.",
                policy_name="sale_price_policy",
            ))
        object.__setattr__(
            self,
            "sale_price",
            to_amount(
                self.sale_price,
                field_name="sale_price",
                policy_name="sale_price_policy",
            ),
        )

    def to_changes(self, default_date: date) -> Dict[str, Any]:
        changes: Dict[str, Any] = {
            "status": ItemStatus.SOLD,
            "sale_price": self.sale_price,
            "date_sold": self.sold_on or default_date,
        }
        if self.platform_sold:
            changes["platform_sold"] = self.platform_sold
        return changes


@dataclass(frozen=True)
class MarkTradedRequest:
    """
    Request to record a trade.

    cash_difference is signed: positive means cash paid out,
    negative means cash received. None is a straight swap.
    """
    item_id: str
    traded_for_item_id: Optional[str] = None
    cash_difference: Decimal = field(default=Decimal("0"))
    traded_on: Optional[date] = None

    def __post_init__(self):
        if not self.item_id:
            raise ValueError("item_id must be non-empty.")
        object.__setattr__(
            self,
            "cash_difference",
            to_amount(
                self.cash_difference if self.cash_difference is not None else 0,
                field_name="trade_cash_difference",
                allow_negative=True,
                policy_name="trade_cash_policy",
            ),
        )

    def to_changes(self, default_date: date) -> Dict[str, Any]:
        return {
            "status": ItemStatus.TRADED,
            "traded_for_item_id": self.traded_for_item_id,
            "trade_cash_difference": self.cash_difference,
            "date_sold": self.traded_on or default_date,
        }


@dataclass(frozen=True)
class ConventionToggleRequest:
    item_id: str
    active: bool

    def __post_init__(self):
        if not self.item_id:
            raise ValueError("item_id must be non-empty.")
        if not isinstance(self.active, bool):
            raise ValueError("active must be bool.")


def build_create_requests(rows: Any) -> list:
    """Validate a whole batch before any of it is written."""
    requests = []
    for index, row in enumerate(rows):
        if not isinstance(row, Mapping):
            raise ValueError(f"Row {index} is not a mapping of item fields.")
        requests.append(ItemCreateRequest(fields=dict(row)))
    return requests
