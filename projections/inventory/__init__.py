"""
Closet Ledger Projections - Inventory Selections
==================================================
Read-only selections over the item set: what is still for sale,
what sold, what belongs to an event, and which active listings are
missing the details needed to sell them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List

from core.primitives.item import InventoryItem, ItemStatus


def active_items(items: Iterable[InventoryItem]) -> List[InventoryItem]:
    return [i for i in items if i.is_active]


def sold_items(items: Iterable[InventoryItem]) -> List[InventoryItem]:
    return [i for i in items if i.status == ItemStatus.SOLD]


def convention_items(items: Iterable[InventoryItem]) -> List[InventoryItem]:
    """Currently tagged to the event and still for sale."""
    return [i for i in items if i.in_convention and i.is_active]


def convention_sold_items(items: Iterable[InventoryItem]) -> List[InventoryItem]:
    """
    Ever tagged to the event and now sold. Relies on the latch: the
    sale may land long after the event released the item.
    """
    return [
        i for i in items
        if i.ever_in_convention and i.status == ItemStatus.SOLD
    ]


def priority_items(items: Iterable[InventoryItem]) -> List[InventoryItem]:
    return [i for i in items if i.priority_sale and i.is_active]


# ══════════════════════════════════════════════════════════════
# INCOMPLETE LISTINGS
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class IncompleteItems:
    missing_size: List[InventoryItem] = field(default_factory=list)
    missing_image: List[InventoryItem] = field(default_factory=list)
    missing_floor_price: List[InventoryItem] = field(default_factory=list)
    missing_goal_price: List[InventoryItem] = field(default_factory=list)
    missing_asking_price: List[InventoryItem] = field(default_factory=list)

    @property
    def item_ids(self) -> frozenset:
        return frozenset(
            i.item_id
            for group in (
                self.missing_size,
                self.missing_image,
                self.missing_floor_price,
                self.missing_goal_price,
                self.missing_asking_price,
            )
            for i in group
        )

    @property
    def count(self) -> int:
        return len(self.item_ids)


def incomplete_items(items: Iterable[InventoryItem]) -> IncompleteItems:
    """Active items grouped by the listing detail they lack."""
    active = active_items(items)
    return IncompleteItems(
        missing_size=[i for i in active if not (i.size or "").strip()],
        missing_image=[i for i in active if not i.image_url],
        missing_floor_price=[i for i in active if i.lowest_acceptable_price is None],
        missing_goal_price=[i for i in active if i.goal_price is None],
        missing_asking_price=[i for i in active if i.asking_price is None],
    )
