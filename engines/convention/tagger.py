"""
Closet Ledger Convention Tagger - Event Tagging and Auto-Release
=================================================================

RULES (NON-NEGOTIABLE):
- tag_active sets in_convention and ever_in_convention
- untag clears in_convention only; ever_in_convention is a latch
- Release instant = midnight UTC of (event end date + release days)
- An item is released once now reaches that instant, so with the
  default of 2 days a sweep on D+1 keeps the item active and any
  sweep on D+2, midnight included, releases it
- Untagging an untagged item is a no-op (the sweep is idempotent)

The event end date is external configuration; nothing here derives
it from item data. Pure functions, no persistence.
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone
from typing import Iterable, List

from core.config.ledger import DEFAULT_CONVENTION_RELEASE_DAYS
from core.primitives.item import InventoryItem


# ══════════════════════════════════════════════════════════════
# TAGGING
# ══════════════════════════════════════════════════════════════

def tag_active(item: InventoryItem) -> InventoryItem:
    if item.in_convention and item.ever_in_convention:
        return item
    return item.evolve(in_convention=True, ever_in_convention=True)


def untag(item: InventoryItem) -> InventoryItem:
    if not item.in_convention:
        return item
    return item.evolve(in_convention=False)


def mark_event_sale(item: InventoryItem) -> InventoryItem:
    """Attribute an item to the event without making it active there."""
    if item.ever_in_convention:
        return item
    return item.evolve(ever_in_convention=True)


# ══════════════════════════════════════════════════════════════
# AUTO-RELEASE
# ══════════════════════════════════════════════════════════════

def release_at(
    event_end_date: date,
    release_days: int = DEFAULT_CONVENTION_RELEASE_DAYS,
) -> datetime:
    midnight = datetime.combine(event_end_date, time.min, tzinfo=timezone.utc)
    return midnight + timedelta(days=release_days)


def is_release_due(
    event_end_date: date,
    now: datetime,
    release_days: int = DEFAULT_CONVENTION_RELEASE_DAYS,
) -> bool:
    if now.tzinfo is None:
        raise ValueError("now must be timezone-aware.")
    return now >= release_at(event_end_date, release_days)


def select_for_release(
    items: Iterable[InventoryItem],
    event_end_date: date,
    now: datetime,
    release_days: int = DEFAULT_CONVENTION_RELEASE_DAYS,
) -> List[InventoryItem]:
    """Items currently in the event once the release instant has passed."""
    if not is_release_due(event_end_date, now, release_days):
        return []
    return [item for item in items if item.in_convention]
