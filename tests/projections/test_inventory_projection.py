"""
Closet Ledger - Inventory and Event Projection Tests
======================================================
"""

from datetime import date
from decimal import Decimal

from core.primitives.item import InventoryItem
from projections.convention import build_event_performance
from projections.finance import Expense
from projections.inventory import (
    active_items,
    convention_items,
    convention_sold_items,
    incomplete_items,
    priority_items,
    sold_items,
)


def _item(item_id, **fields) -> InventoryItem:
    fields.setdefault("name", "Item")
    fields.setdefault("acquisition_cost", 50)
    return InventoryItem(item_id=item_id, **fields)


def _ids(items):
    return [i.item_id for i in items]


class TestSelections:
    def _items(self):
        return [
            _item("closet"),
            _item("tagged", in_convention=True, priority_sale=True),
            _item("released-sold", ever_in_convention=True, status="sold", sale_price=70),
            _item("sold", status="sold", sale_price=60),
            _item("scammed", status="scammed", priority_sale=True),
        ]

    def test_active_and_sold(self):
        items = self._items()
        assert _ids(active_items(items)) == ["closet", "tagged"]
        assert _ids(sold_items(items)) == ["released-sold", "sold"]

    def test_convention_selections_use_the_latch(self):
        items = self._items()
        assert _ids(convention_items(items)) == ["tagged"]
        assert _ids(convention_sold_items(items)) == ["released-sold"]

    def test_priority_only_when_active(self):
        assert _ids(priority_items(self._items())) == ["tagged"]


class TestIncompleteItems:
    def test_groups_by_missing_detail(self):
        complete = _item(
            "complete", size="10", image_url="https://img.example/1.jpg",
            asking_price=150, lowest_acceptable_price=110, goal_price=130,
        )
        no_size = _item(
            "no-size", size="  ", image_url="https://img.example/2.jpg",
            asking_price=150, lowest_acceptable_price=110, goal_price=130,
        )
        bare = _item("bare")
        sold_bare = _item("sold-bare", status="sold", sale_price=10)

        report = incomplete_items([complete, no_size, bare, sold_bare])
        assert _ids(report.missing_size) == ["no-size", "bare"]
        assert _ids(report.missing_image) == ["bare"]
        assert _ids(report.missing_asking_price) == ["bare"]
        assert report.item_ids == frozenset({"no-size", "bare"})
        assert report.count == 2

    def test_empty(self):
        assert incomplete_items([]).count == 0


class TestEventPerformance:
    def test_attributed_through_latch(self):
        items = [
            _item("sold-after-release", acquisition_cost=40, ever_in_convention=True,
                  status="sold", sale_price=100),
            _item("still-tagged", acquisition_cost=60, in_convention=True),
            _item("never-tagged", status="sold", sale_price=500),
        ]
        expenses = [
            Expense(amount=30, incurred_on=date(2025, 1, 10), category="pop-up"),
            Expense(amount=999, incurred_on=date(2025, 1, 10), category="shipping"),
        ]
        performance = build_event_performance(items, expenses)
        assert performance.items_tagged == 2
        assert performance.items_sold == 1
        assert performance.popup_expenses == Decimal("30.00")
        assert performance.total_invested == Decimal("130.00")
        assert performance.inventory_cost == Decimal("60.00")
        assert performance.sold_revenue == Decimal("100.00")
        assert performance.sold_cost == Decimal("40.00")
        assert performance.total_profit == Decimal("60.00")
        assert performance.average_margin == 60

    def test_no_sales_means_zero_margin(self):
        performance = build_event_performance([_item("tagged", in_convention=True)])
        assert performance.average_margin == 0
        assert performance.sold_revenue == Decimal("0")
