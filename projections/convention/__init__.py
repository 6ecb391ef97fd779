"""
Closet Ledger Projections - Event Performance
===============================================
How an event (pop-up or convention) did, attributed through the
ever_in_convention latch rather than the transient in_convention flag.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable

from core.primitives.item import InventoryItem
from core.primitives.money import ZERO, total
from projections.finance import Expense, ExpenseCategory
from projections.inventory import convention_sold_items


@dataclass(frozen=True)
class EventPerformance:
    total_invested: Decimal
    inventory_cost: Decimal
    popup_expenses: Decimal
    sold_revenue: Decimal
    sold_cost: Decimal
    total_profit: Decimal
    average_margin: int
    items_sold: int
    items_tagged: int


def build_event_performance(
    items: Iterable[InventoryItem],
    expenses: Iterable[Expense] = (),
) -> EventPerformance:
    """
    total_invested is the cost of every item ever tagged, sold or not,
    plus pop-up expenses. Margin is a whole percentage.
    """
    items = list(items)
    tagged = [i for i in items if i.ever_in_convention]
    sold = convention_sold_items(items)
    popup_expenses = total(
        e.amount for e in expenses if e.category == ExpenseCategory.POP_UP
    )

    sold_revenue = total(i.sale_price for i in sold)
    sold_cost = total(i.acquisition_cost for i in sold)
    profit = sold_revenue - sold_cost
    if sold_revenue > ZERO:
        margin = int((profit / sold_revenue * 100).to_integral_value(ROUND_HALF_UP))
    else:
        margin = 0

    return EventPerformance(
        total_invested=total(i.acquisition_cost for i in tagged) + popup_expenses,
        inventory_cost=total(i.acquisition_cost for i in tagged if i.is_active),
        popup_expenses=popup_expenses,
        sold_revenue=sold_revenue,
        sold_cost=sold_cost,
        total_profit=profit,
        average_margin=margin,
        items_sold=len(sold),
        items_tagged=len(tagged),
    )
