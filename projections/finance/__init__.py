"""
Closet Ledger Projections - Finance Read Model
================================================
Pure, stateless derivations over the full item set.

Nothing here is stored or cached. Every figure is recomputed from
the items (and, for the statements, the capital account and
contributions) on each call, so a summary can always be rebuilt
after ledger drift. All builders are total: empty input yields an
all-zero result and no division by zero is possible.

Built from:
- InventoryItem snapshots (core.primitives.item)
- CapitalAccount and Contribution (core.primitives.capital)
- Expense records supplied by the caller
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Iterable, List, Optional

from core.primitives.capital import CapitalAccount, Contribution
from core.primitives.item import InventoryItem, ItemStatus, PaidBy
from core.primitives.money import ZERO, to_amount, total

MARGIN_PLACES = Decimal("0.1")
HUNDRED = Decimal("100")


def margin_percent(profit: Decimal, revenue: Decimal) -> Decimal:
    """profit / revenue * 100 to one decimal; 0 when revenue <= 0."""
    if revenue <= ZERO:
        return Decimal("0.0")
    return (profit / revenue * HUNDRED).quantize(
        MARGIN_PLACES, rounding=ROUND_HALF_UP,
    )


def _with_status(items: List[InventoryItem], status: ItemStatus) -> List[InventoryItem]:
    return [i for i in items if i.status == status]


# ══════════════════════════════════════════════════════════════
# FINANCIAL SUMMARY
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class FinancialSummary:
    total_spent: Decimal = ZERO
    refunded_amount: Decimal = ZERO
    trade_cash_received: Decimal = ZERO
    trade_cash_paid: Decimal = ZERO
    sale_revenue: Decimal = ZERO
    total_revenue: Decimal = ZERO
    traded_cost_when_cash_received: Decimal = ZERO
    total_cost_of_sold: Decimal = ZERO
    total_profit: Decimal = ZERO
    active_inventory_cost: Decimal = ZERO
    potential_revenue: Decimal = ZERO
    minimum_revenue: Decimal = ZERO
    lost_to_scams: Decimal = ZERO
    avg_margin: Decimal = Decimal("0.0")
    items_sold: int = 0
    items_traded: int = 0
    active_items: int = 0

    def to_dict(self) -> dict:
        return {
            name: (str(value) if isinstance(value, Decimal) else value)
            for name, value in self.__dict__.items()
        }


def build_financial_summary(items: Iterable[InventoryItem]) -> FinancialSummary:
    """
    Derive the summary figures from the complete item set.

    Refunded items are excluded from total_spent because their cost
    came back. A trade recognizes the given item's cost only when
    cash was received; a swap defers it until the received item sells.
    """
    items = list(items)
    sold = _with_status(items, ItemStatus.SOLD)
    traded = _with_status(items, ItemStatus.TRADED)
    scammed = _with_status(items, ItemStatus.SCAMMED)
    refunded = _with_status(items, ItemStatus.REFUNDED)
    active = [i for i in items if i.is_active]

    differences = [i.trade_cash_difference or ZERO for i in traded]
    trade_cash_received = total(max(ZERO, -d) for d in differences)
    trade_cash_paid = total(max(ZERO, d) for d in differences)

    sale_revenue = total(i.sale_price for i in sold)
    total_revenue = sale_revenue + trade_cash_received

    traded_cost_when_cash_received = total(
        i.acquisition_cost
        for i in traded
        if i.trade_cash_difference is not None and i.trade_cash_difference < ZERO
    )
    total_cost_of_sold = (
        total(i.acquisition_cost for i in sold) + traded_cost_when_cash_received
    )
    total_profit = total_revenue - total_cost_of_sold

    return FinancialSummary(
        total_spent=total(
            i.acquisition_cost for i in items if i.status != ItemStatus.REFUNDED
        ),
        refunded_amount=total(i.acquisition_cost for i in refunded),
        trade_cash_received=trade_cash_received,
        trade_cash_paid=trade_cash_paid,
        sale_revenue=sale_revenue,
        total_revenue=total_revenue,
        traded_cost_when_cash_received=traded_cost_when_cash_received,
        total_cost_of_sold=total_cost_of_sold,
        total_profit=total_profit,
        active_inventory_cost=total(i.acquisition_cost for i in active),
        potential_revenue=total(i.asking_price for i in active),
        minimum_revenue=total(i.lowest_acceptable_price for i in active),
        lost_to_scams=total(i.acquisition_cost for i in scammed),
        avg_margin=margin_percent(total_profit, total_revenue),
        items_sold=len(sold),
        items_traded=len(traded),
        active_items=len(active),
    )


# ══════════════════════════════════════════════════════════════
# EXPENSES
# ══════════════════════════════════════════════════════════════

class ExpenseCategory(Enum):
    SUPPLIES = "supplies"
    SHIPPING = "shipping"
    PLATFORM_FEES = "platform-fees"
    POP_UP = "pop-up"
    ADVERTISING = "advertising"
    SUBSCRIPTIONS = "subscriptions"
    OTHER = "other"


@dataclass(frozen=True)
class Expense:
    """Operating expense paid from cash on hand."""
    amount: Decimal
    incurred_on: date
    category: ExpenseCategory = ExpenseCategory.OTHER
    description: str = ""
    owner: PaidBy = PaidBy.SHARED

    def __post_init__(self):
        object.__setattr__(
            self, "amount", to_amount(self.amount, field_name="amount"),
        )
        object.__setattr__(self, "category", ExpenseCategory(self.category))
        object.__setattr__(self, "owner", PaidBy(self.owner))


# ══════════════════════════════════════════════════════════════
# CASH FLOW STATEMENT
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class CashFlowStatement:
    # ── Operating ─────────────────────────────────────────────
    cash_from_sales: Decimal
    cash_paid_for_inventory: Decimal
    cash_paid_for_expenses: Decimal
    net_operating: Decimal
    # ── Financing ─────────────────────────────────────────────
    partner_a_contributions: Decimal
    partner_b_contributions: Decimal
    distributions: Decimal
    net_financing: Decimal
    # ── Summary ───────────────────────────────────────────────
    expected_cash: Decimal
    net_cash_change: Decimal
    ending_cash: Decimal
    beginning_cash: Decimal = ZERO
    trade_cash_received: Decimal = ZERO
    trade_cash_paid: Decimal = ZERO
    contributions: List[Contribution] = field(default_factory=list)


def build_cash_flow_statement(
    items: Iterable[InventoryItem],
    contributions: Iterable[Contribution],
    expenses: Iterable[Expense],
    cash_on_hand: Decimal,
) -> CashFlowStatement:
    """
    Operating and financing sections since inception.

    Operating cash follows every ledger movement an item can cause:
    sales and trade cash received in, Shared purchases and trade cash
    paid out. A refunded Shared purchase had its cost restored, so it
    is not counted as paid. Partner purchases arrive through
    contributions instead. Distributions are whatever expected cash
    exceeds actual cash by, never negative.
    """
    items = list(items)
    contributions = list(contributions)
    expenses = list(expenses)

    cash_from_sales = total(
        i.sale_price for i in items if i.status == ItemStatus.SOLD
    )
    differences = [
        i.trade_cash_difference or ZERO
        for i in items
        if i.status == ItemStatus.TRADED
    ]
    trade_cash_received = total(max(ZERO, -d) for d in differences)
    trade_cash_paid = total(max(ZERO, d) for d in differences)
    cash_paid_for_inventory = total(
        i.acquisition_cost
        for i in items
        if i.paid_by == PaidBy.SHARED and i.status != ItemStatus.REFUNDED
    )
    cash_paid_for_expenses = total(e.amount for e in expenses)
    net_operating = (
        cash_from_sales + trade_cash_received
        - cash_paid_for_inventory - trade_cash_paid - cash_paid_for_expenses
    )

    partner_a = total(
        c.amount for c in contributions if c.partner == PaidBy.PARTNER_A
    )
    partner_b = total(
        c.amount for c in contributions if c.partner == PaidBy.PARTNER_B
    )
    beginning_cash = ZERO
    expected_cash = beginning_cash + partner_a + partner_b + net_operating
    distributions = max(ZERO, expected_cash - cash_on_hand)
    net_financing = partner_a + partner_b - distributions

    return CashFlowStatement(
        cash_from_sales=cash_from_sales,
        cash_paid_for_inventory=cash_paid_for_inventory,
        cash_paid_for_expenses=cash_paid_for_expenses,
        net_operating=net_operating,
        partner_a_contributions=partner_a,
        partner_b_contributions=partner_b,
        distributions=distributions,
        net_financing=net_financing,
        expected_cash=expected_cash,
        net_cash_change=net_operating + net_financing,
        ending_cash=cash_on_hand,
        beginning_cash=beginning_cash,
        trade_cash_received=trade_cash_received,
        trade_cash_paid=trade_cash_paid,
        contributions=sorted(
            contributions, key=lambda c: c.contributed_on, reverse=True,
        ),
    )


# ══════════════════════════════════════════════════════════════
# BALANCE SHEET
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class BalanceSheet:
    cash_on_hand: Decimal
    inventory_at_cost: Decimal
    total_assets: Decimal
    total_liabilities: Decimal
    partner_a_capital: Decimal
    partner_b_capital: Decimal
    retained_earnings: Decimal
    total_equity: Decimal

    @property
    def balances(self) -> bool:
        return self.total_assets == self.total_liabilities + self.total_equity


def build_balance_sheet(
    items: Iterable[InventoryItem],
    account: Optional[CapitalAccount],
) -> BalanceSheet:
    """Assets at cost; retained earnings is whatever equity remains."""
    account = account or CapitalAccount()
    inventory_at_cost = total(i.acquisition_cost for i in items if i.is_active)
    total_assets = account.cash_on_hand + inventory_at_cost
    total_liabilities = ZERO
    retained_earnings = (
        total_assets
        - total_liabilities
        - account.partner_a_investment
        - account.partner_b_investment
    )
    return BalanceSheet(
        cash_on_hand=account.cash_on_hand,
        inventory_at_cost=inventory_at_cost,
        total_assets=total_assets,
        total_liabilities=total_liabilities,
        partner_a_capital=account.partner_a_investment,
        partner_b_capital=account.partner_b_investment,
        retained_earnings=retained_earnings,
        total_equity=(
            account.partner_a_investment
            + account.partner_b_investment
            + retained_earnings
        ),
    )
