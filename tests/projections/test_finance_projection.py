"""
Closet Ledger - Finance Projection Tests
==========================================
Summary figures, cash flow statement and balance sheet derived from
item snapshots.
"""

from datetime import date
from decimal import Decimal

import pytest

from core.ledger_store.errors import InvalidItemState
from core.primitives.capital import CapitalAccount, Contribution
from core.primitives.item import InventoryItem, PaidBy
from projections.finance import (
    Expense,
    ExpenseCategory,
    FinancialSummary,
    build_balance_sheet,
    build_cash_flow_statement,
    build_financial_summary,
    margin_percent,
)

_ids = iter(range(1, 10_000))


def _item(**fields) -> InventoryItem:
    fields.setdefault("item_id", f"item-{next(_ids)}")
    fields.setdefault("name", "Item")
    return InventoryItem(**fields)


def _reference_set():
    return [
        _item(status="sold", acquisition_cost=50, sale_price=90),
        _item(status="sold", acquisition_cost=30, sale_price=30),
        _item(status="scammed", acquisition_cost=40),
    ]


# ══════════════════════════════════════════════════════════════
# SUMMARY
# ══════════════════════════════════════════════════════════════

class TestFinancialSummary:
    def test_reference_figures(self):
        summary = build_financial_summary(_reference_set())
        assert summary.total_revenue == Decimal("120.00")
        assert summary.sale_revenue == Decimal("120.00")
        assert summary.total_cost_of_sold == Decimal("80.00")
        assert summary.total_profit == Decimal("40.00")
        assert summary.lost_to_scams == Decimal("40.00")
        assert summary.avg_margin == Decimal("33.3")
        assert summary.total_spent == Decimal("120.00")
        assert summary.items_sold == 2

    def test_empty_set_is_all_zero(self):
        summary = build_financial_summary([])
        assert summary == FinancialSummary()
        for name, value in summary.to_dict().items():
            assert value in ("0.00", "0.0", 0), name

    def test_trade_receiving_cash_recognizes_cost(self):
        summary = build_financial_summary([
            _item(status="traded", acquisition_cost=80, trade_cash_difference=-20),
        ])
        assert summary.trade_cash_received == Decimal("20.00")
        assert summary.total_revenue == Decimal("20.00")
        assert summary.traded_cost_when_cash_received == Decimal("80.00")
        assert summary.total_cost_of_sold == Decimal("80.00")
        assert summary.total_profit == Decimal("-60.00")

    def test_trade_paying_cash_defers_cost(self):
        summary = build_financial_summary([
            _item(status="traded", acquisition_cost=80, trade_cash_difference=20),
        ])
        assert summary.trade_cash_paid == Decimal("20.00")
        assert summary.trade_cash_received == Decimal("0")
        assert summary.total_cost_of_sold == Decimal("0")
        assert summary.items_traded == 1

    def test_straight_swap_defers_cost(self):
        summary = build_financial_summary([
            _item(status="traded", acquisition_cost=80),
        ])
        assert summary.total_cost_of_sold == Decimal("0")

    def test_refunds_leave_total_spent(self):
        summary = build_financial_summary([
            _item(status="refunded", acquisition_cost=120),
            _item(acquisition_cost=60),
        ])
        assert summary.total_spent == Decimal("60.00")
        assert summary.refunded_amount == Decimal("120.00")

    def test_active_inventory_figures(self):
        summary = build_financial_summary([
            _item(status="listed", acquisition_cost=60, asking_price=150,
                  lowest_acceptable_price=110),
            _item(status="otw", acquisition_cost=40, asking_price=90),
            _item(status="sold", acquisition_cost=10, sale_price=20),
        ])
        assert summary.active_items == 2
        assert summary.active_inventory_cost == Decimal("100.00")
        assert summary.potential_revenue == Decimal("240.00")
        assert summary.minimum_revenue == Decimal("110.00")

    def test_paid_by_does_not_change_profit(self):
        shared = build_financial_summary([
            _item(status="sold", acquisition_cost=50, sale_price=90),
        ])
        partner = build_financial_summary([
            _item(status="sold", acquisition_cost=50, sale_price=90, paid_by="PartnerA"),
        ])
        assert shared.total_profit == partner.total_profit


class TestMarginPercent:
    @pytest.mark.parametrize("profit,revenue,expected", [
        ("40", "120", "33.3"),
        ("1", "3", "33.3"),
        ("2", "3", "66.7"),
        ("-60", "20", "-300.0"),
        ("10", "0", "0.0"),
        ("10", "-5", "0.0"),
    ])
    def test_one_decimal(self, profit, revenue, expected):
        assert margin_percent(Decimal(profit), Decimal(revenue)) == Decimal(expected)


# ══════════════════════════════════════════════════════════════
# CASH FLOW
# ══════════════════════════════════════════════════════════════

class TestCashFlowStatement:
    def test_operating_and_financing(self):
        items = [
            _item(acquisition_cost=100),
            _item(acquisition_cost=60, paid_by="PartnerB"),
            _item(status="sold", acquisition_cost=40, sale_price=100),
        ]
        contributions = [
            Contribution(partner=PaidBy.PARTNER_A, amount=300, contributed_on=date(2025, 1, 1)),
            Contribution(partner=PaidBy.PARTNER_B, amount=60, contributed_on=date(2025, 1, 3),
                         reference="item-x"),
        ]
        expenses = [Expense(amount=20, incurred_on=date(2025, 1, 4), category="supplies")]

        statement = build_cash_flow_statement(
            items, contributions, expenses, cash_on_hand=Decimal("200"),
        )
        assert statement.cash_from_sales == Decimal("100.00")
        assert statement.cash_paid_for_inventory == Decimal("140.00")
        assert statement.cash_paid_for_expenses == Decimal("20.00")
        assert statement.net_operating == Decimal("-60.00")
        assert statement.partner_a_contributions == Decimal("300.00")
        assert statement.partner_b_contributions == Decimal("60.00")
        assert statement.expected_cash == Decimal("300.00")
        assert statement.distributions == Decimal("100.00")
        assert statement.net_financing == Decimal("260.00")
        assert statement.net_cash_change == Decimal("200.00")
        assert statement.ending_cash == Decimal("200")
        assert [c.contributed_on for c in statement.contributions] == [
            date(2025, 1, 3), date(2025, 1, 1),
        ]

    def test_trade_cash_is_operating_cash(self):
        items = [
            _item(status="traded", acquisition_cost=80, trade_cash_difference=20),
            _item(status="traded", acquisition_cost=50, trade_cash_difference=-35),
        ]
        contributions = [
            Contribution(partner=PaidBy.PARTNER_A, amount=200, contributed_on=date(2025, 1, 1)),
        ]
        # 200 - 80 - 20 - 50 + 35
        statement = build_cash_flow_statement(
            items, contributions, [], cash_on_hand=Decimal("85.00"),
        )
        assert statement.trade_cash_paid == Decimal("20.00")
        assert statement.trade_cash_received == Decimal("35.00")
        assert statement.cash_paid_for_inventory == Decimal("130.00")
        assert statement.net_operating == Decimal("-115.00")
        assert statement.expected_cash == Decimal("85.00")
        assert statement.distributions == Decimal("0")

    def test_refunded_shared_purchase_is_not_cash_paid(self):
        items = [
            _item(status="refunded", acquisition_cost=80),
            _item(status="refunded", acquisition_cost=40, paid_by="PartnerB"),
            _item(acquisition_cost=25),
        ]
        contributions = [
            Contribution(partner=PaidBy.PARTNER_A, amount=200, contributed_on=date(2025, 1, 1)),
        ]
        statement = build_cash_flow_statement(
            items, contributions, [], cash_on_hand=Decimal("175.00"),
        )
        assert statement.cash_paid_for_inventory == Decimal("25.00")
        assert statement.expected_cash == Decimal("175.00")
        assert statement.distributions == Decimal("0")

    def test_distributions_never_negative(self):
        statement = build_cash_flow_statement([], [], [], cash_on_hand=Decimal("50"))
        assert statement.distributions == Decimal("0")


class TestExpense:
    def test_negative_rejected(self):
        with pytest.raises(InvalidItemState):
            Expense(amount=-1, incurred_on=date(2025, 1, 1))

    def test_unknown_category_rejected(self):
        with pytest.raises(ValueError):
            Expense(amount=1, incurred_on=date(2025, 1, 1), category="yachts")

    def test_defaults(self):
        expense = Expense(amount="9.99", incurred_on=date(2025, 1, 1))
        assert expense.category == ExpenseCategory.OTHER
        assert expense.owner == PaidBy.SHARED
        assert expense.amount == Decimal("9.99")


# ══════════════════════════════════════════════════════════════
# BALANCE SHEET
# ══════════════════════════════════════════════════════════════

class TestBalanceSheet:
    def test_assets_equal_liabilities_plus_equity(self):
        account = CapitalAccount(
            cash_on_hand=Decimal("250.00"),
            partner_a_investment=Decimal("300.00"),
            partner_b_investment=Decimal("60.00"),
        )
        items = [
            _item(acquisition_cost=100),
            _item(status="sold", acquisition_cost=40, sale_price=100),
        ]
        sheet = build_balance_sheet(items, account)
        assert sheet.inventory_at_cost == Decimal("100.00")
        assert sheet.total_assets == Decimal("350.00")
        assert sheet.retained_earnings == Decimal("-10.00")
        assert sheet.total_equity == Decimal("350.00")
        assert sheet.balances

    def test_missing_account_reads_as_zero(self):
        sheet = build_balance_sheet([], None)
        assert sheet.total_assets == Decimal("0")
        assert sheet.balances
