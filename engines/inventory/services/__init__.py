"""
Closet Ledger Inventory Engine - Application Service
======================================================
The surface callers use to mutate items. Every mutation runs:

    request validation -> transition classification -> item write
    -> ledger delta (if ledger relevant)

The item write always lands before the ledger delta. If the delta
then fails, the item is NOT rolled back: LedgerWriteFailed is raised
and logged on closet.ledger.inconsistency so a reconciliation pass
can decide. It is never retried here, since a delta that partially
applied would be applied twice.

Ledger deltas carry an idempotency key of "{item_id}:{target_status}",
so a resubmitted transition is recognised and skipped instead of
double-crediting cash on hand.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any, Callable, Iterable, List, Mapping, Optional

from core.config.ledger import LedgerConfig
from core.ledger_store.contracts import CapitalAccountStore, ItemStore
from core.ledger_store.errors import (
    DuplicateLedgerEntry,
    InvalidItemState,
    ItemNotFound,
    LedgerWriteFailed,
)
from core.primitives.capital import CapitalAccount, PARTNERS
from core.primitives.item import (
    InventoryItem,
    ItemStatus,
    PaidBy,
    parse_paid_by,
    parse_status,
)
from core.primitives.money import ZERO
from core.time.clock import Clock, get_default_clock
from engines.capital.commands import ContributionRecordRequest, PurchaseAssignRequest
from engines.capital.events import acquisition_key, build_entry_memo, transition_key
from engines.capital.services import CapitalService, LedgerAdjuster
from engines.convention.tagger import (
    mark_event_sale,
    select_for_release,
    tag_active,
    untag,
)
from engines.inventory.commands import (
    ConventionToggleRequest,
    ItemCreateRequest,
    ItemUpdateRequest,
    MarkSoldRequest,
    MarkTradedRequest,
    build_create_requests,
)
from engines.inventory.policies import (
    TransitionEffect,
    classify_creation,
    classify_update,
    snapshot_identity_policy,
    terminal_outcome_policy,
    trade_target_policy,
)
from projections.convention import EventPerformance, build_event_performance
from projections.finance import (
    BalanceSheet,
    CashFlowStatement,
    Expense,
    FinancialSummary,
    build_balance_sheet,
    build_cash_flow_statement,
    build_financial_summary,
)

logger = logging.getLogger("closet.inventory")
inconsistency_logger = logging.getLogger("closet.ledger.inconsistency")
convention_logger = logging.getLogger("closet.convention")


# ══════════════════════════════════════════════════════════════
# RECONCILIATION FINDINGS
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class UnrecordedTransition:
    """An item whose terminal status has no matching ledger entry."""
    item_id: str
    status: ItemStatus
    idempotency_key: str
    expected_delta: Decimal


# ══════════════════════════════════════════════════════════════
# APPLICATION SERVICE
# ══════════════════════════════════════════════════════════════

class InventoryService:
    """Inventory ledger application service."""

    def __init__(
        self,
        *,
        item_store: ItemStore,
        account_store: CapitalAccountStore,
        clock: Optional[Clock] = None,
        config: Optional[LedgerConfig] = None,
        adjuster: Optional[LedgerAdjuster] = None,
        id_factory: Callable[[], str] = lambda: str(uuid.uuid4()),
    ):
        self._items = item_store
        self._accounts = account_store
        self._clock = clock or get_default_clock()
        self._config = config or LedgerConfig()
        self._adjuster = adjuster or LedgerAdjuster(
            account_store=account_store, clock=self._clock, config=self._config,
        )
        self._capital = CapitalService(
            adjuster=self._adjuster, account_store=account_store,
        )
        self._new_id = id_factory

    @property
    def adjuster(self) -> LedgerAdjuster:
        return self._adjuster

    @property
    def capital(self) -> CapitalService:
        return self._capital

    # ── Reads ─────────────────────────────────────────────────

    def get_item(self, item_id: str) -> InventoryItem:
        return self._items.get(item_id)

    def list_items(self) -> List[InventoryItem]:
        return self._items.list_all()

    def read_account(self) -> CapitalAccount:
        return self._adjuster.read_account()

    def is_already(self, item_id: str, status) -> bool:
        """
        True when the stored item is already in status. Retry layers
        use this to drop a resubmitted mark-sold before sending it.
        """
        return self._items.get(item_id).status == parse_status(status)

    # ── Creation ──────────────────────────────────────────────

    def create_item(self, fields: Mapping[str, Any]) -> InventoryItem:
        """Register an acquisition. Shared purchases deduct their cost."""
        return self._create(ItemCreateRequest(fields=dict(fields)))

    def bulk_create_items(
        self, rows: Iterable[Mapping[str, Any]],
    ) -> List[InventoryItem]:
        """Import a batch. Every row is validated before the first write."""
        requests = build_create_requests(rows)
        created = [self._create(request) for request in requests]
        logger.info(f"Imported {len(created)} items")
        return created

    def _create(self, request: ItemCreateRequest) -> InventoryItem:
        fields = dict(request.fields)
        fields.setdefault("date_added", self._clock.today())
        item = InventoryItem(
            item_id=request.item_id or self._new_id(),
            created_at=self._clock.now_utc(),
            **fields,
        )
        effect = classify_creation(item)

        self._items.create(item)
        logger.info(
            f"Created item {item.item_id} ({item.name}), "
            f"paid by {item.paid_by.value}"
        )
        self._apply_effect(item, effect, acquisition_key(item.item_id))
        return item

    # ── Updates ───────────────────────────────────────────────

    def update_item(
        self,
        item_id: str,
        changes: Mapping[str, Any],
        previous: InventoryItem,
    ) -> InventoryItem:
        """
        Apply a partial update and the ledger effect of
        previous.status -> new status.

        The transition is classified from the caller's snapshot, not
        from store history. A terminal item cannot be re-closed as
        sold or traded, so every sold or traded item got there through
        a cash-moving transition.
        """
        request = ItemUpdateRequest(
            item_id=item_id, changes=dict(changes), previous=previous,
        )
        rejection = snapshot_identity_policy(item_id, previous)
        if rejection is not None:
            raise InvalidItemState(rejection)

        current = self._items.get(item_id)
        updated = current.evolve(**request.changes)
        rejection = (
            terminal_outcome_policy(current, updated.status)
            or terminal_outcome_policy(previous, updated.status)
        )
        if rejection is not None:
            raise InvalidItemState(rejection)
        effect = classify_update(previous, updated)

        self._items.update(updated)
        if updated.status != previous.status:
            logger.info(
                f"Item {item_id}: {previous.status.value} -> "
                f"{updated.status.value} ({effect.kind.value})"
            )
        self._apply_effect(updated, effect, transition_key(item_id, updated.status))
        return updated

    def mark_sold(
        self,
        item_id: str,
        sale_price,
        sold_on: Optional[date] = None,
        platform_sold: Optional[str] = None,
    ) -> InventoryItem:
        request = MarkSoldRequest(
            item_id=item_id,
            sale_price=sale_price,
            sold_on=sold_on,
            platform_sold=platform_sold,
        )
        previous = self._items.get(item_id)
        if previous.status == ItemStatus.SOLD:
            logger.warning(f"Item {item_id} is already sold; sale not re-applied")
            return previous
        return self.update_item(
            item_id, request.to_changes(self._clock.today()), previous,
        )

    def mark_unsold(self, item_id: str) -> InventoryItem:
        """
        Put a sold item back on sale. Cash on hand keeps the sale
        revenue; reversing it is a manual correction.
        """
        previous = self._items.get(item_id)
        return self.update_item(
            item_id,
            {
                "status": ItemStatus.LISTED,
                "sale_price": None,
                "platform_sold": None,
                "date_sold": None,
            },
            previous,
        )

    def mark_traded(
        self,
        item_id: str,
        traded_for_item_id: Optional[str] = None,
        cash_difference=0,
        traded_on: Optional[date] = None,
    ) -> InventoryItem:
        """
        Trade an item away. cash_difference > 0 means cash was paid
        out on top, < 0 means cash was received.
        """
        request = MarkTradedRequest(
            item_id=item_id,
            traded_for_item_id=traded_for_item_id,
            cash_difference=cash_difference,
            traded_on=traded_on,
        )
        rejection = trade_target_policy(
            item_id, traded_for_item_id, self._find,
        )
        if rejection is not None:
            raise InvalidItemState(rejection)

        previous = self._items.get(item_id)
        if previous.status == ItemStatus.TRADED:
            logger.warning(f"Item {item_id} is already traded; trade not re-applied")
            return previous
        return self.update_item(
            item_id, request.to_changes(self._clock.today()), previous,
        )

    def delete_item(self, item_id: str) -> None:
        """
        Remove an item. Not a financial event: a Shared item's cost is
        not returned to cash on hand.
        """
        self._items.delete(item_id)
        logger.info(f"Deleted item {item_id}; cash on hand unchanged")

    def _find(self, item_id: str) -> Optional[InventoryItem]:
        try:
            return self._items.get(item_id)
        except ItemNotFound:
            return None

    # ── Ownership ─────────────────────────────────────────────

    def assign_paid_by(self, item_ids: Iterable[str], owner) -> List[InventoryItem]:
        """
        Relabel who paid for items. A partner owner gets one
        contribution per item (at its acquisition cost), raising
        their investment; cash on hand is not touched.
        """
        owner = parse_paid_by(owner)
        items = [self._items.get(item_id) for item_id in item_ids]
        updated_items = []
        for item in items:
            updated = item.evolve(paid_by=owner)
            self._items.update(updated)
            updated_items.append(updated)
            if owner in PARTNERS and item.acquisition_cost > ZERO:
                self._capital.record_partner_purchase(PurchaseAssignRequest(
                    partner=owner,
                    amount=item.acquisition_cost,
                    contributed_on=item.date_added or self._clock.today(),
                    reference=item.item_id,
                    description=f"Purchase: {item.name}",
                ))
        logger.info(f"Assigned {len(updated_items)} items to {owner.value}")
        return updated_items

    def record_contribution(
        self,
        partner,
        amount,
        contributed_on: Optional[date] = None,
        description: str = "",
    ):
        return self._capital.record_contribution(ContributionRecordRequest(
            partner=partner,
            amount=amount,
            contributed_on=contributed_on or self._clock.today(),
            description=description,
        ))

    # ── Convention ────────────────────────────────────────────

    def toggle_convention(self, item_id: str, active: bool) -> InventoryItem:
        request = ConventionToggleRequest(item_id=item_id, active=active)
        current = self._items.get(request.item_id)
        updated = tag_active(current) if request.active else untag(current)
        if updated is not current:
            self._items.update(updated)
            convention_logger.info(
                f"Item {item_id} {'tagged to' if active else 'released from'} event"
            )
        return updated

    def tag_as_event_sale(self, item_id: str) -> InventoryItem:
        current = self._items.get(item_id)
        updated = mark_event_sale(current)
        if updated is not current:
            self._items.update(updated)
        return updated

    def run_convention_sweep(self, event_end_date: date) -> List[InventoryItem]:
        """
        Release every tagged item once the event's release instant has
        passed. Running it again releases nothing new.
        """
        due = select_for_release(
            self._items.list_all(),
            event_end_date,
            self._clock.now_utc(),
            self._config.convention_release_days,
        )
        released = []
        for item in due:
            updated = untag(item)
            self._items.update(updated)
            released.append(updated)
        if released:
            convention_logger.info(
                f"Released {len(released)} items from event ended "
                f"{event_end_date.isoformat()}"
            )
        return released

    # ── Ledger effect ─────────────────────────────────────────

    def _apply_effect(
        self, item: InventoryItem, effect: TransitionEffect, key: str,
    ) -> None:
        if not effect.is_ledger_relevant:
            return
        try:
            self._adjuster.apply_delta(
                effect.delta,
                kind=effect.entry_kind,
                idempotency_key=key,
                item_id=item.item_id,
                memo=build_entry_memo(
                    effect.entry_kind, item_name=item.name, amount=effect.delta,
                ),
            )
        except DuplicateLedgerEntry:
            logger.warning(
                f"Ledger delta {key} was already applied; not applying again"
            )
        except Exception as exc:
            inconsistency_logger.error(
                f"Item {item.item_id} persisted as {item.status.value} but "
                f"ledger delta {effect.delta} (key={key}) failed: {exc}",
                exc_info=True,
            )
            raise LedgerWriteFailed(
                item_id=item.item_id,
                delta=effect.delta,
                idempotency_key=key,
                cause=exc,
            ) from exc

    # ── Financial read models ─────────────────────────────────

    def get_financial_summary(self) -> FinancialSummary:
        return build_financial_summary(self._items.list_all())

    def get_cash_flow_statement(
        self, expenses: Iterable[Expense] = (),
    ) -> CashFlowStatement:
        return build_cash_flow_statement(
            self._items.list_all(),
            self._capital.list_contributions(),
            expenses,
            self.read_account().cash_on_hand,
        )

    def get_balance_sheet(self) -> BalanceSheet:
        return build_balance_sheet(self._items.list_all(), self.read_account())

    def get_event_performance(
        self, expenses: Iterable[Expense] = (),
    ) -> EventPerformance:
        return build_event_performance(self._items.list_all(), expenses)

    def find_unrecorded_transitions(self) -> List[UnrecordedTransition]:
        """
        Terminal items whose ledger delta never landed, typically
        left behind by a LedgerWriteFailed.
        """
        findings = []
        for item in self._items.list_all():
            expected = self._expected_terminal_delta(item)
            if expected == ZERO:
                continue
            key = transition_key(item.item_id, item.status)
            if not self._adjuster.has_applied(key):
                findings.append(UnrecordedTransition(
                    item_id=item.item_id,
                    status=item.status,
                    idempotency_key=key,
                    expected_delta=expected,
                ))
        return findings

    @staticmethod
    def _expected_terminal_delta(item: InventoryItem) -> Decimal:
        if item.status == ItemStatus.SOLD:
            return item.sale_price or ZERO
        if item.status == ItemStatus.TRADED:
            return -(item.trade_cash_difference or ZERO)
        if item.status == ItemStatus.REFUNDED and item.paid_by == PaidBy.SHARED:
            return item.acquisition_cost
        return ZERO
