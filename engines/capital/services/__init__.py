"""
Closet Ledger Capital Engine - Application Service
====================================================
The LedgerAdjuster is the only writer of cash on hand.

Every write follows the same optimistic loop:

    1. read the account (balance + version)
    2. compute the new snapshot
    3. compare_and_set(version, snapshot, entry=...)
    4. on a lost race, re-read and go again; after
       max_cas_attempts losses raise ConcurrentUpdateConflict

The balance write and its LedgerEntry are one unit of work, so the
entry history always folds to the stored balance. reconcile() checks
exactly that.
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Callable, List, Optional

from core.config.ledger import LedgerConfig
from core.ledger_store.contracts import CapitalAccountStore
from core.ledger_store.errors import (
    ConcurrentUpdateConflict,
    DuplicateLedgerEntry,
    InvalidItemState,
)
from core.primitives.capital import (
    CapitalAccount,
    Contribution,
    LedgerEntry,
    LedgerEntryKind,
)
from core.primitives.money import ZERO, to_amount, total
from core.time.clock import Clock, get_default_clock
from engines.capital.commands import (
    ContributionRecordRequest,
    PurchaseAssignRequest,
)
from engines.capital.events import build_contribution_memo, contribution_key
from engines.capital.policies import (
    contribution_amount_policy,
    reference_not_recorded_policy,
)

logger = logging.getLogger("closet.ledger")
inconsistency_logger = logging.getLogger("closet.ledger.inconsistency")


# ══════════════════════════════════════════════════════════════
# RECONCILIATION REPORT
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class ReconciliationReport:
    stored_balance: Decimal
    ledger_sum: Decimal
    entry_count: int
    account_version: int

    @property
    def drift(self) -> Decimal:
        return self.stored_balance - self.ledger_sum

    @property
    def is_consistent(self) -> bool:
        return self.drift == ZERO

    def to_dict(self) -> dict:
        return {
            "stored_balance": str(self.stored_balance),
            "ledger_sum": str(self.ledger_sum),
            "drift": str(self.drift),
            "entry_count": self.entry_count,
            "account_version": self.account_version,
            "is_consistent": self.is_consistent,
        }


# ══════════════════════════════════════════════════════════════
# LEDGER ADJUSTER
# ══════════════════════════════════════════════════════════════

AccountBuilder = Callable[[CapitalAccount, datetime], CapitalAccount]


class LedgerAdjuster:
    """Applies signed deltas to the singleton capital account."""

    def __init__(
        self,
        *,
        account_store: CapitalAccountStore,
        clock: Optional[Clock] = None,
        config: Optional[LedgerConfig] = None,
    ):
        self._store = account_store
        self._clock = clock or get_default_clock()
        self._config = config or LedgerConfig()

    @property
    def max_attempts(self) -> int:
        return self._config.max_cas_attempts

    def apply_delta(
        self,
        amount,
        *,
        kind: LedgerEntryKind,
        idempotency_key: str,
        item_id: Optional[str] = None,
        memo: str = "",
    ) -> Decimal:
        """
        Move cash on hand by a signed amount. Returns the new balance.

        Raises DuplicateLedgerEntry if idempotency_key was already
        applied (balance untouched), ConcurrentUpdateConflict when the
        retry budget runs out, StoreUnavailable on backend failure.
        """
        amount = to_amount(amount, field_name="amount", allow_negative=True)

        def build(current: CapitalAccount, now: datetime) -> CapitalAccount:
            return current.with_cash_delta(amount, now)

        def entry_for(now: datetime) -> LedgerEntry:
            return LedgerEntry(
                kind=kind,
                amount=amount,
                idempotency_key=idempotency_key,
                item_id=item_id,
                memo=memo,
                recorded_at=now,
            )

        account = self.write_account(build, entry_for=entry_for)
        logger.info(
            f"{kind.value} {amount:+} applied "
            f"(key={idempotency_key}); cash on hand {account.cash_on_hand}"
        )
        return account.cash_on_hand

    def write_account(
        self,
        build: AccountBuilder,
        *,
        entry_for: Optional[Callable[[datetime], LedgerEntry]] = None,
        contribution: Optional[Contribution] = None,
    ) -> CapitalAccount:
        for attempt in range(1, self.max_attempts + 1):
            current = self._store.read()
            now = self._clock.now_utc()
            updated = build(current, now)
            entry = entry_for(now) if entry_for is not None else None
            if self._store.compare_and_set(
                current.version,
                updated,
                entry=entry,
                contribution=contribution,
            ):
                return updated
            logger.debug(
                f"Capital account version {current.version} changed "
                f"underneath write (attempt {attempt}/{self.max_attempts})"
            )

        logger.warning(
            f"Capital account write gave up after {self.max_attempts} attempts"
        )
        raise ConcurrentUpdateConflict(self.max_attempts)

    # ── Queries ───────────────────────────────────────────────

    def has_applied(self, idempotency_key: str) -> bool:
        return self._store.has_entry(idempotency_key)

    def read_account(self) -> CapitalAccount:
        return self._store.read()

    def list_entries(self) -> List[LedgerEntry]:
        return self._store.list_entries()

    def reconcile(self) -> ReconciliationReport:
        """Fold the entry history and compare it with the stored balance."""
        account = self._store.read()
        entries = self._store.list_entries()
        report = ReconciliationReport(
            stored_balance=account.cash_on_hand,
            ledger_sum=total(e.amount for e in entries),
            entry_count=len(entries),
            account_version=account.version,
        )
        if not report.is_consistent:
            inconsistency_logger.error(
                f"Cash on hand {report.stored_balance} does not match "
                f"ledger history {report.ledger_sum} "
                f"(drift {report.drift}, {report.entry_count} entries)"
            )
        return report


# ══════════════════════════════════════════════════════════════
# APPLICATION SERVICE
# ══════════════════════════════════════════════════════════════

class CapitalService:
    """Partner contributions on top of the LedgerAdjuster."""

    def __init__(
        self,
        *,
        adjuster: LedgerAdjuster,
        account_store: CapitalAccountStore,
    ):
        self._adjuster = adjuster
        self._store = account_store

    def record_contribution(self, request: ContributionRecordRequest) -> Contribution:
        """
        Partner cash injection: raises that partner's investment and
        cash on hand together, in one account write.
        """
        rejection = contribution_amount_policy(request.amount)
        if rejection is not None:
            raise InvalidItemState(rejection)

        contribution = Contribution(
            partner=request.partner,
            amount=request.amount,
            contributed_on=request.contributed_on,
            description=request.description,
        )

        def build(current: CapitalAccount, now: datetime) -> CapitalAccount:
            invested = current.with_investment(request.partner, request.amount, now)
            return dataclasses.replace(
                invested, cash_on_hand=current.cash_on_hand + request.amount,
            )

        def entry_for(now: datetime) -> LedgerEntry:
            return LedgerEntry(
                kind=LedgerEntryKind.CONTRIBUTION,
                amount=request.amount,
                idempotency_key=contribution_key(contribution.contribution_id),
                memo=build_contribution_memo(request.partner, request.description),
                recorded_at=now,
            )

        account = self._adjuster.write_account(
            build, entry_for=entry_for, contribution=contribution,
        )
        logger.info(
            f"{request.partner.value} contributed {request.amount}; "
            f"cash on hand {account.cash_on_hand}"
        )
        return contribution

    def record_partner_purchase(
        self, request: PurchaseAssignRequest,
    ) -> Optional[Contribution]:
        """
        A partner paid for an item personally. Raises their investment;
        cash on hand does not move because the money never passed
        through the business.

        Returns None when the item already has a contribution.
        """
        rejection = reference_not_recorded_policy(
            request.reference, self._store.has_contribution_for,
        )
        if rejection is not None:
            logger.debug(rejection.message)
            return None

        contribution = Contribution(
            partner=request.partner,
            amount=request.amount,
            contributed_on=request.contributed_on,
            description=request.description or f"Purchase: {request.reference}",
            reference=request.reference,
        )

        def build(current: CapitalAccount, now: datetime) -> CapitalAccount:
            return current.with_investment(request.partner, request.amount, now)

        try:
            self._adjuster.write_account(build, contribution=contribution)
        except DuplicateLedgerEntry:
            logger.debug(
                f"Item {request.reference} contribution recorded concurrently"
            )
            return None
        logger.info(
            f"{request.partner.value} investment +{request.amount} "
            f"for item {request.reference}"
        )
        return contribution

    def list_contributions(self) -> List[Contribution]:
        return self._store.list_contributions()
