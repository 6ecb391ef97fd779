"""
Closet Ledger Store - Django Repository
=========================================
ORM-backed ItemStore and CapitalAccountStore.

Capital account writes are conditional updates:

    UPDATE capital_accounts SET ..., version = v + 1
    WHERE singleton_key = 1 AND version = v

run inside transaction.atomic() together with the ledger entry
insert, so a balance change and its history row land together or
not at all. Zero rows updated means another writer got there first.

Backend failures surface as StoreUnavailable; raw database
exceptions never reach engine code.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from decimal import Decimal
from typing import Iterator, List, Optional

from django.db import DatabaseError, IntegrityError, transaction

from core.ledger_store.errors import (
    DuplicateLedgerEntry,
    ItemNotFound,
    StoreUnavailable,
)
from core.ledger_store.models import (
    CapitalAccountRecord,
    ContributionRecord,
    InventoryItemRecord,
    LedgerEntryRecord,
)
from core.primitives.capital import (
    CapitalAccount,
    Contribution,
    LedgerEntry,
    LedgerEntryKind,
)
from core.primitives.item import InventoryItem, ItemStatus, PaidBy
from core.primitives.money import quantize

logger = logging.getLogger("closet.store")

_ITEM_COLUMNS = (
    "name",
    "brand",
    "category",
    "size",
    "acquisition_cost",
    "asking_price",
    "lowest_acceptable_price",
    "goal_price",
    "sale_price",
    "date_added",
    "date_sold",
    "traded_for_item_id",
    "trade_cash_difference",
    "in_convention",
    "ever_in_convention",
    "platform",
    "platform_sold",
    "source",
    "notes",
    "image_url",
    "priority_sale",
)


@contextmanager
def _backend_errors(operation: str) -> Iterator[None]:
    try:
        yield
    except DatabaseError as exc:
        logger.warning(f"{operation} failed at the database: {exc}")
        raise StoreUnavailable(f"{operation} failed: {exc}") from exc


# ══════════════════════════════════════════════════════════════
# ROW MAPPING
# ══════════════════════════════════════════════════════════════

def _item_from_row(row: InventoryItemRecord) -> InventoryItem:
    return InventoryItem(
        item_id=row.item_id,
        created_at=row.created_at,
        status=ItemStatus(row.status),
        paid_by=PaidBy(row.paid_by),
        **{name: getattr(row, name) for name in _ITEM_COLUMNS},
    )


def _item_columns(item: InventoryItem) -> dict:
    columns = {name: getattr(item, name) for name in _ITEM_COLUMNS}
    columns["status"] = item.status.value
    columns["paid_by"] = item.paid_by.value
    return columns


def _account_from_row(row: CapitalAccountRecord) -> CapitalAccount:
    return CapitalAccount(
        cash_on_hand=quantize(Decimal(row.cash_on_hand)),
        partner_a_investment=quantize(Decimal(row.partner_a_investment)),
        partner_b_investment=quantize(Decimal(row.partner_b_investment)),
        updated_at=row.updated_at,
        version=row.version,
    )


def _entry_from_row(row: LedgerEntryRecord) -> LedgerEntry:
    return LedgerEntry(
        entry_id=row.entry_id,
        kind=LedgerEntryKind(row.kind),
        amount=row.amount,
        idempotency_key=row.idempotency_key,
        item_id=row.item_id,
        memo=row.memo,
        recorded_at=row.recorded_at,
    )


def _contribution_from_row(row: ContributionRecord) -> Contribution:
    return Contribution(
        contribution_id=row.contribution_id,
        partner=PaidBy(row.partner),
        amount=row.amount,
        contributed_on=row.contributed_on,
        description=row.description,
        reference=row.reference,
    )


# ══════════════════════════════════════════════════════════════
# ITEM STORE
# ══════════════════════════════════════════════════════════════

class DjangoItemStore:

    def create(self, item: InventoryItem) -> InventoryItem:
        with _backend_errors("item create"):
            if InventoryItemRecord.objects.filter(pk=item.item_id).exists():
                raise ValueError(f"Item '{item.item_id}' already exists.")
            with transaction.atomic():
                InventoryItemRecord.objects.create(
                    item_id=item.item_id,
                    created_at=item.created_at,
                    **_item_columns(item),
                )
        return item

    def get(self, item_id: str) -> InventoryItem:
        with _backend_errors("item read"):
            row = InventoryItemRecord.objects.filter(pk=item_id).first()
        if row is None:
            raise ItemNotFound(item_id)
        return _item_from_row(row)

    def update(self, item: InventoryItem) -> InventoryItem:
        with _backend_errors("item update"):
            updated = InventoryItemRecord.objects.filter(
                pk=item.item_id,
            ).update(**_item_columns(item))
        if updated == 0:
            raise ItemNotFound(item.item_id)
        return item

    def delete(self, item_id: str) -> None:
        with _backend_errors("item delete"):
            deleted, _ = InventoryItemRecord.objects.filter(pk=item_id).delete()
        if deleted == 0:
            raise ItemNotFound(item_id)

    def list_all(self) -> List[InventoryItem]:
        with _backend_errors("item scan"):
            rows = list(InventoryItemRecord.objects.order_by("-created_at"))
        return [_item_from_row(row) for row in rows]


# ══════════════════════════════════════════════════════════════
# CAPITAL ACCOUNT STORE
# ══════════════════════════════════════════════════════════════

class DjangoCapitalAccountStore:

    def _row(self) -> CapitalAccountRecord:
        row, _ = CapitalAccountRecord.objects.get_or_create(
            pk=CapitalAccountRecord.SINGLETON_KEY,
        )
        return row

    def read(self) -> CapitalAccount:
        with _backend_errors("capital account read"):
            return _account_from_row(self._row())

    def compare_and_set(
        self,
        expected_version: int,
        account: CapitalAccount,
        *,
        entry: Optional[LedgerEntry] = None,
        contribution: Optional[Contribution] = None,
    ) -> bool:
        duplicate_key = None
        if entry is not None:
            duplicate_key = entry.idempotency_key
        elif contribution is not None and contribution.reference is not None:
            duplicate_key = f"contribution:{contribution.reference}"

        try:
            with transaction.atomic():
                self._row()
                if entry is not None and LedgerEntryRecord.objects.filter(
                    idempotency_key=entry.idempotency_key,
                ).exists():
                    raise DuplicateLedgerEntry(entry.idempotency_key)
                if (
                    contribution is not None
                    and contribution.reference is not None
                    and ContributionRecord.objects.filter(
                        reference=contribution.reference,
                    ).exists()
                ):
                    raise DuplicateLedgerEntry(
                        f"contribution:{contribution.reference}"
                    )

                updated = CapitalAccountRecord.objects.filter(
                    pk=CapitalAccountRecord.SINGLETON_KEY,
                    version=expected_version,
                ).update(
                    cash_on_hand=account.cash_on_hand,
                    partner_a_investment=account.partner_a_investment,
                    partner_b_investment=account.partner_b_investment,
                    updated_at=account.updated_at,
                    version=account.version,
                )
                if updated == 0:
                    return False

                if entry is not None:
                    LedgerEntryRecord.objects.create(
                        entry_id=entry.entry_id,
                        kind=entry.kind.value,
                        amount=entry.amount,
                        idempotency_key=entry.idempotency_key,
                        item_id=entry.item_id,
                        memo=entry.memo,
                        recorded_at=entry.recorded_at,
                        sequence=account.version,
                    )
                if contribution is not None:
                    ContributionRecord.objects.create(
                        contribution_id=contribution.contribution_id,
                        partner=contribution.partner.value,
                        amount=contribution.amount,
                        contributed_on=contribution.contributed_on,
                        description=contribution.description,
                        reference=contribution.reference,
                    )
        except IntegrityError as exc:
            if duplicate_key is None:
                raise StoreUnavailable(f"capital account write failed: {exc}") from exc
            raise DuplicateLedgerEntry(duplicate_key) from exc
        except DatabaseError as exc:
            logger.warning(f"capital account write failed at the database: {exc}")
            raise StoreUnavailable(f"capital account write failed: {exc}") from exc
        return True

    def has_entry(self, idempotency_key: str) -> bool:
        with _backend_errors("ledger entry lookup"):
            return LedgerEntryRecord.objects.filter(
                idempotency_key=idempotency_key,
            ).exists()

    def list_entries(self) -> List[LedgerEntry]:
        with _backend_errors("ledger entry scan"):
            rows = list(LedgerEntryRecord.objects.order_by("sequence"))
        return [_entry_from_row(row) for row in rows]

    def list_contributions(self) -> List[Contribution]:
        with _backend_errors("contribution scan"):
            rows = list(ContributionRecord.objects.all())
        return [_contribution_from_row(row) for row in rows]

    def has_contribution_for(self, reference: str) -> bool:
        with _backend_errors("contribution lookup"):
            return ContributionRecord.objects.filter(reference=reference).exists()
