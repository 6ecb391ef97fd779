"""
Closet Ledger Store - Django Models
=====================================
Persistent rows behind the ItemStore and CapitalAccountStore
contracts.

RULES (NON-NEGOTIABLE):
- capital_accounts holds exactly one row (singleton_key = 1)
- capital_accounts.version increments on every write; writes are
  conditional on the version that was read
- ledger_entries rows are never updated or deleted
- ledger_entries.idempotency_key is unique: a resubmitted transition
  cannot be credited twice

This file contains NO business logic.
"""

import uuid

from django.db import models


# ══════════════════════════════════════════════════════════════
# CHOICES
# ══════════════════════════════════════════════════════════════

class ItemStatusChoice(models.TextChoices):
    IN_CLOSET = "in-closet", "In closet"
    LISTED = "listed", "Listed"
    FOR_SALE = "for-sale", "For sale"
    OTW = "otw", "On the way"
    SOLD = "sold", "Sold"
    TRADED = "traded", "Traded"
    SCAMMED = "scammed", "Scammed"
    REFUNDED = "refunded", "Refunded"
    ARCHIVE_HOLD = "archive-hold", "Archive hold"


class PaidByChoice(models.TextChoices):
    PARTNER_A = "PartnerA", "Partner A"
    PARTNER_B = "PartnerB", "Partner B"
    SHARED = "Shared", "Shared"


class LedgerEntryKindChoice(models.TextChoices):
    PURCHASE = "PURCHASE", "Purchase"
    SALE = "SALE", "Sale"
    TRADE = "TRADE", "Trade"
    REFUND = "REFUND", "Refund"
    CONTRIBUTION = "CONTRIBUTION", "Contribution"


def _money(**kwargs):
    return models.DecimalField(max_digits=12, decimal_places=2, **kwargs)


# ══════════════════════════════════════════════════════════════
# INVENTORY ITEM
# ══════════════════════════════════════════════════════════════

class InventoryItemRecord(models.Model):

    item_id = models.CharField(max_length=64, primary_key=True)
    created_at = models.DateTimeField()

    # ── Descriptive ───────────────────────────────────────────
    name = models.CharField(max_length=255)
    brand = models.CharField(max_length=255, null=True, blank=True)
    category = models.CharField(max_length=64, default="other")
    size = models.CharField(max_length=64, null=True, blank=True)

    # ── Financial ─────────────────────────────────────────────
    acquisition_cost = _money()
    asking_price = _money(null=True, blank=True)
    lowest_acceptable_price = _money(null=True, blank=True)
    goal_price = _money(null=True, blank=True)
    sale_price = _money(null=True, blank=True)

    # ── Lifecycle ─────────────────────────────────────────────
    status = models.CharField(
        max_length=20,
        choices=ItemStatusChoice.choices,
        default=ItemStatusChoice.IN_CLOSET,
    )
    date_added = models.DateField(null=True, blank=True)
    date_sold = models.DateField(null=True, blank=True)

    # ── Ownership ─────────────────────────────────────────────
    paid_by = models.CharField(
        max_length=20,
        choices=PaidByChoice.choices,
        default=PaidByChoice.SHARED,
    )

    # ── Trade (weak reference, no FK) ─────────────────────────
    traded_for_item_id = models.CharField(max_length=64, null=True, blank=True)
    trade_cash_difference = _money(null=True, blank=True)

    # ── Event tagging ─────────────────────────────────────────
    in_convention = models.BooleanField(default=False)
    ever_in_convention = models.BooleanField(default=False)

    # ── Listing details ───────────────────────────────────────
    platform = models.CharField(max_length=32, default="none")
    platform_sold = models.CharField(max_length=32, null=True, blank=True)
    source = models.CharField(max_length=255, null=True, blank=True)
    notes = models.TextField(blank=True, default="")
    image_url = models.URLField(max_length=1024, null=True, blank=True)
    priority_sale = models.BooleanField(default=False)

    class Meta:
        app_label = "ledger_store"
        db_table = "inventory_items"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["status"], name="idx_item_status"),
            models.Index(fields=["in_convention"], name="idx_item_in_convention"),
        ]

    def __str__(self):
        return f"{self.name} ({self.status})"


# ══════════════════════════════════════════════════════════════
# CAPITAL ACCOUNT (singleton)
# ══════════════════════════════════════════════════════════════

class CapitalAccountRecord(models.Model):

    SINGLETON_KEY = 1

    singleton_key = models.PositiveSmallIntegerField(
        primary_key=True, default=SINGLETON_KEY,
    )
    cash_on_hand = _money(default=0)
    partner_a_investment = _money(default=0)
    partner_b_investment = _money(default=0)
    updated_at = models.DateTimeField(null=True, blank=True)
    version = models.PositiveIntegerField(default=0)

    class Meta:
        app_label = "ledger_store"
        db_table = "capital_accounts"


# ══════════════════════════════════════════════════════════════
# LEDGER ENTRY (append-only)
# ══════════════════════════════════════════════════════════════

class LedgerEntryRecord(models.Model):

    entry_id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    kind = models.CharField(max_length=20, choices=LedgerEntryKindChoice.choices)
    amount = _money()
    idempotency_key = models.CharField(max_length=255, unique=True)
    item_id = models.CharField(max_length=64, null=True, blank=True)
    memo = models.CharField(max_length=255, blank=True, default="")
    recorded_at = models.DateTimeField()
    # account version produced by the write that appended this entry
    sequence = models.PositiveBigIntegerField(unique=True)

    class Meta:
        app_label = "ledger_store"
        db_table = "ledger_entries"
        ordering = ["sequence"]


# ══════════════════════════════════════════════════════════════
# PARTNER CONTRIBUTION
# ══════════════════════════════════════════════════════════════

class ContributionRecord(models.Model):

    contribution_id = models.UUIDField(
        primary_key=True, default=uuid.uuid4, editable=False,
    )
    partner = models.CharField(max_length=20, choices=PaidByChoice.choices)
    amount = _money()
    contributed_on = models.DateField()
    description = models.CharField(max_length=255, blank=True, default="")
    reference = models.CharField(max_length=64, null=True, blank=True, unique=True)

    class Meta:
        app_label = "ledger_store"
        db_table = "capital_contributions"
        ordering = ["-contributed_on"]
