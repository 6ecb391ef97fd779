"""
Closet Ledger Store - App Configuration
========================================
Django app holding inventory items, the capital account singleton,
its append-only ledger entries and partner contributions.

This app:
- Persists item snapshots
- Performs version-checked capital account writes
- Enforces one ledger entry per idempotency key

This app does NOT:
- Classify status transitions
- Decide ledger deltas
- Compute financial summaries
"""

from django.apps import AppConfig


class LedgerStoreConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "core.ledger_store"
    label = "ledger_store"
    verbose_name = "Closet Ledger Store"
