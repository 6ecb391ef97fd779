"""
Closet Ledger Store
====================
Item Store and Capital Account persistence.

Import the in-memory stores from core.ledger_store.memory and the
Django stores from core.ledger_store.repository; this package root
stays import-light so pure code never loads Django models.
"""
