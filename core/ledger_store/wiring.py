"""
Closet Ledger Store - Service Wiring
======================================
Constructs an InventoryService over the Django stores for management
commands and other in-process callers.

Imports are deferred so core.ledger_store loads without the engines.
"""

from __future__ import annotations

from typing import Optional

from core.config.ledger import load_ledger_config
from core.time.clock import Clock, get_default_clock


def build_inventory_service(*, clock: Optional[Clock] = None):
    from core.ledger_store.repository import (
        DjangoCapitalAccountStore,
        DjangoItemStore,
    )
    from engines.inventory.services import InventoryService

    return InventoryService(
        item_store=DjangoItemStore(),
        account_store=DjangoCapitalAccountStore(),
        clock=clock or get_default_clock(),
        config=load_ledger_config(),
    )
