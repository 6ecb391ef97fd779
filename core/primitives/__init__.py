"""
Closet Ledger Core Primitives
==============================
Pure Python building blocks shared by the engines and projections:

    money    - cent-quantized Decimal helpers
    item     - InventoryItem snapshot, ItemStatus, PaidBy
    capital  - CapitalAccount, LedgerEntry, Contribution

No Django imports here; stores translate to and from these types.
"""
