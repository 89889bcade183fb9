"""
Pantry inventory.

Models:
- InventoryItem (one row per item, keyed by its name)
"""
