"""Pantry stock bookkeeping."""

from pantryplan.pantry.engine import PantryEngine, format_quantity, resolve_row_quantity
from pantryplan.pantry.storage import (
    PantryRow,
    PantryRowStore,
    PantryStorageError,
    QuantitySource,
    SqlPantryStore,
    StorageCapability,
    Structured,
    TextOnly,
    detect_storage_capability,
)

__all__ = [
    "PantryEngine",
    "PantryRow",
    "PantryRowStore",
    "PantryStorageError",
    "QuantitySource",
    "SqlPantryStore",
    "StorageCapability",
    "Structured",
    "TextOnly",
    "detect_storage_capability",
    "format_quantity",
    "resolve_row_quantity",
]
