"""Pantry row store: schema detection and SQLAlchemy-backed row access."""

import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import Connection, Engine, func, inspect, insert, or_, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from pantryplan.logging_config import get_logger
from pantryplan.models import PantryItem, legacy_pantry_items

logger = get_logger(__name__)

STRUCTURED_COLUMNS = frozenset({"quantity_number", "unit"})


class PantryStorageError(Exception):
    """Raised when the pantry row store cannot be read or written."""

    def __init__(self, message: str, operation: str | None = None):
        super().__init__(message)
        self.operation = operation


# =============================================================================
# Capability and Quantity Source
# =============================================================================


@dataclass(frozen=True)
class StorageCapability:
    """What the pantry table can hold; computed once and passed to the store."""

    structured_quantity: bool
    table_name: str = PantryItem.__tablename__


def detect_storage_capability(
    bind: Engine | Connection,
    table_name: str = PantryItem.__tablename__,
) -> StorageCapability:
    """Inspect the pantry table for the structured quantity/unit columns."""
    try:
        columns = {column["name"] for column in inspect(bind).get_columns(table_name)}
    except SQLAlchemyError as e:
        raise PantryStorageError(f"Cannot inspect table {table_name}: {e}", "inspect") from e

    capability = StorageCapability(
        structured_quantity=STRUCTURED_COLUMNS <= columns,
        table_name=table_name,
    )
    logger.info(
        f"Pantry storage detected: table={table_name}, "
        f"structured_quantity={capability.structured_quantity}"
    )
    return capability


@dataclass(frozen=True)
class Structured:
    """Quantity held in dedicated number/unit columns."""

    number: float | None
    unit: str


@dataclass(frozen=True)
class TextOnly:
    """Quantity only available as the display string."""

    text: str


QuantitySource = Structured | TextOnly


@dataclass
class PantryRow:
    """A pantry row as seen by the deduction and restock engine."""

    item_id: str
    name: str
    name_lower: str | None
    quantity_text: str
    source: QuantitySource


def new_item_id(prefix: str) -> str:
    """Generate a stable pantry row id such as ``pan_3f9a0c1b2d4e``."""
    return f"{prefix}_{uuid.uuid4().hex[:12]}"


# =============================================================================
# Row Store
# =============================================================================


class PantryRowStore(ABC):
    """Interface the pantry engine needs from persistent storage."""

    @property
    @abstractmethod
    def capability(self) -> StorageCapability:
        """Storage capability of the underlying table."""
        pass

    @abstractmethod
    def find_by_key(self, key: str) -> list[PantryRow]:
        """
        Return rows whose lowercased name equals ``key``.

        Rows are ordered by their matching name and then by id; this order is
        the allocation order and must be the same on every call.
        """
        pass

    @abstractmethod
    def update_quantity(
        self,
        item_id: str,
        quantity_number: float,
        unit: str,
        quantity_text: str,
    ) -> None:
        """Write a new quantity; text-only stores keep just the display text."""
        pass

    @abstractmethod
    def insert_row(
        self,
        item_id: str,
        name: str,
        name_lower: str,
        quantity_number: float,
        unit: str,
        quantity_text: str,
    ) -> None:
        """Create a pantry row."""
        pass


class SqlPantryStore(PantryRowStore):
    """Pantry row store on top of a SQLAlchemy session.

    The store never commits; the caller owns the transaction.
    """

    def __init__(self, session: Session, capability: StorageCapability):
        self.session = session
        self._capability = capability
        self.table = PantryItem.__table__ if capability.structured_quantity else legacy_pantry_items

    @classmethod
    def for_session(cls, session: Session) -> "SqlPantryStore":
        """Build a store, detecting the capability from the session's connection."""
        return cls(session, detect_storage_capability(session.connection()))

    @property
    def capability(self) -> StorageCapability:
        return self._capability

    def _to_row(self, record) -> PantryRow:
        if self._capability.structured_quantity:
            source: QuantitySource = Structured(
                number=record["quantity_number"],
                unit=record["unit"] or "",
            )
        else:
            source = TextOnly(text=record["quantity_text"] or "")
        return PantryRow(
            item_id=record["item_id"],
            name=record["name"] or "",
            name_lower=record["name_lower"],
            quantity_text=record["quantity_text"] or "",
            source=source,
        )

    def find_by_key(self, key: str) -> list[PantryRow]:
        t = self.table
        # Older rows may lack name_lower, so match on the trimmed name as well
        lowered_name = func.lower(func.trim(t.c.name))
        stmt = (
            select(t)
            .where(or_(t.c.name_lower == key, lowered_name == key))
            .order_by(func.coalesce(t.c.name_lower, lowered_name).asc(), t.c.item_id.asc())
        )
        try:
            records = self.session.execute(stmt).mappings().all()
        except SQLAlchemyError as e:
            raise PantryStorageError(f"Failed to look up pantry rows for {key!r}: {e}", "find") from e
        return [self._to_row(record) for record in records]

    def update_quantity(
        self,
        item_id: str,
        quantity_number: float,
        unit: str,
        quantity_text: str,
    ) -> None:
        values: dict = {"quantity_text": quantity_text, "updated_at": datetime.utcnow()}
        if self._capability.structured_quantity:
            values["quantity_number"] = quantity_number
            values["unit"] = unit

        stmt = update(self.table).where(self.table.c.item_id == item_id).values(**values)
        try:
            self.session.execute(stmt)
        except SQLAlchemyError as e:
            raise PantryStorageError(f"Failed to update pantry row {item_id}: {e}", "update") from e

    def insert_row(
        self,
        item_id: str,
        name: str,
        name_lower: str,
        quantity_number: float,
        unit: str,
        quantity_text: str,
    ) -> None:
        values: dict = {
            "item_id": item_id,
            "name": name,
            "name_lower": name_lower,
            "quantity_text": quantity_text,
            "store_id": "",
            "notes": "",
            "updated_at": datetime.utcnow(),
        }
        if self._capability.structured_quantity:
            values["quantity_number"] = quantity_number
            values["unit"] = unit

        try:
            self.session.execute(insert(self.table).values(**values))
        except SQLAlchemyError as e:
            raise PantryStorageError(f"Failed to insert pantry row {item_id}: {e}", "insert") from e
