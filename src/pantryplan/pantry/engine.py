"""Deterministic pantry deduction and restock."""

import math

from pantryplan.config import settings
from pantryplan.logging_config import get_logger
from pantryplan.normalize.quantity import parse_quantity_text
from pantryplan.normalize.units import canonical_unit, convert_qty, is_convertible
from pantryplan.pantry.storage import PantryRow, PantryRowStore, Structured, new_item_id

logger = get_logger(__name__)

# Remaining need below this is float noise, not stock to allocate.
_EPSILON = 1e-9


def format_quantity(value: float, decimals: int = 4) -> str:
    """Render a quantity for display: "2", "0.5", "1.3333"."""
    rounded = round(value, decimals)
    if rounded == int(rounded):
        return str(int(rounded))
    return str(rounded)


def resolve_row_quantity(row: PantryRow) -> tuple[float | None, str]:
    """
    Work out a row's current quantity and canonical unit.

    Structured rows use their columns; rows without a number (text-only
    layout, or written before the upgrade) are reparsed from the display text.
    """
    number: float | None = None
    unit = ""
    if isinstance(row.source, Structured):
        number = row.source.number
        unit = row.source.unit or ""

    if number is None or not math.isfinite(number):
        parsed = parse_quantity_text(row.quantity_text)
        number = parsed.quantity_number
        unit = unit or parsed.unit
    elif not unit:
        unit = parse_quantity_text(row.quantity_text).unit

    return number, canonical_unit(unit)


def _coerce_amount(value) -> float | None:
    try:
        amount = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(amount) or amount <= 0:
        return None
    return amount


class PantryEngine:
    """
    Removes and restores pantry stock for planned meals.

    Deduction may span several rows in allocation order; restock only ever
    touches one row, the first whose unit fits, or creates one.
    """

    def __init__(
        self,
        store: PantryRowStore,
        decimals: int | None = None,
        id_prefix: str | None = None,
    ):
        self.store = store
        self.decimals = settings.quantity_decimals if decimals is None else decimals
        self.id_prefix = id_prefix or settings.pantry_item_id_prefix

    def _display_unit(self, row: PantryRow, unit: str) -> str:
        """Keep the unit the user typed, e.g. "cups" rather than "cup"."""
        parsed_unit = parse_quantity_text(row.quantity_text).unit
        structured_unit = row.source.unit if isinstance(row.source, Structured) else ""
        return parsed_unit or structured_unit or unit

    def _write(self, row: PantryRow, quantity: float, unit: str) -> str:
        text = f"{format_quantity(quantity, self.decimals)} {self._display_unit(row, unit)}".strip()
        self.store.update_quantity(row.item_id, quantity, unit, text)
        return text

    def deduct_from_pantry(self, normalized_key: str, required_qty: float, base_unit: str) -> float:
        """
        Remove ``required_qty`` of ``base_unit`` from rows matching the key.

        Returns:
            The amount actually deducted, in ``base_unit``. Less than the
            request when stock runs short; that is not an error.
        """
        key = str(normalized_key or "").strip().lower()
        need = _coerce_amount(required_qty)
        bu = canonical_unit(base_unit)
        if not key or need is None or not bu:
            logger.debug(f"Skipping deduction: key={key!r}, qty={required_qty!r}, unit={base_unit!r}")
            return 0.0

        remaining = need
        deducted = 0.0

        for row in self.store.find_by_key(key):
            if remaining <= _EPSILON:
                break

            current, unit = resolve_row_quantity(row)
            if current is None or current <= 0 or not unit:
                continue

            available = convert_qty(current, unit, bu)
            if not available.ok or available.qty <= 0:
                logger.debug(f"Row {row.item_id} ({current} {unit}) cannot supply {bu}")
                continue

            take = min(available.qty, remaining)
            left_base = available.qty - take
            left = convert_qty(left_base, bu, unit)
            left_qty = max(0.0, left.qty) if left.ok else 0.0

            text = self._write(row, left_qty, unit)
            logger.debug(
                f"Deducted {take} {bu} of {key} from {row.item_id}: "
                f"{current} {unit} -> {text}"
            )

            deducted += take
            remaining -= take

        if deducted < need:
            logger.info(f"Pantry short on {key}: needed {need} {bu}, deducted {deducted} {bu}")
        return deducted

    def add_back_to_pantry(self, normalized_key: str, qty: float, base_unit: str) -> None:
        """Return ``qty`` of ``base_unit`` to the first matching row whose unit fits."""
        key = str(normalized_key or "").strip().lower()
        amount = _coerce_amount(qty)
        bu = canonical_unit(base_unit)
        if not key or amount is None or not bu:
            logger.debug(f"Skipping restock: key={key!r}, qty={qty!r}, unit={base_unit!r}")
            return

        rows = self.store.find_by_key(key)
        if not rows:
            self._insert(key, amount, bu)
            return

        target = self._restock_target(rows, bu)
        if target is None:
            logger.warning(
                f"Cannot restock {amount} {bu} of {key} into any of {len(rows)} rows; "
                f"creating a separate row"
            )
            self._insert(key, amount, bu)
            return

        row, current, row_unit = target
        current_base = 0.0
        if current is not None and current > 0:
            current_base = convert_qty(current, row_unit, bu).qty

        restored = convert_qty(current_base + amount, bu, row_unit)
        new_qty = round(restored.qty, self.decimals)
        text = self._write(row, new_qty, row_unit)
        logger.debug(f"Restocked {amount} {bu} of {key} into {row.item_id}: now {text}")

    @staticmethod
    def _restock_target(
        rows: list[PantryRow], unit: str
    ) -> tuple[PantryRow, float | None, str] | None:
        """First row in allocation order whose unit can take ``unit``; unitless rows adopt it."""
        for row in rows:
            current, row_unit = resolve_row_quantity(row)
            row_unit = row_unit or unit
            if is_convertible(row_unit, unit):
                return row, current, row_unit
            logger.debug(f"Row {row.item_id} measured in {row_unit} cannot take {unit}")
        return None

    def _insert(self, key: str, amount: float, unit: str) -> None:
        item_id = new_item_id(self.id_prefix)
        quantity = round(amount, self.decimals)
        text = f"{format_quantity(amount, self.decimals)} {unit}".strip()
        self.store.insert_row(
            item_id=item_id,
            name=key,
            name_lower=key,
            quantity_number=quantity,
            unit=unit,
            quantity_text=text,
        )
        logger.info(f"Created pantry row {item_id} for {key}: {text}")
