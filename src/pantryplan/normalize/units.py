"""Unit canonicalization and exact same-family conversion."""

import math
import re
from dataclasses import dataclass

from pantryplan.logging_config import get_logger

logger = get_logger(__name__)


# =============================================================================
# Unit Tables
# =============================================================================

# Aliases and plurals -> canonical token
UNIT_ALIASES: dict[str, str] = {
    # Volume
    "teaspoon": "tsp",
    "teaspoons": "tsp",
    "tsp": "tsp",
    "tsps": "tsp",
    "tablespoon": "tbsp",
    "tablespoons": "tbsp",
    "tbsp": "tbsp",
    "tbsps": "tbsp",
    "tbs": "tbsp",
    "cup": "cup",
    "cups": "cup",
    "c": "cup",
    # Metric liquid
    "milliliter": "ml",
    "milliliters": "ml",
    "millilitre": "ml",
    "millilitres": "ml",
    "ml": "ml",
    "liter": "l",
    "liters": "l",
    "litre": "l",
    "litres": "l",
    "l": "l",
    # Mass
    "gram": "g",
    "grams": "g",
    "g": "g",
    "kilogram": "kg",
    "kilograms": "kg",
    "kg": "kg",
    "ounce": "oz",
    "ounces": "oz",
    "oz": "oz",
    "pound": "lb",
    "pounds": "lb",
    "lb": "lb",
    "lbs": "lb",
    # Count
    "clove": "clove",
    "cloves": "clove",
    "can": "can",
    "cans": "can",
    "jar": "jar",
    "jars": "jar",
    "package": "package",
    "packages": "package",
    "pkg": "package",
    "pkgs": "package",
    "bunch": "bunch",
    "bunches": "bunch",
    "slice": "slice",
    "slices": "slice",
    "piece": "piece",
    "pieces": "piece",
    "pinch": "pinch",
    "pinches": "pinch",
    "dash": "dash",
    "dashes": "dash",
    "whole": "whole",
    "medium": "medium",
    "large": "large",
    "small": "small",
}

# Family tag -> (base unit, canonical unit -> multiplier into base)
FAMILY_FACTORS: dict[str, tuple[str, dict[str, float]]] = {
    "volume": ("tsp", {"tsp": 1.0, "tbsp": 3.0, "cup": 48.0}),
    "metric-liquid": ("ml", {"ml": 1.0, "l": 1000.0}),
    "mass": ("g", {"g": 1.0, "kg": 1000.0, "oz": 28.349523125, "lb": 453.59237}),
}

COUNT_FAMILY = "count"

_UNIT_PUNCTUATION_RE = re.compile(r"[.,;:()\[\]{}]")


@dataclass(frozen=True)
class UnitFamily:
    """Family tag and base unit of a canonical unit; empty family means unconvertible."""

    family: str
    base: str

    @property
    def is_known(self) -> bool:
        return bool(self.family)


@dataclass(frozen=True)
class ConversionResult:
    """Outcome of a conversion; callers must check ``ok`` before trusting ``qty``."""

    ok: bool
    qty: float | None = None
    unit: str = ""


@dataclass(frozen=True)
class UnitConversionFact:
    """Directed conversion such that ``qty_to = qty_from * factor``."""

    from_unit: str
    to_unit: str
    factor: float

    def apply(self, qty: float) -> float:
        return qty * self.factor


_FAILED = ConversionResult(ok=False)


# =============================================================================
# Canonicalization
# =============================================================================


def canonical_unit(unit: str | None) -> str:
    """
    Map a unit token to its canonical form.

    Lowercases, strips ``.,;:()[]{}`` and resolves aliases; unknown tokens
    pass through so they act as count units of themselves.
    """
    token = str(unit or "").strip().lower()
    if not token:
        return ""
    token = _UNIT_PUNCTUATION_RE.sub("", token).strip()
    if not token:
        return ""
    return UNIT_ALIASES.get(token, token)


def unit_family(unit: str | None) -> UnitFamily:
    """Classify a unit into its family and base unit."""
    cu = canonical_unit(unit)
    if not cu:
        return UnitFamily("", "")
    for family, (base, factors) in FAMILY_FACTORS.items():
        if cu in factors:
            return UnitFamily(family, base)
    return UnitFamily(COUNT_FAMILY, cu)


def _factor(cu: str, family: UnitFamily) -> float | None:
    if family.family == COUNT_FAMILY:
        return 1.0 if cu == family.base else None
    _, factors = FAMILY_FACTORS.get(family.family, ("", {}))
    return factors.get(cu)


# =============================================================================
# Conversion
# =============================================================================


def to_base(qty: float | None, unit: str | None) -> ConversionResult:
    """Express a quantity in its family's base unit."""
    if qty is None or not math.isfinite(qty):
        return _FAILED
    cu = canonical_unit(unit)
    family = unit_family(cu)
    if not family.is_known:
        return _FAILED
    factor = _factor(cu, family)
    if factor is None:
        return _FAILED
    return ConversionResult(ok=True, qty=qty * factor, unit=family.base)


def from_base(base_qty: float | None, unit: str | None) -> ConversionResult:
    """Express a base-unit quantity in ``unit``."""
    if base_qty is None or not math.isfinite(base_qty):
        return _FAILED
    cu = canonical_unit(unit)
    family = unit_family(cu)
    if not family.is_known:
        return _FAILED
    factor = _factor(cu, family)
    if factor is None:
        return _FAILED
    return ConversionResult(ok=True, qty=base_qty / factor, unit=cu)


def convert_qty(qty: float | None, from_unit: str | None, to_unit: str | None) -> ConversionResult:
    """
    Convert a quantity between two units of the same family.

    Count units only convert to themselves; a cup is never turned into grams
    even where a density would make it possible.
    """
    fu = canonical_unit(from_unit)
    tu = canonical_unit(to_unit)
    if not fu or not tu:
        return _FAILED

    from_family = unit_family(fu)
    to_family = unit_family(tu)
    if not from_family.is_known or not to_family.is_known:
        return _FAILED
    if from_family != to_family:
        logger.debug(f"Refusing conversion {fu} -> {tu}: {from_family.family} vs {to_family.family}")
        return _FAILED

    base = to_base(qty, fu)
    if not base.ok:
        return _FAILED
    out = from_base(base.qty, tu)
    if not out.ok:
        return _FAILED
    return ConversionResult(ok=True, qty=out.qty, unit=tu)


def conversion_fact(from_unit: str | None, to_unit: str | None) -> UnitConversionFact | None:
    """Return the exact conversion factor between two same-family units."""
    result = convert_qty(1.0, from_unit, to_unit)
    if not result.ok:
        return None
    return UnitConversionFact(canonical_unit(from_unit), canonical_unit(to_unit), result.qty)


def is_convertible(from_unit: str | None, to_unit: str | None) -> bool:
    """Check whether two units may be used together in inventory arithmetic."""
    return convert_qty(1.0, from_unit, to_unit).ok
