"""Normalize free-text ingredient data and perform unit algebra."""

from pantryplan.normalize.ingredients import (
    UNKNOWN_INGREDIENT,
    IngredientRecord,
    parse_ingredient_line,
    parse_ingredient_lines,
)
from pantryplan.normalize.quantity import ParsedQuantity, parse_quantity_text
from pantryplan.normalize.text import normalize_text, parse_fraction
from pantryplan.normalize.units import (
    ConversionResult,
    UnitConversionFact,
    UnitFamily,
    canonical_unit,
    conversion_fact,
    convert_qty,
    from_base,
    to_base,
    unit_family,
)

__all__ = [
    "UNKNOWN_INGREDIENT",
    "ConversionResult",
    "IngredientRecord",
    "ParsedQuantity",
    "UnitConversionFact",
    "UnitFamily",
    "canonical_unit",
    "conversion_fact",
    "convert_qty",
    "from_base",
    "normalize_text",
    "parse_fraction",
    "parse_ingredient_line",
    "parse_ingredient_lines",
    "parse_quantity_text",
    "to_base",
    "unit_family",
]
