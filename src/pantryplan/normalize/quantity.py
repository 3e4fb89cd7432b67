"""Parser for quantity strings typed into the pantry by hand."""

import re
from dataclasses import dataclass

from pantryplan.normalize.text import parse_fraction

_QUANTITY_TEXT_RE = re.compile(r"^\s*(\d+\s+\d+/\d+|\d+/\d+|\d+(?:\.\d+)?)\s*([^\d].*)?$")
_UNIT_PUNCTUATION_RE = re.compile(r"[.,;:()\[\]{}]")


@dataclass(frozen=True)
class ParsedQuantity:
    """Leading quantity and unit word of a display string."""

    quantity_number: float | None
    unit: str
    raw: str


def parse_quantity_text(text: str | None) -> ParsedQuantity:
    """
    Parse a pantry quantity string such as "1 1/2 cups" or "2 lb".

    Only a single leading quantity is recognised (no ranges). The first word
    after it, minus trailing punctuation, is returned as the unit exactly as
    written so it can be reused for display.
    """
    raw = str(text or "").strip()
    if not raw:
        return ParsedQuantity(None, "", raw)

    match = _QUANTITY_TEXT_RE.match(raw)
    if not match:
        return ParsedQuantity(None, "", raw)

    quantity = parse_fraction(match.group(1))
    rest = (match.group(2) or "").strip()

    unit = ""
    if rest:
        unit = _UNIT_PUNCTUATION_RE.sub("", rest.split()[0]).strip()

    return ParsedQuantity(quantity, unit, raw)
