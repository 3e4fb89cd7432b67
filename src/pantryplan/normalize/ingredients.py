"""Free-text recipe ingredient line parsing."""

import re
from collections.abc import Callable
from dataclasses import dataclass

from pydantic import BaseModel

from pantryplan.logging_config import get_logger
from pantryplan.normalize.text import (
    decode_html_entities,
    normalize_text,
    normalize_unicode,
    parse_fraction,
    strip_fraction_glyphs,
)
from pantryplan.normalize.units import canonical_unit

logger = get_logger(__name__)

UNKNOWN_INGREDIENT = "unknown ingredient"


class IngredientRecord(BaseModel):
    """Structured form of one recipe ingredient line."""

    raw_text: str
    display_name: str
    normalized_key: str
    quantity_number: float | None = None
    quantity_text: str = ""
    unit: str = ""
    notes: str = ""


# =============================================================================
# Patterns
# =============================================================================

# Order matters: mixed fraction, then simple fraction, then decimal/whole
_QUANTITY = r"\d+\s+\d+/\d+|\d+/\d+|\d+(?:\.\d+)?"
_LEADING_QUANTITY_RE = re.compile(rf"^({_QUANTITY})(?:\s*(?:to|-)\s*({_QUANTITY}))?")

# "(16 ounce)", "(10.75 oz)", "(about 2 lbs)" directly after the quantity
_SIZE_WORDS = (
    r"ounces?|oz|pounds?|lbs?|grams?|g|kilograms?|kg|milliliters?|millilitres?|ml"
    r"|liters?|litres?|l|cups?|tablespoons?|tbsp|teaspoons?|tsp"
)
_SIZE_PAREN_RE = re.compile(
    rf"^\(([^()]*?(?<![A-Za-z])(?:{_SIZE_WORDS})(?![A-Za-z])[^()]*)\)\s*", re.IGNORECASE
)

_UNIT_WORDS = (
    r"teaspoons?|tablespoons?|tbsps?|tbs|tsps?|cups?|c|ounces?|oz|pounds?|lbs?|grams?|g"
    r"|kilograms?|kg|milliliters?|millilitres?|ml|liters?|litres?|l|pinch(?:es)?|dash(?:es)?"
    r"|cloves?|cans?|jars?|packages?|pkgs?|bunch(?:es)?|slices?|pieces?|whole|medium|large|small"
)
_UNIT_RE = re.compile(rf"^({_UNIT_WORDS})(?![A-Za-z])\.?\s*", re.IGNORECASE)

_PAREN_NOTE_RE = re.compile(r"\(([^)]+)\)")
_COMMA_NOTE_RE = re.compile(r",\s*(.+)$")
_DASH_NOTE_RE = re.compile(r"\s+-\s+(.+)$")

# Everything but the apostrophe, which may belong to a contraction
_EDGE_CHARS = r"\s.,;:)\]}\-/|&*+=!?<>\"`~#@$%^(\[{"
_LEADING_NOISE_RE = re.compile(rf"^[{_EDGE_CHARS}]+")
_TRAILING_NOISE_RE = re.compile(rf"[{_EDGE_CHARS}]+$")
_LEADING_NOISE_WITH_QUOTE_RE = re.compile(rf"^[{_EDGE_CHARS}']+")
_TRAILING_NOISE_WITH_QUOTE_RE = re.compile(rf"[{_EDGE_CHARS}']+$")
_POSSESSIVE_FRAGMENT_RE = re.compile(r"^'s\s")

_ANY_PAREN_RE = re.compile(r"\([^)]*\)")
_STRAY_PAREN_RE = re.compile(r"[()]")
_WHITESPACE_RE = re.compile(r"\s+")
_ALNUM_RE = re.compile(r"[a-z0-9]")

_FALLBACK_QUANTITY_UNIT_RE = re.compile(
    r"^\s*\d+[\d\s/.\-]*(?:ounce|oz|lb|pound|gram|g|kg|ml|liter|l|cup|tsp|tbsp|can|jar|pkg|package|pack)s?"
    r"(?![A-Za-z])\s*",
    re.IGNORECASE,
)
_FALLBACK_QUANTITY_SIZE_RE = re.compile(r"^\s*\d+[\d\s/.\-]*\s*\([^)]*\)\s*")
_FALLBACK_COMMA_TAIL_RE = re.compile(r",.*$")
_NON_LETTER_RE = re.compile(r"[^a-zA-Z\s]+")


def _collapse(text: str) -> str:
    return _WHITESPACE_RE.sub(" ", text).strip()


# =============================================================================
# Quantity and Unit Extraction
# =============================================================================


def match_leading_quantity(text: str) -> tuple[float | None, str, str]:
    """
    Split a leading quantity or range off the line.

    Returns:
        Tuple of (first quantity as float, quantity text, remainder).
    """
    match = _LEADING_QUANTITY_RE.match(text)
    if not match:
        return None, "", text

    first, second = match.group(1), match.group(2)
    quantity_text = f"{first} to {second}" if second else first
    return parse_fraction(first), quantity_text, text[match.end() :].strip()


def fold_size_parenthetical(quantity_text: str, remainder: str) -> tuple[str, str]:
    """Move a leading "(16 ounce)" size note into the quantity text."""
    match = _SIZE_PAREN_RE.match(remainder)
    if not match:
        return quantity_text, remainder

    size = f"({match.group(1).strip()})"
    quantity_text = f"{quantity_text} {size}" if quantity_text else size
    return quantity_text, remainder[match.end() :].strip()


def match_unit(quantity_text: str, remainder: str) -> tuple[str, str, str]:
    """
    Consume a unit word at the start of the remainder.

    Returns:
        Tuple of (canonical unit, quantity text with the unit appended, remainder).
    """
    match = _UNIT_RE.match(remainder)
    if not match:
        return "", quantity_text, remainder

    surface = match.group(1)
    quantity_text = f"{quantity_text} {surface}" if quantity_text else surface
    return canonical_unit(surface), quantity_text, remainder[match.end() :].strip()


def extract_notes(name: str) -> tuple[str, str]:
    """
    Pull parenthetical, comma and dash notes off an ingredient name.

    Returns:
        Tuple of (name without notes, notes joined by "; ").
    """
    notes: list[str] = []

    while match := _PAREN_NOTE_RE.search(name):
        notes.append(match.group(1).strip())
        name = (name[: match.start()] + " " + name[match.end() :]).strip()

    if match := _COMMA_NOTE_RE.search(name):
        notes.append(match.group(1).strip())
        name = name[: match.start()].strip()

    if match := _DASH_NOTE_RE.search(name):
        notes.append(match.group(1).strip())
        name = name[: match.start()].strip()

    return _collapse(name), "; ".join(notes)


# =============================================================================
# Name Strategies
# =============================================================================


@dataclass(frozen=True)
class NameCandidate:
    """Display name and matching key produced by a name strategy."""

    display_name: str
    normalized_key: str


# (original line, name left after quantity/unit/notes extraction) -> candidate
NameStrategy = Callable[[str, str], NameCandidate | None]


def is_valid_key(key: str) -> bool:
    """A key must hold at least two characters and some letter or digit."""
    return len(key) >= 2 and bool(_ALNUM_RE.search(key))


def _from_key(key: str) -> NameCandidate:
    return NameCandidate(display_name=key[:1].upper() + key[1:], normalized_key=key)


def clean_display_name(name: str) -> str:
    """Trim punctuation noise, a stray "'s " fragment and wrapping quotes."""
    name = _LEADING_NOISE_RE.sub("", name.strip()).strip()
    name = _TRAILING_NOISE_RE.sub("", name).strip()

    if _POSSESSIVE_FRAGMENT_RE.match(name):
        name = name[2:].strip()

    if len(name) >= 2 and name[0] == name[-1] and name[0] in "\"'":
        name = name[1:-1].strip()

    return name


def normalize_key(name: str) -> str:
    """Lowercase, drop leftover parentheticals and unmatched brackets, collapse whitespace."""
    key = _ANY_PAREN_RE.sub(" ", name.lower())
    return _collapse(_STRAY_PAREN_RE.sub(" ", key))


def name_from_remainder(original: str, remainder: str) -> NameCandidate | None:
    """Use what is left of the line once quantity, unit and notes are gone."""
    display_name = clean_display_name(remainder)
    key = normalize_key(display_name)
    if not is_valid_key(key):
        return None
    return NameCandidate(display_name=display_name, normalized_key=key)


def name_from_aggressive_cleanup(original: str, remainder: str) -> NameCandidate | None:
    """Re-derive a name from the raw line, discarding sizes, notes and trailing clauses."""
    text = normalize_unicode(decode_html_entities(original))
    text = strip_fraction_glyphs(text)
    text = _FALLBACK_QUANTITY_UNIT_RE.sub("", text)
    text = _FALLBACK_QUANTITY_SIZE_RE.sub("", text)
    text = _ANY_PAREN_RE.sub("", text)
    text = _FALLBACK_COMMA_TAIL_RE.sub("", text)
    text = _LEADING_NOISE_WITH_QUOTE_RE.sub("", text)
    text = _TRAILING_NOISE_WITH_QUOTE_RE.sub("", text)
    key = _collapse(text).lower()
    if not is_valid_key(key):
        return None
    return _from_key(key)


def name_from_letters(original: str, remainder: str) -> NameCandidate | None:
    """Keep only the letters of the raw line."""
    key = _collapse(_NON_LETTER_RE.sub(" ", original)).lower()
    if not key:
        return None
    return _from_key(key)


def unknown_name(original: str, remainder: str) -> NameCandidate:
    """Last resort so the matching key is never empty."""
    return _from_key(UNKNOWN_INGREDIENT)


NAME_STRATEGIES: list[NameStrategy] = [
    name_from_remainder,
    name_from_aggressive_cleanup,
    name_from_letters,
    unknown_name,
]


def resolve_name(original: str, remainder: str) -> NameCandidate:
    """Run the name strategies in order until one produces a usable key."""
    for strategy in NAME_STRATEGIES:
        candidate = strategy(original, remainder)
        if candidate is not None:
            if strategy is not name_from_remainder:
                logger.debug(f"Fell back to {strategy.__name__} for {original!r}")
            return candidate
    return unknown_name(original, remainder)


# =============================================================================
# Public API
# =============================================================================


def parse_ingredient_line(line: str | None) -> IngredientRecord | None:
    """
    Parse one free-text ingredient line into an IngredientRecord.

    Examples:
        "1 1/2 c. heavy cream" -> 1.5 cup "heavy cream"
        "2 (10.75 oz) cans condensed soup" -> 2 can "condensed soup",
            quantity text "2 (10.75 oz) cans"

    Returns None for empty or whitespace-only input. Never raises for
    non-empty input; the name falls back through NAME_STRATEGIES.
    """
    if line is None:
        return None
    original = str(line).strip()
    if not original:
        return None

    text = normalize_text(original)

    quantity_number, quantity_text, remainder = match_leading_quantity(text)
    quantity_text, remainder = fold_size_parenthetical(quantity_text, remainder)
    unit, quantity_text, remainder = match_unit(quantity_text, remainder)
    name, notes = extract_notes(remainder)

    candidate = resolve_name(original, name)

    return IngredientRecord(
        raw_text=original,
        display_name=candidate.display_name,
        normalized_key=candidate.normalized_key,
        quantity_number=quantity_number,
        quantity_text=quantity_text,
        unit=unit,
        notes=notes,
    )


def parse_ingredient_lines(lines: list[str]) -> list[IngredientRecord]:
    """Parse several lines, dropping the blank ones."""
    records = []
    for line in lines:
        record = parse_ingredient_line(line)
        if record is not None:
            records.append(record)
    return records
