"""Text cleanup and fraction parsing for scraped recipe text."""

import math
import re
from collections.abc import Callable

# =============================================================================
# Character Tables
# =============================================================================

HTML_ENTITIES: dict[str, str] = {
    "&nbsp;": " ",
    "&amp;": "&",
    "&lt;": "<",
    "&gt;": ">",
    "&quot;": '"',
    "&#39;": "'",
    "&apos;": "'",
}

UNICODE_PUNCTUATION: dict[str, str] = {
    "⁄": "/",  # fraction slash
    "–": "-",  # en dash
    "—": "-",  # em dash
    "·": " ",  # middle dot
    "“": '"',
    "”": '"',
    "‘": "'",
    "’": "'",
}

FRACTION_GLYPHS: dict[str, str] = {
    "½": "1/2",
    "⅓": "1/3",
    "¼": "1/4",
    "⅔": "2/3",
    "¾": "3/4",
    "⅕": "1/5",
    "⅖": "2/5",
    "⅗": "3/5",
    "⅘": "4/5",
    "⅙": "1/6",
    "⅚": "5/6",
    "⅛": "1/8",
    "⅜": "3/8",
    "⅝": "5/8",
    "⅞": "7/8",
}

_FRACTION_GLYPH_RE = re.compile(r"(?:(\d)\s*)?([" + "".join(FRACTION_GLYPHS) + r"])")
_WHITESPACE_RE = re.compile(r"\s+")


# =============================================================================
# Normalization
# =============================================================================


def decode_html_entities(text: str) -> str:
    """Decode the handful of entities recipe sites leave in ingredient text."""
    for entity, replacement in HTML_ENTITIES.items():
        text = text.replace(entity, replacement)
    return text


def normalize_unicode(text: str) -> str:
    """Rewrite dashes, quotes and the middle dot to ASCII and collapse whitespace."""
    for char, replacement in UNICODE_PUNCTUATION.items():
        text = text.replace(char, replacement)
    return _WHITESPACE_RE.sub(" ", text)


def replace_fraction_glyphs(text: str) -> str:
    """
    Spell unicode fraction glyphs as ASCII fractions.

    A glyph written straight after a whole number becomes a mixed fraction,
    so "1½" reads as "1 1/2" rather than "11/2".
    """

    def _spell(match: re.Match) -> str:
        whole, glyph = match.group(1), match.group(2)
        fraction = FRACTION_GLYPHS[glyph]
        return f"{whole} {fraction}" if whole else fraction

    return _FRACTION_GLYPH_RE.sub(_spell, text)


def strip_fraction_glyphs(text: str) -> str:
    """Drop unicode fraction glyphs entirely."""
    return "".join(ch for ch in text if ch not in FRACTION_GLYPHS)


def normalize_text(text: str) -> str:
    """Run the full cleanup: entities, unicode punctuation, fraction glyphs."""
    text = decode_html_entities(text)
    text = normalize_unicode(text)
    text = replace_fraction_glyphs(text)
    return text.strip()


# =============================================================================
# Fraction Parsing
# =============================================================================

_MIXED_RE = re.compile(r"^(\d+)\s+(\d+)/(\d+)$")
_SIMPLE_RE = re.compile(r"^(\d+)/(\d+)$")


def _ratio(whole: str, num: str, denom: str) -> float | None:
    try:
        n, d = int(num), int(denom)
        if d == 0:
            return None
        value = int(whole) + n / d
    except (ValueError, OverflowError):
        return None
    return value if math.isfinite(value) else None


def _parse_mixed(text: str) -> float | None:
    match = _MIXED_RE.match(text)
    if not match:
        return None
    return _ratio(*match.groups())


def _parse_simple(text: str) -> float | None:
    match = _SIMPLE_RE.match(text)
    if not match:
        return None
    return _ratio("0", match.group(1), match.group(2))


def _parse_plain(text: str) -> float | None:
    try:
        value = float(text)
    except ValueError:
        return None
    return value if math.isfinite(value) else None


# Tried in order; the first strategy whose pattern fits decides the outcome.
FRACTION_STRATEGIES: list[tuple[re.Pattern | None, Callable[[str], float | None]]] = [
    (_MIXED_RE, _parse_mixed),
    (_SIMPLE_RE, _parse_simple),
    (None, _parse_plain),
]


def parse_fraction(value: str | None) -> float | None:
    """
    Parse a quantity token into a float.

    Handles formats like:
    - "2"
    - "1.5"
    - "1/2"
    - "1 1/2" (one and a half)

    Returns None for anything non-numeric, including a zero denominator.
    """
    if value is None:
        return None
    text = str(value).strip()
    if not text:
        return None

    for pattern, strategy in FRACTION_STRATEGIES:
        if pattern is None or pattern.match(text):
            return strategy(text)
    return None
