"""Unit tests for text normalization and fraction parsing."""

from pantryplan.normalize.text import (
    decode_html_entities,
    normalize_text,
    parse_fraction,
    replace_fraction_glyphs,
    strip_fraction_glyphs,
)


class TestNormalizeText:
    """Tests for entity decoding and unicode cleanup."""

    def test_decode_entities(self):
        """Test decoding the supported HTML entities."""
        assert decode_html_entities("mac &amp; cheese") == "mac & cheese"
        assert decode_html_entities("1&nbsp;cup") == "1 cup"
        assert decode_html_entities("&quot;best&quot; &#39;ever&apos;") == "\"best\" 'ever'"
        assert decode_html_entities("&lt;b&gt;") == "<b>"

    def test_unicode_punctuation(self):
        """Test dashes, smart quotes and the middle dot become ASCII."""
        assert normalize_text("2–3 cups") == "2-3 cups"
        assert normalize_text("salt — to taste") == "salt - to taste"
        assert normalize_text("‘fancy’ “sauce”") == "'fancy' \"sauce\""
        assert normalize_text("· 1 egg") == "1 egg"

    def test_collapse_whitespace(self):
        """Test runs of whitespace collapse to single spaces."""
        assert normalize_text("  1   cup\t\tsugar ") == "1 cup sugar"

    def test_fraction_glyph_alone(self):
        """Test a lone glyph becomes a simple fraction."""
        assert normalize_text("½ cup sugar") == "1/2 cup sugar"
        assert replace_fraction_glyphs("⅞") == "7/8"

    def test_fraction_glyph_after_whole_number(self):
        """Test a glyph after a digit becomes a mixed fraction."""
        assert normalize_text("1½ cups flour") == "1 1/2 cups flour"
        assert normalize_text("2 ¾ tsp salt") == "2 3/4 tsp salt"

    def test_fraction_slash(self):
        """Test the unicode fraction slash."""
        assert normalize_text("1⁄3 cup") == "1/3 cup"

    def test_strip_glyphs(self):
        """Test glyphs can be dropped entirely."""
        assert strip_fraction_glyphs("½ cup ¼") == " cup "


class TestParseFraction:
    """Tests for parse_fraction function."""

    def test_parse_integer(self):
        """Test parsing simple integers."""
        assert parse_fraction("2") == 2.0
        assert parse_fraction("10") == 10.0

    def test_parse_decimal(self):
        """Test parsing decimal numbers."""
        assert parse_fraction("1.5") == 1.5
        assert parse_fraction("0.25") == 0.25

    def test_parse_simple_fraction(self):
        """Test parsing simple fractions."""
        assert parse_fraction("1/2") == 0.5
        assert parse_fraction("3/4") == 0.75

    def test_parse_mixed_fraction(self):
        """Test parsing mixed fractions."""
        assert parse_fraction("1 1/2") == 1.5
        assert parse_fraction("2 3/4") == 2.75

    def test_zero_denominator(self):
        """Test a zero denominator yields None instead of raising."""
        assert parse_fraction("1/0") is None
        assert parse_fraction("2 1/0") is None

    def test_non_numeric(self):
        """Test non-numeric input yields None."""
        assert parse_fraction("abc") is None
        assert parse_fraction("") is None
        assert parse_fraction("   ") is None
        assert parse_fraction(None) is None

    def test_non_finite(self):
        """Test infinities and NaN are not quantities."""
        assert parse_fraction("inf") is None
        assert parse_fraction("nan") is None

    def test_surrounding_whitespace(self):
        """Test surrounding whitespace is ignored."""
        assert parse_fraction("  3/4 ") == 0.75

    def test_oversized_fractions(self):
        """Test fractions too large for a float yield None instead of raising."""
        assert parse_fraction("1" * 400 + "/1") is None
        assert parse_fraction("2 " + "1" * 400 + "/1") is None
        assert parse_fraction("1" * 5000 + "/2") is None
        assert parse_fraction("1/" + "1" * 5000) is None
        assert parse_fraction("1" * 400) is None
