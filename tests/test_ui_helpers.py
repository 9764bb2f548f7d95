"""Tests for the ui_helpers module."""

from rich.cells import cell_len

from erwindb.utils.ui_helpers import (
    decode_title,
    format_date,
    format_number,
    format_score,
    strip_html_tags,
    truncate_cells,
)


class TestFormatDate:
    """Test cases for format_date function."""

    def test_format_known_date(self) -> None:
        """Test formatting a timestamp."""
        assert format_date(1609459200) == "Jan 01, 2021"

    def test_format_unknown_date(self) -> None:
        """Test that a zero timestamp is reported as unknown."""
        assert format_date(0) == "N/A"

    def test_format_out_of_range_date(self) -> None:
        """Test that an impossible timestamp does not raise."""
        assert format_date(10**20) == "N/A"


class TestFormatNumber:
    """Test cases for format_number function."""

    def test_small_number(self) -> None:
        """Test numbers below a thousand are shown as is."""
        assert format_number(999) == "999"

    def test_thousands(self) -> None:
        """Test thousands use a K suffix."""
        assert format_number(1500) == "1.5K"

    def test_millions(self) -> None:
        """Test millions use an M suffix."""
        assert format_number(2_300_000) == "2.3M"


class TestFormatScore:
    """Test cases for format_score function."""

    def test_positive_score(self) -> None:
        """Test positive scores get a plus sign."""
        assert format_score(5) == "+5"

    def test_zero_and_negative_scores(self) -> None:
        """Test zero and negative scores are unchanged."""
        assert format_score(0) == "0"
        assert format_score(-3) == "-3"


class TestDecodeTitle:
    """Test cases for decode_title function."""

    def test_entities_decoded(self) -> None:
        """Test HTML entities in titles are decoded."""
        assert decode_title("Use &quot;IN&quot; &amp; &lt;&gt;") == 'Use "IN" & <>'

    def test_none_title(self) -> None:
        """Test a missing title yields an empty string."""
        assert decode_title(None) == ""  # type: ignore[arg-type]


class TestStripHtmlTags:
    """Test cases for strip_html_tags function."""

    def test_tags_removed(self) -> None:
        """Test tags are removed and text kept."""
        assert strip_html_tags("Use <code>COALESCE</code> here") == "Use COALESCE here"

    def test_whitespace_collapsed(self) -> None:
        """Test newlines and runs of spaces are collapsed."""
        assert strip_html_tags("one\n  two\tthree") == "one two three"

    def test_empty_input(self) -> None:
        """Test empty input."""
        assert strip_html_tags("") == ""


class TestTruncateCells:
    """Test cases for truncate_cells function."""

    def test_short_text_unchanged(self) -> None:
        """Test text that fits is returned unchanged."""
        assert truncate_cells("short", 10) == "short"

    def test_long_text_gets_ellipsis(self) -> None:
        """Test long text is cut with an ellipsis."""
        result = truncate_cells("a very long title", 8)
        assert result.endswith("…")
        assert cell_len(result) <= 8

    def test_wide_characters(self) -> None:
        """Test that double-width characters are measured by cells."""
        result = truncate_cells("日本語のタイトル", 7)
        assert cell_len(result) <= 7

    def test_zero_width(self) -> None:
        """Test a non-positive width yields an empty string."""
        assert truncate_cells("anything", 0) == ""
