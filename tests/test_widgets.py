"""Tests for the rendering helpers of the UI widgets."""

from rich.text import Text

from erwindb import styles
from erwindb.navigator import Navigator, SortColumn
from erwindb.ui.widgets.document_pane import highlight_focused_link
from erwindb.ui.widgets.question_table import column_header, title_with_matches


class TestHighlightFocusedLink:
    """Test cases for highlight_focused_link function."""

    def test_only_numbered_reference_highlighted(self) -> None:
        """Test the reference with the given number is highlighted."""
        line = Text("see [a][1] and [b][2]")

        highlighted = highlight_focused_link(line, number=2)

        spans = [s for s in highlighted.spans if s.style == styles.FOCUSED_LINK]
        assert len(spans) == 1
        assert highlighted.plain[spans[0].start : spans[0].end] == "[b][2]"

    def test_original_line_untouched(self) -> None:
        """Test the input line is not modified."""
        line = Text("see [a][1]")
        highlight_focused_link(line, number=1)
        assert line.spans == []


class TestQuestionTableHelpers:
    """Test cases for question table helpers."""

    def test_title_with_matches(self) -> None:
        """Test matched characters are styled."""
        text = title_with_matches("Why slow", [4, 5, 6, 7, 42])

        assert text.plain == "Why slow"
        assert len([s for s in text.spans if s.style == styles.MATCH]) == 4

    def test_column_header_marks_sort(self, memory_db) -> None:
        """Test the sort column carries a direction arrow."""
        nav = Navigator(storage=memory_db, questions=memory_db.get_questions())

        assert "Score▼" in column_header(nav, width=120).plain

        nav.sort(SortColumn.SCORE)
        assert "Score▲" in column_header(nav, width=120).plain

    def test_column_header_truncated(self, memory_db) -> None:
        """Test the header never exceeds the width."""
        nav = Navigator(storage=memory_db, questions=memory_db.get_questions())
        assert len(column_header(nav, width=20).plain) <= 20
