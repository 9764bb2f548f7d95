"""Widget listing questions with sortable columns and match highlighting."""

import logging

from rich.text import Text
from textual.widget import Widget

from ... import styles
from ...navigator import Navigator, SortColumn, SortDirection
from ...utils.ui_helpers import decode_title, format_date, format_number, truncate_cells

logger: logging.Logger = logging.getLogger(name=__name__)

COLUMNS: list[tuple[SortColumn, str, int]] = [
    (SortColumn.ID, "ID", 10),
    (SortColumn.DATE, "Date", 14),
    (SortColumn.SCORE, "Score", 7),
    (SortColumn.VIEWS, "Views", 8),
    (SortColumn.ANSWERS, "Ans", 5),
]
TITLE_MIN_WIDTH = 10


def column_header(navigator: Navigator, width: int) -> Text:
    """Build the header row, marking the sort column and direction."""
    header = Text()
    for column, label, column_width in COLUMNS:
        if column is navigator.sort_column:
            arrow = "▼" if navigator.sort_direction is SortDirection.DESC else "▲"
            header.append(f"{label}{arrow}".ljust(column_width), style=styles.HEADING)
        else:
            header.append(label.ljust(column_width))
    header.append("Title")
    header.truncate(width)
    return header


def title_with_matches(title: str, match_indices: list[int]) -> Text:
    """Style the characters of title found by the fuzzy filter."""
    text = Text(title)
    for position in match_indices:
        if position < len(title):
            text.stylize(styles.MATCH, position, position + 1)
    return text


class QuestionTable(Widget, can_focus=True):
    """Scrolling list of questions following the navigator's selection."""

    DEFAULT_CSS = """
    QuestionTable {
        height: 1fr;
    }
    """

    def __init__(self, navigator: Navigator, **kwargs) -> None:
        super().__init__(**kwargs)
        self.navigator = navigator

    def render(self) -> Text:
        navigator = self.navigator
        questions = navigator.visible_questions()
        if not questions:
            if navigator.semantic_loading:
                return Text("Searching...", style=styles.META)
            return Text("No questions found", style=styles.META)

        height = max(1, self.size.height)
        selected = navigator.selected_index
        first = max(0, min(selected - height // 2, len(questions) - height))
        matches = navigator.match_indices()
        fixed_width = sum(width for _, _, width in COLUMNS)
        title_width = max(TITLE_MIN_WIDTH, self.size.width - fixed_width)

        rows: list[Text] = []
        for index in range(first, min(first + height, len(questions))):
            question = questions[index]
            row = Text(
                f"{question.id:<10}{format_date(question.creation_date):<14}"
                f"{question.score:<7}{format_number(question.view_count):<8}"
                f"{question.answer_count:<5}"
            )
            title = truncate_cells(decode_title(question.title), title_width)
            if index < len(matches):
                row.append_text(title_with_matches(title=title, match_indices=matches[index]))
            else:
                row.append(title)
            if index == selected:
                row.stylize("reverse")
            rows.append(row)

        text = Text("\n").join(rows)
        text.no_wrap = True
        text.overflow = "crop"
        return text
