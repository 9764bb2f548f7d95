"""Question list screen with sorting, title filter and semantic search."""

import logging
from typing import ClassVar

from rich.text import Text
from textual import work
from textual.app import ComposeResult
from textual.binding import Binding
from textual.screen import Screen
from textual.widgets import Footer, Header, Input, Static

from ...navigator import Navigator, ScrollCommand, SortColumn
from ..widgets.question_table import QuestionTable, column_header

logger = logging.getLogger(__name__)

SORT_KEYS: dict[str, SortColumn] = {
    "1": SortColumn.ID,
    "2": SortColumn.DATE,
    "3": SortColumn.SCORE,
    "4": SortColumn.VIEWS,
    "5": SortColumn.ANSWERS,
}


class QuestionListScreen(Screen):
    """Screen listing every question in the database."""

    BINDINGS: ClassVar[list[Binding]] = [
        Binding("j", "move('line_down')", "Down", show=False),
        Binding("down", "move('line_down')", "Down", show=False),
        Binding("k", "move('line_up')", "Up", show=False),
        Binding("up", "move('line_up')", "Up", show=False),
        Binding("g", "move('top')", "Top", show=False),
        Binding("G", "move('bottom')", "Bottom", show=False),
        Binding("space", "move('page_down')", "Page down", show=False),
        Binding("ctrl+d", "move('half_page_down')", "Half page down", show=False),
        Binding("ctrl+u", "move('half_page_up')", "Half page up", show=False),
        Binding("1", "sort('1')", "Sort Id", show=False),
        Binding("2", "sort('2')", "Sort Date", show=False),
        Binding("3", "sort('3')", "Sort Score", show=False),
        Binding("4", "sort('4')", "Sort Views", show=False),
        Binding("5", "sort('5')", "Sort Answers", show=False),
        Binding("slash", "title_search", "Filter"),
        Binding("question_mark", "semantic_search", "Semantic"),
        Binding("enter", "open_question", "Open"),
        Binding("o", "open_browser", "Open in browser"),
        Binding("escape", "clear_search", "Clear", show=False),
        Binding("q", "quit_or_clear", "Quit"),
    ]

    @property
    def navigator(self) -> Navigator:
        return self.app.navigator  # type: ignore

    def compose(self) -> ComposeResult:
        """Create the question list UI."""
        yield Header(show_clock=True)
        yield Static("", id="list_header")
        yield Static("", id="column_header")
        yield QuestionTable(navigator=self.navigator, id="question_table")
        yield Input(placeholder="Filter titles", id="title_search")
        yield Footer()

    def on_mount(self) -> None:
        self.query_one("#title_search", Input).display = False
        self.query_one(QuestionTable).focus()
        self.refresh_list()

    def on_screen_resume(self) -> None:
        self.refresh_list()

    def on_resize(self, event) -> None:  # noqa: ANN001
        self.navigator.resize(width=event.size.width, height=event.size.height)
        self.refresh_list()

    def refresh_list(self) -> None:
        """Redraw header, column header and table from navigator state."""
        navigator = self.navigator
        visible = len(navigator.visible_questions())
        if navigator.semantic_loading:
            status = f"Searching for '{navigator.semantic_query}'..."
        elif navigator.fuzzy_matches is not None:
            status = f"{visible} of {len(navigator.questions)} questions matching '{navigator.title_query}'"
        elif navigator.semantic_results is not None:
            status = f"{visible} questions similar to '{navigator.semantic_query}'"
        else:
            status = f"{len(navigator.questions)} questions"
        self.query_one("#list_header", Static).update(Text(status))
        self.query_one("#column_header", Static).update(
            column_header(navigator=navigator, width=self.size.width)
        )
        self.query_one(QuestionTable).refresh()

    def action_move(self, command: str) -> None:
        self.navigator.move_selection(ScrollCommand(command))
        self.refresh_list()

    def action_sort(self, key: str) -> None:
        self.navigator.sort(SORT_KEYS[key])
        self.refresh_list()

    def action_title_search(self) -> None:
        """Show the title filter input."""
        search = self.query_one("#title_search", Input)
        search.display = True
        search.value = self.navigator.title_query
        search.focus()

    def on_input_changed(self, event: Input.Changed) -> None:
        if event.input.id == "title_search" and event.input.display:
            self.navigator.set_title_query(event.value)
            self.refresh_list()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        if event.input.id == "title_search":
            event.input.display = False
            self.query_one(QuestionTable).focus()

    def action_clear_search(self) -> None:
        search = self.query_one("#title_search", Input)
        if search.display:
            search.display = False
            self.query_one(QuestionTable).focus()
        self.navigator.clear_search()
        self.refresh_list()

    def action_quit_or_clear(self) -> None:
        if not self.navigator.clear_search():
            self.app.exit()
            return
        self.refresh_list()

    def action_semantic_search(self) -> None:
        """Prompt for a semantic query and run it in the background."""
        from .semantic_search import SemanticSearchScreen  # noqa: PLC0415

        semantic = self.navigator.semantic
        available = semantic is not None and semantic.is_available
        self.app.push_screen(
            SemanticSearchScreen(available=available), callback=self._start_semantic_search
        )

    def _start_semantic_search(self, query: str | None) -> None:
        if not query:
            return
        if not self.navigator.begin_semantic_search(query):
            self.notify("A search is already running", severity="warning")
            return
        self.refresh_list()
        self.run_semantic_search(query)

    @work(exclusive=True, thread=True)
    def run_semantic_search(self, query: str) -> None:
        """Query the semantic backend off the UI thread."""
        try:
            ids = self.navigator.query_semantic(query)
        except Exception as e:
            logger.error(f"Semantic search failed: {e}")
            ids = []
        self.app.call_from_thread(self._finish_semantic_search, ids)

    def _finish_semantic_search(self, ids: list[int]) -> None:
        self.navigator.complete_semantic_search(ids)
        if not self.navigator.semantic_results:
            self.notify("No results", title="Semantic search")
        self.refresh_list()

    def action_open_question(self) -> None:
        """Open the selected question."""
        question = self.navigator.selected_question()
        if question is None:
            return
        from .question_view import QuestionScreen  # noqa: PLC0415

        self.navigator.navigate_to(question.id)
        self.app.push_screen(QuestionScreen())

    def action_open_browser(self) -> None:
        url = self.navigator.open()
        if url:
            self.notify("Opening in browser", title="Browser")
