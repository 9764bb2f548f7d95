"""Question view screen with an optional side pane for highlighted answers."""

import logging
from typing import ClassVar

from rich.text import Text
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal
from textual.screen import Screen
from textual.widgets import Static

from ...navigator import DualDocument, IndexView, Navigator, ScrollCommand
from ...utils.ui_helpers import decode_title, truncate_cells
from ..widgets.document_pane import DocumentPane

logger = logging.getLogger(__name__)

STATUS_HELP = "j/k scroll  space/u page  g/G top/bottom  e/E answers  tab links  o open  q back"


class QuestionScreen(Screen):
    """Screen rendering the navigator's current question."""

    BINDINGS: ClassVar[list[Binding]] = [
        Binding("j", "scroll('line_down')", "Down", show=False),
        Binding("down", "scroll('line_down')", "Down", show=False),
        Binding("k", "scroll('line_up')", "Up", show=False),
        Binding("up", "scroll('line_up')", "Up", show=False),
        Binding("space", "scroll('page_down')", "Page down", show=False),
        Binding("d", "scroll('page_down')", "Page down", show=False),
        Binding("u", "scroll('page_up')", "Page up", show=False),
        Binding("ctrl+d", "scroll('half_page_down')", "Half page down", show=False),
        Binding("ctrl+u", "scroll('half_page_up')", "Half page up", show=False),
        Binding("g", "scroll('top')", "Top", show=False),
        Binding("G", "scroll('bottom')", "Bottom", show=False),
        Binding("e", "distinguished(True)", "Next highlighted"),
        Binding("E", "distinguished(False)", "Previous highlighted", show=False),
        Binding("tab", "cycle_link(True)", "Next link", priority=True),
        Binding("shift+tab", "cycle_link(False)", "Previous link", priority=True),
        Binding("o", "open", "Open"),
        Binding("escape", "escape", "Back"),
        Binding("q", "back", "Back", show=False),
        Binding("b", "back", "Back", show=False),
    ]

    @property
    def navigator(self) -> Navigator:
        return self.app.navigator  # type: ignore

    def compose(self) -> ComposeResult:
        """Create the question view UI."""
        yield Static("", id="question_header")
        with Horizontal(id="panes"):
            yield DocumentPane(id="main_pane")
            yield DocumentPane(id="focus_pane")
        yield Static("", id="status_bar")

    def on_mount(self) -> None:
        self.navigator.resize(width=self.size.width, height=self.size.height)
        self.refresh_panes()

    def on_resize(self, event) -> None:  # noqa: ANN001
        self.navigator.resize(width=event.size.width, height=event.size.height)
        self.refresh_panes()

    def refresh_panes(self) -> None:
        """Repaint from navigator state, leaving the screen when back in the list."""
        navigator = self.navigator
        if isinstance(navigator.view, IndexView):
            self.app.pop_screen()
            return

        document = navigator.document
        title = f"Question #{navigator.current_question_id}"
        if document is not None and document.question is not None:
            title += f"  {decode_title(document.question.title)}"
        dual = isinstance(navigator.view, DualDocument)
        if dual:
            cursor = (navigator.distinguished_cursor or 0) + 1
            title += f"  |  highlighted answer {cursor}/{len(navigator.distinguished_indices)}"
        self.query_one("#question_header", Static).update(
            Text(truncate_cells(title, self.size.width), style="bold")
        )

        self.query_one("#main_pane", DocumentPane).show(navigator.main_snapshot())
        focus_pane = self.query_one("#focus_pane", DocumentPane)
        focus_pane.display = dual
        focus_pane.show(navigator.focus_snapshot())

        focus = "right pane" if navigator.secondary_focused else "main"
        link = navigator.focused_link
        link_text = f"  |  link [{link.number}] {link.url}" if link is not None else ""
        self.query_one("#status_bar", Static).update(
            Text(truncate_cells(f"[{focus}]  {STATUS_HELP}{link_text}", self.size.width))
        )

    def action_scroll(self, command: str) -> None:
        self.navigator.scroll(ScrollCommand(command))
        self.refresh_panes()

    def action_distinguished(self, forward: bool) -> None:
        self.navigator.toggle_distinguished(forward=forward)
        self.refresh_panes()

    def action_cycle_link(self, forward: bool) -> None:
        self.navigator.cycle_link(forward=forward)
        self.refresh_panes()

    def action_open(self) -> None:
        url = self.navigator.open()
        if url:
            self.notify("Opening in browser", title="Browser")
        self.refresh_panes()

    def action_escape(self) -> None:
        self.navigator.escape()
        self.refresh_panes()

    def action_back(self) -> None:
        self.navigator.back()
        self.refresh_panes()
