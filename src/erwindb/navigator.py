"""Navigation state for the question list and the question view.

The Navigator owns everything that changes in response to user commands:
the active view, scroll offsets, the focused link, the distinguished-answer
cursor and the history of visited questions. Rendered content is rebuilt
wholesale whenever the document, the layout or the width changes; lines and
links of a pane are always replaced together.
"""

import logging
import sys
import webbrowser
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum

from rich.text import Text

from .content import (
    build_focus_content,
    build_question_content,
    distinguished_answer_indices,
)
from .database import Storage, load_document
from .models import Document, Question
from .search.fuzzy import FuzzyMatch, fuzzy_filter
from .search.semantic import SemanticSearch
from .utils.html_converter import Link
from .utils.ui_helpers import decode_title

logger: logging.Logger = logging.getLogger(name=__name__)

# Oversized offset meaning "scrolled to the end"; reduced by clamp_scroll.
BOTTOM_SENTINEL = sys.maxsize // 2
QUESTION_URL = "https://stackoverflow.com/questions/{}"


class PaneFocus(Enum):
    MAIN = "main"
    SECONDARY = "secondary"


@dataclass(frozen=True)
class IndexView:
    """The question list."""


@dataclass(frozen=True)
class SingleDocument:
    """One question shown in a single pane."""


@dataclass(frozen=True)
class DualDocument:
    """A question beside one distinguished answer."""

    focus: PaneFocus = PaneFocus.SECONDARY


View = IndexView | SingleDocument | DualDocument


class ScrollCommand(Enum):
    LINE_DOWN = "line_down"
    LINE_UP = "line_up"
    HALF_PAGE_DOWN = "half_page_down"
    HALF_PAGE_UP = "half_page_up"
    PAGE_DOWN = "page_down"
    PAGE_UP = "page_up"
    TOP = "top"
    BOTTOM = "bottom"


class SortColumn(Enum):
    ID = "id"
    DATE = "date"
    SCORE = "score"
    VIEWS = "views"
    ANSWERS = "answers"


class SortDirection(Enum):
    ASC = "asc"
    DESC = "desc"


_SORT_KEYS: dict[SortColumn, Callable[[Question], int]] = {
    SortColumn.ID: lambda q: q.id,
    SortColumn.DATE: lambda q: q.creation_date,
    SortColumn.SCORE: lambda q: q.score,
    SortColumn.VIEWS: lambda q: q.view_count,
    SortColumn.ANSWERS: lambda q: q.answer_count,
}


def clamp_scroll(offset: int, line_count: int, visible_rows: int) -> int:
    """Clamp a scroll offset to [0, max(0, line_count - visible_rows)]."""
    return max(0, min(offset, line_count - visible_rows))


@dataclass
class PaneState:
    """Rendered lines and links of one pane and its scroll offset."""

    lines: list[Text] = field(default_factory=list)
    links: list[Link] = field(default_factory=list)
    scroll_offset: int = 0


@dataclass(frozen=True)
class PaneSnapshot:
    """Read-only view of a pane handed to the renderer."""

    lines: list[Text]
    links: list[Link]
    scroll_offset: int
    focused_link: Link | None
    has_focus: bool


class Navigator:
    """State machine driving the question list and question view."""

    def __init__(
        self,
        storage: Storage,
        questions: list[Question],
        distinguished_author: str = "erwin",
        dual_pane_min_width: int = 160,
        semantic: SemanticSearch | None = None,
        semantic_limit: int = 20,
        opener: Callable[[str], object] = webbrowser.open,
        width: int = 80,
        height: int = 24,
    ) -> None:
        """Initialize the navigator in the question list.

        Args:
            storage: Source of question documents
            questions: Every question shown in the list
            distinguished_author: Author whose answers get their own pane
            dual_pane_min_width: Minimum width for side-by-side panes
            semantic: Semantic search backend, if any
            semantic_limit: Maximum number of semantic results
            opener: Callable opening a URL externally
            width: Initial display width
            height: Initial display height
        """
        self.storage = storage
        self.questions = list(questions)
        self.known_question_ids: frozenset[int] = frozenset(q.id for q in self.questions)
        self.distinguished_author = distinguished_author
        self.dual_pane_min_width = dual_pane_min_width
        self.semantic = semantic
        self.semantic_limit = semantic_limit
        self.opener = opener
        self.width = width
        self.height = height

        self.view: View = IndexView()
        self.document: Document | None = None
        self.history: list[int] = []
        self.main = PaneState()
        self.focus = PaneState()
        self.jump_positions: list[int] = []
        self.rendered_width: int | None = None
        self.distinguished_cursor: int | None = None
        self.focused_link_index: int | None = None

        self.sort_column = SortColumn.SCORE
        self.sort_direction = SortDirection.DESC
        self.selected_index = 0
        self.title_query = ""
        self.fuzzy_matches: list[FuzzyMatch] | None = None
        self.semantic_query = ""
        self.semantic_results: list[int] | None = None
        self.semantic_loading = False

    # Derived state

    @property
    def visible_rows(self) -> int:
        return max(1, self.height - 2)

    @property
    def in_document(self) -> bool:
        return isinstance(self.view, (SingleDocument, DualDocument))

    @property
    def secondary_focused(self) -> bool:
        return isinstance(self.view, DualDocument) and self.view.focus is PaneFocus.SECONDARY

    @property
    def distinguished_indices(self) -> list[int]:
        if self.document is None:
            return []
        return distinguished_answer_indices(self.document, self.distinguished_author)

    @property
    def dual_pane_available(self) -> bool:
        return self.width >= self.dual_pane_min_width and bool(self.distinguished_indices)

    @property
    def current_question_id(self) -> int | None:
        return self.document.question_id if self.document is not None else None

    def _active_pane(self) -> PaneState:
        return self.focus if self.secondary_focused else self.main

    # Rebuilding

    def _rebuild_main(self) -> None:
        if self.document is None:
            self.main = PaneState()
            return
        content = build_question_content(
            document=self.document,
            width=self.width,
            distinguished_author=self.distinguished_author,
            hide_distinguished=isinstance(self.view, DualDocument),
            known_question_ids=self.known_question_ids,
        )
        self.main = PaneState(
            lines=content.lines,
            links=content.links,
            scroll_offset=self.main.scroll_offset,
        )
        self.jump_positions = content.jump_positions

    def _rebuild_focus(self) -> None:
        indices = self.distinguished_indices
        if (
            self.document is None
            or not isinstance(self.view, DualDocument)
            or self.distinguished_cursor is None
            or not 0 <= self.distinguished_cursor < len(indices)
        ):
            self.focus = PaneState()
            return
        answer_index = indices[self.distinguished_cursor]
        content = build_focus_content(
            answer=self.document.answers[answer_index],
            comments=self.document.comments_for(answer_index),
            width=self.width,
            distinguished_author=self.distinguished_author,
            known_question_ids=self.known_question_ids,
        )
        self.focus = PaneState(
            lines=content.lines,
            links=content.links,
            scroll_offset=self.focus.scroll_offset,
        )

    def _rebuild(self) -> None:
        self._rebuild_main()
        self._rebuild_focus()
        self.rendered_width = self.width
        links = self._active_pane().links
        if self.focused_link_index is not None and self.focused_link_index >= len(links):
            self.focused_link_index = None

    def _ensure_current(self) -> None:
        if self.in_document and self.rendered_width != self.width:
            self._rebuild()

    # Document view transitions

    def _load(self, question_id: int) -> None:
        """Load a question and reset every document-view field."""
        self.document = load_document(self.storage, question_id)
        self.view = SingleDocument()
        self.main = PaneState()
        self.focus = PaneState()
        self.distinguished_cursor = None
        self.focused_link_index = None
        self._rebuild()
        logger.info(msg=f"Opened question {question_id}")

    def navigate_to(self, question_id: int) -> None:
        """Open a question, remembering the current one for back navigation.

        Args:
            question_id: Id of the question to show
        """
        if self.in_document and self.document is not None:
            self.history.append(self.document.question_id)
        self._load(question_id)

    def back(self) -> None:
        """Return to the previous question, or to the list when there is none."""
        if self.history:
            self._load(self.history.pop())
            return
        self.view = IndexView()
        self.document = None
        self.main = PaneState()
        self.focus = PaneState()
        self.jump_positions = []
        self.rendered_width = None
        self.distinguished_cursor = None
        self.focused_link_index = None

    def escape(self) -> None:
        """Drop the focused link, or go back when no link is focused."""
        if self.focused_link_index is not None:
            self.focused_link_index = None
        else:
            self.back()

    def resize(self, width: int, height: int) -> None:
        """Record a new display size, rebuilding only when the width changed.

        Args:
            width: Display width in columns
            height: Display height in rows
        """
        width_changed = width != self.width
        self.width = width
        self.height = height
        if not width_changed or not self.in_document:
            return
        if isinstance(self.view, DualDocument) and not self.dual_pane_available:
            self.view = SingleDocument()
            self.distinguished_cursor = None
            self.focus = PaneState()
        logger.debug(msg=f"Width changed to {width}, rebuilding content")
        self._rebuild()

    def scroll(self, command: ScrollCommand) -> None:
        """Scroll whichever pane has focus.

        Args:
            command: The scroll movement
        """
        if not self.in_document:
            return
        self._ensure_current()
        self.focused_link_index = None
        pane = self._active_pane()
        offset = clamp_scroll(pane.scroll_offset, len(pane.lines), self.visible_rows)
        page = self.visible_rows
        half = max(1, page // 2)
        if command is ScrollCommand.LINE_DOWN:
            offset += 1
        elif command is ScrollCommand.LINE_UP:
            offset -= 1
        elif command is ScrollCommand.HALF_PAGE_DOWN:
            offset += half
        elif command is ScrollCommand.HALF_PAGE_UP:
            offset -= half
        elif command is ScrollCommand.PAGE_DOWN:
            offset += page
        elif command is ScrollCommand.PAGE_UP:
            offset -= page
        elif command is ScrollCommand.TOP:
            offset = 0
        elif command is ScrollCommand.BOTTOM:
            offset = BOTTOM_SENTINEL
        pane.scroll_offset = max(0, offset)

    def toggle_distinguished(self, forward: bool = True) -> None:
        """Step through the distinguished author's answers.

        With room for two panes this opens, cycles and closes the secondary
        pane. Otherwise it jumps the main pane to the next or previous
        distinguished answer.

        Args:
            forward: Step forward (True) or backward (False)
        """
        if not self.in_document:
            return
        self._ensure_current()
        self.focused_link_index = None
        count = len(self.distinguished_indices)
        if count == 0:
            return

        if not self.dual_pane_available:
            self._jump(forward=forward, count=count)
            return

        view = self.view
        if isinstance(view, SingleDocument):
            self.distinguished_cursor = 0 if forward else count - 1
            self._open_pane()
        elif view.focus is PaneFocus.MAIN:
            if forward:
                self.view = DualDocument(focus=PaneFocus.SECONDARY)
            else:
                self._close_pane()
        else:
            cursor = self.distinguished_cursor or 0
            if forward:
                if cursor + 1 >= count:
                    self._close_pane()
                else:
                    self._show_answer(cursor + 1)
            elif cursor == 0:
                self.view = DualDocument(focus=PaneFocus.MAIN)
            else:
                self._show_answer(cursor - 1)

    def _jump(self, forward: bool, count: int) -> None:
        positions = self.jump_positions
        if not positions:
            return
        cursor = self.distinguished_cursor
        if cursor is None:
            cursor = 0 if forward else len(positions) - 1
        elif forward:
            cursor = (cursor + 1) % len(positions)
        else:
            cursor = (cursor - 1) % len(positions)
        self.distinguished_cursor = cursor
        self.main.scroll_offset = positions[cursor]

    def _open_pane(self) -> None:
        self.view = DualDocument(focus=PaneFocus.SECONDARY)
        self.focus = PaneState()
        self._rebuild()

    def _close_pane(self) -> None:
        self.view = SingleDocument()
        self.distinguished_cursor = None
        self.focus = PaneState()
        self._rebuild()

    def _show_answer(self, cursor: int) -> None:
        self.distinguished_cursor = cursor
        self.focus = PaneState()
        self._rebuild_focus()

    def cycle_link(self, forward: bool = True) -> None:
        """Move link focus within the focused pane, wrapping at either end.

        The pane is scrolled when the link is outside the visible rows: up
        just far enough for links above, so the link is centred for links
        below.

        Args:
            forward: Next (True) or previous (False) link
        """
        if not self.in_document:
            return
        self._ensure_current()
        pane = self._active_pane()
        if not pane.links:
            return
        count = len(pane.links)
        current = self.focused_link_index
        if current is None:
            new_index = 0 if forward else count - 1
        elif forward:
            new_index = (current + 1) % count
        else:
            new_index = (current - 1) % count
        self.focused_link_index = new_index

        rows = self.visible_rows
        offset = clamp_scroll(pane.scroll_offset, len(pane.lines), rows)
        line = pane.links[new_index].line_index
        if line < offset:
            offset = line
        elif line >= offset + rows:
            offset = max(0, line - rows // 2)
        pane.scroll_offset = offset

    @property
    def focused_link(self) -> Link | None:
        if not self.in_document or self.focused_link_index is None:
            return None
        self._ensure_current()
        links = self._active_pane().links
        if self.focused_link_index >= len(links):
            return None
        return links[self.focused_link_index]

    def open(self) -> str | None:
        """Follow the focused link, or open the current question externally.

        In the list this opens the selected question externally.

        Returns:
            The URL handed to the external opener, or None when a local
            question was opened in place or nothing could be opened
        """
        if not self.in_document:
            question = self.selected_question()
            if question is None:
                return None
            return self._open_external(QUESTION_URL.format(question.id))

        link = self.focused_link
        if link is not None:
            if link.question_id is not None:
                self.navigate_to(link.question_id)
                return None
            return self._open_external(link.url)
        return self._open_external(QUESTION_URL.format(self.current_question_id))

    def _open_external(self, url: str) -> str:
        try:
            self.opener(url)
        except Exception as e:
            logger.error(msg=f"Failed to open {url}: {e}")
        return url

    # Snapshots for the renderer

    def main_snapshot(self) -> PaneSnapshot:
        """Return the main pane with its scroll offset clamped."""
        self._ensure_current()
        return self._snapshot(pane=self.main, has_focus=not self.secondary_focused)

    def focus_snapshot(self) -> PaneSnapshot | None:
        """Return the secondary pane, or None when it is not shown."""
        if not isinstance(self.view, DualDocument):
            return None
        self._ensure_current()
        return self._snapshot(pane=self.focus, has_focus=self.secondary_focused)

    def _snapshot(self, pane: PaneState, has_focus: bool) -> PaneSnapshot:
        focused = None
        if has_focus and self.focused_link_index is not None:
            if self.focused_link_index < len(pane.links):
                focused = pane.links[self.focused_link_index]
        return PaneSnapshot(
            lines=pane.lines,
            links=pane.links,
            scroll_offset=clamp_scroll(pane.scroll_offset, len(pane.lines), self.visible_rows),
            focused_link=focused,
            has_focus=has_focus,
        )

    # Question list

    @property
    def list_page(self) -> int:
        return max(1, self.height - 3)

    def visible_questions(self) -> list[Question]:
        """Questions shown in the list: fuzzy or semantic results, or all sorted."""
        if self.fuzzy_matches is not None:
            return [self.questions[m.index] for m in self.fuzzy_matches]
        if self.semantic_results is not None:
            by_id = {q.id: q for q in self.questions}
            return [by_id[qid] for qid in self.semantic_results if qid in by_id]
        return sorted(
            self.questions,
            key=_SORT_KEYS[self.sort_column],
            reverse=self.sort_direction is SortDirection.DESC,
        )

    def match_indices(self) -> list[list[int]]:
        """Matched title positions per visible question; empty without a title query."""
        if self.fuzzy_matches is None:
            return []
        return [m.match_indices for m in self.fuzzy_matches]

    def selected_question(self) -> Question | None:
        visible = self.visible_questions()
        if 0 <= self.selected_index < len(visible):
            return visible[self.selected_index]
        return None

    def move_selection(self, command: ScrollCommand) -> None:
        """Move the list selection, clamped to the visible questions.

        Args:
            command: The movement, interpreted as for scrolling
        """
        last = max(0, len(self.visible_questions()) - 1)
        half = max(1, self.list_page // 2)
        index = self.selected_index
        if command is ScrollCommand.LINE_DOWN:
            index += 1
        elif command is ScrollCommand.LINE_UP:
            index -= 1
        elif command is ScrollCommand.HALF_PAGE_DOWN:
            index += half
        elif command is ScrollCommand.HALF_PAGE_UP:
            index -= half
        elif command is ScrollCommand.PAGE_DOWN:
            index += self.list_page
        elif command is ScrollCommand.PAGE_UP:
            index -= self.list_page
        elif command is ScrollCommand.TOP:
            index = 0
        elif command is ScrollCommand.BOTTOM:
            index = last
        self.selected_index = max(0, min(index, last))

    def sort(self, column: SortColumn) -> None:
        """Sort by column; choosing the current column flips the direction."""
        if column is self.sort_column:
            self.sort_direction = (
                SortDirection.ASC
                if self.sort_direction is SortDirection.DESC
                else SortDirection.DESC
            )
        else:
            self.sort_column = column
            self.sort_direction = SortDirection.DESC
        self.selected_index = 0

    def set_title_query(self, query: str) -> None:
        """Filter the list by fuzzy title match; an empty query shows all."""
        self.title_query = query
        if query:
            self.fuzzy_matches = fuzzy_filter(
                items=self.questions, pattern=query, key=lambda q: decode_title(q.title)
            )
        else:
            self.fuzzy_matches = None
        self.selected_index = 0

    @property
    def has_search_results(self) -> bool:
        return self.fuzzy_matches is not None or self.semantic_results is not None

    def clear_search(self) -> bool:
        """Drop title and semantic results.

        Returns:
            True when there was something to clear
        """
        had_results = self.has_search_results
        self.title_query = ""
        self.fuzzy_matches = None
        self.semantic_query = ""
        self.semantic_results = None
        self.selected_index = 0
        return had_results

    def begin_semantic_search(self, query: str) -> bool:
        """Mark a semantic query as in flight.

        Returns:
            False when the query is empty or another query is still running
        """
        if self.semantic_loading or not query.strip():
            return False
        self.semantic_loading = True
        self.semantic_query = query
        return True

    def complete_semantic_search(self, question_ids: list[int]) -> None:
        """Store the ids returned for the in-flight query."""
        self.semantic_results = [qid for qid in question_ids if qid in self.known_question_ids]
        self.fuzzy_matches = None
        self.title_query = ""
        self.semantic_loading = False
        self.selected_index = 0
        logger.info(
            msg=f"Semantic search '{self.semantic_query}' returned {len(self.semantic_results)} questions"
        )

    def query_semantic(self, query: str) -> list[int]:
        """Run the backend lookup; safe to call off the UI thread."""
        if self.semantic is None:
            logger.warning(msg="Semantic search requested but not configured")
            return []
        return self.semantic.search(query=query, limit=self.semantic_limit)

    def run_semantic_search(self, query: str) -> bool:
        """Run a semantic query to completion.

        Returns:
            False when the query was refused
        """
        if not self.begin_semantic_search(query):
            return False
        try:
            ids = self.query_semantic(query)
        except Exception as e:
            logger.error(msg=f"Semantic search failed: {e}")
            ids = []
        self.complete_semantic_search(ids)
        return True
