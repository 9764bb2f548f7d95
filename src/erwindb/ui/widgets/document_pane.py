"""Widget painting the visible rows of a rendered document."""

import logging

from rich.text import Text
from textual.widget import Widget

from ... import styles
from ...navigator import PaneSnapshot
from ...utils.html_converter import LINK_REF_REGEX

logger: logging.Logger = logging.getLogger(name=__name__)


def highlight_focused_link(line: Text, number: int) -> Text:
    """Return a copy of line with the [text][number] reference highlighted."""
    highlighted = line.copy()
    for match in LINK_REF_REGEX.finditer(string=highlighted.plain):
        if int(match.group(2)) == number:
            highlighted.stylize(styles.FOCUSED_LINK, match.start(), match.end())
            break
    return highlighted


class DocumentPane(Widget):
    """Shows a slice of a pane snapshot starting at its scroll offset."""

    DEFAULT_CSS = """
    DocumentPane {
        height: 1fr;
        padding: 0 1;
    }
    """

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self.snapshot: PaneSnapshot | None = None

    def show(self, snapshot: PaneSnapshot | None) -> None:
        """Replace the snapshot being painted."""
        self.snapshot = snapshot
        self.set_class(snapshot is not None and snapshot.has_focus, "-focused")
        self.refresh()

    def render(self) -> Text:
        snapshot = self.snapshot
        if snapshot is None:
            return Text("")
        start = snapshot.scroll_offset
        visible = snapshot.lines[start : start + max(1, self.size.height)]
        focused = snapshot.focused_link
        rows: list[Text] = []
        for i, line in enumerate(visible, start=start):
            if focused is not None and focused.line_index == i:
                line = highlight_focused_link(line=line, number=focused.number)
            rows.append(line)
        text = Text("\n").join(rows)
        text.no_wrap = True
        text.overflow = "crop"
        return text
