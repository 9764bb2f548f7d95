"""Shared rich styles for rendered documents and lists."""

from rich.style import Style

TITLE = Style(bold=True, color="bright_white")
URL = Style(dim=True)
META = Style(color="grey62")
SEPARATOR = Style(color="grey37")
HEADING = Style(bold=True)

QUESTION_HEADER = Style(bold=True, color="bright_cyan")
ANSWER_HEADER = Style(bold=True, color="bright_green")
ACCEPTED = Style(bold=True, color="green")
AUTHOR = Style(italic=True, color="grey62")
PLACEHOLDER = Style(bold=True, color="red")

DISTINGUISHED_BADGE = Style(bold=True, color="black", bgcolor="yellow")
DISTINGUISHED_HEADER = Style(bold=True, color="yellow")
DISTINGUISHED_ACCENT = Style(color="yellow")
DISTINGUISHED_COMMENT = Style(color="yellow")

COMMENT_HEADER = Style(bold=True, color="grey62")
COMMENT = Style(color="grey70")

LINK = Style(color="cyan", underline=True)
LINK_NUMBER = Style(color="grey50", dim=True)
FOCUSED_LINK = Style(bold=True, color="black", bgcolor="cyan")

MATCH = Style(bold=True, color="yellow")
