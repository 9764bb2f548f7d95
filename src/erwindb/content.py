"""Composition of questions, answers and comments into rendered documents."""

import logging
from collections.abc import Collection
from dataclasses import dataclass, field

from rich.style import Style
from rich.text import Text

from . import styles
from .models import Answer, Comment, Document, Question
from .utils.html_converter import Link, ParsedContent, html_to_content, wrap_text
from .utils.ui_helpers import (
    decode_title,
    format_date,
    format_number,
    format_score,
    strip_html_tags,
)

logger: logging.Logger = logging.getLogger(name=__name__)

SEPARATOR_CHAR = "─"
MAX_SEPARATOR_WIDTH = 60
MAIN_WIDTH_MARGIN = 4
FOCUS_WIDTH_MARGIN = 6
COMMENT_INDENT = 4
ACCENT = "│ "
DISTINGUISHED_MARK = "◆"
ACCEPTED_MARK = " ✓ ACCEPTED"


@dataclass
class RenderedContent:
    """The main document: lines, absolute links and navigation offsets.

    ``jump_positions`` holds the first line of every included distinguished
    answer section; ``answer_starts`` the first line of every included answer
    section. Both point at the blank line above the section separator.
    """

    lines: list[Text] = field(default_factory=list)
    links: list[Link] = field(default_factory=list)
    jump_positions: list[int] = field(default_factory=list)
    answer_starts: list[int] = field(default_factory=list)


@dataclass
class RenderedFocusContent:
    """A single answer rendered for the secondary pane."""

    lines: list[Text] = field(default_factory=list)
    links: list[Link] = field(default_factory=list)


def is_distinguished(author_name: str, distinguished_author: str) -> bool:
    """Check whether an author name belongs to the distinguished author.

    The match is a case-insensitive substring test; an empty distinguished
    author matches nobody.
    """
    if not distinguished_author:
        return False
    return distinguished_author.lower() in (author_name or "").lower()


def distinguished_answer_indices(document: Document, distinguished_author: str) -> list[int]:
    """Return indexes of the answers written by the distinguished author."""
    return [
        i
        for i, answer in enumerate(document.answers)
        if is_distinguished(answer.author_name, distinguished_author)
    ]


class _LineBuilder:
    """Accumulates lines and keeps fragment links aligned with them."""

    def __init__(self) -> None:
        self.lines: list[Text] = []
        self.links: list[Link] = []

    def __len__(self) -> int:
        return len(self.lines)

    def add(self, line: Text | str = "", style=None) -> None:  # noqa: ANN001
        if isinstance(line, str):
            line = Text(line, style=style or "")
        self.lines.append(line)

    def blank(self) -> None:
        self.lines.append(Text(""))

    def separator(self, width: int) -> None:
        self.add(SEPARATOR_CHAR * min(width, MAX_SEPARATOR_WIDTH), style=styles.SEPARATOR)

    def extend(self, content: ParsedContent, prefix: Text | None = None) -> None:
        """Append a fragment, rebasing its links onto the current offset."""
        offset = len(self.lines)
        for line in content.lines:
            self.lines.append(prefix + line if prefix is not None else line)
        self.links.extend(link.shifted(offset) for link in content.links)


def _comment_block(
    builder: _LineBuilder,
    comments: list[Comment],
    width: int,
    distinguished_author: str,
) -> None:
    if not comments:
        return
    builder.blank()
    builder.add(f"Comments ({len(comments)})", style=styles.COMMENT_HEADER)

    for comment in comments:
        builder.blank()
        comment_is_distinguished = is_distinguished(comment.author_name, distinguished_author)
        mark = f"{DISTINGUISHED_MARK} " if comment_is_distinguished else ""
        votes = f"[{format_score(comment.score)}] " if comment.score > 0 else ""
        text = strip_html_tags(comment.comment_text)
        style = styles.DISTINGUISHED_COMMENT if comment_is_distinguished else styles.COMMENT
        line = f"{' ' * COMMENT_INDENT}{mark}{votes}{text} — {comment.author_name}"
        for wrapped in wrap_text(text=line, width=width, indent=COMMENT_INDENT):
            builder.add(wrapped, style=style)


def _answer_header(label: str, answer: Answer, style: Style) -> Text:
    header = Text(label, style=style)
    if answer.is_accepted:
        header.append(ACCEPTED_MARK, style=styles.ACCEPTED)
    header.append(f"  ({format_score(answer.score)} votes)", style=style)
    return header


def _by_line(answer: Answer, style) -> Text:  # noqa: ANN001
    return Text(
        f"by {answer.author_name} ({format_number(answer.author_reputation)} rep)",
        style=style or "",
    )


def _question_header(
    builder: _LineBuilder,
    question: Question,
    content_width: int,
    known_question_ids: Collection[int] | None,
) -> None:
    for title_line in wrap_text(text=decode_title(question.title), width=content_width):
        builder.add(title_line, style=styles.TITLE)
    builder.add(f"stackoverflow.com/questions/{question.id}", style=styles.URL)
    builder.add(
        f"Asked by {question.author_name} on {format_date(question.creation_date)}"
        f"  |  {question.score} votes  |  {format_number(question.view_count)} views",
        style=styles.META,
    )
    builder.blank()
    builder.separator(width=content_width)
    builder.blank()
    builder.add("QUESTION", style=styles.QUESTION_HEADER)
    builder.blank()
    builder.extend(
        html_to_content(
            html=question.body,
            width=content_width,
            known_question_ids=known_question_ids,
        )
    )


def _placeholder_content(question_id: int) -> RenderedContent:
    builder = _LineBuilder()
    builder.add(f"Question #{question_id} not found", style=styles.PLACEHOLDER)
    builder.blank()
    builder.add("This question is not available in the local database.", style=styles.META)
    return RenderedContent(lines=builder.lines)


def build_question_content(
    document: Document,
    width: int,
    distinguished_author: str,
    hide_distinguished: bool = False,
    known_question_ids: Collection[int] | None = None,
) -> RenderedContent:
    """Compose the main document for a question.

    Args:
        document: The question with its answers and comments
        width: Display width the document is rendered for
        distinguished_author: Name matched against answer and comment authors
        hide_distinguished: Leave out the distinguished author's answers,
            which are then shown in the focus pane
        known_question_ids: Question ids available locally, used to tag links

    Returns:
        RenderedContent whose link indexes are absolute in its line list
    """
    if document.question is None:
        return _placeholder_content(question_id=document.question_id)

    content_width = max(width - MAIN_WIDTH_MARGIN, 0)
    builder = _LineBuilder()
    jump_positions: list[int] = []
    answer_starts: list[int] = []

    _question_header(
        builder=builder,
        question=document.question,
        content_width=content_width,
        known_question_ids=known_question_ids,
    )
    _comment_block(
        builder=builder,
        comments=document.question_comments,
        width=content_width,
        distinguished_author=distinguished_author,
    )

    for i, answer in enumerate(document.answers):
        answer_is_distinguished = is_distinguished(answer.author_name, distinguished_author)
        if answer_is_distinguished and hide_distinguished:
            continue

        answer_starts.append(len(builder))
        builder.blank()
        builder.separator(width=content_width)
        builder.blank()
        if answer_is_distinguished:
            # three lines above the header: blank, separator, blank
            jump_positions.append(len(builder) - 3)

        if answer_is_distinguished:
            header = Text(f" {DISTINGUISHED_MARK} ", style=styles.DISTINGUISHED_BADGE)
            header.append_text(
                _answer_header(
                    label=f"ANSWER {i + 1}", answer=answer, style=styles.DISTINGUISHED_HEADER
                )
            )
            builder.add(header)
            builder.add(_by_line(answer=answer, style=styles.DISTINGUISHED_ACCENT))
        else:
            builder.add(
                _answer_header(label=f"ANSWER {i + 1}", answer=answer, style=styles.ANSWER_HEADER)
            )
            builder.add(_by_line(answer=answer, style=styles.AUTHOR))
        builder.blank()

        body = html_to_content(
            html=answer.answer_text,
            width=content_width,
            known_question_ids=known_question_ids,
        )
        accent = Text(ACCENT, style=styles.DISTINGUISHED_ACCENT) if answer_is_distinguished else None
        builder.extend(content=body, prefix=accent)

        _comment_block(
            builder=builder,
            comments=document.comments_for(i),
            width=content_width,
            distinguished_author=distinguished_author,
        )

    builder.blank()
    builder.separator(width=content_width)

    logger.debug(
        msg=f"Built question {document.question_id}: {len(builder.lines)} lines, "
        f"{len(builder.links)} links, {len(jump_positions)} jump positions"
    )
    return RenderedContent(
        lines=builder.lines,
        links=builder.links,
        jump_positions=jump_positions,
        answer_starts=answer_starts,
    )


def build_focus_content(
    answer: Answer,
    comments: list[Comment],
    width: int,
    distinguished_author: str,
    known_question_ids: Collection[int] | None = None,
) -> RenderedFocusContent:
    """Render one answer for the secondary pane, which gets half the width.

    Args:
        answer: The answer to render
        comments: Comments on that answer
        width: Full display width
        distinguished_author: Name matched against comment authors
        known_question_ids: Question ids available locally, used to tag links

    Returns:
        RenderedFocusContent with absolute link indexes
    """
    content_width = max(width // 2 - FOCUS_WIDTH_MARGIN, 0)
    builder = _LineBuilder()

    builder.add(_answer_header(label="ANSWER", answer=answer, style=styles.DISTINGUISHED_HEADER))
    builder.add(_by_line(answer=answer, style=styles.DISTINGUISHED_ACCENT))
    builder.blank()
    builder.extend(
        html_to_content(
            html=answer.answer_text,
            width=content_width,
            known_question_ids=known_question_ids,
        )
    )
    _comment_block(
        builder=builder,
        comments=comments,
        width=content_width,
        distinguished_author=distinguished_author,
    )
    return RenderedFocusContent(lines=builder.lines, links=builder.links)
