"""HTML to styled terminal line conversion for erwindb."""

import logging
import re
from collections.abc import Collection
from dataclasses import dataclass, field, replace

from bs4 import BeautifulSoup
from markdownify import ATX
from markdownify import markdownify as md
from rich.cells import cell_len, chop_cells
from rich.text import Text

from .. import styles
from .highlight import PLAIN_LANGUAGE, highlight_code

logger: logging.Logger = logging.getLogger(name=__name__)

MIN_WRAP_WIDTH = 8
CODE_INDENT = "    "

LINK_REF_REGEX = re.compile(pattern=r"\[([^\]]+)\]\[(\d+)\]")
CODE_PLACEHOLDER_REGEX = re.compile(
    pattern=r"^(?P<quote>\s*(?:>\s?)*)(?P<marker>(?:[*+-]|\d+\.)\s+)?"
    r"__CODE_BLOCK_(?P<index>\d+)__\s*$"
)
QUESTION_URL_REGEX = re.compile(pattern=r"stackoverflow\.com/(?:questions|q)/(\d+)")
LANGUAGE_CLASS_REGEX = re.compile(pattern=r"^lang(?:uage)?-(\w+)$")
LIST_ITEM_REGEX = re.compile(pattern=r"^(\s*)([*+-]|\d+\.)\s+")
_TOKEN_REGEX = re.compile(pattern=r"\S*\[[^\]]+\]\[\d+\]\S*|\S+")


@dataclass(frozen=True)
class Link:
    """A numbered hyperlink anchored to one rendered line."""

    url: str
    line_index: int
    number: int
    question_id: int | None = None

    def shifted(self, offset: int) -> "Link":
        """Return a copy with line_index moved down by offset lines."""
        return replace(self, line_index=self.line_index + offset)


@dataclass
class ParsedContent:
    """Lines rendered from one HTML fragment with their fragment-local links."""

    lines: list[Text] = field(default_factory=list)
    links: list[Link] = field(default_factory=list)


def classify_question_url(url: str) -> int | None:
    """Return the question id a URL points at, if it is a question URL.

    Args:
        url: Link destination

    Returns:
        The question id, or None for any other URL
    """
    match = QUESTION_URL_REGEX.search(string=url or "")
    if not match:
        return None
    return int(match.group(1))


def _code_language(pre) -> str | None:  # noqa: ANN001
    """Read the lang-* hint from a <pre> or its inner <code>."""
    candidates = [pre]
    code_tag = pre.find("code")
    if code_tag is not None:
        candidates.append(code_tag)
    for tag in candidates:
        for cls in tag.get("class") or []:
            match = LANGUAGE_CLASS_REGEX.match(string=cls)
            if match:
                language = match.group(1).lower()
                return PLAIN_LANGUAGE if language == "none" else language
    return None


def _clean_text(text: str) -> str:
    """Strip trailing spaces and collapse runs of blank lines."""
    text = "\n".join(line.rstrip() for line in text.split("\n"))
    text = re.sub(pattern=r"\n{3,}", repl="\n\n", string=text)
    return text.strip("\n")


def _convert_to_text(soup: BeautifulSoup, html: str) -> str:
    try:
        return md(
            html=str(object=soup),
            heading_style=ATX,
            bullets="*",
            escape_asterisks=False,
            escape_underscores=False,
            escape_misc=False,
        )
    except Exception as conv_error:
        logger.error(
            msg=f"Markdownify error: {conv_error}, falling back to basic text extraction"
        )

    try:
        return soup.get_text(separator="\n\n")
    except Exception as soup_error:
        logger.error(msg=f"Soup.get_text error: {soup_error}, stripping tags")
        return re.sub(pattern=r"<[^>]+>", repl=" ", string=html)


def _code_lines(code: str, language: str | None, match: re.Match) -> list[Text]:
    """Highlight a code block behind the quote or list prefix of its placeholder.

    The list marker is shown on the first line only; later lines get blanks
    of the same width so the block stays aligned under the item.
    """
    quote = match.group("quote")
    marker = match.group("marker") or ""
    lines = []
    for number, code_line in enumerate(highlight_code(code=code, language=language)):
        lead = marker if number == 0 else " " * len(marker)
        lines.append(Text(quote + lead + CODE_INDENT) + code_line)
    return lines


def wrap_text(text: str, width: int, indent: int = 0) -> list[str]:
    """Word-wrap one line of text by display columns.

    Link placeholders are kept on one line when they fit. Words wider
    than a line are chopped.

    Args:
        text: The line to wrap
        width: Maximum display width, floored at MIN_WRAP_WIDTH
        indent: Hanging indent for continuation lines

    Returns:
        The wrapped lines, at least one
    """
    width = max(width, MIN_WRAP_WIDTH)
    body = text.strip()
    if not body:
        return [""]

    leading = text[: len(text) - len(text.lstrip())]
    if cell_len(leading) >= width // 2:
        leading = ""
    hang = " " * min(indent, width // 2)

    words: list[str] = []
    for token in _TOKEN_REGEX.findall(body):
        if " " in token and cell_len(token) > width - len(hang):
            words.extend(token.split())
        else:
            words.append(token)

    lines: list[str] = []
    current = leading
    has_word = False
    for word in words:
        sep = " " if has_word else ""
        while cell_len(word) > width - cell_len(current) - len(sep):
            if has_word:
                lines.append(current)
                current, has_word, sep = hang, False, ""
                continue
            avail = width - cell_len(current)
            head = chop_cells(word, avail)[0] or word[0]
            lines.append(current + head)
            word = word[len(head) :]
            current = hang
        current += sep + word
        has_word = True
    lines.append(current)
    return [line.rstrip() for line in lines]


def style_link_references(line: str, link_count: int) -> tuple[Text, list[int]]:
    """Style [text][n] references in a line.

    Args:
        line: Plain line text
        link_count: Number of links defined in the fragment

    Returns:
        The styled line and the reference numbers it contains, in order.
        References with an out-of-range number stay unstyled.
    """
    styled = Text()
    numbers: list[int] = []
    position = 0
    for match in LINK_REF_REGEX.finditer(string=line):
        number = int(match.group(2))
        if not 1 <= number <= link_count:
            continue
        styled.append(line[position : match.start()])
        styled.append(f"[{match.group(1)}]", style=styles.LINK)
        styled.append(f"[{number}]", style=styles.LINK_NUMBER)
        numbers.append(number)
        position = match.end()
    styled.append(line[position:])
    return styled, numbers


def html_to_content(
    html: str, width: int, known_question_ids: Collection[int] | None = None
) -> ParsedContent:
    """Convert an HTML fragment into wrapped, styled lines and links.

    Args:
        html: HTML fragment such as a question or answer body
        width: Maximum display width of the rendered lines
        known_question_ids: Ids of questions available locally; a link to
            another question keeps its id only when listed here. None keeps
            every recognized id.

    Returns:
        ParsedContent with fragment-local link line indexes
    """
    if not html or not html.strip():
        return ParsedContent(lines=[Text("")])

    urls: list[str] = []
    code_blocks: list[tuple[str, str | None]] = []

    try:
        soup = BeautifulSoup(markup=html, features="html.parser")

        for anchor in soup.find_all(name="a"):
            text = " ".join(anchor.get_text().split())
            text = text.replace("[", "(").replace("]", ")")
            href = str(anchor.get("href") or "").strip()
            if text and href:
                urls.append(href)
                anchor.replace_with(soup.new_string(f"[{text}][{len(urls)}]"))
            else:
                anchor.unwrap()

        for img in soup.find_all(name="img"):
            img_alt = img.get("alt") or "No description"
            img.replace_with(soup.new_string(f"[Image: {img_alt}]"))

        for pre in soup.find_all(name="pre"):
            code_blocks.append((pre.get_text().rstrip("\n"), _code_language(pre)))
            placeholder = soup.new_tag("p")
            placeholder.string = f"__CODE_BLOCK_{len(code_blocks) - 1}__"
            pre.replace_with(placeholder)

        text = _convert_to_text(soup=soup, html=html)
    except Exception as e:
        logger.error(msg=f"Error parsing HTML: {e}", exc_info=True)
        text = re.sub(pattern=r"<[^>]+>", repl=" ", string=html)

    text = _clean_text(text=text)

    content = ParsedContent()
    for raw_line in text.split("\n"):
        code_match = CODE_PLACEHOLDER_REGEX.match(string=raw_line)
        if code_match and int(code_match.group("index")) < len(code_blocks):
            code, language = code_blocks[int(code_match.group("index"))]
            content.lines.extend(_code_lines(code=code, language=language, match=code_match))
            continue

        list_match = LIST_ITEM_REGEX.match(string=raw_line)
        indent = len(list_match.group(0)) if list_match else 0
        is_heading = raw_line.lstrip().startswith("#")

        for wrapped in wrap_text(text=raw_line, width=width, indent=indent):
            styled, numbers = style_link_references(line=wrapped, link_count=len(urls))
            if is_heading:
                styled.stylize(styles.HEADING)
            for number in numbers:
                url = urls[number - 1]
                question_id = classify_question_url(url=url)
                if (
                    question_id is not None
                    and known_question_ids is not None
                    and question_id not in known_question_ids
                ):
                    question_id = None
                content.links.append(
                    Link(
                        url=url,
                        line_index=len(content.lines),
                        number=number,
                        question_id=question_id,
                    )
                )
            content.lines.append(styled)

    if not content.lines:
        content.lines.append(Text(""))
    return content
