"""UI helper functions for erwindb."""

import html
import logging
import re
from datetime import datetime, timezone

from bs4 import BeautifulSoup
from rich.cells import cell_len, set_cell_size

logger: logging.Logger = logging.getLogger(name=__name__)


def format_date(timestamp: int) -> str:
    """Format a unix timestamp as e.g. "Mar 05, 2019".

    Args:
        timestamp: Seconds since the epoch, 0 when unknown

    Returns:
        Formatted date, or "N/A" for an unknown date
    """
    if not timestamp:
        return "N/A"
    try:
        return datetime.fromtimestamp(timestamp, tz=timezone.utc).strftime("%b %d, %Y")
    except (OverflowError, OSError, ValueError) as e:
        logger.error(msg=f"Error formatting timestamp '{timestamp}': {e}")
        return "N/A"


def format_number(value: int) -> str:
    """Format a count compactly: 999, 1.2K, 3.4M."""
    if value >= 1_000_000:
        return f"{value / 1_000_000:.1f}M"
    if value >= 1_000:
        return f"{value / 1_000:.1f}K"
    return str(value)


def format_score(score: int) -> str:
    """Format a vote score with an explicit sign for positive values."""
    return f"+{score}" if score > 0 else str(score)


def decode_title(title: str) -> str:
    """Decode HTML entities in a question title."""
    return html.unescape(title or "")


def strip_html_tags(text: str) -> str:
    """Reduce an HTML snippet to a single line of plain text.

    Args:
        text: HTML text such as a comment

    Returns:
        The visible text with all whitespace collapsed
    """
    if not text:
        return ""
    try:
        plain = BeautifulSoup(markup=text, features="html.parser").get_text()
    except Exception as e:
        logger.error(msg=f"Error stripping HTML: {e}")
        plain = re.sub(pattern=r"<[^>]+>", repl="", string=text)
    return " ".join(plain.split())


def truncate_cells(text: str, width: int, ellipsis: str = "…") -> str:
    """Truncate text to at most width display columns.

    Args:
        text: Text to truncate
        width: Maximum display width
        ellipsis: Marker appended when text was cut

    Returns:
        The text, shortened with the ellipsis if it did not fit
    """
    if width <= 0:
        return ""
    if cell_len(text) <= width:
        return text
    if width <= cell_len(ellipsis):
        return set_cell_size(text, width)
    return set_cell_size(text, width - cell_len(ellipsis)).rstrip() + ellipsis
