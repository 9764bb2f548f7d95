"""Syntax highlighting of code blocks into styled terminal lines."""

import logging
from functools import lru_cache

from pygments import lex
from pygments.lexer import Lexer
from pygments.lexers import TextLexer, get_lexer_by_name
from pygments.util import ClassNotFound
from rich.syntax import PygmentsSyntaxTheme
from rich.text import Text

from ..cache import LimitedSizeDict

logger: logging.Logger = logging.getLogger(name=__name__)

DEFAULT_LANGUAGE = "sql"
PLAIN_LANGUAGE = "text"
THEME_NAME = "monokai"

_highlight_cache: LimitedSizeDict = LimitedSizeDict(max_size=256)


@lru_cache(maxsize=None)
def _get_theme() -> PygmentsSyntaxTheme:
    return PygmentsSyntaxTheme(theme=THEME_NAME)


@lru_cache(maxsize=64)
def _get_lexer(language: str) -> Lexer:
    """Return a lexer for the language, falling back to the default grammar."""
    if language == PLAIN_LANGUAGE:
        return TextLexer()
    try:
        return get_lexer_by_name(language)
    except ClassNotFound:
        logger.debug(msg=f"No lexer for '{language}', using {DEFAULT_LANGUAGE}")
        return get_lexer_by_name(DEFAULT_LANGUAGE)


def _plain_lines(code: str) -> list[Text]:
    lines = code.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return [Text(line) for line in lines] or [Text("")]


def highlight_code(code: str, language: str | None = None) -> list[Text]:
    """Highlight code into one styled line per source line.

    Args:
        code: Source code text
        language: Language hint such as "sql" or "python"; "text" disables
            highlighting, None or an unknown name uses the default grammar

    Returns:
        List of styled lines; never empty
    """
    language = (language or DEFAULT_LANGUAGE).lower()
    key = (language, code)
    cached = _highlight_cache.lookup(key)
    if cached is not None:
        return [line.copy() for line in cached]

    try:
        lexer = _get_lexer(language)
        theme = _get_theme()
        lines: list[Text] = [Text()]
        for token_type, value in lex(code, lexer):
            style = theme.get_style_for_token(token_type)
            parts = value.split("\n")
            for i, part in enumerate(parts):
                if i > 0:
                    lines.append(Text())
                if part:
                    lines[-1].append(part, style=style)
        # pygments always terminates the input with a newline
        if len(lines) > 1 and not lines[-1].plain:
            lines.pop()
    except Exception as e:
        logger.error(msg=f"Error highlighting {language} code: {e}")
        lines = _plain_lines(code)

    _highlight_cache[key] = lines
    return [line.copy() for line in lines]
