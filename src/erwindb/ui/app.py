"""Application class for erwindb."""

import logging
import sys
from pathlib import PurePath
from typing import ClassVar, Final

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.screen import Screen
from textual.widgets import Footer, Header

from ..config import Configuration
from ..database import Database
from ..navigator import Navigator
from ..search.semantic import SemanticSearch
from .screens.help import HelpScreen

logger: logging.Logger = logging.getLogger(name=__name__)


class ErwinDBApp(App[None]):
    """A Textual app for browsing a local question archive."""

    TITLE = "ErwinDB"

    BINDINGS: ClassVar[list[Binding | tuple[str, str] | tuple[str, str, str]]] = [
        ("h", "toggle_help", "Help"),
        ("ctrl+t", "toggle_dark", "Toggle dark mode"),
    ]

    SCREENS: ClassVar[dict[str, type[Screen]]] = {
        "help": HelpScreen,
    }

    CSS_PATH: Final[list[str | PurePath]] = ["styles.tcss"]

    def __init__(self) -> None:
        """Initialize the app and open the question database.

        Raises:
            StorageError: If the configured database does not exist
        """
        super().__init__()

        self.configuration = Configuration(exec_args=sys.argv[1:])

        self.theme = (
            "textual-dark"
            if self.configuration.default_theme == "dark"
            else "textual-light"
        )

        self.database: Database = Database.open_existing(
            path=self.configuration.database_path
        )
        questions = self.database.get_questions()
        logger.info(msg=f"Loaded {len(questions)} questions")

        self.navigator = Navigator(
            storage=self.database,
            questions=questions,
            distinguished_author=self.configuration.distinguished_author,
            dual_pane_min_width=self.configuration.dual_pane_min_width,
            semantic=SemanticSearch(index=self.database),
            semantic_limit=self.configuration.semantic_limit,
        )

    def on_ready(self) -> None:
        """Push the question list as the initial screen."""
        from .screens.question_list import QuestionListScreen  # noqa: PLC0415

        self.push_screen(QuestionListScreen())

    def compose(self) -> ComposeResult:
        """Compose the base layout (screens manage their own content)."""
        yield Header(show_clock=True)
        yield Footer()

    def action_toggle_dark(self) -> None:
        """Toggle between dark and light theme."""
        self.theme = (
            "textual-dark" if self.theme == "textual-light" else "textual-light"
        )

    def action_toggle_help(self) -> None:
        """Show or hide the help screen."""
        if isinstance(self.screen, HelpScreen):
            self.pop_screen()
        else:
            self.push_screen(screen=HelpScreen())

    def on_unmount(self) -> None:
        """Close the database when the app is closed."""
        self.database.close()
