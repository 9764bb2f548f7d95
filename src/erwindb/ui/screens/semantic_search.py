"""Modal prompt for a semantic search query."""

from typing import ClassVar

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Container
from textual.screen import ModalScreen
from textual.widgets import Input, Static


class SemanticSearchScreen(ModalScreen[str | None]):
    """Asks for a free-text query; dismisses with the query or None."""

    BINDINGS: ClassVar[list[Binding]] = [
        Binding("escape", "cancel", "Cancel"),
    ]

    def __init__(self, available: bool = True) -> None:
        """Initialize the prompt.

        Args:
            available: Whether a semantic backend is configured
        """
        super().__init__()
        self.available = available

    def compose(self) -> ComposeResult:
        """Define the content layout of the prompt."""
        with Container(id="semantic-container"):
            yield Static("Semantic search", id="semantic-title")
            if not self.available:
                yield Static(
                    "No embedding model configured, searches return no results.",
                    id="semantic-warning",
                )
            yield Input(placeholder="Describe what you are looking for", id="semantic-input")

    def on_mount(self) -> None:
        self.query_one("#semantic-input", Input).focus()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        """Dismiss with the entered query."""
        query = event.value.strip()
        self.dismiss(result=query or None)

    def action_cancel(self) -> None:
        self.dismiss(result=None)
