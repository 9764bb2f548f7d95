"""Help screen for erwindb."""

from textual.app import ComposeResult
from textual.screen import Screen
from textual.widgets import MarkdownViewer

HELP_TEXT = """# ErwinDB Help

## Navigation Model
ErwinDB uses a stack-based navigation:
1. **Question List** → Select a question, filter by title or search by meaning
2. **Question View** → Read the question, its answers and comments

## Question List Screen
- **j / k / ↓ / ↑**: Move selection
- **g / G**: First / last question
- **space**: Page down
- **Ctrl+D / Ctrl+U**: Half page down / up
- **1-5**: Sort by Id, Date, Score, Views, Answers (again to flip direction)
- **/**: Filter by title (fuzzy)
- **?**: Semantic search
- **Enter**: Open question
- **o**: Open question in browser
- **Escape**: Clear search results
- **q**: Clear search results, or quit

## Question View Screen
- **j / k / ↓ / ↑**: Scroll one line
- **space / d**: Page down
- **u**: Page up
- **Ctrl+D / Ctrl+U**: Half page down / up
- **g / G**: Top / bottom
- **e / E**: Next / previous highlighted answer (side pane on wide terminals)
- **Tab / Shift+Tab**: Next / previous link
- **o**: Open focused link, or the question in browser
- **Escape**: Clear focused link, or go back
- **q / b**: Go back

## Everywhere
- **h**: Show/hide this help
- **Ctrl+T**: Toggle dark mode

## Tips
- Links to questions in the local database open inside ErwinDB
- Back returns through every question you followed a link to
"""


class HelpScreen(Screen):
    """A screen that displays help information."""

    def compose(self) -> ComposeResult:
        """Compose the help screen content."""
        yield MarkdownViewer(markdown=HELP_TEXT, id="help-content")

    def on_key(self, event) -> None:  # noqa: ANN001
        """Close the help screen on any key except scrolling keys."""
        if event.key not in ["up", "down", "page_up", "page_down"]:
            event.prevent_default()
            event.stop()
            self.app.pop_screen()
