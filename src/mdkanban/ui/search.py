"""Search prompt for filtering tickets by title."""

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.screen import ModalScreen
from textual.widgets import Input, Static


class SearchScreen(ModalScreen[str]):
    """Dismisses with the query on enter, or "" on escape to clear it."""

    DEFAULT_CSS = """
    SearchScreen {
        align: center top;
    }
    #search-dialog {
        width: 50;
        height: auto;
        margin-top: 3;
        border: thick $primary;
        background: $surface;
        padding: 0 1;
    }
    #search-help {
        color: $text-muted;
    }
    """

    BINDINGS = [Binding("escape", "clear", "Clear search", priority=True)]

    def __init__(self, query: str = "") -> None:
        super().__init__()
        self.query_text = query

    def compose(self) -> ComposeResult:
        with Vertical(id="search-dialog"):
            yield Input(value=self.query_text, placeholder="Search tickets...", max_length=50)
            yield Static("enter filter · esc clear", id="search-help")

    def on_mount(self) -> None:
        self.query_one(Input).focus()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        event.stop()
        self.dismiss(event.value.strip())

    def action_clear(self) -> None:
        self.dismiss("")
