"""Key binding reference."""

from rich.table import Table
from textual.app import ComposeResult
from textual.containers import Vertical
from textual.screen import ModalScreen
from textual.widgets import Static

KEYS = [
    ("h / ←", "Previous column"),
    ("l / →", "Next column"),
    ("k / ↑", "Previous ticket"),
    ("j / ↓", "Next ticket"),
    ("n", "New ticket"),
    ("enter", "View ticket"),
    ("e", "Edit ticket"),
    ("o", "Open ticket in external editor"),
    ("m", "Move ticket"),
    ("d", "Delete ticket"),
    ("/", "Search by title"),
    ("esc", "Clear search"),
    ("r", "Reload from disk"),
    ("p", "Copy agent prompt for ticket"),
    ("P", "Copy agent prompt for first column"),
    ("?", "Toggle help"),
    ("q", "Quit"),
]


class HelpScreen(ModalScreen[None]):
    DEFAULT_CSS = """
    HelpScreen {
        align: center middle;
    }
    #help-dialog {
        width: 60;
        height: auto;
        border: thick $primary;
        background: $surface;
        padding: 1 2;
    }
    """

    BINDINGS = [
        ("escape", "close", "Close"),
        ("q", "close", "Close"),
        ("question_mark", "close", "Close"),
    ]

    def compose(self) -> ComposeResult:
        table = Table.grid(padding=(0, 3))
        table.add_column(style="bold cyan")
        table.add_column()
        for key, description in KEYS:
            table.add_row(key, description)
        with Vertical(id="help-dialog"):
            yield Static(table)

    def action_close(self) -> None:
        self.dismiss(None)
