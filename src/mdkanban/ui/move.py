"""Column picker for moving a ticket."""

from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Vertical
from textual.screen import ModalScreen
from textual.widgets import Static


class MoveScreen(ModalScreen[int | None]):
    """Pick a target column with h/l; dismisses with its index."""

    DEFAULT_CSS = """
    MoveScreen {
        align: center middle;
    }
    #move-dialog {
        width: auto;
        min-width: 40;
        height: auto;
        border: thick $primary;
        background: $surface;
        padding: 1 2;
    }
    #move-title {
        text-style: bold;
        margin-bottom: 1;
    }
    #move-help {
        color: $text-muted;
        margin-top: 1;
    }
    """

    BINDINGS = [
        ("h,left", "previous", "Left"),
        ("l,right", "next", "Right"),
        ("enter", "choose", "Move"),
        ("escape", "cancel", "Cancel"),
    ]

    def __init__(self, title: str, columns: list[str], current: int) -> None:
        super().__init__()
        self.ticket_title = title
        self.columns = columns
        self.current = current
        self.target = current

    def compose(self) -> ComposeResult:
        with Vertical(id="move-dialog"):
            yield Static(f"Move: {self.ticket_title}", id="move-title")
            yield Static(self._render_columns(), id="move-columns")
            yield Static("h/l choose · enter move · esc cancel", id="move-help")

    def _render_columns(self) -> Text:
        text = Text()
        for i, name in enumerate(self.columns):
            if i:
                text.append("  ")
            if i == self.target:
                style = "reverse bold"
            elif i == self.current:
                style = "dim"
            else:
                style = ""
            text.append(f" {name} ", style=style)
        return text

    def _set_target(self, index: int) -> None:
        self.target = max(0, min(index, len(self.columns) - 1))
        self.query_one("#move-columns", Static).update(self._render_columns())

    def action_previous(self) -> None:
        self._set_target(self.target - 1)

    def action_next(self) -> None:
        self._set_target(self.target + 1)

    def action_choose(self) -> None:
        self.dismiss(self.target)

    def action_cancel(self) -> None:
        self.dismiss(None)
