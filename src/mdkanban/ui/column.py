"""Column widget showing one column's tickets."""

from rich.text import Text
from textual.color import Color, ColorParseError
from textual.widgets import Static

from mdkanban.model.board import Board
from mdkanban.model.ticket import Ticket


def _parse_color(value: str) -> Color | None:
    if not value:
        return None
    try:
        return Color.parse(value)
    except ColorParseError:
        return None


def render_ticket(ticket: Ticket, selected: bool) -> Text:
    """Two-line card: title, then tags and date."""
    text = Text()
    marker = "▶ " if selected else "  "
    text.append(marker + ticket.title, style="reverse bold" if selected else "bold")
    if ticket.agent_feedback:
        text.append(" ✓", style="green")
    text.append("\n")

    details = Text("  ", style="dim")
    if ticket.tags:
        details.append(" ".join(f"#{tag}" for tag in ticket.tags), style="cyan")
        details.append("  ")
    details.append(f"{ticket.updated:%Y-%m-%d}", style="dim")
    text.append_text(details)
    return text


class ColumnWidget(Static):
    """A board column. Renders from the Board; holds no state of its own."""

    DEFAULT_CSS = """
    ColumnWidget {
        width: 1fr;
        height: 100%;
        min-width: 20;
        padding: 0 1;
        border: round $surface-lighten-2;
        border-title-style: bold;
    }
    ColumnWidget.-active {
        border: heavy $accent;
    }
    """

    def __init__(self, board: Board, index: int, **kwargs) -> None:
        super().__init__(**kwargs)
        self.board = board
        self.index = index

    def on_mount(self) -> None:
        self.refresh_tickets()

    def refresh_tickets(self) -> None:
        column = self.board.columns[self.index]
        tickets = self.board.visible_tickets(self.index)
        active = self.index == self.board.active_column

        self.set_class(active, "-active")
        color = _parse_color(column.config.color)
        if color is not None:
            self.styles.border = ("heavy" if active else "round", color)
        self.border_title = f"{column.config.name} ({len(tickets)})"

        if not tickets:
            self.update(Text("No tickets", style="dim italic"))
            return

        text = Text()
        for i, ticket in enumerate(tickets):
            if i:
                text.append("\n\n")
            text.append_text(render_ticket(ticket, active and i == self.board.active_ticket))
        self.update(text)
