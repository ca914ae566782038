"""Modal screens for creating, editing and viewing a ticket."""

from dataclasses import dataclass

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Vertical, VerticalScroll
from textual.screen import ModalScreen
from textual.widgets import Input, Markdown, Static, TextArea

from mdkanban.model.ticket import Ticket


def parse_tags(text: str) -> list[str]:
    """Split comma-separated tags, dropping blanks."""
    return [tag.strip() for tag in text.split(",") if tag.strip()]


@dataclass
class TicketDraft:
    """What the editor hands back on save."""

    title: str
    tags: list[str]
    body: str


MODAL_CSS = """
.modal-box {
    width: 80%;
    height: 80%;
    background: $surface;
    border: thick $primary;
    padding: 0 1;
}
.modal-heading {
    width: 100%;
    height: 1;
    text-style: bold;
    background: $primary;
    padding: 0 1;
    margin-bottom: 1;
}
.modal-help {
    width: 100%;
    height: 1;
    color: $text-muted;
}
"""


class TicketEditor(ModalScreen[TicketDraft | None]):
    """Create a ticket, or edit an existing one when ``ticket`` is given."""

    DEFAULT_CSS = (
        MODAL_CSS
        + """
    TicketEditor {
        align: center middle;
    }
    TicketEditor #body {
        height: 1fr;
    }
    TicketEditor #editor-error {
        color: $error;
        height: auto;
    }
    """
    )

    BINDINGS = [
        Binding("ctrl+s", "save", "Save", priority=True),
        Binding("escape", "cancel", "Cancel", priority=True),
    ]

    def __init__(self, ticket: Ticket | None = None) -> None:
        super().__init__()
        self.ticket = ticket

    def compose(self) -> ComposeResult:
        ticket = self.ticket
        heading = f"Edit: {ticket.title}" if ticket else "New ticket"
        with Vertical(classes="modal-box"):
            yield Static(heading, classes="modal-heading")
            yield Input(
                value=ticket.title if ticket else "",
                placeholder="Enter ticket title...",
                max_length=100,
                id="title",
            )
            yield Input(
                value=", ".join(ticket.tags) if ticket else "",
                placeholder="Enter tags (comma-separated)...",
                id="tags",
            )
            yield TextArea(ticket.body if ticket else "", id="body")
            yield Static("", id="editor-error")
            yield Static("ctrl+s save · esc cancel · tab next field", classes="modal-help")

    def on_mount(self) -> None:
        self.query_one("#title", Input).focus()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        event.stop()
        self.focus_next()

    def action_save(self) -> None:
        title = self.query_one("#title", Input).value.strip()
        if not title:
            self.query_one("#editor-error", Static).update("Title cannot be empty")
            return
        self.dismiss(
            TicketDraft(
                title=title,
                tags=parse_tags(self.query_one("#tags", Input).value),
                body=self.query_one("#body", TextArea).text.strip(),
            )
        )

    def action_cancel(self) -> None:
        self.dismiss(None)


class FeedbackScreen(ModalScreen[None]):
    """Full-screen view of a ticket's agent feedback."""

    DEFAULT_CSS = (
        MODAL_CSS
        + """
    FeedbackScreen {
        align: center middle;
    }
    """
    )

    BINDINGS = [
        ("escape", "close", "Close"),
        ("q", "close", "Close"),
        ("f", "close", "Close"),
    ]

    def __init__(self, ticket: Ticket) -> None:
        super().__init__()
        self.ticket = ticket

    def compose(self) -> ComposeResult:
        with Vertical(classes="modal-box"):
            yield Static(f"Agent feedback: {self.ticket.title}", classes="modal-heading")
            with VerticalScroll():
                yield Markdown(self.ticket.agent_feedback)
            yield Static("esc close", classes="modal-help")

    def action_close(self) -> None:
        self.dismiss(None)


class TicketViewer(ModalScreen[str | None]):
    """Read-only ticket view. Dismisses with "edit" to switch to the editor."""

    DEFAULT_CSS = (
        MODAL_CSS
        + """
    TicketViewer {
        align: center middle;
    }
    TicketViewer #meta {
        color: $text-muted;
        margin-bottom: 1;
    }
    """
    )

    BINDINGS = [
        ("escape", "close", "Close"),
        ("q", "close", "Close"),
        ("e", "edit", "Edit"),
        ("f", "feedback", "Agent feedback"),
    ]

    def __init__(self, ticket: Ticket) -> None:
        super().__init__()
        self.ticket = ticket

    def compose(self) -> ComposeResult:
        ticket = self.ticket
        meta = [f"Created {ticket.created:%Y-%m-%d %H:%M}", f"Updated {ticket.updated:%Y-%m-%d %H:%M}"]
        if ticket.tags:
            meta.append("Tags: " + ", ".join(ticket.tags))
        help_text = "e edit · esc close"
        if ticket.agent_feedback:
            help_text = "e edit · f agent feedback · esc close"

        with Vertical(classes="modal-box"):
            yield Static(ticket.title, classes="modal-heading")
            yield Static("  ·  ".join(meta), id="meta")
            with VerticalScroll():
                yield Markdown(ticket.body or "_No description._")
            yield Static(help_text, classes="modal-help")

    def action_close(self) -> None:
        self.dismiss(None)

    def action_edit(self) -> None:
        self.dismiss("edit")

    def action_feedback(self) -> None:
        if self.ticket.agent_feedback:
            self.app.push_screen(FeedbackScreen(self.ticket))
