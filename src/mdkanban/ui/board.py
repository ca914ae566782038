"""Board screen showing the kanban columns."""

import logging
import os
import shlex
import subprocess

from textual.app import ComposeResult, SuspendNotSupported
from textual.binding import Binding
from textual.containers import Horizontal
from textual.screen import Screen
from textual.timer import Timer
from textual.widgets import Footer, Static

from mdkanban.constants import STATUS_TIMEOUT
from mdkanban.errors import PromptError
from mdkanban.model.board import Board, Direction
from mdkanban.model.ticket import Ticket, short_title
from mdkanban.prompts import render_batch_prompt, render_single_prompt
from mdkanban.ui.column import ColumnWidget
from mdkanban.ui.confirm import ConfirmScreen
from mdkanban.ui.editor import TicketDraft, TicketEditor, TicketViewer
from mdkanban.ui.help import HelpScreen
from mdkanban.ui.move import MoveScreen
from mdkanban.ui.search import SearchScreen

logger = logging.getLogger(__name__)

RECOVERABLE = (OSError, ValueError, PromptError)


class BoardScreen(Screen):
    """Main screen: one column widget per configured column."""

    DEFAULT_CSS = """
    BoardScreen {
        layout: vertical;
    }
    #board-header {
        height: 1;
        width: 100%;
        background: $primary;
        color: $text;
        padding: 0 1;
        text-style: bold;
    }
    #columns {
        height: 1fr;
    }
    #status {
        height: 1;
        width: 100%;
        padding: 0 1;
        color: $warning;
    }
    """

    BINDINGS = [
        Binding("h,left", "select('left')", "Left", show=False),
        Binding("l,right", "select('right')", "Right", show=False),
        Binding("k,up", "select('up')", "Up", show=False),
        Binding("j,down", "select('down')", "Down", show=False),
        ("n", "new_ticket", "New"),
        ("enter", "view_ticket", "View"),
        ("e", "edit_ticket", "Edit"),
        Binding("o", "open_external", "Open in editor", show=False),
        ("m", "move_ticket", "Move"),
        ("d", "delete_ticket", "Delete"),
        ("slash", "search", "Search"),
        Binding("escape", "clear_search", "Clear search", show=False),
        ("r", "reload", "Refresh"),
        ("p", "copy_prompt", "Prompt"),
        Binding("P,shift+p", "copy_batch_prompt", "Batch prompt", show=False),
        ("question_mark", "help", "Help"),
        ("q", "quit", "Quit"),
    ]

    def __init__(self, board: Board):
        super().__init__()
        self.board = board
        self._status_timer: Timer | None = None

    def compose(self) -> ComposeResult:
        yield Static(self._header_text(), id="board-header")
        with Horizontal(id="columns"):
            for i in range(len(self.board.columns)):
                yield ColumnWidget(self.board, i)
        yield Static("", id="status")
        yield Footer()

    def _header_text(self) -> str:
        if self.board.filter:
            return f"mdkanban  ·  filter: {self.board.filter}"
        return "mdkanban"

    # -- Rendering --

    def refresh_board(self) -> None:
        """Re-render every column from the board state."""
        if not self.is_mounted:
            return
        self.query_one("#board-header", Static).update(self._header_text())
        for column in self.query(ColumnWidget):
            column.refresh_tickets()

    def set_status(self, message: str) -> None:
        """Show a message in the status line for a few seconds."""
        if not self.is_mounted:
            return
        self.query_one("#status", Static).update(message)
        if self._status_timer is not None:
            self._status_timer.stop()
        self._status_timer = self.set_timer(STATUS_TIMEOUT, self._clear_status)

    def _clear_status(self) -> None:
        self._status_timer = None
        self.query_one("#status", Static).update("")

    def _fail(self, action: str, error: Exception) -> None:
        logger.warning("%s failed: %s", action, error)
        self.set_status(f"Error: {error}")

    # -- Navigation --

    def action_select(self, direction: str) -> None:
        self.board.move_selection(Direction(direction))
        self.refresh_board()

    def action_search(self) -> None:
        self.app.push_screen(SearchScreen(self.board.filter), self._on_search)

    def _on_search(self, query: str | None) -> None:
        self.board.set_filter(query or "")
        self.refresh_board()

    def action_clear_search(self) -> None:
        if self.board.filter:
            self.board.set_filter("")
            self.refresh_board()

    def action_reload(self) -> None:
        self.board.reload()
        self.refresh_board()

    def action_help(self) -> None:
        self.app.push_screen(HelpScreen())

    def action_quit(self) -> None:
        self.app.action_quit()

    # -- Ticket actions --

    def action_new_ticket(self) -> None:
        self.app.push_screen(TicketEditor(), self._on_new_ticket)

    def _on_new_ticket(self, draft: TicketDraft | None) -> None:
        if draft is None:
            return
        try:
            ticket = self.board.create_ticket(draft.title, tags=draft.tags, body=draft.body)
        except RECOVERABLE as e:
            self._fail("create", e)
            return
        self._select_ticket(ticket)
        self.refresh_board()
        self.set_status(f"Created: {short_title(ticket, 40)}")

    def _select_ticket(self, ticket: Ticket) -> None:
        """Point the selection at a ticket by path, if it is visible."""
        column = self.board.find_column(ticket)
        if column is None:
            return
        for i, visible in enumerate(self.board.visible_tickets(column)):
            if visible.path == ticket.path:
                self.board.select(column, i)
                return

    def action_view_ticket(self) -> None:
        ticket = self.board.selected_ticket()
        if ticket is None:
            return

        def on_close(result: str | None) -> None:
            if result == "edit":
                self._edit(ticket)

        self.app.push_screen(TicketViewer(ticket), on_close)

    def action_edit_ticket(self) -> None:
        ticket = self.board.selected_ticket()
        if ticket is not None:
            self._edit(ticket)

    def _edit(self, ticket: Ticket) -> None:
        def on_save(draft: TicketDraft | None) -> None:
            if draft is None:
                return
            try:
                saved = self.board.save_ticket(ticket, title=draft.title, tags=draft.tags, body=draft.body)
            except RECOVERABLE as e:
                self._fail("save", e)
                return
            self._select_ticket(saved)
            self.refresh_board()
            self.set_status(f"Saved: {short_title(saved, 40)}")

        self.app.push_screen(TicketEditor(ticket), on_save)

    def action_open_external(self) -> None:
        ticket = self.board.selected_ticket()
        if ticket is None:
            return
        editor = self.board.config.editor or os.environ.get("EDITOR", "")
        if not editor:
            self.set_status("No editor configured (set $EDITOR)")
            return
        try:
            with self.app.suspend():
                subprocess.run([*shlex.split(editor), ticket.path], check=False)
        except SuspendNotSupported:
            self.set_status("Cannot open an external editor here")
            return
        except OSError as e:
            self._fail("open editor", e)
            return
        self.board.reload()
        self.refresh_board()

    def action_move_ticket(self) -> None:
        ticket = self.board.selected_ticket()
        if ticket is None:
            return
        names = [col.config.name for col in self.board.columns]
        current = self.board.active_column

        def on_pick(target: int | None) -> None:
            if target is None or target == current:
                return
            try:
                moved = self.board.move_ticket(ticket, target)
            except RECOVERABLE as e:
                self._fail("move", e)
                return
            self.refresh_board()
            self.set_status(f"Moved to {names[target]}: {short_title(moved, 40)}")

        self.app.push_screen(MoveScreen(ticket.title, names, current), on_pick)

    def action_delete_ticket(self) -> None:
        ticket = self.board.selected_ticket()
        if ticket is None:
            return

        def on_confirm(confirmed: bool | None) -> None:
            if not confirmed:
                return
            try:
                self.board.delete_ticket(ticket)
            except RECOVERABLE as e:
                self._fail("delete", e)
                return
            self.refresh_board()
            self.set_status(f"Deleted: {short_title(ticket, 40)}")

        self.app.push_screen(ConfirmScreen(f"Delete '{short_title(ticket, 40)}'?"), on_confirm)

    # -- Agent prompts --

    def action_copy_prompt(self) -> None:
        ticket = self.board.selected_ticket()
        if ticket is None:
            return
        try:
            prompt = render_single_prompt(ticket, self.board.config)
        except RECOVERABLE as e:
            self._fail("prompt", e)
            return
        self.app.copy_to_clipboard(prompt)
        self.set_status("Prompt copied to clipboard")

    def action_copy_batch_prompt(self) -> None:
        if not self.board.columns:
            return
        # Every ticket in the first column, whatever the search filter shows
        tickets = list(self.board.columns[0].tickets)
        name = self.board.columns[0].config.name
        if not tickets:
            self.set_status(f"No tickets in {name}")
            return
        try:
            prompt = render_batch_prompt(tickets, self.board.config)
        except RECOVERABLE as e:
            self._fail("prompt", e)
            return
        self.app.copy_to_clipboard(prompt)
        self.set_status(f"Batch prompt for {len(tickets)} tickets copied")
