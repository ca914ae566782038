"""In-memory board state reconciled against the ticket files.

The board is only touched from the UI loop. Every reload is a full rescan
of each column directory, so whatever happened on disk (our writes, an
editor, an agent running ``mv``) ends up reflected the same way.
"""

import dataclasses
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from mdkanban.config import ColumnConfig, Config
from mdkanban.model.store import delete_ticket, list_tickets, move_ticket, write_ticket
from mdkanban.model.ticket import Ticket, new_ticket, now, ticket_filename

logger = logging.getLogger(__name__)

ErrorCallback = Callable[[str], None]


class Direction(Enum):
    LEFT = "left"
    RIGHT = "right"
    UP = "up"
    DOWN = "down"


@dataclass
class Column:
    """A configured column and the tickets last read from its directory."""

    config: ColumnConfig
    tickets: list[Ticket] = field(default_factory=list)


def _log_error(message: str) -> None:
    logger.warning("%s", message)


class Board:
    """Columns, tickets, selection and search filter."""

    def __init__(self, config: Config, on_error: ErrorCallback | None = None):
        self.config = config
        self.on_error = on_error or _log_error
        self.columns = [Column(col) for col in config.columns]
        self.active_column = 0
        self.active_ticket = 0
        self.filter = ""

    # -- Reading --

    def column_path(self, index: int) -> Path:
        return self.config.column_path(self.columns[index].config.dir)

    def _matches(self, ticket: Ticket) -> bool:
        return self.filter.lower() in ticket.title.lower()

    def visible_tickets(self, index: int) -> list[Ticket]:
        """Tickets of a column after applying the search filter."""
        if not 0 <= index < len(self.columns):
            return []
        tickets = self.columns[index].tickets
        if not self.filter:
            return list(tickets)
        return [t for t in tickets if self._matches(t)]

    def selected_ticket(self) -> Ticket | None:
        tickets = self.visible_tickets(self.active_column)
        if 0 <= self.active_ticket < len(tickets):
            return tickets[self.active_ticket]
        return None

    def find_column(self, ticket: Ticket) -> int | None:
        """Index of the column whose directory holds the ticket."""
        for i, col in enumerate(self.columns):
            if col.config.dir == ticket.column:
                return i
        return None

    # -- Reconciliation --

    def _on_skip(self, path: str, error: Exception) -> None:
        self.on_error(f"Skipped {Path(path).name}: {error}")

    def reload(self) -> None:
        """Re-read every column from disk and clamp the selection.

        A column that cannot be listed keeps its previous tickets.
        """
        for i, col in enumerate(self.columns):
            try:
                col.tickets = list_tickets(self.column_path(i), on_skip=self._on_skip)
            except OSError as e:
                logger.warning("cannot load column %s: %s", col.config.dir, e)
                self.on_error(f"Cannot load {col.config.name}: {e}")
        self._clamp()

    def _clamp(self) -> None:
        if not self.columns:
            self.active_column = 0
            self.active_ticket = 0
            return

        self.active_column = max(0, min(self.active_column, len(self.columns) - 1))

        count = len(self.visible_tickets(self.active_column))
        if self.active_ticket >= count:
            # Stay near where the user was rather than jumping to the top
            self.active_ticket = min(self.active_ticket - 1, count - 1)
        self.active_ticket = max(0, self.active_ticket)

    # -- Selection --

    def select(self, column: int, ticket: int = 0) -> None:
        self.active_column = column
        self.active_ticket = ticket
        self._clamp()

    def move_selection(self, direction: Direction) -> None:
        if direction is Direction.LEFT:
            if self.active_column > 0:
                self.active_column -= 1
                self.active_ticket = 0
        elif direction is Direction.RIGHT:
            if self.active_column < len(self.columns) - 1:
                self.active_column += 1
                self.active_ticket = 0
        elif direction is Direction.UP:
            if self.active_ticket > 0:
                self.active_ticket -= 1
        elif direction is Direction.DOWN:
            if self.active_ticket < len(self.visible_tickets(self.active_column)) - 1:
                self.active_ticket += 1

    def set_filter(self, query: str) -> None:
        """Show only tickets whose title contains ``query``, ignoring case."""
        self.filter = query.strip()
        self.active_ticket = 0
        self._clamp()

    # -- Mutations --

    def create_ticket(
        self,
        title: str,
        tags: list[str] | None = None,
        body: str = "",
        column: int | None = None,
    ) -> Ticket:
        """Write a new ticket into a column (default: the active one)."""
        title = title.strip()
        if not title:
            raise ValueError("Title cannot be empty")

        index = self.active_column if column is None else column
        col = self.columns[index]
        ticket = new_ticket(title, column=col.config.dir, tags=tags, body=body)
        ticket.path = str(self.column_path(index) / ticket_filename(ticket))

        write_ticket(ticket)
        self.reload()
        return ticket

    def save_ticket(
        self,
        ticket: Ticket,
        title: str | None = None,
        tags: list[str] | None = None,
        body: str | None = None,
        agent_feedback: str | None = None,
    ) -> Ticket:
        """Rewrite a ticket in place with a fresh ``updated`` time.

        The given ticket is left untouched; the saved copy is returned.
        """
        changes = {"updated": now()}
        if title is not None:
            title = title.strip()
            if not title:
                raise ValueError("Title cannot be empty")
            changes["title"] = title
        if tags is not None:
            changes["tags"] = list(tags)
        if body is not None:
            changes["body"] = body.strip()
        if agent_feedback is not None:
            changes["agent_feedback"] = agent_feedback

        saved = dataclasses.replace(ticket, **changes)
        write_ticket(saved)
        self.reload()
        return saved

    def move_ticket(self, ticket: Ticket, column: int) -> Ticket:
        """Move a ticket's file into another column's directory."""
        target = self.columns[column].config
        if ticket.column == target.dir:
            return ticket

        moved = dataclasses.replace(ticket)
        move_ticket(moved, self.column_path(column))
        self.reload()
        return moved

    def delete_ticket(self, ticket: Ticket) -> None:
        delete_ticket(ticket)
        self.reload()
