"""Tickets, their on-disk store and the board reconciled from it."""

from mdkanban.model.board import Board, Column, Direction
from mdkanban.model.store import delete_ticket, list_tickets, move_ticket, read_ticket, write_ticket
from mdkanban.model.ticket import (
    Ticket,
    new_ticket,
    parse_ticket,
    serialize_ticket,
    short_title,
    slugify,
    ticket_filename,
)

__all__ = [
    "Board",
    "Column",
    "Direction",
    "Ticket",
    "delete_ticket",
    "list_tickets",
    "move_ticket",
    "new_ticket",
    "parse_ticket",
    "read_ticket",
    "serialize_ticket",
    "short_title",
    "slugify",
    "ticket_filename",
    "write_ticket",
]
