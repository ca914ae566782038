"""Read and write ticket files inside column directories.

This is the only module that touches ticket files on disk.
"""

import logging
import os
import tempfile
from collections.abc import Callable
from contextlib import suppress
from pathlib import Path

from mdkanban.constants import TICKET_EXT
from mdkanban.errors import ParseError
from mdkanban.model.ticket import Ticket, parse_ticket, serialize_ticket

logger = logging.getLogger(__name__)

SkipCallback = Callable[[str, Exception], None]

DEFAULT_FILE_MODE = 0o644


def read_ticket(path: str | Path) -> Ticket:
    """Read and parse one ticket file.

    A ticket without a title is shown under its filename stem.
    """
    path = Path(path)
    ticket = parse_ticket(path.read_bytes(), path=str(path))
    if not ticket.title.strip():
        ticket.title = path.stem
    return ticket


def list_tickets(column_dir: str | Path, on_skip: SkipCallback | None = None) -> list[Ticket]:
    """Load every ticket directly inside a column directory.

    Returns tickets newest-updated first. A missing directory is an empty
    column. Files that cannot be read or parsed are skipped and reported
    through ``on_skip``; other listing errors propagate as OSError.
    """
    try:
        with os.scandir(column_dir) as it:
            entries = sorted(it, key=lambda entry: entry.name)
    except FileNotFoundError:
        return []

    tickets = []
    for entry in entries:
        if not entry.name.endswith(TICKET_EXT):
            continue
        try:
            if not entry.is_file():
                continue
            ticket = read_ticket(entry.path)
        except (ParseError, OSError) as e:
            logger.warning("skipping ticket %s: %s", entry.path, e)
            if on_skip is not None:
                on_skip(entry.path, e)
            continue
        tickets.append(ticket)

    # Stable: equal timestamps keep filename order
    tickets.sort(key=lambda ticket: ticket.updated, reverse=True)
    return tickets


def _require_path(ticket: Ticket) -> Path:
    if not ticket.path:
        raise ValueError("ticket has no file path")
    return Path(ticket.path)


def write_ticket(ticket: Ticket) -> None:
    """Write a ticket to its path, replacing any previous contents.

    The data goes to a temporary sibling first and is renamed into place,
    so readers see either the old file or the new one.
    """
    path = _require_path(ticket)
    path.parent.mkdir(parents=True, exist_ok=True)

    try:
        mode = path.stat().st_mode & 0o777
    except FileNotFoundError:
        mode = DEFAULT_FILE_MODE

    data = serialize_ticket(ticket)
    fd, tmp = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
        os.chmod(tmp, mode)
        os.replace(tmp, path)
    except BaseException:
        with suppress(FileNotFoundError):
            os.unlink(tmp)
        raise

    ticket.column = path.parent.name


def move_ticket(ticket: Ticket, target_dir: str | Path) -> None:
    """Move a ticket file into another column directory.

    The ticket's path and column change only once the rename succeeded.
    """
    source = _require_path(ticket)
    target_dir = Path(target_dir)
    target_dir.mkdir(parents=True, exist_ok=True)

    destination = target_dir / source.name
    os.rename(source, destination)

    ticket.path = str(destination)
    ticket.column = target_dir.name


def delete_ticket(ticket: Ticket) -> None:
    """Remove a ticket file. A file that is already gone is an error."""
    os.remove(_require_path(ticket))
