"""Fixtures shared by every test package."""

from datetime import datetime, timedelta, timezone

import pytest

from mdkanban.config import Config, ensure_directories
from mdkanban.model.ticket import Ticket, serialize_ticket

UTC = timezone.utc


def make_ticket(title, tags=None, body="", created=None, updated=None, agent_feedback=""):
    """Build a ticket with fixed timestamps."""
    created = created or datetime(2025, 6, 1, 9, 30, tzinfo=UTC)
    return Ticket(
        title=title,
        tags=list(tags or []),
        created=created,
        updated=updated or created,
        body=body,
        agent_feedback=agent_feedback,
    )


def write_ticket_file(column_dir, filename, title, updated_offset_minutes=0, **kwargs):
    """Write a ticket file straight to disk and return its path."""
    base = datetime(2025, 6, 1, 9, 0, tzinfo=UTC)
    ticket = make_ticket(
        title,
        created=base,
        updated=base + timedelta(minutes=updated_offset_minutes),
        **kwargs,
    )
    path = column_dir / filename
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(serialize_ticket(ticket))
    return path


@pytest.fixture
def kanban_config(tmp_path):
    """A config rooted in a temp project with the default columns created."""
    config = Config(kanban_dir=str(tmp_path / ".kanban"), editor="")
    ensure_directories(config)
    return config
