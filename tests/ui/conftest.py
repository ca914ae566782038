"""Fixtures for UI tests."""

import pytest

from mdkanban.model.board import Board
from mdkanban.ui.app import KanbanApp
from tests.conftest import write_ticket_file


@pytest.fixture
def board(kanban_config):
    """Two tickets in To Do, one in Doing."""
    todo = kanban_config.column_path("todo")
    write_ticket_file(todo, "2025-06-01-fix-login-bug.md", "Fix login bug", updated_offset_minutes=2, tags=["auth"])
    write_ticket_file(todo, "2025-06-01-write-docs.md", "Write docs", updated_offset_minutes=1)
    write_ticket_file(
        kanban_config.column_path("doing"),
        "2025-06-01-refactor.md",
        "Refactor store",
        agent_feedback="Split into modules",
    )
    b = Board(kanban_config)
    b.reload()
    return b


@pytest.fixture
def app(kanban_config, board):
    return KanbanApp(kanban_config, board)
