"""Shared test helpers for model tests."""

import pytest

from mdkanban.model.board import Board


@pytest.fixture
def errors():
    """Collects messages passed to a board's error callback."""
    return []


@pytest.fixture
def board(kanban_config, errors):
    """An empty board over the default three columns."""
    b = Board(kanban_config, on_error=errors.append)
    b.reload()
    return b


@pytest.fixture
def todo_dir(kanban_config):
    return kanban_config.column_path("todo")


@pytest.fixture
def done_dir(kanban_config):
    return kanban_config.column_path("done")
