"""Shared fixtures for CLI tests."""

import pytest

from mdkanban.ui.app import KanbanApp


@pytest.fixture
def project(tmp_path, monkeypatch):
    """Run from an empty project directory."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("EDITOR", raising=False)
    return tmp_path


@pytest.fixture
def launched(monkeypatch):
    """Replace the TUI run loop; records the apps that would have run."""
    apps = []

    def fake_run(self):
        apps.append(self)

    monkeypatch.setattr(KanbanApp, "run", fake_run)
    return apps
