"""Textual UI for mdkanban."""

from mdkanban.ui.app import FileChanged, KanbanApp, WatcherError

__all__ = ["FileChanged", "KanbanApp", "WatcherError"]
