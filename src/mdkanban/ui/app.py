"""Main Textual application for mdkanban."""

import logging

from textual import work
from textual.app import App
from textual.message import Message
from textual.worker import get_current_worker

from mdkanban.config import Config
from mdkanban.model.board import Board
from mdkanban.ui.board import BoardScreen
from mdkanban.watcher import ChangeWatcher, FileEvent

logger = logging.getLogger(__name__)

POLL_INTERVAL = 0.25


class FileChanged(Message):
    """A debounced ticket change arrived from the watcher."""

    def __init__(self, event: FileEvent) -> None:
        super().__init__()
        self.event = event


class WatcherError(Message):
    """The watcher reported a non-fatal error."""

    def __init__(self, error: Exception) -> None:
        super().__init__()
        self.error = error


class KanbanApp(App):
    """Kanban board of markdown tickets."""

    TITLE = "mdkanban"
    BINDINGS = [("ctrl+q", "quit", "Quit")]

    def __init__(self, config: Config, board: Board, watcher: ChangeWatcher | None = None):
        super().__init__()
        self.config = config
        self.board = board
        self.watcher = watcher
        self.board_screen: BoardScreen | None = None
        board.on_error = self._show_error

    def on_mount(self) -> None:
        self.board_screen = BoardScreen(self.board)
        self.push_screen(self.board_screen)
        if self.watcher is not None:
            self._pump_events()
            self._pump_errors()

    def _show_error(self, message: str) -> None:
        logger.warning("%s", message)
        if self.board_screen is not None:
            self.board_screen.set_status(message)

    # -- Watcher pumps (worker threads) --

    @work(thread=True, exit_on_error=False, group="watcher")
    def _pump_events(self) -> None:
        worker = get_current_worker()
        watcher = self.watcher
        while not worker.is_cancelled:
            event = watcher.next_event(timeout=POLL_INTERVAL)
            if event is not None:
                self.post_message(FileChanged(event))
            elif watcher.closed:
                return

    @work(thread=True, exit_on_error=False, group="watcher")
    def _pump_errors(self) -> None:
        worker = get_current_worker()
        watcher = self.watcher
        while not worker.is_cancelled:
            error = watcher.next_error(timeout=POLL_INTERVAL)
            if error is not None:
                self.post_message(WatcherError(error))
            elif watcher.closed:
                return

    # -- Messages --

    def on_file_changed(self, message: FileChanged) -> None:
        logger.debug("reloading after %s %s", message.event.kind, message.event.path)
        self.board.reload()
        if self.board_screen is not None:
            self.board_screen.refresh_board()

    def on_watcher_error(self, message: WatcherError) -> None:
        self._show_error(f"Watcher: {message.error}")

    # -- Shutdown --

    def close_watcher(self) -> None:
        if self.watcher is not None and not self.watcher.closed:
            self.watcher.close()

    def on_unmount(self) -> None:
        self.close_watcher()

    def action_quit(self) -> None:
        """Stop watching and quit."""
        self.close_watcher()
        self.exit()
