"""Exception types for mdkanban.

File I/O failures are plain ``OSError`` and are not wrapped.
"""


class KanbanError(Exception):
    """Base class for mdkanban errors."""


class ParseError(KanbanError, ValueError):
    """A ticket file could not be decoded."""

    def __init__(self, message: str, cause: str = "malformed-metadata", path: str = "") -> None:
        super().__init__(message)
        self.cause = cause
        self.path = path

    def __str__(self) -> str:
        message = super().__str__()
        return f"{self.path}: {message}" if self.path else message


class ConfigError(KanbanError):
    """The configuration file is malformed."""


class PromptError(KanbanError):
    """A prompt template could not be rendered."""


class WatcherSetupError(KanbanError):
    """Filesystem notification could not be established."""


class WatcherRuntimeError(KanbanError):
    """A non-fatal error raised while the watcher is running."""
