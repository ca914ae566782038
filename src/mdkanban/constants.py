"""Shared constants for mdkanban."""

TICKET_EXT = ".md"
DEFAULT_KANBAN_DIR = ".kanban"
DEFAULT_CONFIG_PATH = ".kanban/config.yaml"
AGENT_FILE = "AGENT.md"

DEBOUNCE_SECONDS = 0.15
EVENT_QUEUE_SIZE = 100
ERROR_QUEUE_SIZE = 10

STATUS_TIMEOUT = 3.0
SLUG_MAX_LEN = 50
