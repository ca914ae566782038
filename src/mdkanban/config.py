"""Configuration loading for mdkanban."""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from mdkanban.constants import AGENT_FILE, DEFAULT_KANBAN_DIR
from mdkanban.errors import ConfigError
from mdkanban.prompts import AGENT_INSTRUCTIONS, DEFAULT_BATCH_ITEM, DEFAULT_BATCH_PROMPT, DEFAULT_SINGLE_PROMPT

logger = logging.getLogger(__name__)

TEMPLATE_KEYS = ("single_ticket_prompt", "batch_ticket_prompt", "batch_ticket_item")


@dataclass
class ColumnConfig:
    """A workflow column backed by one directory."""

    name: str
    dir: str
    color: str = ""


def _default_columns() -> list[ColumnConfig]:
    return [
        ColumnConfig("To Do", "todo", "#f87171"),
        ColumnConfig("Doing", "doing", "#fbbf24"),
        ColumnConfig("Done", "done", "#4ade80"),
    ]


@dataclass
class Config:
    """Application configuration, built once at startup."""

    kanban_dir: str
    columns: list[ColumnConfig] = field(default_factory=_default_columns)
    editor: str = ""
    single_ticket_prompt: str = DEFAULT_SINGLE_PROMPT
    batch_ticket_prompt: str = DEFAULT_BATCH_PROMPT
    batch_ticket_item: str = DEFAULT_BATCH_ITEM

    def column_path(self, column_dir: str) -> Path:
        """Full path of a column directory."""
        return Path(self.kanban_dir) / column_dir

    def to_dict(self) -> dict:
        columns = []
        for col in self.columns:
            entry = {"name": col.name, "dir": col.dir}
            if col.color:
                entry["color"] = col.color
            columns.append(entry)
        data = {"kanban_dir": self.kanban_dir, "columns": columns}
        if self.editor:
            data["editor"] = self.editor
        for key in TEMPLATE_KEYS:
            data[key] = getattr(self, key)
        return data


def default_config(cwd: str | Path | None = None) -> Config:
    """Defaults: ``.kanban`` under the working directory, three columns."""
    base = Path(cwd) if cwd is not None else Path.cwd()
    return Config(
        kanban_dir=str(base / DEFAULT_KANBAN_DIR),
        editor=os.environ.get("EDITOR", ""),
    )


# --- YAML ---


class _ConfigDumper(yaml.SafeDumper):
    pass


def _represent_str(dumper: yaml.SafeDumper, value: str) -> yaml.ScalarNode:
    """Write multi-line templates as literal blocks."""
    style = "|" if "\n" in value else None
    return dumper.represent_scalar("tag:yaml.org,2002:str", value, style=style)


_ConfigDumper.add_representer(str, _represent_str)


def _get_str(data: dict, key: str, where: str) -> str | None:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ConfigError(f"{where}: '{key}' must be a string")
    return value


def _parse_columns(value, where: str) -> list[ColumnConfig]:
    if not isinstance(value, list):
        raise ConfigError(f"{where}: 'columns' must be a list")
    columns = []
    for i, entry in enumerate(value):
        if not isinstance(entry, dict):
            raise ConfigError(f"{where}: column {i + 1} must be a mapping")
        name = _get_str(entry, "name", where)
        col_dir = _get_str(entry, "dir", where)
        if not name or not col_dir:
            raise ConfigError(f"{where}: column {i + 1} needs a 'name' and a 'dir'")
        columns.append(ColumnConfig(name=name, dir=col_dir, color=_get_str(entry, "color", where) or ""))
    return columns


def _apply(config: Config, data: dict, where: str) -> Config:
    """Overlay values from a config file; empty values keep the defaults."""
    kanban_dir = _get_str(data, "kanban_dir", where)
    if kanban_dir:
        config.kanban_dir = str(Path(kanban_dir).expanduser().absolute())

    if data.get("columns"):
        config.columns = _parse_columns(data["columns"], where)

    editor = _get_str(data, "editor", where)
    if editor:
        config.editor = editor

    for key in TEMPLATE_KEYS:
        value = _get_str(data, key, where)
        if value:
            setattr(config, key, value)

    return config


def load_config(path: str | Path) -> Config:
    """Load configuration from a YAML file.

    A missing file gives the defaults, which are also written to ``path``
    if possible.
    """
    path = Path(path)
    config = default_config()

    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        try:
            save_config(config, path)
        except OSError as e:
            logger.warning("could not write default config to %s: %s", path, e)
        return config
    except OSError as e:
        raise ConfigError(f"cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(text)
    except (yaml.YAMLError, ValueError) as e:
        raise ConfigError(f"{path}: {e}") from e

    if data is None:
        return config
    if not isinstance(data, dict):
        raise ConfigError(f"{path}: expected a mapping at the top level")
    return _apply(config, data, str(path))


def save_config(config: Config, path: str | Path) -> None:
    """Write configuration to a YAML file."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    text = yaml.dump(
        config.to_dict(),
        Dumper=_ConfigDumper,
        default_flow_style=False,
        sort_keys=False,
        allow_unicode=True,
    )
    path.write_text(text, encoding="utf-8")


def ensure_directories(config: Config) -> None:
    """Create the kanban directory, its columns and AGENT.md."""
    root = Path(config.kanban_dir)
    root.mkdir(parents=True, exist_ok=True)
    for col in config.columns:
        config.column_path(col.dir).mkdir(parents=True, exist_ok=True)

    agent_file = root / AGENT_FILE
    if not agent_file.exists():
        agent_file.write_text(AGENT_INSTRUCTIONS, encoding="utf-8")
