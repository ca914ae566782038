"""Tests for configuration loading and directory setup."""

from pathlib import Path

import pytest
import yaml

from mdkanban.config import (
    ColumnConfig,
    Config,
    default_config,
    ensure_directories,
    load_config,
    save_config,
)
from mdkanban.errors import ConfigError
from mdkanban.prompts import AGENT_INSTRUCTIONS, DEFAULT_SINGLE_PROMPT


def test_default_config(tmp_path, monkeypatch):
    monkeypatch.setenv("EDITOR", "vim")
    config = default_config(tmp_path)
    assert config.kanban_dir == str(tmp_path / ".kanban")
    assert [(c.name, c.dir, c.color) for c in config.columns] == [
        ("To Do", "todo", "#f87171"),
        ("Doing", "doing", "#fbbf24"),
        ("Done", "done", "#4ade80"),
    ]
    assert config.editor == "vim"
    assert config.single_ticket_prompt == DEFAULT_SINGLE_PROMPT


def test_column_path(tmp_path):
    config = Config(kanban_dir=str(tmp_path))
    assert config.column_path("todo") == tmp_path / "todo"


def test_load_missing_writes_defaults(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    path = tmp_path / ".kanban" / "config.yaml"
    config = load_config(path)

    assert config.kanban_dir == str(tmp_path / ".kanban")
    assert path.exists()
    data = yaml.safe_load(path.read_text())
    assert data["columns"][0] == {"name": "To Do", "dir": "todo", "color": "#f87171"}


def test_load_missing_unwritable_is_not_fatal(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)

    def fail(config, path):
        raise PermissionError("read-only")

    monkeypatch.setattr("mdkanban.config.save_config", fail)
    config = load_config(tmp_path / "config.yaml")
    assert len(config.columns) == 3
    assert not (tmp_path / "config.yaml").exists()


def test_load_overrides(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    path = tmp_path / "config.yaml"
    path.write_text(
        "kanban_dir: board\n"
        "columns:\n"
        "  - name: Backlog\n"
        "    dir: backlog\n"
        "  - name: Shipped\n"
        "    dir: shipped\n"
        "    color: green\n"
        "editor: nano\n"
        "single_ticket_prompt: 'Do {title}'\n"
    )
    config = load_config(path)

    assert config.kanban_dir == str(tmp_path / "board")
    assert config.columns == [ColumnConfig("Backlog", "backlog"), ColumnConfig("Shipped", "shipped", "green")]
    assert config.editor == "nano"
    assert config.single_ticket_prompt == "Do {title}"


def test_load_empty_values_keep_defaults(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    path = tmp_path / "config.yaml"
    path.write_text("kanban_dir: ''\ncolumns: []\nsingle_ticket_prompt:\n")
    config = load_config(path)
    assert config.kanban_dir == str(tmp_path / ".kanban")
    assert len(config.columns) == 3
    assert config.single_ticket_prompt == DEFAULT_SINGLE_PROMPT


def test_load_empty_file(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    path = tmp_path / "config.yaml"
    path.write_text("")
    assert load_config(path).kanban_dir == str(tmp_path / ".kanban")


@pytest.mark.parametrize(
    "text",
    [
        "columns: [unclosed\n",
        "- just\n- a list\n",
        "columns: not-a-list\n",
        "columns:\n  - name: Missing dir\n",
        "columns:\n  - just a string\n",
        "editor: [vim]\n",
        "kanban_dir: 2025-02-30\n",
    ],
)
def test_load_malformed(tmp_path, text):
    path = tmp_path / "config.yaml"
    path.write_text(text)
    with pytest.raises(ConfigError):
        load_config(path)


def test_save_and_load_multiline_templates(tmp_path):
    config = Config(kanban_dir=str(tmp_path / "k"), single_ticket_prompt="Line one\nLine two {ticket_path}\n")
    path = tmp_path / "nested" / "config.yaml"
    save_config(config, path)

    assert "single_ticket_prompt: |" in path.read_text()
    assert load_config(path).single_ticket_prompt == "Line one\nLine two {ticket_path}\n"


def test_ensure_directories(tmp_path):
    config = Config(kanban_dir=str(tmp_path / ".kanban"))
    ensure_directories(config)

    root = Path(config.kanban_dir)
    assert sorted(p.name for p in root.iterdir()) == ["AGENT.md", "doing", "done", "todo"]
    assert (root / "AGENT.md").read_text() == AGENT_INSTRUCTIONS


def test_ensure_directories_keeps_agent_file(tmp_path):
    root = tmp_path / ".kanban"
    root.mkdir()
    (root / "AGENT.md").write_text("custom")
    ensure_directories(Config(kanban_dir=str(root)))
    assert (root / "AGENT.md").read_text() == "custom"


def test_ensure_directories_failure(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("")
    with pytest.raises(OSError):
        ensure_directories(Config(kanban_dir=str(blocker / ".kanban")))
