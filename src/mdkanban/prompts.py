"""Agent-facing prompt text generated from tickets.

Templates use ``str.format`` named fields. The single-ticket template gets
``ticket_path``, ``doing_path``, ``done_path``, ``title``, ``tags`` and
``content``. The batch template gets ``tickets`` (every ticket rendered
through the batch item template), ``count``, ``doing_dir`` and ``done_dir``.
"""

from __future__ import annotations

import os
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from mdkanban.errors import PromptError

if TYPE_CHECKING:
    from mdkanban.config import Config
    from mdkanban.model.ticket import Ticket

DEFAULT_SINGLE_PROMPT = """\
Implement the task described in this ticket: @{ticket_path}

## Guidelines
- First, read and understand the ticket requirements thoroughly
- Plan your approach before writing code
- Follow the existing coding style, patterns, and conventions of this project
- Keep changes focused - only modify what's necessary for the task
- Ensure existing functionality is not broken
- Test your changes if the project has tests

## Workflow
1. Move the ticket to doing: mv "{ticket_path}" "{doing_path}"
2. Implement the task as described in the ticket
3. When complete, move the ticket to done: mv "{doing_path}" "{done_path}"
4. Update the agent_feedback field in the ticket's YAML frontmatter with a brief summary of the changes made
"""

DEFAULT_BATCH_ITEM = "- @{ticket_path}\n"

DEFAULT_BATCH_PROMPT = """\
Implement the tasks described in the following tickets, in order:

{tickets}
## Guidelines
- Read and understand each ticket's requirements before starting
- Plan your approach for each task before writing code
- Follow the existing coding style, patterns, and conventions of this project
- Keep changes focused - only modify what's necessary for each task
- Ensure existing functionality is not broken
- Test your changes if the project has tests
- Complete each ticket fully before moving to the next

## Workflow (for each ticket)
1. Move the ticket to doing: mv "<ticket_path>" "{doing_dir}/<filename>"
2. Implement the task as described in the ticket
3. When complete, move the ticket to done: mv "{doing_dir}/<filename>" "{done_dir}/<filename>"
4. Update the agent_feedback field in the ticket's YAML frontmatter with a brief summary of the changes made

Process tickets in the order listed above.
"""

AGENT_INSTRUCTIONS = """\
# Kanban Agent Instructions

This directory contains a kanban board stored as markdown files. Each ticket
is a markdown file with YAML frontmatter, organized into column directories.

## Directory Structure

```
.kanban/
├── AGENT.md        # This file
├── config.yaml     # Configuration (optional)
├── todo/           # Tasks to be done
├── doing/          # Tasks in progress
└── done/           # Completed tasks
```

## Ticket Format

```markdown
---
title: "Task title"
tags: ["tag1", "tag2"]
created: 2025-01-01T10:00:00Z
updated: 2025-01-01T10:00:00Z
agent_feedback: "Summary of work done"
---

Task description and details in markdown format.
```

| Field | Required | Description |
|-------|----------|-------------|
| title | Yes | Short task title |
| tags | No | Array of tags for categorization |
| created | Yes | ISO 8601 timestamp when ticket was created |
| updated | Yes | ISO 8601 timestamp when ticket was last modified |
| agent_feedback | No | Brief summary of changes made (add when completing) |

Filenames follow the pattern `YYYY-MM-DD-slugified-title.md`, for example
`2025-01-15-implement-user-auth.md`.

## Moving Tickets

Move tickets between columns by moving the file:

```bash
mv .kanban/todo/2025-01-15-my-task.md .kanban/doing/
mv .kanban/doing/2025-01-15-my-task.md .kanban/done/
```

## Updating Tickets

1. Update the `updated` timestamp to the current time
2. Modify the content as needed
3. When completing, add `agent_feedback` with a brief summary and move the
   ticket to `done/`

## Configuration

`config.yaml` can set `kanban_dir`, `columns` (name, dir, color), `editor`,
`single_ticket_prompt`, `batch_ticket_prompt` and `batch_ticket_item`.
Prompt templates use fields such as `{ticket_path}`, `{doing_path}` and
`{done_path}`.
"""


@dataclass
class TicketPromptData:
    """Substitution fields for one ticket."""

    title: str
    tags: str
    content: str
    ticket_path: str
    doing_path: str
    done_path: str


def _project_root(config: Config) -> Path:
    """The project root is the parent of the kanban directory."""
    return Path(config.kanban_dir).parent


def _relative(path: str | Path, root: Path) -> str:
    try:
        return os.path.relpath(path, root)
    except ValueError:
        return str(path)


def _doing_and_done_dirs(config: Config) -> tuple[Path, Path]:
    """Second column is "doing", last column is "done"."""
    if not config.columns:
        raise PromptError("no columns configured")
    doing = config.columns[min(1, len(config.columns) - 1)]
    done = config.columns[-1]
    return config.column_path(doing.dir), config.column_path(done.dir)


def build_prompt_data(ticket: Ticket, config: Config) -> TicketPromptData:
    """Collect template fields for a ticket, paths relative to the project root."""
    root = _project_root(config)
    doing_dir, done_dir = _doing_and_done_dirs(config)
    filename = Path(ticket.path).name
    return TicketPromptData(
        title=ticket.title,
        tags=", ".join(ticket.tags),
        content=ticket.body,
        ticket_path=_relative(ticket.path, root),
        doing_path=_relative(doing_dir / filename, root),
        done_path=_relative(done_dir / filename, root),
    )


def _render(template: str, fields: dict) -> str:
    try:
        return template.format_map(fields)
    except KeyError as e:
        raise PromptError(f"unknown template field {e}") from e
    except (ValueError, IndexError, AttributeError) as e:
        raise PromptError(f"malformed template: {e}") from e


def render_single_prompt(ticket: Ticket, config: Config) -> str:
    """Render the single-ticket prompt."""
    return _render(config.single_ticket_prompt, asdict(build_prompt_data(ticket, config)))


def render_batch_prompt(tickets: list[Ticket], config: Config) -> str:
    """Render the batch prompt listing every ticket in order."""
    root = _project_root(config)
    doing_dir, done_dir = _doing_and_done_dirs(config)
    items = "".join(_render(config.batch_ticket_item, asdict(build_prompt_data(t, config))) for t in tickets)
    return _render(
        config.batch_ticket_prompt,
        {
            "tickets": items,
            "count": len(tickets),
            "doing_dir": _relative(doing_dir, root),
            "done_dir": _relative(done_dir, root),
        },
    )
