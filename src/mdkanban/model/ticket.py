"""Ticket model and its markdown encoding."""

import re
from dataclasses import dataclass, field
from datetime import date, datetime
from pathlib import Path

import yaml

from mdkanban.constants import SLUG_MAX_LEN, TICKET_EXT
from mdkanban.errors import ParseError
from mdkanban.parser import join_front_matter, load_front_matter, split_front_matter


def now() -> datetime:
    """Current local time, timezone-aware."""
    return datetime.now().astimezone()


@dataclass
class Ticket:
    """A task backed by one markdown file.

    ``path`` and ``column`` come from where the file lives and are not part
    of the encoded form.
    """

    title: str = ""
    tags: list[str] = field(default_factory=list)
    created: datetime | None = None
    updated: datetime | None = None
    body: str = ""
    agent_feedback: str = ""
    path: str = ""
    column: str = ""

    def __post_init__(self) -> None:
        if self.created is None:
            self.created = now()
        if self.updated is None:
            self.updated = self.created


def new_ticket(
    title: str,
    column: str = "",
    tags: list[str] | None = None,
    body: str = "",
    when: datetime | None = None,
) -> Ticket:
    """Build an unsaved ticket stamped with a single creation time."""
    when = when or now()
    return Ticket(
        title=title,
        tags=list(tags or []),
        created=when,
        updated=when,
        body=body.strip(),
        column=column,
    )


# --- Decoding ---


def _coerce_timestamp(value, key: str) -> datetime | None:
    """Turn a header value into an aware datetime, or None if unset."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, date):
        dt = datetime(value.year, value.month, value.day)
    elif isinstance(value, str):
        try:
            dt = datetime.fromisoformat(value.strip())
        except ValueError as e:
            raise ParseError(f"invalid {key} timestamp: {value!r}") from e
    else:
        raise ParseError(f"invalid {key} timestamp: {value!r}")

    # Zero time written by other tools means "unset"
    if dt.year <= 1:
        return None
    if dt.tzinfo is None:
        dt = dt.astimezone()
    return dt


def _coerce_tags(value) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value] if value.strip() else []
    if isinstance(value, list):
        return [str(tag) for tag in value if tag is not None]
    raise ParseError(f"tags must be a list, not {type(value).__name__}")


def _coerce_text(value) -> str:
    return "" if value is None else str(value)


def parse_ticket(data: bytes | str, path: str = "") -> Ticket:
    """Decode a ticket from markdown with an optional front-matter header.

    Raises ParseError when the header is malformed or the bytes are not
    UTF-8. Unknown header fields are ignored.
    """
    if isinstance(data, bytes):
        try:
            text = data.decode("utf-8")
        except UnicodeDecodeError as e:
            raise ParseError("file is not valid UTF-8", cause="invalid-encoding", path=path) from e
    else:
        text = data
    text = text.removeprefix("\ufeff")

    header, body = split_front_matter(text)
    try:
        meta = load_front_matter(header) if header is not None else {}
        created = _coerce_timestamp(meta.get("created"), "created")
        updated = _coerce_timestamp(meta.get("updated"), "updated")
        tags = _coerce_tags(meta.get("tags"))
    except ParseError as e:
        e.path = path
        raise

    return Ticket(
        title=_coerce_text(meta.get("title")),
        tags=tags,
        created=created,
        updated=updated,
        body=body.strip(),
        agent_feedback=_coerce_text(meta.get("agent_feedback")),
        path=path,
        column=Path(path).parent.name if path else "",
    )


# --- Encoding ---

# Keeps the emitter from folding long values onto continuation lines
QUOTE_WIDTH = 1 << 30


def _quote(text: str) -> str:
    """A double-quoted YAML scalar on one line, non-printables escaped."""
    dumped = yaml.dump(
        text,
        Dumper=yaml.SafeDumper,
        default_style='"',
        allow_unicode=True,
        width=QUOTE_WIDTH,
    )
    return dumped.removesuffix("\n...\n").strip()


def serialize_ticket(ticket: Ticket) -> bytes:
    """Encode a ticket as markdown with a front-matter header.

    Header fields are always written in the same order.
    """
    lines = [
        f"title: {_quote(ticket.title)}",
        f"tags: [{', '.join(_quote(str(tag)) for tag in ticket.tags)}]",
        f"created: {ticket.created.isoformat()}",
        f"updated: {ticket.updated.isoformat()}",
    ]
    if ticket.agent_feedback:
        lines.append(f"agent_feedback: {_quote(ticket.agent_feedback)}")
    return join_front_matter(lines, ticket.body).encode("utf-8")


# --- Naming ---


def slugify(text: str) -> str:
    """Convert a title to a filename-safe slug.

    "Fix login bug" -> "fix-login-bug", "!!!" -> "untitled"
    """
    slug = text.lower().replace(" ", "-")
    slug = re.sub(r"[^a-z0-9-]", "", slug)
    slug = re.sub(r"-+", "-", slug).strip("-")
    if len(slug) > SLUG_MAX_LEN:
        slug = slug[:SLUG_MAX_LEN].rstrip("-")
    return slug or "untitled"


def ticket_filename(ticket: Ticket) -> str:
    """Build ``YYYY-MM-DD-<slug>.md`` from the creation date and title."""
    return f"{ticket.created:%Y-%m-%d}-{slugify(ticket.title)}{TICKET_EXT}"


def short_title(ticket: Ticket, max_len: int) -> str:
    """Truncate the title for display, ending with an ellipsis."""
    if len(ticket.title) <= max_len:
        return ticket.title
    return ticket.title[: max(max_len - 3, 0)] + "..."
