"""Split and join markdown documents with YAML front-matter."""

import yaml

from mdkanban.errors import ParseError

DELIMITER = "---"


def split_front_matter(text: str) -> tuple[str | None, str]:
    """Split text into (header, body).

    The header is the text between a ``---`` on the first non-blank line and
    the next ``---`` line. Returns (None, text) when there is no opening
    delimiter or it is never closed.
    """
    lines = text.split("\n")

    start = 0
    while start < len(lines) and not lines[start].strip():
        start += 1
    if start == len(lines) or lines[start].strip() != DELIMITER:
        return None, text

    for end in range(start + 1, len(lines)):
        if lines[end].strip() == DELIMITER:
            header = "\n".join(lines[start + 1 : end])
            body = "\n".join(lines[end + 1 :])
            return header, body

    return None, text


def load_front_matter(header: str) -> dict:
    """Parse a YAML header into a dict.

    Raises ParseError if the YAML is invalid or is not a mapping.
    """
    try:
        meta = yaml.safe_load(header)
    except (yaml.YAMLError, ValueError) as e:
        # Timestamps outside the calendar fail in the constructor as ValueError
        raise ParseError(f"invalid front-matter: {e}") from e

    if meta is None:
        return {}
    if not isinstance(meta, dict):
        raise ParseError(f"front-matter must be a mapping, not {type(meta).__name__}")
    return meta


def join_front_matter(header_lines: list[str], body: str) -> str:
    """Serialize header lines and a body back to markdown text."""
    parts = [DELIMITER, *header_lines, DELIMITER, ""]
    body = body.strip()
    if body:
        parts.append(body)
    return "\n".join(parts) + "\n"
