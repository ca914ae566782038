"""Tests for the ticket codec and filename helpers."""

from datetime import date, datetime, timedelta, timezone

import pytest

from mdkanban.errors import ParseError
from mdkanban.model.ticket import (
    Ticket,
    new_ticket,
    parse_ticket,
    serialize_ticket,
    short_title,
    slugify,
    ticket_filename,
)
from tests.conftest import make_ticket

UTC = timezone.utc


def _fields(ticket):
    return (ticket.title, ticket.tags, ticket.created, ticket.updated, ticket.body, ticket.agent_feedback)


# --- Round trip ---


def test_round_trip_preserves_fields():
    ticket = make_ticket(
        "Fix login bug",
        tags=["auth", "urgent"],
        body="Steps:\n\n1. open\n2. fail",
        updated=datetime(2025, 6, 2, 14, 5, 7, 123456, tzinfo=UTC),
        agent_feedback="Patched the session check",
    )
    assert _fields(parse_ticket(serialize_ticket(ticket))) == _fields(ticket)


def test_round_trip_trims_body():
    ticket = make_ticket("Spaces", body="\n\n  padded body  \n\n")
    parsed = parse_ticket(serialize_ticket(ticket))
    assert parsed.body == "padded body"


def test_round_trip_yaml_lookalike_strings():
    ticket = make_ticket("yes", tags=["null", "1.5", "a: b"], agent_feedback="- not a list")
    assert _fields(parse_ticket(serialize_ticket(ticket))) == _fields(ticket)


def test_round_trip_unicode_and_quotes():
    ticket = make_ticket('Say "héllo" / ünïcode', tags=["日本"], body="Body with 'quotes'")
    assert _fields(parse_ticket(serialize_ticket(ticket))) == _fields(ticket)


def test_round_trip_control_characters():
    ticket = make_ticket(
        "a\x7fb",
        tags=["c\x9fd", "tab\there"],
        agent_feedback="line one\nline two\x85end",
    )
    assert _fields(parse_ticket(serialize_ticket(ticket))) == _fields(ticket)


def test_serialize_header_stays_one_line_per_field():
    ticket = make_ticket("word " * 200, agent_feedback="multi\nline")
    text = serialize_ticket(ticket).decode()
    assert len(text.split("\n---\n")[0].split("\n")) == 6


def test_round_trip_non_utc_offset():
    tz = timezone(timedelta(hours=5, minutes=30))
    ticket = make_ticket("Offset", created=datetime(2025, 1, 2, 3, 4, 5, tzinfo=tz))
    parsed = parse_ticket(serialize_ticket(ticket))
    assert parsed.created == ticket.created
    assert parsed.created.utcoffset() == timedelta(hours=5, minutes=30)


# --- Serialization format ---


def test_serialize_field_order():
    text = serialize_ticket(make_ticket("Order", tags=["x"], agent_feedback="done")).decode()
    keys = [line.split(":", 1)[0] for line in text.split("\n")[1:6]]
    assert keys == ["title", "tags", "created", "updated", "agent_feedback"]


def test_serialize_omits_empty_feedback():
    text = serialize_ticket(make_ticket("No feedback")).decode()
    assert "agent_feedback" not in text


def test_serialize_empty_tags_and_body():
    text = serialize_ticket(make_ticket("Bare")).decode()
    assert "tags: []\n" in text
    assert text.endswith("---\n\n")


def test_serialize_quotes_title():
    text = serialize_ticket(make_ticket("Fix login bug")).decode()
    assert 'title: "Fix login bug"\n' in text


def test_fix_login_bug_scenario():
    """A new ticket made on 2025-06-01 gets a dated filename and equal timestamps."""
    when = datetime(2025, 6, 1, 12, 0, tzinfo=UTC)
    ticket = new_ticket("Fix login bug", column="todo", when=when)
    assert ticket_filename(ticket) == "2025-06-01-fix-login-bug.md"
    assert ticket.created == ticket.updated == when

    text = serialize_ticket(ticket).decode()
    assert 'title: "Fix login bug"' in text
    assert "tags: []" in text
    assert f"created: {when.isoformat()}" in text
    assert f"updated: {when.isoformat()}" in text


# --- Parsing ---


def test_parse_without_header_is_all_body():
    ticket = parse_ticket(b"Just some notes\n")
    assert ticket.title == ""
    assert ticket.tags == []
    assert ticket.body == "Just some notes"
    assert ticket.updated == ticket.created


def test_parse_defaults_updated_to_created():
    ticket = parse_ticket(b"---\ntitle: T\ncreated: 2025-06-01T10:00:00+00:00\n---\n")
    assert ticket.created == datetime(2025, 6, 1, 10, tzinfo=UTC)
    assert ticket.updated == ticket.created


def test_parse_missing_created_is_now():
    before = datetime.now(UTC)
    ticket = parse_ticket(b"---\ntitle: T\n---\n")
    assert ticket.created >= before
    assert ticket.created.tzinfo is not None


def test_parse_empty_timestamp_is_unset():
    ticket = parse_ticket(b'---\ntitle: T\ncreated: 2025-06-01T10:00:00Z\nupdated: ""\n---\n')
    assert ticket.updated == ticket.created


def test_parse_zero_timestamp_is_unset():
    ticket = parse_ticket(b"---\ntitle: T\ncreated: 2025-06-01T10:00:00Z\nupdated: 0001-01-01T00:00:00Z\n---\n")
    assert ticket.updated == ticket.created


def test_parse_bare_date():
    ticket = parse_ticket(b"---\ntitle: T\ncreated: 2025-06-01\n---\n")
    assert ticket.created.date() == date(2025, 6, 1)
    assert ticket.created.tzinfo is not None


def test_parse_naive_timestamp_is_local():
    ticket = parse_ticket(b'---\ntitle: T\ncreated: "2025-06-01T10:00:00"\n---\n')
    assert ticket.created.tzinfo is not None
    assert ticket.created.replace(tzinfo=None) == datetime(2025, 6, 1, 10)


def test_parse_scalar_tag():
    ticket = parse_ticket(b"---\ntitle: T\ntags: solo\n---\n")
    assert ticket.tags == ["solo"]


def test_parse_ignores_unknown_fields():
    ticket = parse_ticket(b"---\ntitle: T\npriority: high\nassignee: [a, b]\n---\nBody\n")
    assert ticket.title == "T"
    assert ticket.body == "Body"


def test_parse_strips_bom():
    ticket = parse_ticket("\ufeff---\ntitle: T\n---\n".encode())
    assert ticket.title == "T"


def test_parse_sets_column_from_path():
    ticket = parse_ticket(b"---\ntitle: T\n---\n", path="/board/doing/2025-06-01-t.md")
    assert ticket.path == "/board/doing/2025-06-01-t.md"
    assert ticket.column == "doing"


def test_parse_malformed_yaml():
    with pytest.raises(ParseError) as exc:
        parse_ticket(b"---\ntitle: [unclosed\n---\n", path="/x/todo/bad.md")
    assert exc.value.cause == "malformed-metadata"
    assert exc.value.path == "/x/todo/bad.md"
    assert "/x/todo/bad.md" in str(exc.value)


def test_parse_invalid_encoding():
    with pytest.raises(ParseError) as exc:
        parse_ticket(b"---\ntitle: \xff\xfe\n---\n")
    assert exc.value.cause == "invalid-encoding"


def test_parse_bad_timestamp():
    with pytest.raises(ParseError) as exc:
        parse_ticket(b'---\ntitle: T\ncreated: "last tuesday"\n---\n')
    assert exc.value.cause == "malformed-metadata"


def test_parse_bad_tags_type():
    with pytest.raises(ParseError):
        parse_ticket(b"---\ntitle: T\ntags: {a: 1}\n---\n")


def test_parse_error_is_value_error():
    with pytest.raises(ValueError):
        parse_ticket(b"---\n- a\n---\n")


# --- Construction ---


def test_ticket_defaults():
    ticket = Ticket(title="T")
    assert ticket.tags == []
    assert ticket.updated == ticket.created
    assert ticket.agent_feedback == ""


def test_new_ticket_copies_tags_and_strips_body():
    tags = ["a"]
    ticket = new_ticket("T", tags=tags, body="  body  ")
    tags.append("b")
    assert ticket.tags == ["a"]
    assert ticket.body == "body"


# --- Naming ---


@pytest.mark.parametrize(
    "title, slug",
    [
        ("Fix login bug", "fix-login-bug"),
        ("  Hello,  World!  ", "hello-world"),
        ("a--b---c", "a-b-c"),
        ("-leading and trailing-", "leading-and-trailing"),
        ("!!!", "untitled"),
        ("", "untitled"),
        ("Ünïcode only", "ncode-only"),
    ],
)
def test_slugify(title, slug):
    assert slugify(title) == slug


def test_slugify_truncates_without_trailing_hyphen():
    title = "a" * 49 + " tail"
    slug = slugify(title)
    assert len(slug) <= 50
    assert slug == "a" * 49


def test_short_title():
    ticket = make_ticket("A fairly long ticket title")
    assert short_title(ticket, 100) == "A fairly long ticket title"
    assert short_title(ticket, 10) == "A fairl..."
