"""Chat command processing tests."""

from __future__ import annotations

from datetime import timedelta

import pytest
from conftest import T0

from queuebot.shared.commands import (
    CommandKind,
    QueueCommand,
    parse_chat_command,
    process_command,
    render_template,
)
from queuebot.shared.models import QueueSettings


def test_default_scenario(run, session):
    assert run("join", "Alice") == "Alice has joined the queue! Position: 1"
    assert run("join", "Bob", "hello") == "Bob has joined the queue! Position: 2"
    assert run("pos", "Alice") == "Alice, you are position 1 in the queue. Wait time: 0 minutes."
    assert run("leave", "Alice") == "Alice has left the queue."
    assert run("pos", "Alice") == "Alice, you are not in the queue."
    assert [e.username for e in session.store] == ["Bob"]
    assert session.store.find("Bob").message == "hello"


def test_full_queue(run, session):
    session.settings = session.settings.merged({"maxQueueSize": 1})
    run("join", "Carl")

    assert run("join", "Dana") == session.settings.queue_full_message
    assert len(session.store) == 1


def test_zero_max_size_is_unbounded(run, session):
    session.settings = session.settings.merged({"maxQueueSize": 0})
    for i in range(60):
        run("join", f"user{i}")
    assert len(session.store) == 60


def test_require_message(run, session):
    session.settings = session.settings.merged({"requireMessage": True})

    response = run("join", "Eve")
    assert response.startswith("Eve, please provide a message")
    assert len(session.store) == 0

    assert run("join", "Eve", "ok") == "Eve has joined the queue! Position: 1"


def test_whitespace_message_counts_as_missing(run, session):
    session.settings = session.settings.merged({"requireMessage": True})
    run("join", "Eve", "   ")
    assert len(session.store) == 0


def test_closed_queue(run, session):
    session.settings = session.settings.merged({"isOpen": False})

    assert run("join", "Alice") == "The queue is currently closed."
    assert len(session.store) == 0


def test_closed_check_comes_before_duplicate_check(run, session):
    run("join", "Alice")
    session.settings = session.settings.merged({"isOpen": False})
    assert run("join", "Alice") == "The queue is currently closed."


def test_duplicate_join_any_casing(run, session):
    run("join", "Zoe")
    run("join", "Alice")

    response = run("join", "aLiCe")
    assert response == "Alice, you are already in the queue at position 2."
    assert len(session.store) == 2


def test_leave_missing_user_does_not_mutate(run, session):
    run("join", "Alice")
    version = session.store.version

    assert run("leave", "Bob") == "Bob, you are not in the queue."
    assert session.store.version == version


def test_position_wait_time_in_minutes(run):
    run("join", "Alice", now=T0)
    later = T0 + timedelta(minutes=7, seconds=59)
    assert run("pos", "alice", now=later).endswith("Wait time: 7 minutes.")


def test_position_wait_time_never_negative(run):
    run("join", "Alice", now=T0)
    earlier = T0 - timedelta(minutes=3)
    assert run("pos", "Alice", now=earlier).endswith("Wait time: 0 minutes.")


def test_unknown_command_is_ignored(session):
    assert process_command(session, QueueCommand("dance", "Alice")) == ""
    assert len(session.store) == 0


def test_enum_kind_is_accepted(session):
    response = process_command(session, QueueCommand(CommandKind.JOIN, "Alice"), now=T0)
    assert response == "Alice has joined the queue! Position: 1"


def test_sequential_joins_keep_insertion_order(run, session):
    names = [f"user{i}" for i in range(10)]
    for name in names:
        run("join", name)
    assert [e.username for e in session.store] == names


def test_render_replaces_every_placeholder():
    text = render_template("{username} {username} #{position} {waitTime}", username="a", position=2)
    assert text == "a a #2 {waitTime}"


def test_custom_templates(run, session):
    session.settings = QueueSettings().merged({"joinMessage": "welcome {username} (#{position})"})
    assert run("join", "Alice") == "welcome Alice (#1)"


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("!join", QueueCommand("join", "u")),
        ("!JOIN  my name ", QueueCommand("join", "u", "my name ")),
        ("!leave now", QueueCommand("leave", "u")),
        ("!pos", QueueCommand("pos", "u")),
        ("!Position", QueueCommand("pos", "u")),
    ],
)
def test_parse_chat_command(text, expected):
    assert parse_chat_command("u", text) == expected


@pytest.mark.parametrize("text", ["", "join", "!", "!dance", "hello !join"])
def test_parse_ignores_other_lines(text):
    assert parse_chat_command("u", text) is None
