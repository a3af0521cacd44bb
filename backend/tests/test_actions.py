"""Tests for callback payload decoding."""

import pytest

from telegram_bridge.navigation.actions import Verb, callback, parse_action


@pytest.mark.parametrize(
    "data, verb, arg",
    [
        ("menu", Verb.MENU, None),
        ("threads:3", Verb.THREADS, 3),
        ("select:7", Verb.SELECT, 7),
        ("messages:2", Verb.MESSAGES, 2),
        ("view:11", Verb.VIEW, 11),
        ("current", Verb.CURRENT, None),
        ("refresh", Verb.REFRESH, None),
        ("debug", Verb.DEBUG, None),
    ],
)
def test_parse_known_verbs(data: str, verb: Verb, arg) -> None:
    action = parse_action(data)
    assert action.verb is verb
    assert action.arg == arg


@pytest.mark.parametrize(
    "data, verb, arg",
    [("m:0", Verb.MESSAGES, 0), ("p:1", Verb.MESSAGES, 1), ("v:4", Verb.VIEW, 4), ("msg:2", Verb.VIEW, 2)],
)
def test_parse_legacy_aliases(data: str, verb: Verb, arg: int) -> None:
    """Short prefixes from older keyboards still decode."""
    action = parse_action(data)
    assert action.verb is verb
    assert action.arg == arg


def test_paged_verbs_default_to_first_page() -> None:
    """Missing, malformed or negative pages fall back to page 0."""
    assert parse_action("threads").arg == 0
    assert parse_action("messages:abc").arg == 0
    assert parse_action("threads:-2").page == 0


def test_unknown_verb_never_raises() -> None:
    for data in ["", "bogus", "bogus:1", ":"]:
        assert parse_action(data).verb is Verb.UNKNOWN
    assert parse_action("select:x").arg is None
    assert parse_action("select:x:y").arg is None


def test_callback_round_trips() -> None:
    assert callback(Verb.THREADS, 2) == "threads:2"
    assert callback(Verb.MENU) == "menu"
    assert parse_action(callback(Verb.VIEW, 9)).arg == 9
