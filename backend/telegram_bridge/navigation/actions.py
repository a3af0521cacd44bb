"""Callback payload decoding.

Buttons carry ``verb`` or ``verb:argument``. Decoding never raises: anything
unrecognised becomes ``Verb.UNKNOWN`` and is only acknowledged.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel


class Verb(str, Enum):
    MENU = "menu"
    THREADS = "threads"
    SELECT = "select"
    MESSAGES = "messages"
    VIEW = "view"
    CURRENT = "current"
    REFRESH = "refresh"
    DEBUG = "debug"
    UNKNOWN = "unknown"


# Short prefixes used by earlier builds; still decoded, never emitted
_ALIASES = {
    "m": Verb.MESSAGES,
    "p": Verb.MESSAGES,
    "msg": Verb.VIEW,
    "v": Verb.VIEW,
}

# Verbs whose argument defaults to page 0 when missing or malformed
_PAGED = {Verb.THREADS, Verb.MESSAGES}


class Action(BaseModel):
    """A decoded button press."""

    verb: Verb
    arg: Optional[int] = None
    raw: str = ""

    @property
    def page(self) -> int:
        return self.arg if self.arg is not None and self.arg >= 0 else 0

    def callback_data(self) -> str:
        if self.arg is None:
            return self.verb.value
        return f"{self.verb.value}:{self.arg}"


def _parse_int(value: str) -> Optional[int]:
    try:
        return int(value)
    except ValueError:
        return None


def parse_action(data: str) -> Action:
    """Decode ``verb[:argument]`` into an :class:`Action`."""
    data = data or ""
    name, _, argument = data.partition(":")
    name = name.strip().lower()

    verb = _ALIASES.get(name)
    if verb is None:
        try:
            verb = Verb(name)
        except ValueError:
            verb = Verb.UNKNOWN
    if verb is Verb.UNKNOWN:
        return Action(verb=verb, raw=data)

    arg = _parse_int(argument.strip()) if argument else None
    if verb in _PAGED and (arg is None or arg < 0):
        arg = 0
    return Action(verb=verb, arg=arg, raw=data)


def callback(verb: Verb, arg: Optional[int] = None) -> str:
    """Build button callback data for ``verb``."""
    return Action(verb=verb, arg=arg).callback_data()
