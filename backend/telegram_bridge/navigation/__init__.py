"""Menu navigation: action decoding, session state, keyboards and transitions."""

from .actions import Action, Verb, parse_action
from .machine import NavigationStateMachine, Screen
from .state import SessionState, View

__all__ = [
    "Action",
    "NavigationStateMachine",
    "Screen",
    "SessionState",
    "Verb",
    "View",
    "parse_action",
]
