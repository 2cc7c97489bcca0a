"""Remote-control navigation and focus tracking for TV web interfaces."""

from .commands import Command, Hold, parse_sequence
from .constants import NAVIGATION_LIMITS, TIMEOUTS
from .focus import (
    FocusAccessor,
    FocusAssertionError,
    NavigationError,
    normalise,
    wait_for_focus_change,
)
from .input_driver import KeyDispatcher, PlaywrightKeyDispatcher, RemoteControl, SimulatedKeyDispatcher
from .menu import MenuIndex, UnknownTargetError, resolve_menu
from .search import NotFoundReason, SearchOutcome, move_until, search_for

__all__ = [
    "Command",
    "Hold",
    "parse_sequence",
    "TIMEOUTS",
    "NAVIGATION_LIMITS",
    "FocusAccessor",
    "FocusAssertionError",
    "NavigationError",
    "normalise",
    "wait_for_focus_change",
    "KeyDispatcher",
    "PlaywrightKeyDispatcher",
    "RemoteControl",
    "SimulatedKeyDispatcher",
    "MenuIndex",
    "UnknownTargetError",
    "resolve_menu",
    "NotFoundReason",
    "SearchOutcome",
    "move_until",
    "search_for",
]
