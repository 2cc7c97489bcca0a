"""Remote-control buttons and helpers for human-authored button scripts."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import List, Union

from .constants import TIMEOUTS

__all__ = ["Command", "Hold", "Action", "parse_sequence", "describe"]


class Command(Enum):
    """A remote-control button and the keyboard key the TV app listens for."""

    UP = "ArrowUp"
    DOWN = "ArrowDown"
    LEFT = "ArrowLeft"
    RIGHT = "ArrowRight"
    SELECT = "Enter"
    BACK = "Escape"

    @property
    def key(self) -> str:
        return self.value

    @classmethod
    def from_name(cls, name: str) -> "Command":
        """Return the command for ``name`` (``"right"``, ``"ok"``, ``"ArrowUp"`` ...)."""

        lookup = name.strip().casefold()
        lookup = _ALIASES.get(lookup, lookup)
        for command in cls:
            if lookup in (command.name.casefold(), command.value.casefold()):
                return command
        raise ValueError(f"Unknown remote button: {name!r}")


_ALIASES = {
    "ok": "select",
    "enter": "select",
    "esc": "back",
    "escape": "back",
    "return": "back",
}


@dataclass(frozen=True)
class Hold:
    """Keep ``command`` pressed for ``duration`` seconds (long press)."""

    command: Command = Command.SELECT
    duration: float = TIMEOUTS.long_press_duration

    def __post_init__(self) -> None:
        if self.duration < 0:
            raise ValueError("Hold duration must not be negative")


Action = Union[Command, Hold]

_REPEAT_RE = re.compile(r"^(?P<name>[A-Za-z ]+?)\s*(?:[*x]\s*(?P<count>\d+))?$")
_HOLD_RE = re.compile(r"^hold(?:[ _-](?P<name>[A-Za-z]+))?(?::\s*(?P<duration>\d+(?:\.\d+)?))?$")


def parse_sequence(text: str) -> List[Action]:
    """Parse a comma separated button script.

    ``"up*2, right x3, select, hold:1.5"`` becomes two ``UP``, three
    ``RIGHT``, one ``SELECT`` and a 1.5 second hold of ``SELECT``.  The whole
    script is validated before anything is returned so a typo never results
    in a partially executed sequence.
    """

    actions: List[Action] = []
    for raw in text.split(","):
        token = raw.strip()
        if not token:
            continue
        hold = _HOLD_RE.match(token.casefold())
        if hold:
            command = Command.from_name(hold.group("name")) if hold.group("name") else Command.SELECT
            duration = hold.group("duration")
            if duration is None:
                actions.append(Hold(command))
            else:
                actions.append(Hold(command, float(duration)))
            continue
        match = _REPEAT_RE.match(token)
        if not match:
            raise ValueError(f"Cannot parse button script entry: {token!r}")
        command = Command.from_name(match.group("name"))
        count = int(match.group("count") or 1)
        actions.extend([command] * count)
    return actions


def describe(actions: List[Action]) -> List[str]:
    """Return the keyboard keys (or ``hold:<key>:<seconds>``) for ``actions``."""

    keys: List[str] = []
    for action in actions:
        if isinstance(action, Hold):
            keys.append(f"hold:{action.command.key}:{action.duration:g}")
        else:
            keys.append(action.key)
    return keys
