"""Input driver translating remote-control buttons into keyboard events."""
from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable, Iterable, List, Sequence, Tuple

from .commands import Action, Command, Hold
from .constants import TIMEOUTS

__all__ = [
    "KeyDispatcher",
    "PlaywrightKeyDispatcher",
    "SimulatedKeyDispatcher",
    "RemoteControl",
    "SleepFn",
]

_LOGGER = logging.getLogger(__name__)

SleepFn = Callable[[float], Awaitable[Any]]


class KeyDispatcher(ABC):
    """Primitive key events against a live UI session."""

    @abstractmethod
    async def press(self, key: str) -> None:
        """Press and release ``key``."""

    @abstractmethod
    async def down(self, key: str) -> None:
        """Push ``key`` down without releasing it."""

    @abstractmethod
    async def up(self, key: str) -> None:
        """Release ``key``."""


class PlaywrightKeyDispatcher(KeyDispatcher):
    """Send key events through a Playwright page's keyboard."""

    def __init__(self, page: Any) -> None:
        self.page = page

    async def press(self, key: str) -> None:
        await self.page.keyboard.press(key)

    async def down(self, key: str) -> None:
        await self.page.keyboard.down(key)

    async def up(self, key: str) -> None:
        await self.page.keyboard.up(key)


class SimulatedKeyDispatcher(KeyDispatcher):
    """A testing helper that only records the key events that would be sent."""

    def __init__(self, on_event: Callable[[str, str], Any] | None = None) -> None:
        self.events: List[Tuple[str, str]] = []
        self._on_event = on_event

    async def press(self, key: str) -> None:
        self._record("press", key)

    async def down(self, key: str) -> None:
        self._record("down", key)

    async def up(self, key: str) -> None:
        self._record("up", key)

    @property
    def pressed_keys(self) -> List[str]:
        return [key for event, key in self.events if event == "press"]

    def reset(self) -> None:
        self.events.clear()

    def last_sequence(self) -> Sequence[Tuple[str, str]]:
        return tuple(self.events)

    def _record(self, event: str, key: str) -> None:
        self.events.append((event, key))
        if self._on_event is not None:
            self._on_event(event, key)


class RemoteControl:
    """Simulate a TV remote on top of a :class:`KeyDispatcher`.

    Every press is followed by a fixed settling delay so that focus
    transitions and animations in the UI have time to start before the caller
    looks at the focus state again.  Presses are strictly sequential.
    """

    def __init__(
        self,
        dispatcher: KeyDispatcher,
        *,
        key_delay: float = TIMEOUTS.key_press_delay,
        sleep: SleepFn = asyncio.sleep,
    ) -> None:
        self.dispatcher = dispatcher
        self.key_delay = key_delay
        self._sleep = sleep

    async def send(self, command: Command) -> None:
        _LOGGER.debug("Pressing %s (%s)", command.name, command.key)
        await self.dispatcher.press(command.key)
        if self.key_delay > 0:
            await self._sleep(self.key_delay)

    async def send_repeated(self, command: Command, count: int) -> None:
        if count < 0:
            raise ValueError(f"Cannot press {command.name} a negative number of times ({count})")
        for _ in range(count):
            await self.send(command)

    async def hold(self, command: Command, duration: float) -> None:
        """Hold ``command`` down for ``duration`` seconds, then release it."""

        _LOGGER.debug("Holding %s for %.2fs", command.name, duration)
        await self.dispatcher.down(command.key)
        try:
            await self._sleep(duration)
        finally:
            await self.dispatcher.up(command.key)

    async def perform(self, action: Action) -> None:
        if isinstance(action, Hold):
            await self.hold(action.command, action.duration)
        else:
            await self.send(action)

    async def perform_sequence(self, actions: Iterable[Action]) -> None:
        for action in actions:
            await self.perform(action)

    # Remote buttons ----------------------------------------------------
    async def move_up(self, times: int = 1) -> None:
        await self.send_repeated(Command.UP, times)

    async def move_down(self, times: int = 1) -> None:
        await self.send_repeated(Command.DOWN, times)

    async def move_left(self, times: int = 1) -> None:
        await self.send_repeated(Command.LEFT, times)

    async def move_right(self, times: int = 1) -> None:
        await self.send_repeated(Command.RIGHT, times)

    async def select(self) -> None:
        await self.send(Command.SELECT)

    async def back(self) -> None:
        await self.send(Command.BACK)

    async def hold_select(self, duration: float = TIMEOUTS.long_press_duration) -> None:
        await self.hold(Command.SELECT, duration)
