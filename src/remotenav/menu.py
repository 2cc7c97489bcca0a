"""Resolve a named destination in a fixed menu bar."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Dict, Iterator, List, Mapping

from .commands import Command
from .constants import TIMEOUTS
from .focus import (
    ClockFn,
    FocusAccessor,
    FocusToken,
    NavigationError,
    expect_focused,
    normalise,
    tokens_match,
)
from .input_driver import RemoteControl, SleepFn

__all__ = ["MenuIndex", "UnknownTargetError", "resolve_menu"]

logger = logging.getLogger(__name__)


class UnknownTargetError(NavigationError, LookupError):
    """Raised when a destination name is not part of the menu table."""


class MenuIndex(Mapping[str, int]):
    """Ordered mapping of menu item names to their position in the menu bar.

    Lookups ignore case and surrounding whitespace, the original spelling is
    kept for display and assertions.
    """

    def __init__(self, items: Mapping[str, int]) -> None:
        self._items: Dict[str, int] = dict(items)
        self._by_normalised: Dict[str, str] = {normalise(name): name for name in self._items}

    def __getitem__(self, name: str) -> int:
        return self._items[self._by_normalised[normalise(name)]]

    def __iter__(self) -> Iterator[str]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    @property
    def names(self) -> List[str]:
        return sorted(self._items, key=self._items.__getitem__)

    def canonical_name(self, name: str) -> str:
        try:
            return self._by_normalised[normalise(name)]
        except KeyError as exc:
            raise UnknownTargetError(
                f'Unknown menu item: "{name}". Valid items: {", ".join(self.names)}'
            ) from exc

    def index_of(self, name: str) -> int:
        return self._items[self.canonical_name(name)]


async def resolve_menu(
    remote: RemoteControl,
    accessor: FocusAccessor,
    target_name: str,
    anchor_name: str,
    index_table: Mapping[str, int],
    step_budget: int = 10,
    *,
    anchor_moves: int = 2,
    anchor_direction: Command = Command.UP,
    timeout: float = TIMEOUTS.element_visibility,
    interval: float = TIMEOUTS.polling_interval,
    sleep: SleepFn = asyncio.sleep,
    clock: ClockFn = time.monotonic,
) -> FocusToken:
    """Focus ``target_name`` in the menu bar and return the focused token.

    Focus is first parked on the anchor item (``anchor_moves`` presses of
    ``anchor_direction``) so the starting position is known, then the target
    is reached by pressing left or right the number of positions between the
    two.  The menu is small and reacts quickly, so the focus is re-read
    directly between presses instead of waiting for a change.

    Raises :class:`UnknownTargetError` before any key is pressed when either
    name is not in ``index_table``, and :class:`FocusAssertionError` when the
    anchor or the target is not focused when it must be.
    """

    table = index_table if isinstance(index_table, MenuIndex) else MenuIndex(index_table)
    target = table.canonical_name(target_name)
    anchor = table.canonical_name(anchor_name)
    target_index = table[target]
    anchor_index = table[anchor]

    await remote.send_repeated(anchor_direction, anchor_moves)
    await expect_focused(
        accessor,
        anchor,
        timeout,
        context="menu anchor",
        interval=interval,
        sleep=sleep,
        clock=clock,
    )

    direction = Command.RIGHT if target_index > anchor_index else Command.LEFT
    steps = abs(target_index - anchor_index)
    logger.debug(
        "Menu navigation %s -> %s: %s x%s", anchor, target, direction.name, steps
    )

    for _ in range(min(steps, step_budget)):
        if tokens_match(await accessor(), target):
            break
        await remote.send(direction)

    focused = await expect_focused(
        accessor,
        target,
        timeout,
        context=f"menu navigation to {target}",
        interval=interval,
        sleep=sleep,
        clock=clock,
    )
    logger.info("Menu item '%s' focused", target)
    return focused
