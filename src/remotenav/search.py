"""Directional search through focusable collections (rails, lists, grids)."""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, Optional

from .commands import Command
from .constants import TIMEOUTS
from .focus import (
    ClockFn,
    FocusAccessor,
    FocusToken,
    log_navigation_failure,
    tokens_match,
    wait_for_focus_change,
)
from .input_driver import RemoteControl, SleepFn

__all__ = ["NotFoundReason", "SearchOutcome", "search_for", "move_until"]

logger = logging.getLogger(__name__)


class NotFoundReason(Enum):
    END_OF_COLLECTION = "end_of_collection"
    STEP_LIMIT_EXCEEDED = "step_limit_exceeded"
    STALLED_NO_PROGRESS = "stalled_no_progress"


@dataclass(frozen=True)
class SearchOutcome:
    """Result of a single :func:`search_for` call."""

    target: FocusToken
    found: bool
    token: FocusToken
    reason: Optional[NotFoundReason] = None
    steps: int = 0

    @classmethod
    def hit(cls, target: FocusToken, token: FocusToken, steps: int) -> "SearchOutcome":
        return cls(target=target, found=True, token=token, steps=steps)

    @classmethod
    def miss(
        cls, target: FocusToken, token: FocusToken, reason: NotFoundReason, steps: int
    ) -> "SearchOutcome":
        return cls(target=target, found=False, token=token, reason=reason, steps=steps)

    def __bool__(self) -> bool:
        return self.found

    def to_dict(self) -> Dict[str, object]:
        """Serialise the outcome as a JSON-compatible dictionary."""

        return {
            "target": self.target,
            "found": self.found,
            "token": self.token,
            "reason": self.reason.value if self.reason else None,
            "steps": self.steps,
        }


async def search_for(
    remote: RemoteControl,
    accessor: FocusAccessor,
    target: FocusToken,
    direction: Command,
    step_budget: int,
    *,
    timeout: float = TIMEOUTS.focus_change,
    interval: float = TIMEOUTS.polling_interval,
    sleep: SleepFn = asyncio.sleep,
    clock: ClockFn = time.monotonic,
    context: Optional[str] = None,
) -> SearchOutcome:
    """Move focus in ``direction`` until ``target`` is focused.

    At most ``step_budget`` presses are issued.  When a press does not move
    the focus within ``timeout`` the collection is assumed to be clamped at
    its end and the search stops with ``END_OF_COLLECTION``.  If focus moved
    but then settled back on the element it started from, the search stops
    with ``STALLED_NO_PROGRESS``.  Misses are logged, never raised.
    """

    if step_budget < 0:
        raise ValueError(f"step_budget must not be negative (got {step_budget})")

    context = context or f"{direction.name.lower()} search"
    remaining = step_budget
    steps = 0
    before_last_move: FocusToken = None

    while True:
        current = await accessor()
        if tokens_match(current, target):
            logger.debug("Found %r after %s step(s)", target, steps)
            return SearchOutcome.hit(target, current, steps)

        if steps > 0 and current == before_last_move:
            log_navigation_failure(f"{context} (no progress)", target, current)
            return SearchOutcome.miss(target, current, NotFoundReason.STALLED_NO_PROGRESS, steps)

        if remaining <= 0:
            log_navigation_failure(f"{context} (max steps reached)", target, current)
            return SearchOutcome.miss(target, current, NotFoundReason.STEP_LIMIT_EXCEEDED, steps)

        await remote.send(direction)
        steps += 1
        before_last_move = current

        moved_to = await wait_for_focus_change(
            accessor, current, timeout, interval=interval, sleep=sleep, clock=clock
        )
        if moved_to == current:
            log_navigation_failure(f"{context} (end of collection)", target, current)
            return SearchOutcome.miss(target, current, NotFoundReason.END_OF_COLLECTION, steps)

        remaining -= 1


async def move_until(
    remote: RemoteControl,
    condition: Callable[[], Awaitable[Any]],
    direction: Command,
    max_steps: int,
    *,
    between_steps: Optional[Callable[[], Awaitable[Any]]] = None,
) -> bool:
    """Press ``direction`` until ``condition()`` is truthy, at most ``max_steps`` times.

    ``between_steps`` is awaited after every unsuccessful press except the
    last one (for example to wait for a lazily rendered rail).
    """

    for step in range(max_steps):
        await remote.send(direction)
        if await condition():
            logger.debug("Condition met after %s %s press(es)", step + 1, direction.name)
            return True
        if between_steps is not None and step < max_steps - 1:
            await between_steps()
    return bool(await condition())
