"""Observe the focus state of the TV UI by polling.

Focus is owned by the web application; the harness never writes it.  A
:class:`FocusAccessor` reads "what is focused right now" and the helpers in
this module poll such accessors until the value changes, matches an expected
value or a timeout elapses.
"""

from __future__ import annotations

import asyncio
import logging
import time
import unicodedata
from typing import Any, Callable, Optional, Protocol

from .constants import FOCUSED_LIST_ITEM, TIMEOUTS
from .input_driver import SleepFn

__all__ = [
    "FocusToken",
    "FocusAccessor",
    "NavigationError",
    "FocusAssertionError",
    "normalise",
    "tokens_match",
    "wait_for_focus_change",
    "wait_for_focus",
    "expect_focused",
    "log_navigation_failure",
    "attribute_focus_getter",
    "testid_focus_getter",
    "label_focus_getter",
    "text_focus_getter",
]

logger = logging.getLogger(__name__)

FocusToken = Optional[str]
ClockFn = Callable[[], float]


class FocusAccessor(Protocol):
    """Zero-argument read of the currently focused element's identifier."""

    async def __call__(self) -> FocusToken:
        ...


class NavigationError(RuntimeError):
    """Base class for navigation failures raised by the harness."""


class FocusAssertionError(NavigationError, AssertionError):
    """Raised when an element that must be focused is not."""

    def __init__(self, context: str, expected: str, last_focused: FocusToken) -> None:
        super().__init__(
            f'Expected "{expected}" to be focused during {context}. '
            f'Last focused element: "{last_focused or "none"}"'
        )
        self.context = context
        self.expected = expected
        self.last_focused = last_focused


def normalise(value: FocusToken) -> str:
    """Return a case-folded, trimmed version of ``value`` ("" for ``None``)."""

    if not value:
        return ""
    return unicodedata.normalize("NFKC", value).strip().casefold()


def tokens_match(token: FocusToken, target: FocusToken) -> bool:
    return normalise(token) == normalise(target)


async def wait_for_focus_change(
    accessor: FocusAccessor,
    previous: FocusToken,
    timeout: float = TIMEOUTS.focus_change,
    *,
    interval: float = TIMEOUTS.polling_interval,
    sleep: SleepFn = asyncio.sleep,
    clock: ClockFn = time.monotonic,
) -> FocusToken:
    """Poll ``accessor`` until it reports something other than ``previous``.

    Returns the new token as soon as it differs (``None`` and a string are
    different), or ``previous`` once ``timeout`` seconds have passed.  An
    unchanged focus is a normal outcome and is never raised as an error.
    """

    start = clock()
    while True:
        current = await accessor()
        if current != previous:
            logger.debug("Focus changed: %r -> %r", previous, current)
            return current
        if clock() - start >= timeout:
            logger.debug("Focus stayed on %r for %.2fs", previous, timeout)
            return previous
        await sleep(interval)


async def wait_for_focus(
    accessor: FocusAccessor,
    expected: str,
    timeout: float = TIMEOUTS.element_visibility,
    *,
    interval: float = TIMEOUTS.polling_interval,
    sleep: SleepFn = asyncio.sleep,
    clock: ClockFn = time.monotonic,
) -> bool:
    """Return ``True`` once ``expected`` is focused, ``False`` after ``timeout``."""

    matched, _ = await _poll_until_focused(accessor, expected, timeout, interval, sleep, clock)
    return matched


async def _poll_until_focused(
    accessor: FocusAccessor,
    expected: str,
    timeout: float,
    interval: float,
    sleep: SleepFn,
    clock: ClockFn,
) -> tuple[bool, FocusToken]:
    start = clock()
    while True:
        current = await accessor()
        if tokens_match(current, expected):
            return True, current
        if clock() - start >= timeout:
            return False, current
        await sleep(interval)


async def expect_focused(
    accessor: FocusAccessor,
    expected: str,
    timeout: float = TIMEOUTS.element_visibility,
    *,
    context: str = "focus assertion",
    interval: float = TIMEOUTS.polling_interval,
    sleep: SleepFn = asyncio.sleep,
    clock: ClockFn = time.monotonic,
) -> str:
    """Like :func:`wait_for_focus` but raise :class:`FocusAssertionError` on timeout."""

    focused, last = await _poll_until_focused(accessor, expected, timeout, interval, sleep, clock)
    if not focused:
        raise FocusAssertionError(context, expected, last)
    return last if last is not None else expected


def log_navigation_failure(context: str, target: FocusToken, last_focused: FocusToken) -> None:
    logger.warning(
        'Failed to find "%s" during %s. Last focused element: "%s"',
        target,
        context,
        last_focused or "none",
    )


# Accessor factories ---------------------------------------------------------
def attribute_focus_getter(
    container: Any,
    attribute: str = "data-testid",
    focus_selector: str = FOCUSED_LIST_ITEM,
) -> FocusAccessor:
    """Return an accessor reading ``attribute`` of the focused item in ``container``.

    ``container`` is a Playwright locator.  The accessor returns ``None`` when
    nothing inside the container is focused.
    """

    async def get_focused() -> FocusToken:
        focused = container.locator(focus_selector)
        if await focused.count() == 0:
            return None
        return await focused.first.get_attribute(attribute)

    return get_focused


def testid_focus_getter(container: Any, focus_selector: str = FOCUSED_LIST_ITEM) -> FocusAccessor:
    return attribute_focus_getter(container, "data-testid", focus_selector)


def label_focus_getter(container: Any, focus_selector: str = FOCUSED_LIST_ITEM) -> FocusAccessor:
    return attribute_focus_getter(container, "aria-label", focus_selector)


def text_focus_getter(container: Any, focus_selector: str = FOCUSED_LIST_ITEM) -> FocusAccessor:
    async def get_focused() -> FocusToken:
        focused = container.locator(focus_selector)
        if await focused.count() == 0:
            return None
        return await focused.first.text_content()

    return get_focused
