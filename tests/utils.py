from __future__ import annotations

from typing import Iterable, List, Optional, Sequence

from remotenav.input_driver import RemoteControl, SimulatedKeyDispatcher


class FakeClock:
    """Virtual time: ``sleep`` advances ``now`` instead of blocking."""

    def __init__(self) -> None:
        self.now = 0.0
        self.sleeps: List[float] = []

    def __call__(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


class ScriptedAccessor:
    """Return the scripted tokens in order, repeating the last one forever."""

    def __init__(self, tokens: Sequence[Optional[str]]) -> None:
        self.tokens = list(tokens)
        self.calls = 0

    async def __call__(self) -> Optional[str]:
        index = min(self.calls, len(self.tokens) - 1)
        self.calls += 1
        return self.tokens[index]


class FakeRail:
    """A horizontal list whose focus clamps at both ends.

    After a key press the new focus only becomes visible to readers after
    ``lag`` reads, like a UI finishing its focus animation.
    """

    def __init__(self, items: Iterable[Optional[str]], *, start: int = 0, lag: int = 0,
                 forward: str = "ArrowRight", backward: str = "ArrowLeft") -> None:
        self.items = list(items)
        self.index = start
        self.visible_index = start
        self.lag = lag
        self.forward = forward
        self.backward = backward
        self._pending_reads = 0
        self.reads = 0

    def on_event(self, event: str, key: str) -> None:
        if event != "press":
            return
        if key == self.forward:
            self.index = min(self.index + 1, len(self.items) - 1)
        elif key == self.backward:
            self.index = max(self.index - 1, 0)
        self._pending_reads = self.lag

    async def __call__(self) -> Optional[str]:
        self.reads += 1
        if self._pending_reads > 0:
            self._pending_reads -= 1
        else:
            self.visible_index = self.index
        if not self.items:
            return None
        return self.items[self.visible_index]


class FakeMenuBar:
    """Menu bar reached by pressing up ``ups_needed`` times from the content rails."""

    def __init__(self, names: Sequence[str], *, home: int = 1, ups_needed: int = 2,
                 broken_after: Optional[int] = None) -> None:
        self.names = list(names)
        self.index = home
        self.ups = 0
        self.ups_needed = ups_needed
        self.moves = 0
        self.broken_after = broken_after

    def on_event(self, event: str, key: str) -> None:
        if event != "press":
            return
        if key == "ArrowUp":
            self.ups += 1
        elif self.ups >= self.ups_needed and key in ("ArrowLeft", "ArrowRight"):
            if self.broken_after is not None and self.moves >= self.broken_after:
                return
            self.moves += 1
            step = 1 if key == "ArrowRight" else -1
            self.index = max(0, min(len(self.names) - 1, self.index + step))

    async def __call__(self) -> Optional[str]:
        if self.ups < self.ups_needed:
            return None
        return self.names[self.index]


def make_remote(ui=None, clock: Optional[FakeClock] = None, key_delay: float = 0.1):
    dispatcher = SimulatedKeyDispatcher(on_event=ui.on_event if ui is not None else None)
    clock = clock or FakeClock()
    remote = RemoteControl(dispatcher, key_delay=key_delay, sleep=clock.sleep)
    return remote, dispatcher, clock
