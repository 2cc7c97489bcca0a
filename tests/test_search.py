import asyncio
import logging

import pytest

from remotenav.commands import Command
from remotenav.search import NotFoundReason, SearchOutcome, move_until, search_for
from tests.utils import FakeClock, FakeRail, ScriptedAccessor, make_remote

APPS = ["Watch TV", "YouTube", "Netflix", "Prime Video"]


def _search(accessor, target, *, ui=None, budget=50, direction=Command.RIGHT, timeout=0.5):
    remote, dispatcher, clock = make_remote(ui)
    outcome = asyncio.run(
        search_for(
            remote,
            accessor,
            target,
            direction,
            budget,
            timeout=timeout,
            interval=0.05,
            sleep=clock.sleep,
            clock=clock,
        )
    )
    return outcome, dispatcher


def test_target_already_focused_sends_nothing() -> None:
    rail = FakeRail(["X"])
    outcome, dispatcher = _search(rail, "X ", ui=rail, budget=5)
    assert outcome == SearchOutcome.hit("X ", "X", 0)
    assert outcome
    assert dispatcher.events == []


def test_comparison_ignores_case() -> None:
    rail = FakeRail(["X"])
    outcome, dispatcher = _search(rail, "x", ui=rail, budget=5)
    assert outcome.found
    assert dispatcher.events == []


def test_different_target_is_not_matched() -> None:
    rail = FakeRail(["X"])
    outcome, dispatcher = _search(rail, "y", ui=rail, budget=5)
    assert not outcome
    assert outcome.reason is NotFoundReason.END_OF_COLLECTION
    assert outcome.token == "X"
    assert dispatcher.pressed_keys == ["ArrowRight"]


def test_zero_budget_returns_without_input() -> None:
    rail = FakeRail(APPS)
    outcome, dispatcher = _search(rail, "Netflix", ui=rail, budget=0)
    assert outcome.reason is NotFoundReason.STEP_LIMIT_EXCEEDED
    assert outcome.steps == 0
    assert dispatcher.events == []


def test_finds_target_further_along_the_rail() -> None:
    rail = FakeRail(APPS)
    outcome, dispatcher = _search(rail, "netflix", ui=rail)
    assert outcome == SearchOutcome.hit("netflix", "Netflix", 2)
    assert dispatcher.pressed_keys == ["ArrowRight", "ArrowRight"]


def test_waits_for_lagging_focus() -> None:
    rail = FakeRail(APPS, lag=3)
    outcome, dispatcher = _search(rail, "Prime Video", ui=rail)
    assert outcome.found
    assert outcome.steps == 3
    assert len(dispatcher.pressed_keys) == 3


def test_end_of_rail_stops_the_search(caplog: pytest.LogCaptureFixture) -> None:
    rail = FakeRail(APPS)
    with caplog.at_level(logging.WARNING):
        outcome, dispatcher = _search(rail, "Hulu", ui=rail)
    assert outcome.reason is NotFoundReason.END_OF_COLLECTION
    assert outcome.token == "Prime Video"
    assert outcome.steps == 4
    assert len(dispatcher.pressed_keys) == 4
    assert 'Failed to find "Hulu"' in caplog.text
    assert "Prime Video" in caplog.text


def test_step_budget_bounds_the_number_of_moves() -> None:
    rail = FakeRail(APPS)
    outcome, dispatcher = _search(rail, "Prime Video", ui=rail, budget=2)
    assert outcome.reason is NotFoundReason.STEP_LIMIT_EXCEEDED
    assert outcome.token == "Netflix"
    assert len(dispatcher.pressed_keys) == 2


def test_ever_changing_focus_is_bounded_by_the_budget() -> None:
    reads = {"count": 0}

    async def restless() -> str:
        reads["count"] += 1
        return f"tile-{reads['count']}"

    outcome, dispatcher = _search(restless, "never", budget=5)
    assert outcome.reason is NotFoundReason.STEP_LIMIT_EXCEEDED
    assert len(dispatcher.pressed_keys) == 5


def test_focus_bouncing_back_is_reported_as_stall() -> None:
    accessor = ScriptedAccessor(["A", "B", "A"])
    outcome, dispatcher = _search(accessor, "C")
    assert outcome.reason is NotFoundReason.STALLED_NO_PROGRESS
    assert outcome.token == "A"
    assert outcome.steps == 1
    assert dispatcher.pressed_keys == ["ArrowRight"]


def test_slower_ui_than_timeout_looks_like_end_of_collection() -> None:
    rail = FakeRail(APPS, lag=50)
    outcome, _ = _search(rail, "Netflix", ui=rail)
    assert outcome.reason is NotFoundReason.END_OF_COLLECTION
    assert outcome.token == "Watch TV"


def test_empty_focus_is_a_comparable_token() -> None:
    empty = ScriptedAccessor([None])
    outcome, dispatcher = _search(empty, None)
    assert outcome.found
    assert dispatcher.events == []

    outcome, dispatcher = _search(ScriptedAccessor([None]), "Netflix")
    assert outcome.reason is NotFoundReason.END_OF_COLLECTION
    assert outcome.token is None


def test_vertical_search() -> None:
    genres = FakeRail(["Action", "Comedy", "Drama"], forward="ArrowDown", backward="ArrowUp")
    outcome, dispatcher = _search(genres, "Drama", ui=genres, direction=Command.DOWN)
    assert outcome.found
    assert dispatcher.pressed_keys == ["ArrowDown", "ArrowDown"]


def test_negative_budget_is_rejected() -> None:
    with pytest.raises(ValueError):
        _search(ScriptedAccessor(["A"]), "A", budget=-1)


def test_outcome_serialisation() -> None:
    outcome = SearchOutcome.miss("Hulu", "Prime Video", NotFoundReason.END_OF_COLLECTION, 4)
    assert outcome.to_dict() == {
        "target": "Hulu",
        "found": False,
        "token": "Prime Video",
        "reason": "end_of_collection",
        "steps": 4,
    }


def test_move_until_stops_when_condition_holds() -> None:
    rows = FakeRail(["Top", "Featured Apps", "Video"], forward="ArrowDown", backward="ArrowUp")
    remote, dispatcher, _ = make_remote(rows)

    async def video_focused() -> bool:
        return await rows() == "Video"

    assert asyncio.run(move_until(remote, video_focused, Command.DOWN, 15))
    assert dispatcher.pressed_keys == ["ArrowDown", "ArrowDown"]


def test_move_until_gives_up_after_max_steps() -> None:
    remote, dispatcher, _ = make_remote()
    waits: list[int] = []

    async def never() -> bool:
        return False

    async def between() -> None:
        waits.append(1)

    assert not asyncio.run(move_until(remote, never, Command.DOWN, 3, between_steps=between))
    assert len(dispatcher.pressed_keys) == 3
    assert len(waits) == 2
