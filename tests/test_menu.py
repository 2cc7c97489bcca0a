import asyncio

import pytest

from remotenav.focus import FocusAssertionError
from remotenav.menu import MenuIndex, UnknownTargetError, resolve_menu
from remotenav.pages.navigation_bar import MENU_ITEMS
from tests.utils import FakeClock, FakeMenuBar, make_remote

MENU = ["Search", "Home", "Tv Guide", "Channels", "Gaming", "Free", "Apps"]


def _resolve(ui, target, table, budget=10, anchor="Home"):
    clock = FakeClock()
    remote, dispatcher, _ = make_remote(ui, clock)
    focused = asyncio.run(
        resolve_menu(
            remote,
            ui,
            target,
            anchor,
            table,
            budget,
            timeout=1.0,
            sleep=clock.sleep,
            clock=clock,
        )
    )
    return focused, dispatcher


def test_moves_right_from_the_anchor() -> None:
    ui = FakeMenuBar(MENU)
    focused, dispatcher = _resolve(ui, "Apps", {"Home": 1, "Apps": 6})
    assert focused == "Apps"
    assert dispatcher.pressed_keys == ["ArrowUp", "ArrowUp"] + ["ArrowRight"] * 5


def test_moves_left_for_items_before_the_anchor() -> None:
    ui = FakeMenuBar(MENU)
    focused, dispatcher = _resolve(ui, "search", MENU_ITEMS)
    assert focused == "Search"
    assert dispatcher.pressed_keys == ["ArrowUp", "ArrowUp", "ArrowLeft"]


def test_anchor_target_needs_no_horizontal_moves() -> None:
    ui = FakeMenuBar(MENU)
    focused, dispatcher = _resolve(ui, "Home", MENU_ITEMS)
    assert focused == "Home"
    assert dispatcher.pressed_keys == ["ArrowUp", "ArrowUp"]


def test_stops_early_once_target_is_focused() -> None:
    ui = FakeMenuBar(["Search", "Home", "Channels", "Apps"])
    focused, dispatcher = _resolve(ui, "Apps", {"Home": 1, "Apps": 6})
    assert focused == "Apps"
    assert dispatcher.pressed_keys.count("ArrowRight") == 2


def test_unknown_target_fails_before_any_input() -> None:
    ui = FakeMenuBar(MENU)
    remote, dispatcher, _ = make_remote(ui)
    with pytest.raises(UnknownTargetError) as excinfo:
        asyncio.run(resolve_menu(remote, ui, "Settings", "Home", MENU_ITEMS))
    assert isinstance(excinfo.value, LookupError)
    assert "Valid items: Search, Home, Tv Guide, Channels, Gaming, Free, Apps" in str(excinfo.value)
    assert dispatcher.events == []


def test_unknown_anchor_fails_before_any_input() -> None:
    ui = FakeMenuBar(MENU)
    remote, dispatcher, _ = make_remote(ui)
    with pytest.raises(UnknownTargetError):
        asyncio.run(resolve_menu(remote, ui, "Apps", "Start", MENU_ITEMS))
    assert dispatcher.events == []


def test_target_never_focused_is_a_hard_failure() -> None:
    ui = FakeMenuBar(MENU, broken_after=2)
    with pytest.raises(FocusAssertionError) as excinfo:
        _resolve(ui, "Apps", {"Home": 1, "Apps": 6})
    assert excinfo.value.expected == "Apps"
    assert excinfo.value.last_focused == "Channels"


def test_anchor_not_reached_is_a_hard_failure() -> None:
    ui = FakeMenuBar(MENU, ups_needed=3)
    with pytest.raises(FocusAssertionError) as excinfo:
        _resolve(ui, "Apps", MENU_ITEMS)
    assert excinfo.value.context == "menu anchor"
    assert excinfo.value.last_focused is None


def test_step_budget_caps_the_moves() -> None:
    ui = FakeMenuBar(MENU)
    with pytest.raises(FocusAssertionError):
        _resolve(ui, "Apps", MENU_ITEMS, budget=2)
    assert ui.moves == 2


def test_menu_index_lookup() -> None:
    table = MenuIndex({"Home": 1, "Search": 0, "Tv Guide": 2})
    assert table.names == ["Search", "Home", "Tv Guide"]
    assert table.index_of(" tv guide ") == 2
    assert "HOME" in table
    assert "Apps" not in table
    with pytest.raises(UnknownTargetError):
        table.index_of("Apps")
