"""Named timing values and navigation limits used throughout the harness.

All durations are in seconds.
"""

from __future__ import annotations

from dataclasses import dataclass

__all__ = ["TIMEOUTS", "NAVIGATION_LIMITS", "FOCUSED_LIST_ITEM"]


@dataclass(frozen=True)
class Timeouts:
    default: float = 10.0
    element_visibility: float = 15.0
    network_idle: float = 5.0
    #: How long the OK button is held to trigger long-press modes.
    long_press_duration: float = 1.5
    #: How long to wait for focus to move after a single key press.
    focus_change: float = 0.5
    polling: float = 1.0
    #: Settling delay after every key press.
    key_press_delay: float = 0.1
    polling_interval: float = 0.05


@dataclass(frozen=True)
class NavigationLimits:
    max_menu_steps: int = 10
    max_rail_steps: int = 50
    max_category_steps: int = 20
    max_app_search_steps: int = 100
    max_down_steps: int = 15


TIMEOUTS = Timeouts()
NAVIGATION_LIMITS = NavigationLimits()

#: Selector matching the focused item inside a list container.
FOCUSED_LIST_ITEM = '[role="listitem"][data-focused="focused"]'
