"""Scenario objects for the TV web application."""

from .base import goto, wait_for_page_load
from .home_screen import HomeScreenPage
from .navigation_bar import MENU_ITEMS, NavigationBar
from .search_page import SearchPage

__all__ = [
    "goto",
    "wait_for_page_load",
    "HomeScreenPage",
    "NavigationBar",
    "MENU_ITEMS",
    "SearchPage",
]
