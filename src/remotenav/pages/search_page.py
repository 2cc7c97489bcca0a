"""Scenarios on the Search page: genre list and results grid."""

from __future__ import annotations

import logging
from typing import Optional

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Locator, Page, expect

from ..commands import Command
from ..constants import FOCUSED_LIST_ITEM, NAVIGATION_LIMITS, TIMEOUTS
from ..focus import label_focus_getter
from ..input_driver import PlaywrightKeyDispatcher, RemoteControl
from ..search import SearchOutcome, search_for
from .base import goto, wait_for_page_load
from .navigation_bar import NavigationBar

__all__ = ["SearchPage"]

_LOGGER = logging.getLogger(__name__)


class SearchPage:
    def __init__(self, page: Page, remote: Optional[RemoteControl] = None) -> None:
        self.page = page
        self.remote = remote or RemoteControl(PlaywrightKeyDispatcher(page))
        self.nav = NavigationBar(page)

    async def navigate_from_home(self) -> None:
        await self.nav.navigate_to_menu_item(self.remote, "Search")
        await self.remote.select()
        await self.wait_for_search_page_load()

    async def wait_for_search_page_load(self) -> None:
        await wait_for_page_load(self.page, "networkidle")
        await expect(self.search_input()).to_be_visible(timeout=TIMEOUTS.element_visibility * 1000)

    async def goto(self) -> None:
        """Open the home screen and walk to the Search page through the menu."""

        await goto(self.page)
        await wait_for_page_load(self.page, "networkidle")
        await self.navigate_from_home()

    # Locators -----------------------------------------------------------
    def search_input(self) -> Locator:
        return self.page.locator("#search-input")

    def categories_list(self) -> Locator:
        return self.page.locator("#search-genres")

    def category_items(self) -> Locator:
        return self.categories_list().locator('[role="listitem"]')

    def focused_category(self) -> Locator:
        return self.categories_list().locator(FOCUSED_LIST_ITEM)

    def category_by_text(self, category: str) -> Locator:
        return self.categories_list().locator(f'[role="listitem"][aria-label="{category}"]')

    def search_results_grid(self) -> Locator:
        return self.page.locator("#search-results-grid")

    def search_results_rows(self) -> Locator:
        return self.search_results_grid().locator('[class*="_rowContainer_"]')

    def first_search_results_row(self) -> Locator:
        return self.search_results_rows().first

    # Scenarios ----------------------------------------------------------
    async def wait_for_search_results(self) -> None:
        try:
            await self.page.wait_for_load_state(
                "networkidle", timeout=TIMEOUTS.network_idle * 1000
            )
        except PlaywrightError as exc:
            # Results are often rendered before the network goes quiet.
            _LOGGER.debug("Network did not become idle: %s", exc)

    async def navigate_to_category(
        self, category: str, max_steps: int = NAVIGATION_LIMITS.max_category_steps
    ) -> SearchOutcome:
        """Move down through the genre list until ``category`` is focused."""

        return await search_for(
            self.remote,
            label_focus_getter(self.categories_list()),
            category,
            Command.DOWN,
            max_steps,
            context="category navigation in genre list",
        )
