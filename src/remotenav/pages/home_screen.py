"""Scenarios on the TV home screen: the Favourite Apps rail and the Apps page."""

from __future__ import annotations

import logging
from typing import Dict, Optional

from playwright.async_api import Locator, Page, expect

from ..commands import Command
from ..constants import FOCUSED_LIST_ITEM, NAVIGATION_LIMITS, TIMEOUTS
from ..focus import NavigationError, log_navigation_failure, testid_focus_getter
from ..input_driver import PlaywrightKeyDispatcher, RemoteControl
from ..search import SearchOutcome, move_until, search_for
from .base import goto, wait_for_page_load
from .navigation_bar import NavigationBar

__all__ = ["HomeScreenPage"]

_LOGGER = logging.getLogger(__name__)

FAVOURITE_APPS = "Favourite Apps"
VIDEO_RAIL = "Video"


class HomeScreenPage:
    """The main TV interface with the menu bar and the app rails."""

    FOCUSED_ELEMENT = '[data-focused="true"], .focused, :focus'

    def __init__(self, page: Page, remote: Optional[RemoteControl] = None) -> None:
        self.page = page
        self.remote = remote or RemoteControl(PlaywrightKeyDispatcher(page))
        self.nav = NavigationBar(page)

    async def goto(self) -> None:
        await goto(self.page)
        await self.wait_for_home_screen()

    async def wait_for_home_screen(self) -> None:
        await wait_for_page_load(self.page, "networkidle")
        await expect(self.nav.root).to_be_visible(timeout=TIMEOUTS.element_visibility * 1000)

    # Locators -----------------------------------------------------------
    def focused_element(self) -> Locator:
        return self.page.locator(self.FOCUSED_ELEMENT).first

    async def focused_element_text(self) -> Optional[str]:
        focused = self.focused_element()
        if await focused.count() > 0:
            return await focused.text_content()
        return None

    def favourite_apps_rail(self) -> Locator:
        return self.page.get_by_label(FAVOURITE_APPS)

    def focused_app_in_favourites_rail(self) -> Locator:
        return self.favourite_apps_rail().locator(FOCUSED_LIST_ITEM)

    def bottom_overlay_elements(self) -> Dict[str, Locator]:
        overlay = self.page.locator('[class^="_bottomOverlay_"]')
        return {"overlay": overlay, "hint": overlay.locator('[class^="_hint_"]')}

    def edit_controls_for_focused_app(self) -> Locator:
        return self.focused_app_in_favourites_rail().locator('[class^="_editControls_"]')

    # Scenarios ----------------------------------------------------------
    async def navigate_to_app(
        self, app_name: str, max_steps: int = NAVIGATION_LIMITS.max_rail_steps
    ) -> SearchOutcome:
        """Move right through the Favourite Apps rail until ``app_name`` is focused.

        Focus must already be inside the rail.  The outcome is falsy when the
        end of the rail was reached first.
        """

        rail = self.favourite_apps_rail()
        await rail.wait_for(state="visible")
        return await search_for(
            self.remote,
            testid_focus_getter(rail),
            app_name,
            Command.RIGHT,
            max_steps,
            context="app navigation in Favourite Apps rail",
        )

    async def is_app_in_favorites(self, app_name: str) -> bool:
        rail = self.page.get_by_role("list", name=FAVOURITE_APPS)
        return await rail.get_by_role("listitem", name=app_name).count() > 0

    async def navigate_to_apps_page(self) -> None:
        await self.nav.navigate_to_menu_item(self.remote, "Apps")
        await self.remote.select()

        await expect(self.page.get_by_test_id("lists-container")).to_be_visible()
        await expect(self.page.get_by_label("Featured Apps")).to_be_visible()
        await expect(self.page.get_by_label(VIDEO_RAIL)).to_be_visible()

    async def add_app_to_favorites_from_apps_page(self, app_name: str) -> bool:
        """Find ``app_name`` in the Video rail of the Apps page and favourite it."""

        video_rail = self.page.get_by_role("list", name=VIDEO_RAIL)

        async def video_rail_has_focus() -> bool:
            return await video_rail.locator(FOCUSED_LIST_ITEM).count() > 0

        async def wait_for_rail() -> None:
            await wait_for_page_load(self.page)

        if not await move_until(
            self.remote,
            video_rail_has_focus,
            Command.DOWN,
            NAVIGATION_LIMITS.max_down_steps,
            between_steps=wait_for_rail,
        ):
            _LOGGER.warning("Could not focus any item in Video rail while adding '%s'", app_name)
            return False

        outcome = await search_for(
            self.remote,
            testid_focus_getter(video_rail),
            app_name,
            Command.RIGHT,
            NAVIGATION_LIMITS.max_app_search_steps,
            timeout=TIMEOUTS.polling,
            context="Video rail app search",
        )
        if not outcome:
            return False

        await self.remote.select()
        fav_button = self.page.locator("#app-fav-button")
        await expect(fav_button).to_have_attribute("data-focused", "true")
        await self.remote.select()

        await self.wait_for_home_screen()
        await self.remote.select()
        return True

    async def ensure_app_in_favorites(self, app_name: str) -> None:
        """Add ``app_name`` via the Apps page unless it is already a favourite."""

        if await self.is_app_in_favorites(app_name):
            return

        _LOGGER.info("%s not in favorites, attempting to add it...", app_name)
        await self.navigate_to_apps_page()
        if not await self.add_app_to_favorites_from_apps_page(app_name):
            raise NavigationError(f"{app_name} app not found in the Video rail on Apps page")
        _LOGGER.info("%s successfully added to favorites", app_name)

    async def remove_app_from_favorites_if_exists(self, app_name: str) -> bool:
        """Long-press ``app_name`` in the rail and remove it.

        Returns ``False`` when the app is not a favourite, cannot be reached
        or is protected against removal.
        """

        if not await self.is_app_in_favorites(app_name):
            _LOGGER.info("App '%s' not in favorites, nothing to remove", app_name)
            return False

        if not await self.navigate_to_app(app_name):
            log_navigation_failure("favourite removal", app_name, None)
            return False

        await self.remote.hold_select(TIMEOUTS.long_press_duration)

        delete_button = self.edit_controls_for_focused_app().get_by_test_id("editmode-remove-app")
        if await delete_button.get_attribute("data-focused") == "disabled":
            _LOGGER.warning("App '%s' is protected and cannot be deleted", app_name)
            await self.remote.back()
            return False

        await self.remote.move_down()
        await self.remote.select()
        _LOGGER.info("App '%s' removed from favorites", app_name)
        return True
