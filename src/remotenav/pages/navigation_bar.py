"""Component object for the top navigation menu of the TV application.

The menu is rendered as a ``navigation`` region labelled "Main menu" holding
``menubar``/``menu`` elements.  Each tab is wrapped in an element with
``data-testid="main-menu-item-<index>"`` and carries ``data-focused="focused"``
while it has focus.
"""

from __future__ import annotations

from playwright.async_api import Locator, Page

from ..constants import NAVIGATION_LIMITS
from ..focus import FocusToken
from ..input_driver import RemoteControl
from ..menu import MenuIndex, resolve_menu

__all__ = ["NavigationBar", "MENU_ITEMS", "HOME_ITEM"]

MENU_ITEMS = MenuIndex(
    {
        "Search": 0,
        "Home": 1,
        "Tv Guide": 2,
        "Channels": 3,
        "Gaming": 4,
        "Free": 5,
        "Apps": 6,
    }
)

#: Focus rests on this tab after moving up from the home screen rails.
HOME_ITEM = "Home"

_FOCUSED_MENU_ITEM = '[role="menuitem"][data-focused="focused"]'


class NavigationBar:
    def __init__(self, page: Page) -> None:
        self.page = page
        self.root = page.get_by_role("navigation", name="Main menu")
        self.menubars = self.root.get_by_role("menubar")
        self.menus = self.root.get_by_role("menu")

    def tab_by_testid(self, test_id: str) -> Locator:
        return self.menubars.get_by_test_id(test_id)

    def item(self, name: str) -> Locator:
        """Return the inner ``menuitem`` for ``name`` (not its wrapper)."""

        canonical = MENU_ITEMS.canonical_name(name)
        return self.page.get_by_test_id(f"main-menu-item-{MENU_ITEMS[canonical]}").get_by_role(
            "menuitem", name=canonical
        )

    async def focused_item_name(self) -> FocusToken:
        focused = self.page.locator(_FOCUSED_MENU_ITEM)
        if await focused.count() == 0:
            return None
        first = focused.first
        label = await first.get_attribute("aria-label")
        if label:
            return label
        return await first.text_content()

    async def navigate_to_menu_item(
        self,
        remote: RemoteControl,
        name: str,
        max_steps: int = NAVIGATION_LIMITS.max_menu_steps,
    ) -> Locator:
        """Move from the home screen rails up to the menu bar and focus ``name``."""

        await resolve_menu(
            remote,
            self.focused_item_name,
            name,
            HOME_ITEM,
            MENU_ITEMS,
            max_steps,
        )
        return self.item(name)
