"""Browser session used by the command-line tools and the bridge server."""

from __future__ import annotations

import logging
from typing import Any, Optional

from playwright.async_api import Browser, BrowserContext, Page, Playwright, async_playwright

from .config import HarnessConfig
from .input_driver import PlaywrightKeyDispatcher, RemoteControl

__all__ = ["TvSession"]

logger = logging.getLogger(__name__)


class TvSession:
    """One Chromium page showing the TV web application.

    Use as an async context manager::

        async with TvSession(config) as session:
            await session.remote.move_right(3)
    """

    def __init__(self, config: HarnessConfig) -> None:
        self.config = config
        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._context: Optional[BrowserContext] = None
        self._page: Optional[Page] = None
        self._remote: Optional[RemoteControl] = None

    @property
    def page(self) -> Page:
        if self._page is None:
            raise RuntimeError("The browser session has not been started")
        return self._page

    @property
    def remote(self) -> RemoteControl:
        if self._remote is None:
            raise RuntimeError("The browser session has not been started")
        return self._remote

    async def start(self) -> "TvSession":
        width, height = self.config.viewport
        self._playwright = await async_playwright().start()
        self._browser = await self._playwright.chromium.launch(headless=self.config.headless)
        self._context = await self._browser.new_context(
            base_url=self.config.app_url,
            viewport={"width": width, "height": height},
        )
        self._context.set_default_timeout(self.config.action_timeout * 1000)
        self._page = await self._context.new_page()
        self._remote = RemoteControl(
            PlaywrightKeyDispatcher(self._page), key_delay=self.config.key_delay
        )
        logger.info("Opening %s", self.config.app_url)
        await self._page.goto("/")
        return self

    async def close(self) -> None:
        if self._context is not None:
            await self._context.close()
        if self._browser is not None:
            await self._browser.close()
        if self._playwright is not None:
            await self._playwright.stop()
        self._playwright = self._browser = self._context = self._page = None
        self._remote = None

    async def __aenter__(self) -> "TvSession":
        try:
            return await self.start()
        except BaseException:
            await self.close()
            raise

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()
