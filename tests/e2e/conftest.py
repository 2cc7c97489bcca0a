from __future__ import annotations

import asyncio
import os
from typing import Awaitable, Callable

import pytest

from remotenav.config import load_config


@pytest.fixture()
def run_scenario() -> Callable[[Callable[..., Awaitable[None]]], None]:
    """Run an async scenario against a fresh page of the live TV application."""

    if not os.environ.get("APP_URL"):
        pytest.skip("APP_URL is not set; skipping tests against the live TV application")

    from playwright.async_api import async_playwright

    config = load_config()

    def runner(scenario: Callable[..., Awaitable[None]]) -> None:
        async def main() -> None:
            width, height = config.viewport
            async with async_playwright() as playwright:
                browser = await playwright.chromium.launch(headless=config.headless)
                context = await browser.new_context(
                    base_url=config.app_url, viewport={"width": width, "height": height}
                )
                context.set_default_timeout(config.action_timeout * 1000)
                try:
                    await scenario(await context.new_page())
                finally:
                    await context.close()
                    await browser.close()

        asyncio.run(main())

    return runner
