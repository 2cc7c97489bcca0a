"""Page helpers shared by every scenario object."""

from __future__ import annotations

from playwright.async_api import Page

__all__ = ["goto", "wait_for_page_load"]


async def goto(page: Page, path: str = "/") -> None:
    """Open ``path`` relative to the configured base URL (the home screen by default)."""

    await page.goto(path)


async def wait_for_page_load(page: Page, state: str = "domcontentloaded") -> None:
    await page.wait_for_load_state(state)  # type: ignore[arg-type]
