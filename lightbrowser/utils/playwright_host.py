"""
Async Playwright browser host: owns the browser, its context and pages.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from playwright.async_api import async_playwright, Browser, BrowserContext, Page

from lightbrowser.utils.browser_policy import BrowserPolicy

logger = logging.getLogger(__name__)


class AsyncBrowserHost:
    def __init__(
        self,
        *,
        policy: Optional[BrowserPolicy] = None,
        context_kwargs: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.policy = policy or BrowserPolicy()
        self.context_kwargs = context_kwargs or {}

        self._playwright = None
        self._browser: Optional[Browser] = None
        self._context: Optional[BrowserContext] = None
        self._pages: List[Page] = []
        self._started = False

    async def __aenter__(self) -> "AsyncBrowserHost":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    @property
    def started(self) -> bool:
        return self._started

    async def start(self) -> None:
        if self._started:
            return
        self._playwright = await async_playwright().start()
        browser_factory = getattr(self._playwright, self.policy.browser_type)
        try:
            self._browser = await browser_factory.launch(headless=self.policy.headless)
        except Exception:
            await self._playwright.stop()
            self._playwright = None
            raise
        self._context = await self._browser.new_context(
            **self.policy.build_context_kwargs(**self.context_kwargs)
        )
        self._started = True

    async def new_page(self) -> Page:
        if not self._started:
            await self.start()
        if not self._context:
            raise RuntimeError("Browser host not initialized")
        page = await self._context.new_page()
        page.set_default_timeout(self.policy.timeout_ms)
        self._pages.append(page)
        return page

    async def close(self) -> None:
        if not self._started:
            return
        closers = [page.close for page in self._pages]
        for resource in (self._context, self._browser):
            if resource is not None:
                closers.append(resource.close)
        if self._playwright is not None:
            closers.append(self._playwright.stop)

        # Teardown keeps going past a failed step so the driver is always stopped.
        for closer in closers:
            try:
                await closer()
            except Exception as exc:
                logger.debug("Ignoring browser teardown error from %s: %s", closer, exc)

        self._pages = []
        self._started = False
        self._context = None
        self._browser = None
        self._playwright = None


__all__ = ["AsyncBrowserHost"]
