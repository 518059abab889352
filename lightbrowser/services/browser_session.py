"""
One browsing session: a single page with media interception, placeholder
substitution and the browser-screen operations (homepage, bookmarks,
history navigation, media blocking toggle).
"""
from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, List, Optional

from playwright.async_api import Page, Response
from sqlalchemy.exc import SQLAlchemyError

from lightbrowser.repositories.bookmark_repository import BookmarkRepository, DEFAULT_TITLE
from lightbrowser.repositories.settings_repository import SettingsRepository
from lightbrowser.services.placeholder_injector import InjectionReport, PlaceholderInjector
from lightbrowser.utils.blocking_state import BlockingState, DocumentPolicy
from lightbrowser.utils.playwright_blocking import InterceptionGate, install_async_media_interception
from lightbrowser.utils.url_tools import normalize_url

logger = logging.getLogger(__name__)

CAN_GO_BACK_SCRIPT = "() => window.navigation ? window.navigation.canGoBack : history.length > 1"
CAN_GO_FORWARD_SCRIPT = "() => window.navigation ? window.navigation.canGoForward : false"


class BrowserSession:
    def __init__(
        self,
        host,
        *,
        settings: Optional[SettingsRepository] = None,
        bookmarks: Optional[BookmarkRepository] = None,
        state: Optional[BlockingState] = None,
        injector: Optional[PlaceholderInjector] = None,
        gate: Optional[InterceptionGate] = None,
    ) -> None:
        self.host = host
        self.settings = settings or SettingsRepository()
        self.bookmarks = bookmarks or BookmarkRepository()
        if state is None:
            state = BlockingState(self.settings.is_media_blocking_enabled())
        self.state = state
        self.policy = DocumentPolicy(self.state)
        self.injector = injector or PlaceholderInjector()
        self.gate = gate or InterceptionGate()

        self.page: Optional[Page] = None
        self.last_injection: Optional[InjectionReport] = None
        self._pending_load: Optional[asyncio.Future] = None

    async def __aenter__(self) -> "BrowserSession":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    @property
    def media_blocking_enabled(self) -> bool:
        return self.state.get()

    @property
    def blocked_requests(self) -> List[str]:
        """URLs answered with a synthetic response during the current document load."""
        return self.policy.blocked_urls

    @property
    def current_url(self) -> Optional[str]:
        return self.page.url if self.page is not None else None

    async def _ensure_page(self) -> Page:
        if self.page is None:
            page = await self.host.new_page()
            await install_async_media_interception(page, self.policy, self.gate)
            page.on("load", self._on_load)
            self.page = page
        return self.page

    def _require_page(self) -> Page:
        if self.page is None:
            raise RuntimeError("Session has no page; call open() first")
        return self.page

    def _on_load(self, page: Page) -> None:
        # Covers loads the session did not start itself (links, scripts).
        self._pending_load = asyncio.ensure_future(self._after_load(page))

    async def _after_load(self, page: Page) -> Optional[InjectionReport]:
        if not self.policy.blocking_enabled:
            self.last_injection = None
            return None
        report = await self.injector.inject(page)
        self.last_injection = report
        return report

    async def _navigate(self, action: Callable[[], Awaitable[Optional[Response]]]) -> Optional[Response]:
        self._pending_load = None
        response = await action()
        pending = self._pending_load
        if pending is not None:
            # The load hook already picked this document up.
            await pending
        else:
            await self._after_load(self._require_page())
        return response

    async def open(self, url: Optional[str] = None) -> Optional[Response]:
        """Open ``url``, or the saved homepage when none is given."""
        page = await self._ensure_page()
        target = normalize_url(url or self.settings.load_homepage())
        logger.info("Opening %s (media blocking=%s)", target, self.state.get())
        return await self._navigate(lambda: page.goto(target))

    async def navigate(self, text: str) -> Optional[Response]:
        page = self._require_page()
        target = normalize_url(text)
        return await self._navigate(lambda: page.goto(target))

    async def reload(self) -> Optional[Response]:
        page = self._require_page()
        return await self._navigate(page.reload)

    async def go_back(self) -> Optional[Response]:
        page = self._require_page()
        return await self._navigate(page.go_back)

    async def go_forward(self) -> Optional[Response]:
        page = self._require_page()
        return await self._navigate(page.go_forward)

    async def can_go_back(self) -> bool:
        return bool(await self._require_page().evaluate(CAN_GO_BACK_SCRIPT))

    async def can_go_forward(self) -> bool:
        return bool(await self._require_page().evaluate(CAN_GO_FORWARD_SCRIPT))

    async def go_home(self) -> Optional[Response]:
        return await self.navigate(self.settings.load_homepage())

    def set_current_as_homepage(self) -> str:
        url = self._require_page().url
        self.settings.save_homepage(url)
        logger.info("Homepage set to %s", url)
        return url

    async def add_current_bookmark(self) -> bool:
        page = self._require_page()
        title = (await page.title()) or DEFAULT_TITLE
        added = self.bookmarks.add_bookmark(title, page.url)
        if added:
            logger.info("Bookmark added: %s", page.url)
        return added

    async def open_bookmark(self, url: str) -> Optional[Response]:
        await self._ensure_page()
        return await self.navigate(url)

    async def toggle_media_blocking(self) -> bool:
        """
        Flip the blocking flag and reload, so the whole next document is
        evaluated under the new value.
        """
        enabled = self.state.toggle()
        try:
            self.settings.save_media_blocking(enabled)
        except SQLAlchemyError as exc:
            logger.warning("Media blocking preference not persisted: %s", exc)
        logger.info("Media blocking %s", "enabled" if enabled else "disabled")
        if self.page is not None and self.page.url not in ("", "about:blank"):
            await self.reload()
        return enabled

    async def close(self) -> None:
        if self.page is None:
            return
        page = self.page
        self.page = None
        pending = self._pending_load
        if pending is not None and not pending.done():
            pending.cancel()
        if not page.is_closed():
            await self.injector.detach(page)
            await page.close()


__all__ = ["BrowserSession"]
