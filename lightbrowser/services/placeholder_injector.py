"""
Placeholder substitution for blocked media elements.

The page-side work happens in PLACEHOLDER_SCRIPT: an initial sweep over
``img, video`` plus a MutationObserver on document.body that converts media
inserted later. Each element is converted at most once; the
``data-lb-processed`` marker is the guard, so the script can be evaluated
repeatedly against the same document.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from playwright.async_api import Error as PlaywrightError, Page

logger = logging.getLogger(__name__)

PROCESSED_ATTR = "data-lb-processed"
ID_ATTR = "data-lb-id"
SOURCE_ATTR = "data-lb-src"

PLACEHOLDER_SCRIPT = """
() => {
    const SELECTOR = 'img, video';
    const registry = window.__lightbrowserPlaceholders || (window.__lightbrowserPlaceholders = {
        nextId: 0,
        observer: null,
    });

    function processElement(el) {
        if (el.getAttribute('data-lb-processed') || !el.getAttribute('src')) {
            return false;
        }
        el.setAttribute('data-lb-src', el.getAttribute('src'));
        el.setAttribute('data-lb-id', 'media-' + (registry.nextId++));

        const width = el.clientWidth;
        const height = el.clientHeight;
        if (width > 0 && height > 0) {
            el.style.width = width + 'px';
            el.style.height = height + 'px';
        }

        el.style.backgroundColor = '#f0f0f0';
        el.style.border = '1px solid #ccc';
        el.style.minWidth = '50px';
        el.style.minHeight = '50px';

        el.setAttribute('data-lb-processed', 'true');
        return true;
    }

    function processTree(node) {
        if (node.nodeType !== 1) {
            return;
        }
        if (node.matches(SELECTOR)) {
            processElement(node);
        }
        node.querySelectorAll(SELECTOR).forEach(processElement);
    }

    let processed = 0;
    document.querySelectorAll(SELECTOR).forEach((el) => {
        if (processElement(el)) {
            processed++;
        }
    });

    const canObserve = typeof MutationObserver !== 'undefined' && !!document.body;
    if (!registry.observer && canObserve) {
        const observer = new MutationObserver((mutations) => {
            mutations.forEach((mutation) => {
                if (mutation.type === 'attributes') {
                    if (mutation.target.nodeType === 1 && mutation.target.matches(SELECTOR)) {
                        processElement(mutation.target);
                    }
                    return;
                }
                mutation.addedNodes.forEach(processTree);
            });
        });
        observer.observe(document.body, {
            childList: true,
            subtree: true,
            attributes: true,
            attributeFilter: ['src'],
        });
        registry.observer = observer;
        window.addEventListener('pagehide', () => {
            if (registry.observer) {
                registry.observer.disconnect();
                registry.observer = null;
            }
        }, { once: true });
    }

    return {
        processed: processed,
        total: document.querySelectorAll('[data-lb-processed]').length,
        observing: registry.observer !== null,
    };
}
"""

DETACH_SCRIPT = """
() => {
    const registry = window.__lightbrowserPlaceholders;
    if (!registry || !registry.observer) {
        return false;
    }
    registry.observer.disconnect();
    registry.observer = null;
    return true;
}
"""

COLLECT_SCRIPT = """
() => Array.from(document.querySelectorAll('[data-lb-processed]')).map((el) => ({
    id: el.getAttribute('data-lb-id'),
    src: el.getAttribute('data-lb-src'),
    tag: el.tagName.toLowerCase(),
    width: parseFloat(el.style.width) || null,
    height: parseFloat(el.style.height) || null,
}))
"""


@dataclass(frozen=True)
class PlaceholderRecord:
    placeholder_id: str
    original_src: str
    tag: str
    width: Optional[float] = None
    height: Optional[float] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PlaceholderRecord":
        return cls(
            placeholder_id=data.get("id") or "",
            original_src=data.get("src") or "",
            tag=data.get("tag") or "",
            width=data.get("width"),
            height=data.get("height"),
        )


@dataclass(frozen=True)
class InjectionReport:
    processed: int = 0
    total_placeholders: int = 0
    observing: bool = False
    error: Optional[str] = None

    @property
    def degraded(self) -> bool:
        return not self.observing


class PlaceholderInjector:
    async def inject(self, page: Page) -> InjectionReport:
        """Run the sweep and install the mutation watcher on ``page``."""
        try:
            result = await page.evaluate(PLACEHOLDER_SCRIPT)
        except PlaywrightError as exc:
            logger.warning("Placeholder injection skipped on %s: %s", _page_url(page), exc)
            return InjectionReport(error=str(exc))

        result = result or {}
        report = InjectionReport(
            processed=int(result.get("processed", 0)),
            total_placeholders=int(result.get("total", 0)),
            observing=bool(result.get("observing", False)),
        )
        if report.degraded:
            logger.info(
                "Mutation observation unavailable on %s; placeholders cover load-time media only",
                _page_url(page),
            )
        logger.debug("Placeholder sweep on %s converted %d element(s)", _page_url(page), report.processed)
        return report

    async def detach(self, page: Page) -> bool:
        if page.is_closed():
            return False
        try:
            return bool(await page.evaluate(DETACH_SCRIPT))
        except PlaywrightError as exc:
            logger.debug("Watcher detach failed on %s: %s", _page_url(page), exc)
            return False

    async def collect(self, page: Page) -> List[PlaceholderRecord]:
        rows = await page.evaluate(COLLECT_SCRIPT)
        return [PlaceholderRecord.from_dict(row) for row in rows or []]


def _page_url(page) -> str:
    return getattr(page, "url", "<unknown>")


__all__ = [
    "COLLECT_SCRIPT",
    "DETACH_SCRIPT",
    "ID_ATTR",
    "InjectionReport",
    "PLACEHOLDER_SCRIPT",
    "PROCESSED_ATTR",
    "PlaceholderInjector",
    "PlaceholderRecord",
    "SOURCE_ATTR",
]
