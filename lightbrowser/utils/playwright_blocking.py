"""
Media interception helpers for Playwright (sync + async).

Blocked media is answered with a successful zero-byte response instead of an
aborted request, so pages do not run their own error/retry handling.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from playwright.async_api import Error as PlaywrightError

from lightbrowser.utils.blocking_state import DocumentPolicy
from lightbrowser.utils.media_classifier import (
    ClassificationDecision,
    ResourceRequest,
    classify,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SyntheticResponse:
    status: int = 200
    content_type: str = "application/octet-stream"
    charset: str = "UTF-8"
    body: bytes = b""

    @property
    def content_type_header(self) -> str:
        return f"{self.content_type}; charset={self.charset}"

    def fulfill_kwargs(self) -> Dict[str, Any]:
        return {
            "status": self.status,
            "content_type": self.content_type_header,
            "body": self.body,
        }


SYNTHETIC_EMPTY_RESPONSE = SyntheticResponse()


class InterceptionGate:
    def __init__(
        self,
        classifier: Callable[[ResourceRequest], ClassificationDecision] = classify,
        response: SyntheticResponse = SYNTHETIC_EMPTY_RESPONSE,
    ) -> None:
        self.classifier = classifier
        self.response = response

    def before_fetch(self, request: ResourceRequest, blocking_enabled: bool) -> Optional[SyntheticResponse]:
        """Return the response override for ``request``, or None to let it proceed."""
        if not blocking_enabled:
            return None
        if self.classifier(request) is ClassificationDecision.BLOCK:
            return self.response
        return None


def _is_main_frame_navigation(request) -> bool:
    if not request.is_navigation_request():
        return False
    try:
        return request.frame.parent_frame is None
    except PlaywrightError:
        # Service worker requests have no frame.
        return False


def _decide(route, policy: DocumentPolicy, gate: InterceptionGate) -> Optional[SyntheticResponse]:
    request = route.request
    if _is_main_frame_navigation(request):
        enabled = policy.begin_document()
        logger.debug("Document load %s starts with media blocking=%s", request.url, enabled)
    override = gate.before_fetch(ResourceRequest.from_playwright(request), policy.blocking_enabled)
    if override is not None:
        policy.record_blocked(request.url)
        logger.debug("Blocked media request %s (document load #%d)", request.url, policy.generation)
    return override


async def install_async_media_interception(
    target,
    policy: DocumentPolicy,
    gate: Optional[InterceptionGate] = None,
) -> None:
    gate = gate or InterceptionGate()

    async def handler(route):
        override = _decide(route, policy, gate)
        if override is not None:
            await route.fulfill(**override.fulfill_kwargs())
        else:
            await route.continue_()

    await target.route("**/*", handler)


def install_sync_media_interception(
    target,
    policy: DocumentPolicy,
    gate: Optional[InterceptionGate] = None,
) -> None:
    gate = gate or InterceptionGate()

    def handler(route):
        override = _decide(route, policy, gate)
        if override is not None:
            route.fulfill(**override.fulfill_kwargs())
        else:
            route.continue_()

    target.route("**/*", handler)


__all__ = [
    "InterceptionGate",
    "SYNTHETIC_EMPTY_RESPONSE",
    "SyntheticResponse",
    "install_async_media_interception",
    "install_sync_media_interception",
]
