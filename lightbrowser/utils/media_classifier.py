"""
Media request classification.

Decides whether a single resource fetch is image/video media that should be
suppressed. Pure functions only: no network access, no state.
"""
from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import FrozenSet, Iterable, Optional
from urllib.parse import urlsplit


MEDIA_EXTENSIONS: FrozenSet[str] = frozenset(
    {".jpg", ".jpeg", ".png", ".gif", ".webp", ".svg", ".mp4", ".webm", ".ogg"}
)
DOCUMENT_ACCEPT_TYPES = ("text/html", "application/xhtml+xml")
MEDIA_ACCEPT_PREFIXES = ("image/", "video/")


class ClassificationDecision(enum.Enum):
    ALLOW = "allow"
    BLOCK = "block"


@dataclass(frozen=True)
class ResourceRequest:
    url: str
    accept_header: Optional[str] = None

    @property
    def normalized_accept(self) -> str:
        return (self.accept_header or "").strip().lower()

    @property
    def is_main_document_navigation(self) -> bool:
        """True when the request asks for document/markup content."""
        accept = self.normalized_accept
        return any(doc_type in accept for doc_type in DOCUMENT_ACCEPT_TYPES)

    @classmethod
    def from_playwright(cls, request) -> "ResourceRequest":
        headers = request.headers or {}
        accept = headers.get("accept")
        if accept is None:
            # Playwright lower-cases header names, other hosts may not.
            accept = headers.get("Accept")
        return cls(url=request.url, accept_header=accept)


class RequestClassifier:
    """Header-then-extension heuristic, first matching rule wins."""

    def __init__(
        self,
        *,
        extensions: Optional[Iterable[str]] = None,
        fallback: ClassificationDecision = ClassificationDecision.ALLOW,
    ) -> None:
        self.extensions = frozenset(ext.lower() for ext in (extensions or MEDIA_EXTENSIONS))
        self.fallback = fallback

    def classify(self, request: ResourceRequest) -> ClassificationDecision:
        if request.is_main_document_navigation:
            return ClassificationDecision.ALLOW

        primary = _primary_media_range(request.normalized_accept)
        if primary.startswith(MEDIA_ACCEPT_PREFIXES):
            return ClassificationDecision.BLOCK

        if self.has_media_extension(request.url):
            return ClassificationDecision.BLOCK

        return self.fallback

    def has_media_extension(self, url: str) -> bool:
        try:
            path = urlsplit(url).path
        except ValueError:
            return False
        path = path.lower()
        return any(path.endswith(ext) for ext in self.extensions)


def _primary_media_range(accept: str) -> str:
    if not accept:
        return ""
    first = accept.split(",", 1)[0]
    return first.split(";", 1)[0].strip()


default_classifier = RequestClassifier()


def classify(request: ResourceRequest) -> ClassificationDecision:
    return default_classifier.classify(request)


__all__ = [
    "ClassificationDecision",
    "DOCUMENT_ACCEPT_TYPES",
    "MEDIA_EXTENSIONS",
    "RequestClassifier",
    "ResourceRequest",
    "classify",
    "default_classifier",
]
