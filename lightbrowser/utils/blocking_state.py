"""
Session-scoped media blocking flag and its per-document snapshot.
"""
from __future__ import annotations

import threading
from typing import List


class BlockingState:
    """Single shared boolean. Reads and writes are guarded, nothing else is."""

    def __init__(self, enabled: bool = True) -> None:
        self._enabled = bool(enabled)
        self._lock = threading.Lock()

    def get(self) -> bool:
        with self._lock:
            return self._enabled

    def set(self, enabled: bool) -> None:
        with self._lock:
            self._enabled = bool(enabled)

    def toggle(self) -> bool:
        with self._lock:
            self._enabled = not self._enabled
            return self._enabled

    def __repr__(self) -> str:
        return f"<BlockingState(enabled={self.get()})>"


class DocumentPolicy:
    """
    Freezes the BlockingState value for one document load.

    The interception handler calls ``begin_document`` when the main-frame
    navigation request arrives; every sub-resource of that document then reads
    the captured value, so a toggle in the middle of a load cannot split the
    document across two policies.
    """

    def __init__(self, state: BlockingState) -> None:
        self.state = state
        self._lock = threading.Lock()
        self._snapshot = state.get()
        self._blocked_urls: List[str] = []
        self._generation = 0

    def begin_document(self) -> bool:
        value = self.state.get()
        with self._lock:
            self._snapshot = value
            self._blocked_urls = []
            self._generation += 1
        return value

    @property
    def blocking_enabled(self) -> bool:
        with self._lock:
            return self._snapshot

    @property
    def generation(self) -> int:
        with self._lock:
            return self._generation

    def record_blocked(self, url: str) -> None:
        with self._lock:
            self._blocked_urls.append(url)

    @property
    def blocked_urls(self) -> List[str]:
        with self._lock:
            return list(self._blocked_urls)


__all__ = ["BlockingState", "DocumentPolicy"]
