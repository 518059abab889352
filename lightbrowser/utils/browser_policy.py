"""
Shared browser policy: engine, headless mode, timeouts and UA selection.
"""
from __future__ import annotations

import os
import random
from typing import Any, Dict, Iterable, List, Optional

from dotenv import load_dotenv

load_dotenv()

SUPPORTED_BROWSERS = ("chromium", "firefox", "webkit")


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


class BrowserPolicy:
    """Centralized browser launch/context configuration."""

    def __init__(
        self,
        *,
        headless: Optional[bool] = None,
        browser_type: Optional[str] = None,
        timeout_ms: Optional[int] = None,
        user_agents: Optional[Iterable[str]] = None,
    ):
        self.headless = headless if headless is not None else _env_bool("LIGHTBROWSER_HEADLESS", True)
        self.browser_type = (browser_type or os.getenv("LIGHTBROWSER_BROWSER", "chromium")).strip().lower()
        if self.browser_type not in SUPPORTED_BROWSERS:
            raise ValueError(f"Unsupported browser type: {self.browser_type}")
        self.timeout_ms = int(timeout_ms or os.getenv("LIGHTBROWSER_TIMEOUT_MS", 30000))
        self.user_agents = self._load_user_agents(user_agents)

    def _load_user_agents(self, override: Optional[Iterable[str]]) -> List[str]:
        if override:
            pool = [ua.strip() for ua in override if ua.strip()]
            if pool:
                return pool
        env_value = os.getenv("LIGHTBROWSER_USER_AGENT")
        if env_value:
            parsed = [ua.strip() for ua in env_value.replace("|", ",").split(",") if ua.strip()]
            if parsed:
                return parsed
        # Empty pool keeps the engine's own user agent.
        return []

    def random_user_agent(self) -> Optional[str]:
        if not self.user_agents:
            return None
        return random.choice(self.user_agents)

    def build_context_kwargs(self, **overrides) -> Dict[str, Any]:
        kwargs: Dict[str, Any] = {}
        user_agent = self.random_user_agent()
        if user_agent:
            kwargs["user_agent"] = user_agent
        kwargs.update(overrides)
        return kwargs


__all__ = ["BrowserPolicy", "SUPPORTED_BROWSERS"]
