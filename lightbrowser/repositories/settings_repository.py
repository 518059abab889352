"""
Browser preferences (homepage, media blocking) stored as key/value rows.

Reads never fail: a missing row, a malformed value or a database error all
fall back to the documented defaults.
"""
from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

from lightbrowser.db.engine import SessionLocal
from lightbrowser.models.setting import Setting

logger = logging.getLogger(__name__)

KEY_HOMEPAGE = "homepage_url"
KEY_MEDIA_BLOCKING = "media_blocking_enabled"
DEFAULT_HOMEPAGE = "https://lite.duckduckgo.com"
DEFAULT_MEDIA_BLOCKING = True

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


class SettingsRepository:
    def __init__(self, session_factory=None):
        self.session_factory = session_factory or SessionLocal

    def _get(self, key: str) -> Optional[str]:
        try:
            with self.session_factory() as session:
                setting = session.get(Setting, key)
                return setting.value if setting else None
        except SQLAlchemyError as exc:
            logger.warning("Could not read setting %s, using default: %s", key, exc)
            return None

    def _set(self, key: str, value: str) -> None:
        with self.session_factory() as session:
            try:
                setting = session.get(Setting, key)
                if setting is None:
                    session.add(Setting(key=key, value=value))
                else:
                    setting.value = value
                session.commit()
            except SQLAlchemyError:
                session.rollback()
                raise

    def load_homepage(self) -> str:
        return self._get(KEY_HOMEPAGE) or DEFAULT_HOMEPAGE

    def save_homepage(self, url: str) -> None:
        self._set(KEY_HOMEPAGE, url)

    def is_media_blocking_enabled(self) -> bool:
        raw = self._get(KEY_MEDIA_BLOCKING)
        if raw is None:
            return DEFAULT_MEDIA_BLOCKING
        value = raw.strip().lower()
        if value in _TRUE_VALUES:
            return True
        if value in _FALSE_VALUES:
            return False
        logger.warning("Ignoring malformed %s value %r", KEY_MEDIA_BLOCKING, raw)
        return DEFAULT_MEDIA_BLOCKING

    def save_media_blocking(self, enabled: bool) -> None:
        self._set(KEY_MEDIA_BLOCKING, "true" if enabled else "false")
