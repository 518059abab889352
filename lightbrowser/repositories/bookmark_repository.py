from __future__ import annotations

import logging
from typing import List

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError

from lightbrowser.db.engine import SessionLocal
from lightbrowser.models.bookmark import Bookmark

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "No Title"


class BookmarkRepository:
    def __init__(self, session_factory=None):
        self.session_factory = session_factory or SessionLocal

    def get_bookmarks(self) -> List[Bookmark]:
        """All bookmarks, newest first. Empty on read failure."""
        stmt = select(Bookmark).order_by(Bookmark.created_at.desc(), Bookmark.id.desc())
        try:
            with self.session_factory() as session:
                return list(session.execute(stmt).scalars().all())
        except SQLAlchemyError as exc:
            logger.warning("Could not read bookmarks: %s", exc)
            return []

    def add_bookmark(self, title: str, url: str) -> bool:
        """
        Add a bookmark unless one with the same url exists.
        Returns True when a row was inserted.
        """
        with self.session_factory() as session:
            try:
                existing = session.execute(
                    select(Bookmark.id).where(Bookmark.url == url)
                ).scalar_one_or_none()
                if existing is not None:
                    return False
                session.add(Bookmark(title=title or DEFAULT_TITLE, url=url))
                session.commit()
                return True
            except SQLAlchemyError:
                session.rollback()
                raise

    def delete_bookmark(self, url: str) -> int:
        with self.session_factory() as session:
            try:
                result = session.execute(delete(Bookmark).where(Bookmark.url == url))
                session.commit()
                return result.rowcount or 0
            except SQLAlchemyError:
                session.rollback()
                raise
