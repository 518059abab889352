"""CLI for the bookmark list."""
from __future__ import annotations

import argparse
from typing import Iterable

from lightbrowser.db.engine import init_db
from lightbrowser.repositories.bookmark_repository import BookmarkRepository


def run(args: argparse.Namespace, repo: BookmarkRepository | None = None) -> int:
    repo = repo or BookmarkRepository()
    if args.command == "add":
        if repo.add_bookmark(args.title, args.url):
            print(f"⭐ Bookmark added: {args.url}")
        else:
            print(f"Already bookmarked: {args.url}")
        return 0
    if args.command == "delete":
        removed = repo.delete_bookmark(args.url)
        print(f"🗑️  Removed {removed} bookmark(s)")
        return 0 if removed else 1

    bookmarks = repo.get_bookmarks()
    if not bookmarks:
        print("No bookmarks yet.")
    for bookmark in bookmarks:
        print(f"{bookmark.title}\n    {bookmark.url}")
    return 0


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Manage browser bookmarks")
    sub = parser.add_subparsers(dest="command")
    sub.add_parser("list", help="List bookmarks, newest first")
    add = sub.add_parser("add", help="Add a bookmark")
    add.add_argument("title")
    add.add_argument("url")
    delete = sub.add_parser("delete", help="Delete the bookmark with this URL")
    delete.add_argument("url")
    return parser


def main(argv: Iterable[str] | None = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    init_db()
    return run(args)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
