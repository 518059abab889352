"""CLI for browser preferences (homepage, media blocking)."""
from __future__ import annotations

import argparse
from typing import Iterable

from lightbrowser.db.engine import init_db
from lightbrowser.repositories.settings_repository import SettingsRepository
from lightbrowser.utils.url_tools import normalize_url


def run(args: argparse.Namespace, repo: SettingsRepository | None = None) -> int:
    repo = repo or SettingsRepository()
    if args.command == "homepage":
        if args.url:
            repo.save_homepage(normalize_url(args.url))
            print("🏠 Homepage set!")
        print(repo.load_homepage())
        return 0

    if args.command == "media-blocking":
        if args.state:
            repo.save_media_blocking(args.state == "on")
        print("on" if repo.is_media_blocking_enabled() else "off")
        return 0

    build_arg_parser().print_help()
    return 2


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Browser preferences")
    sub = parser.add_subparsers(dest="command")
    homepage = sub.add_parser("homepage", help="Show or set the homepage")
    homepage.add_argument("url", nargs="?", default=None)
    blocking = sub.add_parser("media-blocking", help="Show or set the media blocking default")
    blocking.add_argument("state", nargs="?", choices=["on", "off"], default=None)
    return parser


def main(argv: Iterable[str] | None = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    init_db()
    return run(args)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
