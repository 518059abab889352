"""CLI: open a page with media blocking and report what was suppressed."""
from __future__ import annotations

import argparse
import asyncio
import logging
from typing import Iterable

from lightbrowser.db.engine import init_db
from lightbrowser.repositories.settings_repository import SettingsRepository
from lightbrowser.services.browser_session import BrowserSession
from lightbrowser.utils.blocking_state import BlockingState
from lightbrowser.utils.browser_policy import BrowserPolicy
from lightbrowser.utils.playwright_host import AsyncBrowserHost


async def browse(args: argparse.Namespace) -> int:
    init_db()
    settings = SettingsRepository()
    enabled = settings.is_media_blocking_enabled() if args.media_blocking is None else args.media_blocking
    policy = BrowserPolicy(headless=False if args.headed else None)

    async with AsyncBrowserHost(policy=policy) as host:
        async with BrowserSession(host, settings=settings, state=BlockingState(enabled)) as session:
            await session.open(args.url)
            if args.hold:
                await asyncio.sleep(args.hold)

            print(f"🌐 {session.current_url}")
            print(f"🛡️  Media blocking: {'on' if session.media_blocking_enabled else 'off'}")
            blocked = session.blocked_requests
            print(f"🚫 Blocked media requests: {len(blocked)}")
            for url in blocked:
                print(f"   - {url}")
            if session.media_blocking_enabled:
                placeholders = await session.injector.collect(session.page)
                print(f"🖼️  Placeholders: {len(placeholders)}")
                report = session.last_injection
                if report is not None and report.degraded:
                    print("   (mutation watcher unavailable, load-time media only)")

            if args.screenshot:
                await session.page.screenshot(path=args.screenshot, full_page=True)
                print(f"📸 Screenshot saved to {args.screenshot}")
    return 0


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Open a page with image/video requests suppressed")
    parser.add_argument("url", nargs="?", default=None, help="URL to open (defaults to the saved homepage)")
    parser.add_argument("--headed", action="store_true", help="Show the browser window")
    parser.add_argument(
        "--media-blocking",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Override the saved media blocking preference for this run",
    )
    parser.add_argument("--screenshot", type=str, default=None, help="Write a full-page screenshot to this path")
    parser.add_argument("--hold", type=float, default=0.0, help="Seconds to keep the page open before reporting")
    parser.add_argument("--verbose", action="store_true", help="Log every blocked request")
    return parser


def main(argv: Iterable[str] | None = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    return asyncio.run(browse(args))


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
