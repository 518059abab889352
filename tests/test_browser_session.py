import asyncio

import pytest

from lightbrowser.db.engine import create_engine_for_url, create_session_factory, init_db
from lightbrowser.repositories.bookmark_repository import BookmarkRepository
from lightbrowser.repositories.settings_repository import SettingsRepository
from lightbrowser.services.browser_session import BrowserSession
from lightbrowser.utils.blocking_state import BlockingState
from playwright_fakes import IMAGE_ACCEPT, FakeHost, FakePage, FakeRequest, RecordingInjector

HOME = "https://lite.duckduckgo.com"
PAGE = "https://example.com/gallery"


def _resources():
    return {
        PAGE: [
            FakeRequest("https://example.com/a.png", IMAGE_ACCEPT),
            FakeRequest("https://example.com/b.mp4", "*/*"),
            FakeRequest("https://example.com/app.js", "*/*"),
        ]
    }


@pytest.fixture()
def repos(tmp_path):
    engine = create_engine_for_url(f"sqlite:///{tmp_path / 'session.db'}")
    init_db(engine)
    factory = create_session_factory(engine)
    yield SettingsRepository(factory), BookmarkRepository(factory)
    engine.dispose()


def _session(repos, page, **kwargs):
    settings, bookmarks = repos
    return BrowserSession(
        FakeHost(page),
        settings=settings,
        bookmarks=bookmarks,
        injector=kwargs.pop("injector", RecordingInjector()),
        **kwargs,
    )


def test_state_is_seeded_from_preferences(repos):
    settings, _ = repos
    settings.save_media_blocking(False)
    session = _session(repos, FakePage())
    assert session.media_blocking_enabled is False


def test_open_defaults_to_homepage(repos):
    page = FakePage()
    session = _session(repos, page)
    asyncio.run(session.open())
    assert page.url == HOME
    assert page.route_handler is not None
    assert "load" in page.listeners


def test_navigate_prefixes_scheme(repos):
    page = FakePage()
    session = _session(repos, page)

    async def scenario():
        await session.open(PAGE)
        await session.navigate("example.org/path")

    asyncio.run(scenario())
    assert page.url == "https://example.org/path"


def test_blocking_enabled_fulfills_media_and_injects(repos):
    page = FakePage(_resources())
    injector = RecordingInjector()
    session = _session(repos, page, injector=injector)
    asyncio.run(session.open(PAGE))

    assert [r.outcome for r in page.routes_for("https://example.com/a.png")] == ["fulfilled"]
    assert [r.outcome for r in page.routes_for("https://example.com/b.mp4")] == ["fulfilled"]
    assert [r.outcome for r in page.routes_for("https://example.com/app.js")] == ["continued"]
    assert session.blocked_requests == ["https://example.com/a.png", "https://example.com/b.mp4"]
    assert injector.injected == [PAGE]
    assert session.last_injection.observing is True


def test_toggle_persists_reloads_and_applies_to_whole_next_load(repos):
    settings, _ = repos
    page = FakePage(_resources())
    injector = RecordingInjector()
    session = _session(repos, page, injector=injector)

    async def scenario():
        await session.open(PAGE)
        return await session.toggle_media_blocking()

    enabled = asyncio.run(scenario())

    assert enabled is False
    assert settings.is_media_blocking_enabled() is False
    assert page.history == [PAGE, PAGE]
    # Reloaded document: nothing blocked, no placeholder pass.
    assert [r.outcome for r in page.routes_for("https://example.com/a.png")] == ["fulfilled", "continued"]
    assert [r.outcome for r in page.routes_for("https://example.com/b.mp4")] == ["fulfilled", "continued"]
    assert session.blocked_requests == []
    assert injector.injected == [PAGE]
    assert session.last_injection is None


def test_toggle_before_any_page_does_not_reload(repos):
    session = _session(repos, FakePage(), state=BlockingState(False))
    assert asyncio.run(session.toggle_media_blocking()) is True
    assert session.page is None


def test_homepage_and_bookmarks(repos):
    settings, bookmarks = repos
    page = FakePage(title="")
    session = _session(repos, page)

    async def scenario():
        await session.open(PAGE)
        session.set_current_as_homepage()
        first = await session.add_current_bookmark()
        second = await session.add_current_bookmark()
        await session.navigate("https://elsewhere.example")
        await session.go_home()
        return first, second

    first, second = asyncio.run(scenario())

    assert (first, second) == (True, False)
    assert settings.load_homepage() == PAGE
    assert [(b.title, b.url) for b in bookmarks.get_bookmarks()] == [("No Title", PAGE)]
    assert page.url == PAGE


def test_go_back_returns_to_previous_page(repos):
    page = FakePage()
    session = _session(repos, page)

    async def scenario():
        await session.open(PAGE)
        await session.navigate("https://example.org/")
        await session.go_back()

    asyncio.run(scenario())
    assert page.url == PAGE


def test_navigation_requires_open_page(repos):
    session = _session(repos, FakePage())
    with pytest.raises(RuntimeError):
        asyncio.run(session.reload())


def test_close_detaches_watcher(repos):
    page = FakePage()
    injector = RecordingInjector()
    session = _session(repos, page, injector=injector)

    async def scenario():
        async with session:
            await session.open(PAGE)

    asyncio.run(scenario())
    assert injector.detached == [PAGE]
    assert page.closed is True
    assert session.page is None


def test_disabled_state_passed_in_is_kept(repos):
    settings, _ = repos
    page = FakePage(_resources())
    injector = RecordingInjector()
    session = _session(repos, page, injector=injector, state=BlockingState(False))

    asyncio.run(session.open(PAGE))

    # Saved preference defaults to on; the given state still wins.
    assert settings.is_media_blocking_enabled() is True
    assert session.media_blocking_enabled is False
    assert [r.outcome for r in page.routes_for("https://example.com/a.png")] == ["continued"]
    assert session.blocked_requests == []
    assert injector.injected == []


def test_session_navigation_injects_once_per_load(repos):
    page = FakePage(_resources())
    injector = RecordingInjector(per_load=2)
    session = _session(repos, page, injector=injector)

    async def scenario():
        await session.open(PAGE)
        first = session.last_injection
        await session.navigate("https://example.org/")
        return first

    first = asyncio.run(scenario())

    assert injector.injected == [PAGE, "https://example.org/"]
    assert first.processed == 2
    assert session.last_injection.processed == 2


def test_navigation_without_load_event_still_injects(repos):
    page = FakePage(_resources(), emit_load=False)
    injector = RecordingInjector()
    session = _session(repos, page, injector=injector)

    asyncio.run(session.open(PAGE))

    assert injector.injected == [PAGE]
    assert session.last_injection.processed == 1


def test_load_hook_covers_loads_started_by_the_page(repos):
    page = FakePage(_resources())
    injector = RecordingInjector()
    session = _session(repos, page, injector=injector)

    async def scenario():
        await session.open(PAGE)
        # A link click: the page navigates on its own and fires load.
        page.history.append("https://example.com/next")
        page.url = "https://example.com/next"
        page.fire_load()
        await session._pending_load

    asyncio.run(scenario())

    assert injector.injected == [PAGE, "https://example.com/next"]
    assert session.last_injection.processed == 1
