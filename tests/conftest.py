"""
Test configuration and fixtures for the Contact Finder API.

Every test gets a freshly built application (and therefore its own job
registry). The headless browser and the static HTTP probe are replaced by
in-memory fakes so no test touches the network or launches Chrome.
"""

import asyncio
import os
import time
from typing import Callable, Dict, Generator, Iterable, List, Optional

os.environ.setdefault("INTER_SITE_DELAY", "0")
os.environ.setdefault("SETTLE_DELAY", "0")

import pytest
from fastapi.testclient import TestClient

from app.features.contact_finder.errors import NavigationError
from app.features.contact_finder.services.job_registry import JobRegistry
from app.features.contact_finder.services.orchestrator import CrawlOrchestrator
from app.features.contact_finder.services.renderer import Renderer, RenderSession


class FakeFetcher:
    """Static probe double: url -> list of emails, or an exception to raise."""

    def __init__(self, responses: Optional[Dict[str, object]] = None, on_probe: Optional[Callable[[str], None]] = None):
        self.responses = responses or {}
        self.on_probe = on_probe
        self.calls: List[str] = []

    async def probe(self, url: str) -> List[str]:
        self.calls.append(url)
        if self.on_probe is not None:
            self.on_probe(url)
        response = self.responses.get(url, [])
        if isinstance(response, Exception):
            raise response
        return list(response)


class FakeRenderer(Renderer):
    """
    Renderer double backed by a dict of pages:
        url -> {"emails": [...], "links": [...]}
    URLs in `failing` raise NavigationError like a navigation timeout.
    """

    def __init__(
        self,
        pages: Optional[Dict[str, dict]] = None,
        failing: Iterable[str] = (),
        on_navigate: Optional[Callable[[str], None]] = None,
        launch_error: Optional[Exception] = None,
    ):
        self.pages = pages or {}
        self.failing = set(failing)
        self.on_navigate = on_navigate
        self.launch_error = launch_error
        self.sessions: List[RenderSession] = []
        self.visited: List[str] = []

    def open(self, url, on_launch=None):
        if self.launch_error is not None:
            raise self.launch_error
        session = RenderSession()
        self.sessions.append(session)
        try:
            if on_launch is not None:
                on_launch(session)
            self.navigate(session, url)
        except BaseException:
            session.close()
            raise
        return session

    def navigate(self, session, url):
        if session.closed:
            raise NavigationError(url, "session closed")
        self.visited.append(url)
        if self.on_navigate is not None:
            self.on_navigate(url)
        if session.closed:
            raise NavigationError(url, "session closed")
        if url in self.failing:
            raise NavigationError(url, "timed out after 60s")
        session.current_url = url

    def extract_emails(self, session):
        return list(self.pages.get(session.current_url, {}).get("emails", []))

    def extract_links(self, session):
        return list(self.pages.get(session.current_url, {}).get("links", []))


@pytest.fixture
def registry() -> JobRegistry:
    return JobRegistry()


@pytest.fixture
def make_orchestrator(registry):
    """Build an orchestrator around fakes sharing the `registry` fixture."""

    def _make(fetcher: Optional[FakeFetcher] = None, renderer: Optional[FakeRenderer] = None, keywords=("contact", "about")):
        return CrawlOrchestrator(
            registry,
            fetcher or FakeFetcher(),
            renderer or FakeRenderer(),
            keywords=keywords,
        )

    return _make


@pytest.fixture
def fake_fetcher_cls():
    return FakeFetcher


@pytest.fixture
def fake_renderer_cls():
    return FakeRenderer


@pytest.fixture
def loop_stall():
    """
    Await a coroutine while a 20ms ticker runs beside it.
    Returns (result, longest gap between ticks) in seconds.
    """

    async def _run(coro, interval: float = 0.02):
        gaps: List[float] = []
        done = asyncio.Event()

        async def ticker():
            last = time.perf_counter()
            while not done.is_set():
                await asyncio.sleep(interval)
                now = time.perf_counter()
                gaps.append(now - last)
                last = now

        task = asyncio.create_task(ticker())
        await asyncio.sleep(0)
        try:
            result = await coro
        finally:
            done.set()
            await task
        return result, max(gaps, default=0.0)

    return _run


@pytest.fixture(scope="function")
def test_app():
    """Create a fresh FastAPI application with its own job registry."""
    from app.main import create_app

    return create_app()


@pytest.fixture(scope="function")
def client(test_app) -> Generator[TestClient, None, None]:
    """
    Create a test client for making HTTP requests.
    This fixture provides a clean TestClient instance for each test function,
    ensuring proper isolation between tests.
    """
    with TestClient(test_app) as test_client:
        yield test_client
