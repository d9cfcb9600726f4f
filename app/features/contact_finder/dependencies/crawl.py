from fastapi import Depends, Request

from app.features.contact_finder.services.job_registry import JobRegistry
from app.features.contact_finder.services.orchestrator import CrawlOrchestrator
from app.features.contact_finder.services.renderer import SeleniumRenderer
from app.features.contact_finder.services.static_fetcher import StaticFetcher
from app.features.contact_finder.services.streaming import StreamingReporter
from app.platform.config import settings


def get_job_registry(request: Request) -> JobRegistry:
    """
    The registry lives on app.state, created once per application in
    create_app(), so tests can build isolated apps with their own registry.
    """
    return request.app.state.job_registry


def get_crawl_orchestrator(
    registry: JobRegistry = Depends(get_job_registry),
) -> CrawlOrchestrator:
    denylist = settings.email_denylist
    fetcher = StaticFetcher(
        timeout=settings.STATIC_FETCH_TIMEOUT,
        user_agent=settings.USER_AGENT,
        denylist=denylist,
    )
    renderer = SeleniumRenderer(
        navigation_timeout=settings.NAVIGATION_TIMEOUT,
        settle_delay=settings.SETTLE_DELAY,
        chromedriver_path=settings.CHROMEDRIVER_PATH,
        headless=settings.HEADLESS,
        user_agent=settings.USER_AGENT,
        denylist=denylist,
    )
    return CrawlOrchestrator(registry, fetcher, renderer, keywords=settings.search_keywords)


def get_streaming_reporter(
    registry: JobRegistry = Depends(get_job_registry),
    orchestrator: CrawlOrchestrator = Depends(get_crawl_orchestrator),
) -> StreamingReporter:
    return StreamingReporter(orchestrator, registry, inter_site_delay=settings.INTER_SITE_DELAY)
