"""
Crawl Orchestrator

Per-site pipeline:

    RESOLVING -> STATIC_PROBE -> DONE
                              -> DYNAMIC_MAIN -> DYNAMIC_LINKS -> DONE
    (any stage) -> ERROR

The static probe is a cheap GET; only when it yields no email does the
orchestrator pay for a headless browser, visit the main page, and then the
same-origin contact/about links found there. The job's `active` flag is
checked between stages and before each sub-link; once it reads False the
site yields no result at all.
"""
from typing import List, Optional, Sequence

from fastapi.concurrency import run_in_threadpool

from app.features.contact_finder.errors import FetchError, NavigationError, ResolutionError
from app.features.contact_finder.schemas.crawl import (
    CrawlMethod,
    CrawlResult,
    CrawlStats,
    SiteTask,
)
from app.features.contact_finder.services.email_extractor import merge_emails
from app.features.contact_finder.services.job_registry import JobRegistry
from app.features.contact_finder.services.link_classifier import DEFAULT_KEYWORDS, classify_links
from app.features.contact_finder.services.renderer import Renderer, RenderSession
from app.features.contact_finder.services.site_resolver import resolve_site
from app.features.contact_finder.services.static_fetcher import StaticFetcher
from app.platform.logger import get_logger

logger = get_logger(__name__)


class CrawlOrchestrator:
    def __init__(
        self,
        registry: JobRegistry,
        fetcher: StaticFetcher,
        renderer: Renderer,
        keywords: Sequence[str] = DEFAULT_KEYWORDS,
    ):
        self.registry = registry
        self.fetcher = fetcher
        self.renderer = renderer
        self.keywords = tuple(keywords)

    async def crawl_site(self, job_id: str, raw: str) -> Optional[CrawlResult]:
        """
        Crawl one site for job `job_id`.

        Returns the site's CrawlResult (possibly carrying an error), or None
        when the job was cancelled before the site finished.
        """
        try:
            task = resolve_site(raw)
        except ResolutionError as e:
            logger.error(f"[{job_id}] {e}")
            return CrawlResult.failed(site=raw, error=str(e))

        static_emails = await self._static_probe(job_id, task)
        if static_emails:
            logger.info(f"[{job_id}] {task.url}: {len(static_emails)} email(s) from static probe, skipping renderer")
            return CrawlResult(
                site=task.url,
                emails=static_emails,
                stats=CrawlStats(
                    main_page_emails=len(static_emails),
                    total_emails=len(static_emails),
                    method=CrawlMethod.STATIC,
                ),
            )

        if not self.registry.is_active(job_id):
            return None
        return await self._crawl_dynamic(job_id, task)

    async def _static_probe(self, job_id: str, task: SiteTask) -> List[str]:
        try:
            return await self.fetcher.probe(task.url)
        except FetchError as e:
            logger.warning(f"[{job_id}] {e}; escalating to renderer")
        except Exception:
            logger.exception(f"[{job_id}] Static probe of {task.url} crashed; escalating to renderer")
        return []

    async def _crawl_dynamic(self, job_id: str, task: SiteTask) -> Optional[CrawlResult]:
        launched: List[RenderSession] = []

        def bind_session(session: RenderSession) -> None:
            launched.append(session)
            self.registry.attach_resource(job_id, session)

        try:
            session = await run_in_threadpool(self.renderer.open, task.url, bind_session)
            if not self.registry.is_active(job_id):
                return None

            main_emails = await run_in_threadpool(self.renderer.extract_emails, session)
            all_links = await run_in_threadpool(self.renderer.extract_links, session)

            if not self.registry.is_active(job_id):
                return None

            contact_links = classify_links(all_links, task.url, self.keywords)
            logger.info(
                f"[{job_id}] {task.url}: {len(main_emails)} email(s) on main page, "
                f"{len(contact_links)}/{len(all_links)} contact-like link(s)"
            )

            contact_emails: List[str] = []
            failed_links = 0
            for link in contact_links:
                if not self.registry.is_active(job_id):
                    return None
                try:
                    await run_in_threadpool(self.renderer.navigate, session, link)
                    emails = await run_in_threadpool(self.renderer.extract_emails, session)
                except NavigationError as e:
                    if not self.registry.is_active(job_id):
                        return None
                    failed_links += 1
                    logger.warning(f"[{job_id}] Skipping {link}: {e}")
                    continue
                contact_emails.extend(emails)

            all_emails = merge_emails(main_emails, contact_emails)
            return CrawlResult(
                site=task.url,
                links=contact_links,
                emails=all_emails,
                stats=CrawlStats(
                    total_links=len(all_links),
                    contact_links=len(contact_links),
                    main_page_emails=len(main_emails),
                    contact_page_emails=len(contact_emails),
                    total_emails=len(all_emails),
                    failed_links=failed_links,
                    method=CrawlMethod.DYNAMIC,
                ),
            )

        except Exception as e:
            if not self.registry.is_active(job_id):
                logger.info(f"[{job_id}] {task.url}: stopped by cancellation")
                return None
            if isinstance(e, NavigationError):
                logger.error(f"[{job_id}] {e}")
            else:
                logger.exception(f"[{job_id}] Rendering {task.url} failed")
            return CrawlResult.failed(site=task.url, error=str(e))

        finally:
            for session in launched:
                self.registry.detach_resource(job_id, session)
                # driver.quit() blocks, keep it off the event loop
                await run_in_threadpool(self.renderer.close, session)
