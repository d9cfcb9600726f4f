import asyncio
from typing import AsyncIterator, Sequence

from app.features.contact_finder.services.job_registry import JobRegistry
from app.features.contact_finder.services.orchestrator import CrawlOrchestrator
from app.platform.logger import get_logger

logger = get_logger(__name__)


class StreamingReporter:
    """
    Emits one newline-terminated JSON record per site as soon as it is done.

    Sites are processed in input order with a fixed pause between them. The
    iterator ends (and the HTTP response closes) when every site is done or
    the job is cancelled; the job is always removed from the registry.
    """

    def __init__(self, orchestrator: CrawlOrchestrator, registry: JobRegistry, inter_site_delay: float = 1.0):
        self.orchestrator = orchestrator
        self.registry = registry
        self.inter_site_delay = inter_site_delay

    async def stream(self, job_id: str, domains: Sequence[str]) -> AsyncIterator[str]:
        emitted = 0
        try:
            for index, domain in enumerate(domains):
                if not self.registry.is_active(job_id):
                    break

                result = await self.orchestrator.crawl_site(job_id, domain)
                # A result finishing after a cancel is dropped, like one cut short.
                if result is None or not self.registry.is_active(job_id):
                    break

                yield result.to_line()
                emitted += 1

                if index < len(domains) - 1 and self.inter_site_delay > 0:
                    await asyncio.sleep(self.inter_site_delay)
        finally:
            self.registry.remove(job_id)
            logger.info(
                f"[{job_id}] Stream closed after {emitted}/{len(domains)} site(s)"
                + (" (stopped early)" if emitted < len(domains) else "")
            )
