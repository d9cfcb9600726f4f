from typing import List, Optional, Sequence

import httpx
from bs4 import BeautifulSoup
from fastapi.concurrency import run_in_threadpool

from app.features.contact_finder.errors import FetchError
from app.features.contact_finder.schemas.crawl import PageSnapshot
from app.features.contact_finder.services.email_extractor import (
    DEFAULT_DENYLIST,
    DEFAULT_IGNORED_SUFFIXES,
    extract_emails,
)
from app.platform.logger import get_logger

logger = get_logger(__name__)


def mailto_targets_from_markup(markup: str) -> List[str]:
    """Collect href values of <a href="mailto:..."> anchors from raw HTML."""
    soup = BeautifulSoup(markup, "html.parser")
    targets = []
    for anchor in soup.find_all("a", href=True):
        href = anchor.get("href")
        if isinstance(href, str) and href.strip().lower().startswith("mailto:"):
            targets.append(href.strip())
    return targets


class StaticFetcher:
    """
    Cheap first attempt: one plain GET, no JavaScript.
    Any emails found here let the orchestrator skip the headless browser.
    """

    def __init__(
        self,
        timeout: float = 15.0,
        user_agent: Optional[str] = None,
        denylist: Sequence[str] = DEFAULT_DENYLIST,
        ignored_suffixes: Sequence[str] = DEFAULT_IGNORED_SUFFIXES,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.timeout = timeout
        self.user_agent = user_agent
        self.denylist = tuple(denylist)
        self.ignored_suffixes = tuple(ignored_suffixes)
        self._transport = transport

    async def fetch(self, url: str) -> PageSnapshot:
        """
        GET `url` and return its markup. No retries.

        Raises:
            FetchError: on timeout, DNS/connection failure, invalid URL or non-2xx status
        """
        headers = {"User-Agent": self.user_agent} if self.user_agent else {}
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout,
                follow_redirects=True,
                headers=headers,
                transport=self._transport,
            ) as client:
                response = await client.get(url)
                response.raise_for_status()
                markup = response.text
        except httpx.HTTPStatusError as e:
            raise FetchError(url, cause=e, status_code=e.response.status_code) from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise FetchError(url, cause=e) from e

        # Parsing large pages is CPU-bound, keep it off the event loop.
        mailto_targets = await run_in_threadpool(mailto_targets_from_markup, markup)
        return PageSnapshot(url=str(response.url), markup=markup, mailto_targets=mailto_targets)

    async def probe(self, url: str) -> List[str]:
        snapshot = await self.fetch(url)
        emails = await run_in_threadpool(
            extract_emails,
            snapshot.markup,
            snapshot.mailto_targets,
            denylist=self.denylist,
            ignored_suffixes=self.ignored_suffixes,
        )
        logger.info(f"Static probe of {url} found {len(emails)} email(s)")
        return emails
