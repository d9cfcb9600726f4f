"""
Client for the /check and /cancel endpoints.

`/check` answers with newline-delimited JSON over a chunked body; a record
may be split across chunks, so lines are reassembled from a byte buffer
before parsing. Channel closure is the only completion signal.
"""
import codecs
import json
from typing import Iterable, Iterator, Optional, Sequence

import httpx
from pydantic import ValidationError

from app.features.contact_finder.schemas.crawl import CrawlResult
from app.platform.logger import get_logger

logger = get_logger(__name__)


def _parse_line(line: str) -> Optional[dict]:
    line = line.strip()
    if not line:
        return None
    try:
        record = json.loads(line)
    except json.JSONDecodeError as e:
        logger.error(f"Skipping unparseable stream line: {e}")
        return None
    if not isinstance(record, dict):
        logger.error(f"Skipping non-object stream record: {line[:80]}")
        return None
    return record


def iter_records(chunks: Iterable[bytes]) -> Iterator[dict]:
    """
    Yield one decoded JSON object per complete line of the byte stream.

    A partial trailing line stays buffered until a later chunk completes it;
    whatever is left when the stream ends is parsed as the last record.
    """
    decoder = codecs.getincrementaldecoder("utf-8")()
    buffer = ""
    for chunk in chunks:
        buffer += decoder.decode(chunk)
        *lines, buffer = buffer.split("\n")
        for line in lines:
            record = _parse_line(line)
            if record is not None:
                yield record

    buffer += decoder.decode(b"", final=True)
    record = _parse_line(buffer)
    if record is not None:
        yield record


class ContactFinderClient:
    def __init__(
        self,
        base_url: str = "http://localhost:3000",
        timeout: Optional[float] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        # Batches can run for minutes, so no read timeout by default.
        self.timeout = httpx.Timeout(timeout, connect=10.0)
        self._transport = transport

    def _client(self) -> httpx.Client:
        return httpx.Client(base_url=self.base_url, timeout=self.timeout, transport=self._transport)

    def check(self, domains: Sequence[str], job_id: str) -> Iterator[CrawlResult]:
        """
        Start a batch and yield each site's result as it arrives.

        Raises:
            httpx.HTTPStatusError: the server rejected the batch (400/409)
        """
        with self._client() as client:
            with client.stream("POST", "/check", json={"domains": list(domains), "jobId": job_id}) as response:
                if response.is_error:
                    response.read()
                response.raise_for_status()
                for record in iter_records(response.iter_bytes()):
                    try:
                        yield CrawlResult.model_validate(record)
                    except ValidationError as e:
                        logger.error(f"Skipping malformed record for {record.get('site')}: {e}")

    def cancel(self, job_id: str) -> bool:
        """True if the server knew the job, False on 404."""
        with self._client() as client:
            response = client.post("/cancel", json={"jobId": job_id})
        if response.status_code == httpx.codes.NOT_FOUND:
            return False
        response.raise_for_status()
        return True
