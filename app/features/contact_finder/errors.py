"""
Contact Finder error taxonomy.

Per-site errors (ResolutionError, NavigationError) end up in that site's
CrawlResult; FetchError never does, it only triggers escalation to the
renderer. JobNotFound / JobAlreadyExists surface as HTTP 404 / 409.
"""
from typing import Optional


class ContactFinderError(Exception):
    """Base class for all contact finder failures."""


class ResolutionError(ContactFinderError):
    """Raw domain input could not be turned into a crawlable URL."""

    def __init__(self, raw: str, reason: str):
        self.raw = raw
        self.reason = reason
        super().__init__(f"Cannot resolve '{raw}': {reason}")


class FetchError(ContactFinderError):
    """Static probe transport failure or non-2xx response."""

    def __init__(self, url: str, cause: Optional[BaseException] = None, status_code: Optional[int] = None):
        self.url = url
        self.cause = cause
        self.status_code = status_code
        detail = f"HTTP {status_code}" if status_code is not None else str(cause)
        super().__init__(f"Static fetch of {url} failed: {detail}")


class NavigationError(ContactFinderError):
    """Headless navigation timed out or the browser failed."""

    def __init__(self, url: str, message: str):
        self.url = url
        super().__init__(f"Navigation to {url} failed: {message}")


class JobNotFound(ContactFinderError):
    def __init__(self, job_id: str):
        self.job_id = job_id
        super().__init__(f"Job {job_id} not found")


class JobAlreadyExists(ContactFinderError):
    def __init__(self, job_id: str):
        self.job_id = job_id
        super().__init__(f"Job {job_id} is already registered")
