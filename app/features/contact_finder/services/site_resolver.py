from app.features.contact_finder.errors import ResolutionError
from app.features.contact_finder.schemas.crawl import SiteTask
from app.platform.utils.url_validator import validate_url


def resolve_site(raw: str) -> SiteTask:
    """
    Turn a bare domain or URL into an absolute URL.

    "a.com" -> "https://a.com"; strings already starting with http:// or
    https:// pass through unchanged.
    """
    if not isinstance(raw, str):
        raise ResolutionError(repr(raw), "domain must be a string")

    is_valid, url, error_message = validate_url(raw)
    if not is_valid:
        raise ResolutionError(raw, error_message)

    return SiteTask(raw=raw, url=url)
