from typing import Iterable, List, Sequence
from urllib.parse import urlsplit

DEFAULT_KEYWORDS = ("contact", "about")

NON_NAVIGABLE_PREFIXES = ("javascript:", "mailto:", "tel:")

_DEFAULT_PORTS = {"http": 80, "https": 443}


def is_navigable(url: str) -> bool:
    if not isinstance(url, str) or not url.strip():
        return False
    lowered = url.strip().lower()
    if lowered.startswith(NON_NAVIGABLE_PREFIXES):
        return False
    return lowered.startswith(("http://", "https://"))


def origin_of(url: str) -> str:
    """
    scheme://host[:port] with default ports dropped.
    Returns "" for anything without a parseable host.
    """
    try:
        parts = urlsplit(url.strip())
        port = parts.port
    except (ValueError, AttributeError):
        return ""
    scheme = parts.scheme.lower()
    host = (parts.hostname or "").lower()
    if not scheme or not host:
        return ""
    if port is None or port == _DEFAULT_PORTS.get(scheme):
        return f"{scheme}://{host}"
    return f"{scheme}://{host}:{port}"


def classify_links(
    links: Iterable[str],
    origin: str,
    keywords: Sequence[str] = DEFAULT_KEYWORDS,
) -> List[str]:
    """
    Keep same-origin links whose lowercase form contains a keyword.

    Cross-origin links are never kept. Output is deduplicated and keeps the
    order in which links were first seen.
    """
    site_origin = origin_of(origin)
    if not site_origin:
        return []
    keywords = [keyword.lower() for keyword in keywords if keyword]

    selected = {}
    for link in links:
        if not is_navigable(link):
            continue
        link = link.strip()
        lowered = link.lower()
        if not any(keyword in lowered for keyword in keywords):
            continue
        if origin_of(link) != site_origin:
            continue
        selected.setdefault(link, None)
    return list(selected)
