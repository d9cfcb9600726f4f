import re
from urllib.parse import urlparse
from typing import Tuple

_SCHEME_RE = re.compile(r"^https?://", re.IGNORECASE)


def normalize_url(url: str) -> Tuple[str, bool]:
    """Prefix bare domains with https://. Returns (url, was_modified)."""
    url = url.strip()

    if not _SCHEME_RE.match(url):
        normalized = f"https://{url}"
        return normalized, True

    return url, False


def validate_url(url: str) -> Tuple[bool, str, str]:
    if not url or not url.strip():
        return False, "", "URL cannot be empty"

    normalized_url, was_modified = normalize_url(url)

    try:
        parsed = urlparse(normalized_url)

        if not parsed.netloc or not parsed.hostname:
            return False, normalized_url, "Invalid URL format: missing domain"

        if parsed.scheme.lower() not in ['http', 'https']:
            return False, normalized_url, f"Invalid URL scheme: {parsed.scheme} (must be http or https)"

        # Touch the port so malformed values like "a.com:abc" fail here.
        parsed.port

        return True, normalized_url, ""

    except ValueError as e:
        return False, normalized_url, f"URL parsing error: {str(e)}"
