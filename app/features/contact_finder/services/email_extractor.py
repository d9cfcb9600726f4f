import re
from typing import Iterable, List, Optional, Sequence
from urllib.parse import unquote

DEFAULT_DENYLIST = ("example.com", "test.com", "domain.com")

# Asset names such as "logo@2x.png" match the grammar but are never mailboxes.
DEFAULT_IGNORED_SUFFIXES = (
    ".png", ".jpg", ".jpeg", ".gif", ".svg", ".webp", ".ico", ".css", ".js",
)

_LOCAL_CHARS = r"a-zA-Z0-9!#$%&'*+/=?^_{|}~-"

_EMAIL_PATTERN = (
    # local part: dot-atom or quoted string
    rf"(?:[{_LOCAL_CHARS}]+(?:\.[{_LOCAL_CHARS}]+)*"
    r'|"(?:[\x01-\x08\x0b\x0c\x0e-\x1f\x21\x23-\x5b\x5d-\x7f]|\\[\x01-\x09\x0b\x0c\x0e-\x7f])*")'
    r"@"
    # domain: hostname or bracketed address literal
    r"(?:(?:[a-zA-Z0-9](?:[a-zA-Z0-9-]*[a-zA-Z0-9])?\.)+[a-zA-Z0-9](?:[a-zA-Z0-9-]*[a-zA-Z0-9])?"
    r"|\[(?:(?:25[0-5]|2[0-4][0-9]|[01]?[0-9][0-9]?)\.){3}"
    r"(?:25[0-5]|2[0-4][0-9]|[01]?[0-9][0-9]?"
    r"|[a-zA-Z0-9-]*[a-zA-Z0-9]:(?:[\x01-\x08\x0b\x0c\x0e-\x1f\x21-\x5a\x53-\x7f]|\\[\x01-\x09\x0b\x0c\x0e-\x7f])+)\])"
)

# Matches start only at the beginning of a dot-atom run ("a.b.c"), never after
# a local-part character or after "x.", so no run is scanned more than once.
EMAIL_RE = re.compile(rf"(?<![{_LOCAL_CHARS}])(?<![{_LOCAL_CHARS}]\.){_EMAIL_PATTERN}")
_EMAIL_FULL_RE = re.compile(_EMAIL_PATTERN)

_MAILTO_PREFIX_RE = re.compile(r"^\s*mailto:", re.IGNORECASE)


def mailto_address(target: str) -> Optional[str]:
    """
    Strip the scheme and query suffix from a mailto: href.
    Returns None when what remains is not a single valid address.
    """
    if not isinstance(target, str):
        return None
    address = _MAILTO_PREFIX_RE.sub("", target, count=1)
    address = unquote(address.split("?", 1)[0]).strip()
    if not address or not _EMAIL_FULL_RE.fullmatch(address):
        return None
    return address


def _is_allowed(email: str, denylist: Sequence[str], ignored_suffixes: Sequence[str]) -> bool:
    if any(domain in email for domain in denylist):
        return False
    return not email.endswith(tuple(ignored_suffixes))


def extract_emails(
    markup: Optional[str],
    mailto_targets: Iterable[str] = (),
    denylist: Sequence[str] = DEFAULT_DENYLIST,
    ignored_suffixes: Sequence[str] = DEFAULT_IGNORED_SUFFIXES,
) -> List[str]:
    """
    Extract lowercase, deduplicated email addresses from serialized HTML.

    Addresses found anywhere in the markup come first, followed by valid
    mailto: targets not already seen. Anything containing a denylisted
    placeholder domain is dropped. Never raises on malformed input.
    """
    denylist = [domain.lower() for domain in denylist]
    found = {}

    if isinstance(markup, str):
        for match in EMAIL_RE.finditer(markup):
            email = match.group(0).lower()
            if _is_allowed(email, denylist, ignored_suffixes):
                found.setdefault(email, None)

    for target in mailto_targets or ():
        address = mailto_address(target)
        if address is None:
            continue
        email = address.lower()
        if _is_allowed(email, denylist, ignored_suffixes):
            found.setdefault(email, None)

    return list(found)


def merge_emails(*groups: Iterable[str]) -> List[str]:
    """Union of several email lists, case-insensitive, first-seen order."""
    merged = {}
    for group in groups:
        for email in group:
            merged.setdefault(email.lower(), None)
    return list(merged)
