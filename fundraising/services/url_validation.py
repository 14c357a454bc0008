"""Link validation for user-entered deal room URLs.

Normalizes loosely typed links (``example.com``, ``www.example.com``) into
absolute ``https://`` URLs, classifies them for display, and flags hosts that
investors are unlikely to reach.
"""

from __future__ import annotations

import re
from urllib.parse import SplitResult, urlsplit

import structlog
from pydantic import BaseModel

from fundraising.models.enums import UrlType

logger = structlog.get_logger()

ALLOWED_SCHEMES = ("http", "https")

# Schemes whose URLs are meaningless without a host
_HOST_SCHEMES = frozenset({"http", "https", "ftp", "ws", "wss"})

_ABSOLUTE_RE = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.-]*:")
_HAS_SCHEME_RE = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.-]*://")
_WWW_RE = re.compile(r"^www\.", re.IGNORECASE)
_BARE_DOMAIN_RE = re.compile(r"^[a-zA-Z0-9][a-zA-Z0-9-]*[a-zA-Z0-9]*\.[a-zA-Z]{2,}.*$", re.IGNORECASE)
_BAD_HOST_RE = re.compile(r"[\s<>^|\\]")

_PRIVATE_172_RE = re.compile(r"^172\.(1[6-9]|2[0-9]|3[0-1])\.")
_DOTTED_QUAD_RE = re.compile(r"^\d+\.\d+\.\d+\.\d+$")

# First match wins, in this order
URL_TYPE_PATTERNS: tuple[tuple[UrlType, re.Pattern[str]], ...] = (
    (UrlType.DOCUMENT, re.compile(r"\.(pdf|doc|docx|xls|xlsx|ppt|pptx)$", re.IGNORECASE)),
    (UrlType.IMAGE, re.compile(r"\.(jpg|jpeg|png|gif|webp|svg)$", re.IGNORECASE)),
    (UrlType.VIDEO, re.compile(r"\.(mp4|avi|mov|wmv|flv|webm)$", re.IGNORECASE)),
    (UrlType.LINKEDIN, re.compile(r"linkedin\.com", re.IGNORECASE)),
    (UrlType.TWITTER, re.compile(r"twitter\.com|x\.com", re.IGNORECASE)),
    (UrlType.FACEBOOK, re.compile(r"facebook\.com", re.IGNORECASE)),
    (UrlType.YOUTUBE, re.compile(r"youtube\.com|youtu\.be", re.IGNORECASE)),
)

URL_REQUIRED = "URL is required"
UNSUPPORTED_PROTOCOL = "Only HTTP and HTTPS URLs are allowed"
INVALID_FORMAT = "Please enter a valid URL format"
FORMAT_GUIDANCE = "Please enter a valid URL (e.g., https://example.com or www.example.com)"
MISSING_DOMAIN = "URL must have a valid domain name"
LOCAL_URL_WARNING = "This appears to be a local URL that may not be accessible to investors"
IP_ADDRESS_WARNING = "Consider using a domain name instead of an IP address for better accessibility"


class UrlValidationResult(BaseModel):
    is_valid: bool
    normalized_url: str
    error: str | None = None
    warning: str | None = None


class UrlAccessibility(BaseModel):
    is_accessible: bool
    error: str | None = None


def _parse(value: str) -> SplitResult | None:
    """Parse an absolute URL, or return None when a browser would reject it."""
    candidate = value.strip()
    if not _ABSOLUTE_RE.match(candidate):
        return None
    try:
        parts = urlsplit(candidate)
        parts.port  # raises ValueError on a malformed port
    except ValueError:
        return None
    if parts.scheme.lower() in _HOST_SCHEMES:
        host = parts.hostname
        if not host or _BAD_HOST_RE.search(host):
            return None
    return parts


def is_parsable_url(value: object) -> bool:
    return isinstance(value, str) and _parse(value) is not None


def _host_warning(host: str) -> str | None:
    is_localhost = host == "localhost" or host.startswith("127.")
    is_private = (
        host.startswith("192.168.")
        or host.startswith("10.")
        or _PRIVATE_172_RE.match(host) is not None
    )
    if is_localhost or is_private:
        return LOCAL_URL_WARNING
    if _DOTTED_QUAD_RE.match(host):
        return IP_ADDRESS_WARNING
    return None


def validate_and_normalize_url(url: str | None) -> UrlValidationResult:
    if not url or not url.strip():
        return UrlValidationResult(is_valid=False, normalized_url="", error=URL_REQUIRED)

    trimmed = url.strip()
    normalized = trimmed

    if _HAS_SCHEME_RE.match(normalized):
        parts = _parse(normalized)
        if parts is None:
            return UrlValidationResult(is_valid=False, normalized_url=trimmed, error=INVALID_FORMAT)
        if parts.scheme.lower() not in ALLOWED_SCHEMES:
            return UrlValidationResult(is_valid=False, normalized_url=trimmed, error=UNSUPPORTED_PROTOCOL)
    elif _WWW_RE.match(normalized) or _BARE_DOMAIN_RE.match(normalized):
        normalized = f"https://{normalized}"
    else:
        return UrlValidationResult(is_valid=False, normalized_url=trimmed, error=FORMAT_GUIDANCE)

    parts = _parse(normalized)
    if parts is None:
        return UrlValidationResult(is_valid=False, normalized_url=trimmed, error=INVALID_FORMAT)
    if parts.scheme.lower() not in ALLOWED_SCHEMES:
        return UrlValidationResult(is_valid=False, normalized_url=trimmed, error=UNSUPPORTED_PROTOCOL)
    if not parts.hostname:
        return UrlValidationResult(is_valid=False, normalized_url=trimmed, error=MISSING_DOMAIN)

    return UrlValidationResult(
        is_valid=True,
        normalized_url=normalized,
        warning=_host_warning(parts.hostname),
    )


def extract_domain(url: str) -> str:
    """Hostname for display; the input unchanged when it does not parse."""
    parts = _parse(url) if isinstance(url, str) else None
    if parts is None or not parts.hostname:
        return url
    return parts.hostname


def suggest_url_type(url: str) -> UrlType | None:
    for url_type, pattern in URL_TYPE_PATTERNS:
        if pattern.search(url):
            return url_type
    return None


def check_url_accessibility(url: str) -> UrlAccessibility:
    """Format-level reachability check.

    No request is made. Any well-formed http(s) URL is reported as
    accessible.
    """
    parts = _parse(url) if isinstance(url, str) else None
    if parts is None:
        return UrlAccessibility(is_accessible=False, error="Invalid URL format")
    if parts.scheme.lower() not in ALLOWED_SCHEMES:
        return UrlAccessibility(is_accessible=False, error="Only HTTP and HTTPS URLs are supported")
    logger.debug("url.accessibility_assumed", host=parts.hostname)
    return UrlAccessibility(is_accessible=True)
