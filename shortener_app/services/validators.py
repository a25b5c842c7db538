"""
Long URL validation and sanitization.

Runs before the shortening workflow; the service itself trusts its input.
"""

import re
from urllib.parse import urlparse

from shortener_app.exceptions import ValidationFailedError

ALLOWED_SCHEMES = ("http", "https")
BLACKLISTED_HOSTS = frozenset({"localhost", "127.0.0.1", "0.0.0.0", "::1"})
_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]")


def sanitize_url(url: str) -> str:
    """Trim whitespace and strip control characters"""
    return _CONTROL_CHARS.sub("", url.strip())


def is_valid_url(url: str) -> bool:
    """http/https URL with a host"""
    try:
        parsed = urlparse(url)
    except ValueError:
        return False
    return parsed.scheme in ALLOWED_SCHEMES and bool(parsed.hostname)


def is_blacklisted(url: str) -> bool:
    """Loopback and unspecified addresses; unparsable URLs count as blacklisted"""
    try:
        hostname = urlparse(url).hostname
    except ValueError:
        return True
    return hostname is None or hostname.lower() in BLACKLISTED_HOSTS


def validate_long_url(url: str) -> str:
    """
    Sanitize and validate a long URL.

    Returns:
        The sanitized URL

    Raises:
        ValidationFailedError: if the URL is malformed or not allowed
    """
    cleaned = sanitize_url(url)
    if not cleaned:
        raise ValidationFailedError(url, "URL is required")
    if not is_valid_url(cleaned):
        raise ValidationFailedError(url, "Invalid URL format")
    if is_blacklisted(cleaned):
        raise ValidationFailedError(url, "URL is not allowed")
    return cleaned
