"""Input validation — everything here runs before any network I/O.

The custom-endpoint checks exist to stop the server being used as an SSRF
proxy into private networks.  They are purely textual: the hostname is
never resolved.
"""

from __future__ import annotations

import re
from urllib.parse import urlsplit, urlunsplit

from readme_generator.domain.entities import DocumentStyle, Provider
from readme_generator.domain.exceptions import InvalidEndpointError, InvalidSecretError
from readme_generator.domain.value_objects import RepositoryReference

MAX_SECRET_LENGTH = 256
MAX_PROJECT_DETAILS_LENGTH = 2000

_CONTROL_CHARS_RE = re.compile(r"[\x00-\x1f\x7f]")
_NON_ASCII_RE = re.compile(r"[^\x00-\x7f]")
_IPV4_HOST_RE = re.compile(r"^\d{1,3}(?:\.\d{1,3}){3}$")
# Decimal, octal or hex label: "2130706433", "0x7f", "017" all resolve as IPv4.
_NUMERIC_LABEL_RE = re.compile(r"^(?:0x[0-9a-f]*|\d+)$")

BLOCKED_HOSTNAMES: frozenset[str] = frozenset({"localhost", "127.0.0.1", "::1"})

PRIVATE_HOST_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"^10\."),
    re.compile(r"^172\.(?:1[6-9]|2\d|3[0-1])\."),
    re.compile(r"^192\.168\."),
    re.compile(r"^169\.254\."),
    re.compile(r"^0\."),
    re.compile(r"^127\."),
)


def validate_repository_url(raw: str) -> RepositoryReference:
    """Return the owner/repo pair for a GitHub URL or raise ``InvalidGitHubUrlError``."""
    return RepositoryReference.from_string(raw)


def _endpoint_hostname(netloc: str) -> str:
    # Taken from the raw netloc so that IDNA or bracket handling in the URL
    # parser cannot hide the original characters from the checks below.
    host = netloc.rsplit("@", maxsplit=1)[-1]
    if host.startswith("["):
        return host[1 : host.find("]")] if "]" in host else host[1:]
    if host.count(":") == 1:
        host = host.split(":", maxsplit=1)[0]
    return host.rstrip(".").lower()


def _is_private_or_literal(hostname: str) -> bool:
    if hostname in BLOCKED_HOSTNAMES:
        return True
    if _IPV4_HOST_RE.match(hostname) or ":" in hostname:
        return True
    if all(_NUMERIC_LABEL_RE.match(label) for label in hostname.split(".")):
        return True
    return any(pattern.match(hostname) for pattern in PRIVATE_HOST_PATTERNS)


def validate_custom_endpoint(raw: str | None) -> str:
    """Validate a user-supplied OpenAI-compatible endpoint.

    Returns ``""`` for empty input, otherwise the URL with its fragment
    removed.  Raises :class:`InvalidEndpointError` for anything that is not
    plain HTTPS to a public DNS name.
    """
    endpoint = (raw or "").strip()
    if not endpoint:
        return ""

    try:
        parsed = urlsplit(endpoint)
    except ValueError as exc:
        raise InvalidEndpointError("Custom endpoint must be a valid HTTPS URL.") from exc

    if not parsed.scheme or not parsed.netloc:
        raise InvalidEndpointError("Custom endpoint must be a valid HTTPS URL.")
    if parsed.scheme.lower() != "https":
        raise InvalidEndpointError("Custom endpoint must use HTTPS.")

    hostname = _endpoint_hostname(parsed.netloc)

    # Must run before any other hostname comparison: a homograph such as
    # "ⓛocalhost" would otherwise slip past the textual blocklist.
    if _NON_ASCII_RE.search(hostname) or "%" in hostname:
        raise InvalidEndpointError("Custom endpoint hostname contains invalid characters.")
    if not hostname:
        raise InvalidEndpointError("Custom endpoint must be a valid HTTPS URL.")
    if _is_private_or_literal(hostname):
        raise InvalidEndpointError("Custom endpoint cannot target private or loopback hosts.")

    return urlunsplit((parsed.scheme.lower(), parsed.netloc, parsed.path, parsed.query, ""))


def sanitize_secret(value: str | None, label: str) -> str:
    """Trim a credential and reject it if it is too long or has control characters."""
    if not value:
        return ""
    normalized = str(value).strip()
    if len(normalized) > MAX_SECRET_LENGTH:
        raise InvalidSecretError(f"{label} is too long.")
    if _CONTROL_CHARS_RE.search(normalized):
        raise InvalidSecretError(f"{label} contains invalid characters.")
    return normalized


def sanitize_free_text(value: str | None, max_length: int = MAX_PROJECT_DETAILS_LENGTH) -> str:
    """Strip control characters and truncate; never rejects."""
    if not value:
        return ""
    cleaned = _CONTROL_CHARS_RE.sub("", str(value)).strip()
    return cleaned[:max_length]


def normalize_provider(value: str | None) -> Provider:
    """Map the requested provider name onto :class:`Provider`, defaulting to OpenAI."""
    try:
        return Provider((value or "").strip().lower())
    except ValueError:
        return Provider.OPENAI


def normalize_style(value: str | None) -> DocumentStyle:
    try:
        return DocumentStyle((value or "").strip().lower())
    except ValueError:
        return DocumentStyle.NORMAL
