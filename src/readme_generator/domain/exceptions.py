"""Domain exception hierarchy.

Each exception maps to a specific HTTP status code at the interface layer.
Inner layers raise these; the outermost error-handler translates them.
"""

from __future__ import annotations


class ReadmeGeneratorError(Exception):
    """Base exception for the entire application."""


# ── Input validation ────────────────────────────────────────────────────────


class InvalidInputError(ReadmeGeneratorError):
    """User input was rejected before any network I/O took place."""


class InvalidGitHubUrlError(InvalidInputError):
    """The supplied URL does not point to a valid GitHub repository."""


class InvalidEndpointError(InvalidInputError):
    """The custom LLM endpoint is malformed or targets a forbidden host."""


class InvalidSecretError(InvalidInputError):
    """An API key or token is too long or contains control characters."""


# ── Upstream errors ─────────────────────────────────────────────────────────


class RepositoryNotFoundError(ReadmeGeneratorError):
    """The repository does not exist or is private (404)."""


class UpstreamError(ReadmeGeneratorError):
    """A remote service answered with a non-2xx status or could not be reached.

    ``status_code`` is ``None`` when the failure happened at the transport
    level.  ``body`` keeps the raw response text for diagnostics only; it is
    never sent back to the caller.
    """

    def __init__(
        self, message: str, status_code: int | None = None, body: str = ""
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class GitHubUpstreamError(UpstreamError):
    """Any non-2xx answer from the GitHub REST API."""


class GitHubRateLimitError(GitHubUpstreamError):
    """GitHub API rate limit exceeded (429 / 403 with rate-limit header)."""


class LlmUpstreamError(UpstreamError):
    """Any non-2xx answer or transport failure from the LLM provider."""


# ── Processing errors ───────────────────────────────────────────────────────


class ContentDecodeError(ReadmeGeneratorError):
    """Base64 file content or a single-shot JSON document could not be decoded."""


class StreamTimeoutError(ReadmeGeneratorError):
    """The provider did not finish within the wall-clock timeout."""


class StreamSizeLimitError(ReadmeGeneratorError):
    """The provider sent more bytes than the configured safety limit."""
