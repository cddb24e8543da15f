"""Value objects — self-validating domain primitives."""

from __future__ import annotations

import re
from dataclasses import dataclass
from urllib.parse import urlsplit

from readme_generator.domain.exceptions import InvalidGitHubUrlError

MAX_URL_LENGTH = 2048

_GITHUB_HOST = "github.com"
_GIT_SUFFIX_RE = re.compile(r"\.git$")
_TRAILING_SLASHES_RE = re.compile(r"/+$")


def _invalid(url: str) -> InvalidGitHubUrlError:
    return InvalidGitHubUrlError(
        f"Invalid GitHub URL: '{url}'. "
        "Expected format: https://github.com/<owner>/<repo>"
    )


@dataclass(frozen=True, slots=True)
class RepositoryReference:
    """Validated owner/repo pair taken from a GitHub repository URL.

    Only ``https://github.com/<owner>/<repo>`` (optionally with ``www.``,
    a ``.git`` suffix, trailing slashes or extra path segments such as
    ``/tree/main``) is accepted.  Case is kept as given.
    """

    owner: str
    repo: str

    @classmethod
    def from_string(cls, url: str) -> RepositoryReference:
        """Parse and validate a raw URL string."""
        url = (url or "").strip()
        if not url or len(url) > MAX_URL_LENGTH:
            raise InvalidGitHubUrlError("Missing URL or URL is too long.")

        try:
            parsed = urlsplit(url)
            hostname = parsed.hostname or ""
        except ValueError as exc:
            raise _invalid(url) from exc

        if parsed.scheme != "https":
            raise _invalid(url)
        if hostname.removeprefix("www.") != _GITHUB_HOST:
            raise _invalid(url)

        path = _TRAILING_SLASHES_RE.sub("", parsed.path)
        path = _GIT_SUFFIX_RE.sub("", path)
        parts = [part for part in path.split("/") if part]
        if len(parts) < 2:
            raise _invalid(url)

        return cls(owner=parts[0], repo=parts[1])

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"
