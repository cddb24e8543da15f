"""GitHub REST API adapter — implements the RepoFetcher port."""

from __future__ import annotations

import base64
import binascii
import logging
from datetime import datetime, timezone
from typing import Any

import httpx

from readme_generator.domain.entities import FileCandidate, RepoMetadata
from readme_generator.domain.exceptions import (
    ContentDecodeError,
    GitHubRateLimitError,
    GitHubUpstreamError,
    RepositoryNotFoundError,
)
from readme_generator.domain.value_objects import RepositoryReference

logger = logging.getLogger(__name__)

_DEFAULT_API = "https://api.github.com"


def decode_base64_content(value: str | None, path: str = "") -> str:
    """Decode a GitHub ``content`` field (base64 with embedded newlines) to text."""
    if not value:
        return ""
    compact = "".join(value.split())
    try:
        raw = base64.b64decode(compact, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise ContentDecodeError(f"Could not decode base64 content of {path or 'file'}.") from exc
    return raw.decode("utf-8", errors="replace")


class GitHubRestAdapter:
    """Concrete RepoFetcher backed by the GitHub v3 REST API."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        token: str | None = None,
        *,
        api_url: str = _DEFAULT_API,
        user_agent: str = "readme-generator",
    ) -> None:
        self._client = client
        self._api_url = api_url.rstrip("/")
        self._api_headers: dict[str, str] = {
            "Accept": "application/vnd.github+json",
            "User-Agent": user_agent,
        }
        if token:
            self._api_headers["Authorization"] = f"Bearer {token}"

    async def fetch_metadata(self, ref: RepositoryReference) -> RepoMetadata:
        """GET /repos/{owner}/{repo} → RepoMetadata."""
        data = await self._api_get(
            f"{self._api_url}/repos/{ref.owner}/{ref.repo}", not_found_is_missing=True
        )
        return RepoMetadata(
            owner=ref.owner,
            repo=ref.repo,
            default_branch=data.get("default_branch") or "main",
            description=data.get("description"),
        )

    async def fetch_tree(
        self, ref: RepositoryReference, branch: str
    ) -> list[FileCandidate]:
        """GET /repos/{owner}/{repo}/git/trees/{branch}?recursive=1 → [FileCandidate]."""
        data = await self._api_get(
            f"{self._api_url}/repos/{ref.owner}/{ref.repo}/git/trees/{branch}",
            params={"recursive": "1"},
        )
        return [
            FileCandidate(
                path=item["path"],
                type=item.get("type", "blob"),
                size=item.get("size") or 0,
                content_url=self._content_url(ref, item),
            )
            for item in data.get("tree") or []
            if item.get("path")
        ]

    async def fetch_file_content(self, candidate: FileCandidate) -> str:
        """GET the blob endpoint and decode its base64 ``content`` field."""
        data = await self._api_get(candidate.content_url)
        if data.get("encoding") not in (None, "base64"):
            return str(data.get("content") or "")
        return decode_base64_content(data.get("content"), candidate.path)

    def _content_url(self, ref: RepositoryReference, item: dict[str, Any]) -> str:
        """Only follow blob URLs that point back at the configured API host."""
        url = item.get("url") or ""
        if url.startswith(f"{self._api_url}/"):
            return url
        sha = item.get("sha", "")
        return f"{self._api_url}/repos/{ref.owner}/{ref.repo}/git/blobs/{sha}"

    async def _api_get(
        self,
        url: str,
        params: dict[str, str] | None = None,
        *,
        not_found_is_missing: bool = False,
    ) -> dict[str, Any]:
        """Perform a GitHub API GET request with error translation."""
        try:
            resp = await self._client.get(url, headers=self._api_headers, params=params)
        except httpx.HTTPError as exc:
            raise GitHubUpstreamError(f"Network error fetching {url}: {exc}") from exc

        if resp.is_success:
            try:
                data = resp.json()
            except ValueError as exc:
                raise GitHubUpstreamError(
                    f"GitHub API returned invalid JSON for {url}",
                    status_code=resp.status_code,
                    body=resp.text,
                ) from exc
            return data if isinstance(data, dict) else {}

        if resp.status_code == 404 and not_found_is_missing:
            raise RepositoryNotFoundError("Repository not found or private.")

        if resp.status_code in (403, 429) and (
            resp.status_code == 429 or resp.headers.get("x-ratelimit-remaining") == "0"
        ):
            reset_raw = resp.headers.get("x-ratelimit-reset", "")
            try:
                reset_str = datetime.fromtimestamp(int(reset_raw), tz=timezone.utc).strftime(
                    "%Y-%m-%d %H:%M:%S UTC"
                )
            except (ValueError, OSError):
                reset_str = reset_raw or "unknown"
            raise GitHubRateLimitError(
                f"GitHub API rate limit exceeded. Resets at {reset_str}. "
                "Provide a GitHub token to increase the limit.",
                status_code=resp.status_code,
                body=resp.text,
            )

        raise GitHubUpstreamError(
            f"GitHub API returned HTTP {resp.status_code} for {url}",
            status_code=resp.status_code,
            body=resp.text,
        )
