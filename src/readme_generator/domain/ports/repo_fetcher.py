"""Port: repository fetcher — defined by the domain, implemented by infrastructure."""

from __future__ import annotations

from typing import Callable, Protocol

from readme_generator.domain.entities import FileCandidate, RepoMetadata
from readme_generator.domain.value_objects import RepositoryReference


class RepoFetcher(Protocol):
    """Abstract contract for fetching GitHub repository data."""

    async def fetch_metadata(self, ref: RepositoryReference) -> RepoMetadata:
        """Return high-level repository metadata."""
        ...

    async def fetch_tree(
        self, ref: RepositoryReference, branch: str
    ) -> list[FileCandidate]:
        """Return the recursive file tree for the given branch."""
        ...

    async def fetch_file_content(self, candidate: FileCandidate) -> str:
        """Return the decoded text content of a single file."""
        ...


# Builds a fetcher bound to one caller's (optional) GitHub token.
RepoFetcherFactory = Callable[[str | None], RepoFetcher]
