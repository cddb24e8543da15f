"""Harvest-repository use case — metadata, tree, filtering and content fetch.

No partial results: the first failing request aborts the whole harvest and
the remaining file downloads are cancelled.
"""

from __future__ import annotations

import asyncio
import logging

from readme_generator.domain.entities import FetchedFile, FileCandidate, RepositorySnapshot
from readme_generator.domain.ports.repo_fetcher import RepoFetcher, RepoFetcherFactory
from readme_generator.domain.value_objects import RepositoryReference
from readme_generator.services.file_filter import (
    MAX_FILE_SIZE_BYTES,
    MAX_FILES,
    select_candidates,
)

logger = logging.getLogger(__name__)

NO_DESCRIPTION = "No description provided."


class RepositoryHarvester:
    """Turns a :class:`RepositoryReference` into a :class:`RepositorySnapshot`.

    Parameters
    ----------
    fetcher_factory:
        Builds a :class:`RepoFetcher` for the caller's optional GitHub token.
        The token lives only as long as that fetcher.
    max_files:
        Maximum number of files to download.
    max_file_size_bytes:
        Non-manifest files at or above this size are skipped.
    max_concurrency:
        Upper bound on simultaneous content requests.
    """

    def __init__(
        self,
        fetcher_factory: RepoFetcherFactory,
        max_files: int = MAX_FILES,
        max_file_size_bytes: int = MAX_FILE_SIZE_BYTES,
        max_concurrency: int = 10,
    ) -> None:
        self._fetcher_factory = fetcher_factory
        self._max_files = max_files
        self._max_size = max_file_size_bytes
        self._max_concurrency = max_concurrency

    async def fetch_repository_content(
        self, ref: RepositoryReference, token: str | None = None
    ) -> RepositorySnapshot:
        """Run the harvest and return the snapshot consumed by the prompt builder."""
        fetcher = self._fetcher_factory(token or None)
        logger.info("Harvesting %s", ref.full_name)

        metadata = await fetcher.fetch_metadata(ref)
        tree = await fetcher.fetch_tree(ref, metadata.default_branch)

        selected = select_candidates(tree, self._max_files, self._max_size)
        logger.info(
            "Fetching %d of %d tree entries from %s",
            len(selected),
            len(tree),
            ref.full_name,
        )

        files = await self._fetch_files(fetcher, selected)
        return RepositorySnapshot(
            owner=ref.owner,
            repo=ref.repo,
            description=metadata.description or NO_DESCRIPTION,
            files=tuple(files),
        )

    async def _fetch_files(
        self, fetcher: RepoFetcher, candidates: list[FileCandidate]
    ) -> list[FetchedFile]:
        """Fetch file contents concurrently; fail fast on the first error."""
        sem = asyncio.Semaphore(self._max_concurrency)

        async def _fetch_one(candidate: FileCandidate) -> FetchedFile:
            async with sem:
                content = await fetcher.fetch_file_content(candidate)
            return FetchedFile(path=candidate.path, content=content)

        tasks = [asyncio.ensure_future(_fetch_one(c)) for c in candidates]
        try:
            return list(await asyncio.gather(*tasks))
        except BaseException:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise
