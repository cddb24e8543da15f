"""FastAPI dependency injection wiring."""

from __future__ import annotations

from functools import partial

import httpx

from readme_generator.infrastructure.config import get_settings
from readme_generator.infrastructure.github_rest_adapter import GitHubRestAdapter
from readme_generator.infrastructure.llm_stream_adapter import ProviderStreamAdapter
from readme_generator.services.generate_readme import GenerateReadmeUseCase
from readme_generator.services.harvest_repo import RepositoryHarvester

_http_client: httpx.AsyncClient | None = None


async def startup() -> None:
    """Initialise shared resources — called from the lifespan context manager."""
    global _http_client  # noqa: PLW0603

    _http_client = httpx.AsyncClient(timeout=httpx.Timeout(30.0))


async def shutdown() -> None:
    """Release shared resources."""
    global _http_client  # noqa: PLW0603

    if _http_client:
        await _http_client.aclose()
        _http_client = None


def get_use_case() -> GenerateReadmeUseCase:
    """Build the use case with injected adapters.

    Only the connection pool is shared; credentials arrive with each
    request and are bound to per-request adapters.
    """
    settings = get_settings()

    assert _http_client is not None, "startup() was not called"

    fetcher_factory = partial(
        GitHubRestAdapter,
        _http_client,
        api_url=settings.github_api_url,
        user_agent=settings.user_agent,
    )
    harvester = RepositoryHarvester(
        fetcher_factory=fetcher_factory,
        max_files=settings.max_files,
        max_file_size_bytes=settings.max_file_size_bytes,
    )
    return GenerateReadmeUseCase(
        harvester=harvester,
        llm_gateway=ProviderStreamAdapter(_http_client, settings),
    )
