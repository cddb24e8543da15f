"""Generate-README use case — validation, harvest, prompt, provider stream.

This is the single entry point for the business logic.  It depends only on
the harvester, the :class:`LlmGateway` port and the pure service modules.
The interface layer injects concrete adapters at runtime.
"""

from __future__ import annotations

import logging

from readme_generator.domain.entities import Provider
from readme_generator.domain.exceptions import InvalidSecretError
from readme_generator.domain.ports.llm_gateway import FragmentStream, LlmGateway
from readme_generator.services.harvest_repo import RepositoryHarvester
from readme_generator.services.input_validator import (
    normalize_provider,
    normalize_style,
    sanitize_free_text,
    sanitize_secret,
    validate_custom_endpoint,
    validate_repository_url,
)
from readme_generator.services.prompt_builder import build_prompt

logger = logging.getLogger(__name__)


class GenerateReadmeUseCase:
    """Orchestrates the full repo → README stream pipeline."""

    def __init__(self, harvester: RepositoryHarvester, llm_gateway: LlmGateway) -> None:
        self._harvester = harvester
        self._llm = llm_gateway

    async def execute(
        self,
        url: str,
        api_key: str,
        provider: str | None = None,
        style: str | None = None,
        project_details: str | None = None,
        github_token: str | None = None,
        custom_endpoint: str | None = None,
    ) -> FragmentStream:
        """Validate everything, harvest the repository and open the LLM stream.

        Every input check happens before the first outbound request.  The
        returned stream has already passed the provider's status check.
        """
        # 1. Validate (no network I/O yet)
        key = sanitize_secret(api_key, "API key")
        if not key:
            raise InvalidSecretError("Missing URL or API Key")
        ref = validate_repository_url(url)
        chosen_provider = normalize_provider(provider)
        chosen_style = normalize_style(style)
        details = sanitize_free_text(project_details)
        token = sanitize_secret(github_token, "GitHub token")
        endpoint = ""
        if chosen_provider is Provider.OPENROUTER:
            endpoint = validate_custom_endpoint(custom_endpoint)

        # 2. Harvest
        snapshot = await self._harvester.fetch_repository_content(ref, token or None)

        # 3. Prompt
        prompt = build_prompt(snapshot, chosen_style, details)
        logger.info(
            "Generating %s README for %s via %s (%d files, %d prompt chars)",
            chosen_style.value,
            snapshot.full_name,
            chosen_provider.value,
            len(snapshot.files),
            len(prompt),
        )

        # 4. Stream
        return await self._llm.open_stream(prompt, key, chosen_provider, endpoint)
