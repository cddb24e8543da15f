"""Port: LLM gateway — defined by the domain, implemented by infrastructure."""

from __future__ import annotations

from typing import AsyncIterator, Protocol

from readme_generator.domain.entities import Provider


class FragmentStream(Protocol):
    """An opened provider response, consumed once as text fragments."""

    def __aiter__(self) -> AsyncIterator[str]:
        ...

    async def aclose(self) -> None:
        """Release the upstream connection."""
        ...


class LlmGateway(Protocol):
    """Abstract contract for streaming a completion from a large-language model."""

    async def open_stream(
        self,
        prompt: str,
        api_key: str,
        provider: Provider,
        custom_endpoint: str = "",
        *,
        model: str | None = None,
    ) -> FragmentStream:
        """Connect to the provider and return the (not yet consumed) stream.

        Connection-time failures are raised here, before any fragment.
        """
        ...
