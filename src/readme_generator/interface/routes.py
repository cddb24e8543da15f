"""API routes — thin controllers that delegate to the use case."""

from __future__ import annotations

import logging
from typing import AsyncIterator

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse

from readme_generator.domain.exceptions import ReadmeGeneratorError
from readme_generator.domain.ports.llm_gateway import FragmentStream
from readme_generator.interface.dependencies import get_use_case
from readme_generator.interface.schemas import ErrorResponse, GenerateRequest
from readme_generator.services.generate_readme import GenerateReadmeUseCase

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")


async def _relay(stream: FragmentStream) -> AsyncIterator[bytes]:
    """Forward fragments as UTF-8 bytes; the upstream is closed however this ends."""
    try:
        async for fragment in stream:
            yield fragment.encode("utf-8")
    except ReadmeGeneratorError as exc:
        logger.warning("Stream terminated: %s: %s", type(exc).__name__, exc)
        raise
    finally:
        await stream.aclose()


@router.post(
    "/generate",
    response_class=StreamingResponse,
    responses={
        200: {"content": {"text/event-stream": {}}, "description": "README Markdown stream"},
        400: {"model": ErrorResponse, "description": "Invalid URL, credential or endpoint"},
        404: {"model": ErrorResponse, "description": "Repository not found or private"},
        429: {"model": ErrorResponse, "description": "GitHub API rate limit exceeded"},
        502: {"model": ErrorResponse, "description": "GitHub or LLM provider error"},
        504: {"model": ErrorResponse, "description": "LLM provider timed out"},
    },
)
async def generate(
    body: GenerateRequest,
    use_case: GenerateReadmeUseCase = Depends(get_use_case),
) -> StreamingResponse:
    """Stream a generated README for a GitHub repository."""
    stream = await use_case.execute(
        url=body.url,
        api_key=body.api_key,
        provider=body.provider,
        style=body.style,
        project_details=body.project_details,
        github_token=body.github_token,
        custom_endpoint=body.custom_endpoint,
    )
    return StreamingResponse(
        _relay(stream),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache", "Connection": "keep-alive"},
    )
