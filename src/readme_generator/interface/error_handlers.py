"""Global exception handlers — translate domain errors to HTTP responses.

Each domain exception maps to a specific HTTP status code and the
standard ``{"status": "error", "message": "..."}`` envelope.  Validation
errors keep their precise message; upstream failures get a fixed public
message so provider bodies and internal details never reach the caller.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from readme_generator.domain.exceptions import (
    ContentDecodeError,
    GitHubRateLimitError,
    GitHubUpstreamError,
    InvalidInputError,
    LlmUpstreamError,
    ReadmeGeneratorError,
    RepositoryNotFoundError,
    StreamSizeLimitError,
    StreamTimeoutError,
    UpstreamError,
)

logger = logging.getLogger(__name__)

_REPO_FETCH_FAILED = "Unable to fetch repository data. Verify the URL and GitHub token."

# Order matters: subclasses before their bases.  ``None`` keeps str(exc).
_EXCEPTION_STATUS: list[tuple[type[ReadmeGeneratorError], int, str | None]] = [
    (InvalidInputError, 400, None),
    (RepositoryNotFoundError, 404, "Repository not found or private. Verify the URL and GitHub token."),
    (GitHubRateLimitError, 429, None),
    (GitHubUpstreamError, 502, _REPO_FETCH_FAILED),
    (LlmUpstreamError, 502, None),
    (ContentDecodeError, 502, "Received content that could not be decoded."),
    (StreamTimeoutError, 504, None),
    (StreamSizeLimitError, 502, None),
]


def _error_json(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"status": "error", "message": message},
    )


def _public_message(exc: Exception) -> tuple[int, str]:
    for exc_type, code, message in _EXCEPTION_STATUS:
        if isinstance(exc, exc_type):
            return code, message or str(exc)
    return 500, "Unexpected error while generating README."


def register_error_handlers(app: FastAPI) -> None:
    """Attach exception handlers to the FastAPI application."""

    # ── Domain exceptions ───────────────────────────────────────────────

    @app.exception_handler(ReadmeGeneratorError)
    async def domain_handler(request: Request, exc: ReadmeGeneratorError) -> JSONResponse:
        code, message = _public_message(exc)
        if isinstance(exc, UpstreamError):
            logger.warning(
                "%s (upstream status %s): %s", type(exc).__name__, exc.status_code, exc
            )
        else:
            logger.warning("%s: %s", type(exc).__name__, exc)
        return _error_json(code, message)

    # ── Pydantic / FastAPI validation errors ────────────────────────────

    @app.exception_handler(RequestValidationError)
    async def validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        messages = []
        for err in exc.errors():
            loc = " → ".join(str(p) for p in err.get("loc", []))
            messages.append(f"{loc}: {err.get('msg', 'validation error')}")
        return _error_json(422, "; ".join(messages))

    # ── Catch-all for unexpected errors ─────────────────────────────────

    @app.exception_handler(Exception)
    async def generic_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled exception")
        return _error_json(500, "Unexpected error while generating README.")
