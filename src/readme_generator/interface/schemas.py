"""Pydantic request / response DTOs for the API boundary."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class GenerateRequest(BaseModel):
    """Request body for ``POST /api/generate``.

    Field names follow the browser client (camelCase); snake_case is
    accepted too.  Content checks live in the use case so that every
    rejection carries the same precise message.
    """

    model_config = ConfigDict(populate_by_name=True)

    url: str = ""
    api_key: str = Field(default="", alias="apiKey")
    provider: str | None = None
    style: str | None = None
    project_details: str | None = Field(default=None, alias="projectDetails")
    github_token: str | None = Field(default=None, alias="githubToken")
    custom_endpoint: str | None = Field(default=None, alias="customEndpoint")


class ErrorResponse(BaseModel):
    """Standard error envelope returned on all failure paths."""

    status: str = "error"
    message: str
