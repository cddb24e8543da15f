"""Domain entities — pure data structures with no external dependencies."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class Provider(str, Enum):
    """LLM providers the stream adapter knows how to talk to."""

    OPENAI = "openai"
    GEMINI = "gemini"
    OPENROUTER = "openrouter"


class DocumentStyle(str, Enum):
    """How long and how deep the generated README should be."""

    LIGHT = "light"
    SIMPLE = "simple"
    NORMAL = "normal"
    MEDIUM = "medium"
    DEEP = "deep"


@dataclass(frozen=True, slots=True)
class FileCandidate:
    """A single node from the GitHub tree API (blob or sub-tree)."""

    path: str
    type: str  # "blob" or "tree"
    size: int = 0
    content_url: str = ""


@dataclass(frozen=True, slots=True)
class RepoMetadata:
    """High-level metadata about a GitHub repository."""

    owner: str
    repo: str
    default_branch: str
    description: str | None = None


@dataclass(frozen=True, slots=True)
class FetchedFile:
    """A fetched file with its decoded text content."""

    path: str
    content: str


@dataclass(frozen=True, slots=True)
class RepositorySnapshot:
    """Everything the prompt assembler needs to know about a repository."""

    owner: str
    repo: str
    description: str
    files: tuple[FetchedFile, ...] = ()

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"


@dataclass(frozen=True, slots=True)
class ProviderRequestSpec:
    """The outbound request for one provider call, fixed before dispatch."""

    url: str
    headers: dict[str, str] = field(default_factory=dict)
    body: dict[str, Any] = field(default_factory=dict)
