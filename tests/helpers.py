"""Fake upstream responses shared by the adapter and harvester tests."""

from __future__ import annotations

import base64
from typing import AsyncIterator, Iterable

import httpx


def chunked_response(
    chunks: Iterable[bytes],
    status_code: int = 200,
    content_type: str = "text/event-stream",
) -> httpx.Response:
    """A streaming response that delivers *chunks* exactly as given."""
    parts = list(chunks)

    async def body() -> AsyncIterator[bytes]:
        for part in parts:
            yield part

    return httpx.Response(status_code, content=body(), headers={"content-type": content_type})


def split_every(data: bytes, size: int) -> list[bytes]:
    return [data[i : i + size] for i in range(0, len(data), size)]


def github_blob(text: str) -> dict[str, str]:
    """Blob API payload the way GitHub sends it (base64 wrapped at 60 columns)."""
    return {"encoding": "base64", "content": base64.encodebytes(text.encode("utf-8")).decode("ascii")}
