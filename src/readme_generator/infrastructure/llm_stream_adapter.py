"""LLM stream adapter — implements the LlmGateway port.

Three providers, two wire shapes:

* ``openai`` and ``openrouter`` answer with Server-Sent Events whose
  ``data:`` lines carry chat-completion deltas; every delta becomes one
  fragment as soon as its line is complete.
* ``gemini`` answers with a single ``generateContent`` JSON document; the
  body is buffered and its text is emitted as one final fragment.

Whatever the provider, one wall-clock deadline and one byte ceiling apply
to the whole call, and the upstream response is closed on every exit path.
"""

from __future__ import annotations

import asyncio
import codecs
import json
import logging
from dataclasses import dataclass, field
from typing import Any, AsyncIterator, Callable, Protocol
from urllib.parse import quote

import httpx

from readme_generator.domain.entities import Provider, ProviderRequestSpec
from readme_generator.domain.exceptions import (
    ContentDecodeError,
    LlmUpstreamError,
    StreamSizeLimitError,
    StreamTimeoutError,
)
from readme_generator.infrastructure.config import Settings
from readme_generator.services.input_validator import validate_custom_endpoint

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 60.0
MAX_STREAM_BYTES = 512 * 1024

SYSTEM_PROMPT = (
    "You are an expert developer and technical writer. You generate "
    "high-quality, comprehensive README.md files for GitHub repositories."
)

_SSE_DATA_PREFIX = "data:"
_SSE_DONE = "[DONE]"

# ── Request builders ────────────────────────────────────────────────────────


def _chat_body(prompt: str, model: str) -> dict[str, Any]:
    return {
        "model": model,
        "messages": [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": prompt},
        ],
        "stream": True,
    }


def _openai_request(
    prompt: str, api_key: str, custom_endpoint: str, settings: Settings, model: str | None
) -> ProviderRequestSpec:
    return ProviderRequestSpec(
        url=settings.openai_url,
        headers={
            "Content-Type": "application/json",
            "Authorization": f"Bearer {api_key}",
        },
        body=_chat_body(prompt, model or settings.openai_model),
    )


def _openrouter_request(
    prompt: str, api_key: str, custom_endpoint: str, settings: Settings, model: str | None
) -> ProviderRequestSpec:
    return ProviderRequestSpec(
        url=validate_custom_endpoint(custom_endpoint) or settings.openrouter_url,
        headers={
            "Content-Type": "application/json",
            "Authorization": f"Bearer {api_key}",
            "HTTP-Referer": settings.openrouter_referer,
        },
        body=_chat_body(prompt, model or settings.openrouter_model),
    )


def _gemini_request(
    prompt: str, api_key: str, custom_endpoint: str, settings: Settings, model: str | None
) -> ProviderRequestSpec:
    model_name = quote(model or settings.gemini_model, safe="")
    return ProviderRequestSpec(
        url=settings.gemini_url_template.format(model=model_name),
        # Header rather than ?key= so the credential stays out of access logs.
        headers={
            "Content-Type": "application/json",
            "x-goog-api-key": api_key,
        },
        body={"contents": [{"parts": [{"text": prompt}]}]},
    )


_RequestBuilder = Callable[[str, str, str, Settings, str | None], ProviderRequestSpec]

_REQUEST_BUILDERS: dict[Provider, _RequestBuilder] = {
    Provider.OPENAI: _openai_request,
    Provider.OPENROUTER: _openrouter_request,
    Provider.GEMINI: _gemini_request,
}


def build_request_spec(
    provider: Provider | str,
    prompt: str,
    api_key: str,
    custom_endpoint: str = "",
    *,
    settings: Settings,
    model: str | None = None,
) -> ProviderRequestSpec:
    """Return the URL, headers and JSON body for one provider call."""
    builder = _REQUEST_BUILDERS[Provider(provider)]
    return builder(prompt, api_key, custom_endpoint or "", settings, model)


# ── Response decoders ───────────────────────────────────────────────────────


def _chat_delta_text(payload: Any) -> str:
    """``choices[0].delta.content`` or ``""``."""
    try:
        content = payload["choices"][0]["delta"].get("content")
    except (KeyError, IndexError, TypeError, AttributeError):
        return ""
    return content if isinstance(content, str) else ""


def _gemini_text(payload: Any) -> str:
    """``candidates[0].content.parts[0].text`` or ``""``."""
    try:
        text = payload["candidates"][0]["content"]["parts"][0].get("text")
    except (KeyError, IndexError, TypeError, AttributeError):
        return ""
    return text if isinstance(text, str) else ""


class ResponseDecoder(Protocol):
    def feed(self, text: str) -> list[str]:
        """Consume decoded text and return the fragments it completes."""
        ...

    def flush(self) -> list[str]:
        """Called once after the upstream body ended."""
        ...


class SseDeltaDecoder:
    """Line-buffered decoder for ``data: {...}`` event streams.

    The last, possibly incomplete line stays buffered until a later chunk
    completes it.  Lines that are not ``data:`` lines, the ``[DONE]``
    sentinel and lines that fail to parse as JSON produce no fragment.
    """

    def __init__(self, extract: Callable[[Any], str]) -> None:
        self._extract = extract
        self._buffer = ""

    def feed(self, text: str) -> list[str]:
        self._buffer += text
        lines = self._buffer.split("\n")
        self._buffer = lines.pop()
        fragments: list[str] = []
        for line in lines:
            fragment = self._parse_line(line)
            if fragment:
                fragments.append(fragment)
        return fragments

    def flush(self) -> list[str]:
        line, self._buffer = self._buffer, ""
        fragment = self._parse_line(line)
        return [fragment] if fragment else []

    def _parse_line(self, line: str) -> str:
        line = line.rstrip("\r")
        if not line.startswith(_SSE_DATA_PREFIX):
            return ""
        data = line[len(_SSE_DATA_PREFIX):].strip()
        if not data or data == _SSE_DONE:
            return ""
        try:
            payload = json.loads(data)
        except ValueError:
            logger.debug("Skipping malformed SSE data line (%d chars)", len(data))
            return ""
        return self._extract(payload)


class JsonDocumentDecoder:
    """Buffers a single-shot JSON body and extracts its text at the end."""

    def __init__(self, extract: Callable[[Any], str]) -> None:
        self._extract = extract
        self._parts: list[str] = []

    def feed(self, text: str) -> list[str]:
        self._parts.append(text)
        return []

    def flush(self) -> list[str]:
        body = "".join(self._parts)
        self._parts = []
        try:
            payload = json.loads(body)
        except ValueError as exc:
            raise ContentDecodeError("LLM provider returned an unparseable response.") from exc
        text = self._extract(payload)
        return [text] if text else []


_DECODERS: dict[Provider, Callable[[], ResponseDecoder]] = {
    Provider.OPENAI: lambda: SseDeltaDecoder(_chat_delta_text),
    Provider.OPENROUTER: lambda: SseDeltaDecoder(_chat_delta_text),
    Provider.GEMINI: lambda: JsonDocumentDecoder(_gemini_text),
}


def _utf8_decoder() -> codecs.IncrementalDecoder:
    return codecs.getincrementaldecoder("utf-8")(errors="replace")


@dataclass
class StreamState:
    """Mutable per-call state; one instance per provider call, never shared."""

    decoder: ResponseDecoder
    received_bytes: int = 0
    text_decoder: codecs.IncrementalDecoder = field(default_factory=_utf8_decoder)


# ── Stream ──────────────────────────────────────────────────────────────────


class ProviderStream:
    """An open provider response exposed as an async iterator of text fragments.

    Iterate it once.  The deadline and byte ceiling are checked around every
    network read; when either trips, the response is closed and the
    iteration ends with the matching exception.
    """

    def __init__(
        self,
        response: httpx.Response,
        state: StreamState,
        *,
        deadline: float,
        max_bytes: int,
        provider: Provider,
    ) -> None:
        self._response = response
        self._state = state
        self._deadline = deadline
        self._max_bytes = max_bytes
        self._provider = provider
        self._closed = False

    def __aiter__(self) -> AsyncIterator[str]:
        return self._fragments()

    async def __aenter__(self) -> ProviderStream:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    @property
    def received_bytes(self) -> int:
        return self._state.received_bytes

    @property
    def closed(self) -> bool:
        return self._closed

    async def aclose(self) -> None:
        if not self._closed:
            self._closed = True
            await self._response.aclose()

    async def _fragments(self) -> AsyncIterator[str]:
        state = self._state
        chunks = self._response.aiter_bytes()
        try:
            while True:
                try:
                    async with asyncio.timeout_at(self._deadline):
                        chunk = await anext(chunks)
                except StopAsyncIteration:
                    break
                except (TimeoutError, httpx.TimeoutException) as exc:
                    raise StreamTimeoutError("LLM response aborted or timed out.") from exc
                except httpx.HTTPError as exc:
                    raise LlmUpstreamError(
                        f"Connection to {self._provider.value} provider failed: "
                        f"{type(exc).__name__}"
                    ) from exc

                state.received_bytes += len(chunk)
                if state.received_bytes > self._max_bytes:
                    logger.warning(
                        "%s response exceeded %d bytes — aborting",
                        self._provider.value,
                        self._max_bytes,
                    )
                    raise StreamSizeLimitError("LLM response exceeded safety limit.")

                for fragment in state.decoder.feed(state.text_decoder.decode(chunk)):
                    yield fragment

            tail = state.decoder.feed(state.text_decoder.decode(b"", final=True))
            for fragment in tail + state.decoder.flush():
                yield fragment
        finally:
            await self.aclose()


# ── Adapter ─────────────────────────────────────────────────────────────────


class ProviderStreamAdapter:
    """Concrete ``LlmGateway`` speaking raw HTTP to OpenAI, Gemini and OpenRouter."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        settings: Settings,
        *,
        timeout: float | None = None,
        max_bytes: int | None = None,
    ) -> None:
        self._client = client
        self._settings = settings
        self._timeout = timeout if timeout is not None else settings.llm_timeout_seconds
        self._max_bytes = max_bytes if max_bytes is not None else settings.max_stream_bytes

    async def open_stream(
        self,
        prompt: str,
        api_key: str,
        provider: Provider | str,
        custom_endpoint: str = "",
        *,
        model: str | None = None,
    ) -> ProviderStream:
        """Send the request and check the status; fragments are read lazily."""
        provider = Provider(provider)
        spec = build_request_spec(
            provider, prompt, api_key, custom_endpoint, settings=self._settings, model=model
        )
        deadline = asyncio.get_running_loop().time() + self._timeout
        request = self._client.build_request(
            "POST",
            spec.url,
            headers=spec.headers,
            json=spec.body,
            timeout=httpx.Timeout(self._timeout),
        )

        try:
            async with asyncio.timeout_at(deadline):
                response = await self._client.send(request, stream=True)
        except (TimeoutError, httpx.TimeoutException) as exc:
            raise StreamTimeoutError("LLM response aborted or timed out.") from exc
        except httpx.HTTPError as exc:
            raise LlmUpstreamError(
                f"Could not reach {provider.value} provider: {type(exc).__name__}"
            ) from exc

        if not response.is_success:
            try:
                body = await self._read_error_body(response, deadline)
            finally:
                await response.aclose()
            logger.warning(
                "%s provider returned HTTP %d", provider.value, response.status_code
            )
            raise LlmUpstreamError(
                f"LLM API error (HTTP {response.status_code}).",
                status_code=response.status_code,
                body=body,
            )

        state = StreamState(decoder=_DECODERS[provider]())
        return ProviderStream(
            response,
            state,
            deadline=deadline,
            max_bytes=self._max_bytes,
            provider=provider,
        )

    async def stream_provider_response(
        self,
        prompt: str,
        api_key: str,
        provider: Provider | str,
        custom_endpoint: str = "",
        *,
        model: str | None = None,
    ) -> AsyncIterator[str]:
        """One-call form of :meth:`open_stream` for callers that just iterate."""
        stream = await self.open_stream(
            prompt, api_key, provider, custom_endpoint, model=model
        )
        async with stream:
            async for fragment in stream:
                yield fragment

    async def _read_error_body(self, response: httpx.Response, deadline: float) -> str:
        """Read at most ``max_bytes`` of an error body for diagnostics."""
        collected = bytearray()
        try:
            async with asyncio.timeout_at(deadline):
                async for chunk in response.aiter_bytes():
                    collected.extend(chunk)
                    if len(collected) >= self._max_bytes:
                        break
        except (TimeoutError, httpx.HTTPError):
            logger.debug("Could not read full error body", exc_info=True)
        return collected[: self._max_bytes].decode("utf-8", errors="replace")
