"""HTTP client for the API: configuration, transport and chat calls."""

from __future__ import annotations

import json
import urllib.error
import urllib.request
from dataclasses import dataclass, replace
from http import HTTPStatus
from typing import Any, Iterator, Mapping

from .assistant import AssistantsMixin
from .audio import AudioMixin
from .batch import BatchMixin
from .chat import (
    ChatCompletionRequest,
    ChatCompletionResponse,
    ChatCompletionStreamNotSupportedError,
)
from .chat_stream import ChatCompletionStream, StreamAPIError

DEFAULT_BASE_URL = "https://api.openai.com/v1"
CHAT_COMPLETIONS_SUFFIX = "/chat/completions"


class APIError(StreamAPIError):
    """An error response returned by the API."""


@dataclass
class ClientConfig:
    auth_token: str = ""
    base_url: str = DEFAULT_BASE_URL
    org_id: str = ""
    assistant_version: str = "v2"
    timeout: float | None = None


@dataclass
class HTTPResponse:
    """Status, headers and a readable binary body of an HTTP response."""

    status: int
    headers: Mapping[str, str]
    body: Any

    def read(self) -> bytes:
        """Read the whole body and close it."""
        try:
            return self.body.read()
        finally:
            self.close()

    def close(self) -> None:
        close = getattr(self.body, "close", None)
        if close is not None:
            close()


class _Headers(Mapping[str, str]):
    """Read-only header map with case-insensitive keys."""

    def __init__(self, headers: Mapping[str, str]) -> None:
        self._data = {str(key).lower(): value for key, value in dict(headers).items()}

    def __getitem__(self, key: str) -> str:
        return self._data[key.lower()]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"_Headers({self._data!r})"


class UrllibTransport:
    """Sends requests with the standard library."""

    def __init__(self, timeout: float | None = None) -> None:
        self.timeout = timeout

    def send(
        self, method: str, url: str, headers: Mapping[str, str], body: bytes | None
    ) -> HTTPResponse:
        request = urllib.request.Request(url, data=body, headers=dict(headers), method=method)
        try:
            if self.timeout is None:
                response = urllib.request.urlopen(request)
            else:
                response = urllib.request.urlopen(request, timeout=self.timeout)
        except urllib.error.HTTPError as error:
            return HTTPResponse(error.code, dict(error.headers.items()), error)
        return HTTPResponse(response.status, dict(response.headers.items()), response)


def _error_from(status: int, raw: bytes) -> APIError:
    try:
        data = json.loads(raw)
    except ValueError:
        data = None
    if isinstance(data, Mapping) and isinstance(data.get("error"), Mapping):
        return APIError.from_dict(data["error"], status)
    text = raw.decode("utf-8", "replace").strip()
    if not text:
        try:
            text = HTTPStatus(status).phrase
        except ValueError:
            text = "request failed"
    return APIError(text, http_status_code=status)


class Client(AssistantsMixin, AudioMixin, BatchMixin):
    """Client for the chat, assistant, audio and batch endpoints."""

    def __init__(self, config: ClientConfig | str, transport: Any = None) -> None:
        if isinstance(config, str):
            config = ClientConfig(auth_token=config)
        self.config = config
        self.assistant_version = config.assistant_version
        self.transport = transport if transport is not None else UrllibTransport(config.timeout)

    def _full_url(self, suffix: str) -> str:
        return self.config.base_url.rstrip("/") + suffix

    def _send(
        self,
        method: str,
        suffix: str,
        *,
        body: Any = None,
        content_type: str | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> HTTPResponse:
        request_headers: dict[str, str] = {}
        if self.config.auth_token:
            request_headers["Authorization"] = f"Bearer {self.config.auth_token}"
        if self.config.org_id:
            request_headers["OpenAI-Organization"] = self.config.org_id
        data: bytes | None
        if body is None:
            data = None
        elif isinstance(body, (bytes, bytearray)):
            data = bytes(body)
        else:
            data = json.dumps(body, separators=(",", ":"), ensure_ascii=False).encode("utf-8")
            content_type = content_type or "application/json"
        if data is not None:
            request_headers["Content-Type"] = content_type or "application/octet-stream"
        request_headers.update(headers or {})
        response = self.transport.send(method, self._full_url(suffix), request_headers, data)
        if response.status < 200 or response.status >= 400:
            raise _error_from(response.status, response.read())
        return response

    def _api_call(
        self,
        method: str,
        suffix: str,
        *,
        body: Any = None,
        content_type: str | None = None,
        headers: Mapping[str, str] | None = None,
        model: str | None = None,
        expect_json: bool = True,
    ) -> tuple[Any, Mapping[str, str]]:
        """Send a request; return the decoded body (raw bytes if not JSON) and headers."""
        response = self._send(method, suffix, body=body, content_type=content_type, headers=headers)
        raw = response.read()
        response_headers = _Headers(response.headers)
        if not expect_json:
            return raw, response_headers
        if not raw.strip():
            return None, response_headers
        return json.loads(raw), response_headers

    def create_chat_completion(self, request: ChatCompletionRequest) -> ChatCompletionResponse:
        """Create a completion for the chat messages."""
        if request.stream:
            raise ChatCompletionStreamNotSupportedError()
        data, headers = self._api_call(
            "POST", CHAT_COMPLETIONS_SUFFIX, body=request.to_dict(), model=request.model
        )
        return ChatCompletionResponse.from_dict(data or {}, headers)

    def create_chat_completion_stream(self, request: ChatCompletionRequest) -> ChatCompletionStream:
        """Create a chat completion delivered as a stream of chunks."""
        request = replace(request, stream=True)
        response = self._send(
            "POST",
            CHAT_COMPLETIONS_SUFFIX,
            body=request.to_dict(),
            headers={
                "Accept": "text/event-stream",
                "Cache-Control": "no-cache",
                "Connection": "keep-alive",
            },
        )
        return ChatCompletionStream(response.body, _Headers(response.headers), response.close)