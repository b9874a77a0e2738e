"""Streamed chat completion chunks and the reader that yields them."""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Mapping

from .chat import (
    ContentFilterResults,
    FunctionCall,
    PromptAnnotation,
    ToolCall,
    Usage,
)

_DATA_PREFIX = re.compile(r"^data:\s*")
_DONE = "[DONE]"


def _text(value: Any) -> str:
    return "" if value is None else value


@dataclass
class ChatCompletionStreamChoiceDelta:
    content: str = ""
    role: str = ""
    function_call: FunctionCall | None = None
    tool_calls: list[ToolCall] = field(default_factory=list)
    refusal: str = ""
    reasoning_content: str = ""

    @classmethod
    def from_dict(cls, data: Mapping | None) -> ChatCompletionStreamChoiceDelta:
        data = data or {}
        function_call = data.get("function_call")
        return cls(
            content=_text(data.get("content")),
            role=_text(data.get("role")),
            function_call=None if function_call is None else FunctionCall.from_dict(function_call),
            tool_calls=[ToolCall.from_dict(call) for call in data.get("tool_calls") or []],
            refusal=_text(data.get("refusal")),
            reasoning_content=_text(data.get("reasoning_content")),
        )


@dataclass
class ChatCompletionTokenLogprobTopLogprob:
    token: str = ""
    bytes: list[int] | None = None
    logprob: float = 0.0

    @classmethod
    def from_dict(cls, data: Mapping) -> ChatCompletionTokenLogprobTopLogprob:
        return cls(_text(data.get("token")), data.get("bytes"), data.get("logprob") or 0.0)


@dataclass
class ChatCompletionTokenLogprob:
    token: str = ""
    bytes: list[int] | None = None
    logprob: float = 0.0
    top_logprobs: list[ChatCompletionTokenLogprobTopLogprob] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Mapping) -> ChatCompletionTokenLogprob:
        return cls(
            token=_text(data.get("token")),
            bytes=data.get("bytes"),
            logprob=data.get("logprob") or 0.0,
            top_logprobs=[
                ChatCompletionTokenLogprobTopLogprob.from_dict(item)
                for item in data.get("top_logprobs") or []
            ],
        )


@dataclass
class ChatCompletionStreamChoiceLogprobs:
    content: list[ChatCompletionTokenLogprob] | None = None
    refusal: list[ChatCompletionTokenLogprob] | None = None

    @classmethod
    def from_dict(cls, data: Mapping) -> ChatCompletionStreamChoiceLogprobs:
        def tokens(key: str) -> list[ChatCompletionTokenLogprob] | None:
            items = data.get(key)
            if items is None:
                return None
            return [ChatCompletionTokenLogprob.from_dict(item) for item in items]

        return cls(content=tokens("content"), refusal=tokens("refusal"))


@dataclass
class ChatCompletionStreamChoice:
    index: int = 0
    delta: ChatCompletionStreamChoiceDelta = field(default_factory=ChatCompletionStreamChoiceDelta)
    logprobs: ChatCompletionStreamChoiceLogprobs | None = None
    finish_reason: str = ""
    content_filter_results: ContentFilterResults = field(default_factory=ContentFilterResults)

    @classmethod
    def from_dict(cls, data: Mapping) -> ChatCompletionStreamChoice:
        logprobs = data.get("logprobs")
        return cls(
            index=data.get("index") or 0,
            delta=ChatCompletionStreamChoiceDelta.from_dict(data.get("delta")),
            logprobs=None if logprobs is None else ChatCompletionStreamChoiceLogprobs.from_dict(logprobs),
            finish_reason=_text(data.get("finish_reason")),
            content_filter_results=ContentFilterResults.from_dict(data.get("content_filter_results")),
        )


@dataclass
class PromptFilterResult:
    index: int = 0
    content_filter_results: ContentFilterResults = field(default_factory=ContentFilterResults)

    @classmethod
    def from_dict(cls, data: Mapping) -> PromptFilterResult:
        return cls(
            index=data.get("index") or 0,
            content_filter_results=ContentFilterResults.from_dict(data.get("content_filter_results")),
        )


@dataclass
class ChatCompletionStreamResponse:
    id: str = ""
    object: str = ""
    created: int = 0
    model: str = ""
    choices: list[ChatCompletionStreamChoice] = field(default_factory=list)
    system_fingerprint: str = ""
    prompt_annotations: list[PromptAnnotation] = field(default_factory=list)
    prompt_filter_results: list[PromptFilterResult] = field(default_factory=list)
    usage: Usage | None = None

    @classmethod
    def from_dict(cls, data: Mapping) -> ChatCompletionStreamResponse:
        usage = data.get("usage")
        return cls(
            id=_text(data.get("id")),
            object=_text(data.get("object")),
            created=data.get("created") or 0,
            model=_text(data.get("model")),
            choices=[ChatCompletionStreamChoice.from_dict(c) for c in data.get("choices") or []],
            system_fingerprint=_text(data.get("system_fingerprint")),
            prompt_annotations=[
                PromptAnnotation.from_dict(item) for item in data.get("prompt_annotations") or []
            ],
            prompt_filter_results=[
                PromptFilterResult.from_dict(item) for item in data.get("prompt_filter_results") or []
            ],
            usage=None if usage is None else Usage.from_dict(usage),
        )


class StreamAPIError(Exception):
    """An error object reported by the API."""

    def __init__(
        self,
        message: str = "",
        *,
        code: Any = None,
        param: str | None = None,
        error_type: str = "",
        http_status_code: int = 0,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.param = param
        self.type = error_type
        self.http_status_code = http_status_code

    @classmethod
    def from_dict(cls, data: Mapping, http_status_code: int = 0) -> StreamAPIError:
        message = data.get("message")
        if isinstance(message, list):
            message = ", ".join(str(part) for part in message)
        return cls(
            _text(message),
            code=data.get("code"),
            param=data.get("param"),
            error_type=_text(data.get("type")),
            http_status_code=http_status_code,
        )

    def __str__(self) -> str:
        if self.http_status_code > 0:
            return f"error, status code: {self.http_status_code}, message: {self.message}"
        return self.message


class ChatCompletionStream:
    """Reads server-sent chat completion chunks from an iterable of lines."""

    def __init__(
        self,
        lines: Iterable[str | bytes],
        headers: Mapping[str, str] | None = None,
        close: Callable[[], Any] | None = None,
    ) -> None:
        self._lines = iter(lines)
        self.headers = headers if headers is not None else {}
        self._close = close
        self._closed = False
        self._finished = False
        self._unprefixed: list[str] = []

    def recv(self) -> ChatCompletionStreamResponse:
        """Return the next chunk; raise EOFError once the stream is over."""
        if self._finished:
            raise EOFError("stream finished")
        for raw in self._lines:
            line = raw.decode("utf-8") if isinstance(raw, (bytes, bytearray)) else raw
            line = line.strip()
            match = _DATA_PREFIX.match(line)
            if match is None:
                if line:
                    self._unprefixed.append(line)
                continue
            payload = line[match.end():]
            if payload == _DONE:
                self._finished = True
                raise EOFError("stream finished")
            data = json.loads(payload)
            if isinstance(data, Mapping) and data.get("error") is not None:
                raise StreamAPIError.from_dict(data["error"])
            return ChatCompletionStreamResponse.from_dict(data)
        self._finished = True
        error = self._unprefixed_error()
        if error is not None:
            raise error
        raise EOFError("stream finished")

    def _unprefixed_error(self) -> StreamAPIError | None:
        if not self._unprefixed:
            return None
        try:
            data = json.loads("\n".join(self._unprefixed))
        except ValueError:
            return None
        if isinstance(data, Mapping) and isinstance(data.get("error"), Mapping):
            return StreamAPIError.from_dict(data["error"])
        return None

    def __iter__(self) -> ChatCompletionStream:
        return self

    def __next__(self) -> ChatCompletionStreamResponse:
        try:
            return self.recv()
        except EOFError:
            raise StopIteration from None

    def close(self) -> None:
        if not self._closed:
            self._closed = True
            if self._close is not None:
                self._close()

    def __enter__(self) -> ChatCompletionStream:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()