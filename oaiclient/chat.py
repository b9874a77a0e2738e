"""Chat completion data types and their JSON encoding."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping


class ChatMessageRole(str, Enum):
    """Roles a chat message can carry."""

    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"
    FUNCTION = "function"
    TOOL = "tool"
    DEVELOPER = "developer"


class ImageURLDetail(str, Enum):
    HIGH = "high"
    LOW = "low"
    AUTO = "auto"


class ChatMessagePartType(str, Enum):
    TEXT = "text"
    IMAGE_URL = "image_url"


class ChatCompletionResponseFormatType(str, Enum):
    JSON_OBJECT = "json_object"
    JSON_SCHEMA = "json_schema"
    TEXT = "text"


class ToolType(str, Enum):
    FUNCTION = "function"


class FinishReason(str, Enum):
    STOP = "stop"
    LENGTH = "length"
    FUNCTION_CALL = "function_call"
    TOOL_CALLS = "tool_calls"
    CONTENT_FILTER = "content_filter"
    NULL = "null"


class ContentFieldsMisusedError(ValueError):
    """A message sets both plain content and multi-part content."""

    def __init__(self) -> None:
        super().__init__("can't use both Content and MultiContent properties simultaneously")


class ChatCompletionStreamNotSupportedError(ValueError):
    """A streaming request was passed to the non-streaming call."""

    def __init__(self) -> None:
        super().__init__(
            "streaming is not supported with this method, please use create_chat_completion_stream"
        )


def _value(obj: Any) -> Any:
    """Turn an object into plain JSON-ready data."""
    if isinstance(obj, Enum):
        return obj.value
    if hasattr(obj, "to_dict"):
        return obj.to_dict()
    if isinstance(obj, (list, tuple)):
        return [_value(item) for item in obj]
    if isinstance(obj, Mapping):
        return {key: _value(item) for key, item in obj.items()}
    return obj


def _is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, (str, bytes, list, tuple, dict)):
        return len(value) == 0
    if isinstance(value, (bool, int, float)):
        return not value
    return False


def _put(target: dict, key: str, value: Any) -> None:
    """Set key only when value is not empty."""
    if not _is_empty(value):
        target[key] = _value(value)


def _put_any(target: dict, key: str, value: Any) -> None:
    """Set key whenever value is not None."""
    if value is not None:
        target[key] = _value(value)


def _text(value: Any) -> str:
    return "" if value is None else value


def _dumps(obj: Any) -> str:
    return json.dumps(obj, separators=(",", ":"), ensure_ascii=False)


def finish_reason_to_json(reason: Any) -> str | None:
    """Return the JSON value of a finish reason: None for null or empty."""
    if reason is None:
        return None
    text = reason.value if isinstance(reason, Enum) else str(reason)
    if text in ("", FinishReason.NULL.value):
        return None
    return text


@dataclass
class SeverityFilter:
    filtered: bool = False
    severity: str = ""

    def to_dict(self) -> dict:
        result: dict = {"filtered": self.filtered}
        _put(result, "severity", self.severity)
        return result

    @classmethod
    def from_dict(cls, data: Mapping | None) -> SeverityFilter:
        data = data or {}
        return cls(bool(data.get("filtered", False)), _text(data.get("severity")))


@dataclass
class DetectionFilter:
    filtered: bool = False
    detected: bool = False

    def to_dict(self) -> dict:
        return {"filtered": self.filtered, "detected": self.detected}

    @classmethod
    def from_dict(cls, data: Mapping | None) -> DetectionFilter:
        data = data or {}
        return cls(bool(data.get("filtered", False)), bool(data.get("detected", False)))


@dataclass
class ContentFilterResults:
    hate: SeverityFilter = field(default_factory=SeverityFilter)
    self_harm: SeverityFilter = field(default_factory=SeverityFilter)
    sexual: SeverityFilter = field(default_factory=SeverityFilter)
    violence: SeverityFilter = field(default_factory=SeverityFilter)
    jailbreak: DetectionFilter = field(default_factory=DetectionFilter)
    profanity: DetectionFilter = field(default_factory=DetectionFilter)

    def to_dict(self) -> dict:
        return {
            "hate": self.hate.to_dict(),
            "self_harm": self.self_harm.to_dict(),
            "sexual": self.sexual.to_dict(),
            "violence": self.violence.to_dict(),
            "jailbreak": self.jailbreak.to_dict(),
            "profanity": self.profanity.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Mapping | None) -> ContentFilterResults:
        data = data or {}
        return cls(
            hate=SeverityFilter.from_dict(data.get("hate")),
            self_harm=SeverityFilter.from_dict(data.get("self_harm")),
            sexual=SeverityFilter.from_dict(data.get("sexual")),
            violence=SeverityFilter.from_dict(data.get("violence")),
            jailbreak=DetectionFilter.from_dict(data.get("jailbreak")),
            profanity=DetectionFilter.from_dict(data.get("profanity")),
        )


@dataclass
class PromptAnnotation:
    prompt_index: int = 0
    content_filter_results: ContentFilterResults = field(default_factory=ContentFilterResults)

    def to_dict(self) -> dict:
        result: dict = {}
        _put(result, "prompt_index", self.prompt_index)
        result["content_filter_results"] = self.content_filter_results.to_dict()
        return result

    @classmethod
    def from_dict(cls, data: Mapping | None) -> PromptAnnotation:
        data = data or {}
        return cls(
            prompt_index=data.get("prompt_index") or 0,
            content_filter_results=ContentFilterResults.from_dict(data.get("content_filter_results")),
        )


@dataclass
class ChatMessageImageURL:
    url: str = ""
    detail: str = ""

    def to_dict(self) -> dict:
        result: dict = {}
        _put(result, "url", self.url)
        _put(result, "detail", self.detail)
        return result

    @classmethod
    def from_dict(cls, data: Mapping | None) -> ChatMessageImageURL:
        data = data or {}
        return cls(_text(data.get("url")), _text(data.get("detail")))


@dataclass
class ChatMessagePart:
    type: str = ""
    text: str = ""
    image_url: ChatMessageImageURL | None = None

    def to_dict(self) -> dict:
        result: dict = {}
        _put(result, "type", self.type)
        _put(result, "text", self.text)
        _put(result, "image_url", self.image_url)
        return result

    @classmethod
    def from_dict(cls, data: Mapping) -> ChatMessagePart:
        if not isinstance(data, Mapping):
            raise ValueError("message part must be a JSON object")
        image = data.get("image_url")
        return cls(
            type=_text(data.get("type")),
            text=_text(data.get("text")),
            image_url=None if image is None else ChatMessageImageURL.from_dict(image),
        )


@dataclass
class FunctionCall:
    name: str = ""
    arguments: str = ""

    def to_dict(self) -> dict:
        result: dict = {}
        _put(result, "name", self.name)
        _put(result, "arguments", self.arguments)
        return result

    @classmethod
    def from_dict(cls, data: Mapping | None) -> FunctionCall:
        data = data or {}
        return cls(_text(data.get("name")), _text(data.get("arguments")))


@dataclass
class ToolCall:
    id: str = ""
    type: str = ToolType.FUNCTION
    function: FunctionCall = field(default_factory=FunctionCall)
    index: int | None = None

    def to_dict(self) -> dict:
        result: dict = {}
        _put_any(result, "index", self.index)
        _put(result, "id", self.id)
        result["type"] = _value(self.type)
        result["function"] = self.function.to_dict()
        return result

    @classmethod
    def from_dict(cls, data: Mapping) -> ToolCall:
        return cls(
            id=_text(data.get("id")),
            type=_text(data.get("type")),
            function=FunctionCall.from_dict(data.get("function")),
            index=data.get("index"),
        )


@dataclass
class ChatCompletionMessage:
    role: str
    content: str = ""
    refusal: str = ""
    multi_content: list[ChatMessagePart] | None = None
    name: str = ""
    reasoning_content: str = ""
    function_call: FunctionCall | None = None
    tool_calls: list[ToolCall] = field(default_factory=list)
    tool_call_id: str = ""

    def to_dict(self) -> dict:
        if self.content and self.multi_content is not None:
            raise ContentFieldsMisusedError()
        result: dict = {"role": _value(self.role)}
        if self.multi_content:
            result["content"] = [part.to_dict() for part in self.multi_content]
        else:
            _put(result, "content", self.content)
        _put(result, "refusal", self.refusal)
        _put(result, "name", self.name)
        _put(result, "reasoning_content", self.reasoning_content)
        _put(result, "function_call", self.function_call)
        _put(result, "tool_calls", self.tool_calls)
        _put(result, "tool_call_id", self.tool_call_id)
        return result

    def to_json(self) -> str:
        return _dumps(self.to_dict())

    @classmethod
    def from_dict(cls, data: Mapping) -> ChatCompletionMessage:
        if not isinstance(data, Mapping):
            raise ValueError(f"chat message must be a JSON object, not {type(data).__name__}")
        content = data.get("content")
        multi_content = None
        if isinstance(content, list):
            multi_content = [ChatMessagePart.from_dict(part) for part in content]
            text = ""
        elif content is None or isinstance(content, str):
            text = _text(content)
        else:
            raise ValueError("chat message content must be a string or a list of parts")
        function_call = data.get("function_call")
        return cls(
            role=_text(data.get("role")),
            content=text,
            refusal=_text(data.get("refusal")),
            multi_content=multi_content,
            name=_text(data.get("name")),
            reasoning_content=_text(data.get("reasoning_content")),
            function_call=None if function_call is None else FunctionCall.from_dict(function_call),
            tool_calls=[ToolCall.from_dict(call) for call in data.get("tool_calls") or []],
            tool_call_id=_text(data.get("tool_call_id")),
        )

    @classmethod
    def from_json(cls, text: str | bytes) -> ChatCompletionMessage:
        return cls.from_dict(json.loads(text))


@dataclass
class ChatCompletionResponseFormatJSONSchema:
    name: str
    schema: Any = None
    description: str = ""
    strict: bool = False

    def to_dict(self) -> dict:
        result: dict = {"name": self.name}
        _put(result, "description", self.description)
        result["schema"] = _value(self.schema)
        result["strict"] = self.strict
        return result


@dataclass
class ChatCompletionResponseFormat:
    type: str = ""
    json_schema: ChatCompletionResponseFormatJSONSchema | None = None

    def to_dict(self) -> dict:
        result: dict = {}
        _put(result, "type", self.type)
        _put(result, "json_schema", self.json_schema)
        return result


@dataclass
class StreamOptions:
    include_usage: bool = False

    def to_dict(self) -> dict:
        result: dict = {}
        _put(result, "include_usage", self.include_usage)
        return result


def _parameters_value(parameters: Any) -> Any:
    if isinstance(parameters, (str, bytes, bytearray)):
        return json.loads(parameters)
    return _value(parameters)


@dataclass
class FunctionDefinition:
    name: str
    description: str = ""
    strict: bool = False
    parameters: Any = None

    def to_dict(self) -> dict:
        result: dict = {"name": self.name}
        _put(result, "description", self.description)
        _put(result, "strict", self.strict)
        result["parameters"] = _parameters_value(self.parameters)
        return result

    @classmethod
    def from_dict(cls, data: Mapping) -> FunctionDefinition:
        return cls(
            name=_text(data.get("name")),
            description=_text(data.get("description")),
            strict=bool(data.get("strict", False)),
            parameters=data.get("parameters"),
        )


@dataclass
class Tool:
    type: str = ToolType.FUNCTION
    function: FunctionDefinition | None = None

    def to_dict(self) -> dict:
        result: dict = {"type": _value(self.type)}
        _put(result, "function", self.function)
        return result


@dataclass
class ToolFunction:
    name: str

    def to_dict(self) -> dict:
        return {"name": self.name}


@dataclass
class ToolChoice:
    function: ToolFunction
    type: str = ToolType.FUNCTION

    def to_dict(self) -> dict:
        return {"type": _value(self.type), "function": self.function.to_dict()}


@dataclass
class TopLogProbs:
    token: str = ""
    logprob: float = 0.0
    bytes: list[int] | None = None

    def to_dict(self) -> dict:
        result: dict = {"token": self.token, "logprob": self.logprob}
        _put(result, "bytes", self.bytes)
        return result

    @classmethod
    def from_dict(cls, data: Mapping) -> TopLogProbs:
        return cls(_text(data.get("token")), data.get("logprob") or 0.0, data.get("bytes"))


@dataclass
class LogProb:
    token: str = ""
    logprob: float = 0.0
    bytes: list[int] | None = None
    top_logprobs: list[TopLogProbs] = field(default_factory=list)

    def to_dict(self) -> dict:
        result: dict = {"token": self.token, "logprob": self.logprob}
        _put(result, "bytes", self.bytes)
        result["top_logprobs"] = [item.to_dict() for item in self.top_logprobs]
        return result

    @classmethod
    def from_dict(cls, data: Mapping) -> LogProb:
        return cls(
            token=_text(data.get("token")),
            logprob=data.get("logprob") or 0.0,
            bytes=data.get("bytes"),
            top_logprobs=[TopLogProbs.from_dict(item) for item in data.get("top_logprobs") or []],
        )


@dataclass
class LogProbs:
    content: list[LogProb] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {"content": [item.to_dict() for item in self.content]}

    @classmethod
    def from_dict(cls, data: Mapping | None) -> LogProbs:
        data = data or {}
        return cls([LogProb.from_dict(item) for item in data.get("content") or []])


@dataclass
class Prediction:
    content: str
    type: str = "content"

    def to_dict(self) -> dict:
        return {"content": self.content, "type": self.type}


@dataclass
class Usage:
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0

    def to_dict(self) -> dict:
        return {
            "prompt_tokens": self.prompt_tokens,
            "completion_tokens": self.completion_tokens,
            "total_tokens": self.total_tokens,
        }

    @classmethod
    def from_dict(cls, data: Mapping | None) -> Usage:
        data = data or {}
        return cls(
            prompt_tokens=data.get("prompt_tokens") or 0,
            completion_tokens=data.get("completion_tokens") or 0,
            total_tokens=data.get("total_tokens") or 0,
        )


@dataclass
class ChatCompletionChoice:
    index: int = 0
    message: ChatCompletionMessage = field(default_factory=lambda: ChatCompletionMessage(role=""))
    finish_reason: str = ""
    logprobs: LogProbs | None = None
    content_filter_results: ContentFilterResults = field(default_factory=ContentFilterResults)

    def to_dict(self) -> dict:
        result: dict = {
            "index": self.index,
            "message": self.message.to_dict(),
            "finish_reason": finish_reason_to_json(self.finish_reason),
        }
        _put(result, "logprobs", self.logprobs)
        result["content_filter_results"] = self.content_filter_results.to_dict()
        return result

    @classmethod
    def from_dict(cls, data: Mapping) -> ChatCompletionChoice:
        logprobs = data.get("logprobs")
        return cls(
            index=data.get("index") or 0,
            message=ChatCompletionMessage.from_dict(data.get("message") or {}),
            finish_reason=_text(data.get("finish_reason")),
            logprobs=None if logprobs is None else LogProbs.from_dict(logprobs),
            content_filter_results=ContentFilterResults.from_dict(data.get("content_filter_results")),
        )


@dataclass
class ChatCompletionRequest:
    """Parameters of a chat completion call."""

    model: str = ""
    messages: list[ChatCompletionMessage] | None = None
    max_tokens: int = 0
    max_completion_tokens: int = 0
    temperature: float = 0.0
    top_p: float = 0.0
    n: int = 0
    stream: bool = False
    stop: list[str] = field(default_factory=list)
    presence_penalty: float = 0.0
    response_format: ChatCompletionResponseFormat | None = None
    seed: int | None = None
    frequency_penalty: float = 0.0
    logit_bias: dict[str, int] = field(default_factory=dict)
    logprobs: bool = False
    top_logprobs: int = 0
    user: str = ""
    functions: list[FunctionDefinition] = field(default_factory=list)
    function_call: Any = None
    tools: list[Tool] = field(default_factory=list)
    tool_choice: Any = None
    stream_options: StreamOptions | None = None
    parallel_tool_calls: Any = None
    store: bool = False
    reasoning_effort: str = ""
    metadata: dict[str, str] = field(default_factory=dict)
    prediction: Prediction | None = None
    chat_template_kwargs: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict:
        result: dict = {
            "model": self.model,
            "messages": None if self.messages is None else [m.to_dict() for m in self.messages],
        }
        _put(result, "max_tokens", self.max_tokens)
        _put(result, "max_completion_tokens", self.max_completion_tokens)
        _put(result, "temperature", self.temperature)
        _put(result, "top_p", self.top_p)
        _put(result, "n", self.n)
        _put(result, "stream", self.stream)
        _put(result, "stop", self.stop)
        _put(result, "presence_penalty", self.presence_penalty)
        _put(result, "response_format", self.response_format)
        _put_any(result, "seed", self.seed)
        _put(result, "frequency_penalty", self.frequency_penalty)
        _put(result, "logit_bias", self.logit_bias)
        _put(result, "logprobs", self.logprobs)
        _put(result, "top_logprobs", self.top_logprobs)
        _put(result, "user", self.user)
        _put(result, "functions", self.functions)
        _put_any(result, "function_call", self.function_call)
        _put(result, "tools", self.tools)
        _put_any(result, "tool_choice", self.tool_choice)
        _put(result, "stream_options", self.stream_options)
        _put_any(result, "parallel_tool_calls", self.parallel_tool_calls)
        _put(result, "store", self.store)
        _put(result, "reasoning_effort", self.reasoning_effort)
        _put(result, "metadata", self.metadata)
        _put(result, "prediction", self.prediction)
        _put(result, "chat_template_kwargs", self.chat_template_kwargs)
        return result

    def to_json(self) -> str:
        return _dumps(self.to_dict())


@dataclass
class ChatCompletionResponse:
    id: str = ""
    object: str = ""
    created: int = 0
    model: str = ""
    choices: list[ChatCompletionChoice] = field(default_factory=list)
    usage: Usage = field(default_factory=Usage)
    system_fingerprint: str = ""
    prompt_filter_results: list = field(default_factory=list)
    headers: Mapping[str, str] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping, headers: Mapping[str, str] | None = None) -> ChatCompletionResponse:
        from .chat_stream import PromptFilterResult

        return cls(
            id=_text(data.get("id")),
            object=_text(data.get("object")),
            created=data.get("created") or 0,
            model=_text(data.get("model")),
            choices=[ChatCompletionChoice.from_dict(c) for c in data.get("choices") or []],
            usage=Usage.from_dict(data.get("usage")),
            system_fingerprint=_text(data.get("system_fingerprint")),
            prompt_filter_results=[
                PromptFilterResult.from_dict(item) for item in data.get("prompt_filter_results") or []
            ],
            headers=headers if headers is not None else {},
        )