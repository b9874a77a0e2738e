"""Assistant data types and the assistant endpoints of the client."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Mapping
from urllib.parse import urlencode

from .chat import FunctionDefinition

ASSISTANTS_SUFFIX = "/assistants"
ASSISTANTS_FILES_SUFFIX = "/files"


def _plain(value: Any) -> Any:
    return value.value if isinstance(value, Enum) else value


def _text(value: Any) -> str:
    return "" if value is None else value


class AssistantToolType(str, Enum):
    CODE_INTERPRETER = "code_interpreter"
    RETRIEVAL = "retrieval"
    FUNCTION = "function"
    FILE_SEARCH = "file_search"


@dataclass
class AssistantTool:
    type: str
    function: FunctionDefinition | None = None

    def to_dict(self) -> dict:
        result: dict = {"type": _plain(self.type)}
        if self.function is not None:
            result["function"] = self.function.to_dict()
        return result

    @classmethod
    def from_dict(cls, data: Mapping) -> AssistantTool:
        function = data.get("function")
        return cls(
            type=_text(data.get("type")),
            function=None if function is None else FunctionDefinition.from_dict(function),
        )


@dataclass
class AssistantToolFileSearch:
    vector_store_ids: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {"vector_store_ids": list(self.vector_store_ids)}


@dataclass
class AssistantToolCodeInterpreter:
    file_ids: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {"file_ids": list(self.file_ids)}


@dataclass
class AssistantToolResource:
    file_search: AssistantToolFileSearch | None = None
    code_interpreter: AssistantToolCodeInterpreter | None = None

    def to_dict(self) -> dict:
        result: dict = {}
        if self.file_search is not None:
            result["file_search"] = self.file_search.to_dict()
        if self.code_interpreter is not None:
            result["code_interpreter"] = self.code_interpreter.to_dict()
        return result

    @classmethod
    def from_dict(cls, data: Mapping) -> AssistantToolResource:
        file_search = data.get("file_search")
        code_interpreter = data.get("code_interpreter")
        return cls(
            file_search=None
            if file_search is None
            else AssistantToolFileSearch(list(file_search.get("vector_store_ids") or [])),
            code_interpreter=None
            if code_interpreter is None
            else AssistantToolCodeInterpreter(list(code_interpreter.get("file_ids") or [])),
        )


def _tools_from(data: Any) -> list[AssistantTool] | None:
    if data is None:
        return None
    return [AssistantTool.from_dict(tool) for tool in data]


def _put_optional(result: dict, key: str, value: Any) -> None:
    if value is not None:
        result[key] = value


@dataclass
class Assistant:
    id: str = ""
    object: str = ""
    created_at: int = 0
    model: str = ""
    name: str | None = None
    description: str | None = None
    instructions: str | None = None
    tools: list[AssistantTool] | None = None
    tool_resources: AssistantToolResource | None = None
    file_ids: list[str] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)
    temperature: float | None = None
    top_p: float | None = None
    response_format: Any = None
    headers: Mapping[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict:
        result: dict = {"id": self.id, "object": self.object, "created_at": self.created_at}
        _put_optional(result, "name", self.name)
        _put_optional(result, "description", self.description)
        result["model"] = self.model
        _put_optional(result, "instructions", self.instructions)
        result["tools"] = None if self.tools is None else [tool.to_dict() for tool in self.tools]
        if self.tool_resources is not None:
            result["tool_resources"] = self.tool_resources.to_dict()
        if self.file_ids:
            result["file_ids"] = list(self.file_ids)
        if self.metadata:
            result["metadata"] = dict(self.metadata)
        _put_optional(result, "temperature", self.temperature)
        _put_optional(result, "top_p", self.top_p)
        _put_optional(result, "response_format", self.response_format)
        return result

    @classmethod
    def from_dict(cls, data: Mapping, headers: Mapping[str, str] | None = None) -> Assistant:
        resources = data.get("tool_resources")
        return cls(
            id=_text(data.get("id")),
            object=_text(data.get("object")),
            created_at=data.get("created_at") or 0,
            model=_text(data.get("model")),
            name=data.get("name"),
            description=data.get("description"),
            instructions=data.get("instructions"),
            tools=_tools_from(data.get("tools")),
            tool_resources=None if resources is None else AssistantToolResource.from_dict(resources),
            file_ids=list(data.get("file_ids") or []),
            metadata=dict(data.get("metadata") or {}),
            temperature=data.get("temperature"),
            top_p=data.get("top_p"),
            response_format=data.get("response_format"),
            headers=headers if headers is not None else {},
        )


@dataclass
class AssistantRequest:
    """Parameters for creating or modifying an assistant.

    ``tools=None`` leaves the tools unchanged, an empty list removes them all
    and a populated list replaces them.
    """

    model: str = ""
    name: str | None = None
    description: str | None = None
    instructions: str | None = None
    tools: list[AssistantTool] | None = None
    file_ids: list[str] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)
    tool_resources: AssistantToolResource | None = None
    response_format: Any = None
    temperature: float | None = None
    top_p: float | None = None

    def to_dict(self) -> dict:
        result: dict = {}
        if self.tools is not None:
            result["tools"] = [tool.to_dict() for tool in self.tools]
        result["model"] = self.model
        _put_optional(result, "name", self.name)
        _put_optional(result, "description", self.description)
        _put_optional(result, "instructions", self.instructions)
        if self.file_ids:
            result["file_ids"] = list(self.file_ids)
        if self.metadata:
            result["metadata"] = dict(self.metadata)
        if self.tool_resources is not None:
            result["tool_resources"] = self.tool_resources.to_dict()
        _put_optional(result, "response_format", self.response_format)
        _put_optional(result, "temperature", self.temperature)
        _put_optional(result, "top_p", self.top_p)
        return result


@dataclass
class AssistantsList:
    assistants: list[Assistant] = field(default_factory=list)
    last_id: str | None = None
    first_id: str | None = None
    has_more: bool = False
    headers: Mapping[str, str] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping, headers: Mapping[str, str] | None = None) -> AssistantsList:
        return cls(
            assistants=[Assistant.from_dict(item) for item in data.get("data") or []],
            last_id=data.get("last_id"),
            first_id=data.get("first_id"),
            has_more=bool(data.get("has_more", False)),
            headers=headers if headers is not None else {},
        )


@dataclass
class AssistantDeleteResponse:
    id: str = ""
    object: str = ""
    deleted: bool = False
    headers: Mapping[str, str] = field(default_factory=dict)

    @classmethod
    def from_dict(
        cls, data: Mapping, headers: Mapping[str, str] | None = None
    ) -> AssistantDeleteResponse:
        return cls(
            id=_text(data.get("id")),
            object=_text(data.get("object")),
            deleted=bool(data.get("deleted", False)),
            headers=headers if headers is not None else {},
        )


@dataclass
class AssistantFile:
    id: str = ""
    object: str = ""
    created_at: int = 0
    assistant_id: str = ""
    headers: Mapping[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "object": self.object,
            "created_at": self.created_at,
            "assistant_id": self.assistant_id,
        }

    @classmethod
    def from_dict(cls, data: Mapping, headers: Mapping[str, str] | None = None) -> AssistantFile:
        return cls(
            id=_text(data.get("id")),
            object=_text(data.get("object")),
            created_at=data.get("created_at") or 0,
            assistant_id=_text(data.get("assistant_id")),
            headers=headers if headers is not None else {},
        )


@dataclass
class AssistantFileRequest:
    file_id: str

    def to_dict(self) -> dict:
        return {"file_id": self.file_id}


@dataclass
class AssistantFilesList:
    assistant_files: list[AssistantFile] = field(default_factory=list)
    headers: Mapping[str, str] = field(default_factory=dict)

    @classmethod
    def from_dict(
        cls, data: Mapping, headers: Mapping[str, str] | None = None
    ) -> AssistantFilesList:
        return cls(
            assistant_files=[AssistantFile.from_dict(item) for item in data.get("data") or []],
            headers=headers if headers is not None else {},
        )


def _query(
    limit: int | None, order: str | None, after: str | None, before: str | None
) -> str:
    params = {
        "limit": None if limit is None else str(int(limit)),
        "order": order,
        "after": after,
        "before": before,
    }
    pairs = sorted((key, value) for key, value in params.items() if value is not None)
    return "?" + urlencode(pairs) if pairs else ""


class AssistantsMixin:
    """Assistant endpoints.

    The host class provides ``_api_call(method, suffix, *, body=None,
    content_type=None, headers=None, model=None, expect_json=True)`` returning
    the decoded body and the response headers.
    """

    assistant_version: str = "v2"
    _api_call: Callable[..., tuple[Any, Mapping[str, str]]]

    def _assistant_headers(self) -> dict[str, str]:
        return {"OpenAI-Beta": f"assistants={self.assistant_version}"}

    def _assistant_call(self, method: str, suffix: str, body: Any = None) -> tuple[Any, Mapping]:
        return self._api_call(method, suffix, body=body, headers=self._assistant_headers())

    def create_assistant(self, request: AssistantRequest) -> Assistant:
        data, headers = self._assistant_call("POST", ASSISTANTS_SUFFIX, request.to_dict())
        return Assistant.from_dict(data or {}, headers)

    def retrieve_assistant(self, assistant_id: str) -> Assistant:
        data, headers = self._assistant_call("GET", f"{ASSISTANTS_SUFFIX}/{assistant_id}")
        return Assistant.from_dict(data or {}, headers)

    def modify_assistant(self, assistant_id: str, request: AssistantRequest) -> Assistant:
        data, headers = self._assistant_call(
            "POST", f"{ASSISTANTS_SUFFIX}/{assistant_id}", request.to_dict()
        )
        return Assistant.from_dict(data or {}, headers)

    def delete_assistant(self, assistant_id: str) -> AssistantDeleteResponse:
        data, headers = self._assistant_call("DELETE", f"{ASSISTANTS_SUFFIX}/{assistant_id}")
        return AssistantDeleteResponse.from_dict(data or {}, headers)

    def list_assistants(
        self,
        limit: int | None = None,
        order: str | None = None,
        after: str | None = None,
        before: str | None = None,
    ) -> AssistantsList:
        suffix = ASSISTANTS_SUFFIX + _query(limit, order, after, before)
        data, headers = self._assistant_call("GET", suffix)
        return AssistantsList.from_dict(data or {}, headers)

    def create_assistant_file(
        self, assistant_id: str, request: AssistantFileRequest
    ) -> AssistantFile:
        suffix = f"{ASSISTANTS_SUFFIX}/{assistant_id}{ASSISTANTS_FILES_SUFFIX}"
        data, headers = self._assistant_call("POST", suffix, request.to_dict())
        return AssistantFile.from_dict(data or {}, headers)

    def retrieve_assistant_file(self, assistant_id: str, file_id: str) -> AssistantFile:
        suffix = f"{ASSISTANTS_SUFFIX}/{assistant_id}{ASSISTANTS_FILES_SUFFIX}/{file_id}"
        data, headers = self._assistant_call("GET", suffix)
        return AssistantFile.from_dict(data or {}, headers)

    def delete_assistant_file(self, assistant_id: str, file_id: str) -> None:
        suffix = f"{ASSISTANTS_SUFFIX}/{assistant_id}{ASSISTANTS_FILES_SUFFIX}/{file_id}"
        self._api_call("DELETE", suffix, headers=self._assistant_headers(), expect_json=False)

    def list_assistant_files(
        self,
        assistant_id: str,
        limit: int | None = None,
        order: str | None = None,
        after: str | None = None,
        before: str | None = None,
    ) -> AssistantFilesList:
        suffix = (
            f"{ASSISTANTS_SUFFIX}/{assistant_id}{ASSISTANTS_FILES_SUFFIX}"
            + _query(limit, order, after, before)
        )
        data, headers = self._assistant_call("GET", suffix)
        return AssistantFilesList.from_dict(data or {}, headers)