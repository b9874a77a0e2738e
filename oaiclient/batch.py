"""Batch jobs: request files in JSON Lines form and the batch endpoints."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Mapping
from urllib.parse import urlencode

BATCHES_SUFFIX = "/batches"
DEFAULT_COMPLETION_WINDOW = "24h"


class BatchEndpoint(str, Enum):
    CHAT_COMPLETIONS = "/v1/chat/completions"
    COMPLETIONS = "/v1/completions"
    EMBEDDINGS = "/v1/embeddings"


def _plain(value: Any) -> Any:
    return value.value if isinstance(value, Enum) else value


def _text(value: Any) -> str:
    return "" if value is None else value


def _body_value(body: Any) -> Any:
    if hasattr(body, "to_dict"):
        return body.to_dict()
    if isinstance(body, Mapping):
        return dict(body)
    raise TypeError(f"batch request body must be a mapping or have to_dict(), not {type(body).__name__}")


@dataclass
class BatchLineItem:
    """One request line of a batch input file."""

    custom_id: str
    body: Any
    method: str = "POST"
    url: str = BatchEndpoint.CHAT_COMPLETIONS

    def to_dict(self) -> dict:
        return {
            "custom_id": self.custom_id,
            "body": _body_value(self.body),
            "method": self.method,
            "url": _plain(self.url),
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), separators=(",", ":"), ensure_ascii=False)


@dataclass
class BatchRequestCounts:
    total: int = 0
    completed: int = 0
    failed: int = 0


@dataclass
class BatchErrorItem:
    code: str = ""
    message: str = ""
    param: str | None = None
    line: int | None = None


def _counts(data: Mapping | None) -> BatchRequestCounts:
    data = data or {}
    return BatchRequestCounts(
        total=data.get("total") or 0,
        completed=data.get("completed") or 0,
        failed=data.get("failed") or 0,
    )


def _error_item(data: Mapping) -> BatchErrorItem:
    return BatchErrorItem(
        code=_text(data.get("code")),
        message=_text(data.get("message")),
        param=data.get("param"),
        line=data.get("line"),
    )


@dataclass
class Batch:
    """A batch job as reported by the API."""

    id: str = ""
    object: str = ""
    endpoint: str = ""
    errors: list[BatchErrorItem] | None = None
    errors_object: str = ""
    input_file_id: str = ""
    completion_window: str = ""
    status: str = ""
    output_file_id: str | None = None
    error_file_id: str | None = None
    created_at: int = 0
    in_progress_at: int | None = None
    expires_at: int | None = None
    finalizing_at: int | None = None
    completed_at: int | None = None
    failed_at: int | None = None
    expired_at: int | None = None
    cancelling_at: int | None = None
    cancelled_at: int | None = None
    request_counts: BatchRequestCounts = field(default_factory=BatchRequestCounts)
    metadata: dict[str, Any] | None = None
    headers: Mapping[str, str] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping, headers: Mapping[str, str] | None = None) -> Batch:
        errors = data.get("errors")
        metadata = data.get("metadata")
        return cls(
            id=_text(data.get("id")),
            object=_text(data.get("object")),
            endpoint=_text(data.get("endpoint")),
            errors=None if errors is None else [_error_item(item) for item in errors.get("data") or []],
            errors_object="" if errors is None else _text(errors.get("object")),
            input_file_id=_text(data.get("input_file_id")),
            completion_window=_text(data.get("completion_window")),
            status=_text(data.get("status")),
            output_file_id=data.get("output_file_id"),
            error_file_id=data.get("error_file_id"),
            created_at=data.get("created_at") or 0,
            in_progress_at=data.get("in_progress_at"),
            expires_at=data.get("expires_at"),
            finalizing_at=data.get("finalizing_at"),
            completed_at=data.get("completed_at"),
            failed_at=data.get("failed_at"),
            expired_at=data.get("expired_at"),
            cancelling_at=data.get("cancelling_at"),
            cancelled_at=data.get("cancelled_at"),
            request_counts=_counts(data.get("request_counts")),
            metadata=None if metadata is None else dict(metadata),
            headers=headers if headers is not None else {},
        )


@dataclass
class CreateBatchRequest:
    input_file_id: str
    endpoint: str = BatchEndpoint.CHAT_COMPLETIONS
    completion_window: str = ""
    metadata: dict[str, Any] | None = None

    def to_dict(self) -> dict:
        return {
            "input_file_id": self.input_file_id,
            "endpoint": _plain(self.endpoint),
            "completion_window": self.completion_window,
            "metadata": None if self.metadata is None else dict(self.metadata),
        }


@dataclass
class UploadBatchFileRequest:
    """The lines of a batch input file."""

    file_name: str = ""
    lines: list[BatchLineItem] = field(default_factory=list)

    def _add(self, custom_id: str, body: Any, endpoint: BatchEndpoint) -> None:
        self.lines.append(BatchLineItem(custom_id=custom_id, body=body, method="POST", url=endpoint))

    def add_chat_completion(self, custom_id: str, body: Any) -> None:
        self._add(custom_id, body, BatchEndpoint.CHAT_COMPLETIONS)

    def add_completion(self, custom_id: str, body: Any) -> None:
        self._add(custom_id, body, BatchEndpoint.COMPLETIONS)

    def add_embedding(self, custom_id: str, body: Any) -> None:
        self._add(custom_id, body, BatchEndpoint.EMBEDDINGS)

    def marshal_jsonl(self) -> bytes:
        """Return the lines as JSON Lines, separated by newlines with none at the end."""
        return "\n".join(line.to_json() for line in self.lines).encode("utf-8")


@dataclass
class ListBatchResponse:
    object: str = ""
    data: list[Batch] = field(default_factory=list)
    first_id: str = ""
    last_id: str = ""
    has_more: bool = False
    headers: Mapping[str, str] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping, headers: Mapping[str, str] | None = None) -> ListBatchResponse:
        return cls(
            object=_text(data.get("object")),
            data=[Batch.from_dict(item) for item in data.get("data") or []],
            first_id=_text(data.get("first_id")),
            last_id=_text(data.get("last_id")),
            has_more=bool(data.get("has_more", False)),
            headers=headers if headers is not None else {},
        )


class BatchMixin:
    """Batch endpoints; the host class provides ``_api_call``."""

    _api_call: Callable[..., tuple[Any, Mapping[str, str]]]

    def create_batch(self, request: CreateBatchRequest) -> Batch:
        """Start a batch job; the completion window defaults to 24h."""
        body = request.to_dict()
        if not body["completion_window"]:
            body["completion_window"] = DEFAULT_COMPLETION_WINDOW
        data, headers = self._api_call("POST", BATCHES_SUFFIX, body=body)
        return Batch.from_dict(data or {}, headers)

    def retrieve_batch(self, batch_id: str) -> Batch:
        data, headers = self._api_call("GET", f"{BATCHES_SUFFIX}/{batch_id}")
        return Batch.from_dict(data or {}, headers)

    def cancel_batch(self, batch_id: str) -> Batch:
        data, headers = self._api_call("POST", f"{BATCHES_SUFFIX}/{batch_id}/cancel")
        return Batch.from_dict(data or {}, headers)

    def list_batch(self, after: str | None = None, limit: int | None = None) -> ListBatchResponse:
        params = []
        if after is not None:
            params.append(("after", after))
        if limit is not None:
            params.append(("limit", str(int(limit))))
        suffix = BATCHES_SUFFIX + ("?" + urlencode(params) if params else "")
        data, headers = self._api_call("GET", suffix)
        return ListBatchResponse.from_dict(data or {}, headers)