"""Audio transcription and translation requests."""

from __future__ import annotations

import errno
import io
import os
import secrets
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, BinaryIO, Callable, Mapping

WHISPER_1 = "whisper-1"


class AudioResponseFormat(str, Enum):
    JSON = "json"
    TEXT = "text"
    SRT = "srt"
    VERBOSE_JSON = "verbose_json"
    VTT = "vtt"


class TranscriptionTimestampGranularity(str, Enum):
    WORD = "word"
    SEGMENT = "segment"


def _plain(value: Any) -> str:
    return value.value if isinstance(value, Enum) else str(value)


def _text(value: Any) -> str:
    return "" if value is None else value


@dataclass
class AudioRequest:
    """An audio file and the options for processing it."""

    model: str = ""
    file_path: str = ""
    reader: BinaryIO | None = None
    prompt: str = ""
    temperature: float = 0.0
    language: str = ""
    format: str = ""
    timestamp_granularities: list[str] = field(default_factory=list)

    def has_json_response(self) -> bool:
        """True when the response comes back as JSON."""
        return _plain(self.format) in (
            "",
            AudioResponseFormat.JSON.value,
            AudioResponseFormat.VERBOSE_JSON.value,
        )


@dataclass
class AudioSegment:
    id: int = 0
    seek: int = 0
    start: float = 0.0
    end: float = 0.0
    text: str = ""
    tokens: list[int] = field(default_factory=list)
    temperature: float = 0.0
    avg_logprob: float = 0.0
    compression_ratio: float = 0.0
    no_speech_prob: float = 0.0
    transient: bool = False

    @classmethod
    def from_dict(cls, data: Mapping) -> AudioSegment:
        return cls(
            id=data.get("id") or 0,
            seek=data.get("seek") or 0,
            start=data.get("start") or 0.0,
            end=data.get("end") or 0.0,
            text=_text(data.get("text")),
            tokens=list(data.get("tokens") or []),
            temperature=data.get("temperature") or 0.0,
            avg_logprob=data.get("avg_logprob") or 0.0,
            compression_ratio=data.get("compression_ratio") or 0.0,
            no_speech_prob=data.get("no_speech_prob") or 0.0,
            transient=bool(data.get("transient", False)),
        )


@dataclass
class AudioWord:
    word: str = ""
    start: float = 0.0
    end: float = 0.0

    @classmethod
    def from_dict(cls, data: Mapping) -> AudioWord:
        return cls(_text(data.get("word")), data.get("start") or 0.0, data.get("end") or 0.0)


@dataclass
class AudioResponse:
    task: str = ""
    language: str = ""
    duration: float = 0.0
    segments: list[AudioSegment] = field(default_factory=list)
    words: list[AudioWord] = field(default_factory=list)
    text: str = ""
    headers: Mapping[str, str] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping, headers: Mapping[str, str] | None = None) -> AudioResponse:
        return cls(
            task=_text(data.get("task")),
            language=_text(data.get("language")),
            duration=data.get("duration") or 0.0,
            segments=[AudioSegment.from_dict(item) for item in data.get("segments") or []],
            words=[AudioWord.from_dict(item) for item in data.get("words") or []],
            text=_text(data.get("text")),
            headers=headers if headers is not None else {},
        )


def _quote(value: str) -> str:
    return value.replace("\\", "\\\\").replace('"', '\\"')


class FormBuilder:
    """Builds a multipart/form-data body in memory."""

    def __init__(self, boundary: str | None = None) -> None:
        self.boundary = boundary or secrets.token_hex(30)
        self._buffer = io.BytesIO()
        self._has_parts = False
        self._closed = False

    def _start_part(self, headers: list[tuple[str, str]]) -> None:
        if self._closed:
            raise ValueError("multipart form is already closed")
        prefix = "\r\n" if self._has_parts else ""
        lines = [f"{prefix}--{self.boundary}"]
        lines.extend(f"{name}: {value}" for name, value in headers)
        self._buffer.write(("\r\n".join(lines) + "\r\n\r\n").encode("utf-8"))
        self._has_parts = True

    def create_form_file(self, fieldname: str, path: str | os.PathLike) -> None:
        """Add the file at path as a file part named after its base name."""
        with open(path, "rb") as handle:
            self.create_form_file_reader(fieldname, handle, os.path.basename(os.fspath(path)))

    def create_form_file_reader(self, fieldname: str, reader: Any, filename: str) -> None:
        """Add the contents of a readable object as a file part."""
        name = os.path.basename(filename) if filename else ""
        if not name:
            raise ValueError("filename cannot be empty")
        data = reader.read()
        if isinstance(data, str):
            data = data.encode("utf-8")
        self._start_part(
            [
                (
                    "Content-Disposition",
                    f'form-data; name="{_quote(fieldname)}"; filename="{_quote(name)}"',
                ),
                ("Content-Type", "application/octet-stream"),
            ]
        )
        self._buffer.write(data)

    def write_field(self, fieldname: str, value: str) -> None:
        self._start_part([("Content-Disposition", f'form-data; name="{_quote(fieldname)}"')])
        self._buffer.write(value.encode("utf-8"))

    def close(self) -> None:
        """Write the closing boundary; later calls do nothing."""
        if self._closed:
            return
        prefix = "\r\n" if self._has_parts else ""
        self._buffer.write(f"{prefix}--{self.boundary}--\r\n".encode("ascii"))
        self._closed = True

    def content_type(self) -> str:
        return f"multipart/form-data; boundary={self.boundary}"

    def getvalue(self) -> bytes:
        return self._buffer.getvalue()


def create_file_field(request: AudioRequest, builder: Any) -> None:
    """Add the "file" part from the request's reader or from its file path."""
    if request.reader is not None:
        builder.create_form_file_reader("file", request.reader, request.file_path)
        return
    if not os.path.isfile(request.file_path):
        raise FileNotFoundError(
            errno.ENOENT, "opening audio file: no such file", request.file_path
        )
    builder.create_form_file("file", request.file_path)


def audio_multipart_form(request: AudioRequest, builder: Any) -> None:
    """Write the audio file and the request options into a multipart form."""
    create_file_field(request, builder)
    builder.write_field("model", request.model)
    if request.prompt:
        builder.write_field("prompt", request.prompt)
    if request.format:
        builder.write_field("response_format", _plain(request.format))
    if request.temperature:
        builder.write_field("temperature", f"{request.temperature:.2f}")
    if request.language:
        builder.write_field("language", request.language)
    for granularity in request.timestamp_granularities:
        builder.write_field("timestamp_granularities[]", _plain(granularity))
    builder.close()


class AudioMixin:
    """Audio endpoints; the host class provides ``_api_call``."""

    _api_call: Callable[..., tuple[Any, Mapping[str, str]]]

    def _create_form_builder(self) -> FormBuilder:
        return FormBuilder()

    def create_transcription(self, request: AudioRequest) -> AudioResponse:
        """Transcribe audio into text."""
        return self._call_audio_api(request, "transcriptions")

    def create_translation(self, request: AudioRequest) -> AudioResponse:
        """Translate audio into English text."""
        return self._call_audio_api(request, "translations")

    def _call_audio_api(self, request: AudioRequest, endpoint: str) -> AudioResponse:
        builder = self._create_form_builder()
        audio_multipart_form(request, builder)
        wants_json = request.has_json_response()
        data, headers = self._api_call(
            "POST",
            f"/audio/{endpoint}",
            body=builder.getvalue(),
            content_type=builder.content_type(),
            model=request.model,
            expect_json=wants_json,
        )
        if wants_json:
            return AudioResponse.from_dict(data or {}, headers)
        if isinstance(data, (bytes, bytearray)):
            data = data.decode("utf-8")
        return AudioResponse(text=_text(data), headers=headers)