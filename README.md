# oaiclient

A small Python client for OpenAI-compatible HTTP APIs that uses only the
standard library. It covers chat completions (plain and streamed), assistants,
audio transcription and translation, and batch jobs.

## Installation

```
pip install .
```

To run the tests as well:

```
pip install ".[test]"
pytest
```

## Modules

- `oaiclient.chat`: chat request and response data classes
  (`ChatCompletionRequest`, `ChatCompletionMessage`, `ChatCompletionResponse`
  and others), enums such as `ChatMessageRole` and `FinishReason`, and
  `finish_reason_to_json`.
- `oaiclient.chat_stream`: streamed chunk types and `ChatCompletionStream`.
- `oaiclient.assistant`: assistant data classes and `AssistantsMixin`.
- `oaiclient.audio`: `AudioRequest`, `AudioResponse`, `FormBuilder`,
  `audio_multipart_form`, `create_file_field` and `AudioMixin`.
- `oaiclient.batch`: batch data classes, `UploadBatchFileRequest` and
  `BatchMixin`.
- `oaiclient.client`: `Client`, `ClientConfig`, `APIError`, `HTTPResponse`
  and `UrllibTransport`.

## Chat completions

```python
from oaiclient.client import Client, ClientConfig
from oaiclient.chat import ChatCompletionRequest, ChatCompletionMessage, ChatMessageRole

client = Client(ClientConfig(auth_token="placeholder"))

request = ChatCompletionRequest(
    model="gpt-3.5-turbo",
    messages=[ChatCompletionMessage(role=ChatMessageRole.USER, content="Hello!")],
    max_tokens=5,
)
response = client.create_chat_completion(request)
print(response.choices[0].message.content)
print(response.headers.get("x-request-id"))
```

`Client` also accepts the token as a plain string: `Client("placeholder")`.
`ClientConfig` holds `auth_token`, `base_url` (default
`https://api.openai.com/v1`), `org_id`, `assistant_version` (default `v2`)
and `timeout`.

`create_chat_completion` raises `ChatCompletionStreamNotSupportedError` when
the request has `stream=True`. A response with a status below 200 or of 400 and
above raises `APIError`, which carries `message`, `code`, `param`, `type` and
`http_status_code`. Response headers are available on the result as a
read-only mapping with case-insensitive keys.

Fields left at their empty value are left out of the request JSON; `model` and
`messages` are always sent (`messages` as `null` when unset).
`ChatCompletionRequest.to_json()` gives the compact JSON body.

## Streaming

```python
with client.create_chat_completion_stream(request) as stream:
    for chunk in stream:
        for choice in chunk.choices:
            print(choice.delta.content, end="")
```

`ChatCompletionStream.recv()` returns one `ChatCompletionStreamResponse` per
call and raises `EOFError` once the server has sent `data: [DONE]` or the
stream ends; iterating the stream stops at the same point. Lines without a
`data:` prefix are skipped. An error object arriving in a `data:` line, or an
unprefixed JSON error body making up the stream, is raised as
`StreamAPIError`. `close()`, or leaving the `with` block, closes the
underlying response.

`ChatCompletionStream` can also be built directly from any iterable of text or
byte lines, which is handy for reading recorded event streams.

## Messages

A `ChatCompletionMessage` carries either plain `content` or a list of
`ChatMessagePart` entries in `multi_content`, mixing text and
`ChatMessageImageURL` parts. Setting both makes `to_dict()` / `to_json()`
raise `ContentFieldsMisusedError`. `ChatCompletionMessage.from_json` and
`from_dict` read either form back and raise `ValueError` for anything that is
not a message object.

`finish_reason_to_json` maps `FinishReason.NULL` and the empty string to
`None` (JSON `null`) and leaves any other reason as its string.

## Assistants

```python
from oaiclient.assistant import AssistantRequest, AssistantTool, AssistantToolType

assistant = client.create_assistant(
    AssistantRequest(model="gpt-4-turbo-preview", name="Helper",
                     tools=[AssistantTool(AssistantToolType.CODE_INTERPRETER)])
)
```

Methods: `create_assistant`, `retrieve_assistant`, `modify_assistant`,
`delete_assistant`, `list_assistants(limit, order, after, before)`,
`create_assistant_file`, `retrieve_assistant_file`, `delete_assistant_file`,
`list_assistant_files(assistant_id, limit, order, after, before)`. Each call
sends an `OpenAI-Beta: assistants=<version>` header.

In an `AssistantRequest`, `tools=None` leaves the tools out of the body, an
empty list sends `[]` and a populated list sends the tools.

## Audio

```python
from oaiclient.audio import AudioRequest, AudioResponseFormat, WHISPER_1

result = client.create_transcription(AudioRequest(model=WHISPER_1, file_path="speech.mp3"))
print(result.text)
```

`create_translation` takes the same request. The file comes from `file_path`,
or from `reader` (any object with `read()`) with `file_path` giving its name.
A missing file raises `FileNotFoundError`. Prompt, response format,
temperature (sent with two decimals), language and timestamp granularities are
sent only when set. For `text`, `srt` and `vtt` formats the raw body is
returned in `AudioResponse.text`; otherwise the JSON response is parsed into
segments and words.

`FormBuilder` builds the multipart body in memory and can be used on its own.

## Batches

```python
from oaiclient.batch import UploadBatchFileRequest, CreateBatchRequest

lines = UploadBatchFileRequest()
lines.add_chat_completion("req-1", request)
jsonl = lines.marshal_jsonl()   # bytes, one JSON object per line

batch = client.create_batch(CreateBatchRequest(input_file_id="file-abc"))
```

`add_completion` and `add_embedding` accept any object with `to_dict()` or a
plain mapping as the body. `create_batch` fills in a completion window of
`24h` when none is given. Also available: `retrieve_batch`, `cancel_batch`
and `list_batch(after, limit)`.

## Custom transports

`Client(config, transport)` accepts any object with
`send(method, url, headers, body)` returning an `HTTPResponse(status, headers,
body)`, where `body` is a readable binary object. The default is
`UrllibTransport`.

## What it does not do

- There are no file endpoints: a batch input file built with
  `marshal_jsonl` has to be uploaded some other way before `create_batch`.
- There are no plain text completion, embedding, image or model-listing calls;
  `add_completion` and `add_embedding` take request bodies as mappings.
- Requests are not checked against model capabilities before sending; the
  server's answer decides.
- Rate-limit headers are returned as plain strings, not parsed.
- There is no command-line tool; it is a library only.