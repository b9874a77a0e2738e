import json

import pytest

from oaiclient.chat import (
    ChatCompletionChoice,
    ChatCompletionMessage,
    ChatCompletionRequest,
    ChatCompletionResponse,
    ChatMessageImageURL,
    ChatMessagePart,
    ChatMessagePartType,
    ChatMessageRole,
    ContentFieldsMisusedError,
    ContentFilterResults,
    FinishReason,
    FunctionCall,
    FunctionDefinition,
    ImageURLDetail,
    LogProbs,
    StreamOptions,
    ToolCall,
    ToolChoice,
    ToolFunction,
    Usage,
    finish_reason_to_json,
)

JSON_TEXT = (
    '[{"role":"system","content":"system-message"},'
    '{"role":"user","content":[{"type":"text","text":"nice-text"},'
    '{"type":"image_url","image_url":{"url":"URL","detail":"high"}}]}]'
)


def _compact(obj):
    return json.dumps(obj, separators=(",", ":"))


def test_request_omit_empty():
    assert ChatCompletionRequest(model="gpt-4").to_json() == '{"model":"gpt-4","messages":null}'


def test_request_with_message_and_max_tokens():
    request = ChatCompletionRequest(
        model="gpt-3.5-turbo",
        max_tokens=5,
        messages=[ChatCompletionMessage(role=ChatMessageRole.USER, content="Hello!")],
    )
    assert request.to_json() == (
        '{"model":"gpt-3.5-turbo","messages":[{"role":"user","content":"Hello!"}],"max_tokens":5}'
    )


def test_request_keeps_explicit_falsy_any_fields():
    request = ChatCompletionRequest(model="m", seed=0, parallel_tool_calls=False, stream_options=StreamOptions())
    data = request.to_dict()
    assert data["seed"] == 0
    assert data["parallel_tool_calls"] is False
    assert data["stream_options"] == {}


def test_request_tool_choice_object():
    request = ChatCompletionRequest(model="m", tool_choice=ToolChoice(function=ToolFunction(name="lookup")))
    assert request.to_dict()["tool_choice"] == {"type": "function", "function": {"name": "lookup"}}


def test_multipart_message_serialization_round_trip():
    msgs = [ChatCompletionMessage.from_dict(item) for item in json.loads(JSON_TEXT)]
    assert len(msgs) == 2
    assert msgs[0].role == "system"
    assert msgs[0].content == "system-message"
    assert msgs[0].multi_content is None
    assert msgs[1].role == "user"
    assert msgs[1].content == ""
    assert len(msgs[1].multi_content) == 2
    parts = msgs[1].multi_content
    assert parts[0].type == ChatMessagePartType.TEXT
    assert parts[0].text == "nice-text"
    assert parts[1].type == "image_url"
    assert parts[1].image_url.url == "URL"
    assert parts[1].image_url.detail == ImageURLDetail.HIGH
    assert _compact([m.to_dict() for m in msgs]) == JSON_TEXT


def test_content_and_multi_content_misused():
    message = ChatCompletionMessage(
        role="user",
        content="some-text",
        multi_content=[ChatMessagePart(type="text", text="nice-text")],
    )
    with pytest.raises(ContentFieldsMisusedError):
        message.to_json()


def test_non_object_message_is_rejected():
    with pytest.raises(ValueError):
        ChatCompletionMessage.from_dict("not-a-message")


def test_empty_multi_content_is_omitted():
    message = ChatCompletionMessage(role="user", multi_content=[])
    assert message.to_json() == '{"role":"user"}'


def test_message_json_round_trip_with_tool_calls():
    message = ChatCompletionMessage(
        role="assistant",
        tool_calls=[ToolCall(id="call_1", function=FunctionCall(name="f", arguments="{}"))],
        function_call=FunctionCall(name="g"),
    )
    text = message.to_json()
    assert '"tool_calls":[{"id":"call_1","type":"function","function":{"name":"f","arguments":"{}"}}]' in text
    assert ChatCompletionMessage.from_json(text) == message


def test_message_null_content_decodes_empty():
    message = ChatCompletionMessage.from_json('{"role":"assistant","content":null}')
    assert message.content == ""
    assert message.multi_content is None


def test_image_part_to_dict():
    part = ChatMessagePart(
        type=ChatMessagePartType.IMAGE_URL,
        image_url=ChatMessageImageURL(url="URL", detail=ImageURLDetail.LOW),
    )
    assert part.to_dict() == {"type": "image_url", "image_url": {"url": "URL", "detail": "low"}}


@pytest.mark.parametrize("reason", [FinishReason.NULL, ""])
def test_finish_reason_null_not_quoted(reason):
    choice = ChatCompletionChoice(finish_reason=reason)
    assert '"finish_reason":null' in _compact(choice.to_dict())


@pytest.mark.parametrize(
    "reason",
    [FinishReason.STOP, FinishReason.LENGTH, FinishReason.FUNCTION_CALL, FinishReason.CONTENT_FILTER],
)
def test_finish_reason_quoted(reason):
    choice = ChatCompletionChoice(finish_reason=reason)
    assert f'"finish_reason":"{reason.value}"' in _compact(choice.to_dict())


def test_finish_reason_to_json_passes_unknown_values():
    assert finish_reason_to_json("max_tokens") == "max_tokens"
    assert finish_reason_to_json(None) is None


def test_function_definition_raw_and_dict_parameters():
    raw = '{"type":"object","required":["count"]}'
    definition = FunctionDefinition(name="test", parameters=raw)
    assert definition.to_dict() == {"name": "test", "parameters": {"type": "object", "required": ["count"]}}
    strict = FunctionDefinition(name="test", strict=True, parameters={"type": "object"})
    assert strict.to_dict() == {"name": "test", "strict": True, "parameters": {"type": "object"}}
    assert FunctionDefinition.from_dict(strict.to_dict()) == strict


def test_usage_round_trip():
    usage = Usage(prompt_tokens=1, completion_tokens=2, total_tokens=3)
    assert Usage.from_dict(usage.to_dict()) == usage


def test_logprobs_from_dict():
    logprobs = LogProbs.from_dict(
        {"content": [{"token": "Hi", "logprob": -0.5, "top_logprobs": [{"token": "Hi", "logprob": -0.5}]}]}
    )
    assert logprobs.content[0].token == "Hi"
    assert logprobs.content[0].top_logprobs[0].logprob == -0.5


def test_response_from_dict():
    data = {
        "id": "1",
        "object": "chat.completion",
        "created": 1598069254,
        "model": "gpt-3.5-turbo",
        "choices": [
            {"index": 0, "message": {"role": "assistant", "content": "aaaaa"}, "finish_reason": "stop"}
        ],
        "usage": {"prompt_tokens": 1, "completion_tokens": 5, "total_tokens": 6},
        "system_fingerprint": "fp",
        "prompt_filter_results": [{"index": 0, "content_filter_results": {"hate": {"filtered": True}}}],
    }
    response = ChatCompletionResponse.from_dict(data, {"X-CUSTOM-HEADER": "test"})
    assert response.choices[0].message.content == "aaaaa"
    assert response.choices[0].finish_reason == FinishReason.STOP
    assert response.usage.total_tokens == 6
    assert response.headers["X-CUSTOM-HEADER"] == "test"
    assert response.prompt_filter_results[0].content_filter_results.hate.filtered is True


def test_content_filter_results_from_dict():
    results = ContentFilterResults.from_dict(
        {"violence": {"filtered": True, "severity": "low"}, "jailbreak": {"filtered": False, "detected": True}}
    )
    assert results.violence.severity == "low"
    assert results.jailbreak.detected is True
    assert results.hate.filtered is False