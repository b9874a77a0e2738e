import pytest

from oaiclient.assistant import (
    Assistant,
    AssistantFile,
    AssistantFileRequest,
    AssistantRequest,
    AssistantsMixin,
    AssistantTool,
    AssistantToolCodeInterpreter,
    AssistantToolResource,
    AssistantToolType,
)

ASSISTANT_ID = "asst_abc123"
ASSISTANT_NAME = "Ambrogio"
ASSISTANT_DESCRIPTION = "Ambrogio is a friendly assistant."
ASSISTANT_INSTRUCTIONS = (
    "You are a personal math tutor. \n"
    "When asked a question, write and run Python code to answer the question."
)
ASSISTANT_FILE_ID = "file-wB6RM6wHdA49HfS2DJ9fEyrH"
MODEL = "gpt-4-turbo-preview"


def _stored_assistant() -> dict:
    return Assistant(
        id=ASSISTANT_ID,
        object="assistant",
        created_at=1234567890,
        name=ASSISTANT_NAME,
        model=MODEL,
        description=ASSISTANT_DESCRIPTION,
        instructions=ASSISTANT_INSTRUCTIONS,
    ).to_dict()


def _file(file_id: str = ASSISTANT_FILE_ID) -> dict:
    return AssistantFile(
        id=file_id, object="assistant.file", created_at=1234567890, assistant_id=ASSISTANT_ID
    ).to_dict()


def _echo(body: dict) -> dict:
    tools = body.get("tools")
    return Assistant(
        id=ASSISTANT_ID,
        object="assistant",
        created_at=1234567890,
        name=body.get("name"),
        model=body.get("model", ""),
        description=body.get("description"),
        instructions=body.get("instructions"),
        tools=None if tools is None else [AssistantTool.from_dict(t) for t in tools],
    ).to_dict()


class FakeAssistantHost(AssistantsMixin):
    def __init__(self):
        self.calls = []

    def _api_call(
        self,
        method,
        suffix,
        *,
        body=None,
        content_type=None,
        headers=None,
        model=None,
        expect_json=True,
    ):
        self.calls.append(
            {"method": method, "suffix": suffix, "body": body, "headers": headers, "json": expect_json}
        )
        path = suffix.partition("?")[0]
        base = f"/assistants/{ASSISTANT_ID}"
        if path == f"{base}/files/{ASSISTANT_FILE_ID}":
            if method == "GET":
                return _file(), {}
            return '{id: "file", object: "assistant.file.deleted", deleted: true}', {}
        if path == f"{base}/files":
            if method == "GET":
                return {"data": [_file()]}, {}
            return _file(body["file_id"]), {}
        if path == base:
            if method == "GET":
                return _stored_assistant(), {"X-Custom": "test"}
            if method == "POST":
                return _echo(body), {}
            return {"id": ASSISTANT_ID, "object": "assistant.deleted", "deleted": True}, {}
        if path == "/assistants":
            if method == "POST":
                return _echo(body), {}
            return {
                "data": [_stored_assistant()],
                "last_id": ASSISTANT_ID,
                "first_id": ASSISTANT_ID,
                "has_more": False,
            }, {}
        raise AssertionError(f"unexpected route {method} {suffix}")


@pytest.fixture
def host():
    return FakeAssistantHost()


def _request(**extra) -> AssistantRequest:
    return AssistantRequest(
        name=ASSISTANT_NAME,
        description=ASSISTANT_DESCRIPTION,
        model=MODEL,
        instructions=ASSISTANT_INSTRUCTIONS,
        **extra,
    )


def test_create_assistant(host):
    assistant = host.create_assistant(_request())
    assert assistant.id == ASSISTANT_ID
    assert assistant.name == ASSISTANT_NAME
    assert assistant.instructions == ASSISTANT_INSTRUCTIONS
    assert host.calls[0]["method"] == "POST"
    assert host.calls[0]["suffix"] == "/assistants"
    assert host.calls[0]["headers"] == {"OpenAI-Beta": "assistants=v2"}


def test_retrieve_assistant(host):
    assistant = AssistantsMixin.retrieve_assistant(host, ASSISTANT_ID)
    assert assistant.model == MODEL
    assert assistant.description == ASSISTANT_DESCRIPTION
    assert assistant.headers == {"X-Custom": "test"}


def test_delete_assistant(host):
    response = AssistantsMixin.delete_assistant(host, ASSISTANT_ID)
    assert response.deleted is True
    assert response.object == "assistant.deleted"
    assert host.calls[0]["method"] == "DELETE"


def test_list_assistants(host):
    result = AssistantsMixin.list_assistants(host, 20, "desc", "asst_abc122", "asst_abc124")
    assert host.calls[0]["suffix"] == (
        "/assistants?after=asst_abc122&before=asst_abc124&limit=20&order=desc"
    )
    assert result.first_id == ASSISTANT_ID
    assert [a.name for a in result.assistants] == [ASSISTANT_NAME]


def test_list_assistants_without_params(host):
    result = AssistantsMixin.list_assistants(host)
    assert host.calls[0]["suffix"] == "/assistants"
    assert result.last_id == ASSISTANT_ID


def test_create_assistant_file(host):
    result = host.create_assistant_file(ASSISTANT_ID, AssistantFileRequest(ASSISTANT_FILE_ID))
    assert result.id == ASSISTANT_FILE_ID
    assert host.calls[0]["body"] == {"file_id": ASSISTANT_FILE_ID}


def test_list_assistant_files(host):
    result = AssistantsMixin.list_assistant_files(
        host, ASSISTANT_ID, 20, "desc", "asst_abc122", "asst_abc124"
    )
    assert host.calls[0]["suffix"] == (
        f"/assistants/{ASSISTANT_ID}/files?after=asst_abc122&before=asst_abc124&limit=20&order=desc"
    )
    assert [f.id for f in result.assistant_files] == [ASSISTANT_FILE_ID]


def test_retrieve_assistant_file(host):
    result = AssistantsMixin.retrieve_assistant_file(host, ASSISTANT_ID, ASSISTANT_FILE_ID)
    assert result.assistant_id == ASSISTANT_ID
    assert result.object == "assistant.file"


def test_delete_assistant_file_ignores_body(host):
    assert AssistantsMixin.delete_assistant_file(host, ASSISTANT_ID, ASSISTANT_FILE_ID) is None
    assert host.calls[0]["method"] == "DELETE"
    assert host.calls[0]["json"] is False


def test_modify_assistant_no_tools(host):
    assistant = host.modify_assistant(ASSISTANT_ID, _request())
    assert assistant.tools is None
    assert "tools" not in host.calls[0]["body"]


def test_modify_assistant_with_tools(host):
    assistant = host.modify_assistant(
        ASSISTANT_ID, _request(tools=[AssistantTool(type=AssistantToolType.FUNCTION)])
    )
    assert assistant.tools is not None and len(assistant.tools) == 1
    assert assistant.tools[0].type == "function"


def test_modify_assistant_empty_tools(host):
    assistant = host.modify_assistant(ASSISTANT_ID, _request(tools=[]))
    assert assistant.tools == []
    assert host.calls[0]["body"]["tools"] == []


def test_custom_assistant_version(host):
    host.assistant_version = "v1"
    assistant = AssistantsMixin.retrieve_assistant(host, ASSISTANT_ID)
    assert host.calls[0]["headers"] == {"OpenAI-Beta": "assistants=v1"}
    assert assistant.id == ASSISTANT_ID


def test_request_omits_empty_fields():
    assert AssistantRequest(model="m").to_dict() == {"model": "m"}


def test_assistant_round_trip():
    original = Assistant(
        id="a",
        object="assistant",
        created_at=5,
        model="m",
        tools=[AssistantTool(type="code_interpreter")],
        tool_resources=AssistantToolResource(
            code_interpreter=AssistantToolCodeInterpreter(["f1"])
        ),
        metadata={"k": "v"},
        temperature=0.5,
    )
    restored = Assistant.from_dict(original.to_dict())
    assert restored == original