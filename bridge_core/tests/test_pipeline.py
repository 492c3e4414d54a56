import json

from bridge_core.domain.models import Message, TextContent, ToolCall, ToolResult
from bridge_core.pipeline.messages import collect_tool_calls, has_tool_calls, process_messages


class RecordingExecutor:
    def __init__(self):
        self.calls = []

    def execute(self, call):
        self.calls.append(call.id)
        if call.name == "fail":
            return ToolResult(tool_call_id=call.id, content="", error="nope")
        return ToolResult(tool_call_id=call.id, content=f"result-{call.id}")


def _conversation():
    return [
        Message(role="user", content=TextContent("what is the weather and 2+2?")),
        Message(
            role="assistant",
            content=TextContent(""),
            tool_calls=[
                ToolCall(id="A", name="calculate", arguments='{"expression": "2+2"}'),
                ToolCall(id="B", name="get_weather", arguments="{}"),
            ],
        ),
        Message(role="user", content=TextContent("thanks")),
    ]


def test_results_follow_calling_message_in_call_order():
    messages = _conversation()
    result = process_messages(messages)
    roles = [m.role for m in result.processed_messages]
    assert roles == ["user", "assistant", "tool", "tool", "user"]
    assert result.processed_messages[0] is messages[0]
    assert result.processed_messages[1] is messages[1]
    assert [m.tool_call_id for m in result.processed_messages[2:4]] == ["A", "B"]
    assert json.loads(result.processed_messages[2].text)["result"] == 4
    assert result.processed_messages[3].text == "Error: Missing required parameter: location"
    assert [r.tool_call_id for r in result.tool_results] == ["A", "B"]
    assert result.tool_results[1].error == "Missing required parameter: location"


def test_executor_is_called_sequentially():
    executor = RecordingExecutor()
    messages = [
        Message(role="assistant", tool_calls=[ToolCall(id="1", name="x", arguments="{}")]),
        Message(role="assistant", tool_calls=[
            ToolCall(id="2", name="fail", arguments="{}"),
            ToolCall(id="3", name="x", arguments="{}"),
        ]),
    ]
    result = process_messages(messages, executor=executor)
    assert executor.calls == ["1", "2", "3"]
    assert [m.text for m in result.processed_messages if m.role == "tool"] == [
        "result-1",
        "Error: nope",
        "result-3",
    ]


def test_messages_without_calls_are_copied():
    messages = [Message(role="user", content=TextContent("hi")), Message(role="assistant", tool_calls=[])]
    result = process_messages(messages, executor=RecordingExecutor())
    assert result.processed_messages == messages
    assert result.tool_results == []


def test_has_tool_calls():
    assert not has_tool_calls([])
    assert not has_tool_calls([Message(role="assistant", tool_calls=[])])
    assert has_tool_calls(_conversation())


def test_collect_tool_calls():
    assert [c.id for c in collect_tool_calls(_conversation())] == ["A", "B"]
