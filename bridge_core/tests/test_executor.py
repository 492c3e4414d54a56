import json

from bridge_core.domain.exceptions import ToolError
from bridge_core.domain.models import ToolCall
from bridge_core.tools.executor import ToolExecutor


def _call(name, arguments, call_id="call_1"):
    return ToolCall(id=call_id, name=name, arguments=arguments)


def test_calculate_refuses_disallowed_characters():
    te = ToolExecutor()
    res = te.execute(_call("calculate", '{"expression": "2+2; process.exit(1)"}'))
    assert res.error == "Calculation failed: Invalid characters in expression"
    assert res.content == ""


def test_calculate_evaluates_arithmetic():
    te = ToolExecutor()
    res = te.execute(_call("calculate", '{"expression": "(2+3)*4"}'))
    assert res.error is None
    assert json.loads(res.content) == {"expression": "(2+3)*4", "result": 20}
    assert res.tool_call_id == "call_1"


def test_calculate_reports_evaluation_errors():
    te = ToolExecutor()
    assert te.execute(_call("calculate", '{"expression": "1/0"}')).error == "Calculation failed: Division by zero"
    assert te.execute(_call("calculate", '{"expression": "(1+2"}')).error.startswith("Calculation failed: ")
    assert te.execute(_call("calculate", '{"expression": 5}')).error.startswith("Calculation failed: ")


def test_missing_required_parameters():
    te = ToolExecutor()
    assert te.execute(_call("get_weather", "{}")).error == "Missing required parameter: location"
    assert te.execute(_call("search_web", '{"query": ""}')).error == "Missing required parameter: query"
    assert te.execute(_call("calculate", "[]")).error == "Missing required parameter: expression"


def test_invalid_json_arguments():
    te = ToolExecutor()
    res = te.execute(_call("get_weather", "{bad"))
    assert res.error == "Invalid JSON arguments: {bad"
    assert te.execute(_call("get_weather", "")).error == "Invalid JSON arguments: "


def test_unknown_tool():
    res = ToolExecutor().execute(_call("launch_rocket", "{}"))
    assert res.error == "Unknown tool: launch_rocket"


def test_weather_and_search_payloads(monkeypatch):
    monkeypatch.setattr("bridge_core.tools.builtin.random.randint", lambda a, b: a)
    monkeypatch.setattr("bridge_core.tools.builtin.random.choice", lambda seq: seq[0])
    te = ToolExecutor()
    weather = json.loads(te.execute(_call("get_weather", '{"location": "Paris"}')).content)
    assert weather == {"location": "Paris", "temperature": 10, "condition": "sunny", "humidity": 0, "wind_speed": 5}
    search = json.loads(te.execute(_call("search_web", '{"query": "python"}')).content)
    assert search["query"] == "python"
    assert len(search["results"]) == 2


def test_unexpected_handler_failure_is_contained():
    def broken(args):
        raise RuntimeError("kaboom")

    def silent(args):
        raise RuntimeError()

    te = ToolExecutor({"broken": broken, "silent": silent})
    assert te.execute(_call("broken", "{}")).error == "Tool execution failed: kaboom"
    assert te.execute(_call("silent", "{}")).error == "Tool execution failed: Unknown error"


def test_custom_registry():
    def echo(args):
        if "text" not in args:
            raise ToolError(code="MISSING_PARAMETER", message="Missing required parameter: text")
        return args["text"]

    te = ToolExecutor({"echo": echo})
    assert te.tool_names == ["echo"]
    assert te.execute(_call("echo", '{"text": "hi"}')).content == "hi"
    assert te.execute(_call("echo", "{}")).error == "Missing required parameter: text"
    assert te.execute(_call("calculate", '{"expression": "1"}')).error == "Unknown tool: calculate"
    te.register("calculate", lambda args: "1")
    assert te.execute(_call("calculate", "{}")).content == "1"
