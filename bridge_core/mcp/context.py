"""把工具定义与历史工具结果渲染成可直接拼进 prompt 的文本块。

两个函数在输入为空时都返回空字符串，调用方可以无条件拼接。
"""

import json
from typing import Optional, Sequence

from bridge_core.domain.models import Tool, ToolResult

TOOLS_PREAMBLE = """

You have access to the following tools that can be executed by the client. When you need to use a tool, format your response with the tool call in the following JSON format:

<tool_call>
{
  "id": "call_<unique_id>",
  "type": "function",
  "function": {
    "name": "<tool_name>",
    "arguments": "<json_string_of_arguments>"
  }
}
</tool_call>

Available tools:
"""

TOOLS_GUIDANCE = """

When using tools:
1. Always provide a unique ID for each tool call
2. Ensure arguments match the tool's input schema
3. Wait for tool execution results before proceeding
4. You can use multiple tools in sequence if needed

"""

RESULTS_PREAMBLE = """

Previous tool execution results:
"""

RESULTS_CLOSING = """

Please continue the conversation considering these tool results.

"""


def render_tool(tool: Tool) -> str:
    schema = json.dumps(tool.input_schema, indent=2, ensure_ascii=False)
    return f"Tool: {tool.name}\nDescription: {tool.description}\nInput Schema: {schema}"


def render_tools_context(tools: Optional[Sequence[Tool]]) -> str:
    if not tools:
        return ""
    description = "\n\n".join(render_tool(t) for t in tools)
    return f"{TOOLS_PREAMBLE}{description}{TOOLS_GUIDANCE}"


def render_tool_results_context(results: Optional[Sequence[ToolResult]]) -> str:
    if not results:
        return ""
    description = "\n\n".join(
        f"Tool Result (ID: {r.tool_call_id}):\n{r.display_text}" for r in results
    )
    return f"{RESULTS_PREAMBLE}{description}{RESULTS_CLOSING}"
