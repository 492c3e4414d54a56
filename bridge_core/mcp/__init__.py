"""MCP 文本协议：<tool_call> 标签的解析、上下文注入与流式扫描。"""

from bridge_core.mcp.context import render_tool_results_context, render_tools_context
from bridge_core.mcp.parser import contains_tool_call, extract_tool_calls, strip_tool_call_tags
from bridge_core.mcp.stream import ToolCallStream

__all__ = [
    "ToolCallStream",
    "contains_tool_call",
    "extract_tool_calls",
    "render_tool_results_context",
    "render_tools_context",
    "strip_tool_call_tags",
]
