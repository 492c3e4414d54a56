"""Message pipeline (tool execution) and prompt conversion."""

from bridge_core.pipeline.messages import (
    MessagePipeline,
    ProcessResult,
    collect_tool_calls,
    has_tool_calls,
    process_messages,
)
from bridge_core.pipeline.prompt import to_prompt

__all__ = [
    "MessagePipeline",
    "ProcessResult",
    "collect_tool_calls",
    "has_tool_calls",
    "process_messages",
    "to_prompt",
]
