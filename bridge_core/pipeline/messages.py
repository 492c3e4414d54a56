"""消息处理管线：检测结构化工具调用 → 执行 → 把结果插回对话。"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from bridge_core.domain.models import Message, TextContent, ToolCall, ToolResult
from bridge_core.infrastructure.logging.logger import get_logger
from bridge_core.tools.executor import ToolExecutor


@dataclass
class ProcessResult:
    """processed_messages 为插入工具结果后的完整对话，tool_results 按执行顺序排列。"""

    processed_messages: List[Message] = field(default_factory=list)
    tool_results: List[ToolResult] = field(default_factory=list)


def has_tool_calls(messages: Sequence[Message]) -> bool:
    """任意一条消息带有非空 tool_calls 即为 True。"""

    return any(m.tool_calls for m in messages)


def collect_tool_calls(messages: Sequence[Message]) -> List[ToolCall]:
    """按出现顺序平铺对话中的所有工具调用。"""

    calls: List[ToolCall] = []
    for message in messages:
        if message.tool_calls:
            calls.extend(message.tool_calls)
    return calls


class MessagePipeline:
    def __init__(self, executor: Optional[ToolExecutor] = None, logger: Optional[logging.Logger] = None):
        self._logger = logger or get_logger(__name__)
        self._executor = executor or ToolExecutor(logger=self._logger)

    def process(self, messages: Sequence[Message]) -> ProcessResult:
        result = ProcessResult()
        for message in messages:
            result.processed_messages.append(message)
            if not message.tool_calls:
                continue
            self._logger.info(
                "Executing tool calls",
                extra={"extra": {"call_count": len(message.tool_calls)}},
            )
            # 逐个顺序执行：结果消息的顺序必须与调用顺序一致
            for call in message.tool_calls:
                tool_result = self._executor.execute(call)
                result.tool_results.append(tool_result)
                result.processed_messages.append(
                    Message(
                        role="tool",
                        content=TextContent(tool_result.display_text),
                        tool_call_id=tool_result.tool_call_id,
                    )
                )
        return result


def process_messages(
    messages: Sequence[Message],
    executor: Optional[ToolExecutor] = None,
    logger: Optional[logging.Logger] = None,
) -> ProcessResult:
    return MessagePipeline(executor=executor, logger=logger).process(messages)
