"""对外 API 服务模块。

把 OpenAI 风格的 chat/completions 请求体转换为上游模型可用的单段 prompt，
调用 UpstreamClient，并把回复中的 <tool_call> 标签还原为结构化 tool_calls。
HTTP 路由、鉴权与上游传输都不在这里，由宿主负责。
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional
from uuid import uuid4

from bridge_core.domain.exceptions import ValidationError
from bridge_core.domain.models import Message, TextContent, Tool, ToolResult
from bridge_core.infrastructure.logging.logger import get_logger
from bridge_core.mcp.context import render_tool_results_context, render_tools_context
from bridge_core.mcp.parser import extract_tool_calls, strip_tool_call_tags
from bridge_core.mcp.stream import ToolCallStream
from bridge_core.pipeline.messages import MessagePipeline, has_tool_calls
from bridge_core.pipeline.prompt import to_prompt
from bridge_core.providers.base import UpstreamClient
from bridge_core.tools.executor import ToolExecutor
from bridge_core.tools.normalizer import normalize_tools


@dataclass
class PreparedPrompt:
    """一次请求经过管线后的产物。

    - prompt: 发给上游的最终文本。
    - messages: 插入工具结果消息后的对话。
    - tools: 规范化后的工具定义。
    - tool_results: 本次请求中执行工具得到的结果（按执行顺序）。
    """

    prompt: str
    messages: List[Message]
    tools: List[Tool] = field(default_factory=list)
    tool_results: List[ToolResult] = field(default_factory=list)


def _require_list(value: Any, name: str, optional: bool = True) -> None:
    if value is None and optional:
        return
    if not isinstance(value, list):
        raise ValidationError(code="INVALID_REQUEST", message=f"{name} must be an array", field=name)


class ChatCompletionService:
    def __init__(
        self,
        upstream: UpstreamClient,
        executor: Optional[ToolExecutor] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self._upstream = upstream
        self._logger = logger or get_logger(__name__)
        self._pipeline = MessagePipeline(executor=executor, logger=self._logger)

    def prepare(
        self,
        messages: Any,
        tools: Any = None,
        tool_results: Any = None,
    ) -> PreparedPrompt:
        """校验请求体并构造 prompt。

        Raises:
            ValidationError: messages 不是数组，或 tools / tool_results 既不是数组也不缺省。
        """

        _require_list(messages, "messages", optional=False)
        _require_list(tools, "tools")
        _require_list(tool_results, "tool_results")
        if not all(isinstance(m, dict) for m in messages):
            raise ValidationError(code="INVALID_REQUEST", message="messages must contain objects", field="messages")

        conversation = [Message.from_payload(m) for m in messages]
        executed: List[ToolResult] = []
        if has_tool_calls(conversation):
            processed = self._pipeline.process(conversation)
            conversation = processed.processed_messages
            executed = processed.tool_results

        normalized = normalize_tools(tools, logger=self._logger)
        previous = [ToolResult.from_payload(r) for r in (tool_results or []) if isinstance(r, dict)]

        prompt_messages = list(conversation)
        tools_context = render_tools_context(normalized).strip()
        if tools_context:
            prompt_messages.insert(0, Message(role="system", content=TextContent(tools_context)))
        results_context = render_tool_results_context(previous).strip()
        if results_context:
            prompt_messages.append(Message(role="system", content=TextContent(results_context)))

        return PreparedPrompt(
            prompt=to_prompt(prompt_messages),
            messages=conversation,
            tools=normalized,
            tool_results=executed,
        )

    def create_completion(
        self,
        model: str,
        messages: Any,
        tools: Any = None,
        tool_results: Any = None,
    ) -> Dict[str, Any]:
        model = (model or "").lower()
        log_ctx = {"trace_id": f"tr-{uuid4().hex}", "model": model, "upstream": self._upstream.name}
        prepared = self.prepare(messages, tools, tool_results)
        self._log(logging.INFO, "Sending prompt upstream", log_ctx, prompt_chars=len(prepared.prompt))

        text = self._upstream.complete(model, prepared.prompt)
        calls = extract_tool_calls(text, logger=self._logger)
        self._log(logging.INFO, "Upstream completion received", log_ctx, tool_call_count=len(calls))

        message: Dict[str, Any] = {"role": "assistant", "content": strip_tool_call_tags(text)}
        if calls:
            message["tool_calls"] = [c.to_payload() for c in calls]
        return {
            "id": f"chatcmpl-{uuid4().hex}",
            "object": "chat.completion",
            "created": int(time.time()),
            "model": model,
            "choices": [
                {
                    "index": 0,
                    "message": message,
                    "finish_reason": "tool_calls" if calls else "stop",
                }
            ],
        }

    def create_completion_stream(
        self,
        model: str,
        messages: Any,
        tools: Any = None,
        tool_results: Any = None,
    ) -> Iterator[Dict[str, Any]]:
        """流式版本：请求校验在调用时立即完成，返回 chat.completion.chunk 迭代器。"""

        model = (model or "").lower()
        prepared = self.prepare(messages, tools, tool_results)
        return self._stream_chunks(model, prepared)

    def _stream_chunks(self, model: str, prepared: PreparedPrompt) -> Iterator[Dict[str, Any]]:
        completion_id = f"chatcmpl-{uuid4().hex}"
        created = int(time.time())
        log_ctx = {"trace_id": f"tr-{uuid4().hex}", "model": model, "upstream": self._upstream.name}

        def chunk(delta: Dict[str, Any], finish_reason: Optional[str] = None) -> Dict[str, Any]:
            return {
                "id": completion_id,
                "object": "chat.completion.chunk",
                "created": created,
                "model": model,
                "choices": [{"index": 0, "delta": delta, "finish_reason": finish_reason}],
            }

        self._log(logging.INFO, "Streaming prompt upstream", log_ctx, prompt_chars=len(prepared.prompt))
        yield chunk({"role": "assistant", "content": ""})

        scanner = ToolCallStream(logger=self._logger)
        for delta in self._upstream.complete_stream(model, prepared.prompt):
            visible = scanner.feed(delta)
            if visible:
                yield chunk({"content": visible})
        rest = scanner.flush()
        if rest:
            yield chunk({"content": rest})

        if scanner.tool_calls:
            yield chunk(
                {"tool_calls": [{"index": i, **c.to_payload()} for i, c in enumerate(scanner.tool_calls)]}
            )
        self._log(logging.INFO, "Upstream stream finished", log_ctx, tool_call_count=len(scanner.tool_calls))
        yield chunk({}, "tool_calls" if scanner.tool_calls else "stop")

    def inspect_messages(self, messages: Any) -> Dict[str, Any]:
        """诊断接口：检测并执行消息中的结构化工具调用，返回处理结果。"""

        _require_list(messages, "messages", optional=False)
        try:
            conversation = [Message.from_payload(m) for m in messages]
            found = has_tool_calls(conversation)
            data: Dict[str, Any] = {
                "hasMCPCalls": found,
                "originalMessagesCount": len(messages),
                "processedMessages": [],
                "toolResults": [],
            }
            if found:
                processed = self._pipeline.process(conversation)
                data["processedMessages"] = [m.to_payload() for m in processed.processed_messages]
                data["toolResults"] = [r.to_payload() for r in processed.tool_results]
            return {"success": True, "data": data}
        except Exception as exc:
            self._logger.error("Message inspection failed", extra={"extra": {"error": str(exc)}})
            return {"success": False, "error": str(exc), "data": None}

    def _log(self, level: int, message: str, log_ctx: Dict[str, Any], **fields: Any) -> None:
        payload = dict(log_ctx)
        payload.update(fields)
        self._logger.log(level, message, extra={"extra": payload})
