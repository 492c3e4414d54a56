"""工具执行器。

ToolExecutor 把一次 ToolCall 分发给注册表中同名的处理器，并保证：

1. 先解析 arguments（JSON 文本），失败时返回 "Invalid JSON arguments: <原文>"。
2. 未注册的工具名返回 "Unknown tool: <name>"。
3. 处理器抛出的 ToolError 原样写入 ToolResult.error。
4. 其它任何异常都在这里兜底，转换为 "Tool execution failed: ..."。

execute() 永远不会抛异常。
"""

import json
import logging
from typing import Dict, List, Optional

from bridge_core.config.settings import settings
from bridge_core.domain.exceptions import ToolError
from bridge_core.domain.models import ToolCall, ToolResult
from bridge_core.infrastructure.logging.logger import get_logger
from bridge_core.tools.builtin import ToolFunc, default_handlers


class ToolExecutor:
    def __init__(
        self,
        handlers: Optional[Dict[str, ToolFunc]] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self._handlers: Dict[str, ToolFunc] = dict(handlers) if handlers is not None else default_handlers()
        self._logger = logger or get_logger(__name__)

    @property
    def tool_names(self) -> List[str]:
        return list(self._handlers)

    def register(self, name: str, handler: ToolFunc) -> None:
        """注册（或覆盖）一个工具处理器。"""

        self._handlers[name] = handler

    def execute(self, call: ToolCall) -> ToolResult:
        self._log(logging.INFO, "Executing tool call", call)
        try:
            try:
                args = json.loads(call.arguments)
            except (TypeError, ValueError):
                self._log(logging.WARNING, "Invalid tool arguments", call, arguments=call.arguments)
                return ToolResult(
                    tool_call_id=call.id,
                    content="",
                    error=f"Invalid JSON arguments: {call.arguments}",
                )

            handler = self._handlers.get(call.name)
            if handler is None:
                self._log(logging.WARNING, "Unknown tool", call)
                return ToolResult(tool_call_id=call.id, content="", error=f"Unknown tool: {call.name}")

            try:
                content = handler(args)
            except ToolError as exc:
                self._log(logging.WARNING, "Tool reported an error", call, error=exc.message, code=exc.code)
                return ToolResult(tool_call_id=call.id, content="", error=exc.message)

            preview = content[: settings.tool_result_preview_chars] if content else ""
            self._log(logging.INFO, "Tool execution finished", call, result_preview=preview)
            return ToolResult(tool_call_id=call.id, content=content)
        except Exception as exc:
            self._log(logging.ERROR, "Tool execution failed", call, error=repr(exc))
            return ToolResult(
                tool_call_id=call.id,
                content="",
                error=f"Tool execution failed: {str(exc) or 'Unknown error'}",
            )

    def _log(self, level: int, message: str, call: ToolCall, **fields) -> None:
        payload = {"tool_call_id": call.id, "tool_name": call.name}
        payload.update(fields)
        self._logger.log(level, message, extra={"extra": payload})
