"""Bridge Core 顶层包。

在结构化 function calling 与文本内 <tool_call> 标签两种工具调用约定之间转换：
工具定义规范化、标签解析、上下文注入、工具执行、消息管线与 prompt 渲染。
"""

from bridge_core.api.service import ChatCompletionService, PreparedPrompt

__all__ = ["ChatCompletionService", "PreparedPrompt"]
