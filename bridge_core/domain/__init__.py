"""领域层模型与异常。

包含：
- models: Tool / ToolCall / ToolResult / Message 以及内容投影函数。
- exceptions: 业务异常类型定义。
"""
