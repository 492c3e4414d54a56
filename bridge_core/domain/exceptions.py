"""统一业务异常模型。

所有跨模块抛出的业务级错误都应该继承自 BusinessError，
便于在 API 层统一捕获，或在工具执行边界转换成 ToolResult.error。
"""


class BusinessError(Exception):
    """业务异常基类。

    Attributes:
        code: 机器可读错误码（如 "MISSING_PARAMETER"）。
        message: 用户可读错误信息。
        http_status: 映射到 HTTP 时可用的状态码，默认 400。
        extra: 其他补充字段（例如 tool_call_id、field 等）。
    """

    def __init__(self, code: str, message: str, http_status: int = 400, **extra):
        self.code = code
        self.message = message
        self.http_status = http_status
        self.extra = extra
        super().__init__(message)


class ValidationError(BusinessError):
    """请求参数校验失败（例如 messages 不是数组）。"""


class ToolError(BusinessError):
    """工具处理器可预期的失败，message 会原样写入 ToolResult.error。"""


class CalculationError(BusinessError):
    """算术表达式无法解析或求值。"""
