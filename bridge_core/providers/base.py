"""上游模型客户端抽象接口。

ChatCompletionService 不直接依赖任何 HTTP/SSE 实现，而是依赖此协议：

- 上游模型只理解一段带哨兵标记的纯文本 prompt。
- 实现者负责认证、传输与流式分帧，把结果还原为文本（或文本增量）。

这样可以在不改转换核心的前提下接入不同的上游。
"""

from typing import Iterable, Protocol


class UpstreamClient(Protocol):
    """上游模型客户端协议。

    实现者需要提供：
    - name: 上游名称，用于日志。
    - complete(model, prompt): 非流式调用，返回完整回复文本。
    - complete_stream(model, prompt): 流式调用，逐段产出文本增量。
    """

    name: str

    def complete(self, model: str, prompt: str) -> str:
        ...

    def complete_stream(self, model: str, prompt: str) -> Iterable[str]:
        ...
