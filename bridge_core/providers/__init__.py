"""上游模型集成层：只定义协议，具体传输由宿主提供。"""

from bridge_core.providers.base import UpstreamClient

__all__ = ["UpstreamClient"]
