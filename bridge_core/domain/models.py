"""统一的工具与消息数据模型。

本模块定义了在工具规范化、工具调用解析、工具执行与 prompt 转换之间
共享的标准数据结构：

- Tool: 规范化后的工具定义（MCP 形态）。
- ToolCall: 一次工具调用，arguments 始终是未解析的 JSON 文本。
- ToolResult: 工具执行结果，error 优先于 content 参与渲染。
- Message: 一条对话消息，content 为 TextContent | PartedContent。

所有模型都提供 from_payload / to_payload，用于和 OpenAI 风格的 JSON
请求体互相转换；模型本身不做网络或持久化。
"""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union


@dataclass
class Tool:
    """规范化后的工具定义。"""

    name: str
    description: str
    input_schema: Dict[str, Any]

    def to_payload(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.input_schema,
        }


@dataclass
class ToolCall:
    """模型发起的一次工具调用请求。

    arguments 保留原始 JSON 文本，执行前才解析；解析失败是执行期错误，
    而不是构造期错误。
    """

    id: str
    name: str
    arguments: str
    type: str = "function"

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "ToolCall":
        func = payload.get("function")
        if not isinstance(func, dict):
            func = {}
        raw_args = func.get("arguments")
        if raw_args is None:
            arguments = ""
        elif isinstance(raw_args, str):
            arguments = raw_args
        else:
            arguments = json.dumps(raw_args, ensure_ascii=False)
        return cls(
            id=str(payload.get("id") or ""),
            name=str(func.get("name") or ""),
            arguments=arguments,
            type=str(payload.get("type") or "function"),
        )

    def to_payload(self) -> Dict[str, Any]:
        # 字段顺序固定：id, type, function.name, function.arguments
        return {
            "id": self.id,
            "type": self.type,
            "function": {
                "name": self.name,
                "arguments": self.arguments,
            },
        }


@dataclass
class ToolResult:
    """工具执行结果的封装（文本形式）。"""

    tool_call_id: str
    content: str
    error: Optional[str] = None

    @property
    def display_text(self) -> str:
        """渲染用文本：有 error 时以 error 为准。"""

        if self.error:
            return f"Error: {self.error}"
        return self.content

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "ToolResult":
        error = payload.get("error")
        return cls(
            tool_call_id=str(payload.get("tool_call_id") or ""),
            content=_as_text(payload.get("content")),
            error=str(error) if error else None,
        )

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"tool_call_id": self.tool_call_id, "content": self.content}
        if self.error is not None:
            payload["error"] = self.error
        return payload


@dataclass
class ContentPart:
    """多段内容中的一段；只有 type == "text" 的段参与 prompt 渲染。"""

    type: str
    text: Optional[str] = None
    data: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_payload(cls, payload: Any) -> "ContentPart":
        if not isinstance(payload, dict):
            return cls(type="unknown", data={"value": payload})
        data = {k: v for k, v in payload.items() if k not in ("type", "text")}
        text = payload.get("text")
        return cls(
            type=str(payload.get("type") or ""),
            text=text if isinstance(text, str) else None,
            data=data,
        )

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"type": self.type}
        if self.text is not None:
            payload["text"] = self.text
        payload.update(self.data)
        return payload


@dataclass
class TextContent:
    """纯文本内容。"""

    text: str

    def project(self) -> str:
        return self.text

    def to_payload(self) -> str:
        return self.text


@dataclass
class PartedContent:
    """多段内容（文本、图片等混合）。"""

    parts: List[ContentPart]

    def project(self) -> str:
        return "\n".join(p.text or "" for p in self.parts if p.type == "text")

    def to_payload(self) -> List[Dict[str, Any]]:
        return [p.to_payload() for p in self.parts]


Content = Union[TextContent, PartedContent]


def project_text(content: Optional[Content]) -> str:
    """把任意形态的消息内容投影为纯文本（所有渲染器共用）。"""

    if content is None:
        return ""
    return content.project()


def content_from_payload(raw: Any) -> Optional[Content]:
    if isinstance(raw, str):
        return TextContent(raw)
    if isinstance(raw, list):
        return PartedContent([ContentPart.from_payload(item) for item in raw])
    return None


@dataclass
class Message:
    """一条对话消息。

    - role: 消息角色，如 system/user/assistant/tool。
    - content: TextContent 或 PartedContent，缺省为 None。
    - tool_calls: assistant 触发的结构化工具调用列表。
    - tool_call_id: 当 role 为 "tool" 时，用于关联某一次工具调用。
    """

    role: str
    content: Optional[Content] = None
    tool_calls: Optional[List[ToolCall]] = None
    tool_call_id: Optional[str] = None

    @property
    def text(self) -> str:
        return project_text(self.content)

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "Message":
        raw_calls = payload.get("tool_calls")
        tool_calls: Optional[List[ToolCall]] = None
        if isinstance(raw_calls, list):
            tool_calls = [ToolCall.from_payload(c) for c in raw_calls if isinstance(c, dict)]
        tool_call_id = payload.get("tool_call_id")
        return cls(
            role=str(payload.get("role") or ""),
            content=content_from_payload(payload.get("content")),
            tool_calls=tool_calls,
            tool_call_id=str(tool_call_id) if tool_call_id is not None else None,
        )

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"role": self.role}
        if self.content is not None:
            payload["content"] = self.content.to_payload()
        if self.tool_calls is not None:
            payload["tool_calls"] = [c.to_payload() for c in self.tool_calls]
        if self.tool_call_id is not None:
            payload["tool_call_id"] = self.tool_call_id
        return payload


def _as_text(raw: Any) -> str:
    if raw is None:
        return ""
    if isinstance(raw, str):
        return raw
    return json.dumps(raw, ensure_ascii=False)
