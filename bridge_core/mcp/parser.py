"""Parse ``<tool_call>{json}</tool_call>`` blocks out of model text."""

import json
import logging
import re
from typing import Any, List, Optional

from bridge_core.domain.models import ToolCall
from bridge_core.infrastructure.logging.logger import get_logger

TOOL_CALL_OPEN = "<tool_call>"
TOOL_CALL_CLOSE = "</tool_call>"

TOOL_CALL_BLOCK = re.compile(r"<tool_call>\s*(.*?)\s*</tool_call>", re.DOTALL)
TOOL_CALL_SPAN = re.compile(r"<tool_call>.*?</tool_call>", re.DOTALL)


def is_valid_tool_call(obj: Any) -> bool:
    if not isinstance(obj, dict):
        return False
    func = obj.get("function")
    return (
        isinstance(obj.get("id"), str)
        and obj.get("type") == "function"
        and isinstance(func, dict)
        and isinstance(func.get("name"), str)
        and isinstance(func.get("arguments"), str)
    )


def extract_tool_calls(text: str, logger: Optional[logging.Logger] = None) -> List[ToolCall]:
    """Return every well-formed tool call in ``text``, left to right.

    A block with broken JSON or a wrong structure is logged and skipped;
    the remaining blocks are still returned.
    """

    log = logger or get_logger(__name__)
    calls: List[ToolCall] = []
    if not text:
        return calls
    for match in TOOL_CALL_BLOCK.finditer(text):
        body = match.group(1)
        try:
            obj = json.loads(body)
        except ValueError as exc:
            log.error("Failed to parse tool call", extra={"extra": {"body": body, "error": str(exc)}})
            continue
        if not is_valid_tool_call(obj):
            log.warning("Invalid tool call format", extra={"extra": {"body": body}})
            continue
        func = obj["function"]
        calls.append(ToolCall(id=obj["id"], name=func["name"], arguments=func["arguments"], type=obj["type"]))
    return calls


def contains_tool_call(text: str) -> bool:
    return bool(text) and TOOL_CALL_SPAN.search(text) is not None


def strip_tool_call_tags(text: str) -> str:
    # 只删除标签区段本身，不做 trim：流式拼接依赖首尾空白
    if not text:
        return text
    return TOOL_CALL_SPAN.sub("", text)
