"""Normalize client-supplied tool definitions into the canonical ``Tool`` shape.

Two external schemas are accepted:

- MCP: ``{"name", "description", "inputSchema"}``
- OpenAI function calling: ``{"type": "function", "function": {"name", "description", "parameters"}}``

Classification is an ordered list of structural predicates; the first one that
matches decides how the element is converted. Anything else goes through a
best-effort extraction, and an element that blows up during processing is
replaced by a placeholder so that one bad definition never fails the batch.
"""

import logging
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from bridge_core.domain.models import Tool
from bridge_core.infrastructure.logging.logger import get_logger

UNKNOWN_TOOL_NAME = "unknown_tool"
UNKNOWN_TOOL_DESCRIPTION = "No description provided"
INVALID_TOOL_NAME = "invalid_tool"
INVALID_TOOL_DESCRIPTION = "Invalid tool definition"


def _empty_schema() -> Dict[str, Any]:
    return {"type": "object", "properties": {}}


def is_mcp_tool(obj: Any) -> bool:
    if isinstance(obj, Tool):
        return True
    return (
        isinstance(obj, dict)
        and isinstance(obj.get("name"), str)
        and isinstance(obj.get("description"), str)
        and isinstance(obj.get("inputSchema"), dict)
    )


def is_openai_function(obj: Any) -> bool:
    if not isinstance(obj, dict) or obj.get("type") != "function":
        return False
    func = obj.get("function")
    return (
        isinstance(func, dict)
        and isinstance(func.get("name"), str)
        and isinstance(func.get("description"), str)
        and isinstance(func.get("parameters"), dict)
    )


def _from_mcp(obj: Any) -> Tool:
    if isinstance(obj, Tool):
        return obj
    return Tool(name=obj["name"], description=obj["description"], input_schema=obj["inputSchema"])


def _from_openai(obj: Dict[str, Any]) -> Tool:
    func = obj["function"]
    return Tool(name=func["name"], description=func["description"], input_schema=func["parameters"])


def _first(candidates: Sequence[Any], accept: Callable[[Any], bool]) -> Optional[Any]:
    for value in candidates:
        if accept(value):
            return value
    return None


def _fallback(obj: Dict[str, Any]) -> Tool:
    func = obj.get("function")
    if not isinstance(func, dict):
        func = {}
    name = _first((obj.get("name"), func.get("name")), lambda v: isinstance(v, str) and bool(v))
    description = _first(
        (obj.get("description"), func.get("description")), lambda v: isinstance(v, str) and bool(v)
    )
    schema = _first((obj.get("inputSchema"), func.get("parameters")), lambda v: isinstance(v, dict))
    return Tool(
        name=name or UNKNOWN_TOOL_NAME,
        description=description or UNKNOWN_TOOL_DESCRIPTION,
        input_schema=schema if schema is not None else _empty_schema(),
    )


# 顺序即优先级
_CLASSIFIERS: List[Tuple[str, Callable[[Any], bool], Callable[[Any], Tool]]] = [
    ("mcp", is_mcp_tool, _from_mcp),
    ("openai", is_openai_function, _from_openai),
]


def normalize_tool(obj: Any, logger: Optional[logging.Logger] = None) -> Tool:
    """Convert one tool definition; never raises."""

    log = logger or get_logger(__name__)
    try:
        for _kind, matches, convert in _CLASSIFIERS:
            if matches(obj):
                return convert(obj)
        tool = _fallback(obj)
        log.warning(
            "Unrecognized tool format, used fallback extraction",
            extra={"extra": {"tool_name": tool.name}},
        )
        return tool
    except Exception as exc:
        log.warning(
            "Failed to normalize tool definition",
            extra={"extra": {"error": str(exc), "input_type": type(obj).__name__}},
        )
        return Tool(name=INVALID_TOOL_NAME, description=INVALID_TOOL_DESCRIPTION, input_schema=_empty_schema())


def normalize_tools(tools: Optional[Sequence[Any]], logger: Optional[logging.Logger] = None) -> List[Tool]:
    """Normalize a batch of tool definitions, preserving order and duplicates."""

    if not tools:
        return []
    return [normalize_tool(t, logger=logger) for t in tools]
