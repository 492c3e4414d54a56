"""Incremental tool-call scanning for streamed upstream text."""

import logging
from typing import List, Optional

from bridge_core.domain.models import ToolCall
from bridge_core.mcp.parser import TOOL_CALL_CLOSE, TOOL_CALL_OPEN, extract_tool_calls


def _partial_prefix_len(text: str, tag: str) -> int:
    """Length of the longest suffix of ``text`` that is a proper prefix of ``tag``."""

    for size in range(min(len(tag) - 1, len(text)), 0, -1):
        if text.endswith(tag[:size]):
            return size
    return 0


class ToolCallStream:
    """Split a stream of text deltas into visible text and tool calls.

    ``feed`` returns the part of the stream that can be shown right away:
    completed ``<tool_call>`` spans are removed and parsed, an open span (or
    a chunk that might be the start of one) is held back until more text
    arrives. Joining every ``feed`` result with ``flush()`` gives the same
    text as ``strip_tool_call_tags`` over the whole stream.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        self._buffer = ""
        self._logger = logger
        self.tool_calls: List[ToolCall] = []

    def feed(self, delta: str) -> str:
        if not delta:
            return ""
        self._buffer += delta
        visible: List[str] = []
        while True:
            start = self._buffer.find(TOOL_CALL_OPEN)
            if start == -1:
                keep = _partial_prefix_len(self._buffer, TOOL_CALL_OPEN)
                cut = len(self._buffer) - keep
                visible.append(self._buffer[:cut])
                self._buffer = self._buffer[cut:]
                break
            end = self._buffer.find(TOOL_CALL_CLOSE, start + len(TOOL_CALL_OPEN))
            if end == -1:
                visible.append(self._buffer[:start])
                self._buffer = self._buffer[start:]
                break
            end += len(TOOL_CALL_CLOSE)
            visible.append(self._buffer[:start])
            self.tool_calls.extend(extract_tool_calls(self._buffer[start:end], logger=self._logger))
            self._buffer = self._buffer[end:]
        return "".join(visible)

    def flush(self) -> str:
        """Release whatever is still buffered (an unterminated tag is returned verbatim)."""

        rest, self._buffer = self._buffer, ""
        return rest
