"""Render a role-tagged conversation as the single prompt string the upstream model reads.

Three stages:

1. project every message to ``(role, text)``;
2. merge adjacent entries that share a role, joined by a blank line;
3. wrap each merged block in the model's sentinel tokens and concatenate.

Markdown images are removed from the final text.
"""

import re
from dataclasses import dataclass
from typing import List, Sequence

from bridge_core.domain.models import Message

ASSISTANT_START = "<｜Assistant｜>"
ASSISTANT_END = "<｜end of sentence｜>"
USER_START = "<｜User｜>"
TOOL_START = "<｜Tool｜>"
TOOL_END = "<｜end of tool｜>"

# URL 允许一层成对括号，如 p_(1).png
MARKDOWN_IMAGE = re.compile(r"!\[[^\]\n]*\]\((?:[^()\n]|\([^()\n]*\))*\)")


@dataclass
class PromptBlock:
    role: str
    text: str


def project_message(message: Message) -> PromptBlock:
    if message.role == "tool":
        return PromptBlock("tool", f"Tool Result ({message.tool_call_id or ''}): {message.text}")
    if message.tool_calls:
        calls_text = "\n".join(f"Tool Call: {c.name}({c.arguments})" for c in message.tool_calls)
        content = message.text
        return PromptBlock(message.role, f"{content}\n{calls_text}" if content else calls_text)
    return PromptBlock(message.role, message.text)


def merge_blocks(blocks: Sequence[PromptBlock]) -> List[PromptBlock]:
    merged: List[PromptBlock] = []
    for block in blocks:
        if merged and merged[-1].role == block.role:
            merged[-1].text += f"\n\n{block.text}"
        else:
            merged.append(PromptBlock(block.role, block.text))
    return merged


def wrap_block(block: PromptBlock, index: int) -> str:
    if block.role == "assistant":
        return f"{ASSISTANT_START}{block.text}{ASSISTANT_END}"
    if block.role in ("user", "system"):
        # 第一个块不加前缀
        return f"{USER_START}{block.text}" if index > 0 else block.text
    if block.role == "tool":
        return f"{TOOL_START}{block.text}{TOOL_END}"
    return block.text


def strip_markdown_images(text: str) -> str:
    # 删除一个图片后，前后文本可能拼出新的图片标记，需重复直到没有匹配
    while MARKDOWN_IMAGE.search(text):
        text = MARKDOWN_IMAGE.sub("", text)
    return text


def to_prompt(messages: Sequence[Message]) -> str:
    if not messages:
        return ""
    blocks = merge_blocks([project_message(m) for m in messages])
    prompt = "".join(wrap_block(block, i) for i, block in enumerate(blocks))
    return strip_markdown_images(prompt)
