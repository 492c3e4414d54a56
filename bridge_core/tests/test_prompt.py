from bridge_core.domain.models import ContentPart, Message, PartedContent, TextContent, ToolCall
from bridge_core.pipeline.prompt import MARKDOWN_IMAGE, merge_blocks, project_message, to_prompt


def _msg(role, text, **kw):
    return Message(role=role, content=TextContent(text), **kw)


def test_empty_conversation():
    assert to_prompt([]) == ""


def test_consecutive_user_messages_merge_without_leading_sentinel():
    assert to_prompt([_msg("user", "hi"), _msg("user", "there")]) == "hi\n\nthere"


def test_sentinel_wrapping_by_position():
    prompt = to_prompt([_msg("user", "hi"), _msg("assistant", "hello"), _msg("user", "again")])
    assert prompt == "hi<｜Assistant｜>hello<｜end of sentence｜><｜User｜>again"


def test_system_then_user_are_separate_blocks():
    assert to_prompt([_msg("system", "be nice"), _msg("user", "hi")]) == "be nice<｜User｜>hi"


def test_tool_messages():
    prompt = to_prompt([
        _msg("assistant", "checking"),
        _msg("tool", "42", tool_call_id="c1"),
        _msg("tool", "43", tool_call_id="c2"),
    ])
    assert prompt == (
        "<｜Assistant｜>checking<｜end of sentence｜>"
        "<｜Tool｜>Tool Result (c1): 42\n\nTool Result (c2): 43<｜end of tool｜>"
    )


def test_tool_call_projection():
    calls = [
        ToolCall(id="a", name="calculate", arguments='{"expression":"1+1"}'),
        ToolCall(id="b", name="get_weather", arguments='{"location":"Oslo"}'),
    ]
    bare = project_message(Message(role="assistant", tool_calls=calls))
    assert bare.text == 'Tool Call: calculate({"expression":"1+1"})\nTool Call: get_weather({"location":"Oslo"})'
    with_text = project_message(_msg("assistant", "Let me check", tool_calls=calls[:1]))
    assert with_text.text == 'Let me check\nTool Call: calculate({"expression":"1+1"})'


def test_parted_content_keeps_only_text_parts():
    content = PartedContent([
        ContentPart(type="text", text="a"),
        ContentPart(type="image_url", data={"image_url": {"url": "http://x/y.png"}}),
        ContentPart(type="text", text="b"),
    ])
    assert to_prompt([Message(role="user", content=content)]) == "a\nb"


def test_markdown_images_are_removed_everywhere():
    prompt = to_prompt([
        _msg("user", "look ![cat](http://x/cat.png) here"),
        _msg("assistant", "nice ![](http://x/dog.png)!"),
    ])
    assert "![" not in prompt
    assert prompt == "look  here<｜Assistant｜>nice !<｜end of sentence｜>"


def test_unknown_role_and_missing_content():
    assert to_prompt([_msg("user", "hi"), Message(role="developer", content=None)]) == "hi"
    assert to_prompt([_msg("user", "hi"), _msg("developer", "dev")]) == "hidev"


def test_merge_blocks_does_not_mutate_input():
    blocks = [project_message(_msg("user", "a")), project_message(_msg("user", "b"))]
    merged = merge_blocks(blocks)
    assert merged[0].text == "a\n\nb"
    assert blocks[0].text == "a"


def test_image_removal_repeats_until_no_image_remains():
    assert to_prompt([_msg("user", "!![a](b)[c](d)")]) == ""
    assert to_prompt([_msg("user", "x ![a](http://e/p_(1).png) y")]) == "x  y"
    assert MARKDOWN_IMAGE.search(to_prompt([_msg("user", "![![i](u)](v) ok")])) is None
