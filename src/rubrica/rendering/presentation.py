from __future__ import annotations

import typing

from ..commontypes import BlockType, InlineStyle

if typing.TYPE_CHECKING:
    from collections.abc import Iterable

    from ..editor.doctypes import ContentState

EDITOR_CLASS = "RichEditor-editor"
HIDE_PLACEHOLDER_CLASS = "RichEditor-hidePlaceholder"

BLOCK_CLASSES = {
    BlockType.BLOCKQUOTE: "RichEditor-blockquote",
}

# BOLD, ITALIC and UNDERLINE are also understood by the renderer on its own; these are the
# declarations it needs spelled out.
STYLE_MAP: dict[InlineStyle, dict[str, typing.Union[str, int]]] = {
    InlineStyle.CODE: {
        "backgroundColor": "rgba(0, 0, 0, 0.05)",
        "fontFamily": '"Inconsolata", "Menlo", "Consolas", monospace',
        "fontSize": 16,
        "padding": 2,
    },
    InlineStyle.RED: {
        "color": "red",
    },
    InlineStyle.UNDERLINE: {
        "textDecoration": "underline",
    },
}


def placeholder_hidden(content: ContentState) -> bool:
    # the placeholder only shows over an empty, unstyled first block
    if content.has_text():
        return False
    return content.first_block.type is not BlockType.UNSTYLED


def block_class_name(block_type: BlockType) -> typing.Optional[str]:
    return BLOCK_CLASSES.get(block_type)


def editor_class_name(content: ContentState) -> str:
    if placeholder_hidden(content):
        return f"{EDITOR_CLASS} {HIDE_PLACEHOLDER_CLASS}"
    return EDITOR_CLASS


def style_for(styles: Iterable[InlineStyle]) -> dict[str, typing.Union[str, int]]:
    merged: dict[str, typing.Union[str, int]] = {}
    for style in sorted(styles, key=lambda s: s.value):
        merged.update(STYLE_MAP.get(style, {}))
    return merged
