# SPDX-FileCopyrightText: 2023 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later
from __future__ import annotations

import logging
import typing

import msgspec

from ..commontypes import BlockType, InlineStyle
from . import document
from .history import push_change, redo, undo, with_inline_style_override

if typing.TYPE_CHECKING:
    from .doctypes import EditorState


logger = logging.getLogger(__name__)

INLINE_STYLE_COMMANDS = {
    "bold": InlineStyle.BOLD,
    "italic": InlineStyle.ITALIC,
    "underline": InlineStyle.UNDERLINE,
    "code": InlineStyle.CODE,
}


def insert_characters(editor_state: EditorState, chars: str) -> EditorState:
    selection = editor_state.selection
    content = editor_state.content
    styles = editor_state.inline_style_override
    if styles is None:
        styles = document.styles_at_caret(content, selection)
    return push_change(editor_state, document.insert_text(content, selection, chars, styles), "insert-characters")


def current_inline_style(editor_state: EditorState):
    if editor_state.inline_style_override is not None:
        return editor_state.inline_style_override
    return document.styles_at_caret(editor_state.content, editor_state.selection)


def toggle_inline_style(editor_state: EditorState, style: InlineStyle) -> EditorState:
    selection = editor_state.selection
    if selection.is_collapsed:
        return with_inline_style_override(editor_state, current_inline_style(editor_state) ^ {style})

    content = editor_state.content
    ranges = [r for r in document.selection_ranges(content, selection) if not r.is_collapsed]
    already_styled = all(content.block_for_key(r.block_key).has_style(style, r.start, r.end) for r in ranges)
    restyle = document.remove_inline_style if already_styled else document.apply_inline_style
    for text_range in ranges:
        content = restyle(content, text_range, style)
    content = msgspec.structs.replace(content, selection_before=selection, selection_after=selection)
    return push_change(editor_state, content, "change-inline-style")


def toggle_block_type(editor_state: EditorState, block_type: BlockType) -> EditorState:
    selection = editor_state.selection
    content = editor_state.content
    target = BlockType.UNSTYLED if editor_state.current_block.type is block_type else block_type
    for block_key in document.block_keys(content, selection):
        content = document.set_block_type(content, block_key, target)
    content = msgspec.structs.replace(content, selection_before=selection, selection_after=selection)
    return push_change(editor_state, content, "change-block-type")


def indent_list(editor_state: EditorState, shift: bool, max_depth: int) -> EditorState:
    """Nest (or, with shift, un-nest) the selected list items.

    Returns the very same editor state when nothing changes: the selection isn't in a list
    item, or the item is already as deep as it is allowed to go.
    """
    selection = editor_state.selection
    if not selection.is_single_block:
        return editor_state
    block = editor_state.current_block
    if not block.type.is_list_item:
        return editor_state
    if not shift and block.depth >= max_depth:
        return editor_state
    if shift and block.depth == 0:
        return editor_state
    adjusted = document.adjust_depth(editor_state.content, selection, -1 if shift else 1, max_depth)
    return push_change(editor_state, adjusted, "adjust-depth")


def remove_block_style(editor_state: EditorState) -> typing.Optional[EditorState]:
    selection = editor_state.selection
    if not selection.is_collapsed or selection.anchor_offset != 0:
        return None
    block = editor_state.current_block
    if block.type is BlockType.UNSTYLED:
        return None
    content = document.set_block_type(editor_state.content, block.key, BlockType.UNSTYLED)
    content = msgspec.structs.replace(content, selection_before=selection, selection_after=selection)
    return push_change(editor_state, content, "change-block-type")


def handle_key_command(editor_state: EditorState, command: str) -> typing.Optional[EditorState]:
    if command in INLINE_STYLE_COMMANDS:
        return toggle_inline_style(editor_state, INLINE_STYLE_COMMANDS[command])
    if command == "undo":
        return undo(editor_state)
    if command == "redo":
        return redo(editor_state)
    if command == "backspace":
        return remove_block_style(editor_state)
    return None


def apply_default_command(editor_state: EditorState, command: str) -> typing.Optional[EditorState]:
    content = editor_state.content
    selection = editor_state.selection
    match command:
        case "split-block":
            return push_change(editor_state, document.split_block(content, selection), "split-block")
        case "backspace":
            updated = document.delete_backward(content, selection)
            change_type = "backspace-character"
        case "delete":
            updated = document.delete_forward(content, selection)
            change_type = "delete-character"
        case _:
            return None
    if updated is content:
        return editor_state
    return push_change(editor_state, updated, change_type)
