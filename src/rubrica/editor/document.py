# SPDX-FileCopyrightText: 2023 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later
from __future__ import annotations

import logging
import re
import typing

import msgspec

from ..commontypes import BlockType, InlineStyle, InvalidRangeError
from ..util import clamp, replacing
from .doctypes import NO_STYLE, Block, ContentState, SelectionState, StyleSet, TextRange, generate_key

if typing.TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from .doctypes import EditorState


logger = logging.getLogger(__name__)

# Every function here takes a ContentState and hands back a new one. Nothing is modified in place,
# so an old ContentState can always be kept around as an undo point.

LINE_SPLITTER = re.compile(r"\r\n?|\n")


def get_selection(editor_state: EditorState) -> SelectionState:
    return editor_state.selection


def get_block_text(content: ContentState, block_key: str) -> str:
    return content.block_for_key(block_key).text


def plain_text(content: ContentState) -> str:
    return content.plain_text()


def from_plain_text(text: str) -> ContentState:
    return ContentState.from_blocks([Block.unstyled(line) for line in LINE_SPLITTER.split(text)])


def _checked_block(content: ContentState, text_range: TextRange) -> Block:
    block = content.block_for_key(text_range.block_key)
    if not (0 <= text_range.start <= text_range.end <= len(block.text)):
        raise InvalidRangeError(text_range.block_key, text_range.start, text_range.end, len(block.text))
    return block


def _with_block(content: ContentState, block: Block, selection_before: SelectionState, selection_after: SelectionState):
    blocks = replacing(content.blocks, content.index_of(block.key), block)
    return msgspec.structs.replace(content, blocks=blocks, selection_before=selection_before, selection_after=selection_after)


def _range_selection(text_range: TextRange) -> SelectionState:
    return SelectionState(
        anchor_key=text_range.block_key,
        anchor_offset=text_range.start,
        focus_key=text_range.block_key,
        focus_offset=text_range.end,
    )


def replace_text(content: ContentState, text_range: TextRange, text: str, styles: StyleSet = NO_STYLE) -> ContentState:
    block = _checked_block(content, text_range)
    new_block = msgspec.structs.replace(
        block,
        text=block.text[: text_range.start] + text + block.text[text_range.end :],
        styles=block.styles[: text_range.start] + (styles,) * len(text) + block.styles[text_range.end :],
    )
    return _with_block(
        content,
        new_block,
        selection_before=_range_selection(text_range),
        selection_after=SelectionState.caret(block.key, text_range.start + len(text)),
    )


def remove_range(content: ContentState, text_range: TextRange) -> ContentState:
    return replace_text(content, text_range, "")


def remove_selection(content: ContentState, selection: SelectionState) -> ContentState:
    """Delete the selected text, joining what is left of the first and last selected blocks."""
    if selection.is_single_block:
        return remove_range(content, selection.as_range())
    ranges = selection_ranges(content, selection)
    first, last = ranges[0], ranges[-1]
    head = _checked_block(content, first)
    tail = _checked_block(content, last)
    merged = msgspec.structs.replace(
        head,
        text=head.text[: first.start] + tail.text[last.end :],
        styles=head.styles[: first.start] + tail.styles[last.end :],
    )
    dropped = {text_range.block_key for text_range in ranges[1:]}
    blocks = tuple(merged if b.key == head.key else b for b in content.blocks if b.key not in dropped)
    return msgspec.structs.replace(
        content,
        blocks=blocks,
        selection_before=selection,
        selection_after=SelectionState.caret(head.key, first.start),
    )


def set_block_type(content: ContentState, block_key: str, block_type: BlockType) -> ContentState:
    block = content.block_for_key(block_key)
    return _with_block(
        content,
        msgspec.structs.replace(block, type=block_type),
        selection_before=content.selection_after,
        selection_after=content.selection_after,
    )


def _restyle(content: ContentState, text_range: TextRange, change: Callable[[StyleSet], StyleSet]) -> ContentState:
    block = _checked_block(content, text_range)
    styles = (
        block.styles[: text_range.start]
        + tuple(change(s) for s in block.styles[text_range.start : text_range.end])
        + block.styles[text_range.end :]
    )
    selection = _range_selection(text_range)
    return _with_block(content, msgspec.structs.replace(block, styles=styles), selection_before=selection, selection_after=selection)


def apply_inline_style(content: ContentState, text_range: TextRange, style: InlineStyle) -> ContentState:
    return _restyle(content, text_range, lambda s: s | {style})


def remove_inline_style(content: ContentState, text_range: TextRange, style: InlineStyle) -> ContentState:
    return _restyle(content, text_range, lambda s: s - {style})


def toggle_inline_style(content: ContentState, text_range: TextRange, style: InlineStyle) -> ContentState:
    block = _checked_block(content, text_range)
    if block.has_style(style, text_range.start, text_range.end):
        return remove_inline_style(content, text_range, style)
    return apply_inline_style(content, text_range, style)


def adjust_depth(content: ContentState, selection: SelectionState, adjustment: int, max_depth: int) -> ContentState:
    adjusted = {
        block.key: msgspec.structs.replace(block, depth=clamp(block.depth + adjustment, 0, max_depth))
        for block in content.blocks_between(selection.anchor_key, selection.focus_key)
    }
    blocks = tuple(adjusted.get(block.key, block) for block in content.blocks)
    return msgspec.structs.replace(content, blocks=blocks, selection_before=selection, selection_after=selection)


def insert_text(content: ContentState, selection: SelectionState, text: str, styles: StyleSet = NO_STYLE) -> ContentState:
    if selection.is_single_block:
        return replace_text(content, selection.as_range(), text, styles)
    cleared = remove_selection(content, selection)
    caret = cleared.selection_after
    inserted = replace_text(cleared, TextRange(caret.anchor_key, caret.anchor_offset, caret.anchor_offset), text, styles)
    return msgspec.structs.replace(inserted, selection_before=selection)


def split_block(content: ContentState, selection: SelectionState) -> ContentState:
    content = remove_selection(content, selection)
    caret = content.selection_after
    block = content.block_for_key(caret.anchor_key)
    offset = caret.anchor_offset
    head = msgspec.structs.replace(block, text=block.text[:offset], styles=block.styles[:offset])
    tail = Block(
        key=generate_key(),
        type=block.type,
        text=block.text[offset:],
        styles=block.styles[offset:],
        depth=block.depth,
    )
    i = content.index_of(block.key)
    blocks = content.blocks[:i] + (head, tail) + content.blocks[i + 1 :]
    return msgspec.structs.replace(
        content,
        blocks=blocks,
        selection_before=selection,
        selection_after=SelectionState.caret(tail.key, 0),
    )


def _join_blocks(content: ContentState, first: Block, second: Block, selection: SelectionState) -> ContentState:
    joined = msgspec.structs.replace(first, text=first.text + second.text, styles=first.styles + second.styles)
    blocks = tuple(joined if b.key == first.key else b for b in content.blocks if b.key != second.key)
    return msgspec.structs.replace(
        content,
        blocks=blocks,
        selection_before=selection,
        selection_after=SelectionState.caret(first.key, len(first.text)),
    )


def delete_backward(content: ContentState, selection: SelectionState) -> ContentState:
    if not selection.is_collapsed:
        return remove_selection(content, selection)
    offset = selection.anchor_offset
    if offset > 0:
        return remove_range(content, TextRange(selection.anchor_key, offset - 1, offset))
    previous = content.block_before(selection.anchor_key)
    if previous is None:
        # no going back
        return content
    return _join_blocks(content, previous, content.block_for_key(selection.anchor_key), selection)


def delete_forward(content: ContentState, selection: SelectionState) -> ContentState:
    if not selection.is_collapsed:
        return remove_selection(content, selection)
    block = content.block_for_key(selection.anchor_key)
    offset = selection.anchor_offset
    if offset < len(block.text):
        return remove_range(content, TextRange(block.key, offset, offset + 1))
    following = content.block_after(block.key)
    if following is None:
        return content
    return _join_blocks(content, block, following, selection)


def styles_at_caret(content: ContentState, selection: SelectionState) -> StyleSet:
    """The styles a character typed at the caret would pick up from its surroundings."""
    block = content.block_for_key(selection.anchor_key)
    offset = selection.anchor_offset
    if offset > 0:
        return block.style_at(offset - 1)
    if block.text:
        return block.style_at(0)
    return NO_STYLE


def block_keys(content: ContentState, selection: SelectionState) -> Sequence[str]:
    return [block.key for block in content.blocks_between(selection.anchor_key, selection.focus_key)]


def selection_ranges(content: ContentState, selection: SelectionState) -> list[TextRange]:
    """Split a selection into one range per block, in document order."""
    if selection.is_single_block:
        return [selection.as_range()]
    start_index = content.index_of(selection.anchor_key)
    end_index = content.index_of(selection.focus_key)
    start_key, start_offset, end_key, end_offset = (
        selection.anchor_key,
        selection.anchor_offset,
        selection.focus_key,
        selection.focus_offset,
    )
    if start_index > end_index:
        start_key, start_offset, end_key, end_offset = end_key, end_offset, start_key, start_offset
    ranges = []
    for block in content.blocks_between(start_key, end_key):
        start = start_offset if block.key == start_key else 0
        end = end_offset if block.key == end_key else len(block.text)
        ranges.append(TextRange(block.key, start, end))
    return ranges
