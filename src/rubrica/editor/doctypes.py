from __future__ import annotations

import typing

import msgspec
import timeflake

from ..commontypes import BlockType, InlineStyle, UnknownBlockError

StyleSet = frozenset[InlineStyle]
NO_STYLE: StyleSet = frozenset()


def generate_key() -> str:
    return timeflake.random().base62


class Block(msgspec.Struct, kw_only=True, frozen=True):
    key: str
    type: BlockType = BlockType.UNSTYLED
    text: str = ""
    # one style set per character of text
    styles: tuple[StyleSet, ...] = ()
    depth: int = 0

    def __post_init__(self):
        if len(self.styles) != len(self.text):
            raise ValueError(f"Block {self.key!r} has {len(self.text)} characters but {len(self.styles)} style sets")

    @classmethod
    def unstyled(cls, text: str = "", key: typing.Optional[str] = None):
        return cls(key=key or generate_key(), text=text, styles=(NO_STYLE,) * len(text))

    def style_at(self, offset: int) -> StyleSet:
        return self.styles[offset]

    def has_style(self, style: InlineStyle, start: int, end: int) -> bool:
        if start >= end:
            return False
        return all(style in s for s in self.styles[start:end])


class TextRange(msgspec.Struct, frozen=True):
    block_key: str
    start: int
    end: int

    @property
    def is_collapsed(self):
        return self.start == self.end


class SelectionState(msgspec.Struct, kw_only=True, frozen=True):
    anchor_key: str
    anchor_offset: int = 0
    focus_key: str
    focus_offset: int = 0

    @classmethod
    def caret(cls, block_key: str, offset: int = 0):
        return cls(anchor_key=block_key, anchor_offset=offset, focus_key=block_key, focus_offset=offset)

    @property
    def is_collapsed(self):
        return self.anchor_key == self.focus_key and self.anchor_offset == self.focus_offset

    @property
    def is_single_block(self):
        return self.anchor_key == self.focus_key

    @property
    def start_key(self):
        return self.anchor_key

    def as_range(self) -> TextRange:
        if not self.is_single_block:
            raise ValueError("Selection spans more than one block")
        start, end = sorted((self.anchor_offset, self.focus_offset))
        return TextRange(self.anchor_key, start, end)


class ContentState(msgspec.Struct, kw_only=True, frozen=True):
    blocks: tuple[Block, ...]
    selection_before: SelectionState
    selection_after: SelectionState

    @classmethod
    def from_blocks(cls, blocks: typing.Sequence[Block]):
        if not blocks:
            blocks = [Block.unstyled()]
        selection = SelectionState.caret(blocks[0].key)
        return cls(blocks=tuple(blocks), selection_before=selection, selection_after=selection)

    def index_of(self, block_key: str) -> int:
        for i, block in enumerate(self.blocks):
            if block.key == block_key:
                return i
        raise UnknownBlockError(block_key)

    def block_for_key(self, block_key: str) -> Block:
        return self.blocks[self.index_of(block_key)]

    def block_before(self, block_key: str) -> typing.Optional[Block]:
        i = self.index_of(block_key)
        return self.blocks[i - 1] if i > 0 else None

    def block_after(self, block_key: str) -> typing.Optional[Block]:
        i = self.index_of(block_key)
        return self.blocks[i + 1] if i + 1 < len(self.blocks) else None

    @property
    def first_block(self) -> Block:
        return self.blocks[0]

    @property
    def last_block(self) -> Block:
        return self.blocks[-1]

    def has_text(self) -> bool:
        return len(self.blocks) > 1 or len(self.blocks[0].text) > 0

    def plain_text(self, delimiter: str = "\n") -> str:
        return delimiter.join(block.text for block in self.blocks)

    def blocks_between(self, start_key: str, end_key: str) -> tuple[Block, ...]:
        start, end = sorted((self.index_of(start_key), self.index_of(end_key)))
        return self.blocks[start : end + 1]


class EditorState(msgspec.Struct, kw_only=True, frozen=True):
    content: ContentState
    selection: SelectionState
    undo_stack: tuple[ContentState, ...] = ()
    redo_stack: tuple[ContentState, ...] = ()
    last_change_type: typing.Optional[str] = None
    # styles applied to the next typed characters when the caret has no range
    inline_style_override: typing.Optional[StyleSet] = None

    @property
    def current_block(self) -> Block:
        return self.content.block_for_key(self.selection.start_key)

    def can_undo(self):
        return bool(self.undo_stack)

    def can_redo(self):
        return bool(self.redo_stack)
