# SPDX-FileCopyrightText: 2021 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later
import enum


@enum.unique
class BlockType(enum.Enum):
    UNSTYLED = "unstyled"
    HEADER_ONE = "header-one"
    HEADER_TWO = "header-two"
    HEADER_THREE = "header-three"
    HEADER_FOUR = "header-four"
    HEADER_FIVE = "header-five"
    HEADER_SIX = "header-six"
    BLOCKQUOTE = "blockquote"
    UNORDERED_LIST_ITEM = "unordered-list-item"
    ORDERED_LIST_ITEM = "ordered-list-item"
    CODE_BLOCK = "code-block"

    @enum.property
    def is_list_item(self):
        return self in (BlockType.UNORDERED_LIST_ITEM, BlockType.ORDERED_LIST_ITEM)


@enum.unique
class InlineStyle(enum.Enum):
    BOLD = "BOLD"
    ITALIC = "ITALIC"
    UNDERLINE = "UNDERLINE"
    CODE = "CODE"
    # custom accent colour, rendered as red foreground text
    RED = "RED"


class RubricaError(Exception):
    pass


class InvalidRangeError(RubricaError):
    def __init__(self, block_key: str, start: int, end: int, length: int):
        self.block_key = block_key
        self.start = start
        self.end = end
        self.length = length
        super().__init__(f"Range [{start}, {end}) is outside block {block_key!r} of length {length}")


class UnknownBlockError(RubricaError):
    def __init__(self, block_key: str):
        self.block_key = block_key
        super().__init__(f"No block with key {block_key!r}")


class StorageError(RubricaError):
    pass
