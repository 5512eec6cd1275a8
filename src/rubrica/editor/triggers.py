# SPDX-FileCopyrightText: 2021 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later
from __future__ import annotations

import enum
import typing

import attr
import pygtrie

from ..commontypes import BlockType, InlineStyle


class Scope(enum.Enum):
    BLOCK = enum.auto()
    INLINE = enum.auto()


@attr.frozen
class SetBlockType:
    block_type: BlockType


@attr.frozen
class ToggleInlineStyle:
    style: InlineStyle


FormatAction = SetBlockType | ToggleInlineStyle


@attr.frozen(kw_only=True)
class TriggerRule:
    prefix: str = attr.field(validator=attr.validators.min_len(1))
    scope: Scope = attr.field()
    action: FormatAction

    @scope.validator
    def _check_scope(self, attribute, value):
        expected = Scope.BLOCK if isinstance(self.action, SetBlockType) else Scope.INLINE
        if value is not expected:
            raise ValueError(f"{self.action!r} cannot be used with {value}")


RULES: tuple[TriggerRule, ...] = (
    TriggerRule(prefix="***", scope=Scope.INLINE, action=ToggleInlineStyle(InlineStyle.UNDERLINE)),
    TriggerRule(prefix="**", scope=Scope.INLINE, action=ToggleInlineStyle(InlineStyle.RED)),
    TriggerRule(prefix="*", scope=Scope.INLINE, action=ToggleInlineStyle(InlineStyle.BOLD)),
    TriggerRule(prefix="#", scope=Scope.BLOCK, action=SetBlockType(BlockType.HEADER_ONE)),
)


class TriggerTable:
    """Looks up which trigger rule, if any, a block's text starts with.

    The rules live in a trie keyed on their prefixes, so the longest prefix the text starts
    with always wins: "***" before "**" before "*".
    """

    def __init__(self, rules: typing.Iterable[TriggerRule]):
        self.rules = tuple(rules)
        self._trie = pygtrie.CharTrie()
        for rule in self.rules:
            if rule.prefix in self._trie:
                raise ValueError(f"Duplicate trigger prefix {rule.prefix!r}")
            self._trie[rule.prefix] = rule

    def match(self, block_text: str) -> typing.Optional[TriggerRule]:
        step = self._trie.longest_prefix(block_text)
        if not step:
            return None
        return step.value


DEFAULT_TRIGGERS = TriggerTable(RULES)


def match(block_text: str) -> typing.Optional[TriggerRule]:
    return DEFAULT_TRIGGERS.match(block_text)
