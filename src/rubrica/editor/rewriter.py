# SPDX-FileCopyrightText: 2023 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later
from __future__ import annotations

import logging
import typing

import msgspec

from ..commontypes import InvalidRangeError
from . import document
from .doctypes import TextRange
from .history import push_change, with_inline_style_override
from .triggers import SetBlockType, ToggleInlineStyle

if typing.TYPE_CHECKING:
    from .doctypes import EditorState
    from .planner import EditPlan


logger = logging.getLogger(__name__)


def apply(plan: EditPlan, editor_state: EditorState) -> EditorState:
    """Rewrite the caret's block according to plan, as a single undoable change.

    The trigger text is replaced and the formatting applied on the content first; only the
    finished content is pushed, so one undo puts back both the text and the formatting.
    Raises InvalidRangeError, leaving editor_state as it was, if the plan doesn't fit the block.
    """
    selection = editor_state.selection
    block = editor_state.current_block
    if plan.trigger_length > len(block.text):
        raise InvalidRangeError(block.key, 0, plan.trigger_length, len(block.text))

    content = document.replace_text(editor_state.content, TextRange(block.key, 0, plan.trigger_length), plan.rewritten_text)
    caret = content.selection_after
    rewritten = TextRange(block.key, 0, len(plan.rewritten_text))

    match plan.action:
        case SetBlockType(block_type=block_type):
            content = document.set_block_type(content, block.key, block_type)
            change_type = "change-block-type"
        case ToggleInlineStyle(style=style):
            # replace_text left the span unstyled, so toggling always turns the style on
            content = document.toggle_inline_style(content, rewritten, style)
            change_type = "change-inline-style"
        case _:
            raise TypeError(f"Unexpected format action {plan.action!r}")

    content = msgspec.structs.replace(content, selection_before=selection, selection_after=caret)
    rewritten_state = push_change(editor_state, content, change_type)
    if isinstance(plan.action, ToggleInlineStyle):
        # keep typing in the new style, even when the trigger left the block empty
        rewritten_state = with_inline_style_override(rewritten_state, frozenset({plan.action.style}))
    logger.debug("Applied %r to block %s", plan.action, block.key)
    return rewritten_state
