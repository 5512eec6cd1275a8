from __future__ import annotations

import logging
import typing

import msgspec

from .doctypes import ContentState, EditorState, SelectionState, StyleSet
from .document import from_plain_text

logger = logging.getLogger(__name__)

# Typing a run of characters (or deleting one) is one undo step, as long as the caret
# wasn't moved somewhere else in between.
COALESCING_CHANGES = frozenset({"insert-characters", "backspace-character", "delete-character"})


def create_empty() -> EditorState:
    return create_with_content(from_plain_text(""))


def create_with_content(content: ContentState) -> EditorState:
    return EditorState(content=content, selection=content.selection_after)


def _must_become_boundary(editor_state: EditorState, change_type: str) -> bool:
    return (
        editor_state.selection != editor_state.content.selection_after
        or change_type != editor_state.last_change_type
        or change_type not in COALESCING_CHANGES
    )


def push_change(editor_state: EditorState, content: ContentState, change_type: str) -> EditorState:
    """Make content the current content, recording the transition as one undoable change."""
    undo_stack = editor_state.undo_stack
    if _must_become_boundary(editor_state, change_type):
        undo_stack = undo_stack + (editor_state.content,)
        selection_before = editor_state.selection
    else:
        # undo goes back to where the whole run started, not just its last keystroke
        selection_before = editor_state.content.selection_before
    content = msgspec.structs.replace(content, selection_before=selection_before)
    return EditorState(
        content=content,
        selection=content.selection_after,
        undo_stack=undo_stack,
        redo_stack=(),
        last_change_type=change_type,
    )


def undo(editor_state: EditorState) -> EditorState:
    if not editor_state.can_undo():
        return editor_state
    previous = editor_state.undo_stack[-1]
    logger.debug("Undoing %s", editor_state.last_change_type)
    return EditorState(
        content=previous,
        selection=editor_state.content.selection_before,
        undo_stack=editor_state.undo_stack[:-1],
        redo_stack=editor_state.redo_stack + (editor_state.content,),
        last_change_type="undo",
    )


def redo(editor_state: EditorState) -> EditorState:
    if not editor_state.can_redo():
        return editor_state
    following = editor_state.redo_stack[-1]
    return EditorState(
        content=following,
        selection=following.selection_after,
        undo_stack=editor_state.undo_stack + (editor_state.content,),
        redo_stack=editor_state.redo_stack[:-1],
        last_change_type="redo",
    )


def with_selection(editor_state: EditorState, selection: SelectionState) -> EditorState:
    return msgspec.structs.replace(editor_state, selection=selection, inline_style_override=None)


def with_inline_style_override(editor_state: EditorState, styles: typing.Optional[StyleSet]) -> EditorState:
    return msgspec.structs.replace(editor_state, inline_style_override=styles)
