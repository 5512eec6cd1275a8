# SPDX-FileCopyrightText: 2023 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later
from __future__ import annotations

import collections.abc
import logging
import typing
import unicodedata

from ..rendering.presentation import editor_class_name
from . import persistence, rewriter
from .history import create_empty
from .keybindings import Handled, NotHandled, PassThroughBinding, map_key
from .planner import plan
from .richtext import apply_default_command, handle_key_command, insert_characters, toggle_block_type, toggle_inline_style

if typing.TYPE_CHECKING:
    import trio

    from ..commontypes import BlockType, InlineStyle
    from ..db import SessionStorage
    from ..keytypes import AnnotatedKeyEvent
    from ..settings import Settings
    from .doctypes import EditorState


logger = logging.getLogger(__name__)

ChangeListener = typing.Callable[["EditorState"], None]


class RichEditor:
    """Owns the current editor state and routes input events into it.

    Every change goes through on_change, one event at a time, in the order the events arrive.
    """

    def __init__(
        self,
        *,
        settings: Settings,
        storage: SessionStorage,
        focus: typing.Optional[collections.abc.Callable[[], None]] = None,
    ):
        self.settings = settings
        self.storage = storage
        self.editor_state: EditorState = create_empty()
        self.change_listeners: list[ChangeListener] = []
        self._focus = focus

    def mount(self):
        self.editor_state = persistence.load(self.storage, self.settings.storage_slot)

    def focus(self):
        if self._focus is not None:
            self._focus()

    def on_change(self, editor_state: EditorState):
        self.editor_state = editor_state
        for listener in self.change_listeners:
            listener(editor_state)

    @property
    def class_name(self):
        return editor_class_name(self.editor_state.content)

    def handle_before_input(self, chars: str) -> Handled | NotHandled:
        editor_state = self.editor_state
        selection = editor_state.selection
        edit_plan = plan(selection, editor_state.current_block.text, chars)
        if edit_plan is None:
            return NotHandled()
        rewritten = rewriter.apply(edit_plan, editor_state)
        self.on_change(rewritten)
        return Handled(editor_state=rewritten)

    def type_text(self, chars: str):
        if isinstance(self.handle_before_input(chars), NotHandled):
            self.on_change(insert_characters(self.editor_state, chars))

    def key_binding(self, event: AnnotatedKeyEvent):
        result = map_key(event, self.editor_state, self.settings.max_list_depth)
        if isinstance(result, Handled) and result.editor_state is not None:
            self.on_change(result.editor_state)
        return result

    def handle_key_command(self, command: str) -> Handled | NotHandled:
        new_state = handle_key_command(self.editor_state, command)
        if new_state is None:
            return NotHandled()
        self.on_change(new_state)
        return Handled(editor_state=new_state)

    def handle_key_event(self, event: AnnotatedKeyEvent):
        if self.graphical_char(event.character):
            self.type_text(event.character)
            return
        match self.key_binding(event):
            case Handled() | PassThroughBinding(name=None):
                return
            case PassThroughBinding(name=command):
                if isinstance(self.handle_key_command(command), Handled):
                    return
                default_state = apply_default_command(self.editor_state, command)
                if default_state is not None:
                    self.on_change(default_state)
                else:
                    logger.debug("Nothing to do for command %r", command)

    def toggle_block_type(self, block_type: BlockType):
        self.on_change(toggle_block_type(self.editor_state, block_type))

    def toggle_inline_style(self, inline_style: InlineStyle):
        self.on_change(toggle_inline_style(self.editor_state, inline_style))

    def save_text(self):
        persistence.save(self.editor_state, self.storage, self.settings.storage_slot)

    async def run(self, events: trio.MemoryReceiveChannel[AnnotatedKeyEvent]):
        async with events:
            async for event in events:
                self.handle_key_event(event)

    @staticmethod
    def graphical_char(c: typing.Optional[str]):
        if c is None:
            return False
        category = unicodedata.category(c)
        return category == "Zs" or category[0] in ("L", "M", "N", "P", "S")
