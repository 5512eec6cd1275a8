from __future__ import annotations

import dataclasses
import logging
import typing

from ..keytypes import KeyCode
from ..settings import MAX_LIST_DEPTH
from .richtext import indent_list

if typing.TYPE_CHECKING:
    from ..keytypes import AnnotatedKeyEvent
    from .doctypes import EditorState

logger = logging.getLogger(__name__)


@dataclasses.dataclass(kw_only=True)
class Handled:
    # the state the key produced, if it changed anything
    editor_state: typing.Optional[EditorState] = None


@dataclasses.dataclass(kw_only=True)
class NotHandled:
    pass


@dataclasses.dataclass(kw_only=True)
class PassThroughBinding:
    name: typing.Optional[str]


CommandResult = Handled | NotHandled | PassThroughBinding

COMMAND_KEYS = {
    KeyCode.KEY_B: "bold",
    KeyCode.KEY_I: "italic",
    KeyCode.KEY_U: "underline",
    KeyCode.KEY_J: "code",
}


def default_key_binding(event: AnnotatedKeyEvent) -> typing.Optional[str]:
    annotation = event.annotation
    match event.key:
        case KeyCode.KEY_ENTER:
            return "split-block"
        case KeyCode.KEY_BACKSPACE:
            return "backspace"
        case KeyCode.KEY_DELETE:
            return "delete"
        case KeyCode.KEY_Z if annotation.command:
            return "redo" if annotation.shift else "undo"
        case KeyCode.KEY_Y if annotation.ctrl:
            return "redo"
        case key if key in COMMAND_KEYS and annotation.command:
            return COMMAND_KEYS[key]
    return None


def map_key(event: AnnotatedKeyEvent, editor_state: EditorState, max_depth: int = MAX_LIST_DEPTH) -> CommandResult:
    if event.key is KeyCode.KEY_TAB:
        indented = indent_list(editor_state, event.annotation.shift, max_depth)
        # Tab never moves focus out of the editor, even when there was nothing to indent
        if indented is editor_state:
            return Handled()
        return Handled(editor_state=indented)
    binding = default_key_binding(event)
    logger.debug("%s resolved to binding %r", event.key.name, binding)
    return PassThroughBinding(name=binding)
