from __future__ import annotations

import logging
import typing

from ..settings import STORAGE_SLOT
from .document import from_plain_text, plain_text
from .history import create_empty, create_with_content

if typing.TYPE_CHECKING:
    from ..db import SessionStorage
    from .doctypes import EditorState


logger = logging.getLogger(__name__)

# Only the plain text is kept. Block types and inline styles are deliberately not saved, so a
# restored document always comes back unstyled.


def save(editor_state: EditorState, storage: SessionStorage, slot: str = STORAGE_SLOT):
    storage.set_item(slot, plain_text(editor_state.content))


def restore(raw_text: typing.Optional[str]) -> EditorState:
    if not raw_text:
        logger.debug("No saved text, starting with an empty document")
        return create_empty()
    return create_with_content(from_plain_text(raw_text))


def load(storage: SessionStorage, slot: str = STORAGE_SLOT) -> EditorState:
    return restore(storage.get_item(slot))
