import msgspec
import pytest
from rubrica.commontypes import BlockType
from rubrica.db import make_storage
from rubrica.editor.doctypes import NO_STYLE, Block, ContentState, SelectionState
from rubrica.editor.history import create_with_content
from rubrica.editor.session import RichEditor
from rubrica.settings import Settings


def make_state(text: str, block_type: BlockType = BlockType.UNSTYLED, offset=None, depth: int = 0, styles=None):
    block = Block(
        key="blk",
        type=block_type,
        text=text,
        styles=styles if styles is not None else (NO_STYLE,) * len(text),
        depth=depth,
    )
    caret = SelectionState.caret(block.key, len(text) if offset is None else offset)
    content = msgspec.structs.replace(ContentState.from_blocks([block]), selection_before=caret, selection_after=caret)
    return create_with_content(content)


@pytest.fixture
def settings():
    return Settings.for_test()


@pytest.fixture
def storage(settings):
    storage = make_storage(settings.storage_url)
    yield storage
    storage.close()


@pytest.fixture
def editor(settings, storage):
    editor = RichEditor(settings=settings, storage=storage)
    editor.mount()
    return editor
