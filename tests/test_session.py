import pytest
import trio
from rubrica.commontypes import BlockType, InlineStyle
from rubrica.editor.doctypes import NO_STYLE, SelectionState
from rubrica.editor.history import with_selection
from rubrica.editor.keybindings import Handled, NotHandled
from rubrica.editor.keystreams import make_keystream
from rubrica.editor.session import RichEditor
from rubrica.keytypes import AnnotatedKeyEvent, KeyCode, KeyEvent

BOLD = frozenset({InlineStyle.BOLD})
RED = frozenset({InlineStyle.RED})


def typing_events(text: str):
    return [AnnotatedKeyEvent.typed(KeyCode.KEY_A, ch) for ch in text]


def type_into(editor: RichEditor, text: str):
    for event in typing_events(text):
        editor.handle_key_event(event)


def press(editor: RichEditor, key: KeyCode, **modifiers):
    editor.handle_key_event(AnnotatedKeyEvent.chord(key, **modifiers))


def test_heading_from_hash(editor):
    type_into(editor, "### Title")
    block = editor.editor_state.current_block
    assert block.type is BlockType.HEADER_ONE
    assert block.text == "Title"
    assert len(editor.editor_state.content.blocks) == 1


def test_bold_continues_after_trigger(editor):
    type_into(editor, "* hi")
    block = editor.editor_state.current_block
    assert block.text == "hi"
    assert block.styles == (BOLD, BOLD)


def test_red_and_undo(editor):
    type_into(editor, "**r ")
    assert editor.editor_state.current_block.styles == (RED,)
    press(editor, KeyCode.KEY_Z, ctrl=True)
    block = editor.editor_state.current_block
    assert block.text == "**r"
    assert block.styles == (NO_STYLE,) * 3
    press(editor, KeyCode.KEY_Z, meta=True, shift=True)
    assert editor.editor_state.current_block.text == "r"


def test_plain_text_is_untouched(editor):
    type_into(editor, "a # b * c")
    block = editor.editor_state.current_block
    assert block.text == "a # b * c"
    assert block.type is BlockType.UNSTYLED
    assert block.styles == (NO_STYLE,) * 9


def test_handle_before_input(editor):
    assert editor.handle_before_input("#") == NotHandled()
    type_into(editor, "#")
    result = editor.handle_before_input(" ")
    assert isinstance(result, Handled)
    assert result.editor_state is editor.editor_state


def test_backspace_resets_heading(editor):
    type_into(editor, "# ")
    assert editor.editor_state.current_block.type is BlockType.HEADER_ONE
    press(editor, KeyCode.KEY_BACKSPACE)
    assert editor.editor_state.current_block.type is BlockType.UNSTYLED
    type_into(editor, "ab")
    press(editor, KeyCode.KEY_BACKSPACE)
    assert editor.editor_state.current_block.text == "a"


def test_enter_splits_block(editor):
    type_into(editor, "# Head")
    press(editor, KeyCode.KEY_ENTER)
    type_into(editor, "body")
    first, second = editor.editor_state.content.blocks
    assert first.text == "Head"
    assert second.text == "body"
    assert second.type is BlockType.HEADER_ONE


def test_tab_in_list(editor):
    editor.toggle_block_type(BlockType.UNORDERED_LIST_ITEM)
    type_into(editor, "item")
    for _ in range(6):
        press(editor, KeyCode.KEY_TAB)
    assert editor.editor_state.current_block.depth == 4
    press(editor, KeyCode.KEY_TAB, shift=True)
    assert editor.editor_state.current_block.depth == 3


def test_tab_outside_list_changes_nothing(editor):
    type_into(editor, "plain")
    before = editor.editor_state
    press(editor, KeyCode.KEY_TAB)
    assert editor.editor_state is before


def test_style_shortcuts(editor):
    press(editor, KeyCode.KEY_I, ctrl=True)
    type_into(editor, "x")
    assert editor.editor_state.current_block.styles == (frozenset({InlineStyle.ITALIC}),)


def test_toolbar_toggles(editor):
    editor.toggle_inline_style(InlineStyle.CODE)
    type_into(editor, "c")
    assert editor.editor_state.current_block.styles == (frozenset({InlineStyle.CODE}),)
    editor.toggle_block_type(BlockType.BLOCKQUOTE)
    assert editor.editor_state.current_block.type is BlockType.BLOCKQUOTE


def test_unbound_key_is_ignored(editor):
    before = editor.editor_state
    press(editor, KeyCode.KEY_LEFT)
    press(editor, KeyCode.KEY_Q, alt=True)
    assert editor.editor_state is before


def test_class_name_and_listeners(editor):
    seen = []
    editor.change_listeners.append(seen.append)
    assert editor.class_name == "RichEditor-editor"
    type_into(editor, "# ")
    assert editor.class_name == "RichEditor-editor RichEditor-hidePlaceholder"
    assert seen[-1] is editor.editor_state
    assert len(seen) == 2


def test_save_and_mount(settings, storage, editor):
    type_into(editor, "# Title")
    press(editor, KeyCode.KEY_ENTER)
    type_into(editor, "* body")
    editor.save_text()
    assert storage.get_item("Text") == "Title\nbody"

    remounted = RichEditor(settings=settings, storage=storage)
    remounted.mount()
    blocks = remounted.editor_state.content.blocks
    assert [block.text for block in blocks] == ["Title", "body"]
    assert all(block.type is BlockType.UNSTYLED for block in blocks)


def test_mount_without_saved_text(editor):
    assert not editor.editor_state.content.has_text()


def test_mount_uses_configured_slot(settings, storage):
    settings.storage_slot = "Draft"
    storage.set_item("Text", "other")
    storage.set_item("Draft", "kept")
    editor = RichEditor(settings=settings, storage=storage)
    editor.mount()
    assert editor.editor_state.current_block.text == "kept"


def test_focus(settings, storage):
    calls = []
    editor = RichEditor(settings=settings, storage=storage, focus=lambda: calls.append(True))
    editor.focus()
    assert calls == [True]
    RichEditor(settings=settings, storage=storage).focus()


@pytest.mark.parametrize(
    "c,expected",
    [
        pytest.param(None, False, id="none"),
        pytest.param("a", True, id="letter"),
        pytest.param(" ", True, id="space"),
        pytest.param("#", True, id="punctuation"),
        pytest.param("\t", False, id="tab"),
        pytest.param("\x7f", False, id="control"),
    ],
)
def test_graphical_char(c, expected):
    assert RichEditor.graphical_char(c) is expected


@pytest.mark.trio
async def test_run_consumes_events(editor):
    send_channel, receive_channel = trio.open_memory_channel(0)
    async with trio.open_nursery() as nursery:
        nursery.start_soon(editor.run, receive_channel)
        async with send_channel:
            for event in typing_events("# Heading"):
                await send_channel.send(event)
    block = editor.editor_state.current_block
    assert block.type is BlockType.HEADER_ONE
    assert block.text == "Heading"


@pytest.mark.trio
async def test_run_from_raw_key_events(editor, settings):
    raw = [
        KeyEvent.pressed(KeyCode.KEY_LEFTSHIFT),
        KeyEvent.pressed(KeyCode.KEY_8),
        KeyEvent.released(KeyCode.KEY_8),
        KeyEvent.released(KeyCode.KEY_LEFTSHIFT),
    ]
    for key in (KeyCode.KEY_SPACE, KeyCode.KEY_H, KeyCode.KEY_I):
        raw.extend([KeyEvent.pressed(key), KeyEvent.released(key)])
    send_channel, receive_channel = trio.open_memory_channel(len(raw))
    async with send_channel:
        for event in raw:
            send_channel.send_nowait(event)
    async with make_keystream(receive_channel, settings) as keystream:
        await editor.run(keystream)
    block = editor.editor_state.current_block
    assert block.text == "hi"
    assert block.styles == (BOLD, BOLD)


@pytest.mark.parametrize(
    "typed",
    [
        pytest.param("ab", id="plain"),
        pytest.param("# Title", id="after-heading"),
    ],
)
def test_type_undo_type(editor, typed):
    type_into(editor, typed)
    press(editor, KeyCode.KEY_Z, ctrl=True)
    state = editor.editor_state
    assert state.selection.is_collapsed
    assert state.selection.anchor_offset <= len(state.current_block.text)
    type_into(editor, "x")
    assert editor.editor_state.current_block.text == "x"


def test_undo_typing_returns_caret_to_run_start(editor):
    type_into(editor, "ab")
    press(editor, KeyCode.KEY_Z, ctrl=True)
    state = editor.editor_state
    assert state.current_block.text == ""
    assert state.selection == SelectionState.caret(state.current_block.key, 0)


def test_backspace_run_undo_type(editor):
    type_into(editor, "abc")
    press(editor, KeyCode.KEY_BACKSPACE)
    press(editor, KeyCode.KEY_BACKSPACE)
    assert editor.editor_state.current_block.text == "a"
    press(editor, KeyCode.KEY_Z, ctrl=True)
    state = editor.editor_state
    assert state.current_block.text == "abc"
    assert state.selection == SelectionState.caret(state.current_block.key, 3)
    type_into(editor, "x")
    assert editor.editor_state.current_block.text == "abcx"


def select_across(editor: RichEditor):
    type_into(editor, "ab")
    press(editor, KeyCode.KEY_ENTER)
    type_into(editor, "cd")
    first, second = editor.editor_state.content.blocks
    selection = SelectionState(anchor_key=second.key, anchor_offset=1, focus_key=first.key, focus_offset=1)
    editor.on_change(with_selection(editor.editor_state, selection))


def test_typing_over_blocks(editor):
    select_across(editor)
    type_into(editor, "x")
    assert [block.text for block in editor.editor_state.content.blocks] == ["axd"]
    press(editor, KeyCode.KEY_Z, ctrl=True)
    assert [block.text for block in editor.editor_state.content.blocks] == ["ab", "cd"]


@pytest.mark.parametrize(
    "key,texts",
    [
        pytest.param(KeyCode.KEY_BACKSPACE, ["ad"], id="backspace"),
        pytest.param(KeyCode.KEY_DELETE, ["ad"], id="delete"),
        pytest.param(KeyCode.KEY_ENTER, ["a", "d"], id="enter"),
    ],
)
def test_keys_over_blocks(editor, key, texts):
    select_across(editor)
    press(editor, key)
    assert [block.text for block in editor.editor_state.content.blocks] == texts
