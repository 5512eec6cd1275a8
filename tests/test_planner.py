import pytest
from rubrica.commontypes import BlockType, InlineStyle
from rubrica.editor.doctypes import SelectionState
from rubrica.editor.planner import EditPlan, plan
from rubrica.editor.triggers import Scope, SetBlockType, ToggleInlineStyle, TriggerRule, TriggerTable

CARET = SelectionState.caret("blk", 0)
HEADING = SetBlockType(BlockType.HEADER_ONE)


@pytest.mark.parametrize(
    "block_text,rewritten",
    [
        pytest.param("#", "", id="bare"),
        pytest.param("## ", "", id="trailing-space"),
        pytest.param("### Title", "Title", id="title"),
        pytest.param("#Title", "Title", id="no-space"),
        pytest.param("#  #x", "#x", id="only-leading-run"),
    ],
)
def test_heading(block_text, rewritten):
    assert plan(CARET, block_text, " ") == EditPlan(trigger_length=len(block_text), rewritten_text=rewritten, action=HEADING)


@pytest.mark.parametrize(
    "block_text,rewritten,style",
    [
        pytest.param("***x", "x", InlineStyle.UNDERLINE, id="underline"),
        pytest.param("**red", "red", InlineStyle.RED, id="red"),
        pytest.param("*bold", "bold", InlineStyle.BOLD, id="bold"),
        pytest.param("*", "", InlineStyle.BOLD, id="empty"),
        pytest.param("*a*b", "a*b", InlineStyle.BOLD, id="one-occurrence"),
        pytest.param("****x", "*x", InlineStyle.UNDERLINE, id="extra-star"),
    ],
)
def test_inline(block_text, rewritten, style):
    assert plan(CARET, block_text, " ") == EditPlan(
        trigger_length=len(block_text),
        rewritten_text=rewritten,
        action=ToggleInlineStyle(style),
    )


@pytest.mark.parametrize("block_text", ["", "hello", " *x", "a#", "x**"])
def test_non_trigger_text(block_text):
    assert plan(CARET, block_text, " ") is None


@pytest.mark.parametrize("inserted", ["a", "\t", "  ", "* ", "", "\u00a0"])
def test_only_a_single_space_triggers(inserted):
    assert plan(CARET, "*bold", inserted) is None


def test_range_selection_never_triggers():
    selection = SelectionState(anchor_key="blk", anchor_offset=0, focus_key="blk", focus_offset=3)
    assert plan(selection, "#heading", " ") is None


def test_multi_block_selection_never_triggers():
    selection = SelectionState(anchor_key="one", anchor_offset=1, focus_key="two", focus_offset=1)
    assert plan(selection, "#heading", " ") is None


def test_custom_block_rule_strips_its_own_marker():
    table = TriggerTable([TriggerRule(prefix=">", scope=Scope.BLOCK, action=SetBlockType(BlockType.BLOCKQUOTE))])
    edit_plan = plan(CARET, ">> quoted", " ", triggers=table)
    assert edit_plan.rewritten_text == "quoted"
    assert edit_plan.action == SetBlockType(BlockType.BLOCKQUOTE)
