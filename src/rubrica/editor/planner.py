from __future__ import annotations

import logging
import re
import typing

import attr

from .triggers import DEFAULT_TRIGGERS, FormatAction, Scope, TriggerTable

if typing.TYPE_CHECKING:
    from .doctypes import SelectionState


logger = logging.getLogger(__name__)

TRIGGER_KEY = " "


@attr.frozen(kw_only=True)
class EditPlan:
    # the whole block text is replaced, wherever the caret sits, not just the prefix
    trigger_length: int
    rewritten_text: str
    action: FormatAction


def plan(
    selection: SelectionState,
    block_text: str,
    inserted_char: str,
    triggers: TriggerTable = DEFAULT_TRIGGERS,
) -> typing.Optional[EditPlan]:
    if not selection.is_collapsed or inserted_char != TRIGGER_KEY:
        return None
    rule = triggers.match(block_text)
    if rule is None:
        return None
    if rule.scope is Scope.BLOCK:
        # a run of the marker plus any whitespace after it: "### Title" becomes "Title"
        rewritten = re.sub(rf"^(?:{re.escape(rule.prefix)})+\s*", "", block_text, count=1)
    else:
        rewritten = block_text.replace(rule.prefix, "", 1)
    logger.debug("Trigger %r fired on a block of length %d", rule.prefix, len(block_text))
    return EditPlan(trigger_length=len(block_text), rewritten_text=rewritten, action=rule.action)
