# SPDX-FileCopyrightText: 2021 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later
from __future__ import annotations

import abc
import unicodedata
from contextlib import aclosing, asynccontextmanager
from typing import TYPE_CHECKING, Any, AsyncIterable, cast

import msgspec
import trio

from ..keytypes import AnnotatedKeyEvent, KeyCode, KeyEvent, KeyPress, ModifierAnnotation

if TYPE_CHECKING:
    from ..settings import Settings


class Section(abc.ABC):
    @abc.abstractmethod
    async def pump(self, source: trio.MemoryReceiveChannel[Any], sink: trio.MemorySendChannel[Any]): ...


MODIFIER_KEYS = {
    KeyCode.KEY_LEFTALT: "alt",
    KeyCode.KEY_RIGHTALT: "alt",
    KeyCode.KEY_LEFTCTRL: "ctrl",
    KeyCode.KEY_RIGHTCTRL: "ctrl",
    KeyCode.KEY_LEFTMETA: "meta",
    KeyCode.KEY_RIGHTMETA: "meta",
    KeyCode.KEY_LEFTSHIFT: "shift",
    KeyCode.KEY_RIGHTSHIFT: "shift",
}


# stage 1: track which modifiers are held (and whether capslock is on) and annotate every event
class ModifierTracking(Section):
    def __init__(self):
        self.held: set[KeyCode] = set()
        self.capslock = False

    def _make_annotation(self):
        held_names = {MODIFIER_KEYS[key] for key in self.held}
        return ModifierAnnotation(
            alt="alt" in held_names,
            ctrl="ctrl" in held_names,
            meta="meta" in held_names,
            shift="shift" in held_names,
            capslock=self.capslock,
        )

    async def pump(self, source: trio.MemoryReceiveChannel[KeyEvent], sink: trio.MemorySendChannel[AnnotatedKeyEvent]):
        async with aclosing(source), aclosing(sink):
            async for event in source:
                is_modifier = event.key in MODIFIER_KEYS or event.key is KeyCode.KEY_CAPSLOCK
                if event.key in MODIFIER_KEYS:
                    if event.press is KeyPress.RELEASED:
                        self.held.discard(event.key)
                    else:
                        self.held.add(event.key)
                elif event.key is KeyCode.KEY_CAPSLOCK and event.press is KeyPress.PRESSED:
                    self.capslock = not self.capslock
                await sink.send(
                    AnnotatedKeyEvent(
                        key=event.key,
                        press=event.press,
                        annotation=self._make_annotation(),
                        is_modifier=is_modifier,
                    )
                )


# stage 2: drop releases; autorepeat counts as another press
class OnlyPresses(Section):
    async def pump(self, source: trio.MemoryReceiveChannel[AnnotatedKeyEvent], sink: trio.MemorySendChannel[AnnotatedKeyEvent]):
        async with aclosing(source), aclosing(sink):
            async for event in source:
                if event.press is not KeyPress.RELEASED and not event.is_modifier:
                    await sink.send(event)


# stage 3: attach the typed character, unless a command modifier turns the key into a shortcut
class MakeCharacter(Section):
    def __init__(self, keymaps: dict[KeyCode, list[str]]):
        self.keymaps = keymaps

    async def pump(self, source: trio.MemoryReceiveChannel[AnnotatedKeyEvent], sink: trio.MemorySendChannel[AnnotatedKeyEvent]):
        async with aclosing(source), aclosing(sink):
            async for event in source:
                annotation = event.annotation
                if event.key not in self.keymaps or annotation.command or annotation.alt:
                    await sink.send(event)
                    continue
                keymap = self.keymaps[event.key]
                is_shifted = annotation.shift
                if unicodedata.category(keymap[0]).startswith("L"):
                    is_shifted ^= annotation.capslock
                await sink.send(msgspec.structs.replace(event, character=keymap[1 if is_shifted else 0]))


@asynccontextmanager
async def pump_all(first_source: AsyncIterable[Any], *sections: Section):
    async with trio.open_nursery() as nursery:
        section_input = first_source
        for section in sections:
            section_send_channel, section_receive_channel = trio.open_memory_channel(0)
            nursery.start_soon(section.pump, section_input, section_send_channel)
            section_input = section_receive_channel
        yield section_input
        nursery.cancel_scope.cancel()


@asynccontextmanager
async def make_keystream(key_event_channel: trio.MemoryReceiveChannel[KeyEvent], settings: Settings):
    sections = [
        ModifierTracking(),
        OnlyPresses(),
        MakeCharacter(settings.keymaps),
    ]

    async with pump_all(key_event_channel, *sections) as keystream:
        yield cast(trio.MemoryReceiveChannel[AnnotatedKeyEvent], keystream)
