from __future__ import annotations

import datetime
import typing

from dateutil.tz import tzlocal

V = typing.TypeVar("V")


def now():
    return datetime.datetime.now(tzlocal())


def replacing(tup: tuple[V, ...], index: int, item: V) -> tuple[V, ...]:
    temp = list(tup)
    temp[index] = item
    return tuple(temp)


def clamp(value: int, lower: int, upper: int) -> int:
    return max(lower, min(value, upper))
