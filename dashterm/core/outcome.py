"""Results a command handler may hand back to the dispatcher."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union


@dataclass(frozen=True)
class Immediate:
    """Text to append to the scrollback right away."""
    text: str = ""


@dataclass(frozen=True)
class Deferred:
    """An external operation the dispatcher runs after the call returns."""
    kind: str
    payload: Any = None


LOAD_JSON = "load-json"

Outcome = Union[Immediate, Deferred]


def as_outcome(result: Any) -> Outcome:
    """Normalizes a handler return value: plain strings and None become Immediate."""
    if isinstance(result, (Immediate, Deferred)):
        return result
    if result is None:
        return Immediate("")
    return Immediate(str(result))
