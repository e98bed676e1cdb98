from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Callable

from sequencer.core.errors import (
    InvalidCompletionType,
    InvalidSequenceType,
    InvalidStepType,
)

# Sequences of characters/bytes, not collections of elements
_TEXT_TYPES = (str, bytes, bytearray, memoryview)


def _type_name(value: Any) -> str:
    return type(value).__name__


def validate_sequence(sequence: Any) -> list[Any]:
    """
    Return a shallow working copy of `sequence`.

    Raises InvalidSequenceType for anything that is not an ordered,
    length-bearing collection.
    """
    if not isinstance(sequence, Sequence) or isinstance(sequence, _TEXT_TYPES):
        raise InvalidSequenceType(
            f'"sequence" must be a sequence. Got "{_type_name(sequence)}"'
        )
    return list(sequence)


def validate_step(step: Any) -> Callable[..., Any]:
    if not callable(step):
        raise InvalidStepType(f'"step" must be callable. Got "{_type_name(step)}"')
    return step


def _noop(items: list[Any]) -> None:
    return None


def validate_on_complete(on_complete: Any) -> Callable[[list[Any]], Any]:
    """
    `None` means "not provided" and is replaced by a no-op.
    """
    if on_complete is None:
        return _noop
    if not callable(on_complete):
        raise InvalidCompletionType(
            f'"on_complete" must be callable. Got "{_type_name(on_complete)}"'
        )
    return on_complete
