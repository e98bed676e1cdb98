from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Final, Generic, TypeVar

if TYPE_CHECKING:
    from sequencer.core.engine.sequencer import Sequencer

T = TypeVar("T")


class _Missing:
    """
    Marker for "no replacement given".

    Distinct from None so that falsy replacements (0, "", False, None)
    still overwrite the element.
    """

    _instance: _Missing | None = None

    def __new__(cls) -> _Missing:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Final[Any] = _Missing()


@dataclass(slots=True)
class Continuation(Generic[T]):
    """
    Handle passed to the step function for one index.

    Calling it (or `advance`) moves the run forward; `abort` ends it.
    Either form accepts an optional replacement for the element at `index`.

    A handle is single-use: the first effective call consumes it and
    any later call on the same handle is ignored.
    """

    index: int
    _run: Sequencer = field(repr=False)
    _used: bool = field(default=False, repr=False)

    @property
    def used(self) -> bool:
        return self._used

    def __call__(self, replacement: T = MISSING) -> None:
        self.advance(replacement)

    def advance(self, replacement: T = MISSING) -> None:
        if not self._consume("advance"):
            return
        self._run._advance(self.index, replacement)

    def abort(self, replacement: T = MISSING) -> None:
        if not self._consume("abort"):
            return
        self._run._abort(self.index, replacement)

    def _consume(self, form: str) -> bool:
        if self._run.terminated:
            self._run._ignored(self.index, form=form, reason="terminated")
            return False
        if self._used:
            self._run._ignored(self.index, form=form, reason="already_used")
            return False
        self._used = True
        return True
