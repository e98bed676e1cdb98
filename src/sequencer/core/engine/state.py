from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


@dataclass(slots=True)
class RunState:
    """
    Mutable state owned by exactly one run.

    - items: working copy of the input; length fixed for the run
    - cursor: index currently in flight, only ever moves forward
    - terminated: set once, by natural completion or by abort
    - pending: next index recorded by a synchronous advance, consumed by the drive loop
    - driving: True while the drive loop is on the stack

    Guardrails:
      - move_to / terminate refuse to act once the run has terminated
    """

    items: list[Any]
    cursor: int = 0
    terminated: bool = False
    pending: Optional[int] = None
    driving: bool = False

    @property
    def length(self) -> int:
        return len(self.items)

    def move_to(self, index: int) -> None:
        if self.terminated:
            raise RuntimeError("cannot move cursor after the run has terminated")
        if index < self.cursor:
            raise RuntimeError(f"cursor cannot move backwards ({self.cursor} -> {index})")
        self.cursor = index

    def terminate(self) -> None:
        if self.terminated:
            raise RuntimeError("run already terminated")
        self.terminated = True
        self.pending = None
