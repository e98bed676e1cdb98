from __future__ import annotations

import secrets
from typing import Any, Callable, Generic, Optional, Sequence, TypeVar

import structlog

from sequencer.core.config.settings import SequencerSettings, settings as default_settings
from sequencer.core.engine.continuation import MISSING, Continuation
from sequencer.core.engine.state import RunState
from sequencer.core.engine.validation import (
    validate_on_complete,
    validate_sequence,
    validate_step,
)

log = structlog.get_logger()

T = TypeVar("T")

StepFn = Callable[[T, int, Continuation[T]], Any]
CompletionFn = Callable[[list[T]], Any]


class Sequencer(Generic[T]):
    """
    Strictly sequential traversal driven by explicit continuations.

    One element is in flight at a time: the step for index i+1 is never
    entered before the continuation for index i has been invoked.

    Advancement is trampolined. A continuation fired while the drive loop
    is on the stack only records the next index; the loop then enters the
    next step. A continuation fired later, from outside the loop, starts
    the loop itself. Stack depth therefore stays flat for synchronous steps.
    """

    def __init__(
        self,
        sequence: Sequence[T],
        step: StepFn[T],
        on_complete: Optional[CompletionFn[T]] = None,
        *,
        settings: Optional[SequencerSettings] = None,
    ) -> None:
        # Validation order is part of the contract: sequence, step, completion
        items = validate_sequence(sequence)
        self._step = validate_step(step)
        self._on_complete = validate_on_complete(on_complete)

        self._state = RunState(items=items)
        self._settings = settings or default_settings
        self._run_id = secrets.token_hex(4)
        self._started = False
        self._completion_error: Optional[BaseException] = None
        self._log = log.bind(run_id=self._run_id)

    @property
    def run_id(self) -> str:
        return self._run_id

    @property
    def terminated(self) -> bool:
        return self._state.terminated

    def start(self) -> None:
        if self._started:
            raise RuntimeError("sequencer already started")
        self._started = True

        self._log.debug("sequencer.started", length=self._state.length)

        if self._state.length == 0:
            self._finish(aborted=False)
            return

        self._schedule(0)

    # ---------------- Continuation callbacks ----------------

    def _advance(self, index: int, replacement: Any) -> None:
        self._replace(index, replacement)

        nxt = index + 1
        if nxt < self._state.length:
            self._schedule(nxt)
        else:
            self._finish(aborted=False)

    def _abort(self, index: int, replacement: Any) -> None:
        # Terminate first; the replacement still lands on this index
        self._state.terminate()
        self._replace(index, replacement)
        self._complete(aborted=True)

    def _ignored(self, index: int, *, form: str, reason: str) -> None:
        self._log.debug(
            "sequencer.continuation_ignored",
            index=index,
            form=form,
            reason=reason,
        )

    # ---------------- Internals ----------------

    def _replace(self, index: int, replacement: Any) -> None:
        if replacement is not MISSING:
            self._state.items[index] = replacement

    def _schedule(self, index: int) -> None:
        """
        Record `index` as the next step and make sure the drive loop runs.
        """
        state = self._state
        state.pending = index

        if state.driving:
            # The loop below is on the stack and will pick it up
            return

        # A step that advanced and then raised still owes the remaining
        # indices their visit; the first failure is re-raised once drained
        failure: Optional[Exception] = None

        state.driving = True
        try:
            while state.pending is not None:
                i = state.pending
                state.pending = None
                state.move_to(i)
                try:
                    self._enter(i)
                except Exception as exc:
                    if failure is None:
                        failure = exc
        finally:
            state.driving = False

        if failure is not None:
            raise failure

    def _enter(self, index: int) -> None:
        if self._settings.trace_steps:
            self._log.debug("sequencer.step", index=index)

        try:
            self._step(self._state.items[index], index, Continuation(index, self))
        except Exception as exc:
            # Completion failures surface through the step that fired them
            if exc is not self._completion_error:
                self._log.exception("sequencer.step_failed", index=index)
            raise

    def _finish(self, *, aborted: bool) -> None:
        self._state.terminate()
        self._complete(aborted=aborted)

    def _complete(self, *, aborted: bool) -> None:
        self._log.debug(
            "sequencer.finished",
            aborted=aborted,
            index=self._state.cursor,
        )
        try:
            self._on_complete(self._state.items)
        except Exception as exc:
            self._completion_error = exc
            self._log.exception("sequencer.complete_failed", aborted=aborted)
            raise


def run(
    sequence: Sequence[T],
    step: StepFn[T],
    on_complete: Optional[CompletionFn[T]] = None,
) -> None:
    """
    Visit `sequence` one element at a time.

    `step(element, index, cont)` is called for each visited element and must
    eventually call `cont(replacement?)` to move on, or `cont.abort(replacement?)`
    to stop early. `on_complete(final_items)` fires exactly once, with a
    shallow copy of the input carrying any replacements.

    Argument errors are raised here, before any step runs.
    """
    Sequencer(sequence, step, on_complete).start()
