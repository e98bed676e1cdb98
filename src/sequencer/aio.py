from __future__ import annotations

import asyncio
from typing import Sequence, TypeVar

import structlog

from sequencer.core.engine.continuation import Continuation
from sequencer.core.engine.sequencer import Sequencer, StepFn

log = structlog.get_logger()

T = TypeVar("T")


async def run_async(sequence: Sequence[T], step: StepFn[T]) -> list[T]:
    """
    Run a sequencer on the current event loop and await the final items.

    The step keeps the callback contract; it may defer its continuation
    with loop.call_soon / call_later or from a task. Argument errors are
    raised on await, before any step runs. The first exception raised by
    a step is raised to the awaiting caller, even when the step was
    entered from a deferred callback.

    Cancelling the awaiting task does not abort the run.
    """
    loop = asyncio.get_running_loop()
    done: asyncio.Future[list[T]] = loop.create_future()

    def _on_complete(items: list[T]) -> None:
        if not done.done():
            done.set_result(items)

    def _guarded(element: T, index: int, cont: Continuation[T]) -> None:
        try:
            step(element, index, cont)
        except Exception as exc:
            if not done.done():
                done.set_exception(exc)
            raise

    # Non-callables go through unwrapped so the Sequencer rejects them
    seq: Sequencer[T] = Sequencer(sequence, _guarded if callable(step) else step, _on_complete)

    try:
        seq.start()
    except Exception:
        if not (done.done() and done.exception() is not None):
            raise
        # Already carried by the future; awaiting it below re-raises

    try:
        return await done
    except asyncio.CancelledError:
        log.info("sequencer.await_cancelled", run_id=seq.run_id, terminated=seq.terminated)
        raise
