from __future__ import annotations

from typing import Any

import pytest

from sequencer import Continuation, Sequencer, run


class Recorder:
    """
    Completion callback that remembers every call.
    """

    def __init__(self) -> None:
        self.calls: list[list[Any]] = []

    def __call__(self, items: list[Any]) -> None:
        self.calls.append(items)

    @property
    def result(self) -> list[Any]:
        assert len(self.calls) == 1, f"completion calls={len(self.calls)}"
        return self.calls[0]


def test_replacement_from_every_step() -> None:
    done = Recorder()
    run([0, 1, 2], lambda v, i, nxt: nxt(v + 1), done)
    assert done.result == [1, 2, 3]


def test_abort_replaces_current_and_skips_rest() -> None:
    done = Recorder()
    visited: list[int] = []

    def step(v: int, i: int, nxt: Continuation[int]) -> None:
        visited.append(i)
        if i == 1:
            nxt.abort(v + 1)
        else:
            nxt()

    run([0, 1, 2], step, done)

    assert done.result == [0, 2, 2]
    assert visited == [0, 1]


def test_steps_visit_in_ascending_order_once_each() -> None:
    visited: list[tuple[int, str]] = []
    done = Recorder()

    def step(v: str, i: int, nxt: Continuation[str]) -> None:
        visited.append((i, v))
        nxt()

    run(["a", "b", "c", "d"], step, done)

    assert visited == [(0, "a"), (1, "b"), (2, "c"), (3, "d")]
    assert done.result == ["a", "b", "c", "d"]


def test_original_input_is_never_mutated() -> None:
    original = [0, 1, 2]
    done = Recorder()

    run(original, lambda v, i, nxt: nxt(v * 10), done)

    assert original == [0, 1, 2]
    assert done.result == [0, 10, 20]
    assert done.result is not original


def test_pass_through_keeps_elements_equal() -> None:
    original = [{"k": 1}, {"k": 2}]
    done = Recorder()

    run(original, lambda v, i, nxt: nxt(), done)

    assert done.result == original
    # shallow copy: same element objects, different container
    assert done.result[0] is original[0]
    assert done.result is not original


def test_empty_sequence_completes_without_steps() -> None:
    done = Recorder()
    steps: list[int] = []

    run([], lambda v, i, nxt: steps.append(i), done)

    assert done.result == []
    assert steps == []


def test_missing_completion_is_noop() -> None:
    visited: list[int] = []

    def step(v: int, i: int, nxt: Continuation[int]) -> None:
        visited.append(i)
        nxt()

    run([0, 1, 2], step)
    run([], step, None)

    assert visited == [0, 1, 2]


def test_abort_on_first_element() -> None:
    done = Recorder()
    visited: list[int] = []

    def step(v: int, i: int, nxt: Continuation[int]) -> None:
        visited.append(i)
        nxt.abort()

    run([0, 1, 2], step, done)

    assert visited == [0]
    assert done.result == [0, 1, 2]


def test_abort_on_last_element_completes_once() -> None:
    done = Recorder()

    def step(v: int, i: int, nxt: Continuation[int]) -> None:
        if i == 2:
            nxt.abort("end")
        else:
            nxt(v + 100)

    run([0, 1, 2], step, done)

    assert done.result == [100, 101, "end"]


def test_tuple_and_range_inputs_yield_lists() -> None:
    done = Recorder()
    run((1, 2), lambda v, i, nxt: nxt(), done)
    run(range(3), lambda v, i, nxt: nxt(v * 2), done)

    assert done.calls == [[1, 2], [0, 2, 4]]
    assert all(type(c) is list for c in done.calls)


def test_code_after_continuation_runs_before_next_step() -> None:
    events: list[str] = []

    def step(v: int, i: int, nxt: Continuation[int]) -> None:
        events.append(f"enter{i}")
        nxt()
        events.append(f"after{i}")

    run([0, 1], step, lambda items: events.append("done"))

    assert events == ["enter0", "after0", "enter1", "done", "after1"]


def test_step_exception_propagates_from_run() -> None:
    visited: list[int] = []

    def step(v: int, i: int, nxt: Continuation[int]) -> None:
        visited.append(i)
        if i == 1:
            raise ValueError("boom")
        nxt()

    done = Recorder()
    with pytest.raises(ValueError, match="boom"):
        run([0, 1, 2], step, done)

    assert visited == [0, 1]
    assert done.calls == []


def test_class_form_exposes_run_state() -> None:
    done = Recorder()
    seq = Sequencer([1, 2], lambda v, i, nxt: nxt(), done)

    assert not seq.terminated
    assert len(seq.run_id) == 8

    seq.start()

    assert seq.terminated
    assert done.result == [1, 2]


def test_class_form_cannot_start_twice() -> None:
    seq = Sequencer([1], lambda v, i, nxt: nxt())
    seq.start()

    with pytest.raises(RuntimeError, match="already started"):
        seq.start()


def test_each_run_gets_its_own_id() -> None:
    a = Sequencer([1], lambda v, i, nxt: nxt())
    b = Sequencer([1], lambda v, i, nxt: nxt())
    assert a.run_id != b.run_id


def test_step_that_advanced_before_raising_still_completes() -> None:
    visited: list[int] = []
    done = Recorder()

    def step(v: int, i: int, nxt: Continuation[int]) -> None:
        visited.append(i)
        nxt(v + 1)
        if i == 0:
            raise ValueError("after advance")

    with pytest.raises(ValueError, match="after advance"):
        run([0, 1, 2], step, done)

    assert visited == [0, 1, 2]
    assert done.result == [1, 2, 3]


def test_first_of_several_step_failures_is_raised() -> None:
    visited: list[int] = []
    done = Recorder()

    def step(v: int, i: int, nxt: Continuation[int]) -> None:
        visited.append(i)
        nxt()
        raise LookupError(f"step {i}")

    with pytest.raises(LookupError, match="step 0"):
        run([0, 1, 2], step, done)

    assert visited == [0, 1, 2]
    assert done.result == [0, 1, 2]


def test_completion_exception_propagates_from_run() -> None:
    def on_complete(items: list[int]) -> None:
        raise RuntimeError("completion broke")

    seq = Sequencer([1, 2], lambda v, i, nxt: nxt(), on_complete)

    with pytest.raises(RuntimeError, match="completion broke"):
        seq.start()

    assert seq.terminated
