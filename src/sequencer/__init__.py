from __future__ import annotations

from sequencer.aio import run_async
from sequencer.core.config.settings import SequencerSettings, settings
from sequencer.core.engine.continuation import MISSING, Continuation
from sequencer.core.engine.sequencer import Sequencer, run
from sequencer.core.errors import (
    InvalidCompletionType,
    InvalidSequenceType,
    InvalidStepType,
    SequencerError,
)
from sequencer.core.logging.setup import bind_context, clear_context, configure_logging

__all__ = [
    "MISSING",
    "Continuation",
    "InvalidCompletionType",
    "InvalidSequenceType",
    "InvalidStepType",
    "Sequencer",
    "SequencerError",
    "SequencerSettings",
    "bind_context",
    "clear_context",
    "configure_logging",
    "run",
    "run_async",
    "settings",
]
