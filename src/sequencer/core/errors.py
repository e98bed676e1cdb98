from __future__ import annotations


class SequencerError(TypeError):
    """
    Base class for argument errors raised by the sequencer entry point.

    Always raised synchronously, before any step or completion call.
    """


class InvalidSequenceType(SequencerError):
    """`sequence` is not a length-bearing ordered collection."""


class InvalidStepType(SequencerError):
    """`step` is not callable."""


class InvalidCompletionType(SequencerError):
    """`on_complete` was given but is not callable."""
