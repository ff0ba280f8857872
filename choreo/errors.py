"""Error types raised by the choreo pipeline."""

from __future__ import annotations


class ChoreoError(Exception):
    """Base class for choreo errors."""


class DataIntegrityError(ChoreoError, ValueError):
    """Input events or built aggregates break a completeness invariant.

    Fatal: everything downstream assumes complete years and vocabularies.
    """


class InvalidTransitionInput(ChoreoError):
    """A navigation command that cannot apply to the current state.

    The navigator catches this and reports a rejected transition instead.
    """
