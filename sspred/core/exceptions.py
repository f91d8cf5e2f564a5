"""
Exception hierarchy for SSPred.

Every fatal condition raised by the package derives from ``SSPredError`` so
callers can catch the whole family at the command-line boundary. Conditions
that are recovered locally (zero-mass training profiles, zero denominators)
never surface as exceptions.
"""

from __future__ import annotations


class SSPredError(Exception):
    """Base exception for all SSPred errors."""
    pass


class MalformedInputError(SSPredError, ValueError):
    """
    Raised when input data has the wrong shape or content.

    Examples: a profile whose width is not 20, a profile and label string
    of different lengths, an empty sequence file, or a persisted model that
    does not validate.
    """
    pass


class MissingResourceError(SSPredError):
    """Raised when a sequence, profile, label or model source cannot be read."""
    pass
