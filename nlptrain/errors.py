"""
Errors: Failure taxonomy shared by every training and persistence operation.

Nothing here is recovered locally; each error surfaces at the call that
triggered it.
"""

from typing import Optional


class TrainingError(Exception):
    """Base class for every error raised by nlptrain."""


class ResourceUnreadable(TrainingError):
    """A training resource could not be opened, read or decoded as text."""


class MalformedSample(TrainingError, ValueError):
    """
    A training line does not follow the grammar of its model family.

    Attributes:
        line_number: 1-based line number inside the resource (if known)
        line: The offending line
    """

    def __init__(self, message: str, line_number: Optional[int] = None,
                 line: Optional[str] = None):
        self.line_number = line_number
        self.line = line
        if line_number is not None:
            message = f"line {line_number}: {message}"
        if line is not None:
            message = f"{message}: {line!r}"
        super().__init__(message)


class InvalidParameter(TrainingError, ValueError):
    """A caller-supplied hyperparameter is out of its domain."""


class SerializationFailure(TrainingError):
    """A model could not be written to (or identified from) a byte sink."""


class InsufficientTrainingData(TrainingError):
    """The sample stream produced no training events."""
