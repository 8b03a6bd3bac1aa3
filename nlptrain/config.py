"""
TrainingConfig: Immutable training configuration records.

One record per model family, each filling the defaults that family
recognizes. Parameters are validated on construction so that a bad value
fails before any training resource is opened.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional, Tuple

from .errors import InvalidParameter

DEFAULT_LANGUAGE = "en"
DEFAULT_ITERATIONS = 100
DEFAULT_CUTOFF = 5
DEFAULT_DOCCAT_CUTOFF = 1

MAXENT = "MAXENT"
PERCEPTRON = "PERCEPTRON"
ALGORITHMS = (MAXENT, PERCEPTRON)


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass(frozen=True)
class TrainingConfig:
    """
    Hyperparameters common to every trainer.

    Args:
        language: ISO language code stored in the model
        iterations: Number of training iterations (> 0)
        cutoff: Minimum feature frequency kept for training (>= 0)
        algorithm: Either "MAXENT" or "PERCEPTRON"
        verbose: Whether to print progress and trainer traces
    """

    language: str = DEFAULT_LANGUAGE
    iterations: int = DEFAULT_ITERATIONS
    cutoff: int = DEFAULT_CUTOFF
    algorithm: str = MAXENT
    verbose: bool = False

    def __post_init__(self):
        if not isinstance(self.language, str) or not self.language.strip():
            raise InvalidParameter(
                f"language must be a non-empty string, got {self.language!r}")
        if not _is_int(self.iterations) or self.iterations <= 0:
            raise InvalidParameter(
                f"iterations must be a positive integer, got {self.iterations!r}")
        if not _is_int(self.cutoff) or self.cutoff < 0:
            raise InvalidParameter(
                f"cutoff must be a non-negative integer, got {self.cutoff!r}")
        if self.algorithm not in ALGORITHMS:
            raise InvalidParameter(
                f"algorithm must be one of {ALGORITHMS}, got {self.algorithm!r}")

    def to_parameters(self) -> Dict[str, str]:
        """
        Render the configuration as a training-parameter mapping.

        Returns:
            Dictionary of parameter name to string value
        """
        return {
            'Algorithm': self.algorithm,
            'Iterations': str(self.iterations),
            'Cutoff': str(self.cutoff),
            'Language': self.language,
        }


@dataclass(frozen=True)
class TokenizerConfig(TrainingConfig):
    """Tokenizer training; alphanumeric chunks are split like any other."""

    alpha_numeric_optimization: bool = False


@dataclass(frozen=True)
class SentenceDetectorConfig(TrainingConfig):
    """Sentence detector training with the token-end scanner enabled."""

    end_of_sentence_chars: Tuple[str, ...] = (".", "!", "?")


@dataclass(frozen=True)
class POSTaggerConfig(TrainingConfig):
    """POS tagger training; always maximum entropy."""

    tag_dictionary: Optional[Any] = field(default=None, compare=False)

    def __post_init__(self):
        super().__post_init__()
        if self.algorithm != MAXENT:
            raise InvalidParameter(
                f"the POS tagger only trains with {MAXENT}, got {self.algorithm!r}")


@dataclass(frozen=True)
class NameFinderConfig(TrainingConfig):
    """
    Name finder training.

    Args:
        entity_type: Type given to spans annotated without one
        feature_generator: Callable (tokens, index, history) -> featureset
            used instead of the default context features
    """

    entity_type: str = "default"
    feature_generator: Optional[Callable] = field(default=None, compare=False)

    def __post_init__(self):
        super().__post_init__()
        if not isinstance(self.entity_type, str) or not self.entity_type:
            raise InvalidParameter(
                f"entity_type must be a non-empty string, got {self.entity_type!r}")
        if self.feature_generator is not None and not callable(self.feature_generator):
            raise InvalidParameter("feature_generator must be callable")


@dataclass(frozen=True)
class ChunkerConfig(TrainingConfig):
    """Treebank chunker training."""


@dataclass(frozen=True)
class ParserConfig(TrainingConfig):
    """Treebank parser training; iterations and cutoff drive the tagger."""


@dataclass(frozen=True)
class DoccatConfig(TrainingConfig):
    """Document categorizer training."""

    cutoff: int = DEFAULT_DOCCAT_CUTOFF
