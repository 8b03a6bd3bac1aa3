"""
Classifier: Builders for the two training algorithms.

MAXENT trains NLTK's MaxentClassifier with GIS over a feature encoding
that drops features seen fewer than `cutoff` times. PERCEPTRON trains
NLTK's AveragedPerceptron over the same events.
"""

from collections import Counter
from functools import partial
from typing import Any, Callable, Dict, Hashable, List, Sequence, Tuple

from nltk.classify import ClassifierI, MaxentClassifier
from nltk.classify.maxent import GISEncoding
from nltk.tag.perceptron import AveragedPerceptron

from .config import MAXENT, PERCEPTRON, TrainingConfig
from .errors import InsufficientTrainingData, InvalidParameter

Event = Tuple[Dict[str, Any], Hashable]


def _binarize(featureset: Dict[str, Any]) -> List[str]:
    return [f"{name}={value}" for name, value in featureset.items()]


class PerceptronClassifier(ClassifierI):
    """NLTK ClassifierI over an averaged perceptron."""

    def __init__(self, model: AveragedPerceptron):
        self._model = model

    def labels(self) -> List:
        return sorted(self._model.classes)

    def classify(self, featureset):
        # features cut off during training carry no weight
        label, _ = self._model.predict({f: 1 for f in _binarize(featureset)})
        return label


def train_maxent(events: Sequence[Event], iterations: int, cutoff: int,
                 verbose: bool = False) -> MaxentClassifier:
    """
    Train a maximum-entropy classifier with GIS.

    Args:
        events: (featureset, label) pairs
        iterations: Number of GIS iterations
        cutoff: Minimum occurrence count for a feature to be kept
        verbose: Print NLTK's training trace

    Returns:
        The trained MaxentClassifier
    """
    encoding = GISEncoding.train(events, count_cutoff=cutoff)
    return MaxentClassifier.train(
        events,
        algorithm='gis',
        trace=3 if verbose else 0,
        encoding=encoding,
        max_iter=iterations,
    )


def train_perceptron(events: Sequence[Event], iterations: int, cutoff: int,
                     verbose: bool = False) -> PerceptronClassifier:
    """
    Train an averaged perceptron.

    Training stops early once an iteration makes no mistake.

    Args:
        events: (featureset, label) pairs
        iterations: Maximum number of passes over the events
        cutoff: Minimum occurrence count for a feature to be kept
        verbose: Print per-iteration accuracy
    """
    counts = Counter(f for featureset, _ in events for f in _binarize(featureset))
    kept = {f for f, count in counts.items() if count >= cutoff}

    model = AveragedPerceptron()
    model.classes = {label for _, label in events}
    encoded = [({f: 1 for f in _binarize(featureset) if f in kept}, label)
               for featureset, label in events]

    for iteration in range(iterations):
        mistakes = 0
        for features, label in encoded:
            guess, _ = model.predict(features)
            model.update(label, guess, features)
            if guess != label:
                mistakes += 1
        if verbose:
            accuracy = 1 - mistakes / len(encoded)
            print(f"  Iteration {iteration + 1:3d}: accuracy {accuracy:.4f}")
        if mistakes == 0:
            break

    model.average_weights()
    return PerceptronClassifier(model)


def train_classifier(events: Sequence[Event], algorithm: str = MAXENT,
                     iterations: int = 100, cutoff: int = 5,
                     verbose: bool = False) -> ClassifierI:
    """
    Train a classifier with the requested algorithm.

    Raises:
        InsufficientTrainingData: If there are no events
        InvalidParameter: If the algorithm is unknown
    """
    events = list(events)
    if not events:
        raise InsufficientTrainingData("no training events were produced")
    if algorithm == MAXENT:
        return train_maxent(events, iterations, cutoff, verbose)
    if algorithm == PERCEPTRON:
        return train_perceptron(events, iterations, cutoff, verbose)
    raise InvalidParameter(f"unknown training algorithm: {algorithm!r}")


def classifier_builder(config: TrainingConfig) -> Callable[[Sequence[Event]], ClassifierI]:
    """Classifier builder for NLTK classifier-based taggers."""
    return partial(
        train_classifier,
        algorithm=config.algorithm,
        iterations=config.iterations,
        cutoff=config.cutoff,
        verbose=config.verbose,
    )
