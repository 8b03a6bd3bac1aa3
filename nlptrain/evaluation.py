"""
Evaluation: Scoring trained models against held-out corpora.

Each evaluator reads a corpus in the training format of its model family
and compares the model's predictions with the gold annotations.
"""

from typing import Dict, Set, Tuple

from sklearn.metrics import accuracy_score, precision_recall_fscore_support

from .models import (
    ChunkerModel,
    DoccatModel,
    POSModel,
    SentenceModel,
    TokenizerModel,
    TokenNameFinderModel,
)
from .resources import Resource, open_text, plain_text_by_line
from .samples import (
    ChunkSampleStream,
    DocumentSampleStream,
    NameSampleDataStream,
    SentenceSampleStream,
    TokenSampleStream,
    WordTagSampleStream,
)


def _f_measure(precision: float, recall: float) -> float:
    if precision + recall == 0:
        return 0.0
    return 2 * precision * recall / (precision + recall)


def _span_scores(gold: Set, predicted: Set) -> Dict[str, float]:
    hits = len(gold & predicted)
    precision = hits / len(predicted) if predicted else 0.0
    recall = hits / len(gold) if gold else 0.0
    return {
        'precision': precision,
        'recall': recall,
        'f1': _f_measure(precision, recall),
    }


def evaluate_tokenizer(model: TokenizerModel, resource: Resource) -> Dict[str, float]:
    """
    Exact-match token span precision, recall and F1.

    Args:
        model: Trained tokenizer model
        resource: Corpus of whitespace and <SPLIT> separated tokens

    Returns:
        Dictionary with 'precision', 'recall', 'f1', 'tokens'
    """
    gold: Set[Tuple[int, int, int]] = set()
    predicted: Set[Tuple[int, int, int]] = set()
    with open_text(resource) as handle:
        stream = TokenSampleStream(plain_text_by_line(handle))
        for number, sample in enumerate(stream):
            gold.update((number, span.start, span.end) for span in sample.spans)
            predicted.update((number, start, end)
                             for start, end in model.span_tokenize(sample.text))
    scores = _span_scores(gold, predicted)
    scores['tokens'] = len(gold)
    return scores


def evaluate_sentence_detector(model: SentenceModel, resource: Resource) -> Dict[str, float]:
    """
    Exact-match sentence span precision, recall and F1.

    Args:
        model: Trained sentence detector
        resource: Corpus of one sentence per line, documents separated by
            empty lines

    Returns:
        Dictionary with 'precision', 'recall', 'f1', 'sentences'
    """
    gold: Set[Tuple[int, int, int]] = set()
    predicted: Set[Tuple[int, int, int]] = set()
    with open_text(resource) as handle:
        stream = SentenceSampleStream(plain_text_by_line(handle))
        for number, sample in enumerate(stream):
            gold.update((number, span.start, span.end) for span in sample.spans)
            predicted.update((number, start, end)
                             for start, end in model.span_tokenize(sample.document))
    scores = _span_scores(gold, predicted)
    scores['sentences'] = len(gold)
    return scores


def evaluate_pos_tagger(model: POSModel, resource: Resource) -> Dict[str, float]:
    """
    Token-level tagging accuracy.

    Args:
        model: Trained POS model
        resource: Corpus of ``word_tag`` lines

    Returns:
        Dictionary with 'accuracy' and 'tokens'
    """
    gold, predicted = [], []
    with open_text(resource) as handle:
        for sample in WordTagSampleStream(plain_text_by_line(handle)):
            gold.extend(sample.tags)
            predicted.extend(tag for _, tag in model.tag(sample.words))
    return {
        'accuracy': accuracy_score(gold, predicted) if gold else 0.0,
        'tokens': len(gold),
    }


def evaluate_chunker(model: ChunkerModel, resource: Resource) -> Dict[str, float]:
    """
    Token-level chunk tag accuracy.

    Args:
        model: Trained chunker model
        resource: Corpus of ``word pos chunk`` lines

    Returns:
        Dictionary with 'accuracy' and 'tokens'
    """
    gold, predicted = [], []
    with open_text(resource) as handle:
        for sample in ChunkSampleStream(plain_text_by_line(handle)):
            gold.extend(sample.preds)
            predicted.extend(model.chunk(sample.words, sample.tags))
    return {
        'accuracy': accuracy_score(gold, predicted) if gold else 0.0,
        'tokens': len(gold),
    }


def evaluate_document_categorizer(model: DoccatModel, resource: Resource) -> Dict[str, float]:
    """
    Document-level accuracy and macro-averaged precision, recall and F1.

    Args:
        model: Trained document categorizer
        resource: Corpus of ``category word word ...`` lines

    Returns:
        Dictionary with 'accuracy', 'precision', 'recall', 'f1', 'documents'
    """
    gold, predicted = [], []
    with open_text(resource) as handle:
        for sample in DocumentSampleStream(plain_text_by_line(handle)):
            if sample is None:
                continue
            gold.append(sample.category)
            predicted.append(model.classify(sample.text))
    if not gold:
        return {'accuracy': 0.0, 'precision': 0.0, 'recall': 0.0,
                'f1': 0.0, 'documents': 0}

    precision, recall, f1, _ = precision_recall_fscore_support(
        gold, predicted, average='macro', zero_division=0)
    return {
        'accuracy': accuracy_score(gold, predicted),
        'precision': float(precision),
        'recall': float(recall),
        'f1': float(f1),
        'documents': len(gold),
    }


def evaluate_name_finder(model: TokenNameFinderModel, resource: Resource) -> Dict[str, float]:
    """
    Exact-match span precision, recall and F1.

    A predicted name counts only if its start, end and type all match a
    gold name. Untyped gold names take the model's entity type.

    Args:
        model: Trained name finder
        resource: Corpus of ``<START:type> ... <END>`` lines

    Returns:
        Dictionary with 'precision', 'recall', 'f1', 'names'
    """
    gold: Set[Tuple[int, int, int, str]] = set()
    predicted: Set[Tuple[int, int, int, str]] = set()
    with open_text(resource) as handle:
        stream = NameSampleDataStream(plain_text_by_line(handle))
        for number, sample in enumerate(stream):
            for name in sample.names:
                gold.add((number, name.start, name.end, name.type or model.entity_type))
            for name in model.find(sample.tokens):
                predicted.add((number, name.start, name.end, name.type))

    scores = _span_scores(gold, predicted)
    scores['names'] = len(gold)
    return scores
