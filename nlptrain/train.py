"""
Train: One training function per model family.

Each function opens its training resource, wraps it in the family's sample
stream, builds the training configuration from its arguments, hands the
events to the NLTK trainer and returns the family's model.
"""

import warnings
from typing import Callable, Iterable, List, Optional, Tuple

from nltk.grammar import Nonterminal, induce_pcfg
from nltk.parse import ViterbiParser
from nltk.tag.sequential import ClassifierBasedTagger
from nltk.tree import Tree
from tqdm import autonotebook

from .classifier import classifier_builder, train_classifier
from .config import (
    DEFAULT_CUTOFF,
    DEFAULT_DOCCAT_CUTOFF,
    DEFAULT_ITERATIONS,
    DEFAULT_LANGUAGE,
    MAXENT,
    ChunkerConfig,
    DoccatConfig,
    NameFinderConfig,
    ParserConfig,
    POSTaggerConfig,
    SentenceDetectorConfig,
    TokenizerConfig,
    TrainingConfig,
)
from .dictionary import POSDictionary
from .errors import InsufficientTrainingData
from .features import bag_of_words, chunk_context, name_context, token_split_context
from .head_rules import HeadRules, base_label, binarize
from .models import (
    ALPHANUMERIC,
    CONTINUE,
    END_OF_SENTENCE,
    NO_END_OF_SENTENCE,
    NO_SPLIT,
    OTHER,
    SPLIT,
    START,
    ChunkerModel,
    DictionaryPOSTagger,
    DoccatModel,
    ParserModel,
    POSModel,
    SentenceModel,
    TokenizerModel,
    TokenNameFinderModel,
    candidate_context,
    eos_candidates,
)
from .resources import Resource, open_bytes, open_text, plain_text_by_line
from .samples import (
    ChunkSampleStream,
    DocumentSampleStream,
    NameSample,
    NameSampleDataStream,
    ParseSampleStream,
    SentenceSampleStream,
    TokenSampleStream,
    WordTagSampleStream,
)


def _progress(samples: Iterable, desc: str, config: TrainingConfig) -> Iterable:
    """Wrap a sample stream in a progress bar when training verbosely."""
    if config.verbose:
        return autonotebook.tqdm(samples, desc=desc)
    return samples


def _require(items: List, family: str) -> List:
    """Return items, or raise InsufficientTrainingData when there are none."""
    if not items:
        raise InsufficientTrainingData(f"no {family} training samples were found")
    return items


def _announce(family: str, config: TrainingConfig, count: int):
    """Print the sample count and training parameters in verbose mode."""
    if config.verbose:
        params = ", ".join(f"{k}={v}" for k, v in config.to_parameters().items())
        print(f"Training {family} model on {count} samples ({params})")


# ── Tokenizer ─────────────────────────────────────────────────────────────────

def train_tokenizer(
    resource: Resource,
    language: str = DEFAULT_LANGUAGE,
    iterations: int = DEFAULT_ITERATIONS,
    cutoff: int = DEFAULT_CUTOFF,
    verbose: bool = False
) -> TokenizerModel:
    """
    Train a tokenizer from lines of whitespace and <SPLIT> separated tokens.

    Args:
        resource: Path or stream of the training corpus
        language: Language code
        iterations: Number of training iterations
        cutoff: Minimum feature frequency

    Returns:
        Trained TokenizerModel
    """
    config = TokenizerConfig(language=language, iterations=iterations,
                             cutoff=cutoff, verbose=verbose)
    events = []
    samples = 0
    with open_text(resource) as handle:
        stream = TokenSampleStream(plain_text_by_line(handle))
        for sample in _progress(stream, "Reading tokenizer samples", config):
            samples += 1
            token_ends = {span.end for span in sample.spans}
            for chunk_start, chunk in _whitespace_chunks(sample.text):
                if config.alpha_numeric_optimization and ALPHANUMERIC.match(chunk):
                    continue
                for index in range(1, len(chunk)):
                    label = SPLIT if chunk_start + index in token_ends else NO_SPLIT
                    events.append((token_split_context(chunk, index), label))

    _announce("tokenizer", config, samples)
    classifier = train_classifier(events, config.algorithm, config.iterations,
                                  config.cutoff, config.verbose)
    return TokenizerModel(classifier, config.language, config.to_parameters(),
                          alpha_numeric_optimization=config.alpha_numeric_optimization)


def _whitespace_chunks(text: str) -> Iterable[Tuple[int, str]]:
    offset = 0
    for chunk in text.split(" "):
        if chunk:
            yield offset, chunk
        offset += len(chunk) + 1


# ── Sentence detector ─────────────────────────────────────────────────────────

def train_sentence_detector(
    resource: Resource,
    language: str = DEFAULT_LANGUAGE,
    verbose: bool = False
) -> SentenceModel:
    """
    Train a sentence detector from one sentence per line.

    Empty lines separate documents. The end-of-sentence scanner is always
    on and no abbreviation dictionary is used.

    Args:
        resource: Path or stream of the training corpus
        language: Language code

    Returns:
        Trained SentenceModel
    """
    config = SentenceDetectorConfig(language=language, verbose=verbose)
    events = []
    samples = 0
    with open_text(resource) as handle:
        stream = SentenceSampleStream(plain_text_by_line(handle))
        for sample in _progress(stream, "Reading sentence samples", config):
            samples += 1
            sentence_ends = {span.end for span in sample.spans}
            text = sample.document
            for i, tokens, position in eos_candidates(text, config.end_of_sentence_chars):
                label = END_OF_SENTENCE if tokens[i].end() in sentence_ends else NO_END_OF_SENTENCE
                events.append((candidate_context(text, tokens, i, position), label))

    _announce("sentence detector", config, samples)
    classifier = train_classifier(events, config.algorithm, config.iterations,
                                  config.cutoff, config.verbose)
    return SentenceModel(classifier, config.language, config.to_parameters(),
                         end_of_sentence_chars=config.end_of_sentence_chars)


# ── POS tagger ────────────────────────────────────────────────────────────────

def _pos_tagger(tagged_sentences: List[List[Tuple[str, str]]],
                config: TrainingConfig,
                tag_dictionary: Optional[POSDictionary] = None) -> DictionaryPOSTagger:
    return DictionaryPOSTagger(
        tag_dictionary=tag_dictionary,
        train=_require(tagged_sentences, "POS"),
        classifier_builder=classifier_builder(config),
        verbose=config.verbose,
    )


def train_pos_tagger(
    resource: Resource,
    language: str = DEFAULT_LANGUAGE,
    tag_dictionary: Optional[POSDictionary] = None,
    iterations: int = DEFAULT_ITERATIONS,
    cutoff: int = DEFAULT_CUTOFF,
    verbose: bool = False
) -> POSModel:
    """
    Train a maximum-entropy POS tagger from lines of ``word_tag`` pairs.

    Args:
        resource: Path or stream of the training corpus
        language: Language code
        tag_dictionary: Optional POSDictionary restricting tags per word
        iterations: Number of training iterations
        cutoff: Minimum feature frequency

    Returns:
        Trained POSModel
    """
    config = POSTaggerConfig(language=language, iterations=iterations,
                             cutoff=cutoff, algorithm=MAXENT,
                             tag_dictionary=tag_dictionary, verbose=verbose)
    with open_text(resource) as handle:
        stream = WordTagSampleStream(plain_text_by_line(handle))
        sentences = [sample.tagged()
                     for sample in _progress(stream, "Reading POS samples", config)
                     if sample.words]

    _announce("POS tagger", config, len(sentences))
    tagger = _pos_tagger(sentences, config, config.tag_dictionary)
    return POSModel(tagger, config.language, config.to_parameters())


# ── Name finder ───────────────────────────────────────────────────────────────

def name_outcomes(sample: NameSample, entity_type: str) -> List[str]:
    """
    Outcome per token of a name sample.

    Names annotated without a type are given entity_type.
    """
    outcomes = [OTHER] * len(sample.tokens)
    for name in sample.names:
        name_type = name.type or entity_type
        outcomes[name.start] = f"{name_type}-{START}"
        for i in range(name.start + 1, name.end):
            outcomes[i] = f"{name_type}-{CONTINUE}"
    return outcomes


def train_name_finder(
    resource: Resource,
    language: str = DEFAULT_LANGUAGE,
    iterations: int = DEFAULT_ITERATIONS,
    cutoff: int = DEFAULT_CUTOFF,
    entity_type: str = "default",
    feature_generator: Optional[Callable] = None,
    classifier: str = MAXENT,
    verbose: bool = False
) -> TokenNameFinderModel:
    """
    Train a name finder from ``<START:type> ... <END>`` annotated sentences.

    For PERCEPTRON a cutoff of 0 works best, for MAXENT 5.

    Args:
        resource: Path or stream of the training corpus
        language: Language code
        iterations: Number of training iterations
        cutoff: Minimum feature frequency
        entity_type: Type of names annotated without one (e.g. "person")
        feature_generator: Callable (tokens, index, history) -> featureset
            replacing the default context features
        classifier: Either "MAXENT" or "PERCEPTRON"

    Returns:
        Trained TokenNameFinderModel
    """
    config = NameFinderConfig(language=language, iterations=iterations,
                              cutoff=cutoff, algorithm=classifier,
                              entity_type=entity_type,
                              feature_generator=feature_generator,
                              verbose=verbose)
    with open_text(resource) as handle:
        stream = NameSampleDataStream(plain_text_by_line(handle))
        sentences = [list(zip(sample.tokens, name_outcomes(sample, config.entity_type)))
                     for sample in _progress(stream, "Reading name samples", config)
                     if sample.tokens]

    _announce("name finder", config, len(sentences))
    tagger = ClassifierBasedTagger(
        feature_detector=config.feature_generator or name_context,
        train=_require(sentences, "name finder"),
        classifier_builder=classifier_builder(config),
        verbose=config.verbose,
    )
    return TokenNameFinderModel(tagger, config.language, config.to_parameters(),
                                entity_type=config.entity_type)


# ── Chunker ───────────────────────────────────────────────────────────────────

def train_treebank_chunker(
    resource: Resource,
    language: str = DEFAULT_LANGUAGE,
    iterations: int = DEFAULT_ITERATIONS,
    cutoff: int = DEFAULT_CUTOFF,
    verbose: bool = False
) -> ChunkerModel:
    """
    Train a chunker from CoNLL-2000 style ``word pos chunk`` lines.

    Args:
        resource: Path or stream of the training corpus
        language: Language code
        iterations: Number of training iterations
        cutoff: Minimum feature frequency

    Returns:
        Trained ChunkerModel
    """
    config = ChunkerConfig(language=language, iterations=iterations,
                           cutoff=cutoff, verbose=verbose)
    with open_text(resource) as handle:
        stream = ChunkSampleStream(plain_text_by_line(handle))
        sentences = [list(zip(zip(sample.words, sample.tags), sample.preds))
                     for sample in _progress(stream, "Reading chunk samples", config)]

    _announce("chunker", config, len(sentences))
    tagger = ClassifierBasedTagger(
        feature_detector=chunk_context,
        train=_require(sentences, "chunker"),
        classifier_builder=classifier_builder(config),
        verbose=config.verbose,
    )
    return ChunkerModel(tagger, config.language, config.to_parameters())


# ── Parser ────────────────────────────────────────────────────────────────────

def _normalize(tree: Tree) -> Tree:
    """Strip function tags from phrasal labels."""
    if not isinstance(tree, Tree):
        return tree
    if len(tree) == 1 and not isinstance(tree[0], Tree):
        return Tree(tree.label(), [tree[0]])
    return Tree(base_label(tree.label()), [_normalize(child) for child in tree])


def _tag_level(tree: Tree) -> Tree:
    """Replace each preterminal by its tag, making tags the terminals."""
    if not isinstance(tree, Tree):
        return tree
    if len(tree) == 1 and not isinstance(tree[0], Tree):
        return tree.label()
    return Tree(tree.label(), [_tag_level(child) for child in tree])


def train_treebank_parser(
    resource: Resource,
    head_rules: Resource,
    language: str = DEFAULT_LANGUAGE,
    iterations: int = DEFAULT_ITERATIONS,
    cutoff: int = DEFAULT_CUTOFF,
    verbose: bool = False
) -> ParserModel:
    """
    Train a treebank parser from one bracketed parse per line.

    The corpus is read as bytes and decoded as UTF-8.

    Args:
        resource: Path or stream of the treebank
        head_rules: Path or stream of the head rules
        language: Language code
        iterations: Training iterations of the parser's tagger
        cutoff: Minimum feature frequency of the parser's tagger

    Returns:
        Trained ParserModel
    """
    config = ParserConfig(language=language, iterations=iterations,
                          cutoff=cutoff, verbose=verbose)
    rules = HeadRules.from_resource(head_rules)

    with open_bytes(resource) as handle:
        stream = ParseSampleStream(plain_text_by_line(handle))
        trees = [_normalize(tree)
                 for tree in _progress(stream, "Reading parse samples", config)]
    _require(trees, "parser")

    _announce("parser", config, len(trees))
    tagged = [tree.pos() for tree in trees]
    tagger = _pos_tagger(tagged, config)

    productions = []
    for tree in trees:
        productions.extend(binarize(_tag_level(tree), rules).productions())
    grammar = induce_pcfg(Nonterminal("TOP"), productions)
    if config.verbose:
        print(f"Induced grammar with {len(grammar.productions())} productions")

    return ParserModel(tagger, ViterbiParser(grammar), rules,
                       config.language, config.to_parameters())


# ── Document categorizer ──────────────────────────────────────────────────────

def train_document_categorization(
    resource: Resource,
    language: str = DEFAULT_LANGUAGE,
    cutoff: int = DEFAULT_DOCCAT_CUTOFF,
    iterations: int = DEFAULT_ITERATIONS,
    verbose: bool = False
) -> DoccatModel:
    """
    Train a document categorizer from ``category word word ...`` lines.

    Lines holding only a category are skipped with a warning.

    Args:
        resource: Path or stream of the training corpus
        language: Language code
        cutoff: Minimum feature frequency
        iterations: Number of training iterations

    Returns:
        Trained DoccatModel
    """
    config = DoccatConfig(language=language, iterations=iterations,
                          cutoff=cutoff, verbose=verbose)
    events = []
    skipped = 0
    with open_text(resource) as handle:
        stream = DocumentSampleStream(plain_text_by_line(handle))
        for sample in _progress(stream, "Reading document samples", config):
            if sample is None:
                skipped += 1
                continue
            events.append((bag_of_words(sample.text), sample.category))
    if skipped:
        warnings.warn(
            f"{skipped} lines with only a category were ignored")

    _announce("document categorizer", config, len(events))
    classifier = train_classifier(events, config.algorithm, config.iterations,
                                  config.cutoff, config.verbose)
    return DoccatModel(classifier, config.language, config.to_parameters())
