"""
Models: Trained model handles, one class per model family.

Every model shares only the serializable capability of BaseModel; the
prediction interface is specific to each family.
"""

import pickle
import re
from typing import Any, BinaryIO, Dict, Iterator, List, Optional, Sequence, Tuple, Union

import numpy as np
from nltk.chunk import conlltags2tree
from nltk.classify import ClassifierI
from nltk.parse import ViterbiParser
from nltk.tag.sequential import ClassifierBasedPOSTagger, ClassifierBasedTagger
from nltk.tokenize.api import TokenizerI
from nltk.tree import Tree

from .features import bag_of_words, sentence_context, token_split_context
from .head_rules import HeadRules, debinarize
from .samples import Span

SPLIT = "T"
NO_SPLIT = "F"
END_OF_SENTENCE = "s"
NO_END_OF_SENTENCE = "n"
START = "start"
CONTINUE = "cont"
OTHER = "other"

ALPHANUMERIC = re.compile(r"^[A-Za-z0-9]+$")
_WHITESPACE_TOKEN = re.compile(r"\S+")


class BaseModel:
    """
    Common base of all trained models.

    Args:
        language: Language code the model was trained for
        training_parameters: Parameter mapping used for training
    """

    family = "base"

    def __init__(self, language: str, training_parameters: Dict[str, str]):
        self.language = language
        self.training_parameters = dict(training_parameters)

    def serialize(self, out: BinaryIO):
        """Write the model to a binary stream."""
        pickle.dump(self, out, protocol=pickle.HIGHEST_PROTOCOL)

    @classmethod
    def load(cls, source) -> "BaseModel":
        """
        Load a model of this family from a path or binary stream.

        Raises:
            ResourceUnreadable: If the source cannot be read
            SerializationFailure: If the source holds another kind of model
        """
        from .persistence import load_model
        return load_model(source, expected=cls)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(language='{self.language}')"


# ── Tokenizer ─────────────────────────────────────────────────────────────────

class TokenizerModel(BaseModel, TokenizerI):
    """Splits whitespace chunks into tokens with a split/no-split classifier."""

    family = "tokenizer"

    def __init__(self, classifier: ClassifierI, language: str,
                 training_parameters: Dict[str, str],
                 alpha_numeric_optimization: bool = False):
        super().__init__(language, training_parameters)
        self._classifier = classifier
        self.alpha_numeric_optimization = alpha_numeric_optimization

    def span_tokenize(self, text: str) -> Iterator[Tuple[int, int]]:
        for match in _WHITESPACE_TOKEN.finditer(text):
            chunk = match.group()
            offset = match.start()
            if len(chunk) == 1 or (self.alpha_numeric_optimization
                                   and ALPHANUMERIC.match(chunk)):
                yield match.span()
                continue
            token_start = 0
            for index in range(1, len(chunk)):
                if self._classifier.classify(token_split_context(chunk, index)) == SPLIT:
                    yield (offset + token_start, offset + index)
                    token_start = index
            yield (offset + token_start, match.end())

    def tokenize(self, text: str) -> List[str]:
        return [text[start:end] for start, end in self.span_tokenize(text)]


# ── Sentence detector ─────────────────────────────────────────────────────────

def eos_candidates(text: str, end_of_sentence_chars: Sequence[str]):
    """
    Yield end-of-sentence candidates of a text.

    Yields:
        (token_index, tokens, position) for each candidate character, where
        tokens are the whitespace-token matches of the text
    """
    tokens = list(_WHITESPACE_TOKEN.finditer(text))
    for i, match in enumerate(tokens):
        for position in range(match.start(), match.end()):
            if text[position] in end_of_sentence_chars:
                yield i, tokens, position


def candidate_context(text: str, tokens, i: int, position: int) -> Dict[str, Any]:
    """Featureset of the candidate at position inside whitespace token i."""
    match = tokens[i]
    prev_token = tokens[i - 1].group() if i > 0 else None
    next_token = tokens[i + 1].group() if i + 1 < len(tokens) else None
    return sentence_context(text, position, match.start(), match.end(),
                            prev_token, next_token)


class SentenceModel(BaseModel, TokenizerI):
    """Detects sentence boundaries at the end of whitespace tokens."""

    family = "sentence"

    def __init__(self, classifier: ClassifierI, language: str,
                 training_parameters: Dict[str, str],
                 end_of_sentence_chars: Sequence[str] = (".", "!", "?")):
        super().__init__(language, training_parameters)
        self._classifier = classifier
        self.end_of_sentence_chars = tuple(end_of_sentence_chars)

    def span_tokenize(self, text: str) -> Iterator[Tuple[int, int]]:
        boundaries = set()
        for i, tokens, position in eos_candidates(text, self.end_of_sentence_chars):
            if i in boundaries:
                continue
            features = candidate_context(text, tokens, i, position)
            if self._classifier.classify(features) == END_OF_SENTENCE:
                boundaries.add(i)

        start = None
        tokens = list(_WHITESPACE_TOKEN.finditer(text))
        for i, match in enumerate(tokens):
            if start is None:
                start = match.start()
            if i in boundaries:
                yield (start, match.end())
                start = None
        if start is not None:
            yield (start, tokens[-1].end())

    def tokenize(self, text: str) -> List[str]:
        return [text[start:end] for start, end in self.span_tokenize(text)]

    def sent_detect(self, text: str) -> List[str]:
        """Split a text into sentences."""
        return self.tokenize(text)


# ── POS tagger ────────────────────────────────────────────────────────────────

class DictionaryPOSTagger(ClassifierBasedPOSTagger):
    """
    NLTK classifier-based POS tagger restricted by a tag dictionary.

    Words listed in the dictionary only receive one of their listed tags;
    other words, or every word when there is no dictionary, take the
    classifier's best tag.
    """

    def __init__(self, tag_dictionary=None, **kwargs):
        self.tag_dictionary = tag_dictionary
        super().__init__(**kwargs)

    def choose_tag(self, tokens, index, history):
        allowed = self.tag_dictionary.tags(tokens[index]) if self.tag_dictionary else ()
        featureset = self.feature_detector(tokens, index, history)
        if not allowed:
            return self._classifier.classify(featureset)
        distribution = self._classifier.prob_classify(featureset)
        return max(allowed, key=distribution.prob)


class POSModel(BaseModel):
    """Part-of-speech tagger."""

    family = "pos"

    def __init__(self, tagger: DictionaryPOSTagger, language: str,
                 training_parameters: Dict[str, str]):
        super().__init__(language, training_parameters)
        self._tagger = tagger

    @property
    def tag_dictionary(self):
        return self._tagger.tag_dictionary

    def tag(self, tokens: Sequence[str]) -> List[Tuple[str, str]]:
        """
        Tag a tokenized sentence.

        Args:
            tokens: The words of one sentence

        Returns:
            List of (word, tag) tuples
        """
        return self._tagger.tag(list(tokens))

    def tags(self) -> List[str]:
        """All tags the model can assign."""
        return sorted(self._tagger.classifier().labels())


# ── Name finder ───────────────────────────────────────────────────────────────

def decode_names(outcomes: Sequence[str]) -> List[Span]:
    """
    Turn a sequence of name outcomes into typed token spans.

    A continuation outcome that does not follow a name of the same type
    opens a new name.
    """
    spans = []
    start = None
    current_type = None
    for i, outcome in enumerate(list(outcomes) + [OTHER]):
        if outcome == OTHER:
            name_type, position = None, None
        else:
            name_type, _, position = outcome.rpartition("-")
        opens = outcome != OTHER and (
            position == START or start is None or name_type != current_type)
        if start is not None and (outcome == OTHER or opens):
            spans.append(Span(start, i, current_type))
            start = None
        if opens:
            start, current_type = i, name_type
    return spans


class TokenNameFinderModel(BaseModel):
    """Finds typed names in tokenized sentences."""

    family = "namefind"

    def __init__(self, tagger: ClassifierBasedTagger, language: str,
                 training_parameters: Dict[str, str], entity_type: str = "default"):
        super().__init__(language, training_parameters)
        self._tagger = tagger
        self.entity_type = entity_type

    def outcomes(self, tokens: Sequence[str]) -> List[str]:
        """Raw start/cont/other outcome per token."""
        return [outcome for _, outcome in self._tagger.tag(list(tokens))]

    def find(self, tokens: Sequence[str]) -> List[Span]:
        """
        Find names in a tokenized sentence.

        Args:
            tokens: The tokens of one sentence

        Returns:
            List of Span(start, end, type) over token indices
        """
        tokens = list(tokens)
        if not tokens:
            return []
        return decode_names(self.outcomes(tokens))


# ── Chunker ───────────────────────────────────────────────────────────────────

class ChunkerModel(BaseModel):
    """Assigns IOB chunk tags to POS-tagged sentences."""

    family = "chunker"

    def __init__(self, tagger: ClassifierBasedTagger, language: str,
                 training_parameters: Dict[str, str]):
        super().__init__(language, training_parameters)
        self._tagger = tagger

    def chunk(self, words: Sequence[str], tags: Sequence[str]) -> List[str]:
        """
        Chunk a POS-tagged sentence.

        Args:
            words: The words of the sentence
            tags: Their POS tags

        Returns:
            One IOB chunk tag per word
        """
        tokens = list(zip(words, tags))
        return [chunk for _, chunk in self._tagger.tag(tokens)]

    def parse(self, tagged: Sequence[Tuple[str, str]]) -> Tree:
        """Chunk (word, tag) pairs into an NLTK chunk tree."""
        words = [word for word, _ in tagged]
        tags = [tag for _, tag in tagged]
        chunks = self.chunk(words, tags)
        return conlltags2tree(list(zip(words, tags, chunks)))


# ── Parser ────────────────────────────────────────────────────────────────────

class ParserModel(BaseModel):
    """
    Treebank parser.

    Tokens are tagged by a maxent POS tagger, the tag sequence is parsed
    with a Viterbi PCFG parser over head-binarized productions, and the
    words are put back under their tags.
    """

    family = "parser"

    def __init__(self, tagger: DictionaryPOSTagger, parser: ViterbiParser,
                 head_rules: HeadRules, language: str,
                 training_parameters: Dict[str, str]):
        super().__init__(language, training_parameters)
        self._tagger = tagger
        self._parser = parser
        self.head_rules = head_rules

    @property
    def grammar(self):
        return self._parser.grammar()

    def parse(self, tokens: Union[str, Sequence[str]]) -> Optional[Tree]:
        """
        Parse a sentence.

        Args:
            tokens: The tokens, or a whitespace-tokenized string

        Returns:
            The most probable tree rooted in TOP, or None when the grammar
            does not derive the tagged sentence
        """
        if isinstance(tokens, str):
            tokens = tokens.split()
        tokens = list(tokens)
        if not tokens:
            return None
        tags = [tag for _, tag in self._tagger.tag(tokens)]
        try:
            tree = next(iter(self._parser.parse(tags)), None)
        except ValueError:
            # a tag the grammar never saw
            return None
        if tree is None:
            return None
        tree = debinarize(tree)
        for position, word in zip(tree.treepositions('leaves'), tokens):
            tree[position] = Tree(tree[position], [word])
        return tree

    def head(self, tree: Tree) -> Optional[str]:
        """Head word of a parse according to the model's head rules."""
        return self.head_rules.head(tree)


# ── Document categorizer ──────────────────────────────────────────────────────

class DoccatModel(BaseModel):
    """Assigns categories to whitespace-tokenized documents."""

    family = "doccat"

    def __init__(self, classifier: ClassifierI, language: str,
                 training_parameters: Dict[str, str]):
        super().__init__(language, training_parameters)
        self._classifier = classifier

    @property
    def categories(self) -> List[str]:
        return sorted(self._classifier.labels())

    def categorize(self, text: Union[str, Sequence[str]]) -> np.ndarray:
        """
        Score every category for a document.

        Args:
            text: Document text or its tokens

        Returns:
            Probabilities aligned with `categories`
        """
        words = text.split() if isinstance(text, str) else list(text)
        distribution = self._classifier.prob_classify(bag_of_words(words))
        return np.array([distribution.prob(c) for c in self.categories])

    def best_category(self, outcomes: np.ndarray) -> str:
        """Category with the highest score in a categorize() result."""
        return self.categories[int(np.argmax(outcomes))]

    def classify(self, text: Union[str, Sequence[str]]) -> str:
        """Most probable category of a document."""
        return self.best_category(self.categorize(text))
