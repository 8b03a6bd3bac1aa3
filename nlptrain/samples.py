"""
Samples: Training sample types and the line parsers that produce them.

Each model family has a sample stream that lazily turns the lines of a
training resource into parsed samples. A stream is traversed once; reading
it again requires reopening the resource.
"""

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Iterable, Iterator, List, NamedTuple, Optional, Tuple

from nltk.tree import Tree

from .errors import MalformedSample

SPLIT_MARKER = "<SPLIT>"
START_PATTERN = re.compile(r"<START(:([^:>\s]*))?>")
END_TAG = "<END>"
CHUNK_TAG_PATTERN = re.compile(r"^(O|[BI]-\S+)$")


class Span(NamedTuple):
    """Half-open [start, end) range with an optional type."""

    start: int
    end: int
    type: Optional[str] = None


@dataclass
class TokenSample:
    """Text with the character spans of its tokens."""

    text: str
    spans: List[Span] = field(default_factory=list)

    @property
    def tokens(self) -> List[str]:
        return [self.text[s.start:s.end] for s in self.spans]


@dataclass
class SentenceSample:
    """A document with the character spans of its sentences."""

    document: str
    spans: List[Span] = field(default_factory=list)

    @property
    def sentences(self) -> List[str]:
        return [self.document[s.start:s.end] for s in self.spans]


@dataclass
class POSSample:
    """Parallel words and part-of-speech tags of one sentence."""

    words: List[str]
    tags: List[str]

    def tagged(self) -> List[Tuple[str, str]]:
        return list(zip(self.words, self.tags))


@dataclass
class NameSample:
    """Tokens of one sentence with token spans of the annotated names."""

    tokens: List[str]
    names: List[Span] = field(default_factory=list)


@dataclass
class ChunkSample:
    """Words, POS tags and IOB chunk tags of one sentence."""

    words: List[str]
    tags: List[str]
    preds: List[str]


@dataclass
class DocumentSample:
    """A categorized, whitespace-tokenized document."""

    category: str
    text: List[str]


# ── Line parsers ──────────────────────────────────────────────────────────────

def parse_token_sample(line: str, line_number: Optional[int] = None) -> TokenSample:
    """
    Parse a tokenizer training line.

    Whitespace separates tokens; the <SPLIT> marker separates tokens that
    are not separated by whitespace, e.g. ``Hello<SPLIT>, world<SPLIT>.``.
    """
    chunks = []
    spans = []
    offset = 0
    for chunk in line.split():
        pieces = chunk.split(SPLIT_MARKER)
        if any(not piece for piece in pieces):
            raise MalformedSample(
                f"empty token around {SPLIT_MARKER}", line_number, line)
        for piece in pieces:
            spans.append(Span(offset, offset + len(piece)))
            offset += len(piece)
        chunks.append("".join(pieces))
        offset += 1
    return TokenSample(" ".join(chunks), spans)


def parse_pos_sample(line: str, line_number: Optional[int] = None) -> POSSample:
    """Parse a line of ``word_tag`` pairs; the tag follows the last '_'."""
    words = []
    tags = []
    for pair in line.split():
        word, sep, tag = pair.rpartition("_")
        if not sep or not word or not tag:
            raise MalformedSample(
                f"expected word_tag, got {pair!r}", line_number, line)
        words.append(word)
        tags.append(tag)
    return POSSample(words, tags)


def parse_name_sample(line: str, line_number: Optional[int] = None) -> NameSample:
    """
    Parse a sentence with bracketed names.

    Example:
        ``<START:person> Pierre Vinken <END> , 61 years old .``
    """
    tokens = []
    names = []
    start = None
    name_type = None
    for part in line.split():
        match = START_PATTERN.fullmatch(part)
        if match:
            if start is not None:
                raise MalformedSample("nested <START> tag", line_number, line)
            start = len(tokens)
            name_type = match.group(2) or None
        elif part == END_TAG:
            if start is None:
                raise MalformedSample("<END> without <START>", line_number, line)
            if start == len(tokens):
                raise MalformedSample("empty name", line_number, line)
            names.append(Span(start, len(tokens), name_type))
            start = None
        else:
            tokens.append(part)
    if start is not None:
        raise MalformedSample("<START> without <END>", line_number, line)
    return NameSample(tokens, names)


def parse_document_sample(line: str, line_number: Optional[int] = None) -> Optional[DocumentSample]:
    """Parse ``category word word ...``; returns None for lines without text."""
    parts = line.split()
    if len(parts) < 2:
        return None
    return DocumentSample(parts[0], parts[1:])


def parse_tree(line: str, line_number: Optional[int] = None) -> Tree:
    """
    Parse a bracketed Penn Treebank parse.

    An unlabeled outermost bracket, as in ``((S ...))``, becomes TOP; a
    root with any other label is wrapped in TOP.
    """
    try:
        tree = Tree.fromstring(line)
    except ValueError as e:
        raise MalformedSample(f"bad parse tree ({e})", line_number, line) from e
    if not isinstance(tree, Tree):
        raise MalformedSample("parse has no constituents", line_number, line)
    if tree.label() == "":
        tree.set_label("TOP")
    elif tree.label() != "TOP":
        tree = Tree("TOP", [tree])
    return tree


# ── Streams ───────────────────────────────────────────────────────────────────

class SampleStream(ABC):
    """Lazy sequence of samples over the lines of a training resource."""

    def __init__(self, lines: Iterable[str]):
        self._lines = lines

    def numbered_lines(self) -> Iterator[Tuple[int, str]]:
        return enumerate(self._lines, start=1)

    @abstractmethod
    def __iter__(self):
        pass


class TokenSampleStream(SampleStream):
    """One tokenizer sample per non-blank line."""

    def __iter__(self) -> Iterator[TokenSample]:
        for number, line in self.numbered_lines():
            if line.strip():
                yield parse_token_sample(line, number)


class SentenceSampleStream(SampleStream):
    """
    Sentences one per line; an empty line ends the current document.

    Each yielded sample is a whole document, its sentences joined by a
    single space.
    """

    def __iter__(self) -> Iterator[SentenceSample]:
        sentences = []
        for _, line in self.numbered_lines():
            line = line.strip()
            if line:
                sentences.append(line)
            elif sentences:
                yield self._build(sentences)
                sentences = []
        if sentences:
            yield self._build(sentences)

    @staticmethod
    def _build(sentences: List[str]) -> SentenceSample:
        spans = []
        offset = 0
        for sentence in sentences:
            spans.append(Span(offset, offset + len(sentence)))
            offset += len(sentence) + 1
        return SentenceSample(" ".join(sentences), spans)


class WordTagSampleStream(SampleStream):
    """One POS sample per non-blank line of ``word_tag`` pairs."""

    def __iter__(self) -> Iterator[POSSample]:
        for number, line in self.numbered_lines():
            if line.strip():
                yield parse_pos_sample(line, number)


class NameSampleDataStream(SampleStream):
    """One name sample per non-blank line; blank lines separate documents."""

    def __iter__(self) -> Iterator[NameSample]:
        for number, line in self.numbered_lines():
            if line.strip():
                yield parse_name_sample(line, number)


class ChunkSampleStream(SampleStream):
    """CoNLL-2000 style ``word pos chunk`` lines, blank line between sentences."""

    def __iter__(self) -> Iterator[ChunkSample]:
        words, tags, preds = [], [], []
        for number, line in self.numbered_lines():
            parts = line.split()
            if not parts:
                if words:
                    yield ChunkSample(words, tags, preds)
                    words, tags, preds = [], [], []
                continue
            if len(parts) != 3:
                raise MalformedSample(
                    "expected 'word pos chunk'", number, line)
            if not CHUNK_TAG_PATTERN.match(parts[2]):
                raise MalformedSample(
                    f"bad chunk tag {parts[2]!r}", number, line)
            words.append(parts[0])
            tags.append(parts[1])
            preds.append(parts[2])
        if words:
            yield ChunkSample(words, tags, preds)


class DocumentSampleStream(SampleStream):
    """
    One categorized document per non-blank line.

    Lines with no text after the category are skipped by the caller; this
    stream yields None for them so that the skip can be reported.
    """

    def __iter__(self) -> Iterator[Optional[DocumentSample]]:
        for number, line in self.numbered_lines():
            if line.strip():
                yield parse_document_sample(line, number)


class ParseSampleStream(SampleStream):
    """One bracketed parse per non-blank line."""

    def __iter__(self) -> Iterator[Tree]:
        for number, line in self.numbered_lines():
            if line.strip():
                yield parse_tree(line, number)
