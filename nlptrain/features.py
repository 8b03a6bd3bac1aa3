"""
Features: Context generators turning training positions into featuresets.

Featuresets are plain dictionaries of hashable values, the form NLTK
classifiers train on. Tagger generators follow the NLTK signature
``(tokens, index, history)``.
"""

import re
from typing import Any, Dict, List, Optional, Sequence

from .dictionary import Dictionary

FeatureSet = Dict[str, Any]

_NUMBER = re.compile(r"^[0-9]+([.,][0-9]+)*$")


def char_class(char: str) -> str:
    """Coarse class of a single character."""
    if char.isupper():
        return "upper"
    if char.islower():
        return "lower"
    if char.isdigit():
        return "digit"
    if char.isspace():
        return "space"
    return "other"


def word_shape(word: str) -> str:
    """Coarse orthographic shape of a token."""
    if _NUMBER.match(word):
        return "number"
    if word.isupper():
        return "allcaps"
    if word[:1].isupper():
        return "initcap"
    if word.isalpha():
        return "lowercase" if word.islower() else "mixedcase"
    if any(c.isalnum() for c in word):
        return "alnum"
    return "punct"


def token_split_context(chunk: str, index: int) -> FeatureSet:
    """
    Features for a possible token boundary before chunk[index].

    Args:
        chunk: A whitespace-delimited piece of text
        index: Position inside the chunk, 0 < index < len(chunk)
    """
    prev_char = chunk[index - 1]
    next_char = chunk[index]
    features = {
        'prefix': chunk[:index],
        'suffix': chunk[index:],
        'p1': prev_char,
        'f1': next_char,
        'p1_class': char_class(prev_char),
        'f1_class': char_class(next_char),
        'p1f1': prev_char + next_char,
        'classes': char_class(prev_char) + "+" + char_class(next_char),
        'p2': chunk[index - 2] if index > 1 else None,
        'f2': chunk[index + 1] if index + 1 < len(chunk) else None,
        'bok': index == 1,
        'eok': index == len(chunk) - 1,
    }
    return features


def sentence_context(text: str, position: int, token_start: int, token_end: int,
                     prev_token: Optional[str], next_token: Optional[str]) -> FeatureSet:
    """
    Features for an end-of-sentence candidate.

    Args:
        text: The document text
        position: Offset of the candidate character
        token_start: Start of the whitespace token holding the candidate
        token_end: End of that token
        prev_token: The whitespace token before, if any
        next_token: The whitespace token after, if any
    """
    prefix = text[token_start:position]
    suffix = text[position + 1:token_end]
    return {
        'eos': text[position],
        'prefix': prefix,
        'suffix': suffix,
        'prefix_len': min(len(prefix), 5),
        'prefix_shape': word_shape(prefix) if prefix else None,
        'prefix_has_dot': "." in prefix,
        'prev': prev_token,
        'next': next_token,
        'next_shape': word_shape(next_token) if next_token else None,
        'last_in_text': next_token is None,
    }


def name_context(tokens: Sequence[str], index: int, history: List[str]) -> FeatureSet:
    """Default name finder features: a two-token window with token classes."""
    word = tokens[index]
    features = {
        'w': word,
        'w.lower': word.lower(),
        'shape': word_shape(word),
        'prefix3': word[:3].lower(),
        'suffix3': word[-3:].lower(),
        'prev_outcome': history[index - 1] if index > 0 else None,
    }
    for offset in (-2, -1, 1, 2):
        i = index + offset
        if 0 <= i < len(tokens):
            features[f'w{offset:+d}'] = tokens[i].lower()
            features[f'shape{offset:+d}'] = word_shape(tokens[i])
        else:
            features[f'w{offset:+d}'] = None
    features['prev_outcome+w'] = f"{features['prev_outcome']}+{word.lower()}"
    return features


def chunk_context(tokens: Sequence, index: int, history: List[str]) -> FeatureSet:
    """Chunker features over (word, pos) tokens and previous chunk tags."""
    word, pos = tokens[index]
    prev_word, prev_pos = tokens[index - 1] if index > 0 else (None, "<S>")
    next_word, next_pos = tokens[index + 1] if index + 1 < len(tokens) else (None, "</S>")
    prev_chunk = history[index - 1] if index > 0 else "<S>"
    return {
        'w': word.lower(),
        'pos': pos,
        'prev_w': prev_word.lower() if prev_word else None,
        'prev_pos': prev_pos,
        'next_w': next_word.lower() if next_word else None,
        'next_pos': next_pos,
        'prev_chunk': prev_chunk,
        'prev_pos+pos': f"{prev_pos}+{pos}",
        'pos+next_pos': f"{pos}+{next_pos}",
        'prev_chunk+pos': f"{prev_chunk}+{pos}",
    }


def bag_of_words(words: Sequence[str]) -> FeatureSet:
    """Document categorizer features: one boolean per distinct word."""
    return {f'bow={word}': True for word in words}


class DictionaryFeatureGenerator:
    """
    Name finder features plus membership in a Dictionary.

    A token inside a dictionary entry gets ``dict=B`` when it starts the
    entry and ``dict=I`` otherwise. Instances are picklable, so models
    trained with them can be written to disk.
    """

    def __init__(self, dictionary: Dictionary, base=None):
        """
        Args:
            dictionary: Entries to look for
            base: Generator supplying the remaining features
                (defaults to name_context)
        """
        self.dictionary = dictionary
        self.base = base or name_context

    def __call__(self, tokens: Sequence[str], index: int, history: List[str]) -> FeatureSet:
        features = dict(self.base(tokens, index, history))
        features['dict'] = self._membership(tokens, index)
        return features

    def _membership(self, tokens: Sequence[str], index: int) -> Optional[str]:
        for length in sorted(self.dictionary.entry_lengths, reverse=True):
            for start in range(max(0, index - length + 1), index + 1):
                end = start + length
                if end <= len(tokens) and tuple(tokens[start:end]) in self.dictionary:
                    return "B" if start == index else "I"
        return None
