"""
Dictionary: Word lists and POS dictionaries used as training aids.

Both structures are built once from a resource and are read-only while a
model trains.
"""

from typing import Dict, FrozenSet, Iterable, Iterator, Sequence, Tuple, Union

from .errors import MalformedSample
from .resources import Resource, open_text, plain_text_by_line


class Dictionary:
    """
    A set of entries, each entry a sequence of one or more tokens.

    Lookups are case-insensitive unless case_sensitive is set.
    """

    def __init__(self, case_sensitive: bool = False):
        self.case_sensitive = case_sensitive
        self._entries: set = set()
        self._lengths: set = set()

    def _key(self, entry: Union[str, Sequence[str]]) -> Tuple[str, ...]:
        tokens = entry.split() if isinstance(entry, str) else tuple(entry)
        if not self.case_sensitive:
            tokens = [token.lower() for token in tokens]
        return tuple(tokens)

    def put(self, entry: Union[str, Sequence[str]]):
        """Add an entry; duplicates collapse into one."""
        key = self._key(entry)
        if key:
            self._entries.add(key)
            self._lengths.add(len(key))

    @property
    def entry_lengths(self) -> FrozenSet[int]:
        """Distinct entry lengths in tokens."""
        return frozenset(self._lengths)

    def __contains__(self, entry) -> bool:
        return self._key(entry) in self._entries

    def __iter__(self) -> Iterator[Tuple[str, ...]]:
        return iter(sorted(self._entries))

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"Dictionary(entries={len(self)}, case_sensitive={self.case_sensitive})"


class POSDictionary:
    """
    Records which part-of-speech tags a word may be assigned.

    Words that are not listed may receive any tag.
    """

    def __init__(self, case_sensitive: bool = True):
        self.case_sensitive = case_sensitive
        self._tags: Dict[str, FrozenSet[str]] = {}

    def _key(self, word: str) -> str:
        return word if self.case_sensitive else word.lower()

    def put(self, word: str, tags: Iterable[str]):
        """Register the tags a word may take, merging with known ones."""
        key = self._key(word)
        self._tags[key] = self._tags.get(key, frozenset()) | frozenset(tags)

    def tags(self, word: str) -> Tuple[str, ...]:
        """
        Get the allowed tags for a word.

        Args:
            word: The word to look up

        Returns:
            Sorted tuple of tags, empty when the word is unknown
        """
        return tuple(sorted(self._tags.get(self._key(word), ())))

    def __contains__(self, word: str) -> bool:
        return self._key(word) in self._tags

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._tags))

    def __len__(self) -> int:
        return len(self._tags)

    def __repr__(self) -> str:
        return f"POSDictionary(words={len(self)}, case_sensitive={self.case_sensitive})"


def build_dictionary(resource: Resource, case_sensitive: bool = False) -> Dictionary:
    """
    Build a Dictionary from a file with one entry per line.

    Blank lines are ignored; an entry with several whitespace-separated
    tokens is kept as a multi-token entry.

    Args:
        resource: Path or stream of the word list
        case_sensitive: Whether lookups distinguish case

    Returns:
        The populated Dictionary
    """
    dictionary = Dictionary(case_sensitive=case_sensitive)
    with open_text(resource) as handle:
        for line in plain_text_by_line(handle):
            dictionary.put(line)
    return dictionary


def build_posdictionary(resource: Resource, case_sensitive: bool = True) -> POSDictionary:
    """
    Build a POSDictionary from lines of ``word tag1 tag2 ...``.

    Args:
        resource: Path or stream of the tag dictionary
        case_sensitive: Whether lookups distinguish case

    Returns:
        The populated POSDictionary

    Raises:
        MalformedSample: If a line lists a word without any tag
    """
    dictionary = POSDictionary(case_sensitive=case_sensitive)
    with open_text(resource) as handle:
        for number, line in enumerate(plain_text_by_line(handle), start=1):
            parts = line.split()
            if not parts:
                continue
            if len(parts) < 2:
                raise MalformedSample("word without tags", number, line)
            dictionary.put(parts[0], parts[1:])
    return dictionary
