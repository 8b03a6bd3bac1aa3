"""Tests for word dictionaries, POS dictionaries and dictionary features."""

import io

import pytest

from nlptrain import (
    Dictionary,
    DictionaryFeatureGenerator,
    MalformedSample,
    POSDictionary,
    ResourceUnreadable,
    build_dictionary,
    build_posdictionary,
)


# ── Dictionary ────────────────────────────────────────────────────────────────

def test_build_dictionary_collapses_duplicates(tmp_path):
    path = tmp_path / "cities"
    path.write_text("London\nParis\n\nlondon\nNew York\n", encoding="utf-8")
    dictionary = build_dictionary(path)
    assert len(dictionary) == 3
    assert "london" in dictionary
    assert "LONDON" in dictionary
    assert ("new", "york") in dictionary
    assert dictionary.entry_lengths == frozenset({1, 2})


def test_build_dictionary_case_sensitive():
    dictionary = build_dictionary(io.StringIO("London\n"), case_sensitive=True)
    assert "London" in dictionary
    assert "london" not in dictionary


def test_build_dictionary_missing_file(tmp_path):
    with pytest.raises(ResourceUnreadable):
        build_dictionary(tmp_path / "missing")


def test_dictionary_iteration_sorted():
    dictionary = Dictionary()
    dictionary.put("b")
    dictionary.put("a c")
    assert list(dictionary) == [("a", "c"), ("b",)]


# ── POSDictionary ─────────────────────────────────────────────────────────────

def test_build_posdictionary():
    resource = io.StringIO("cat NN VB\nthe DT\n\ncat NNS\n")
    dictionary = build_posdictionary(resource)
    assert len(dictionary) == 2
    assert dictionary.tags("cat") == ("NN", "NNS", "VB")
    assert dictionary.tags("the") == ("DT",)
    assert dictionary.tags("dog") == ()
    assert "cat" in dictionary


def test_posdictionary_case_sensitive_by_default():
    dictionary = POSDictionary()
    dictionary.put("The", ["DT"])
    assert dictionary.tags("the") == ()
    insensitive = POSDictionary(case_sensitive=False)
    insensitive.put("The", ["DT"])
    assert insensitive.tags("the") == ("DT",)


def test_build_posdictionary_word_without_tags():
    with pytest.raises(MalformedSample, match="line 2"):
        build_posdictionary(io.StringIO("cat NN\ndog\n"))


# ── DictionaryFeatureGenerator ────────────────────────────────────────────────

def test_dictionary_feature_generator_marks_entries():
    dictionary = Dictionary()
    dictionary.put("New York")
    generator = DictionaryFeatureGenerator(dictionary)
    tokens = ["in", "New", "York", "today"]
    history = ["other", "other", "other"]
    assert generator(tokens, 0, history)['dict'] is None
    assert generator(tokens, 1, history)['dict'] == "B"
    assert generator(tokens, 2, history)['dict'] == "I"
    assert generator(tokens, 3, history)['dict'] is None


def test_dictionary_feature_generator_keeps_base_features():
    generator = DictionaryFeatureGenerator(Dictionary())
    features = generator(["Vinken"], 0, [])
    assert features['w'] == "Vinken"
    assert features['shape'] == "initcap"
