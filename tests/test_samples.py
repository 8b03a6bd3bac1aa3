"""Tests for the training line parsers and sample streams (samples.py)."""

import pytest
from nltk.tree import Tree

from nlptrain.errors import MalformedSample
from nlptrain.samples import (
    ChunkSampleStream,
    DocumentSampleStream,
    NameSampleDataStream,
    ParseSampleStream,
    SentenceSampleStream,
    Span,
    TokenSampleStream,
    WordTagSampleStream,
    parse_document_sample,
    parse_name_sample,
    parse_pos_sample,
    parse_token_sample,
    parse_tree,
)


# ── Tokenizer samples ─────────────────────────────────────────────────────────

def test_token_sample_split_marker():
    sample = parse_token_sample("Hello<SPLIT>, world<SPLIT>.")
    assert sample.text == "Hello, world."
    assert sample.tokens == ["Hello", ",", "world", "."]


def test_token_sample_plain_whitespace():
    sample = parse_token_sample("a  b c")
    assert sample.text == "a b c"
    assert sample.spans == [Span(0, 1), Span(2, 3), Span(4, 5)]


def test_token_sample_empty_piece():
    with pytest.raises(MalformedSample, match="line 3"):
        parse_token_sample("<SPLIT>abc", 3)


def test_token_stream_skips_blank_lines():
    samples = list(TokenSampleStream(["a<SPLIT>.", "", "b"]))
    assert [s.tokens for s in samples] == [["a", "."], ["b"]]


# ── Sentence samples ──────────────────────────────────────────────────────────

def test_sentence_stream_documents():
    lines = ["One.", "Two!", "", "Three?"]
    samples = list(SentenceSampleStream(lines))
    assert len(samples) == 2
    assert samples[0].document == "One. Two!"
    assert samples[0].sentences == ["One.", "Two!"]
    assert samples[1].sentences == ["Three?"]


def test_sentence_stream_repeated_blank_lines():
    samples = list(SentenceSampleStream(["", "A.", "", "", "B."]))
    assert [s.document for s in samples] == ["A.", "B."]


# ── POS samples ───────────────────────────────────────────────────────────────

def test_pos_sample():
    sample = parse_pos_sample("The_DT cat_NN ._.")
    assert sample.words == ["The", "cat", "."]
    assert sample.tags == ["DT", "NN", "."]
    assert sample.tagged() == [("The", "DT"), ("cat", "NN"), (".", ".")]


def test_pos_sample_tag_after_last_underscore():
    sample = parse_pos_sample("snake_case_NN")
    assert sample.words == ["snake_case"]
    assert sample.tags == ["NN"]


@pytest.mark.parametrize("line", ["cat", "cat_", "_NN"])
def test_pos_sample_malformed(line):
    with pytest.raises(MalformedSample):
        parse_pos_sample(line)


def test_word_tag_stream():
    samples = list(WordTagSampleStream(["a_DT", "", "b_NN c_NN"]))
    assert [s.words for s in samples] == [["a"], ["b", "c"]]


# ── Name samples ──────────────────────────────────────────────────────────────

def test_name_sample_typed():
    sample = parse_name_sample("<START:person> Pierre Vinken <END> , 61 years old .")
    assert sample.tokens == ["Pierre", "Vinken", ",", "61", "years", "old", "."]
    assert sample.names == [Span(0, 2, "person")]


def test_name_sample_untyped():
    sample = parse_name_sample("in <START> London <END> today")
    assert sample.names == [Span(1, 2, None)]


def test_name_sample_several_names():
    sample = parse_name_sample(
        "<START:person> Vinken <END> of <START:organization> Elsevier N.V. <END>")
    assert sample.names == [Span(0, 1, "person"), Span(2, 4, "organization")]


@pytest.mark.parametrize("line", [
    "<START> <START> a <END> <END>",
    "a <END>",
    "<START> <END> a",
    "<START:person> a b",
])
def test_name_sample_malformed(line):
    with pytest.raises(MalformedSample):
        parse_name_sample(line)


def test_name_stream_skips_document_breaks():
    samples = list(NameSampleDataStream(["<START> A <END> x", "", "y"]))
    assert len(samples) == 2


# ── Chunk samples ─────────────────────────────────────────────────────────────

def test_chunk_stream_sentences():
    lines = ["He PRP B-NP", "ran VBD B-VP", "", "", "It PRP B-NP", ". . O"]
    samples = list(ChunkSampleStream(lines))
    assert len(samples) == 2
    assert samples[0].words == ["He", "ran"]
    assert samples[0].tags == ["PRP", "VBD"]
    assert samples[1].preds == ["B-NP", "O"]


def test_chunk_stream_wrong_column_count():
    with pytest.raises(MalformedSample, match="line 2"):
        list(ChunkSampleStream(["He PRP B-NP", "ran VBD"]))


def test_chunk_stream_bad_chunk_tag():
    with pytest.raises(MalformedSample, match="chunk tag"):
        list(ChunkSampleStream(["He PRP X-NP"]))


# ── Document samples ──────────────────────────────────────────────────────────

def test_document_sample():
    sample = parse_document_sample("positive good fun")
    assert sample.category == "positive"
    assert sample.text == ["good", "fun"]


def test_document_sample_without_text():
    assert parse_document_sample("positive") is None


def test_document_stream_yields_none_for_category_only():
    samples = list(DocumentSampleStream(["a x", "", "b", "c y z"]))
    assert samples[1] is None
    assert [s.category for s in samples if s] == ["a", "c"]


# ── Parse samples ─────────────────────────────────────────────────────────────

def test_parse_tree_unlabeled_root():
    tree = parse_tree("((S (NP (PRP He)) (VP (VBD ran))))")
    assert tree.label() == "TOP"
    assert tree[0].label() == "S"


def test_parse_tree_wraps_other_root():
    tree = parse_tree("(S (NP (PRP He)) (VP (VBD ran)))")
    assert tree.label() == "TOP"
    assert tree.leaves() == ["He", "ran"]


def test_parse_tree_keeps_top():
    tree = parse_tree("(TOP (S (NP (PRP He))))")
    assert tree == Tree("TOP", [Tree("S", [Tree("NP", [Tree("PRP", ["He"])])])])


def test_parse_tree_unbalanced():
    with pytest.raises(MalformedSample, match="line 7"):
        parse_tree("(TOP (S (NP", 7)


def test_parse_stream():
    trees = list(ParseSampleStream(["(S (X a))", "", "(S (X b))"]))
    assert [t.leaves() for t in trees] == [["a"], ["b"]]
