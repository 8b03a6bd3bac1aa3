"""Tests for writing models to byte sinks and reading them back."""

import io
import pickle

import pytest

from nlptrain import (
    DoccatModel,
    ResourceUnreadable,
    SerializationFailure,
    TokenizerModel,
    load_model,
    train_document_categorization,
    train_name_finder,
    train_pos_tagger,
    train_sentence_detector,
    train_tokenizer,
    train_treebank_chunker,
    train_treebank_parser,
    write_model,
)


def _round_trip(model):
    sink = io.BytesIO()
    write_model(model, sink)
    assert sink.getvalue()
    return load_model(io.BytesIO(sink.getvalue()), expected=type(model))


# ── Round trips ───────────────────────────────────────────────────────────────

def test_tokenizer_round_trip(tokenizer_corpus, tmp_path):
    model = train_tokenizer(tokenizer_corpus, cutoff=0)
    path = tmp_path / "en-token.bin"
    write_model(model, path)
    loaded = TokenizerModel.load(path)
    text = "She said no, then left."
    assert loaded.tokenize(text) == model.tokenize(text)
    assert loaded.language == model.language
    assert loaded.training_parameters == model.training_parameters


def test_sentence_detector_round_trip(sentence_corpus):
    model = train_sentence_detector(sentence_corpus)
    text = "Mr. Smith went home. Dogs bark."
    assert _round_trip(model).sent_detect(text) == model.sent_detect(text)


def test_pos_tagger_round_trip(pos_corpus):
    model = train_pos_tagger(pos_corpus, cutoff=0)
    sentence = ["A", "cat", "sang", "."]
    assert _round_trip(model).tag(sentence) == model.tag(sentence)


def test_name_finder_round_trip(name_corpus):
    model = train_name_finder(name_corpus, cutoff=0, classifier="PERCEPTRON")
    tokens = ["Mr", ".", "Vinken", "is", "here", "."]
    loaded = _round_trip(model)
    assert loaded.find(tokens) == model.find(tokens)
    assert loaded.entity_type == model.entity_type


def test_chunker_round_trip(chunk_corpus):
    model = train_treebank_chunker(chunk_corpus, cutoff=0)
    words, tags = ["A", "cat", "barked", "."], ["DT", "NN", "VBD", "."]
    assert _round_trip(model).chunk(words, tags) == model.chunk(words, tags)


def test_parser_round_trip(treebank_corpus, head_rules_file):
    model = train_treebank_parser(treebank_corpus, head_rules_file, cutoff=0)
    sentence = ["The", "cat", "ran", "."]
    assert _round_trip(model).parse(sentence) == model.parse(sentence)


def test_doccat_round_trip(doccat_corpus):
    model = train_document_categorization(doccat_corpus)
    loaded = _round_trip(model)
    assert loaded.categories == model.categories
    assert loaded.classify("fun good") == model.classify("fun good")


# ── Failures ──────────────────────────────────────────────────────────────────

def test_write_to_missing_directory(doccat_corpus, tmp_path):
    model = train_document_categorization(doccat_corpus)
    with pytest.raises(SerializationFailure):
        write_model(model, tmp_path / "missing" / "model.bin")


def test_write_non_model():
    with pytest.raises(SerializationFailure):
        write_model({"not": "a model"}, io.BytesIO())


def test_write_unpicklable_feature_generator(name_corpus):
    from nlptrain.features import name_context

    model = train_name_finder(name_corpus, cutoff=0,
                              feature_generator=lambda t, i, h: name_context(t, i, h))
    with pytest.raises(SerializationFailure):
        write_model(model, io.BytesIO())


def test_load_wrong_family(doccat_corpus, tmp_path):
    path = tmp_path / "doccat.bin"
    write_model(train_document_categorization(doccat_corpus), path)
    assert isinstance(load_model(path), DoccatModel)
    with pytest.raises(SerializationFailure):
        TokenizerModel.load(path)


def test_load_pickled_non_model():
    with pytest.raises(SerializationFailure):
        load_model(io.BytesIO(pickle.dumps({"weights": []})))


@pytest.mark.parametrize("payload", [b"", b"\x00\x01garbage"])
def test_load_unreadable(payload):
    with pytest.raises(ResourceUnreadable):
        load_model(io.BytesIO(payload))


@pytest.mark.parametrize("payload", [
    b"cnot_a_module\nThing\n.",
    b"cnlptrain.models\nNoSuchModel\n.",
])
def test_load_unknown_class(payload):
    with pytest.raises(ResourceUnreadable):
        load_model(io.BytesIO(payload))


def test_load_missing_file(tmp_path):
    with pytest.raises(ResourceUnreadable):
        load_model(tmp_path / "missing.bin")
