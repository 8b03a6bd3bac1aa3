"""Shared test fixtures: small training corpora written to tmp_path."""

from pathlib import Path

import pytest

TOKENIZER_CORPUS = """\
Hello<SPLIT>, world<SPLIT>.
The cat sat<SPLIT>.
He said no<SPLIT>, thanks<SPLIT>.
We saw it<SPLIT>.
The dog ran home<SPLIT>.
She laughed<SPLIT>, then left<SPLIT>.
"""

SENTENCE_CORPUS = """\
The cat sat on the mat.
Mr. Smith went home.
It was late!
Did he leave?

Dogs bark.
Birds sing loudly.
The end.
"""

POS_CORPUS = """\
The_DT cat_NN sat_VBD ._.
The_DT dog_NN ran_VBD ._.
A_DT bird_NN sang_VBD ._.
The_DT cat_NN ran_VBD ._.
A_DT dog_NN sat_VBD ._.
"""

NAME_CORPUS = """\
<START:person> Pierre Vinken <END> , 61 years old , will join the board .
Mr . <START:person> Vinken <END> is chairman of <START:organization> Elsevier <END> .

<START:person> Rudolph Agnew <END> , 55 years old , was named a director .
<START> London <END> is a big city .
"""

CHUNK_CORPUS = """\
He PRP B-NP
reckons VBZ B-VP
the DT B-NP
current JJ I-NP
deficit NN I-NP
. . O

The DT B-NP
cat NN I-NP
sat VBD B-VP
. . O

A DT B-NP
dog NN I-NP
barked VBD B-VP
. . O
"""

TREEBANK_CORPUS = """\
(TOP (S (NP (DT The) (NN cat)) (VP (VBD sat) (PP (IN on) (NP (DT the) (NN mat)))) (. .)))
(TOP (S (NP (DT The) (NN dog)) (VP (VBD ran)) (. .)))
((S (NP-SBJ (PRP He)) (VP (VBD slept)) (. .)))
"""

HEAD_RULES = """\
5 S 1 VP S SBAR
5 VP 1 VBD VB VP
5 NP 0 NN NNS PRP
4 PP 1 IN TO
"""

DOCCAT_CORPUS = """\
positive good great fun
positive great awesome good
positive fun good excellent
negative bad awful boring
negative awful terrible bad
negative boring bad poor
"""


def _write(tmp_path: Path, name: str, content: str) -> Path:
    path = tmp_path / name
    path.write_text(content, encoding="utf-8")
    return path


@pytest.fixture
def tokenizer_corpus(tmp_path) -> Path:
    return _write(tmp_path, "en-token.train", TOKENIZER_CORPUS)


@pytest.fixture
def sentence_corpus(tmp_path) -> Path:
    return _write(tmp_path, "en-sent.train", SENTENCE_CORPUS)


@pytest.fixture
def pos_corpus(tmp_path) -> Path:
    return _write(tmp_path, "en-pos.train", POS_CORPUS)


@pytest.fixture
def name_corpus(tmp_path) -> Path:
    return _write(tmp_path, "en-ner.train", NAME_CORPUS)


@pytest.fixture
def chunk_corpus(tmp_path) -> Path:
    return _write(tmp_path, "en-chunk.train", CHUNK_CORPUS)


@pytest.fixture
def treebank_corpus(tmp_path) -> Path:
    return _write(tmp_path, "en-parser.train", TREEBANK_CORPUS)


@pytest.fixture
def head_rules_file(tmp_path) -> Path:
    return _write(tmp_path, "head_rules", HEAD_RULES)


@pytest.fixture
def doccat_corpus(tmp_path) -> Path:
    return _write(tmp_path, "en-doccat.train", DOCCAT_CORPUS)
