"""Tests for head rules, head-outward binarization and its inverse."""

import io

import pytest
from nltk.tree import Tree

from nlptrain.errors import MalformedSample, ResourceUnreadable
from nlptrain.head_rules import HeadRules, base_label, binarize, debinarize

RULES = """\
5 S 1 VP S SBAR
5 VP 1 VBD VB VP
5 NP 0 NN NNS PRP
"""


@pytest.fixture
def rules():
    return HeadRules.from_resource(io.StringIO(RULES))


def test_from_resource(rules):
    assert len(rules) == 3
    assert rules.rules["NP"].left_to_right is False
    assert rules.rules["S"].categories == ("VP", "S", "SBAR")


@pytest.mark.parametrize("line", [
    "4 S 1 VP S SBAR",
    "S 1 VP",
    "3 S 2 VP",
])
def test_from_resource_malformed(line):
    with pytest.raises(MalformedSample):
        HeadRules.from_resource(io.StringIO(line + "\n"))


def test_from_resource_missing(tmp_path):
    with pytest.raises(ResourceUnreadable):
        HeadRules.from_resource(tmp_path / "head_rules")


def test_base_label():
    assert base_label("NP-SBJ-1") == "NP"
    assert base_label("NP=2") == "NP"
    assert base_label("-NONE-") == "-NONE-"
    assert base_label("S") == "S"


def test_head_index(rules):
    assert rules.head_index("S", ["NP", "VP", "."]) == 1
    # right to left: the last NN wins
    assert rules.head_index("NP", ["DT", "NN", "NN"]) == 2
    # no listed category: first child left to right
    assert rules.head_index("VP", ["ADVP", "RB"]) == 0
    # unknown label: last child
    assert rules.head_index("ADJP", ["JJ", "CC", "JJ"]) == 2


def test_head_word(rules):
    tree = Tree.fromstring("(S (NP (DT The) (NN cat)) (VP (VBD sat)) (. .))")
    assert rules.head(tree) == "sat"


def test_binarize_is_binary(rules):
    tree = Tree.fromstring("(S (NP DT NN) (ADVP RB) (VP VBD) (. .))")
    binary = binarize(tree, rules)
    for subtree in binary.subtrees():
        assert len(subtree) <= 2
    assert binary.label() == "S"
    assert any("|<" in t.label() for t in binary.subtrees())


def test_debinarize_restores_tree(rules):
    tree = Tree.fromstring("(S (NP DT JJ NN NN) (ADVP RB) (VP VBD (NP PRP) (ADVP RB)) (. .))")
    assert debinarize(binarize(tree, rules)) == tree
