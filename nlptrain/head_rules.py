"""
HeadRules: Head-child selection for treebank constituents.

Rules are read from lines of the form::

    <n> <label> <direction> <category> <category> ...

where n counts the fields after it and direction 1 searches the children
left to right, 0 right to left. For each listed category in order, the
first child carrying it is the head; without a match the first (or last)
child is.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from nltk.tree import Tree

from .errors import MalformedSample
from .resources import Resource, open_text, plain_text_by_line

INTERMEDIATE_MARK = "|<"


@dataclass(frozen=True)
class HeadRule:
    left_to_right: bool
    categories: Tuple[str, ...]


def base_label(label: str) -> str:
    """Strip function tags and indices, e.g. NP-SBJ-1 -> NP, -NONE- kept."""
    if label.startswith("-"):
        return label
    return label.split("-")[0].split("=")[0] or label


class HeadRules:
    """Head rules keyed by constituent label."""

    def __init__(self, rules: Optional[Dict[str, HeadRule]] = None):
        self.rules: Dict[str, HeadRule] = rules or {}

    @classmethod
    def from_resource(cls, resource: Resource) -> "HeadRules":
        """
        Read head rules from a path or stream.

        Raises:
            ResourceUnreadable: If the resource cannot be opened
            MalformedSample: If a line does not follow the rule format
        """
        rules = {}
        with open_text(resource) as handle:
            for number, line in enumerate(plain_text_by_line(handle), start=1):
                parts = line.split()
                if not parts:
                    continue
                if len(parts) < 3 or not parts[0].isdigit():
                    raise MalformedSample("bad head rule", number, line)
                if int(parts[0]) != len(parts) - 1:
                    raise MalformedSample(
                        f"head rule declares {parts[0]} fields, has {len(parts) - 1}",
                        number, line)
                if parts[2] not in ("0", "1"):
                    raise MalformedSample("head rule direction must be 0 or 1", number, line)
                rules[parts[1]] = HeadRule(parts[2] == "1", tuple(parts[3:]))
        return cls(rules)

    def head_index(self, label: str, child_labels: Sequence[str]) -> int:
        """
        Index of the head among a constituent's children.

        Args:
            label: Label of the constituent
            child_labels: Labels of its children in order

        Returns:
            Position of the head child
        """
        rule = self.rules.get(base_label(label))
        children = [base_label(c) for c in child_labels]
        last = len(children) - 1
        if rule is None:
            return last
        order = range(len(children)) if rule.left_to_right else range(last, -1, -1)
        for category in rule.categories:
            for i in order:
                if children[i] == category:
                    return i
        return 0 if rule.left_to_right else last

    def head(self, tree: Tree) -> Optional[str]:
        """Head word of a tree, following head children down to a leaf."""
        node = tree
        while isinstance(node, Tree):
            if len(node) == 0:
                return None
            labels = [c.label() if isinstance(c, Tree) else c for c in node]
            node = node[self.head_index(node.label(), labels)]
        return node

    def __len__(self) -> int:
        return len(self.rules)


def _label(node) -> str:
    return node.label() if isinstance(node, Tree) else node


def binarize(tree: Tree, head_rules: HeadRules) -> Tree:
    """
    Binarize a tree outward from the head child of each constituent.

    Right siblings attach first, then left siblings. Intermediate nodes are
    labeled ``X|<H>`` with H the head child's label.
    """
    if not isinstance(tree, Tree):
        return tree
    children = [binarize(child, head_rules) for child in tree]
    label = tree.label()
    if len(children) <= 2:
        return Tree(label, children)

    h = head_rules.head_index(label, [_label(c) for c in children])
    intermediate = f"{label}{INTERMEDIATE_MARK}{_label(children[h])}>"
    current = children[h]
    pending: List[Tuple[int, object]] = (
        [(i, children[i]) for i in range(h + 1, len(children))]
        + [(i, children[i]) for i in range(h - 1, -1, -1)])
    for n, (i, sibling) in enumerate(pending):
        node_label = label if n == len(pending) - 1 else intermediate
        pair = [current, sibling] if i > h else [sibling, current]
        current = Tree(node_label, pair)
    return current


def debinarize(tree: Tree) -> Tree:
    """Undo binarize by splicing intermediate nodes into their parents."""
    if not isinstance(tree, Tree):
        return tree
    children = []
    for child in tree:
        child = debinarize(child)
        if isinstance(child, Tree) and INTERMEDIATE_MARK in child.label():
            children.extend(child)
        else:
            children.append(child)
    return Tree(tree.label(), children)
