"""
Tree display for notes.

Anything that can be shown as a tree node implements TreeItem: a label for
the node itself and the list of its children. Views, short notes and long
notes all do, so one recursive routine draws the whole collection.
"""

import sys
from typing import List, Optional, Sequence, TextIO

BRANCH = "├─ "
LAST_BRANCH = "└─ "
PIPE = "│  "
SPACE = "   "


class TreeItem:
    """A node that can be drawn by print_tree."""

    def label(self) -> str:
        raise NotImplementedError

    def children(self) -> Sequence["TreeItem"]:
        return []


def _format_children(item: TreeItem, prefix: str, lines: List[str]) -> None:
    children = item.children()
    for i, child in enumerate(children):
        is_last = i == len(children) - 1
        lines.append(f"{prefix}{LAST_BRANCH if is_last else BRANCH}{child.label()}")
        _format_children(child, prefix + (SPACE if is_last else PIPE), lines)


def format_tree(item: TreeItem) -> List[str]:
    """
    Build the lines of a tree rooted at item.

    Args:
        item: Root node

    Returns:
        One line per node, depth-first, children indented under their parent
    """
    lines = [item.label()]
    _format_children(item, "", lines)
    return lines


def print_tree(item: TreeItem, file: Optional[TextIO] = None) -> None:
    """Print the tree rooted at item to file (stdout by default)."""
    out = file or sys.stdout
    for line in format_tree(item):
        print(line, file=out)
