"""Locale inheritance structures: the locale tree and the alias table.

Both are built once from loader input, validated (unknown parents, parent
and alias cycles) and then shared read-only by every resolution.

Python 3.13+.
"""

from .aliases import AliasEntry, AliasTable
from .graph import detect_cycles
from .tree import LocaleNode, LocaleTree

__all__ = ["AliasEntry", "AliasTable", "LocaleNode", "LocaleTree", "detect_cycles"]
