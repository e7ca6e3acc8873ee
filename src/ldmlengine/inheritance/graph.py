"""Graph algorithms for load-time validation.

Provides cycle detection using depth-first search. Used for explicit parent
links between locales and for redirects between (locale, key) alias nodes.

Python 3.13+.
"""

from collections.abc import Hashable, Iterable, Mapping
from enum import Enum, auto

__all__ = ["detect_cycles"]


class _NodeState(Enum):
    """DFS node visitation state for iterative cycle detection."""

    ENTER = auto()  # First visit to node
    EXIT = auto()  # Returning from node (all neighbors processed)


def detect_cycles[N: Hashable](edges: Mapping[N, Iterable[N]]) -> list[list[N]]:
    """Detect all cycles in a directed graph using iterative DFS.

    Iterative DFS with an explicit stack, so deep chains never hit
    RecursionError.

    Args:
        edges: Mapping from node to the nodes it points at. Nodes that only
            appear as targets are treated as having no outgoing edges.

    Returns:
        List of cycles, each a node path that starts and ends with the same
        node. Each distinct node set is reported once. Empty if acyclic.

    Example:
        >>> detect_cycles({"zh_HK": ["zh_MO"], "zh_MO": ["zh_HK"]})
        [['zh_HK', 'zh_MO', 'zh_HK']]
        >>> detect_cycles({"es_AR": ["es_419"], "es_419": ["es"]})
        []

    Complexity:
        Time: O(V + E) where V = nodes, E = edges
        Space: O(V) for visited/recursion tracking
    """
    visited: set[N] = set()
    cycles: list[list[N]] = []
    seen_cycle_keys: set[frozenset[N]] = set()

    for start_node in edges:
        if start_node in visited:
            continue

        path: list[N] = []
        on_path: set[N] = set()
        stack: list[tuple[N, _NodeState]] = [(start_node, _NodeState.ENTER)]

        while stack:
            node, state = stack.pop()

            if state is _NodeState.EXIT:
                path.pop()
                on_path.discard(node)
                continue

            if node in visited:
                continue

            visited.add(node)
            on_path.add(node)
            path.append(node)
            stack.append((node, _NodeState.EXIT))

            for neighbor in edges.get(node, ()):
                if neighbor in on_path:
                    cycle = [*path[path.index(neighbor) :], neighbor]
                    cycle_key = frozenset(cycle)
                    if cycle_key not in seen_cycle_keys:
                        seen_cycle_keys.add(cycle_key)
                        cycles.append(cycle)
                elif neighbor not in visited:
                    stack.append((neighbor, _NodeState.ENTER))

    return cycles
