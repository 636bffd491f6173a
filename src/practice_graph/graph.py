"""Graph operations for the practice dependency catalog.

Provides functions for:
- Graph construction (adjacency map from dependency edges)
- Cycle detection over the raw edge list
- Traversal queries (direct/total dependency counts, reachability)
- Leveling for the full-tree view (shortest and deepest depth per node)

Design decisions:
- Uses iterative algorithms to avoid stack overflow on deep graphs
- Query functions take the adjacency map as an argument and keep no state
- Leveling assumes an acyclic graph and raises CyclicDependencyError otherwise
"""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from practice_graph.models import AdjacencyMap, Practice

logger = logging.getLogger(__name__)


class GraphError(Exception):
    """Base exception for graph-related errors."""


class CyclicDependencyError(GraphError):
    """Raised when a cyclic dependency prevents an operation."""


@dataclass(frozen=True)
class TreeLevelEntry:
    """One row entry of the full-tree projection.

    Attributes:
        practice_id: The practice shown.
        level: Deepest distance from the root at which the practice occurs.
        parent_id: The parent through which that deepest level is reached
            (None for the root).
    """

    practice_id: str
    level: int
    parent_id: str | None


# Graph Construction


def _is_node_id(value: object) -> bool:
    return isinstance(value, str) and value.strip() != ""


def build_dependency_graph(dependencies: Sequence[Any]) -> AdjacencyMap:
    """Build an adjacency map from a list of dependency edges.

    Edge order is preserved per node and repeated edges are kept once.
    Practices without outgoing edges get no key; callers treat a missing
    key and an empty list the same way. Malformed edges are skipped, so
    partially invalid catalogs can still be inspected.

    Args:
        dependencies: Raw ``{"practice_id", "depends_on_id"}`` mappings.

    Returns:
        Dictionary mapping practice_id to the list of ids it depends on.
    """
    graph: AdjacencyMap = {}
    for dependency in dependencies:
        if not isinstance(dependency, Mapping):
            continue
        source = dependency.get("practice_id")
        target = dependency.get("depends_on_id")
        if not (_is_node_id(source) and _is_node_id(target)):
            continue
        targets = graph.setdefault(source, [])
        if target not in targets:
            targets.append(target)
    return graph


def _iter_successors(graph: Mapping[str, Sequence[str]], node: str) -> Iterator[str]:
    return iter(graph.get(node, ()))


# Cycle Detection


def find_circular_dependencies(dependencies: Sequence[Any]) -> list[list[str]]:
    """Find all circular dependency chains.

    Runs an iterative depth-first search from every unvisited practice,
    keeping the current path as the recursion stack. Reaching a node that is
    already on the path records the path from that node onward, closed with
    the node itself (``["a", "b", "a"]``). Separate cycles are all reported.

    Args:
        dependencies: Raw dependency edges.

    Returns:
        List of cycles in discovery order. Empty for an acyclic graph.
    """
    graph = build_dependency_graph(dependencies)
    cycles: list[list[str]] = []
    visited: set[str] = set()

    for start in graph:
        if start in visited:
            continue

        path: list[str] = [start]
        on_path: dict[str, int] = {start: 0}
        stack: list[Iterator[str]] = [_iter_successors(graph, start)]
        visited.add(start)

        while stack:
            successor = next(stack[-1], None)
            if successor is None:
                stack.pop()
                finished = path.pop()
                del on_path[finished]
                continue

            if successor in on_path:
                cycles.append(path[on_path[successor]:] + [successor])
            elif successor not in visited:
                visited.add(successor)
                on_path[successor] = len(path)
                path.append(successor)
                stack.append(_iter_successors(graph, successor))

    if cycles:
        logger.warning("Detected %d circular dependency chain(s)", len(cycles))
    return cycles


# Traversal Functions


def count_direct_dependencies(graph: Mapping[str, Sequence[str]], practice_id: str) -> int:
    """Number of immediate dependencies of a practice (0 if it has none)."""
    return len(graph.get(practice_id, ()))


def get_all_dependencies(graph: Mapping[str, Sequence[str]], practice_id: str) -> set[str]:
    """Get all transitive dependencies of a practice.

    Each reachable practice is counted once no matter how many paths lead
    to it. The practice itself is not included.
    """
    visited: set[str] = set()
    to_visit: list[str] = list(graph.get(practice_id, ()))

    while to_visit:
        current = to_visit.pop()
        if current in visited:
            continue
        visited.add(current)
        for dep in graph.get(current, ()):
            if dep not in visited:
                to_visit.append(dep)

    visited.discard(practice_id)
    return visited


def count_total_dependencies(graph: Mapping[str, Sequence[str]], practice_id: str) -> int:
    """Number of practices reachable from ``practice_id`` (direct and indirect)."""
    return len(get_all_dependencies(graph, practice_id))


def get_reachable_practices(graph: Mapping[str, Sequence[str]], root_id: str) -> list[str]:
    """List the root and every practice reachable from it in DFS pre-order."""
    result: list[str] = []
    seen: set[str] = set()
    to_visit: list[str] = [root_id]

    while to_visit:
        current = to_visit.pop()
        if current in seen:
            continue
        seen.add(current)
        result.append(current)
        # Reverse so the first dependency is visited first.
        for dep in reversed(graph.get(current, ())):
            if dep not in seen:
                to_visit.append(dep)

    return result


def get_transitive_categories(
    graph: Mapping[str, Sequence[str]],
    practices_by_id: Mapping[str, Practice],
    practice_id: str,
) -> list[str]:
    """Sorted categories of every practice below ``practice_id``."""
    categories = {
        practices_by_id[dep].category.value
        for dep in get_all_dependencies(graph, practice_id)
        if dep in practices_by_id
    }
    return sorted(categories)


# Leveling Functions


def _breadth_first_order(graph: Mapping[str, Sequence[str]], root_id: str) -> list[str]:
    order: list[str] = [root_id]
    seen: set[str] = {root_id}
    queue: deque[str] = deque([root_id])
    while queue:
        current = queue.popleft()
        for dep in graph.get(current, ()):
            if dep not in seen:
                seen.add(dep)
                order.append(dep)
                queue.append(dep)
    return order


def compute_depth_levels(graph: Mapping[str, Sequence[str]], root_id: str) -> dict[str, int]:
    """Assign every reachable practice its shortest distance from the root.

    Returns:
        Dictionary mapping practice id to level; the root is level 0.
        Unreachable practices are absent.
    """
    levels: dict[str, int] = {root_id: 0}
    queue: deque[str] = deque([root_id])
    while queue:
        current = queue.popleft()
        for dep in graph.get(current, ()):
            if dep not in levels:
                levels[dep] = levels[current] + 1
                queue.append(dep)
    return levels


def _topological_order(graph: Mapping[str, Sequence[str]], root_id: str) -> list[str]:
    """Kahn's algorithm over the subgraph reachable from ``root_id``.

    Ties are broken by breadth-first discovery order so the result is
    deterministic for a given edge order.
    """
    discovery = _breadth_first_order(graph, root_id)
    rank = {node: i for i, node in enumerate(discovery)}

    in_degree: dict[str, int] = {node: 0 for node in discovery}
    for node in discovery:
        for dep in graph.get(node, ()):
            in_degree[dep] += 1

    ready: list[str] = [node for node in discovery if in_degree[node] == 0]
    result: list[str] = []
    while ready:
        ready.sort(key=rank.__getitem__)
        node = ready.pop(0)
        result.append(node)
        for dep in graph.get(node, ()):
            in_degree[dep] -= 1
            if in_degree[dep] == 0:
                ready.append(dep)

    if len(result) != len(discovery):
        placed = set(result)
        remaining = [node for node in discovery if node not in placed]
        raise CyclicDependencyError(
            f"Cannot level practices below '{root_id}': graph contains cycles "
            f"involving {', '.join(remaining)}"
        )
    return result


def _deepest_levels_with_parents(
    graph: Mapping[str, Sequence[str]], root_id: str
) -> tuple[dict[str, int], dict[str, str | None]]:
    levels: dict[str, int] = {root_id: 0}
    parents: dict[str, str | None] = {root_id: None}

    for node in _topological_order(graph, root_id):
        for dep in graph.get(node, ()):
            candidate = levels[node] + 1
            # Strict comparison keeps the first parent reaching the maximum.
            if candidate > levels.get(dep, -1):
                levels[dep] = candidate
                parents[dep] = node

    return levels, parents


def compute_deepest_levels(graph: Mapping[str, Sequence[str]], root_id: str) -> dict[str, int]:
    """Assign every reachable practice its longest distance from the root.

    This is the level used by the full-tree view, where a practice needed
    at several depths is shown once, at the deepest one.

    Raises:
        CyclicDependencyError: If the reachable subgraph has a cycle.
    """
    levels, _ = _deepest_levels_with_parents(graph, root_id)
    return levels


def flatten_tree(graph: Mapping[str, Sequence[str]], root_id: str) -> list[TreeLevelEntry]:
    """Project the graph below ``root_id`` onto rows, one entry per practice.

    Entries are ordered by level and, within a level, by breadth-first
    discovery order.

    Raises:
        CyclicDependencyError: If the reachable subgraph has a cycle.
    """
    levels, parents = _deepest_levels_with_parents(graph, root_id)
    discovery = _breadth_first_order(graph, root_id)
    rank = {node: i for i, node in enumerate(discovery)}

    ordered = sorted(discovery, key=lambda node: (levels[node], rank[node]))
    logger.debug("Flattened %d practices below %s", len(ordered), root_id)
    return [TreeLevelEntry(node, levels[node], parents[node]) for node in ordered]


def group_by_level(entries: Sequence[TreeLevelEntry]) -> list[list[str]]:
    """Turn a flattened tree into rows of practice ids, one row per level."""
    rows: list[list[str]] = []
    for entry in entries:
        while len(rows) <= entry.level:
            rows.append([])
        rows[entry.level].append(entry.practice_id)
    return rows
