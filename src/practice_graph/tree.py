"""Nested practice tree for drill-down views.

Shared dependencies appear under every parent that requires them, so the
nested tree can be larger than the catalog. Use ``graph.flatten_tree`` for
the deduplicated full-tree view.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field

from practice_graph.graph import CyclicDependencyError, get_transitive_categories
from practice_graph.models import Practice


@dataclass
class PracticeTreeNode:
    """A practice together with its nested dependencies.

    Attributes:
        practice: The validated practice.
        categories: Sorted categories of all transitive dependencies.
        dependencies: Child nodes in edge order.
    """

    practice: Practice
    categories: list[str]
    dependencies: list[PracticeTreeNode] = field(default_factory=list)

    @property
    def id(self) -> str:
        return self.practice.id

    @property
    def requirement_count(self) -> int:
        return len(self.practice.requirements)

    @property
    def benefit_count(self) -> int:
        return len(self.practice.benefits)


def build_practice_tree(
    practices: Sequence[Practice],
    graph: Mapping[str, Sequence[str]],
    root_id: str,
) -> PracticeTreeNode | None:
    """Build the nested tree below ``root_id``.

    Edges to practices missing from ``practices`` are left out.

    Returns:
        The root node, or None if ``root_id`` is not a known practice.

    Raises:
        CyclicDependencyError: If a practice is reached again on its own path.
    """
    practices_by_id = {practice.id: practice for practice in practices}
    if root_id not in practices_by_id:
        return None

    root: PracticeTreeNode | None = None
    # (practice_id, ancestors on the current path, parent node)
    to_visit: list[tuple[str, tuple[str, ...], PracticeTreeNode | None]] = [(root_id, (), None)]
    while to_visit:
        practice_id, path, parent = to_visit.pop()
        if practice_id in path:
            cycle = " -> ".join((*path[path.index(practice_id):], practice_id))
            raise CyclicDependencyError(f"Circular dependency while building tree: {cycle}")
        node = PracticeTreeNode(
            practice=practices_by_id[practice_id],
            categories=get_transitive_categories(graph, practices_by_id, practice_id),
        )
        if parent is None:
            root = node
        else:
            parent.dependencies.append(node)
        child_path = (*path, practice_id)
        children = [dep for dep in graph.get(practice_id, ()) if dep in practices_by_id]
        to_visit.extend((dep, child_path, node) for dep in reversed(children))

    return root


def count_tree_practices(node: PracticeTreeNode | None) -> int:
    """Count nodes in a nested tree, including repeated shared dependencies."""
    if node is None:
        return 0
    count = 0
    to_visit: list[PracticeTreeNode] = [node]
    while to_visit:
        current = to_visit.pop()
        count += 1
        to_visit.extend(current.dependencies)
    return count
