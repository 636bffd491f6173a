"""Drill-down navigation state for the practice graph.

A practice can be reached through several paths, so the ancestor chain is
the history of what the user actually opened, not something derived from
the graph. Every function here takes the current chain and returns a new
list; the input is never modified.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from practice_graph.graph import GraphError


class NavigationError(GraphError):
    """Raised when a navigation step does not follow a dependency edge."""


def next_ancestor_chain(
    ancestors: Sequence[str],
    current_id: str,
    selected_id: str,
    graph: Mapping[str, Sequence[str]],
) -> list[str]:
    """Compute the ancestor chain after drilling into a dependency.

    Args:
        ancestors: Chain from the root to the parent of ``current_id``.
        current_id: Practice currently in focus.
        selected_id: Direct dependency of ``current_id`` chosen by the user.
        graph: Adjacency map of the catalog.

    Returns:
        ``ancestors + [current_id]``, the chain above ``selected_id``.

    Raises:
        NavigationError: If ``selected_id`` is not a direct dependency of
            ``current_id``.
    """
    if selected_id not in graph.get(current_id, ()):
        raise NavigationError(
            f"'{selected_id}' is not a direct dependency of '{current_id}'"
        )
    return [*ancestors, current_id]


def expand_practice(path: Sequence[str], practice_id: str) -> list[str]:
    """Open ``practice_id``, or collapse it if it is already the current practice.

    ``path`` runs from the root to the current practice inclusive.
    """
    if path and path[-1] == practice_id:
        return navigate_back(path)
    return [*path, practice_id]


def navigate_back(path: Sequence[str]) -> list[str]:
    """Drop the current practice, never going above the root."""
    if len(path) <= 1:
        return list(path)
    return list(path[:-1])


def navigate_to_ancestor(path: Sequence[str], index: int) -> list[str]:
    """Jump back to the ancestor at ``index``; out-of-range indexes are ignored."""
    if index < 0 or index >= len(path) - 1:
        return list(path)
    return list(path[: index + 1])


def is_practice_expanded(path: Sequence[str], practice_id: str) -> bool:
    """True when ``practice_id`` is the current, non-root practice."""
    return len(path) > 1 and path[-1] == practice_id
