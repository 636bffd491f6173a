"""Adoption percentages for the practice catalog.

The adoption set is owned by the caller (URL state, local storage, import
files). These functions only read it.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping, Sequence, Set
from dataclasses import dataclass


@dataclass(frozen=True)
class AdoptionCount:
    adopted_count: int
    total_count: int


def calculate_adoption_percentage(adopted: float, total: float) -> int:
    """Whole-number percentage of ``adopted`` over ``total``.

    Returns 0 when either value is not positive. Halves round up and the
    result is clamped to 0..100.
    """
    if total <= 0 or adopted <= 0:
        return 0
    percentage = math.floor(100 * adopted / total + 0.5)
    return max(0, min(100, percentage))


def calculate_adopted_dependencies(
    dependency_ids: Iterable[str] | None, adoption_set: Set[str]
) -> AdoptionCount:
    """Count how many unique dependency ids are in the adoption set."""
    if dependency_ids is None:
        return AdoptionCount(adopted_count=0, total_count=0)
    unique = list(dict.fromkeys(dependency_ids))
    adopted = sum(1 for dep in unique if dep in adoption_set)
    return AdoptionCount(adopted_count=adopted, total_count=len(unique))


def dependency_adoption_percentage(
    practice_id: str,
    graph: Mapping[str, Sequence[str]],
    adoption_set: Set[str],
    include_self: bool = False,
) -> int:
    """Adoption percentage over a practice's direct dependencies.

    With ``include_self`` the practice itself counts as one more item. A
    practice with nothing to count yields 0; callers should check the
    dependency count and hide the percentage in that case.
    """
    counts = calculate_adopted_dependencies(graph.get(practice_id, ()), adoption_set)
    adopted = counts.adopted_count
    total = counts.total_count
    if include_self:
        total += 1
        if practice_id in adoption_set:
            adopted += 1
    return calculate_adoption_percentage(adopted, total)


def catalog_adoption_percentage(adoption_set: Set[str], total_practice_count: int) -> int:
    """Share of the whole catalog that has been adopted."""
    return calculate_adoption_percentage(len(adoption_set), total_practice_count)


def filter_valid_practice_ids(
    practice_ids: Set[str] | None, valid_ids: Set[str] | None
) -> set[str]:
    """Drop adopted ids that are not part of the catalog (case-sensitive)."""
    if not practice_ids or not valid_ids:
        return set()
    return set(practice_ids) & set(valid_ids)
